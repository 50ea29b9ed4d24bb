from pydantic import BaseModel as PydanticBaseModel, Field

from triviet.mindmaps.layout import connector_path
from triviet.mindmaps.models import LayoutResult, TreeNode


class MindMapNodeSchema(PydanticBaseModel):
    """A mind map node as produced by the AI: a title and optional nested children."""

    title: str = Field(..., min_length=1, description="Node label; may contain $...$ or $$...$$ math")
    children: list["MindMapNodeSchema"] | None = Field(None, description="Sub-nodes, in display order")

    def to_tree(self) -> TreeNode:
        """Convert to an immutable ``TreeNode``; missing and empty children both become a leaf."""
        built: list[TreeNode] = []
        stack: list[tuple[MindMapNodeSchema, bool]] = [(self, False)]
        while stack:
            schema, expanded = stack.pop()
            children = schema.children or []
            if expanded:
                # Each child left exactly one finished node on top of `built`, in order
                split = len(built) - len(children)
                node = TreeNode.of(schema.title, built[split:])
                del built[split:]
                built.append(node)
                continue
            stack.append((schema, True))
            stack.extend((child, False) for child in reversed(children))
        return built[0]


class Flashcard(PydanticBaseModel):
    question: str
    answer: str


class SummaryResult(PydanticBaseModel):
    """Structured output of the summarizer: a mind map plus study flashcards."""

    model_config = {"populate_by_name": True}

    mind_map: MindMapNodeSchema = Field(..., alias="mindMap")
    flashcards: list[Flashcard] = Field(default_factory=list)


class SummarizeRequest(PydanticBaseModel):
    model_config = {
        "populate_by_name": True,
        "json_schema_extra": {
            "example": {
                "text": "Phương trình bậc hai $ax^2 + bx + c = 0$ có nghiệm ...",
                "language": "Tiếng Việt",
                "sourceName": "bai_giang_toan_10.txt",
            },
        },
    }

    text: str = Field(..., min_length=1, max_length=200_000)
    language: str = Field("Tiếng Việt", min_length=1, max_length=50)
    source_name: str | None = Field(None, max_length=255, alias="sourceName")


class PointSchema(PydanticBaseModel):
    x: float
    y: float


class LayoutNodeSchema(PydanticBaseModel):
    title: str
    x: float
    y: float
    level: int


class LayoutEdgeSchema(PydanticBaseModel):
    source: PointSchema
    target: PointSchema
    path: str = Field(..., description="SVG cubic path data for the connector")


class LayoutResponse(PydanticBaseModel):
    """Serialized layout: nodes in pre-order, one edge per parent/child pair."""

    nodes: list[LayoutNodeSchema]
    edges: list[LayoutEdgeSchema]
    width: float
    height: float

    @classmethod
    def from_result(cls, result: LayoutResult) -> "LayoutResponse":
        return cls(
            nodes=[LayoutNodeSchema(title=n.node.title, x=n.x, y=n.y, level=n.level) for n in result.nodes],
            edges=[
                LayoutEdgeSchema(
                    source=PointSchema(x=e.source.x, y=e.source.y),
                    target=PointSchema(x=e.target.x, y=e.target.y),
                    path=connector_path(e),
                )
                for e in result.edges
            ],
            width=result.width,
            height=result.height,
        )
