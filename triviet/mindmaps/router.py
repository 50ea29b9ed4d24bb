from fastapi import APIRouter, Response

from triviet.mindmaps.dependencies import MindMapServiceDep
from triviet.mindmaps.schemas import LayoutResponse, MindMapNodeSchema, SummarizeRequest, SummaryResult


router = APIRouter(prefix="/api/v1/mindmaps", tags=["mindmaps"])


@router.post(
    "/layout",
    summary="Lay out a mind map",
    description="Compute node positions and connector paths for a mind map tree",
)  # type: ignore[misc]
async def layout_mindmap(
    data: MindMapNodeSchema,
    service: MindMapServiceDep,
) -> LayoutResponse:
    """Lay out a mind map tree."""
    return service.layout(data)


@router.post(
    "/render",
    summary="Render a mind map as SVG",
    response_class=Response,
    responses={200: {"content": {"image/svg+xml": {}}}},
)  # type: ignore[misc]
async def render_mindmap(
    data: MindMapNodeSchema,
    service: MindMapServiceDep,
) -> Response:
    """Render a mind map tree to an SVG document."""
    return Response(content=service.render_svg(data), media_type="image/svg+xml")


@router.post(
    "/summarize",
    summary="Summarize content into a mind map",
    responses={503: {"description": "AI provider unavailable"}},
)  # type: ignore[misc]
async def summarize_content(
    data: SummarizeRequest,
    service: MindMapServiceDep,
) -> SummaryResult:
    """Generate a mind map and flashcards from text content."""
    return await service.summarize(data.text, data.language, data.source_name)
