import logging
from functools import lru_cache

from triviet.ai.client import LLMClient
from triviet.ai.prompts import build_mindmap_summary_prompt
from triviet.config import get_settings
from triviet.mindmaps.layout import TreeLayoutEngine
from triviet.mindmaps.models import LayoutConstants
from triviet.mindmaps.renderer import SvgRenderer
from triviet.mindmaps.schemas import LayoutResponse, MindMapNodeSchema, SummaryResult


logger = logging.getLogger(__name__)


@lru_cache
def get_layout_constants() -> LayoutConstants:
    """Layout constants from settings; fixed for the life of the process."""
    settings = get_settings()
    return LayoutConstants(
        node_width=settings.MINDMAP_NODE_WIDTH,
        node_height=settings.MINDMAP_NODE_HEIGHT,
        horizontal_separation=settings.MINDMAP_HORIZONTAL_SEPARATION,
        vertical_separation=settings.MINDMAP_VERTICAL_SEPARATION,
        canvas_inset=settings.MINDMAP_CANVAS_INSET,
    )


class MindMapService:
    """Service for summarizing content into mind maps and laying them out."""

    def __init__(self, constants: LayoutConstants | None = None, llm_client: LLMClient | None = None) -> None:
        constants = constants or get_layout_constants()
        self._engine = TreeLayoutEngine(constants)
        self._renderer = SvgRenderer(constants)
        self._llm_client = llm_client

    @property
    def llm_client(self) -> LLMClient:
        if self._llm_client is None:
            self._llm_client = LLMClient()
        return self._llm_client

    def layout(self, mind_map: MindMapNodeSchema) -> LayoutResponse:
        result = self._engine.compute_layout(mind_map.to_tree())
        return LayoutResponse.from_result(result)

    def render_svg(self, mind_map: MindMapNodeSchema) -> str:
        result = self._engine.compute_layout(mind_map.to_tree())
        return self._renderer.render(result)

    async def summarize(self, text: str, language: str, source_name: str | None = None) -> SummaryResult:
        """Summarize ``text`` into a mind map and flashcards in ``language``."""
        logger.info("Summarizing %d characters of '%s' into a mind map (%s)", len(text), source_name, language)
        prompt = build_mindmap_summary_prompt(text, language, source_name)
        result = await self.llm_client.get_completion(
            messages=[{"role": "user", "content": prompt}],
            response_model=SummaryResult,
        )
        logger.info("Summary ready: '%s' with %d flashcards", result.mind_map.title, len(result.flashcards))
        return result
