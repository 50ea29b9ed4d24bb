from typing import Annotated

from fastapi import Depends

from triviet.mindmaps.service import MindMapService


def get_mindmap_service() -> MindMapService:
    return MindMapService()


MindMapServiceDep = Annotated[MindMapService, Depends(get_mindmap_service)]
