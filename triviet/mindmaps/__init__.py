from triviet.mindmaps.layout import TreeLayoutEngine, connector_path
from triviet.mindmaps.models import LayoutConstants, LayoutEdge, LayoutNode, LayoutResult, Point, TreeNode
from triviet.mindmaps.renderer import SvgRenderer


__all__ = [
    "LayoutConstants",
    "LayoutEdge",
    "LayoutNode",
    "LayoutResult",
    "Point",
    "SvgRenderer",
    "TreeLayoutEngine",
    "TreeNode",
    "connector_path",
]
