"""Two-pass hierarchical layout for mind map trees.

Depth maps to a column (``x = level * horizontal_separation``). Every leaf
reserves one band of ``node_height + vertical_separation``; an internal node
reserves exactly the sum of its children's bands. Children are stacked top to
bottom in declared order, and a parent sits halfway between its first and
last child. Only the extremes are used, not a weighted centroid, so a parent
of unevenly sized subtrees is centered on the span of its children's centers.
"""

from __future__ import annotations

import logging

from triviet.exceptions import InvalidTreeError
from triviet.mindmaps.models import LayoutConstants, LayoutEdge, LayoutNode, LayoutResult, Point, TreeNode


logger = logging.getLogger(__name__)


class TreeLayoutEngine:
    """Assign coordinates to every node of a tree and build its connectors.

    The engine holds only its constants; each ``compute_layout`` call is a
    pure function of the input tree.
    """

    def __init__(self, constants: LayoutConstants | None = None) -> None:
        self._constants = constants or LayoutConstants()

    @property
    def constants(self) -> LayoutConstants:
        return self._constants

    def compute_layout(self, root: TreeNode) -> LayoutResult:
        """Lay out ``root`` and all of its descendants.

        Precondition: ``root`` is a finite tree in which no node appears twice.
        A repeated node (a cycle or a child shared between parents) raises
        ``InvalidTreeError`` instead of being laid out.
        """
        if root is None:
            msg = "Cannot lay out a missing tree"
            raise InvalidTreeError(msg)
        if not isinstance(root, TreeNode):
            msg = f"Expected a TreeNode root, got {type(root).__name__}"
            raise InvalidTreeError(msg)

        heights = self._subtree_heights(root)
        preorder, parents, levels, centers = self._assign_positions(root, heights)

        c = self._constants
        nodes = tuple(
            LayoutNode(
                node=node,
                x=levels[id(node)] * c.horizontal_separation,
                y=centers[id(node)],
                level=levels[id(node)],
            )
            for node in preorder
        )
        x_by_id = {id(item.node): item.x for item in nodes}

        edges = tuple(
            LayoutEdge(
                source=Point(x_by_id[id(parent)] + c.node_width, centers[id(parent)]),
                target=Point(x_by_id[id(child)], centers[id(child)]),
            )
            for child, parent in ((node, parents[id(node)]) for node in preorder[1:])
        )

        width = max(item.x for item in nodes) + c.node_width + c.margin
        height = heights[id(root)] + c.margin
        logger.debug("Laid out %d nodes and %d edges on a %sx%s canvas", len(nodes), len(edges), width, height)
        return LayoutResult(nodes=nodes, edges=edges, width=width, height=height)

    def _subtree_heights(self, root: TreeNode) -> dict[int, float]:
        """Post-order pass: vertical band reserved by each subtree, keyed by node identity."""
        heights: dict[int, float] = {}
        seen: set[int] = set()
        stack: list[tuple[TreeNode, bool]] = [(root, False)]

        while stack:
            node, expanded = stack.pop()
            if expanded:
                if node.is_leaf:
                    heights[id(node)] = self._constants.leaf_band
                else:
                    heights[id(node)] = sum(heights[id(child)] for child in node.children)
                continue

            if id(node) in seen:
                msg = f"Node {node.title!r} appears more than once; input is not a tree"
                raise InvalidTreeError(msg)
            seen.add(id(node))
            stack.append((node, True))
            stack.extend((child, False) for child in reversed(node.children))

        return heights

    def _assign_positions(
        self,
        root: TreeNode,
        heights: dict[int, float],
    ) -> tuple[list[TreeNode], dict[int, TreeNode], dict[int, int], dict[int, float]]:
        """Pre-order pass handing each child its y offset, then centers resolved bottom-up."""
        preorder: list[TreeNode] = []
        parents: dict[int, TreeNode] = {}
        levels: dict[int, int] = {}
        offsets: dict[int, float] = {}

        stack: list[tuple[TreeNode, int, float]] = [(root, 0, 0.0)]
        while stack:
            node, level, y_offset = stack.pop()
            preorder.append(node)
            levels[id(node)] = level
            offsets[id(node)] = y_offset

            child_offset = y_offset
            placed: list[tuple[TreeNode, int, float]] = []
            for child in node.children:
                parents[id(child)] = node
                placed.append((child, level + 1, child_offset))
                child_offset += heights[id(child)]
            stack.extend(reversed(placed))

        # Reverse pre-order visits every child before its parent.
        centers: dict[int, float] = {}
        for node in reversed(preorder):
            if node.is_leaf:
                centers[id(node)] = offsets[id(node)] + heights[id(node)] / 2
            else:
                first, last = node.children[0], node.children[-1]
                centers[id(node)] = (centers[id(first)] + centers[id(last)]) / 2

        return preorder, parents, levels, centers


def connector_path(edge: LayoutEdge) -> str:
    """SVG cubic path that leaves the source and enters the target horizontally."""
    source, target = edge.source, edge.target
    mid_x = source.x + (target.x - source.x) * 0.5
    points = [
        (source.x, source.y),
        (mid_x, source.y),
        (mid_x, target.y),
        (target.x, target.y),
    ]
    start, *controls = (f"{format_coordinate(x)},{format_coordinate(y)}" for x, y in points)
    return f"M {start} C {' '.join(controls)}"


def format_coordinate(value: float) -> str:
    # 200.0 -> "200", 150.5 -> "150.5"
    value = float(value)
    return str(int(value)) if value.is_integer() else repr(value)
