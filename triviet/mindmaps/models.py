"""Domain types for mind map trees and their computed layouts."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field


@dataclass(frozen=True, eq=False)
class TreeNode:
    """A labeled mind map node with ordered children.

    Nodes compare by identity: two nodes with the same title are still two
    distinct positions in the tree.
    """

    title: str
    children: tuple[TreeNode, ...] = field(default_factory=tuple)

    @classmethod
    def of(cls, title: str, children: Iterable[TreeNode] | None = None) -> TreeNode:
        """Build a node, treating missing and empty children the same way."""
        return cls(title=title, children=tuple(children or ()))

    @property
    def is_leaf(self) -> bool:
        return not self.children

    def iter_preorder(self) -> Iterator[TreeNode]:
        stack: list[TreeNode] = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class LayoutNode:
    """A tree node paired with its position; ``y`` is the vertical center."""

    node: TreeNode
    x: float
    y: float
    level: int


@dataclass(frozen=True)
class LayoutEdge:
    """Connector from a parent's right edge midpoint to a child's left edge midpoint."""

    source: Point
    target: Point


@dataclass(frozen=True)
class LayoutResult:
    nodes: tuple[LayoutNode, ...]
    edges: tuple[LayoutEdge, ...]
    width: float
    height: float


@dataclass(frozen=True)
class LayoutConstants:
    """Fixed pixel sizes used by a layout engine and its renderer."""

    node_width: float = 180
    node_height: float = 80
    horizontal_separation: float = 220
    vertical_separation: float = 20
    canvas_inset: float = 20

    @property
    def leaf_band(self) -> float:
        """Vertical band reserved for a single leaf."""
        return self.node_height + self.vertical_separation

    @property
    def margin(self) -> float:
        return 2 * self.canvas_inset
