"""SVG rendering of computed mind map layouts."""

from __future__ import annotations

import textwrap
from collections.abc import Sequence
from html import escape

from triviet.mindmaps.layout import connector_path, format_coordinate as fmt
from triviet.mindmaps.models import LayoutConstants, LayoutResult


# (gradient start, gradient end) per depth level, cycled for deeper trees
DEFAULT_PALETTE: tuple[tuple[str, str], ...] = (
    ("#4f46e5", "#9333ea"),  # indigo -> purple
    ("#0284c7", "#0891b2"),  # sky -> cyan
    ("#10b981", "#84cc16"),  # emerald -> lime
    ("#f59e0b", "#f97316"),  # amber -> orange
)

_LINK_GRADIENT = ("#818cf8", "#a855f7")

# Label metrics in pixels; character width is an average for sans-serif bold
LABEL_FONT_SIZE = 14
LABEL_CHAR_WIDTH = 0.6
LABEL_LINE_HEIGHT = 1.2
LABEL_PADDING = 10
ELLIPSIS = "\u2026"


class SvgRenderer:
    """Paint a ``LayoutResult`` as a standalone SVG document.

    Boxes are drawn at ``(x, y - node_height / 2)`` with the layout's fixed
    node size, inside a group shifted by the canvas inset. Titles are wrapped
    into ``<tspan>`` lines that fit the box, truncated with an ellipsis when
    too long, and kept whole in a ``<title>`` tooltip. They are written
    as plain text, so inline math such as ``$a^2$`` is left for a client-side
    math renderer to typeset.
    """

    def __init__(
        self,
        constants: LayoutConstants | None = None,
        palette: Sequence[tuple[str, str]] = DEFAULT_PALETTE,
    ) -> None:
        if not palette:
            msg = "Palette must contain at least one color pair"
            raise ValueError(msg)
        self._constants = constants or LayoutConstants()
        self._palette = tuple(palette)

    def level_colors(self, level: int) -> tuple[str, str]:
        return self._palette[level % len(self._palette)]

    def render(self, layout: LayoutResult) -> str:
        c = self._constants
        parts: list[str] = [
            f'<svg xmlns="http://www.w3.org/2000/svg" width="{fmt(layout.width)}" '
            f'height="{fmt(layout.height)}" font-family="sans-serif">',
            "<defs>",
            _gradient("line-gradient", *_LINK_GRADIENT),
        ]
        parts.extend(_gradient(f"level-{index}", start, end) for index, (start, end) in enumerate(self._palette))
        parts.append("</defs>")
        parts.append(f'<g transform="translate({fmt(c.canvas_inset)}, {fmt(c.canvas_inset)})">')

        parts.append('<g class="links">')
        parts.extend(
            f'<path class="mind-map-link" d="{connector_path(edge)}" stroke="url(#line-gradient)" '
            'stroke-width="2.5" fill="none"/>'
            for edge in layout.edges
        )
        parts.append("</g>")

        max_chars = max(1, int((c.node_width - 2 * LABEL_PADDING) / (LABEL_CHAR_WIDTH * LABEL_FONT_SIZE)))
        max_lines = max(1, int((c.node_height - 2 * LABEL_PADDING) / (LABEL_LINE_HEIGHT * LABEL_FONT_SIZE)))
        line_step = round(LABEL_LINE_HEIGHT * LABEL_FONT_SIZE, 2)

        parts.append('<g class="nodes">')
        for item in layout.nodes:
            top = item.y - c.node_height / 2
            fill = f"url(#level-{item.level % len(self._palette)})"
            center_x = fmt(item.x + c.node_width / 2)
            lines = wrap_label(item.node.title, max_chars, max_lines)
            first_y = item.y - line_step * (len(lines) - 1) / 2
            tspans = "".join(
                f'<tspan x="{center_x}" y="{fmt(round(first_y + index * line_step, 2))}">{escape(line)}</tspan>'
                for index, line in enumerate(lines)
            )
            parts.append(
                f'<g class="mind-map-node" data-level="{item.level}">'
                f"<title>{escape(item.node.title)}</title>"
                f'<rect x="{fmt(item.x)}" y="{fmt(top)}" width="{fmt(c.node_width)}" '
                f'height="{fmt(c.node_height)}" rx="12" fill="{fill}"/>'
                f'<text text-anchor="middle" dominant-baseline="middle" fill="#ffffff" '
                f'font-size="{LABEL_FONT_SIZE}" font-weight="bold">{tspans}</text>'
                "</g>"
            )
        parts.append("</g>")

        parts.append("</g>")
        parts.append("</svg>")
        return "\n".join(parts)


def wrap_label(title: str, max_chars: int, max_lines: int) -> list[str]:
    """Split a title into at most ``max_lines`` lines of about ``max_chars`` characters.

    Words longer than a line are broken. When the title needs more lines
    than fit, the last kept line ends with an ellipsis.
    """
    lines = textwrap.wrap(title, width=max_chars) or [title]
    if len(lines) <= max_lines:
        return lines
    kept = lines[:max_lines]
    kept[-1] = kept[-1][: max(max_chars - 1, 0)].rstrip() + ELLIPSIS
    return kept


def _gradient(gradient_id: str, start: str, end: str) -> str:
    return (
        f'<linearGradient id="{gradient_id}" x1="0%" y1="0%" x2="100%" y2="0%">'
        f'<stop offset="0%" stop-color="{escape(start)}"/>'
        f'<stop offset="100%" stop-color="{escape(end)}"/>'
        "</linearGradient>"
    )
