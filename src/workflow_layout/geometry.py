"""
Geometry helpers around layout results.

- node_dimensions: size a step node from its label
- bounding_box: extent of nodes (and optionally edge routes)
- translate / center_in_viewport: move a whole layout
"""

from __future__ import annotations

from dataclasses import replace

from .types import LayoutResult, Point
from .validation import validate_positive

BASE_NODE_WIDTH = 250.0
MAX_NODE_WIDTH = 400.0
BASE_NODE_HEIGHT = 100.0
DESCRIPTION_NODE_HEIGHT = 120.0
CHAR_WIDTH = 8.0


def node_dimensions(label: str, has_description: bool = False) -> tuple[float, float]:
    """
    Estimate the (width, height) of a step node from its content.

    Width grows with the label length between 250 and 400; nodes showing a
    description are taller.
    """
    width = max(BASE_NODE_WIDTH, min(len(label) * CHAR_WIDTH, MAX_NODE_WIDTH))
    height = DESCRIPTION_NODE_HEIGHT if has_description else BASE_NODE_HEIGHT
    return width, height


def bounding_box(result: LayoutResult, include_edges: bool = True) -> tuple[float, float, float, float]:
    """
    Compute the bounding box of a layout.

    Args:
        result: Layout to measure
        include_edges: Also include edge waypoints (feedback detours may
            extend beyond the nodes)

    Returns:
        (min_x, min_y, max_x, max_y), or all zeros for an empty layout.
    """
    xs: list[float] = []
    ys: list[float] = []
    for node in result.nodes:
        xs.extend((node.x, node.right))
        ys.extend((node.y, node.bottom))
    if include_edges:
        for edge in result.edges:
            for point in edge.waypoints:
                xs.append(point.x)
                ys.append(point.y)
    if not xs:
        return 0.0, 0.0, 0.0, 0.0
    return min(xs), min(ys), max(xs), max(ys)


def translate(result: LayoutResult, dx: float, dy: float) -> LayoutResult:
    """Return a copy of the layout moved by (dx, dy)."""
    nodes = tuple(replace(node, x=node.x + dx, y=node.y + dy) for node in result.nodes)
    edges = tuple(
        replace(edge, waypoints=tuple(Point(p.x + dx, p.y + dy) for p in edge.waypoints))
        for edge in result.edges
    )
    return replace(result, nodes=nodes, edges=edges)


def center_in_viewport(result: LayoutResult, viewport_width: float, viewport_height: float) -> LayoutResult:
    """
    Center the layout within a viewport.

    Args:
        result: Layout to move
        viewport_width: Viewport width
        viewport_height: Viewport height

    Returns:
        A new, translated LayoutResult (the input is unchanged).

    Raises:
        InvalidOptionsError: If a viewport dimension is not positive
    """
    viewport_width = validate_positive("viewport_width", viewport_width)
    viewport_height = validate_positive("viewport_height", viewport_height)
    if not result.nodes:
        return result

    min_x, min_y, max_x, max_y = bounding_box(result, include_edges=False)
    dx = (viewport_width - (max_x - min_x)) / 2 - min_x
    dy = (viewport_height - (max_y - min_y)) / 2 - min_y
    return translate(result, dx, dy)


__all__ = ["node_dimensions", "bounding_box", "translate", "center_in_viewport"]
