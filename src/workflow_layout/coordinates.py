"""
Coordinate assignment.

Converts (rank, in-layer order) into concrete positions. Layout happens in a
direction-neutral frame with a *rank axis* (layer depth, growing with rank)
and a *cross axis* (position within a layer); ``Frame`` maps that frame to
screen coordinates for the chosen Direction:

- TB: rank axis is y, cross axis is x
- BT: rank axis is y, inverted
- LR: rank axis is x, cross axis is y
- RL: rank axis is x, inverted
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

from .graph import InternalGraph
from .layering import Layering
from .ordering import Ordering
from .types import Direction, LayoutOptions, Point, PositionedNode


@dataclass(frozen=True)
class Frame:
    """
    Mapping between the rank/cross frame and screen coordinates.

    Attributes:
        direction: Layout direction
        span: Total extent along the rank axis (mirror line for BT/RL)
    """

    direction: Direction
    span: float = 0.0

    def extents(self, width: float, height: float) -> tuple[float, float]:
        """Return (cross extent, rank extent) of a width x height box."""
        if self.direction.is_vertical:
            return width, height
        return height, width

    def to_screen(self, cross: float, rank: float) -> Point:
        """Map a frame point to a screen point."""
        if self.direction.is_reversed:
            rank = self.span - rank
        if self.direction.is_vertical:
            return Point(cross, rank)
        return Point(rank, cross)

    def box_to_screen(
        self, cross: float, rank: float, cross_ext: float, rank_ext: float
    ) -> tuple[float, float]:
        """Top-left screen corner of a frame box given by its near corner."""
        if self.direction.is_reversed:
            rank = self.span - rank - rank_ext
        if self.direction.is_vertical:
            return cross, rank
        return rank, cross

    def box_from_screen(self, node: PositionedNode) -> tuple[float, float, float, float]:
        """Return (cross start, rank start, cross extent, rank extent) of a node."""
        cross_ext, rank_ext = self.extents(node.width, node.height)
        if self.direction.is_vertical:
            cross, rank = node.x, node.y
        else:
            cross, rank = node.y, node.x
        if self.direction.is_reversed:
            rank = self.span - rank - rank_ext
        return cross, rank, cross_ext, rank_ext


@dataclass
class Placement:
    """Positioned nodes (indexed by node index) and the frame used."""

    nodes: list[PositionedNode] = field(default_factory=list)
    frame: Frame = field(default_factory=lambda: Frame(Direction.TB))
    width: float = 0.0
    height: float = 0.0


def feedback_lanes(graph: InternalGraph, layering: Layering) -> list[int]:
    """Number of feedback edge lanes (self-loops excluded) per ordering block."""
    lanes = [0] * (len(layering.components) + (1 if layering.isolated else 0))
    for edge_index in sorted(layering.feedback_edges):
        edge = graph.edges[edge_index]
        if not edge.is_self_loop:
            lanes[layering.component_of[edge.source]] += 1
    return lanes


def assign_coordinates(
    graph: InternalGraph,
    layering: Layering,
    ordering: Ordering,
    options: LayoutOptions,
    direction: Direction,
) -> Placement:
    """
    Assign positions to all nodes.

    Rank bands are as deep as their deepest node and separated by
    ``rank_spacing``; nodes are centred within their band. Within a layer,
    nodes are packed with ``node_spacing`` and the layer is centred on the
    widest layer of its component. Components are stacked along the cross
    axis, separated by ``component_spacing`` plus one ``back_edge_spacing``
    lane per feedback edge.

    Args:
        graph: Graph produced by build_graph()
        layering: Result of assign_layers()
        ordering: Result of order_layers()
        options: Layout options (spacing and default sizes)
        direction: Resolved layout direction

    Returns:
        Placement with top-left anchored PositionedNodes.
    """
    n = len(graph)
    if n == 0:
        return Placement(frame=Frame(direction))

    widths = np.array([node.width or options.node_width for node in graph.nodes], dtype=float)
    heights = np.array([node.height or options.node_height for node in graph.nodes], dtype=float)
    if direction.is_vertical:
        cross_ext, rank_ext = widths, heights
    else:
        cross_ext, rank_ext = heights, widths

    # Rank axis: band depth is the deepest node of each rank
    ranks = np.array(layering.ranks, dtype=int)
    band = np.zeros(layering.layer_count, dtype=float)
    np.maximum.at(band, ranks, rank_ext)
    band_start = np.concatenate(([0.0], np.cumsum(band + options.rank_spacing)[:-1]))
    span = float(band_start[-1] + band[-1])
    rank_pos = band_start[ranks] + (band[ranks] - rank_ext) / 2

    # Cross axis: blocks side by side, layers centred within their block
    lanes = feedback_lanes(graph, layering)
    cross_pos = np.zeros(n, dtype=float)
    block_start = 0.0
    cross_end = 0.0
    for bi, block in enumerate(ordering.blocks):
        layer_widths = [
            float(cross_ext[layer].sum()) + options.node_spacing * (len(layer) - 1)
            for layer in block
        ]
        block_width = max(layer_widths)
        for layer, layer_width in zip(block, layer_widths):
            ext = cross_ext[layer]
            start = block_start + (block_width - layer_width) / 2
            offsets = np.concatenate(([0.0], np.cumsum(ext + options.node_spacing)[:-1]))
            cross_pos[layer] = start + offsets
        cross_end = block_start + block_width + lanes[bi] * options.back_edge_spacing
        block_start = cross_end + options.component_spacing

    frame = Frame(direction, span)
    positioned: list[PositionedNode] = []
    for i, node in enumerate(graph.nodes):
        x, y = frame.box_to_screen(
            float(cross_pos[i]), float(rank_pos[i]), float(cross_ext[i]), float(rank_ext[i])
        )
        positioned.append(
            PositionedNode(
                id=node.id,
                x=x,
                y=y,
                width=float(widths[i]),
                height=float(heights[i]),
                rank=layering.ranks[i],
                order=ordering.position[i],
                kind=node.kind,
            )
        )

    if direction.is_vertical:
        width, height = cross_end, span
    else:
        width, height = span, cross_end
    return Placement(nodes=positioned, frame=frame, width=width, height=height)


__all__ = ["Frame", "Placement", "assign_coordinates", "feedback_lanes"]
