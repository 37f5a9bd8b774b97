"""
Edge routing for layered workflow layouts.

Provides a polyline per edge:
- Forward edges leave the rank-facing side of the source and enter the
  opposite side of the target, straight when aligned, otherwise with an
  orthogonal elbow in the gap below the source's rank band; edges spanning
  several ranks step through a node-free column of every rank in between
- Feedback edges detour through the rank gaps to a dedicated lane beyond
  their component, one lane per edge
- Self-loops form a small rectangle on the side of the node
- Parallel edges are offset laterally around the node centre

Routing is computed in the rank/cross frame of ``coordinates.Frame`` and
mapped back to screen coordinates, so all four directions share one path.
"""

from __future__ import annotations

from typing import Sequence

from .coordinates import Frame
from .graph import GraphEdge, InternalGraph
from .layering import Layering
from .types import Direction, LayoutOptions, PositionedEdge, PositionedNode

# Feedback edges attach at this fraction of the node's cross extent, towards
# their lane, so they stay apart from forward edges on the same side.
FEEDBACK_ANCHOR = 0.75


class _Bands:
    """Rank band boundaries measured from positioned boxes."""

    def __init__(
        self,
        boxes: Sequence[tuple[float, float, float, float]],
        ranks: Sequence[int],
        rank_spacing: float,
    ) -> None:
        depth = max(ranks) + 1 if ranks else 0
        self.start = [float("inf")] * depth
        self.end = [float("-inf")] * depth
        self.occupied: list[list[tuple[float, float]]] = [[] for _ in range(depth)]
        for (c0, p0, ce, pe), rank in zip(boxes, ranks):
            self.start[rank] = min(self.start[rank], p0)
            self.end[rank] = max(self.end[rank], p0 + pe)
            self.occupied[rank].append((c0, c0 + ce))
        for spans in self.occupied:
            spans.sort()
        self.rank_spacing = rank_spacing

    def gap_after(self, rank: int) -> float:
        """Middle of the gap following a rank band."""
        if rank + 1 < len(self.start):
            return (self.end[rank] + self.start[rank + 1]) / 2
        return self.end[rank] + self.rank_spacing / 2

    def gap_before(self, rank: int) -> float:
        """Middle of the gap preceding a rank band."""
        if rank > 0:
            return (self.end[rank - 1] + self.start[rank]) / 2
        return self.start[rank] - self.rank_spacing / 2

    def free_column(self, rank: int, preferred: float, clearance: float, shift: float = 0.0) -> float:
        """
        Cross position closest to ``preferred`` that crosses no node of a rank.

        Candidates are the middles of the gaps between neighbouring nodes and
        ``clearance`` beyond either end of the layer, moved by ``shift``
        (limited to half of the room around the candidate).
        """
        spans = self.occupied[rank]
        if not any(c0 < preferred < c1 for c0, c1 in spans):
            return preferred
        candidates = [(spans[0][0] - clearance, clearance), (spans[-1][1] + clearance, clearance)]
        candidates.extend(((a1 + b0) / 2, (b0 - a1) / 2) for (_, a1), (b0, _) in zip(spans, spans[1:]))
        columns = [c + _clamp(shift, room / 2) for c, room in candidates]
        return min(columns, key=lambda c: (abs(c - preferred), c))


def parallel_offset(edge: GraphEdge, spacing: float) -> float:
    """Lateral offset of an edge among its parallel siblings, symmetric around 0."""
    return (edge.parallel_index - (edge.parallel_count - 1) / 2) * spacing


def _clamp(value: float, limit: float) -> float:
    return max(-limit, min(limit, value))


def route_edges(
    graph: InternalGraph,
    layering: Layering,
    nodes: Sequence[PositionedNode],
    direction: Direction,
    options: LayoutOptions,
) -> list[PositionedEdge]:
    """
    Route all edges of a positioned graph.

    Args:
        graph: Graph produced by build_graph()
        layering: Result of assign_layers() (ranks and feedback edges)
        nodes: Positioned nodes, indexed by node index
        direction: Layout direction used for the positions
        options: Layout options (spacing values)

    Returns:
        Routed edges in input order.
    """
    if not graph.edges:
        return []

    if direction.is_vertical:
        span = max(node.bottom for node in nodes)
    else:
        span = max(node.right for node in nodes)
    frame = Frame(direction, span)

    boxes = [frame.box_from_screen(node) for node in nodes]
    bands = _Bands(boxes, layering.ranks, options.rank_spacing)

    block_end: dict[int, float] = {}
    for i, (c0, _, ce, _) in enumerate(boxes):
        block = layering.component_of[i]
        block_end[block] = max(block_end.get(block, float("-inf")), c0 + ce)

    # One lane per non-loop feedback edge, allocated in edge order per component
    lane_of: dict[int, float] = {}
    lane_count: dict[int, int] = {}
    for edge_index in sorted(layering.feedback_edges):
        edge = graph.edges[edge_index]
        if edge.is_self_loop:
            continue
        block = layering.component_of[edge.source]
        lane_count[block] = lane_count.get(block, 0) + 1
        lane_of[edge_index] = block_end[block] + lane_count[block] * options.back_edge_spacing

    routed: list[PositionedEdge] = []
    for edge in graph.edges:
        if edge.is_self_loop:
            points = _route_self_loop(edge, boxes[edge.source], options)
        elif layering.is_feedback(edge.index):
            points = _route_feedback(edge, boxes, layering, bands, lane_of[edge.index], options)
        else:
            points = _route_forward(edge, boxes, layering, bands, options)

        routed.append(
            PositionedEdge(
                id=edge.id,
                source=graph.node_id(edge.source),
                target=graph.node_id(edge.target),
                waypoints=tuple(frame.to_screen(c, p) for c, p in points),
                label=edge.label,
                feedback=layering.is_feedback(edge.index),
                parallel_index=edge.parallel_index,
            )
        )

    return routed


def _route_forward(
    edge: GraphEdge,
    boxes: Sequence[tuple[float, float, float, float]],
    layering: Layering,
    bands: _Bands,
    options: LayoutOptions,
) -> list[tuple[float, float]]:
    sc0, sp0, sce, spe = boxes[edge.source]
    tc0, tp0, tce, _ = boxes[edge.target]
    offset = parallel_offset(edge, options.parallel_edge_spacing)

    start_c = sc0 + sce / 2 + _clamp(offset, sce / 2)
    end_c = tc0 + tce / 2 + _clamp(offset, tce / 2)
    lift = _clamp(offset, options.rank_spacing / 4)
    clearance = options.node_spacing / 2
    shift = _clamp(offset, clearance / 2)

    # Hop sideways in every rank gap; ranks in between are crossed through a
    # column free of nodes.
    source_rank = layering.ranks[edge.source]
    target_rank = layering.ranks[edge.target]
    points = [(start_c, sp0 + spe)]
    column = start_c
    for rank in range(source_rank, target_rank):
        gap = bands.gap_after(rank) + lift
        points.append((column, gap))
        if rank + 1 < target_rank:
            column = bands.free_column(rank + 1, column, clearance, shift)
        else:
            column = end_c
        points.append((column, gap))
    points.append((end_c, tp0))
    return _simplify(points)


def _simplify(points: list[tuple[float, float]]) -> list[tuple[float, float]]:
    """Drop repeated points and interior points of straight runs."""
    eps = 1e-9
    result: list[tuple[float, float]] = []
    for point in points:
        if result and abs(result[-1][0] - point[0]) < eps and abs(result[-1][1] - point[1]) < eps:
            continue
        if len(result) >= 2:
            (ax, ay), (bx, by) = result[-2], result[-1]
            vertical = abs(ax - bx) < eps and abs(bx - point[0]) < eps
            horizontal = abs(ay - by) < eps and abs(by - point[1]) < eps
            if vertical or horizontal:
                result[-1] = point
                continue
        result.append(point)
    return result


def _route_feedback(
    edge: GraphEdge,
    boxes: Sequence[tuple[float, float, float, float]],
    layering: Layering,
    bands: _Bands,
    lane: float,
    options: LayoutOptions,
) -> list[tuple[float, float]]:
    sc0, sp0, sce, spe = boxes[edge.source]
    tc0, tp0, tce, _ = boxes[edge.target]
    offset = parallel_offset(edge, options.parallel_edge_spacing)

    start_c = sc0 + sce * FEEDBACK_ANCHOR + _clamp(offset, sce * (1 - FEEDBACK_ANCHOR))
    end_c = tc0 + tce * FEEDBACK_ANCHOR + _clamp(offset, tce * (1 - FEEDBACK_ANCHOR))
    leave = bands.gap_after(layering.ranks[edge.source])
    enter = bands.gap_before(layering.ranks[edge.target])

    return [
        (start_c, sp0 + spe),
        (start_c, leave),
        (lane, leave),
        (lane, enter),
        (end_c, enter),
        (end_c, tp0),
    ]


def _route_self_loop(
    edge: GraphEdge,
    box: tuple[float, float, float, float],
    options: LayoutOptions,
) -> list[tuple[float, float]]:
    c0, p0, ce, pe = box
    side = c0 + ce
    reach = options.node_spacing / 2 * (edge.parallel_index + 1) / edge.parallel_count
    center = p0 + pe / 2
    spread = pe / 4
    return [
        (side, center - spread),
        (side + reach, center - spread),
        (side + reach, center + spread),
        (side, center + spread),
    ]


__all__ = ["route_edges", "parallel_offset", "FEEDBACK_ANCHOR"]
