"""
Graph model builder.

Normalizes raw node/edge sequences into an ``InternalGraph``: nodes get a
dense integer index, every edge endpoint is resolved, parallel edges are
tagged, and adjacency is built in both directions. All later phases work on
integer indices only.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Sequence

from .types import EdgeLike, NodeId, NodeLike, WorkflowEdge, WorkflowNode
from .validation import (
    DanglingEdgeError,
    DuplicateEdgeError,
    DuplicateNodeError,
    InvalidNodeError,
    validate_dimension,
)


@dataclass(frozen=True)
class GraphEdge:
    """
    An edge with resolved endpoints.

    Attributes:
        index: Position in the input edge sequence
        id: Given or generated edge id
        source: Source node index
        target: Target node index
        label: Edge label
        parallel_index: Position among edges with the same source and target
        parallel_count: Number of edges with the same source and target
    """

    index: int
    id: str
    source: int
    target: int
    label: Optional[str] = None
    parallel_index: int = 0
    parallel_count: int = 1

    @property
    def is_self_loop(self) -> bool:
        return self.source == self.target


@dataclass
class InternalGraph:
    """Working graph for a single layout call."""

    nodes: list[WorkflowNode]
    edges: list[GraphEdge]
    index: dict[NodeId, int]
    out_edges: list[list[int]] = field(default_factory=list)
    in_edges: list[list[int]] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.nodes)

    def node_id(self, n: int) -> NodeId:
        return self.nodes[n].id

    def successors(self, n: int) -> list[int]:
        """Target indices of the outgoing edges of ``n`` (with repeats)."""
        return [self.edges[e].target for e in self.out_edges[n]]

    def predecessors(self, n: int) -> list[int]:
        """Source indices of the incoming edges of ``n`` (with repeats)."""
        return [self.edges[e].source for e in self.in_edges[n]]

    def degree(self, n: int) -> int:
        return len(self.out_edges[n]) + len(self.in_edges[n])


def _read(obj: Any, attr: str, default: Any = None) -> Any:
    """Read an attribute from a mapping or an object."""
    if isinstance(obj, Mapping):
        return obj.get(attr, default)
    return getattr(obj, attr, default)


def normalize_node(node_data: NodeLike) -> WorkflowNode:
    """
    Convert a node-like value to a ``WorkflowNode``.

    Dicts may carry the step type under ``type`` and the label under
    ``data.label``, as the workflow graph API does.

    Raises:
        InvalidNodeError: If the node has no id or invalid dimensions
    """
    if isinstance(node_data, WorkflowNode):
        node = node_data
    else:
        node_id = _read(node_data, "id")
        if node_id is None:
            raise InvalidNodeError(f"Node has no id: {node_data!r}")
        payload = _read(node_data, "data")
        kind = _read(node_data, "kind") or _read(node_data, "type") or "default"
        label = _read(node_data, "label")
        if label is None and payload is not None:
            label = _read(payload, "label")
        node = WorkflowNode(
            id=node_id,
            kind=str(kind),
            label="" if label is None else str(label),
            width=_read(node_data, "width"),
            height=_read(node_data, "height"),
            data=payload,
        )

    if node.id is None:
        raise InvalidNodeError(f"Node has no id: {node!r}")
    validate_dimension(node.id, "width", node.width)
    validate_dimension(node.id, "height", node.height)
    return node


def normalize_edge(edge_data: EdgeLike) -> WorkflowEdge:
    """Convert an edge-like value to a ``WorkflowEdge``."""
    if isinstance(edge_data, WorkflowEdge):
        return edge_data
    edge_id = _read(edge_data, "id")
    label = _read(edge_data, "label")
    return WorkflowEdge(
        source=_read(edge_data, "source"),
        target=_read(edge_data, "target"),
        id=None if edge_id is None else str(edge_id),
        label=None if label is None else str(label),
        data=_read(edge_data, "data"),
    )


def build_graph(nodes: Sequence[NodeLike], edges: Sequence[EdgeLike] = ()) -> InternalGraph:
    """
    Build the internal graph and validate referential integrity.

    Args:
        nodes: Node-likes (WorkflowNode, dicts or objects)
        edges: Edge-likes (WorkflowEdge, dicts or objects)

    Returns:
        InternalGraph with dense node indices and two-way adjacency

    Raises:
        InvalidNodeError: If a node is malformed
        DuplicateNodeError: If two nodes share an id
        DuplicateEdgeError: If two edges share an explicit id
        DanglingEdgeError: If any edge references an unknown node id
    """
    workflow_nodes = [normalize_node(n) for n in nodes]
    workflow_edges = [normalize_edge(e) for e in edges]

    index: dict[NodeId, int] = {}
    for i, node in enumerate(workflow_nodes):
        if node.id in index:
            raise DuplicateNodeError(f"Duplicate node id {node.id!r}")
        index[node.id] = i

    # Resolve endpoints, collecting every problem before failing
    issues: list[tuple[int, str]] = []
    resolved: list[tuple[int, int]] = []
    for i, edge in enumerate(workflow_edges):
        src = index.get(edge.source) if _hashable(edge.source) else None
        tgt = index.get(edge.target) if _hashable(edge.target) else None
        if src is None:
            issues.append((i, f"Edge {i}: source {edge.source!r} is not a known node"))
        if tgt is None:
            issues.append((i, f"Edge {i}: target {edge.target!r} is not a known node"))
        if src is not None and tgt is not None:
            resolved.append((src, tgt))
    if issues:
        raise DanglingEdgeError(issues)

    # Tag parallel edges by (source, target)
    pair_count: dict[tuple[int, int], int] = defaultdict(int)
    for pair in resolved:
        pair_count[pair] += 1

    explicit_ids = [e.id for e in workflow_edges if e.id is not None]
    used_ids: set[str] = set()
    for edge_id in explicit_ids:
        if edge_id in used_ids:
            raise DuplicateEdgeError(f"Duplicate edge id {edge_id!r}")
        used_ids.add(edge_id)

    pair_seen: dict[tuple[int, int], int] = defaultdict(int)
    graph_edges: list[GraphEdge] = []
    for i, (edge, (src, tgt)) in enumerate(zip(workflow_edges, resolved)):
        parallel_index = pair_seen[(src, tgt)]
        pair_seen[(src, tgt)] += 1

        edge_id = edge.id
        if edge_id is None:
            edge_id = _generate_edge_id(edge, parallel_index, used_ids)
            used_ids.add(edge_id)

        graph_edges.append(
            GraphEdge(
                index=i,
                id=edge_id,
                source=src,
                target=tgt,
                label=edge.label,
                parallel_index=parallel_index,
                parallel_count=pair_count[(src, tgt)],
            )
        )

    n = len(workflow_nodes)
    out_edges: list[list[int]] = [[] for _ in range(n)]
    in_edges: list[list[int]] = [[] for _ in range(n)]
    for e in graph_edges:
        out_edges[e.source].append(e.index)
        in_edges[e.target].append(e.index)

    return InternalGraph(
        nodes=workflow_nodes,
        edges=graph_edges,
        index=index,
        out_edges=out_edges,
        in_edges=in_edges,
    )


def _generate_edge_id(edge: WorkflowEdge, parallel_index: int, used: set[str]) -> str:
    base = f"{edge.source}->{edge.target}"
    candidate = base if parallel_index == 0 else f"{base}#{parallel_index}"
    suffix = parallel_index
    while candidate in used:
        suffix += 1
        candidate = f"{base}#{suffix}"
    return candidate


def _hashable(value: Any) -> bool:
    try:
        hash(value)
    except TypeError:
        return False
    return True


__all__ = [
    "GraphEdge",
    "InternalGraph",
    "build_graph",
    "normalize_node",
    "normalize_edge",
]
