"""
Layer assignment.

Partitions nodes into ranks consistent with edge direction:

1. A depth-first traversal (from source nodes, in canonical id order) marks
   nodes as in-progress while their subtree is explored. An edge that reaches
   an in-progress node closes a cycle and becomes a feedback edge.
2. Longest-path ranking over the remaining acyclic edges:
   rank(n) = 1 + max(rank(p)) over ranking predecessors, 0 for none.
3. Weakly connected components and isolated nodes are identified so later
   phases can place them side by side.

All traversal state is kept in lists indexed by the dense node index.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Any, Iterator

from .graph import InternalGraph
from .types import NodeId

UNVISITED = 0
IN_PROGRESS = 1
DONE = 2


def id_sort_key(node_id: Any) -> tuple[int, Any, str]:
    """Total order over node ids of mixed types (ints, then strings, then others)."""
    if isinstance(node_id, bool) or not isinstance(node_id, (int, str)):
        return (2, 0, repr(node_id))
    if isinstance(node_id, int):
        return (0, node_id, "")
    return (1, 0, node_id)


@dataclass
class Layering:
    """
    Result of layer assignment.

    Attributes:
        ranks: Rank of every node, indexed by node index
        discovery: Traversal position of every node, indexed by node index
        feedback_edges: Indices of edges excluded from ranking
        components: Connected components (isolated nodes excluded), each a
            list of node indices in discovery order, ordered by discovery
        isolated: Nodes without any edge, in canonical id order
        component_of: Component index of every node; isolated nodes get
            ``len(components)``
    """

    ranks: list[int] = field(default_factory=list)
    discovery: list[int] = field(default_factory=list)
    feedback_edges: frozenset[int] = frozenset()
    components: list[list[int]] = field(default_factory=list)
    isolated: list[int] = field(default_factory=list)
    component_of: list[int] = field(default_factory=list)

    @property
    def layer_count(self) -> int:
        return max(self.ranks) + 1 if self.ranks else 0

    def is_feedback(self, edge_index: int) -> bool:
        return edge_index in self.feedback_edges

    def layers(self) -> list[list[int]]:
        """Nodes grouped by rank, each layer in discovery order."""
        result: list[list[int]] = [[] for _ in range(self.layer_count)]
        for node in sorted(range(len(self.ranks)), key=self.discovery.__getitem__):
            result[self.ranks[node]].append(node)
        return result

    def rank_map(self, graph: InternalGraph) -> dict[NodeId, int]:
        """Mapping of node id to rank."""
        return {graph.node_id(i): r for i, r in enumerate(self.ranks)}


def assign_layers(graph: InternalGraph) -> Layering:
    """
    Assign every node of the graph to a rank.

    Terminates on any input: cycles are broken by turning their closing
    edge into a feedback edge, self-loops are always feedback edges.

    Args:
        graph: Graph produced by build_graph()

    Returns:
        Layering with ranks, discovery order, feedback edges and components.
    """
    n = len(graph)
    if n == 0:
        return Layering()

    keys = [id_sort_key(node.id) for node in graph.nodes]
    edges = graph.edges

    # Visit out-edges by target id so that permuting the input arrays does
    # not change the traversal.
    sorted_out = [
        sorted(graph.out_edges[i], key=lambda e: (keys[edges[e].target], edges[e].id))
        for i in range(n)
    ]

    isolated = sorted((i for i in range(n) if graph.degree(i) == 0), key=keys.__getitem__)
    connected = sorted((i for i in range(n) if graph.degree(i) > 0), key=keys.__getitem__)
    sources = [
        i for i in connected if all(edges[e].source == i for e in graph.in_edges[i])
    ]

    state = [UNVISITED] * n
    discovery = [-1] * n
    postorder: list[int] = []
    feedback: set[int] = set()
    counter = 0

    for start in sources + connected:
        if state[start] != UNVISITED:
            continue
        state[start] = IN_PROGRESS
        discovery[start] = counter
        counter += 1
        stack: list[tuple[int, Iterator[int]]] = [(start, iter(sorted_out[start]))]

        while stack:
            node, pending = stack[-1]
            for edge_index in pending:
                target = edges[edge_index].target
                if state[target] == IN_PROGRESS:
                    feedback.add(edge_index)
                elif state[target] == UNVISITED:
                    state[target] = IN_PROGRESS
                    discovery[target] = counter
                    counter += 1
                    stack.append((target, iter(sorted_out[target])))
                    break
            else:
                state[node] = DONE
                postorder.append(node)
                stack.pop()

    for node in isolated:
        discovery[node] = counter
        counter += 1

    # Reverse postorder is a topological order of the non-feedback edges
    ranks = [0] * n
    for node in reversed(postorder):
        for edge_index in graph.out_edges[node]:
            if edge_index in feedback:
                continue
            target = edges[edge_index].target
            if ranks[node] + 1 > ranks[target]:
                ranks[target] = ranks[node] + 1

    components = _connected_components(graph, connected, discovery)
    component_of = [len(components)] * n
    for ci, component in enumerate(components):
        for node in component:
            component_of[node] = ci

    return Layering(
        ranks=ranks,
        discovery=discovery,
        feedback_edges=frozenset(feedback),
        components=components,
        isolated=isolated,
        component_of=component_of,
    )


def _connected_components(
    graph: InternalGraph, connected: list[int], discovery: list[int]
) -> list[list[int]]:
    """Weakly connected components of the non-isolated nodes, ordered by discovery."""
    visited = [False] * len(graph)
    components: list[list[int]] = []

    for start in sorted(connected, key=discovery.__getitem__):
        if visited[start]:
            continue

        component: list[int] = []
        queue: deque[int] = deque([start])
        visited[start] = True

        while queue:
            node = queue.popleft()
            component.append(node)
            for neighbor in graph.successors(node) + graph.predecessors(node):
                if not visited[neighbor]:
                    visited[neighbor] = True
                    queue.append(neighbor)

        component.sort(key=discovery.__getitem__)
        components.append(component)

    return components


__all__ = ["Layering", "assign_layers", "id_sort_key"]
