"""
Adapter for workflow graph payloads.

Reads the workflow graph document served by the workflow engine API::

    {
        "id": 3, "code": "BC_APPROVAL", "name": "Order approval",
        "nodes": [{"id": "DRAFT", "type": "input",
                   "data": {"label": "Draft", "description": "..."}}],
        "edges": [{"id": "e1", "source": "DRAFT", "target": "SUBMITTED",
                   "label": "submit", "data": {"action": "submit"}}]
    }

and lays it out with compute_layout().
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from .engine import compute_layout
from .geometry import node_dimensions
from .types import LayoutResult, OptionsLike, WorkflowEdge, WorkflowNode
from .validation import GraphError


@dataclass(frozen=True)
class WorkflowGraph:
    """A workflow template graph."""

    id: Optional[Any] = None
    code: Optional[str] = None
    name: Optional[str] = None
    nodes: tuple[WorkflowNode, ...] = field(default_factory=tuple)
    edges: tuple[WorkflowEdge, ...] = field(default_factory=tuple)


def parse_workflow_graph(payload: Mapping[str, Any], size_from_label: bool = False) -> WorkflowGraph:
    """
    Parse a workflow graph payload.

    Args:
        payload: Graph document (the ``graph`` member of the API response, or
            the whole response when it wraps one)
        size_from_label: Derive node width/height from the label and
            description when the node does not specify them

    Returns:
        WorkflowGraph with immutable nodes and edges.

    Raises:
        GraphError: If the payload is not a graph document
    """
    if "graph" in payload and isinstance(payload["graph"], Mapping):
        payload = payload["graph"]

    raw_nodes = payload.get("nodes")
    raw_edges = payload.get("edges", [])
    if raw_nodes is None:
        raise GraphError("Workflow graph payload has no 'nodes'")
    if not isinstance(raw_nodes, list) or not isinstance(raw_edges, list):
        raise GraphError("Workflow graph 'nodes' and 'edges' must be lists")

    nodes = tuple(_parse_node(raw, size_from_label) for raw in raw_nodes)
    edges = tuple(_parse_edge(raw) for raw in raw_edges)
    return WorkflowGraph(
        id=payload.get("id"),
        code=payload.get("code"),
        name=payload.get("name"),
        nodes=nodes,
        edges=edges,
    )


def _parse_node(raw: Mapping[str, Any], size_from_label: bool) -> WorkflowNode:
    data = raw.get("data") or {}
    label = raw.get("label", data.get("label"))
    label = "" if label is None else str(label)
    width = raw.get("width")
    height = raw.get("height")
    if size_from_label and (width is None or height is None):
        est_width, est_height = node_dimensions(label, bool(data.get("description")))
        width = est_width if width is None else width
        height = est_height if height is None else height
    return WorkflowNode(
        id=raw.get("id"),
        kind=str(raw.get("kind") or raw.get("type") or "default"),
        label=label,
        width=width,
        height=height,
        data=data,
    )


def _parse_edge(raw: Mapping[str, Any]) -> WorkflowEdge:
    data = raw.get("data") or {}
    label = raw.get("label", data.get("label"))
    edge_id = raw.get("id")
    return WorkflowEdge(
        source=raw.get("source"),
        target=raw.get("target"),
        id=None if edge_id is None else str(edge_id),
        label=None if label is None else str(label),
        data=data,
    )


def layout_workflow_graph(graph: WorkflowGraph, options: OptionsLike = None, **overrides: Any) -> LayoutResult:
    """Lay out a parsed workflow graph with compute_layout()."""
    return compute_layout(graph.nodes, graph.edges, options, **overrides)


__all__ = ["WorkflowGraph", "parse_workflow_graph", "layout_workflow_graph"]
