"""Tests for the workflow graph payload adapter."""

import pytest

from workflow_layout import (
    DanglingEdgeError,
    Direction,
    GraphError,
    WorkflowNode,
    layout_workflow_graph,
    parse_workflow_graph,
)


def create_payload():
    """Approval workflow as served by the workflow API."""
    return {
        "graph": {
            "id": 3,
            "code": "BC_APPROVAL",
            "name": "Order approval",
            "nodes": [
                {"id": "DRAFT", "type": "input", "data": {"label": "Draft"}},
                {
                    "id": "REVIEW",
                    "type": "default",
                    "data": {"label": "Review by the purchasing department", "description": "..."},
                },
                {"id": "APPROVED", "type": "output", "data": {"label": "Approved"}},
            ],
            "edges": [
                {"id": "e1", "source": "DRAFT", "target": "REVIEW", "label": "submit"},
                {"id": "e2", "source": "REVIEW", "target": "APPROVED", "data": {"label": "approve"}},
                {"id": 3, "source": "REVIEW", "target": "DRAFT", "label": "reject"},
            ],
        }
    }


class TestParseWorkflowGraph:
    """Payload parsing."""

    def test_wrapped_payload(self):
        """A payload wrapped in "graph" is unwrapped."""
        graph = parse_workflow_graph(create_payload())
        assert (graph.id, graph.code, graph.name) == (3, "BC_APPROVAL", "Order approval")
        assert [n.id for n in graph.nodes] == ["DRAFT", "REVIEW", "APPROVED"]
        assert graph.nodes[0] == WorkflowNode("DRAFT", kind="input", label="Draft")

    def test_unwrapped_payload(self):
        """A bare graph document is accepted."""
        graph = parse_workflow_graph(create_payload()["graph"])
        assert len(graph.nodes) == 3
        assert len(graph.edges) == 3

    def test_edge_fields(self):
        """Edge labels come from label or data.label, ids become strings."""
        graph = parse_workflow_graph(create_payload())
        assert [e.label for e in graph.edges] == ["submit", "approve", "reject"]
        assert graph.edges[2].id == "3"

    def test_sizes_left_to_options_by_default(self):
        """Sizes stay unset unless requested."""
        graph = parse_workflow_graph(create_payload())
        assert all(n.width is None and n.height is None for n in graph.nodes)

    def test_size_from_label(self):
        """Sizes can be derived from labels and descriptions."""
        graph = parse_workflow_graph(create_payload(), size_from_label=True)
        review = graph.nodes[1]
        assert review.width == len("Review by the purchasing department") * 8.0
        assert review.height == 120.0
        assert (graph.nodes[0].width, graph.nodes[0].height) == (250.0, 100.0)

    def test_explicit_size_kept(self):
        """Given sizes win over derived ones."""
        payload = {"nodes": [{"id": "A", "width": 90, "data": {"label": "A"}}]}
        node = parse_workflow_graph(payload, size_from_label=True).nodes[0]
        assert (node.width, node.height) == (90, 100.0)

    def test_missing_nodes(self):
        """A payload without nodes raises GraphError."""
        with pytest.raises(GraphError, match="no 'nodes'"):
            parse_workflow_graph({"edges": []})

    def test_nodes_not_a_list(self):
        """Nodes must be a list."""
        with pytest.raises(GraphError, match="must be lists"):
            parse_workflow_graph({"nodes": {"id": "A"}})


class TestLayoutWorkflowGraph:
    """Layout of parsed payloads."""

    def test_layout(self):
        """A parsed workflow lays out with its send-back as feedback."""
        graph = parse_workflow_graph(create_payload())
        result = layout_workflow_graph(graph)
        assert result.direction == Direction.TB
        assert result.ranks == {"DRAFT": 0, "REVIEW": 1, "APPROVED": 2}
        assert result.edge("3").feedback
        assert result.node("DRAFT").kind == "input"

    def test_options_forwarded(self):
        """Options reach compute_layout."""
        graph = parse_workflow_graph(create_payload())
        assert layout_workflow_graph(graph, {"direction": "LR"}).direction == Direction.LR
        assert layout_workflow_graph(graph, direction="RL").direction == Direction.RL

    def test_dangling_transition(self):
        """Transitions to unknown steps raise DanglingEdgeError."""
        payload = {"nodes": [{"id": "A"}], "edges": [{"source": "A", "target": "GONE"}]}
        with pytest.raises(DanglingEdgeError):
            layout_workflow_graph(parse_workflow_graph(payload))
