"""Tests for the graph model builder."""

from types import SimpleNamespace

import pytest

from workflow_layout import (
    DanglingEdgeError,
    DuplicateEdgeError,
    DuplicateNodeError,
    GraphError,
    InvalidNodeError,
    ValidationError,
    WorkflowEdge,
    WorkflowNode,
    build_graph,
)


class TestNodeNormalization:
    """Nodes can be given in several forms."""

    def test_workflow_nodes_kept(self):
        """WorkflowNode instances are used as given."""
        node = WorkflowNode("A", kind="input", label="Draft", width=200)
        graph = build_graph([node])
        assert graph.nodes == [node]
        assert graph.index == {"A": 0}

    def test_dict_nodes_use_api_field_names(self):
        """Dict nodes may use type and data.label."""
        graph = build_graph([{"id": "DRAFT", "type": "input", "data": {"label": "Draft"}}])
        node = graph.nodes[0]
        assert node.kind == "input"
        assert node.label == "Draft"
        assert node.data == {"label": "Draft"}

    def test_object_nodes(self):
        """Objects with node attributes are accepted."""
        graph = build_graph([SimpleNamespace(id=7, kind="output", label="Done", width=None, height=80)])
        node = graph.nodes[0]
        assert node.id == 7
        assert node.kind == "output"
        assert node.height == 80

    def test_missing_id_raises(self):
        """A node without id raises InvalidNodeError."""
        with pytest.raises(InvalidNodeError, match="no id"):
            build_graph([{"label": "anonymous"}])

    def test_duplicate_id_raises(self):
        """Repeated node ids raise DuplicateNodeError."""
        with pytest.raises(DuplicateNodeError, match="'A'"):
            build_graph([{"id": "A"}, {"id": "A"}])

    @pytest.mark.parametrize("size", [{"width": 0}, {"height": -10}, {"width": "wide"}])
    def test_invalid_dimensions_raise(self, size):
        """Non-positive or non-numeric sizes raise InvalidNodeError."""
        with pytest.raises(InvalidNodeError):
            build_graph([{"id": "A", **size}])


class TestEdges:
    """Edge resolution, adjacency and parallel edge tagging."""

    def test_adjacency_both_directions(self):
        """Successors and predecessors are both available."""
        graph = build_graph(
            [{"id": "A"}, {"id": "B"}, {"id": "C"}],
            [{"source": "A", "target": "B"}, {"source": "A", "target": "C"}],
        )
        assert graph.successors(0) == [1, 2]
        assert graph.predecessors(1) == [0]
        assert graph.predecessors(0) == []
        assert graph.degree(0) == 2

    def test_generated_ids(self):
        """Missing edge ids are generated from the endpoints."""
        graph = build_graph(
            [{"id": "A"}, {"id": "B"}],
            [WorkflowEdge("A", "B"), WorkflowEdge("A", "B"), WorkflowEdge("B", "A", id="back")],
        )
        assert [e.id for e in graph.edges] == ["A->B", "A->B#1", "back"]

    def test_parallel_edges_tagged(self):
        """Parallel edges get an index and a count."""
        graph = build_graph(
            [{"id": "A"}, {"id": "B"}],
            [{"source": "A", "target": "B"}] * 3 + [{"source": "B", "target": "A"}],
        )
        tags = [(e.parallel_index, e.parallel_count) for e in graph.edges]
        assert tags == [(0, 3), (1, 3), (2, 3), (0, 1)]

    def test_generated_id_avoids_explicit_ids(self):
        """Generated ids never collide with given ones."""
        graph = build_graph(
            [{"id": "A"}, {"id": "B"}],
            [{"id": "A->B", "source": "B", "target": "A"}, {"source": "A", "target": "B"}],
        )
        ids = [e.id for e in graph.edges]
        assert len(set(ids)) == 2
        assert ids[0] == "A->B"

    def test_duplicate_explicit_edge_id_raises(self):
        """Repeated explicit edge ids raise DuplicateEdgeError."""
        with pytest.raises(DuplicateEdgeError):
            build_graph(
                [{"id": "A"}, {"id": "B"}],
                [{"id": "e1", "source": "A", "target": "B"}, {"id": "e1", "source": "B", "target": "A"}],
            )

    def test_self_loop(self):
        """An edge to its own source is a self-loop."""
        graph = build_graph([{"id": "A"}], [{"source": "A", "target": "A"}])
        assert graph.edges[0].is_self_loop


class TestDanglingEdges:
    """Referential integrity is enforced."""

    def test_unknown_target(self):
        """An unknown target is reported by name."""
        with pytest.raises(DanglingEdgeError, match="target 'Z'"):
            build_graph([{"id": "A"}], [{"source": "A", "target": "Z"}])

    def test_all_issues_reported(self):
        """Every unresolved endpoint is listed."""
        with pytest.raises(DanglingEdgeError) as excinfo:
            build_graph(
                [{"id": "A"}],
                [{"source": "X", "target": "A"}, {"source": "A", "target": "A"}, {"source": "Y", "target": "Z"}],
            )
        assert [index for index, _ in excinfo.value.issues] == [0, 2, 2]

    def test_missing_endpoint(self):
        """A missing source is reported as None."""
        with pytest.raises(DanglingEdgeError, match="source None"):
            build_graph([{"id": "A"}], [{"target": "A"}])

    def test_int_and_str_ids_are_distinct(self):
        """1 and "1" are different node ids."""
        with pytest.raises(DanglingEdgeError):
            build_graph([{"id": 1}, {"id": 2}], [{"source": "1", "target": 2}])

    def test_error_hierarchy(self):
        """Graph errors are ValidationErrors and ValueErrors."""
        assert issubclass(DanglingEdgeError, GraphError)
        assert issubclass(GraphError, ValidationError)
        assert issubclass(ValidationError, ValueError)
