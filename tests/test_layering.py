"""Tests for layer assignment and cycle breaking."""

import pytest

from workflow_layout import assign_layers, build_graph
from workflow_layout.layering import id_sort_key

# =============================================================================
# Test Fixtures
# =============================================================================


def create_graph(node_ids, pairs):
    """Build an internal graph from ids and (source, target) pairs."""
    nodes = [{"id": n} for n in node_ids]
    edges = [{"source": s, "target": t} for s, t in pairs]
    return build_graph(nodes, edges)


def ranks_of(graph):
    return assign_layers(graph).rank_map(graph)


def feedback_ids(graph, layering):
    return sorted(graph.edges[e].id for e in layering.feedback_edges)


# =============================================================================
# Acyclic graphs
# =============================================================================


class TestAcyclic:
    """Longest-path ranking without cycles."""

    def test_chain(self):
        """A chain gets consecutive ranks."""
        graph = create_graph("ABC", [("A", "B"), ("B", "C")])
        layering = assign_layers(graph)
        assert layering.ranks == [0, 1, 2]
        assert layering.feedback_edges == frozenset()
        assert layering.layer_count == 3

    def test_diamond(self):
        """Diamond ranks and layers."""
        graph = create_graph("ABCD", [("A", "B"), ("A", "C"), ("B", "D"), ("C", "D")])
        layering = assign_layers(graph)
        assert layering.rank_map(graph) == {"A": 0, "B": 1, "C": 1, "D": 2}
        assert layering.layers() == [[0], [1, 2], [3]]

    def test_long_edge_takes_longest_path(self):
        """A skip edge does not shorten the target's rank."""
        graph = create_graph("ABC", [("A", "C"), ("A", "B"), ("B", "C")])
        assert ranks_of(graph) == {"A": 0, "B": 1, "C": 2}

    def test_multiple_sources(self):
        """All sources start at rank 0."""
        graph = create_graph("abc", [("a", "c"), ("b", "c")])
        assert ranks_of(graph) == {"a": 0, "b": 0, "c": 1}

    def test_empty(self):
        """An empty graph has no layers."""
        layering = assign_layers(build_graph([]))
        assert layering.ranks == []
        assert layering.layer_count == 0
        assert layering.layers() == []


# =============================================================================
# Cycles
# =============================================================================


class TestCycles:
    """Cycle breaking through feedback edges."""

    def test_two_node_loop(self):
        """The returning edge of a two-node loop is feedback."""
        graph = create_graph("AB", [("A", "B"), ("B", "A")])
        layering = assign_layers(graph)
        assert layering.rank_map(graph) == {"A": 0, "B": 1}
        assert feedback_ids(graph, layering) == ["B->A"]

    def test_loop_entered_from_source(self):
        """A loop below a source is broken at its back edge."""
        graph = create_graph("SAB", [("S", "A"), ("A", "B"), ("B", "A")])
        layering = assign_layers(graph)
        assert layering.rank_map(graph) == {"S": 0, "A": 1, "B": 2}
        assert feedback_ids(graph, layering) == ["B->A"]
        assert layering.is_feedback(2)
        assert not layering.is_feedback(0)

    def test_self_loop_is_feedback(self):
        """Self-loops are always feedback edges."""
        graph = create_graph("AB", [("A", "A"), ("A", "B")])
        layering = assign_layers(graph)
        assert layering.rank_map(graph) == {"A": 0, "B": 1}
        assert feedback_ids(graph, layering) == ["A->A"]

    def test_lone_self_loop(self):
        """A node with only a self-loop is not isolated."""
        graph = create_graph("A", [("A", "A")])
        layering = assign_layers(graph)
        assert layering.ranks == [0]
        assert layering.isolated == []
        assert layering.components == [[0]]

    def test_rework_loop(self):
        """A send-back transition becomes the feedback edge."""
        # start -> submit -> review -> approve, review -> submit (send back)
        graph = create_graph(
            ["start", "submit", "review", "approve"],
            [("start", "submit"), ("submit", "review"), ("review", "approve"), ("review", "submit")],
        )
        layering = assign_layers(graph)
        assert layering.rank_map(graph) == {"start": 0, "submit": 1, "review": 2, "approve": 3}
        assert feedback_ids(graph, layering) == ["review->submit"]

    @pytest.mark.parametrize("size", [3, 10, 50])
    def test_ring_terminates_with_one_feedback_edge(self, size):
        """A ring of any size is broken once."""
        ids = list(range(size))
        graph = create_graph(ids, [(i, (i + 1) % size) for i in ids])
        layering = assign_layers(graph)
        assert len(layering.feedback_edges) == 1
        assert sorted(layering.ranks) == ids

    def test_non_feedback_edges_increase_rank(self):
        """Forward edges always increase rank."""
        pairs = [(0, 1), (1, 2), (2, 0), (2, 3), (3, 1), (3, 4), (4, 4), (1, 4)]
        graph = create_graph(range(5), pairs)
        layering = assign_layers(graph)
        for i, edge in enumerate(graph.edges):
            if layering.is_feedback(i):
                assert layering.ranks[edge.target] <= layering.ranks[edge.source]
            else:
                assert layering.ranks[edge.target] > layering.ranks[edge.source]


# =============================================================================
# Components and determinism
# =============================================================================


class TestComponents:
    """Connected components and isolated nodes."""

    def test_components_and_isolated(self):
        """Components are found in discovery order, isolated nodes last."""
        graph = create_graph("ABCDE", [("A", "B"), ("D", "C")])
        layering = assign_layers(graph)
        ids = [[graph.node_id(n) for n in comp] for comp in layering.components]
        assert ids == [["A", "B"], ["D", "C"]]
        assert [graph.node_id(n) for n in layering.isolated] == ["E"]
        assert layering.component_of == [0, 0, 1, 1, 2]
        assert layering.rank_map(graph) == {"A": 0, "B": 1, "C": 1, "D": 0, "E": 0}

    def test_isolated_discovered_last(self):
        """Isolated nodes are numbered after connected ones."""
        graph = create_graph(["z", "a", "b"], [("a", "b")])
        layering = assign_layers(graph)
        assert layering.discovery == [2, 0, 1]

    def test_input_order_does_not_matter(self):
        """Ranks and feedback edges ignore input order."""
        pairs = [("A", "B"), ("B", "C"), ("C", "A"), ("C", "D")]
        first = create_graph("ABCD", pairs)
        second = create_graph("DCBA", list(reversed(pairs)))
        assert ranks_of(first) == ranks_of(second)
        assert feedback_ids(first, assign_layers(first)) == feedback_ids(second, assign_layers(second))


class TestIdSortKey:
    """Canonical ordering of mixed id types."""

    def test_ints_before_strings(self):
        """Mixed ids sort ints first, then strings."""
        ids = ["b", 10, "a", 2]
        assert sorted(ids, key=id_sort_key) == [2, 10, "a", "b"]
