"""Tests for GraphAlgorithms."""

from flowguide.services.workflow.algorithms import GraphAlgorithms
from flowguide.services.workflow.graph import Graph


def _graph(*edges: tuple[str, str]) -> Graph[str]:
    graph = Graph[str]()
    for source, target in edges:
        graph.add_edge(source, target)
    return graph


class TestCycleDetection:
    """Tests for detect_cycle."""

    def test_acyclic_graph_has_no_cycle(self) -> None:
        """Test a diamond graph is reported acyclic."""
        graph = _graph(("a", "b"), ("a", "c"), ("b", "d"), ("c", "d"))
        assert GraphAlgorithms.detect_cycle(graph) is None

    def test_detects_two_node_cycle(self) -> None:
        """Test the cycle path repeats its first node."""
        graph = _graph(("t", "a"), ("a", "b"), ("b", "a"))
        assert GraphAlgorithms.detect_cycle(graph) == ["a", "b", "a"]

    def test_detects_self_loop(self) -> None:
        """Test that a self loop is a cycle of length one."""
        graph = _graph(("a", "a"))
        assert GraphAlgorithms.detect_cycle(graph) == ["a", "a"]

    def test_empty_graph(self) -> None:
        """Test empty graph has no cycle."""
        assert GraphAlgorithms.detect_cycle(Graph[str]()) is None


class TestReachability:
    """Tests for find_unreachable_from."""

    def test_all_reachable(self) -> None:
        """Test that a chain is fully reachable from its head."""
        graph = _graph(("a", "b"), ("b", "c"))
        assert GraphAlgorithms.find_unreachable_from(graph, ["a"]) == []

    def test_reports_islands_in_insertion_order(self) -> None:
        """Test unreachable nodes come back in graph order."""
        graph = _graph(("a", "b"), ("y", "x"), ("c", "d"))
        assert GraphAlgorithms.find_unreachable_from(graph, ["a"]) == ["y", "x", "c", "d"]

    def test_cycle_members_reachable_through_entry(self) -> None:
        """Test that BFS terminates on cycles."""
        graph = _graph(("a", "b"), ("b", "a"))
        assert GraphAlgorithms.find_unreachable_from(graph, ["a"]) == []


class TestOrderViolations:
    """Tests for find_order_violations."""

    def test_topological_order_has_no_violations(self) -> None:
        """Test a valid order passes."""
        graph = _graph(("a", "b"), ("b", "c"))
        assert GraphAlgorithms.find_order_violations(graph, ["a", "b", "c"]) == []

    def test_reports_reversed_edges(self) -> None:
        """Test edges whose target precedes the source are reported."""
        graph = _graph(("a", "b"), ("b", "c"))
        assert GraphAlgorithms.find_order_violations(graph, ["c", "a", "b"]) == [("b", "c")]

    def test_first_occurrence_wins_and_missing_nodes_ignored(self) -> None:
        """Test repeated ids use their first position and absent ids are skipped."""
        graph = _graph(("a", "b"), ("b", "z"))
        assert GraphAlgorithms.find_order_violations(graph, ["a", "b", "a"]) == []
