"""Graph algorithms backing build-order diagnostics.

This module provides the graph checks the traversal engine relies on when it
explains a degraded result:
- Cycle detection using iterative DFS with path tracking
- Reachability analysis using BFS
- Order verification against the edges of a graph

Time Complexity: O(V + E) for all algorithms.
Space Complexity: O(V) for all algorithms.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Hashable, Iterable, Iterator
from typing import TYPE_CHECKING, Generic, TypeVar

if TYPE_CHECKING:
    from flowguide.services.workflow.graph import Graph

NodeId = TypeVar("NodeId", bound=Hashable)


class GraphAlgorithms(Generic[NodeId]):
    """Collection of graph algorithms over :class:`Graph`.

    All results respect the insertion order of the graph so they are stable
    across repeated runs on the same workflow.

    Example:
        >>> graph = Graph[str]()
        >>> graph.add_edge("a", "b")
        >>> graph.add_edge("b", "a")
        >>> GraphAlgorithms.detect_cycle(graph)
        ['a', 'b', 'a']
    """

    @staticmethod
    def detect_cycle(graph: Graph[NodeId]) -> list[NodeId] | None:
        """Detect a cycle using DFS with path tracking.

        Args:
            graph: The graph to check for cycles.

        Returns:
            List of node IDs forming the cycle (first node repeated at the
            end) if found, None otherwise.
        """
        visited: set[NodeId] = set()
        rec_stack: set[NodeId] = set()

        for root in graph:
            if root in visited:
                continue

            # DFS with an explicit stack; ``path`` mirrors ``stack``.
            path: list[NodeId] = [root]
            stack: list[Iterator[NodeId]] = [iter(graph.get_successors(root))]
            visited.add(root)
            rec_stack.add(root)

            while stack:
                neighbor = next(stack[-1], None)
                if neighbor is None:
                    stack.pop()
                    rec_stack.remove(path.pop())
                elif neighbor in rec_stack:
                    cycle_start = path.index(neighbor)
                    return [*path[cycle_start:], neighbor]
                elif neighbor not in visited:
                    visited.add(neighbor)
                    rec_stack.add(neighbor)
                    path.append(neighbor)
                    stack.append(iter(graph.get_successors(neighbor)))

        return None

    @staticmethod
    def find_unreachable_from(
        graph: Graph[NodeId],
        start_nodes: Iterable[NodeId],
    ) -> list[NodeId]:
        """Find nodes not reachable from any start node using BFS.

        Args:
            graph: The graph to analyze.
            start_nodes: Starting nodes (the traversal entry points).

        Returns:
            Unreachable node IDs in graph insertion order.
        """
        reachable: set[NodeId] = set()
        queue: deque[NodeId] = deque(start_nodes)

        while queue:
            current = queue.popleft()
            if current in reachable:
                continue

            reachable.add(current)

            for successor in graph.get_successors(current):
                if successor not in reachable:
                    queue.append(successor)

        return [node for node in graph if node not in reachable]

    @staticmethod
    def find_order_violations(
        graph: Graph[NodeId],
        order: Iterable[NodeId],
    ) -> list[tuple[NodeId, NodeId]]:
        """List edges whose target appears before their source in ``order``.

        Nodes missing from ``order`` are ignored.

        Args:
            graph: Graph whose edges must be respected.
            order: Sequence of node IDs, first occurrence wins.

        Returns:
            ``(source, target)`` pairs violating the order.
        """
        position: dict[NodeId, int] = {}
        for index, node in enumerate(order):
            position.setdefault(node, index)

        violations: list[tuple[NodeId, NodeId]] = []
        for source in graph:
            if source not in position:
                continue
            for target in graph.get_successors(source):
                if target in position and position[target] < position[source]:
                    violations.append((source, target))
        return violations


__all__ = [
    "GraphAlgorithms",
]
