"""Ordered directed graph used by the build-order engine.

This module provides a small directed graph whose node and edge iteration
order always matches insertion order. The build order of a workflow depends
on the order in which nodes and connections appear in the source JSON, so
unordered containers are never used here.

Time Complexity:
- Node/Edge addition: O(1)
- Successor/predecessor lookup: O(1)

Space Complexity: O(V + E)
"""

from collections.abc import Hashable, Iterator
from typing import Generic, TypeVar

NodeId = TypeVar("NodeId", bound=Hashable)


class Graph(Generic[NodeId]):
    """Insertion-ordered directed graph.

    Both forward and reverse adjacency are kept so that producers and
    consumers of a node can be looked up without scanning the edge set.
    Duplicate edges are kept: a workflow may legitimately wire the same two
    nodes through different output groups.

    Type Parameters:
        NodeId: Hashable type used as node identifier (node ids are strings).

    Example:
        >>> graph = Graph[str]()
        >>> graph.add_edge("trigger", "http")
        >>> graph.get_successors("trigger")
        ['http']
    """

    __slots__ = ("_adjacency", "_edge_count", "_nodes", "_reverse_adjacency")

    def __init__(self) -> None:
        """Initialize an empty graph."""
        self._nodes: dict[NodeId, None] = {}
        self._adjacency: dict[NodeId, list[NodeId]] = {}
        self._reverse_adjacency: dict[NodeId, list[NodeId]] = {}
        self._edge_count: int = 0

    @property
    def node_count(self) -> int:
        """Get the number of nodes in the graph."""
        return len(self._nodes)

    @property
    def edge_count(self) -> int:
        """Get the number of edges in the graph."""
        return self._edge_count

    @property
    def nodes(self) -> list[NodeId]:
        """Nodes in insertion order."""
        return list(self._nodes)

    def add_node(self, node_id: NodeId) -> None:
        """Register a node. Re-adding a node keeps its original position."""
        if node_id not in self._nodes:
            self._nodes[node_id] = None
            self._adjacency[node_id] = []
            self._reverse_adjacency[node_id] = []

    def add_edge(self, source: NodeId, target: NodeId) -> None:
        """Add a directed edge from source to target.

        Unknown endpoints are registered first, in source-then-target order.

        Args:
            source: The source node ID.
            target: The target node ID.
        """
        self.add_node(source)
        self.add_node(target)
        self._adjacency[source].append(target)
        self._reverse_adjacency[target].append(source)
        self._edge_count += 1

    def get_successors(self, node_id: NodeId) -> list[NodeId]:
        """Get successor nodes in the order their edges were added.

        Args:
            node_id: The node ID.

        Returns:
            List of successor node IDs. Empty list for unknown nodes.
        """
        return self._adjacency.get(node_id, [])

    def get_predecessors(self, node_id: NodeId) -> list[NodeId]:
        """Get predecessor nodes in the order their edges were added.

        Args:
            node_id: The node ID.

        Returns:
            List of predecessor node IDs. Empty list for unknown nodes.
        """
        return self._reverse_adjacency.get(node_id, [])

    def get_in_degree(self, node_id: NodeId) -> int:
        """Get the number of incoming edges for a node."""
        return len(self._reverse_adjacency.get(node_id, []))

    def get_out_degree(self, node_id: NodeId) -> int:
        """Get the number of outgoing edges for a node."""
        return len(self._adjacency.get(node_id, []))

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    def __iter__(self) -> Iterator[NodeId]:
        return iter(self._nodes)

    def __len__(self) -> int:
        return len(self._nodes)

    def __repr__(self) -> str:
        return f"Graph(nodes={self.node_count}, edges={self.edge_count})"
