"""Connection index for a prepared workflow graph.

The raw connections map has the shape::

    {sourceName: {kind: [[{"node": targetName, "type": kind, "index": 0}], ...]}}

where each inner list is one output group (e.g. the ``true`` and ``false``
outputs of an IF node). Indexing walks that structure once, in input order,
and records every resolved edge in both directions so later lookups are O(1).
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from flowguide.services.workflow.graph import Graph
from flowguide.services.workflow.types import PRIMARY_KIND, ConnectionRecord

if TYPE_CHECKING:
    from flowguide.services.workflow.preprocessor import PreparedGraph

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ConnectionIndex:
    """Bidirectional connection records plus the projections used by traversal.

    Attributes:
        outgoing: Per node id, every connection leaving the node.
        incoming: Per node id, every connection entering the node.
        primary: Graph of ``main`` edges only.
        auxiliary: Graph of capability edges (provider -> consumer).
        primary_groups: Per node id, the ``main`` output groups that resolved
            to at least one target, each as its outgoing records.
        dropped_edges: Number of connection entries whose endpoints could not
            be resolved.
    """

    outgoing: dict[str, list[ConnectionRecord]] = field(default_factory=dict)
    incoming: dict[str, list[ConnectionRecord]] = field(default_factory=dict)
    primary: Graph[str] = field(default_factory=Graph)
    auxiliary: Graph[str] = field(default_factory=Graph)
    primary_groups: dict[str, list[list[ConnectionRecord]]] = field(default_factory=dict)
    dropped_edges: int = 0

    def children(self, node_id: str) -> list[str]:
        """Primary-flow targets of a node, in connection order."""
        return self.primary.get_successors(node_id)

    def parents(self, node_id: str) -> list[str]:
        """Primary-flow producers of a node, in connection order."""
        return self.primary.get_predecessors(node_id)

    def dependencies(self, node_id: str) -> list[str]:
        """Capability providers feeding a node, in discovery order."""
        return self.auxiliary.get_predecessors(node_id)

    def is_merge_node(self, node_id: str) -> bool:
        return self.primary.get_in_degree(node_id) >= 2

    def is_capability_provider(self, node_id: str) -> bool:
        """True for nodes wired only through capability edges as a source."""
        return (
            self.auxiliary.get_out_degree(node_id) > 0
            and self.primary.get_in_degree(node_id) == 0
            and self.primary.get_out_degree(node_id) == 0
        )


def _iter_groups(raw_groups: Any) -> list[list[Mapping[str, Any]]]:
    """Normalize an output-group list, tolerating ``null`` groups."""
    if not isinstance(raw_groups, list):
        return []
    groups: list[list[Mapping[str, Any]]] = []
    for group in raw_groups:
        if isinstance(group, list):
            groups.append([t for t in group if isinstance(t, Mapping)])
        else:
            groups.append([])
    return groups


def build_connection_index(prepared: PreparedGraph) -> ConnectionIndex:
    """Index every resolvable connection of ``prepared``.

    Unresolvable source or target names (stale references, annotation nodes,
    duplicate names) are skipped silently.

    Args:
        prepared: Output of :func:`prepare_graph`.

    Returns:
        The populated :class:`ConnectionIndex`.
    """
    index = ConnectionIndex()
    for node_id in prepared.nodes:
        index.outgoing[node_id] = []
        index.incoming[node_id] = []
        index.primary.add_node(node_id)
        index.auxiliary.add_node(node_id)
        index.primary_groups[node_id] = []

    for source_name, kinds in prepared.connections.items():
        source_id = prepared.resolve(source_name)
        if source_id is None or not isinstance(kinds, Mapping):
            index.dropped_edges += 1
            continue
        source = prepared.nodes[source_id]

        for kind, raw_groups in kinds.items():
            if not isinstance(kind, str):
                continue
            for output_index, group in enumerate(_iter_groups(raw_groups)):
                resolved: list[ConnectionRecord] = []
                for target_info in group:
                    target_id = prepared.resolve(target_info.get("node"))
                    if target_id is None:
                        index.dropped_edges += 1
                        continue
                    target = prepared.nodes[target_id]
                    raw_input = target_info.get("index", 0)
                    input_index = raw_input if isinstance(raw_input, int) else 0

                    record = ConnectionRecord(
                        node_id=target_id,
                        node_name=target.name,
                        kind=kind,
                        output_index=output_index,
                        input_index=input_index,
                    )
                    index.outgoing[source_id].append(record)
                    index.incoming[target_id].append(
                        ConnectionRecord(
                            node_id=source_id,
                            node_name=source.name,
                            kind=kind,
                            output_index=output_index,
                            input_index=input_index,
                        )
                    )
                    if kind == PRIMARY_KIND:
                        index.primary.add_edge(source_id, target_id)
                        resolved.append(record)
                    else:
                        index.auxiliary.add_edge(source_id, target_id)

                if kind == PRIMARY_KIND and resolved:
                    index.primary_groups[source_id].append(resolved)

    if index.dropped_edges:
        logger.debug(f"Dropped {index.dropped_edges} unresolved connection reference(s)")

    return index


__all__ = [
    "ConnectionIndex",
    "build_connection_index",
]
