"""Normalize raw workflow JSON into the engine's lookup tables.

Nodes are identified by ``id`` but connections reference nodes by ``name``,
so two tables are built once here: ``id -> TaskNode`` and ``name -> id``.
When two nodes share a name the later one wins the name lookup, which leaves
connections to the earlier one unresolved.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from flowguide.services.workflow.types import ANNOTATION_TYPE_MARKER, TaskNode

logger = logging.getLogger(__name__)

_KNOWN_NODE_FIELDS = frozenset({"id", "name", "type", "parameters", "position"})


@dataclass(frozen=True, slots=True)
class PreparedGraph:
    """Executable nodes of a workflow plus its raw connection map.

    Attributes:
        nodes: Retained nodes keyed by id, in input order.
        name_to_id: Resolution table for connection endpoints.
        connections: The raw connections map, keyed by source node name.
    """

    nodes: dict[str, TaskNode] = field(default_factory=dict)
    name_to_id: dict[str, str] = field(default_factory=dict)
    connections: Mapping[str, Any] = field(default_factory=dict)

    def resolve(self, name: Any) -> str | None:
        """Return the node id for a connection endpoint name, if retained."""
        if not isinstance(name, str):
            return None
        return self.name_to_id.get(name)

    def __len__(self) -> int:
        return len(self.nodes)


def is_annotation_type(node_type: str) -> bool:
    """Sticky notes document a workflow; they are never built."""
    return ANNOTATION_TYPE_MARKER.lower() in node_type.lower()


def _to_task_node(raw: Mapping[str, Any]) -> TaskNode | None:
    node_id, name, node_type = raw.get("id"), raw.get("name"), raw.get("type")
    if isinstance(node_id, int) and not isinstance(node_id, bool):
        node_id = str(node_id)
    if not isinstance(node_id, str) or not isinstance(name, str):
        return None
    if not isinstance(node_type, str):
        return None
    parameters = raw.get("parameters")
    return TaskNode(
        id=node_id,
        name=name,
        type=node_type,
        parameters=dict(parameters) if isinstance(parameters, Mapping) else {},
        position=raw.get("position"),
        extra={k: v for k, v in raw.items() if k not in _KNOWN_NODE_FIELDS},
    )


def prepare_graph(raw_graph: Any) -> PreparedGraph | None:
    """Filter annotation nodes and build the id/name lookup tables.

    Args:
        raw_graph: Workflow JSON (``{"nodes": [...], "connections": {...}}``).

    Returns:
        A :class:`PreparedGraph`, or ``None`` when the input has no node list
        or no connections map. Callers treat ``None`` as an empty build order.
    """
    if not isinstance(raw_graph, Mapping):
        logger.warning("Workflow JSON is not an object; producing empty build order")
        return None

    raw_nodes = raw_graph.get("nodes")
    connections = raw_graph.get("connections")
    if not isinstance(raw_nodes, list) or not isinstance(connections, Mapping):
        logger.warning(
            "Workflow JSON is missing 'nodes' or 'connections'; "
            "producing empty build order"
        )
        return None

    nodes: dict[str, TaskNode] = {}
    name_to_id: dict[str, str] = {}
    skipped = 0

    for raw in raw_nodes:
        node = _to_task_node(raw) if isinstance(raw, Mapping) else None
        if node is None:
            skipped += 1
            continue
        if is_annotation_type(node.type):
            continue
        nodes[node.id] = node
        name_to_id[node.name] = node.id

    if skipped:
        logger.warning(
            f"Skipped {skipped} malformed node(s) without id, name or type",
            extra={"context": {"skipped_nodes": skipped}},
        )

    return PreparedGraph(nodes=nodes, name_to_id=name_to_id, connections=connections)


__all__ = [
    "PreparedGraph",
    "is_annotation_type",
    "prepare_graph",
]
