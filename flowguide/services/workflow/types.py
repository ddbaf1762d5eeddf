"""Core type definitions for the build-order engine.

The engine produces a flat list of steps. A step is either a projection of a
real task node (:class:`RealStep`) or a synthetic instruction telling the
builder to go back to a branching node (:class:`ReturnStep`). Both are frozen;
the final numbering pass produces renumbered copies.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

PRIMARY_KIND = "main"
CAPABILITY_KIND_PREFIX = "ai_"
ANNOTATION_TYPE_MARKER = "StickyNote"
TRIGGER_TYPE_MARKER = "trigger"
DEFAULT_BRANCHING_NODE_TYPES: tuple[str, ...] = (
    "n8n-nodes-base.if",
    "n8n-nodes-base.switch",
)


class ConnectionType(str, Enum):
    """Coarse classification of a connection for the tutorial UI."""

    MAIN_FLOW = "main_flow"
    DEPENDENCY = "dependency"
    CONDITIONAL = "conditional"

    def __str__(self) -> str:
        """Return the string value for serialization."""
        return self.value

    @classmethod
    def from_kind(cls, kind: str) -> ConnectionType:
        """Classify an edge kind (``main``, ``ai_tool``, ...)."""
        if kind == PRIMARY_KIND:
            return cls.MAIN_FLOW
        if kind.startswith(CAPABILITY_KIND_PREFIX):
            return cls.DEPENDENCY
        return cls.CONDITIONAL


@dataclass(frozen=True, slots=True)
class TaskNode:
    """A single executable node of the source workflow.

    ``position`` is kept exactly as found in the source JSON. ``extra`` holds
    every other raw field not modelled explicitly (``typeVersion``,
    ``webhookId``, ``credentials``...) so it can be passed through untouched.
    """

    id: str
    name: str
    type: str
    parameters: dict[str, Any] = field(default_factory=dict)
    position: Any = None
    extra: dict[str, Any] = field(default_factory=dict)

    @property
    def is_trigger(self) -> bool:
        return TRIGGER_TYPE_MARKER in self.type.lower()


@dataclass(frozen=True, slots=True)
class ConnectionRecord:
    """One end of a connection as seen from a node.

    For an outgoing record ``node_id``/``node_name`` is the target; for an
    incoming record it is the source.
    """

    node_id: str
    node_name: str
    kind: str
    output_index: int
    input_index: int

    @property
    def connection_type(self) -> ConnectionType:
        return ConnectionType.from_kind(self.kind)


@dataclass(frozen=True, slots=True)
class ConnectionInfo:
    """Human-oriented wiring guidance attached to a step."""

    connects_to: tuple[ConnectionRecord, ...] = ()
    connects_from: tuple[ConnectionRecord, ...] = ()
    next_steps: tuple[str, ...] = ()
    previous_steps: tuple[str, ...] = ()
    connection_instructions: str = "No connection information available."


@dataclass(frozen=True, slots=True)
class RealStep:
    """A build step backed by exactly one task node."""

    node: TaskNode
    step_number: int = 0
    is_trigger: bool = False
    is_merge_node: bool = False
    is_dependency: bool = False
    connection_info: ConnectionInfo | None = None

    is_return_step = False

    @property
    def id(self) -> str:
        return self.node.id

    @property
    def name(self) -> str:
        return self.node.name

    @property
    def type(self) -> str:
        return self.node.type


@dataclass(frozen=True, slots=True)
class ReturnStep:
    """A synthetic "go back to the branching node" instruction.

    Attributes:
        id: Derived identity ``<nodeId>_return_<branchIndex>``.
        name: Name of the branching node.
        type: Type tag of the branching node.
        position: Raw position of the branching node.
        branch_index: 1-based index of the branch that was just completed.
        return_to_node_name: Name of the node the builder must return to.
    """

    id: str
    name: str
    type: str
    position: Any
    branch_index: int
    return_to_node_name: str
    step_number: int = 0
    connection_info: ConnectionInfo | None = None

    is_return_step = True
    is_trigger = False
    is_merge_node = False
    is_dependency = False

    @classmethod
    def for_branch(cls, node: TaskNode, branch_index: int) -> ReturnStep:
        """Create the return step emitted after ``branch_index`` of ``node``."""
        return cls(
            id=f"{node.id}_return_{branch_index}",
            name=node.name,
            type=node.type,
            position=node.position,
            branch_index=branch_index,
            return_to_node_name=node.name,
        )


type Step = RealStep | ReturnStep


@dataclass(frozen=True, slots=True)
class BuildOrderOptions:
    """Tunables for the build-order engine.

    Attributes:
        branching_node_types: Node types that always branch (conditional,
            switch). Matched exactly, or by their last dotted segment.
        fallback_iteration_factor: The fallback sweep runs at most
            ``factor * node_count`` iterations.
        include_connection_info: Attach :class:`ConnectionInfo` to each step.
    """

    branching_node_types: tuple[str, ...] = DEFAULT_BRANCHING_NODE_TYPES
    fallback_iteration_factor: int = 2
    include_connection_info: bool = True

    def is_branching_type(self, node_type: str) -> bool:
        if node_type in self.branching_node_types:
            return True
        suffix = node_type.rsplit(".", 1)[-1].lower()
        return any(
            suffix == branching.rsplit(".", 1)[-1].lower()
            for branching in self.branching_node_types
        )


@dataclass(frozen=True, slots=True)
class BuildOrderResult:
    """Ordered steps plus a flag set when forced fallback emission happened."""

    steps: list[Step]
    degraded: bool = False

    def __iter__(self) -> Iterator[Step]:
        return iter(self.steps)

    def __len__(self) -> int:
        return len(self.steps)


__all__ = [
    "ANNOTATION_TYPE_MARKER",
    "CAPABILITY_KIND_PREFIX",
    "DEFAULT_BRANCHING_NODE_TYPES",
    "PRIMARY_KIND",
    "TRIGGER_TYPE_MARKER",
    "BuildOrderOptions",
    "BuildOrderResult",
    "ConnectionInfo",
    "ConnectionRecord",
    "ConnectionType",
    "RealStep",
    "ReturnStep",
    "Step",
    "TaskNode",
]
