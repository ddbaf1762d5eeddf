"""Wiring guidance and final numbering for build steps."""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING

from flowguide.services.workflow.types import (
    ConnectionInfo,
    ConnectionRecord,
    ConnectionType,
    RealStep,
    ReturnStep,
    Step,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

    from flowguide.services.workflow.indexer import ConnectionIndex


def _quoted(records: Sequence[ConnectionRecord]) -> str:
    return ", ".join(f"'{record.node_name}'" for record in records)


def describe_outgoing(record: ConnectionRecord) -> str:
    """One-line hint for an outgoing connection, e.g. ``Connect to 'X' (input 2)``."""
    line = f"Connect to '{record.node_name}' (input {record.input_index + 1})"
    if record.connection_type is not ConnectionType.MAIN_FLOW:
        line += f" as {record.kind}"
    return line


def describe_incoming(record: ConnectionRecord) -> str:
    """One-line hint for an incoming connection, e.g. ``Receives from 'X' (output 1)``."""
    line = f"Receives from '{record.node_name}' (output {record.output_index + 1})"
    if record.connection_type is not ConnectionType.MAIN_FLOW:
        line += f" as {record.kind}"
    return line


def connection_instructions(
    connects_to: Sequence[ConnectionRecord],
    connects_from: Sequence[ConnectionRecord],
) -> str:
    """Consolidate a node's connections into a single sentence."""
    if len(connects_to) == 1:
        (record,) = connects_to
        if record.connection_type is ConnectionType.DEPENDENCY:
            return (
                f"Attach this node to '{record.node_name}' "
                f"through its {record.kind} input."
            )
        return f"Connect the output of this node to '{record.node_name}'."
    if connects_to:
        return f"Connect the outputs of this node to: {_quoted(connects_to)}."
    if connects_from:
        return f"This step receives its input from: {_quoted(connects_from)}."
    return "This step has no connections; it stands on its own."


def build_connection_info(node_id: str, index: ConnectionIndex) -> ConnectionInfo:
    """Connection guidance for a real node."""
    connects_to = tuple(index.outgoing.get(node_id, ()))
    connects_from = tuple(index.incoming.get(node_id, ()))
    return ConnectionInfo(
        connects_to=connects_to,
        connects_from=connects_from,
        next_steps=tuple(describe_outgoing(record) for record in connects_to),
        previous_steps=tuple(describe_incoming(record) for record in connects_from),
        connection_instructions=connection_instructions(connects_to, connects_from),
    )


def return_connection_info(step: ReturnStep) -> ConnectionInfo:
    """Fixed guidance for a synthetic return step."""
    return ConnectionInfo(
        next_steps=(f"Go back to '{step.return_to_node_name}'",),
        connection_instructions=(
            f"Go back to '{step.return_to_node_name}' and build the branch "
            f"coming out of its next output."
        ),
    )


def annotate_steps(
    steps: Sequence[Step],
    index: ConnectionIndex,
    *,
    include_connection_info: bool = True,
) -> list[Step]:
    """Attach connection info and number steps from 1 in emission order.

    Args:
        steps: Steps in emission order.
        index: Connection index of the same workflow.
        include_connection_info: When False only numbering is applied.

    Returns:
        New step objects; the input steps are not modified.
    """
    annotated: list[Step] = []
    for number, step in enumerate(steps, start=1):
        info: ConnectionInfo | None = None
        if include_connection_info:
            if isinstance(step, RealStep):
                info = build_connection_info(step.id, index)
            else:
                info = return_connection_info(step)
        annotated.append(replace(step, step_number=number, connection_info=info))
    return annotated


__all__ = [
    "annotate_steps",
    "build_connection_info",
    "connection_instructions",
    "describe_incoming",
    "describe_outgoing",
    "return_connection_info",
]
