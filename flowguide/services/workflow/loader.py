"""Read workflow JSON payloads at the service boundary."""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from flowguide.services.workflow.exceptions import GraphTooLargeError, InvalidWorkflowJsonError


def load_workflow_json(value: Any) -> Mapping[str, Any]:
    """Return ``value`` as a workflow JSON object.

    Args:
        value: A mapping, or a string holding a JSON object (workflows are
            often pasted or downloaded as text).

    Raises:
        InvalidWorkflowJsonError: If the string is not valid JSON, or the
            payload is not an object.
    """
    if isinstance(value, str | bytes):
        try:
            value = json.loads(value)
        except json.JSONDecodeError as e:
            raise InvalidWorkflowJsonError(f"could not parse JSON ({e.msg})") from e
    if not isinstance(value, Mapping):
        raise InvalidWorkflowJsonError("must be a valid object")
    return value


def check_workflow_size(workflow: Mapping[str, Any], max_nodes: int) -> None:
    """Reject workflows with more than ``max_nodes`` nodes.

    Raises:
        GraphTooLargeError: If the node list exceeds the limit.
    """
    nodes = workflow.get("nodes")
    if isinstance(nodes, list) and len(nodes) > max_nodes:
        raise GraphTooLargeError(current=len(nodes), limit=max_nodes, metric="nodes")


__all__ = [
    "check_workflow_size",
    "load_workflow_json",
]
