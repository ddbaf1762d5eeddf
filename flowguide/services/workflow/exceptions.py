"""Build-order service exceptions.

The engine itself never raises on malformed graphs; these exceptions guard
the service boundary (raw request payloads, size limits) and carry a
machine-readable ``error_code`` for API responses.
"""

from typing import Any


class BuildOrderError(Exception):
    """Base exception for build-order service errors.

    Attributes:
        message: Human-readable error message.
        error_code: Machine-readable error code for API responses.
        details: Additional error context as dictionary.
    """

    def __init__(
        self,
        message: str,
        error_code: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}


class InvalidWorkflowJsonError(BuildOrderError):
    """Raised when a payload cannot be read as a workflow JSON object.

    Attributes:
        reason: Why the payload was rejected.
    """

    def __init__(self, reason: str) -> None:
        super().__init__(
            message=f"Invalid workflow JSON: {reason}",
            error_code="INVALID_WORKFLOW_JSON",
            details={"reason": reason},
        )
        self.reason = reason


class GraphTooLargeError(BuildOrderError):
    """Raised when a workflow exceeds the configured size limit.

    Attributes:
        current: Current count.
        limit: Maximum allowed limit.
        metric: Type of metric (nodes, connections).
    """

    def __init__(self, current: int, limit: int, metric: str = "nodes") -> None:
        super().__init__(
            message=f"Workflow too large: {current} {metric} (limit: {limit})",
            error_code="GRAPH_TOO_LARGE",
            details={"current": current, "limit": limit, "metric": metric},
        )
        self.current = current
        self.limit = limit
        self.metric = metric


__all__ = [
    "BuildOrderError",
    "GraphTooLargeError",
    "InvalidWorkflowJsonError",
]
