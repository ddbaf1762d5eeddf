"""Base Pydantic schemas with common patterns.

Request models use snake_case internally; response payloads are emitted in
camelCase to match the field naming of the workflow JSON they describe.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class BaseSchema(BaseModel):
    """Base schema with common configuration for all schemas.

    Configures Pydantic v2 settings for consistent behavior across all schemas.
    """

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        str_strip_whitespace=True,
        use_enum_values=True,
    )


class CamelSchema(BaseSchema):
    """Schema serialized with camelCase aliases (``stepNumber``, ``isTrigger``).

    Node names are echoed back exactly as the workflow spells them, so
    whitespace is not stripped.
    """

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        use_enum_values=True,
        alias_generator=to_camel,
    )


class ErrorResponse(BaseSchema):
    """Standard error response schema."""

    error: str = Field(
        ...,
        description="Error type identifier",
        examples=["INVALID_WORKFLOW_JSON"],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
        examples=["Invalid workflow JSON: must be a valid object"],
    )
    details: dict[str, Any] | None = Field(
        default=None,
        description="Additional error details",
        examples=[{"reason": "must be a valid object"}],
    )


__all__ = [
    "BaseSchema",
    "CamelSchema",
    "ErrorResponse",
]
