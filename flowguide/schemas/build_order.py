"""Pydantic schemas for build-order responses.

Every engine value object has a response counterpart here. Schemas are
built with ``model_validate`` straight from the engine dataclasses
(``from_attributes``), except :class:`StepResponse` which flattens the
wrapped task node and passes unmodelled node fields through.
"""

from __future__ import annotations

from typing import Any

from pydantic import ConfigDict, Field
from pydantic.alias_generators import to_camel

from flowguide.schemas.base import CamelSchema
from flowguide.services.workflow import (
    ConnectionType,
    RealStep,
    ReturnStep,
    ServiceUsage,
    Step,
    WorkflowStats,
    describe_step,
)

# =============================================================================
# Connection Schemas
# =============================================================================


class ConnectionRecordSchema(CamelSchema):
    """One end of a connection as seen from a step."""

    node_id: str = Field(..., description="Id of the node at the other end")
    node_name: str = Field(..., description="Name of the node at the other end")
    kind: str = Field(..., description="Edge kind", examples=["main", "ai_languageModel"])
    output_index: int = Field(..., ge=0, description="Output port on the source (0-based)")
    input_index: int = Field(..., ge=0, description="Input port on the target (0-based)")
    connection_type: ConnectionType = Field(
        ...,
        description="Coarse classification: main_flow, dependency or conditional",
    )


class ConnectionInfoSchema(CamelSchema):
    """Wiring guidance attached to a step."""

    connects_to: list[ConnectionRecordSchema] = Field(default_factory=list)
    connects_from: list[ConnectionRecordSchema] = Field(default_factory=list)
    next_steps: list[str] = Field(
        default_factory=list,
        examples=[["Connect to 'Send Email' (input 1)"]],
    )
    previous_steps: list[str] = Field(
        default_factory=list,
        examples=[["Receives from 'Webhook' (output 1)"]],
    )
    connection_instructions: str = Field(
        ...,
        examples=["Connect the output of this node to 'Send Email'."],
    )


# =============================================================================
# Step Schemas
# =============================================================================


class StepResponse(CamelSchema):
    """A single build step.

    Raw node fields the engine does not model (``typeVersion``,
    ``credentials``, ``webhookId``...) are passed through unchanged.
    """

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        use_enum_values=True,
        alias_generator=to_camel,
        extra="allow",
    )

    id: str = Field(..., examples=["a1b2c3"])
    name: str = Field(..., examples=["Send Email"])
    type: str = Field(..., examples=["n8n-nodes-base.emailSend"])
    position: Any = Field(default=None, examples=[[250, 300]])
    parameters: dict[str, Any] = Field(default_factory=dict)
    step_number: int = Field(..., ge=1, description="1-based position in the build order")
    description: str = Field(..., description="Readable summary of what the step does")
    is_trigger: bool = False
    is_merge_node: bool = False
    is_dependency: bool = False
    is_return_step: bool = False
    return_to_node_name: str | None = None
    branch_index: int | None = Field(
        default=None,
        description="1-based branch just completed (return steps only)",
    )
    connection_info: ConnectionInfoSchema | None = None

    @classmethod
    def from_step(cls, step: Step) -> StepResponse:
        """Flatten an engine step into its response shape."""
        connection_info = (
            ConnectionInfoSchema.model_validate(step.connection_info)
            if step.connection_info is not None
            else None
        )
        common: dict[str, Any] = {
            "id": step.id,
            "name": step.name,
            "type": step.type,
            "step_number": step.step_number,
            "description": describe_step(step),
            "is_trigger": step.is_trigger,
            "is_merge_node": step.is_merge_node,
            "is_dependency": step.is_dependency,
            "is_return_step": step.is_return_step,
            "connection_info": connection_info,
        }
        if isinstance(step, ReturnStep):
            return cls(
                **common,
                position=step.position,
                return_to_node_name=step.return_to_node_name,
                branch_index=step.branch_index,
            )

        reserved = set(cls.model_fields) | {
            field.alias for field in cls.model_fields.values() if field.alias
        }
        passthrough = {
            key: value for key, value in step.node.extra.items() if key not in reserved
        }
        return cls(
            **passthrough,
            **common,
            position=step.node.position,
            parameters=step.node.parameters,
        )


# =============================================================================
# Aggregate Schemas
# =============================================================================


class WorkflowStatsResponse(CamelSchema):
    """Counts and labels derived from a build order."""

    total_steps: int = Field(..., ge=0)
    real_steps: int = Field(..., ge=0)
    return_steps: int = Field(..., ge=0)
    trigger_steps: int = Field(..., ge=0)
    action_steps: int = Field(..., ge=0)
    dependency_steps: int = Field(..., ge=0)
    merge_steps: int = Field(..., ge=0)
    node_types: list[str] = Field(default_factory=list)
    complexity: str = Field(..., examples=["Beginner", "Intermediate", "Advanced"])

    @classmethod
    def from_stats(cls, stats: WorkflowStats) -> WorkflowStatsResponse:
        return cls.model_validate(stats)


class BuildOrderResponse(CamelSchema):
    """Full build order with derived statistics."""

    steps: list[StepResponse] = Field(default_factory=list)
    stats: WorkflowStatsResponse
    degraded: bool = Field(
        default=False,
        description="True when some steps were placed by forced fallback emission",
    )


class StepNamesResponse(CamelSchema):
    """Step names in build order; return steps carry a return marker."""

    names: list[str] = Field(
        default_factory=list,
        examples=[["Webhook", "If", "Send Email", "↩ Return to 'If'", "Slack"]],
    )


class TriggerStepsResponse(CamelSchema):
    """Trigger steps of a build order."""

    steps: list[StepResponse] = Field(default_factory=list)


class ServiceUsageResponse(CamelSchema):
    """How many steps of a workflow use one service."""

    service_name: str = Field(..., examples=["openai"])
    host_identifier: str | None = Field(default=None, examples=["api.openai.com"])
    node_type: str = Field(..., examples=["n8n-nodes-base.httpRequest"])
    count: int = Field(..., ge=1)

    @classmethod
    def from_usage(cls, usage: ServiceUsage) -> ServiceUsageResponse:
        return cls.model_validate(usage)


class ServiceUsageSummaryResponse(CamelSchema):
    """Service usage summary, in order of first appearance."""

    services: list[ServiceUsageResponse] = Field(default_factory=list)
    total_services: int = Field(default=0, ge=0)


__all__ = [
    "BuildOrderResponse",
    "ConnectionInfoSchema",
    "ConnectionRecordSchema",
    "ServiceUsageResponse",
    "ServiceUsageSummaryResponse",
    "StepNamesResponse",
    "StepResponse",
    "TriggerStepsResponse",
    "WorkflowStatsResponse",
]
