"""Pydantic schemas for request/response validation.

This package contains all Pydantic models for API validation.
Exports all schemas for convenient importing.
"""

from flowguide.schemas.base import BaseSchema, CamelSchema, ErrorResponse
from flowguide.schemas.build_order import (
    BuildOrderResponse,
    ConnectionInfoSchema,
    ConnectionRecordSchema,
    ServiceUsageResponse,
    ServiceUsageSummaryResponse,
    StepNamesResponse,
    StepResponse,
    TriggerStepsResponse,
    WorkflowStatsResponse,
)

__all__ = [
    # Base
    "BaseSchema",
    "CamelSchema",
    "ErrorResponse",
    # Build order
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
