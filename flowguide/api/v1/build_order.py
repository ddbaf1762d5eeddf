"""Build Order API Router.

REST endpoints that turn a posted workflow JSON into a build order and its
derived views. The request body is the workflow itself (an object, or a
string holding one); nothing is stored.
"""

from __future__ import annotations

from typing import Annotated, Any, NoReturn

from fastapi import APIRouter, Body, HTTPException, Query, status

from flowguide.api.deps import BuildOrderServiceDep
from flowguide.schemas.base import ErrorResponse
from flowguide.schemas.build_order import (
    BuildOrderResponse,
    ServiceUsageSummaryResponse,
    StepNamesResponse,
    TriggerStepsResponse,
    WorkflowStatsResponse,
)
from flowguide.services.workflow import (
    BuildOrderError,
    GraphTooLargeError,
    InvalidWorkflowJsonError,
)

router = APIRouter()

WorkflowBody = Annotated[
    Any,
    Body(
        description="Workflow JSON with `nodes` and `connections`",
        examples=[
            {
                "name": "Webhook to email",
                "nodes": [
                    {"id": "1", "name": "Webhook", "type": "n8n-nodes-base.webhook"},
                    {"id": "2", "name": "Send Email", "type": "n8n-nodes-base.emailSend"},
                ],
                "connections": {
                    "Webhook": {"main": [[{"node": "Send Email", "type": "main", "index": 0}]]}
                },
            }
        ],
    ),
]

ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    413: {"model": ErrorResponse, "description": "Workflow exceeds the node limit"},
    422: {"model": ErrorResponse, "description": "Body is not a workflow JSON object"},
}


def _raise_http_error(error: BuildOrderError) -> NoReturn:
    """Translate a service error into an HTTPException with an ErrorResponse body."""
    if isinstance(error, GraphTooLargeError):
        status_code = 413  # Content Too Large
    elif isinstance(error, InvalidWorkflowJsonError):
        status_code = 422  # Unprocessable Content
    else:
        status_code = status.HTTP_400_BAD_REQUEST
    raise HTTPException(
        status_code=status_code,
        detail=ErrorResponse(
            error=error.error_code,
            message=error.message,
            details=error.details,
        ).model_dump(),
    ) from error


# =============================================================================
# Build Order Endpoints
# =============================================================================


@router.post(
    "",
    response_model=BuildOrderResponse,
    summary="Extract Build Order",
    description="Linearize a workflow into numbered build steps with connection guidance.",
    responses=ERROR_RESPONSES,
)
async def extract_build_order(
    service: BuildOrderServiceDep,
    workflow: WorkflowBody,
    include_connections: Annotated[
        bool,
        Query(description="Attach connection guidance to each step"),
    ] = True,
) -> BuildOrderResponse:
    """Extract the full build order of a workflow.

    Args:
        service: Build-order service (injected).
        workflow: Workflow JSON.
        include_connections: When false, ``connectionInfo`` is null on every step.

    Returns:
        BuildOrderResponse with steps, statistics and the degraded flag.

    Raises:
        HTTPException: 422 if the body is not an object, 413 if too large.
    """
    try:
        return service.build_order(workflow, include_connections=include_connections)
    except BuildOrderError as e:
        _raise_http_error(e)


@router.post(
    "/names",
    response_model=StepNamesResponse,
    summary="Build Order Step Names",
    responses=ERROR_RESPONSES,
)
async def extract_step_names(
    service: BuildOrderServiceDep,
    workflow: WorkflowBody,
) -> StepNamesResponse:
    """Step names in build order, with return markers for branch returns."""
    try:
        return service.names(workflow)
    except BuildOrderError as e:
        _raise_http_error(e)


@router.post(
    "/triggers",
    response_model=TriggerStepsResponse,
    summary="Build Order Trigger Steps",
    responses=ERROR_RESPONSES,
)
async def extract_trigger_steps(
    service: BuildOrderServiceDep,
    workflow: WorkflowBody,
) -> TriggerStepsResponse:
    """Trigger steps only."""
    try:
        return service.triggers(workflow)
    except BuildOrderError as e:
        _raise_http_error(e)


@router.post(
    "/stats",
    response_model=WorkflowStatsResponse,
    summary="Build Order Statistics",
    responses=ERROR_RESPONSES,
)
async def extract_stats(
    service: BuildOrderServiceDep,
    workflow: WorkflowBody,
) -> WorkflowStatsResponse:
    """Step counts and complexity label."""
    try:
        return service.stats(workflow)
    except BuildOrderError as e:
        _raise_http_error(e)


@router.post(
    "/services",
    response_model=ServiceUsageSummaryResponse,
    summary="Service Usage Summary",
    responses=ERROR_RESPONSES,
)
async def extract_service_usage(
    service: BuildOrderServiceDep,
    workflow: WorkflowBody,
) -> ServiceUsageSummaryResponse:
    """External services used by the workflow and how often."""
    try:
        return service.service_usage(workflow)
    except BuildOrderError as e:
        _raise_http_error(e)
