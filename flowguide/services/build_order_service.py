"""Build-order service layer.

This module sits between the HTTP routes and the pure build-order engine:
it reads raw payloads, enforces the configured size limit, derives engine
options from settings and converts engine results into response schemas.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from flowguide.core.logging import LogContext, get_logger
from flowguide.schemas.build_order import (
    BuildOrderResponse,
    ServiceUsageResponse,
    ServiceUsageSummaryResponse,
    StepNamesResponse,
    StepResponse,
    TriggerStepsResponse,
    WorkflowStatsResponse,
)
from flowguide.services.workflow import (
    BuildOrderResult,
    build_order,
    check_workflow_size,
    compute_stats,
    load_workflow_json,
    step_names,
    summarize_service_usage,
    trigger_steps,
)

if TYPE_CHECKING:
    from flowguide.core.config import Settings


class BuildOrderService:
    """Service layer for build-order extraction.

    Logging:
        - Logs every extraction with node and step counts
        - Logs degraded results (forced fallback emission) as warnings
        - Tags engine log records with the workflow name
    """

    def __init__(self, settings: Settings) -> None:
        """Initialize build-order service.

        Args:
            settings: Application settings supplying limits and engine options.
        """
        self.settings = settings
        self.logger = get_logger(__name__)

    def extract(self, payload: Any, *, include_connections: bool = True) -> BuildOrderResult:
        """Run the engine on a raw workflow payload.

        Args:
            payload: Workflow JSON as a mapping or a JSON string.
            include_connections: Attach connection guidance to each step.

        Returns:
            The engine result.

        Raises:
            InvalidWorkflowJsonError: If the payload is not a JSON object.
            GraphTooLargeError: If the workflow exceeds MAX_WORKFLOW_NODES.
        """
        workflow = load_workflow_json(payload)
        check_workflow_size(workflow, self.settings.MAX_WORKFLOW_NODES)

        workflow_name = workflow.get("name")
        with LogContext(self.logger, workflow_name=workflow_name):
            result = build_order(
                workflow,
                self.settings.build_order_options(include_connection_info=include_connections),
            )

        context = {
            "action": "extract_build_order",
            "workflow_name": workflow_name,
            "steps": len(result),
            "degraded": result.degraded,
        }
        if result.degraded:
            self.logger.warning(
                "Build order completed by forced fallback emission",
                extra={"context": context},
            )
        else:
            self.logger.info("Build order extracted", extra={"context": context})
        return result

    def build_order(self, payload: Any, *, include_connections: bool = True) -> BuildOrderResponse:
        """Full build order with statistics."""
        result = self.extract(payload, include_connections=include_connections)
        return BuildOrderResponse(
            steps=[StepResponse.from_step(step) for step in result.steps],
            stats=WorkflowStatsResponse.from_stats(compute_stats(result.steps)),
            degraded=result.degraded,
        )

    def names(self, payload: Any) -> StepNamesResponse:
        result = self.extract(payload, include_connections=False)
        return StepNamesResponse(names=step_names(result.steps))

    def triggers(self, payload: Any) -> TriggerStepsResponse:
        result = self.extract(payload)
        return TriggerStepsResponse(
            steps=[StepResponse.from_step(step) for step in trigger_steps(result.steps)],
        )

    def stats(self, payload: Any) -> WorkflowStatsResponse:
        result = self.extract(payload, include_connections=False)
        return WorkflowStatsResponse.from_stats(compute_stats(result.steps))

    def service_usage(self, payload: Any) -> ServiceUsageSummaryResponse:
        """Service usage summary in order of first appearance."""
        result = self.extract(payload, include_connections=False)
        usage = [ServiceUsageResponse.from_usage(item) for item in summarize_service_usage(result.steps)]
        return ServiceUsageSummaryResponse(services=usage, total_services=len(usage))


__all__ = [
    "BuildOrderService",
]
