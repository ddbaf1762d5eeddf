"""Workflow build-order engine.

This package turns an automation workflow graph into a step-by-step build
order a person can follow to recreate the workflow by hand.

Components:
Engine:
- prepare_graph: Filters annotation nodes, builds id/name lookup tables
- build_connection_index: Bidirectional connection records and projections
- BuildOrderTraverser: Depth-first walk with merge waiting, dependency
  pull-forward, branch return steps and bounded fallback recovery
- annotate_steps: Connection guidance and final numbering
- build_order: The whole pipeline

Views:
- compute_stats, step_names, trigger_steps: Projections of a build order
- describe_step: Readable step descriptions
- identify_service, summarize_service_usage: Usage statistics

Example:
    >>> from flowguide.services.workflow import build_order, step_names
    >>> result = build_order(workflow_json)
    >>> step_names(result.steps)
"""

# ============================================================================
# Engine
# ============================================================================

from flowguide.services.workflow.algorithms import GraphAlgorithms
from flowguide.services.workflow.annotator import annotate_steps
from flowguide.services.workflow.graph import Graph
from flowguide.services.workflow.indexer import ConnectionIndex, build_connection_index
from flowguide.services.workflow.linearizer import build_order, get_workflow_steps_in_order
from flowguide.services.workflow.preprocessor import PreparedGraph, prepare_graph
from flowguide.services.workflow.traversal import BuildOrderTraverser, RecoveryState
from flowguide.services.workflow.types import (
    BuildOrderOptions,
    BuildOrderResult,
    ConnectionInfo,
    ConnectionRecord,
    ConnectionType,
    RealStep,
    ReturnStep,
    Step,
    TaskNode,
)

# ============================================================================
# Views and service boundary
# ============================================================================

from flowguide.services.workflow.descriptions import describe_step
from flowguide.services.workflow.exceptions import (
    BuildOrderError,
    GraphTooLargeError,
    InvalidWorkflowJsonError,
)
from flowguide.services.workflow.loader import check_workflow_size, load_workflow_json
from flowguide.services.workflow.service_identity import (
    ServiceInfo,
    ServiceUsage,
    identify_service,
    summarize_service_usage,
)
from flowguide.services.workflow.views import (
    WorkflowStats,
    compute_stats,
    step_names,
    trigger_steps,
)

__all__ = [
    # ============================================================================
    # Engine
    # ============================================================================
    "BuildOrderOptions",
    "BuildOrderResult",
    "BuildOrderTraverser",
    "ConnectionIndex",
    "ConnectionInfo",
    "ConnectionRecord",
    "ConnectionType",
    "Graph",
    "GraphAlgorithms",
    "PreparedGraph",
    "RealStep",
    "RecoveryState",
    "ReturnStep",
    "Step",
    "TaskNode",
    "annotate_steps",
    "build_connection_index",
    "build_order",
    "get_workflow_steps_in_order",
    "prepare_graph",
    # ============================================================================
    # Views and service boundary
    # ============================================================================
    "BuildOrderError",
    "GraphTooLargeError",
    "InvalidWorkflowJsonError",
    "ServiceInfo",
    "ServiceUsage",
    "WorkflowStats",
    "check_workflow_size",
    "compute_stats",
    "describe_step",
    "identify_service",
    "load_workflow_json",
    "step_names",
    "summarize_service_usage",
    "trigger_steps",
]
