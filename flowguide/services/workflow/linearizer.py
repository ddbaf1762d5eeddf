"""Entry point of the build-order engine.

Example:
    >>> result = build_order(workflow_json)
    >>> [step.name for step in result.steps]
    ['Webhook', 'OpenAI Chat Model', 'AI Agent', 'Send Email']
"""

from __future__ import annotations

import logging
from typing import Any

from flowguide.services.workflow.annotator import annotate_steps
from flowguide.services.workflow.indexer import build_connection_index
from flowguide.services.workflow.preprocessor import prepare_graph
from flowguide.services.workflow.traversal import traverse
from flowguide.services.workflow.types import BuildOrderOptions, BuildOrderResult, Step

logger = logging.getLogger(__name__)


def build_order(
    raw_graph: Any,
    options: BuildOrderOptions | None = None,
) -> BuildOrderResult:
    """Linearize a workflow graph into numbered, annotated build steps.

    Never raises on malformed input: a graph without ``nodes`` or
    ``connections`` yields an empty result, and graphs the walk cannot fully
    order are completed by forced emission (``degraded=True``).

    Args:
        raw_graph: Workflow JSON object.
        options: Engine tunables; defaults apply when omitted.

    Returns:
        :class:`BuildOrderResult` with steps numbered from 1.
    """
    options = options or BuildOrderOptions()

    prepared = prepare_graph(raw_graph)
    if prepared is None:
        return BuildOrderResult(steps=[])

    index = build_connection_index(prepared)
    result = traverse(prepared, index, options)
    steps = annotate_steps(
        result.steps,
        index,
        include_connection_info=options.include_connection_info,
    )

    logger.debug(
        f"Build order ready: {len(steps)} step(s) for {len(prepared)} node(s)",
        extra={"context": {"steps": len(steps), "degraded": result.degraded}},
    )
    return BuildOrderResult(steps=steps, degraded=result.degraded)


def get_workflow_steps_in_order(
    raw_graph: Any,
    options: BuildOrderOptions | None = None,
) -> list[Step]:
    """Convenience wrapper returning only the ordered steps."""
    return build_order(raw_graph, options).steps


__all__ = [
    "build_order",
    "get_workflow_steps_in_order",
]
