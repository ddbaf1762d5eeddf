"""Projections over an ordered build order."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from flowguide.services.workflow.types import RealStep, ReturnStep, Step

RETURN_STEP_PREFIX = "↩ Return to"

# Real-step counts at or below these bounds get the matching label.
BEGINNER_MAX_STEPS = 5
INTERMEDIATE_MAX_STEPS = 15


@dataclass(frozen=True, slots=True)
class WorkflowStats:
    """Counts and labels derived from a build order."""

    total_steps: int
    real_steps: int
    return_steps: int
    trigger_steps: int
    action_steps: int
    dependency_steps: int
    merge_steps: int
    node_types: tuple[str, ...]
    complexity: str


def complexity_label(real_step_count: int) -> str:
    if real_step_count <= BEGINNER_MAX_STEPS:
        return "Beginner"
    if real_step_count <= INTERMEDIATE_MAX_STEPS:
        return "Intermediate"
    return "Advanced"


def real_steps(steps: Sequence[Step]) -> list[RealStep]:
    return [step for step in steps if isinstance(step, RealStep)]


def compute_stats(steps: Sequence[Step]) -> WorkflowStats:
    """Summarize a build order.

    Return steps count toward ``total_steps`` and ``return_steps`` only.
    """
    real = real_steps(steps)
    triggers = sum(1 for step in real if step.is_trigger)
    return WorkflowStats(
        total_steps=len(steps),
        real_steps=len(real),
        return_steps=len(steps) - len(real),
        trigger_steps=triggers,
        action_steps=len(real) - triggers,
        dependency_steps=sum(1 for step in real if step.is_dependency),
        merge_steps=sum(1 for step in real if step.is_merge_node),
        node_types=tuple(dict.fromkeys(step.type for step in real)),
        complexity=complexity_label(len(real)),
    )


def step_label(step: Step) -> str:
    if isinstance(step, ReturnStep):
        return f"{RETURN_STEP_PREFIX} '{step.return_to_node_name}'"
    return step.name


def step_names(steps: Sequence[Step]) -> list[str]:
    """Names in build order; return steps are rendered with a prefix."""
    return [step_label(step) for step in steps]


def trigger_steps(steps: Sequence[Step]) -> list[RealStep]:
    return [step for step in real_steps(steps) if step.is_trigger]


__all__ = [
    "BEGINNER_MAX_STEPS",
    "INTERMEDIATE_MAX_STEPS",
    "RETURN_STEP_PREFIX",
    "WorkflowStats",
    "complexity_label",
    "compute_stats",
    "real_steps",
    "step_label",
    "step_names",
    "trigger_steps",
]
