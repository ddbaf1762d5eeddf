"""Depth-first traversal that turns a workflow graph into a build order.

The walk follows ``main`` edges only. Capability providers (language models,
tools, memories, parsers) are pulled in right before the node that consumes
them. Merge points wait until every producer has been built, and true
branches are separated by synthetic :class:`ReturnStep` instructions.

Nodes the walk cannot reach (disconnected islands, merges fed by a cycle) are
recovered by a bounded fallback loop, so every retained node is emitted
exactly once whatever the input looks like.

The walk is iterative: each visit is a generator that yields the children it
wants visited, and :meth:`BuildOrderTraverser.visit` drives those generators
from an explicit stack. Long chains therefore never hit the recursion limit.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from enum import Enum
from typing import TYPE_CHECKING

from flowguide.services.workflow.algorithms import GraphAlgorithms
from flowguide.services.workflow.types import (
    BuildOrderOptions,
    BuildOrderResult,
    RealStep,
    ReturnStep,
    Step,
)

if TYPE_CHECKING:
    from flowguide.services.workflow.indexer import ConnectionIndex
    from flowguide.services.workflow.preprocessor import PreparedGraph

logger = logging.getLogger(__name__)


class RecoveryState(str, Enum):
    """States of the fallback recovery loop."""

    SWEEPING = "sweeping"
    COMPLETE = "complete"
    DEADLOCKED = "deadlocked"
    EXHAUSTED = "exhausted"

    def __str__(self) -> str:
        """Return the string value for serialization."""
        return self.value


class BuildOrderTraverser:
    """Single-use traversal state for one workflow.

    Attributes:
        in_progress: Nodes whose visit has started but not finished.
        finalized: Nodes visited along the primary flow.
        emitted: Nodes that already produced a :class:`RealStep`. A
            capability provider can be emitted without being finalized.
        recovery_state: Outcome of the fallback loop, ``None`` until run.
    """

    def __init__(
        self,
        prepared: PreparedGraph,
        index: ConnectionIndex,
        options: BuildOrderOptions | None = None,
    ) -> None:
        self._nodes = prepared.nodes
        self._index = index
        self._options = options or BuildOrderOptions()
        self._steps: list[Step] = []
        self.in_progress: set[str] = set()
        self.finalized: set[str] = set()
        self.emitted: set[str] = set()
        self.recovery_state: RecoveryState | None = None
        self.sweeps = 0

    @property
    def degraded(self) -> bool:
        """True when some nodes had to be force-emitted."""
        return self.recovery_state in (RecoveryState.DEADLOCKED, RecoveryState.EXHAUSTED)

    def entry_points(self) -> list[str]:
        """Nodes without primary producers, excluding pure capability providers.

        Providers are emitted next to their consumer instead of at the top of
        the tutorial.
        """
        return [
            node_id
            for node_id in self._nodes
            if not self._index.parents(node_id)
            and not self._index.is_capability_provider(node_id)
        ]

    def run(self) -> BuildOrderResult:
        """Walk from every entry point, then recover whatever is left."""
        entries = self.entry_points()
        unreachable = GraphAlgorithms.find_unreachable_from(self._index.primary, entries)
        if unreachable:
            logger.debug(
                f"{len(unreachable)} node(s) not reachable from entry points",
                extra={"context": {"unreachable": unreachable}},
            )

        for node_id in entries:
            self.visit(node_id)
        self.recover()

        return BuildOrderResult(steps=list(self._steps), degraded=self.degraded)

    # ------------------------------------------------------------------
    # Primary walk
    # ------------------------------------------------------------------

    def visit(self, node_id: str) -> None:
        """Visit ``node_id`` and everything it leads to."""
        stack: list[Iterator[str]] = [self._walk(node_id)]
        while stack:
            child = next(stack[-1], None)
            if child is None:
                stack.pop()
            else:
                stack.append(self._walk(child))

    def _walk(self, node_id: str) -> Iterator[str]:
        if node_id in self.finalized or node_id in self.in_progress:
            return
        if self._index.is_merge_node(node_id) and not self._parents_finalized(node_id):
            # The last producer to finish visits this node again.
            return

        self.in_progress.add(node_id)
        self.finalized.add(node_id)
        self._emit_with_dependencies(node_id)

        children = self._index.children(node_id)
        if len(children) > 1 and self._is_true_branching(node_id):
            node = self._nodes[node_id]
            for branch_index, branch in enumerate(self._branches(node_id), start=1):
                if branch_index > 1:
                    self._steps.append(ReturnStep.for_branch(node, branch_index - 1))
                yield from branch
        else:
            yield from children

        self.in_progress.discard(node_id)

    def _parents_finalized(self, node_id: str) -> bool:
        return all(parent in self.finalized for parent in self._index.parents(node_id))

    def _emit(self, node_id: str, *, is_dependency: bool = False) -> None:
        node = self._nodes[node_id]
        self._steps.append(
            RealStep(
                node=node,
                is_trigger=node.is_trigger,
                is_merge_node=self._index.is_merge_node(node_id),
                is_dependency=is_dependency,
            )
        )
        self.emitted.add(node_id)

    def _emit_with_dependencies(self, node_id: str) -> None:
        """Emit providers first, then the node consuming them.

        Providers of providers (a tool feeding an agent used as a tool) are
        pulled too, deepest first. A provider that still waits on a primary
        producer is left for the primary walk so primary edges stay in order.
        """
        if node_id in self.emitted:
            return
        entered = {node_id}
        pending: list[tuple[str, Iterator[str]]] = [
            (node_id, iter(self._index.dependencies(node_id)))
        ]
        while pending:
            current, providers = pending[-1]
            provider_id = next(providers, None)
            if provider_id is None:
                pending.pop()
                self._emit(current, is_dependency=current != node_id)
            elif (
                provider_id not in self.emitted
                and provider_id not in entered
                and self._parents_finalized(provider_id)
            ):
                entered.add(provider_id)
                pending.append((provider_id, iter(self._index.dependencies(provider_id))))

    def _is_true_branching(self, node_id: str) -> bool:
        """Decide whether the outputs of a node are mutually exclusive paths.

        Conditional and switch nodes always branch. Any other node branches
        when its primary edges use several output groups, or a single group
        fans out to several targets all on input 0.
        """
        if self._options.is_branching_type(self._nodes[node_id].type):
            return True
        groups = self._index.primary_groups.get(node_id, [])
        if len(groups) > 1:
            return True
        return (
            len(groups) == 1
            and len(groups[0]) > 1
            and all(record.input_index == 0 for record in groups[0])
        )

    def _branches(self, node_id: str) -> list[list[str]]:
        """Split the children of a branching node into branches.

        Each output group is one branch; a single fanned-out group yields one
        branch per target.
        """
        groups = self._index.primary_groups.get(node_id, [])
        if len(groups) > 1:
            return [[record.node_id for record in group] for group in groups]
        return [[child] for child in self._index.children(node_id)]

    # ------------------------------------------------------------------
    # Fallback recovery
    # ------------------------------------------------------------------

    def recover(self) -> RecoveryState:
        """Finalize nodes the primary walk never reached.

        Each sweep visits, in node order, every unfinalized node whose primary
        producers are all finalized. The loop stops when every node is
        finalized, when a sweep makes no progress, or after
        ``fallback_iteration_factor * node_count`` sweeps. The last two cases
        force-emit the stragglers in node order.
        """
        budget = self._options.fallback_iteration_factor * len(self._nodes)
        state = RecoveryState.SWEEPING

        while state is RecoveryState.SWEEPING:
            if len(self.finalized) == len(self._nodes):
                state = RecoveryState.COMPLETE
            elif self.sweeps >= budget:
                state = RecoveryState.EXHAUSTED
            elif not self._sweep():
                state = RecoveryState.DEADLOCKED

        if state is not RecoveryState.COMPLETE:
            self._force_emit(state)
        self.recovery_state = state
        return state

    def _sweep(self) -> bool:
        self.sweeps += 1
        before = len(self.finalized)
        for node_id in self._nodes:
            if node_id not in self.finalized and self._parents_finalized(node_id):
                self.visit(node_id)
        return len(self.finalized) > before

    def _force_emit(self, state: RecoveryState) -> None:
        stragglers = [node_id for node_id in self._nodes if node_id not in self.finalized]
        cycle = GraphAlgorithms.detect_cycle(self._index.primary)
        logger.warning(
            f"Build order degraded ({state}): force-emitting {len(stragglers)} node(s)",
            extra={
                "context": {
                    "recovery_state": str(state),
                    "sweeps": self.sweeps,
                    "nodes": [self._nodes[node_id].name for node_id in stragglers],
                    "cycle": [self._nodes[node_id].name for node_id in cycle or []],
                }
            },
        )
        for node_id in stragglers:
            self.finalized.add(node_id)
            if node_id not in self.emitted:
                self._emit(node_id)


def traverse(
    prepared: PreparedGraph,
    index: ConnectionIndex,
    options: BuildOrderOptions | None = None,
) -> BuildOrderResult:
    """Produce the unnumbered, unannotated build order for a workflow."""
    return BuildOrderTraverser(prepared, index, options).run()


__all__ = [
    "BuildOrderTraverser",
    "RecoveryState",
    "traverse",
]
