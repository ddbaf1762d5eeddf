"""Tests for build-order projections."""

import pytest

from flowguide.services.workflow import build_order, compute_stats, step_names, trigger_steps
from flowguide.services.workflow.views import complexity_label


class TestComputeStats:
    """compute_stats counts."""

    def test_conditional_workflow(self, if_workflow) -> None:
        """Test return steps are counted apart from real steps."""
        stats = compute_stats(build_order(if_workflow).steps)

        assert stats.total_steps == 5
        assert stats.real_steps == 4
        assert stats.return_steps == 1
        assert stats.trigger_steps == 0
        assert stats.action_steps == 4
        assert stats.complexity == "Beginner"

    def test_webhook_is_not_a_trigger_type(self, if_workflow) -> None:
        """Test trigger detection relies on the type name only."""
        assert trigger_steps(build_order(if_workflow).steps) == []

    def test_agent_workflow(self, agent_workflow) -> None:
        """Test dependency and trigger counts."""
        stats = compute_stats(build_order(agent_workflow).steps)

        assert stats.trigger_steps == 1
        assert stats.dependency_steps == 1
        assert stats.action_steps == 3
        assert stats.node_types == (
            "@n8n/n8n-nodes-langchain.chatTrigger",
            "@n8n/n8n-nodes-langchain.lmChatOpenAi",
            "@n8n/n8n-nodes-langchain.agent",
            "n8n-nodes-base.respondToWebhook",
        )

    def test_merge_count(self, merge_workflow) -> None:
        """Test merge points are counted."""
        stats = compute_stats(build_order(merge_workflow).steps)
        assert stats.merge_steps == 1
        assert stats.trigger_steps == 2

    def test_empty(self) -> None:
        """Test an empty build order."""
        stats = compute_stats([])
        assert stats.total_steps == 0
        assert stats.node_types == ()
        assert stats.complexity == "Beginner"


class TestComplexityLabel:
    """Complexity thresholds."""

    @pytest.mark.parametrize(
        ("count", "label"),
        [(0, "Beginner"), (5, "Beginner"), (6, "Intermediate"), (15, "Intermediate"), (16, "Advanced")],
    )
    def test_thresholds(self, count: int, label: str) -> None:
        """Test boundaries are inclusive."""
        assert complexity_label(count) == label


class TestNamesAndTriggers:
    """Name and trigger projections."""

    def test_step_names_marks_returns(self, if_workflow) -> None:
        """Test return steps render with the return prefix."""
        assert step_names(build_order(if_workflow).steps)[3] == "↩ Return to 'IF'"

    def test_trigger_steps(self, merge_workflow) -> None:
        """Test triggers are listed in build order."""
        triggers = trigger_steps(build_order(merge_workflow).steps)
        assert [step.name for step in triggers] == ["Trigger1", "Trigger2"]
