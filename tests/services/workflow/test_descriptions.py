"""Tests for step descriptions."""

from flowguide.services.workflow import build_order, describe_step


class TestDescribeStep:
    """describe_step lookups."""

    def test_known_types(self, agent_workflow) -> None:
        """Test table lookups by exact type."""
        steps = build_order(agent_workflow).steps
        descriptions = {step.name: describe_step(step) for step in steps}

        assert descriptions["Chat Trigger"] == "Opens a chat interface for AI conversations"
        assert descriptions["AI Agent"] == "Uses an AI agent to process and answer requests"

    def test_unknown_type_falls_back_to_name(self, builder) -> None:
        """Test unknown types describe the step by name."""
        workflow = builder.add_node("Hedra Render", "community.hedra").build()
        (step,) = build_order(workflow).steps
        assert describe_step(step) == "Executes Hedra Render operation"

    def test_return_step(self, if_workflow) -> None:
        """Test return steps describe the branch return."""
        step = build_order(if_workflow).steps[3]
        assert describe_step(step) == "Return to 'IF' to build the next branch"
