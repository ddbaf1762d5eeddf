"""Tests for the connection index."""

from flowguide.services.workflow.indexer import build_connection_index
from flowguide.services.workflow.preprocessor import prepare_graph
from flowguide.services.workflow.types import ConnectionType


def _index(workflow):
    prepared = prepare_graph(workflow)
    assert prepared is not None
    return build_connection_index(prepared)


class TestConnectionRecords:
    """Outgoing and incoming records."""

    def test_records_both_directions(self, builder) -> None:
        """Test that one connection yields mirrored records."""
        workflow = (
            builder.add_node("Merge", "n8n-nodes-base.merge")
            .add_node("Source")
            .connect("Source", "Merge", input_index=1)
            .build()
        )
        index = _index(workflow)

        (outgoing,) = index.outgoing["id-source"]
        assert outgoing.node_id == "id-merge"
        assert outgoing.node_name == "Merge"
        assert outgoing.kind == "main"
        assert outgoing.output_index == 0
        assert outgoing.input_index == 1

        (incoming,) = index.incoming["id-merge"]
        assert incoming.node_id == "id-source"
        assert incoming.node_name == "Source"
        assert incoming.input_index == 1

    def test_output_index_follows_group_position(self, if_workflow) -> None:
        """Test each output group gets its own output index."""
        index = _index(if_workflow)
        assert [(r.node_name, r.output_index) for r in index.outgoing["id-if"]] == [
            ("X", 0),
            ("Y", 1),
        ]

    def test_connection_type_classification(self, agent_workflow) -> None:
        """Test main edges are main flow and ai_* edges are dependencies."""
        index = _index(agent_workflow)
        (model_edge,) = index.outgoing["id-openai-chat-model"]
        assert model_edge.connection_type is ConnectionType.DEPENDENCY
        (reply_edge,) = index.outgoing["id-ai-agent"]
        assert reply_edge.connection_type is ConnectionType.MAIN_FLOW

    def test_other_kinds_are_conditional(self) -> None:
        """Test that unknown edge kinds are classified as conditional."""
        assert ConnectionType.from_kind("error") is ConnectionType.CONDITIONAL


class TestProjections:
    """Primary and auxiliary graphs."""

    def test_primary_and_auxiliary_split(self, agent_workflow) -> None:
        """Test only main edges land in the primary graph."""
        index = _index(agent_workflow)
        assert index.children("id-chat-trigger") == ["id-ai-agent"]
        assert index.parents("id-ai-agent") == ["id-chat-trigger"]
        assert index.dependencies("id-ai-agent") == ["id-openai-chat-model"]
        assert index.children("id-openai-chat-model") == []

    def test_capability_provider(self, agent_workflow) -> None:
        """Test nodes wired only as auxiliary sources are providers."""
        index = _index(agent_workflow)
        assert index.is_capability_provider("id-openai-chat-model")
        assert not index.is_capability_provider("id-ai-agent")
        assert not index.is_capability_provider("id-chat-trigger")

    def test_merge_node(self, merge_workflow) -> None:
        """Test two primary producers make a merge point."""
        index = _index(merge_workflow)
        assert index.is_merge_node("id-m")
        assert not index.is_merge_node("id-p1")

    def test_primary_groups_skip_empty_outputs(self, builder) -> None:
        """Test outputs with no resolved target are not groups."""
        workflow = (
            builder.add_node("Switch", "n8n-nodes-base.switch")
            .add_node("B")
            .connect("Switch", "B", output=2)
            .build()
        )
        index = _index(workflow)
        groups = index.primary_groups["id-switch"]
        assert len(groups) == 1
        assert groups[0][0].output_index == 2


class TestUnresolvedReferences:
    """Connections that cannot be resolved are dropped."""

    def test_unknown_target_and_source(self, builder) -> None:
        """Test stale names are dropped and counted."""
        workflow = (
            builder.add_node("A")
            .connect("A", "Ghost")
            .connect("Missing", "A")
            .build()
        )
        index = _index(workflow)
        assert index.outgoing["id-a"] == []
        assert index.incoming["id-a"] == []
        assert index.dropped_edges == 2

    def test_edges_to_sticky_notes_are_dropped(self, builder) -> None:
        """Test that connections into filtered annotation nodes vanish."""
        workflow = (
            builder.add_node("A")
            .add_node("Note", "n8n-nodes-base.stickyNote")
            .connect("A", "Note")
            .build()
        )
        index = _index(workflow)
        assert index.children("id-a") == []

    def test_null_groups_and_bad_entries(self) -> None:
        """Test null output groups and non-object targets are tolerated."""
        workflow = {
            "nodes": [
                {"id": "1", "name": "A", "type": "t"},
                {"id": "2", "name": "B", "type": "t"},
            ],
            "connections": {
                "A": {"main": [None, [{"node": "B", "type": "main", "index": 0}, "junk"]]},
                "B": "not a map",
            },
        }
        index = _index(workflow)
        (record,) = index.outgoing["1"]
        assert record.output_index == 1
        assert index.children("1") == ["2"]
