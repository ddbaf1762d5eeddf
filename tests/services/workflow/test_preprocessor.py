"""Tests for workflow JSON preprocessing."""

import logging

import pytest

from flowguide.services.workflow.preprocessor import is_annotation_type, prepare_graph


class TestMalformedInput:
    """prepare_graph returns None instead of raising."""

    @pytest.mark.parametrize(
        "raw",
        [
            None,
            [],
            "not a workflow",
            {"nodes": []},
            {"connections": {}},
            {"nodes": {}, "connections": {}},
            {"nodes": [], "connections": []},
        ],
    )
    def test_missing_nodes_or_connections(self, raw: object) -> None:
        """Test inputs without a node list or a connections map."""
        assert prepare_graph(raw) is None

    def test_logs_warning(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test that malformed input is reported at WARNING level."""
        with caplog.at_level(logging.WARNING):
            prepare_graph({"nodes": []})
        assert "missing 'nodes' or 'connections'" in caplog.text


class TestNodeFiltering:
    """Annotation and malformed nodes never reach the engine."""

    def test_sticky_notes_are_dropped(self, builder) -> None:
        """Test that sticky notes are filtered by type."""
        workflow = (
            builder.add_node("Note", "n8n-nodes-base.stickyNote")
            .add_node("Webhook", "n8n-nodes-base.webhook")
            .build()
        )
        prepared = prepare_graph(workflow)
        assert prepared is not None
        assert [node.name for node in prepared.nodes.values()] == ["Webhook"]
        assert prepared.resolve("Note") is None

    def test_malformed_nodes_are_skipped(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test nodes missing id, name or type are skipped with a warning."""
        workflow = {
            "nodes": [
                {"id": "1", "name": "Good", "type": "n8n-nodes-base.set"},
                {"id": "2", "name": "No type"},
                {"name": "No id", "type": "n8n-nodes-base.set"},
                "not a node",
            ],
            "connections": {},
        }
        with caplog.at_level(logging.WARNING):
            prepared = prepare_graph(workflow)
        assert prepared is not None
        assert list(prepared.nodes) == ["1"]
        assert "Skipped 3 malformed node(s)" in caplog.text

    @pytest.mark.parametrize(
        ("node_type", "expected"),
        [
            ("n8n-nodes-base.stickyNote", True),
            ("n8n-nodes-base.StickyNote", True),
            ("n8n-nodes-base.set", False),
        ],
    )
    def test_is_annotation_type(self, node_type: str, expected: bool) -> None:
        """Test annotation type matching is case-insensitive."""
        assert is_annotation_type(node_type) is expected


class TestTaskNodes:
    """Conversion of raw node objects."""

    def test_fields_and_passthrough(self) -> None:
        """Test modelled fields are parsed and the rest is kept in extra."""
        workflow = {
            "nodes": [
                {
                    "id": "abc",
                    "name": "Fetch",
                    "type": "n8n-nodes-base.httpRequest",
                    "typeVersion": 4.2,
                    "parameters": {"url": "https://api.example.com"},
                    "position": [240, 300],
                    "credentials": {"httpHeaderAuth": {"id": "7"}},
                }
            ],
            "connections": {},
        }
        prepared = prepare_graph(workflow)
        assert prepared is not None
        node = prepared.nodes["abc"]
        assert node.parameters == {"url": "https://api.example.com"}
        assert node.position == [240, 300]
        assert node.extra == {
            "typeVersion": 4.2,
            "credentials": {"httpHeaderAuth": {"id": "7"}},
        }

    @pytest.mark.parametrize(
        "position",
        [[240, 300], [12.5, -4], None, "10,20", [1], ["x", "y"], {"x": 1}],
    )
    def test_position_is_kept_verbatim(self, position: object) -> None:
        """Test that positions are neither converted nor defaulted."""
        workflow = {
            "nodes": [{"id": "1", "name": "A", "type": "t", "position": position}],
            "connections": {},
        }
        prepared = prepare_graph(workflow)
        assert prepared is not None
        assert prepared.nodes["1"].position == position
        assert type(prepared.nodes["1"].position) is type(position)

    def test_missing_position_is_none(self) -> None:
        """Test that nodes without a position carry None."""
        prepared = prepare_graph(
            {"nodes": [{"id": "1", "name": "A", "type": "t"}], "connections": {}}
        )
        assert prepared is not None
        assert prepared.nodes["1"].position is None

    def test_integer_ids_are_stringified(self) -> None:
        """Test that numeric ids are kept instead of skipped."""
        workflow = {
            "nodes": [
                {"id": "t", "name": "T", "type": "n8n-nodes-base.manualTrigger"},
                {"id": 2, "name": "B", "type": "n8n-nodes-base.set"},
                {"id": True, "name": "Flag", "type": "n8n-nodes-base.set"},
            ],
            "connections": {"T": {"main": [[{"node": "B", "type": "main", "index": 0}]]}},
        }
        prepared = prepare_graph(workflow)
        assert prepared is not None
        assert list(prepared.nodes) == ["t", "2"]
        assert prepared.resolve("B") == "2"

    def test_trigger_detection(self, builder) -> None:
        """Test that any type containing 'trigger' marks a trigger."""
        workflow = (
            builder.add_node("Chat", "@n8n/n8n-nodes-langchain.chatTrigger")
            .add_node("Set")
            .build()
        )
        prepared = prepare_graph(workflow)
        assert prepared is not None
        assert [node.is_trigger for node in prepared.nodes.values()] == [True, False]


class TestNameResolution:
    """Connections reference nodes by name."""

    def test_duplicate_names_resolve_to_last_node(self) -> None:
        """Test the later node wins the name lookup."""
        workflow = {
            "nodes": [
                {"id": "first", "name": "Set", "type": "n8n-nodes-base.set"},
                {"id": "second", "name": "Set", "type": "n8n-nodes-base.set"},
            ],
            "connections": {},
        }
        prepared = prepare_graph(workflow)
        assert prepared is not None
        assert len(prepared) == 2
        assert prepared.resolve("Set") == "second"

    def test_resolve_ignores_non_strings(self, builder) -> None:
        """Test that non-string endpoints never resolve."""
        prepared = prepare_graph(builder.add_node("A").build())
        assert prepared is not None
        assert prepared.resolve(None) is None
        assert prepared.resolve(1) is None
