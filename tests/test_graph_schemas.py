"""Tests for event, registry and snapshot schemas."""

from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from graphstream.core.exceptions import RegistryConfigError
from graphstream.schemas.graph_events import EventKind, StreamingEvent
from graphstream.schemas.graph_nodes import NodeMetadata, NodeRegistry, NodeRole
from graphstream.schemas.graph_progress import (
    NodeHistoryEntry,
    ProgressDraft,
    ProgressSnapshot,
)
from tests.stream_factories import GRAPH, PRODUCT_VISION_NODES


class TestEventKind:
    @pytest.mark.parametrize(
        ("wire", "kind"),
        [
            ("on_chain_start", EventKind.CHAIN_START),
            ("on_chain_end", EventKind.CHAIN_END),
            ("on_chat_model_stream", EventKind.MODEL_STREAM),
            ("on_llm_end", EventKind.OTHER),
            (None, EventKind.OTHER),
            (3, EventKind.OTHER),
        ],
    )
    def test_from_wire(self, wire, kind) -> None:
        assert EventKind.from_wire(wire) is kind


class TestStreamingEvent:
    def test_extra_keys_are_ignored(self) -> None:
        evt = StreamingEvent.model_validate(
            {"event": "on_chain_start", "run_id": "r1", "name": "A", "tags": ["x"]}
        )
        assert evt.to_record().emitter_name == "A"

    def test_content_is_read_from_nested_chunk(self) -> None:
        evt = StreamingEvent.model_validate(
            {
                "event": "on_chat_model_stream",
                "run_id": "r1",
                "data": {"chunk": {"kwargs": {"content": "Hi"}}},
            }
        )
        assert evt.content() == "Hi"
        assert evt.to_record().content_fragment == "Hi"


class TestNodeRegistry:
    def test_camel_case_config_loads(self, registry) -> None:
        graph = registry.get(GRAPH)
        assert graph is not None
        assert graph.display_text == "Analyzing your message"
        assert graph.formatted_name == "Product Vision Graph"
        assert graph.is_top_level_node is True
        assert registry.get("vision_rewriter").is_final_output_node is True

    def test_snake_case_fields_are_accepted(self) -> None:
        meta = NodeMetadata(display_text="Working", is_final_output_node=True)
        assert meta.role is NodeRole.FINAL_OUTPUT

    @pytest.mark.parametrize(
        ("flags", "role"),
        [
            ({}, NodeRole.INTERMEDIATE),
            ({"isFinalOutput": True}, NodeRole.FINAL_OUTPUT),
            ({"isGraphNode": True}, NodeRole.TOP_LEVEL),
            ({"isGraphNode": True, "isFinalOutput": True}, NodeRole.TOP_LEVEL),
        ],
    )
    def test_role(self, flags, role) -> None:
        meta = NodeMetadata.model_validate({"actionText": "x", **flags})
        assert meta.role is role

    def test_lookup_helpers(self, registry) -> None:
        assert GRAPH in registry
        assert "missing" not in registry
        assert registry.get(None) is None
        assert len(registry) == len(PRODUCT_VISION_NODES)
        assert registry.top_level_names() == frozenset({GRAPH})
        assert registry.display_name("extract_objectives") == "Extract Objectives"
        assert registry.display_name("unknown") == "unknown"

    def test_registry_is_immutable(self, registry) -> None:
        with pytest.raises(ValidationError):
            registry.nodes = {}

    def test_from_mapping_passes_registry_through(self, registry) -> None:
        assert NodeRegistry.from_mapping(registry) is registry

    def test_from_mapping_accepts_metadata_instances(self) -> None:
        meta = NodeMetadata(display_text="x")
        assert NodeRegistry.from_mapping({"a": meta}).get("a") is meta

    @pytest.mark.parametrize(
        "bad",
        [
            {"a": {"isGraphNode": True}},  # no display text
            {"a": {"actionText": "x", "unexpected": 1}},
            {"a": "not a dict"},
            ["not", "a", "mapping"],
        ],
    )
    def test_invalid_mapping_raises_config_error(self, bad) -> None:
        with pytest.raises(RegistryConfigError) as exc_info:
            NodeRegistry.from_mapping(bad)
        assert exc_info.value.error_code == "invalid_registry"

    def test_from_json_file(self, tmp_path) -> None:
        path = tmp_path / "nodes.json"
        path.write_text(json.dumps(PRODUCT_VISION_NODES), encoding="utf-8")

        registry = NodeRegistry.from_json_file(path)

        assert registry.top_level_names() == frozenset({GRAPH})

    def test_from_json_file_errors(self, tmp_path) -> None:
        bad = tmp_path / "bad.json"
        bad.write_text("{nope", encoding="utf-8")

        with pytest.raises(RegistryConfigError):
            NodeRegistry.from_json_file(bad)
        with pytest.raises(RegistryConfigError):
            NodeRegistry.from_json_file(tmp_path / "missing.json")


class TestProgressSnapshot:
    def test_default_snapshot(self) -> None:
        snap = ProgressSnapshot()
        assert snap.active_node_name is None
        assert snap.node_content_by_id == {}
        assert snap.completed_node_log == ()
        assert snap.running is False
        assert snap.visible is False
        assert snap.status_text is None
        assert snap.final_output is None
        assert snap.is_initial()

    def test_draft_round_trip_copies_containers(self) -> None:
        snap = ProgressSnapshot(
            active_node_name="a",
            node_content_by_id={"a": "x"},
            completed_node_log=(NodeHistoryEntry(node_name="a", final_message="x"),),
            running=True,
        )

        draft = ProgressDraft.from_snapshot(snap)
        draft.node_content_by_id["a"] += "y"
        draft.completed_node_log.append(NodeHistoryEntry(node_name="b"))
        published = draft.publish()

        assert snap.node_content_by_id == {"a": "x"}
        assert len(snap.completed_node_log) == 1
        assert published.node_content_by_id == {"a": "xy"}
        assert len(published.completed_node_log) == 2

    def test_active_display_name(self, registry) -> None:
        snap = ProgressSnapshot(active_node_name="vision_rewriter")
        assert snap.active_display_name(registry) == "Vision Writer"
        assert ProgressSnapshot().active_display_name(registry) is None
