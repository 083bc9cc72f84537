"""Published graph progress state.

Snapshots are frozen; the state machine builds a fresh one per batch instead of
mutating in place, so observers can hold on to any snapshot they receive.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator


if TYPE_CHECKING:
    from graphstream.schemas.graph_nodes import NodeRegistry


class NodeHistoryEntry(BaseModel):
    """A completed sub-node and the content it streamed."""

    node_name: str
    final_message: str = ""

    model_config = ConfigDict(frozen=True)


class ProgressSnapshot(BaseModel):
    """Single authoritative view of graph execution progress."""

    active_node_name: str | None = None
    node_content_by_id: Mapping[str, str] = Field(
        default_factory=dict, validate_default=True
    )
    completed_node_log: tuple[NodeHistoryEntry, ...] = ()
    running: bool = False
    visible: bool = False
    status_text: str | None = None
    final_output: str | None = None

    model_config = ConfigDict(frozen=True)

    @field_validator("node_content_by_id", mode="after")
    @classmethod
    def _freeze_content(cls, value: Mapping[str, str]) -> Mapping[str, str]:
        # Read-only view over a private copy; subscribers share this object
        return MappingProxyType(dict(value))

    @field_serializer("node_content_by_id")
    def _serialize_content(self, value: Mapping[str, str]) -> dict[str, str]:
        return dict(value)

    def is_initial(self) -> bool:
        return self == ProgressSnapshot()

    def active_display_name(self, registry: NodeRegistry) -> str | None:
        """Formatted name of the active node, if any."""
        return registry.display_name(self.active_node_name)


@dataclass
class ProgressDraft:
    """Mutable working copy used while folding one batch."""

    active_node_name: str | None = None
    node_content_by_id: dict[str, str] = field(default_factory=dict)
    completed_node_log: list[NodeHistoryEntry] = field(default_factory=list)
    running: bool = False
    visible: bool = False
    status_text: str | None = None
    final_output: str | None = None

    @classmethod
    def from_snapshot(cls, snapshot: ProgressSnapshot) -> ProgressDraft:
        return cls(
            active_node_name=snapshot.active_node_name,
            node_content_by_id=dict(snapshot.node_content_by_id),
            completed_node_log=list(snapshot.completed_node_log),
            running=snapshot.running,
            visible=snapshot.visible,
            status_text=snapshot.status_text,
            final_output=snapshot.final_output,
        )

    def publish(self) -> ProgressSnapshot:
        return ProgressSnapshot(
            active_node_name=self.active_node_name,
            node_content_by_id=dict(self.node_content_by_id),
            completed_node_log=tuple(self.completed_node_log),
            running=self.running,
            visible=self.visible,
            status_text=self.status_text,
            final_output=self.final_output,
        )
