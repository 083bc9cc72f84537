"""Schemas for graph engine streaming events.

`StreamingEvent` mirrors the wire shape emitted by the graph engine
(`{event, run_id, name, data?.chunk?.kwargs?.content}`). `EventRecord` is the
normalized, typed form the rest of the pipeline works with.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class EventKind(str, Enum):
    CHAIN_START = "on_chain_start"
    CHAIN_END = "on_chain_end"
    MODEL_STREAM = "on_chat_model_stream"
    OTHER = "other"

    @classmethod
    def from_wire(cls, value: object) -> EventKind:
        """Map a raw `event` value to a kind; unknown values become OTHER."""
        if isinstance(value, str):
            try:
                return cls(value)
            except ValueError:
                return cls.OTHER
        return cls.OTHER


class StreamingEvent(BaseModel):
    """One event object as it appears on the wire.

    Only `run_id` is required; everything else is optional because the
    upstream engine emits many event shapes we don't track.
    """

    event: Any = None
    run_id: str
    name: Any = None
    data: Any = None

    model_config = ConfigDict(extra="ignore")

    def content(self) -> str:
        """Return `data.chunk.kwargs.content`, or "" when any level is missing."""
        value: Any = self.data
        for key in ("chunk", "kwargs", "content"):
            if not isinstance(value, dict):
                return ""
            value = value.get(key)
        return value if isinstance(value, str) else ""

    def to_record(self) -> EventRecord:
        return EventRecord(
            event_kind=EventKind.from_wire(self.event),
            correlation_id=self.run_id,
            emitter_name=self.name if isinstance(self.name, str) else "",
            content_fragment=self.content(),
            raw_event=self.event if isinstance(self.event, str) else "",
        )


class EventRecord(BaseModel):
    """A decoded event, ready for batching and folding."""

    event_kind: EventKind
    correlation_id: str
    emitter_name: str = ""
    content_fragment: str = ""
    raw_event: str = Field(
        default="",
        description="Original wire `event` value, kept for diagnostics",
    )

    model_config = ConfigDict(frozen=True, extra="forbid")


EventBatch = tuple[EventRecord, ...]
