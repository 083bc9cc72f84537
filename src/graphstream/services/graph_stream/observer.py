"""Caller-facing entry point for graph progress streaming.

`GraphStreamObserver` wires decoder, batcher and state machine together and
publishes immutable snapshots to subscribers::

    observer = GraphStreamObserver(registry)
    unsubscribe = observer.subscribe(render)
    observer.start_stream(source)   # source calls observer.on_chunk per chunk

Each raw chunk runs decode -> batch -> fold synchronously inside the chunk
callback. Subscribers see one snapshot per batch that changed something, then
the default snapshot when the graph finishes.
"""

from __future__ import annotations

import uuid
from collections.abc import Callable, Mapping
from typing import Any

from graphstream.core.config import get_settings
from graphstream.core.error_handler import StructuredLogger, set_stream_id
from graphstream.core.exceptions import RegistryConfigError
from graphstream.schemas.graph_nodes import NodeRegistry
from graphstream.schemas.graph_progress import ProgressSnapshot
from graphstream.services.graph_stream.decoder import DecodeStrategy, decode_events
from graphstream.services.graph_stream.interfaces import (
    ChunkSource,
    SnapshotSubscriber,
)
from graphstream.services.graph_stream.state_machine import GraphProgressStateMachine


logger = StructuredLogger(__name__)

RegistryLike = NodeRegistry | Mapping[str, Any]


def load_default_registry() -> NodeRegistry | None:
    """Load the registry named by NODE_REGISTRY_PATH, if configured."""
    path = get_settings().NODE_REGISTRY_PATH
    if not path:
        return None
    return NodeRegistry.from_json_file(path)


class GraphStreamObserver:
    """Holds the current progress snapshot and notifies subscribers."""

    def __init__(
        self,
        registry: RegistryLike | None = None,
        *,
        decode_strategy: DecodeStrategy | None = None,
        finished_text: str | None = None,
    ) -> None:
        if registry is None:
            resolved = load_default_registry() or NodeRegistry()
        else:
            resolved = NodeRegistry.from_mapping(registry)
        self.decode_strategy = decode_strategy
        self._machine = GraphProgressStateMachine(resolved, finished_text=finished_text)
        self._subscribers: list[SnapshotSubscriber] = []
        self._stream_id = str(uuid.uuid4())

    @property
    def snapshot(self) -> ProgressSnapshot:
        return self._machine.snapshot

    @property
    def registry(self) -> NodeRegistry:
        return self._machine.registry

    @property
    def stream_id(self) -> str:
        return self._stream_id

    def subscribe(self, callback: SnapshotSubscriber) -> Callable[[], None]:
        """Register `callback` for published snapshots; returns an unsubscriber."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def reset(self) -> ProgressSnapshot:
        """Return to the default snapshot and begin a new stream id."""
        self._stream_id = str(uuid.uuid4())
        snapshot = self._machine.reset()
        self._notify(snapshot)
        return snapshot

    def ingest(
        self, raw_chunk: str, node_registry: RegistryLike | None = None
    ) -> ProgressSnapshot:
        """Run one chunk through decode -> batch -> fold and publish the result.

        A registry passed here replaces the stored one for this and later
        chunks. Never raises for malformed input; the previous snapshot is
        kept when nothing could be decoded.
        """
        set_stream_id(self._stream_id)
        if node_registry is not None:
            self._use_registry(node_registry)

        events = decode_events(raw_chunk, strategy=self.decode_strategy)
        if not events:
            return self.snapshot

        for snapshot in self._machine.fold_chunk(events):
            self._notify(snapshot)
        return self.snapshot

    def on_chunk(self, chunk: str) -> None:
        """Chunk callback handed to a `ChunkSource`."""
        self.ingest(chunk)

    def start_stream(
        self, source: ChunkSource, node_registry: RegistryLike | None = None
    ) -> ProgressSnapshot:
        """Reset, then let `source` push its chunks into this observer.

        Errors raised by the source itself (transport failures) propagate; the
        observer keeps whatever progress it folded before the failure.
        """
        self.reset()
        set_stream_id(self._stream_id)
        if node_registry is not None:
            self._use_registry(node_registry)
        logger.info("Starting graph stream", tracked_nodes=len(self.registry))
        source.stream(self.on_chunk)
        return self.snapshot

    def _use_registry(self, registry: RegistryLike) -> None:
        try:
            self._machine.registry = NodeRegistry.from_mapping(registry)
        except RegistryConfigError as e:
            logger.error("Ignoring invalid node registry", error=e)

    def _notify(self, snapshot: ProgressSnapshot) -> None:
        for callback in list(self._subscribers):
            try:
                callback(snapshot)
            except Exception as exc:  # noqa: BLE001
                logger.exception(
                    "Snapshot subscriber failed",
                    subscriber=getattr(callback, "__name__", repr(callback)),
                    exception_type=exc.__class__.__name__,
                )
