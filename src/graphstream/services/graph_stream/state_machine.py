"""Fold decoded graph events into progress snapshots.

Rules per event, looked up by emitter name in the node registry:

* chain start on a registered node: it becomes the active node, the graph is
  running and visible, and the status shows the node's display text.
* chain end on the top-level node: running and visible go false and the status
  becomes the finished text. The snapshot itself is reset only after the whole
  chunk has been folded.
* chain end on any other registered node: its accumulated content is recorded
  in the completed-node log.
* model stream: appended to the active node's content. Stream events are named
  after the chat model rather than the graph node, so they are not looked up
  in the registry. If the active node is the final-output node the fragment
  also goes to `final_output` and the progress text is hidden.

Everything else is ignored.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from graphstream.core.config import get_settings
from graphstream.core.error_handler import StructuredLogger
from graphstream.schemas.graph_events import EventBatch, EventKind, EventRecord
from graphstream.schemas.graph_nodes import NodeRegistry, NodeRole
from graphstream.schemas.graph_progress import (
    NodeHistoryEntry,
    ProgressDraft,
    ProgressSnapshot,
)
from graphstream.services.graph_stream.batcher import group_by_correlation


logger = StructuredLogger(__name__)


class GraphProgressStateMachine:
    """Owns the current `ProgressSnapshot` and replaces it batch by batch."""

    def __init__(
        self,
        registry: NodeRegistry,
        *,
        finished_text: str | None = None,
        log_events: bool | None = None,
    ) -> None:
        settings = get_settings()
        self.registry = registry
        self.finished_text = (
            finished_text if finished_text is not None else settings.FINISHED_STATUS_TEXT
        )
        self.log_events = (
            log_events if log_events is not None else settings.LOG_STREAM_EVENTS
        )
        self._snapshot = ProgressSnapshot()

    @property
    def snapshot(self) -> ProgressSnapshot:
        return self._snapshot

    def reset(self) -> ProgressSnapshot:
        self._snapshot = ProgressSnapshot()
        return self._snapshot

    def is_graph_complete(self, events: Iterable[EventRecord]) -> bool:
        """True if any event ends a registered top-level node."""
        top_level = self.registry.top_level_names()
        return any(
            event.event_kind is EventKind.CHAIN_END and event.emitter_name in top_level
            for event in events
        )

    def apply_event(self, draft: ProgressDraft, event: EventRecord) -> None:
        """Fold a single event into `draft` in place."""
        if self.log_events:
            logger.debug(
                "Folding stream event",
                kind=event.event_kind.value,
                raw_event=event.raw_event,
                name=event.emitter_name,
                run_id=event.correlation_id,
                size=len(event.content_fragment),
            )

        match event.event_kind:
            case EventKind.CHAIN_START:
                meta = self.registry.get(event.emitter_name)
                if meta is None:
                    return
                draft.active_node_name = event.emitter_name
                draft.running = True
                draft.visible = True
                draft.status_text = meta.display_text
            case EventKind.CHAIN_END:
                meta = self.registry.get(event.emitter_name)
                if meta is None:
                    return
                match meta.role:
                    case NodeRole.TOP_LEVEL:
                        draft.running = False
                        draft.visible = False
                        draft.status_text = self.finished_text
                    case NodeRole.FINAL_OUTPUT | NodeRole.INTERMEDIATE:
                        draft.completed_node_log.append(
                            NodeHistoryEntry(
                                node_name=event.emitter_name,
                                final_message=draft.node_content_by_id.get(
                                    event.emitter_name, ""
                                ),
                            )
                        )
            case EventKind.MODEL_STREAM:
                self._append_stream_content(draft, event.content_fragment)
            case _:
                return

    def _append_stream_content(self, draft: ProgressDraft, fragment: str) -> None:
        active = draft.active_node_name
        if not active:
            return
        draft.node_content_by_id[active] = (
            draft.node_content_by_id.get(active, "") + fragment
        )
        meta = self.registry.get(active)
        if meta is not None and meta.is_final_output_node:
            draft.final_output = (draft.final_output or "") + fragment
            draft.visible = False

    def apply_batch(self, batch: EventBatch) -> ProgressSnapshot:
        """Fold one batch and publish a single new snapshot.

        Returns the previous snapshot object unchanged when the batch had no
        effect.
        """
        draft = ProgressDraft.from_snapshot(self._snapshot)
        for event in batch:
            self.apply_event(draft, event)
        published = draft.publish()
        if published != self._snapshot:
            self._snapshot = published
        return self._snapshot

    def fold_chunk(self, events: Sequence[EventRecord]) -> list[ProgressSnapshot]:
        """Fold all events of one decoded chunk.

        Returns every snapshot published along the way, in order. When the
        chunk contains the top-level chain end, the snapshot is reset after
        all batches are folded and the default snapshot is published last.
        """
        published: list[ProgressSnapshot] = []
        for batch in group_by_correlation(events):
            previous = self._snapshot
            current = self.apply_batch(batch)
            if current is not previous:
                published.append(current)

        if self.is_graph_complete(events):
            logger.info(
                "Graph run finished; resetting progress",
                completed_nodes=len(self._snapshot.completed_node_log),
            )
            if not self._snapshot.is_initial():
                published.append(self.reset())
        return published
