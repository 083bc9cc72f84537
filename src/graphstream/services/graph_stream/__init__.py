"""Graph event stream decoding and progress tracking."""

from .batcher import group_by_correlation
from .decoder import decode_events, parse_event_objects, repair_concatenated_json
from .interfaces import ChunkCallback, ChunkSource, SnapshotSubscriber
from .observer import GraphStreamObserver, load_default_registry
from .state_machine import GraphProgressStateMachine


__all__ = [
    "ChunkCallback",
    "ChunkSource",
    "GraphProgressStateMachine",
    "GraphStreamObserver",
    "SnapshotSubscriber",
    "decode_events",
    "group_by_correlation",
    "load_default_registry",
    "parse_event_objects",
    "repair_concatenated_json",
]
