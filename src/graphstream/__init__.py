"""Incremental progress tracking for streamed computation-graph events."""

from graphstream.schemas.graph_nodes import NodeMetadata, NodeRegistry, NodeRole
from graphstream.schemas.graph_progress import NodeHistoryEntry, ProgressSnapshot
from graphstream.services.graph_stream import GraphStreamObserver


__all__ = [
    "GraphStreamObserver",
    "NodeHistoryEntry",
    "NodeMetadata",
    "NodeRegistry",
    "NodeRole",
    "ProgressSnapshot",
]
