"""Protocols for collaborators of the graph stream observer."""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol

from graphstream.schemas.graph_progress import ProgressSnapshot


ChunkCallback = Callable[[str], None]


class ChunkSource(Protocol):
    """Anything that delivers raw stream text, one chunk per callback call.

    The source owns the transport (HTTP request, socket, file replay...) and its
    cancellation. It calls `on_chunk` zero or more times and simply stops when
    the stream is over.
    """

    def stream(self, on_chunk: ChunkCallback) -> None:
        """Deliver every chunk of the stream to `on_chunk`."""
        ...


class SnapshotSubscriber(Protocol):
    """Receives each snapshot the observer publishes."""

    def __call__(self, snapshot: ProgressSnapshot) -> None: ...
