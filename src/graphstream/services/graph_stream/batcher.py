"""Group decoded events into batches of consecutive equal `run_id`s."""

from __future__ import annotations

from collections.abc import Iterable

from graphstream.schemas.graph_events import EventBatch, EventRecord


def group_by_correlation(events: Iterable[EventRecord]) -> list[EventBatch]:
    """Split `events` into maximal runs sharing one correlation id.

    Order is preserved and only adjacent records are merged, so ids
    ``[r1, r1, r2, r1]`` give three batches, not two.
    """
    batches: list[EventBatch] = []
    current: list[EventRecord] = []

    for event in events:
        if not current or event.correlation_id == current[-1].correlation_id:
            current.append(event)
        else:
            batches.append(tuple(current))
            current = [event]

    if current:
        batches.append(tuple(current))
    return batches
