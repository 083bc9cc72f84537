"""Repair and decode concatenated graph event JSON.

The graph endpoint writes one JSON object per event with nothing between them::

    {"event":"on_chain_start","run_id":"r1","name":"A"}{"event":"on_chain_end",...}

Two strategies turn that into a list of `EventRecord`s:

* ``pattern`` (default) inserts a comma wherever a closing brace is followed by
  an object starting with the ``"event"`` key, wraps the text in brackets and
  parses it as one JSON array.
* ``scan`` walks the text with ``json.JSONDecoder.raw_decode`` so object
  boundaries come from the JSON grammar instead of a fixed key pattern.

Both are all-or-nothing per chunk: if any part fails to parse the whole chunk
decodes to ``[]`` and a warning is logged. Nothing here raises to the caller.
"""

from __future__ import annotations

import json
import re
from typing import Any, Literal

from pydantic import ValidationError

from graphstream.core.config import get_settings
from graphstream.core.error_handler import StructuredLogger
from graphstream.core.exceptions import MissingCorrelationIdError, StreamDecodeError
from graphstream.schemas.graph_events import EventRecord, StreamingEvent


logger = StructuredLogger(__name__)

DecodeStrategy = Literal["pattern", "scan"]

# `}` followed by the opening of an object whose first key is "event"
_OBJECT_BOUNDARY = re.compile(r'\}\s*(?=\{\s*"event")')

_json_decoder = json.JSONDecoder()


def repair_concatenated_json(text: str) -> str:
    """Turn back-to-back event objects into a JSON array string."""
    stripped = text.strip()
    if stripped.startswith("["):
        return stripped
    return "[" + _OBJECT_BOUNDARY.sub("},", stripped) + "]"


def _parse_pattern(text: str) -> list[Any]:
    try:
        parsed = json.loads(repair_concatenated_json(text))
    except json.JSONDecodeError as e:
        raise StreamDecodeError(f"Chunk is not repairable JSON: {e.msg}") from e
    except RecursionError as e:
        raise StreamDecodeError("Chunk is nested too deeply to decode") from e
    if not isinstance(parsed, list):
        raise StreamDecodeError("Chunk did not decode to an array of events")
    return parsed


def _parse_scan(text: str) -> list[Any]:
    stripped = text.strip()
    if stripped.startswith("["):
        return _parse_pattern(stripped)

    items: list[Any] = []
    pos = 0
    end = len(stripped)
    while pos < end:
        try:
            obj, pos = _json_decoder.raw_decode(stripped, pos)
        except json.JSONDecodeError as e:
            raise StreamDecodeError(
                f"Chunk has malformed JSON at offset {e.pos}: {e.msg}"
            ) from e
        except RecursionError as e:
            raise StreamDecodeError(
                f"Chunk is nested too deeply to decode at offset {pos}"
            ) from e
        items.append(obj)
        # Skip whitespace and a single optional comma between values
        while pos < end and stripped[pos].isspace():
            pos += 1
        if pos < end and stripped[pos] == ",":
            pos += 1
            while pos < end and stripped[pos].isspace():
                pos += 1
    return items


def parse_event_objects(text: str, strategy: DecodeStrategy = "pattern") -> list[Any]:
    """Parse raw chunk text into a list of JSON values.

    Raises:
        StreamDecodeError: if the chunk cannot be parsed with `strategy`.
    """
    if strategy == "scan":
        return _parse_scan(text)
    return _parse_pattern(text)


def _to_record(item: Any, index: int) -> EventRecord | None:
    if not isinstance(item, dict):
        logger.warning(
            "Dropping non-object stream item",
            error=MissingCorrelationIdError("Stream item is not a JSON object"),
            index=index,
            item_type=type(item).__name__,
        )
        return None
    try:
        return StreamingEvent.model_validate(item).to_record()
    except ValidationError:
        logger.warning(
            "Dropping stream event without run_id",
            error=MissingCorrelationIdError(),
            index=index,
            event=item.get("event"),
            name=item.get("name"),
        )
        return None


def decode_events(
    chunk: str, *, strategy: DecodeStrategy | None = None
) -> list[EventRecord]:
    """Decode one raw chunk into ordered event records.

    Unparseable chunks yield ``[]``; individual objects without a usable
    ``run_id`` are dropped while the rest of the chunk is kept.
    """
    if not isinstance(chunk, str) or not chunk.strip():
        return []

    strategy = strategy or get_settings().DECODE_STRATEGY
    try:
        items = parse_event_objects(chunk, strategy)
    except StreamDecodeError as e:
        logger.warning(
            "Failed to decode stream chunk",
            error=e,
            strategy=strategy,
            input_length=len(chunk),
        )
        return []

    records: list[EventRecord] = []
    for index, item in enumerate(items):
        record = _to_record(item, index)
        if record is not None:
            records.append(record)
    return records
