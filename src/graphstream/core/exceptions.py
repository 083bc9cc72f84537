"""Domain exceptions for graph stream decoding and progress tracking.

The streaming pipeline never lets these escape to the caller: decoder and state
machine raise them internally and log them at the boundary, so a bad chunk only
costs that chunk. Each exception carries a stable `error_code` for log
filtering. `RegistryConfigError` is the exception to that rule; it is raised
from registry constructors at configuration time.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class GraphStreamError(Exception):
    """Base class for graph stream domain errors."""

    message: str
    error_code: str

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"{self.error_code}: {self.message}"


class StreamDecodeError(GraphStreamError):
    def __init__(self, message: str = "Failed to decode graph event chunk") -> None:
        super().__init__(message=message, error_code="decode_failed")


class MissingCorrelationIdError(GraphStreamError):
    def __init__(self, message: str = "Event record has no run_id") -> None:
        super().__init__(message=message, error_code="missing_run_id")


class RegistryConfigError(GraphStreamError):
    def __init__(self, message: str = "Node registry configuration is invalid") -> None:
        super().__init__(message=message, error_code="invalid_registry")
