"""Domain-specific exceptions for the artifact stream core.

The reducer and the timing planner never raise for data-shape problems;
these exceptions belong to the transport boundary, where a wire record
cannot be turned into a delta event at all.
"""

from __future__ import annotations

from typing import Any


class StreamCoreError(Exception):
    """Base class for stream core errors."""


class DeltaDecodeError(StreamCoreError):
    """A wire record could not be decoded into a ``DeltaEvent``.

    Raised for envelope-level problems only (no ``type``/``kind`` field, an
    SSE ``data:`` line that is not JSON).  Payload problems are never errors:
    payloads are kept raw.
    """

    def __init__(self, message: str, raw: Any = None) -> None:
        self.raw = raw
        super().__init__(message)


class ReplayLimitError(StreamCoreError):
    """A replay request carried more deltas than the configured cap."""

    def __init__(self, count: int, limit: int) -> None:
        self.count = count
        self.limit = limit
        super().__init__(f"{count} deltas exceed the replay limit of {limit}")
