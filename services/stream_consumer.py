"""Cursor-based consumption of an append-only delta list.

The transport hands over the *whole* delta list every time it grows (a
``useChat``-style ``data`` array).  :func:`consume` applies only entries past
the cursor, in index order, one at a time, then returns the advanced cursor.
Calling it again with the same list, or with a longer list that starts with
the same entries, never re-applies an index.

The cursor is an explicit value passed in and returned, so the fold stays a
pure function; :class:`ArtifactSession` is the stateful convenience wrapper a
chat view holds on to.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Sequence

from config.settings import get_settings
from errors.exceptions import DeltaDecodeError
from models.artifact import Artifact, ArtifactMetadata
from models.stream_events import DeltaEvent
from services.artifact_reducer import (
    DEFAULT_REVEAL_WINDOW,
    METADATA_KINDS,
    apply,
    apply_metadata,
    metadata_key,
)
from services.datastream import parse_delta

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StreamCursor:
    """Index of the last delta already applied (-1 = nothing yet)."""

    last_index: int = -1

    def pending(self, total: int) -> range:
        """Indices of a *total*-long list that still need applying."""
        return range(self.last_index + 1, total)

    def advance(self, total: int) -> StreamCursor:
        """Cursor after applying everything in a *total*-long list.

        Never moves backwards.
        """
        return StreamCursor(max(self.last_index, total - 1))


@dataclass(frozen=True)
class ConsumeResult:
    artifact: Artifact | None
    metadata: dict[str, ArtifactMetadata]
    cursor: StreamCursor
    applied: int = 0
    # Undecodable raw records; the cursor still moves past them.
    skipped: int = 0


def _as_event(record: DeltaEvent | dict[str, Any], index: int) -> DeltaEvent | None:
    if isinstance(record, DeltaEvent):
        return record
    try:
        return parse_delta(record)
    except DeltaDecodeError as exc:
        logger.warning("Skipping undecodable delta at index %d: %s", index, exc)
        return None


def consume(
    deltas: Sequence[DeltaEvent | dict[str, Any]],
    cursor: StreamCursor = StreamCursor(),
    artifact: Artifact | None = None,
    metadata: dict[str, ArtifactMetadata] | None = None,
    *,
    reveal_window: tuple[int, int] = DEFAULT_REVEAL_WINDOW,
) -> ConsumeResult:
    """Apply the unprocessed tail of *deltas* and return the new state.

    Raw dict records are decoded with :func:`services.datastream.parse_delta`.
    A record with no usable envelope is logged, counted in ``skipped`` and
    otherwise treated as a no-op, so one bad record never stalls the cursor.
    """
    meta = dict(metadata or {})
    total = len(deltas)

    if total - 1 < cursor.last_index:
        logger.warning(
            "Delta list shrank to %d entries behind cursor %d; nothing applied",
            total,
            cursor.last_index,
        )
        return ConsumeResult(artifact=artifact, metadata=meta, cursor=cursor)

    pending = cursor.pending(total)
    skipped = 0
    for index in pending:
        event = _as_event(deltas[index], index)
        if event is None:
            skipped += 1
            continue
        if event.kind in METADATA_KINDS:
            key = metadata_key(artifact)
            meta[key] = apply_metadata(meta.get(key), event)
        artifact = apply(artifact, event, reveal_window=reveal_window)

    new_cursor = cursor.advance(total)
    if pending:
        logger.debug(
            "Applied deltas %d..%d (cursor %d → %d)",
            pending.start,
            pending.stop - 1,
            cursor.last_index,
            new_cursor.last_index,
        )
    return ConsumeResult(
        artifact=artifact,
        metadata=meta,
        cursor=new_cursor,
        applied=len(pending) - skipped,
        skipped=skipped,
    )


@dataclass
class ArtifactSession:
    """Current artifact state for one chat view.

    Usage::

        session = ArtifactSession(chat_id="chat-1")
        session.feed(data_stream)      # call again whenever the list grows
        session.artifact.content
    """

    chat_id: str = ""
    reveal_window: tuple[int, int] = field(
        default_factory=lambda: get_settings().reveal_window
    )
    artifact: Artifact | None = None
    metadata: dict[str, ArtifactMetadata] = field(default_factory=dict)
    cursor: StreamCursor = field(default_factory=StreamCursor)

    def feed(self, deltas: Sequence[DeltaEvent | dict[str, Any]]) -> Artifact | None:
        """Consume the unprocessed tail of *deltas*; return the current artifact."""
        result = consume(
            deltas,
            self.cursor,
            self.artifact,
            self.metadata,
            reveal_window=self.reveal_window,
        )
        self.artifact = result.artifact
        self.metadata = result.metadata
        self.cursor = result.cursor
        return self.artifact

    def reset(self) -> None:
        """Drop all state; the next ``feed`` starts a fresh delta list."""
        logger.debug("Resetting artifact session %s", self.chat_id or "<anonymous>")
        self.artifact = None
        self.metadata = {}
        self.cursor = StreamCursor()

    @property
    def current_metadata(self) -> ArtifactMetadata:
        """Metadata for the artifact's current kind."""
        return self.metadata.get(metadata_key(self.artifact), ArtifactMetadata())
