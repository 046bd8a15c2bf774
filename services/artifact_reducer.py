"""Artifact stream reducer — folds delta events into the current artifact.

``apply`` is a pure function of ``(artifact, event)``: it never mutates its
input, never reads the clock and never performs I/O.  Replaying the same
ordered events from the same starting artifact always yields the same result.

Per-kind rules
--------------
- ``id`` / ``title`` / ``artifact-kind``: set the field, ``status=streaming``.
- ``clear``: empty ``content`` only, ``status=streaming``.
- ``finish``: ``status=idle``; nothing else changes.
- ``text-delta``: append; may reveal the panel once (see ``_should_reveal``).
- snapshot kinds (``code-delta``, ``html-delta``, ...): replace ``content``,
  ``is_visible=True``, ``status=streaming``.
- ``*-status`` side channels: set the field; force ``streaming`` only for the
  tool's "busy" value.
- ``*-result(s)`` side channels: set the raw string.
- ``suggestion`` / ``html-smart-update`` / ``pexels-auto-images``: recorded in
  :class:`ArtifactMetadata` by ``apply_metadata``; the artifact is unchanged.
- anything else: unchanged.
"""

from __future__ import annotations

import logging

from models.artifact import (
    TOOL_CHANNELS,
    Artifact,
    ArtifactKind,
    ArtifactMetadata,
    ArtifactStatus,
)
from models.stream_events import SNAPSHOT_DELTA_KINDS, DeltaEvent, DeltaKind, Suggestion

logger = logging.getLogger(__name__)

DEFAULT_REVEAL_WINDOW: tuple[int, int] = (400, 450)

# Metadata is keyed by artifact kind; suggestions that arrive before any
# ``artifact-kind`` event belong to a text document.
DEFAULT_METADATA_KEY = ArtifactKind.TEXT.value


def _side_channel_fields() -> dict[str, tuple[str, str | None]]:
    """delta kind → (artifact field, busy value; None for result fields)."""
    fields: dict[str, tuple[str, str | None]] = {}
    for tool, (status_field, result_field, busy) in TOOL_CHANNELS.items():
        fields[f"{tool}-status"] = (status_field, busy)
        suffix = "results" if result_field.endswith("results") else "result"
        fields[f"{tool}-{suffix}"] = (result_field, None)
    return fields


_SIDE_CHANNEL_FIELDS = _side_channel_fields()

METADATA_KINDS = frozenset({
    DeltaKind.SUGGESTION.value,
    DeltaKind.HTML_SMART_UPDATE.value,
    DeltaKind.PEXELS_AUTO_IMAGES.value,
})

_STREAMING = ArtifactStatus.STREAMING


def _in_window(length: int, window: tuple[int, int]) -> bool:
    low, high = window
    return low < length < high


def _should_reveal(
    artifact: Artifact, appended: str, window: tuple[int, int]
) -> bool:
    """One-time reveal for streaming text.

    Fires while the artifact is already streaming and its length (before or
    after this chunk) sits strictly inside ``window``.  Never un-reveals.
    """
    if artifact.is_visible:
        return True
    if artifact.status != _STREAMING:
        return False
    before = len(artifact.content)
    return _in_window(before, window) or _in_window(before + len(appended), window)


def _apply_side_channel(artifact: Artifact, event: DeltaEvent) -> Artifact:
    field, busy = _SIDE_CHANNEL_FIELDS[event.kind]
    value = event.text
    update: dict = {field: value}
    if busy is not None and value == busy:
        update["status"] = _STREAMING
    return artifact.model_copy(update=update)


def apply(
    current: Artifact | None,
    event: DeltaEvent,
    *,
    reveal_window: tuple[int, int] = DEFAULT_REVEAL_WINDOW,
) -> Artifact:
    """Apply one delta event and return the new artifact.

    ``current=None`` means no artifact exists yet: a default streaming
    artifact is synthesized and the event is applied to it.

    Raises:
        TypeError: If *event* is not a :class:`DeltaEvent` (caller misuse).
    """
    if not isinstance(event, DeltaEvent):
        raise TypeError(f"expected DeltaEvent, got {type(event).__name__}")

    artifact = current if current is not None else Artifact.initial()
    kind = event.kind

    if kind == DeltaKind.ID.value:
        return artifact.model_copy(update={"document_id": event.text, "status": _STREAMING})

    if kind == DeltaKind.TITLE.value:
        return artifact.model_copy(update={"title": event.text, "status": _STREAMING})

    if kind == DeltaKind.ARTIFACT_KIND.value:
        try:
            artifact_kind = ArtifactKind(event.text)
        except ValueError:
            logger.warning("Unsupported artifact kind %r; keeping %s", event.text, artifact.kind)
            artifact_kind = artifact.kind
        return artifact.model_copy(update={"kind": artifact_kind, "status": _STREAMING})

    if kind == DeltaKind.CLEAR.value:
        return artifact.model_copy(update={"content": "", "status": _STREAMING})

    if kind == DeltaKind.FINISH.value:
        return artifact.model_copy(update={"status": ArtifactStatus.IDLE})

    if kind == DeltaKind.TEXT_DELTA.value:
        chunk = event.text
        return artifact.model_copy(
            update={
                "content": artifact.content + chunk,
                "is_visible": _should_reveal(artifact, chunk, reveal_window),
                "status": _STREAMING,
            }
        )

    if kind in SNAPSHOT_DELTA_KINDS:
        return artifact.model_copy(
            update={"content": event.text, "is_visible": True, "status": _STREAMING}
        )

    if kind in _SIDE_CHANNEL_FIELDS:
        return _apply_side_channel(artifact, event)

    if kind not in METADATA_KINDS:
        logger.debug("Ignoring unknown delta kind %r", kind)
    return artifact


def metadata_key(artifact: Artifact | None) -> str:
    """Key under which metadata for *artifact* is stored."""
    if artifact is None or artifact.kind is None:
        return DEFAULT_METADATA_KEY
    return artifact.kind.value


def apply_metadata(metadata: ArtifactMetadata | None, event: DeltaEvent) -> ArtifactMetadata:
    """Record metadata-bearing events; every other kind returns *metadata* as is."""
    meta = metadata if metadata is not None else ArtifactMetadata()
    kind = event.kind

    if kind == DeltaKind.SUGGESTION.value:
        if not isinstance(event.payload, Suggestion):
            logger.warning("Suggestion payload is not a suggestion record; kept raw")
            return meta.model_copy(
                update={"invalid_suggestions": [*meta.invalid_suggestions, event.text]}
            )
        return meta.model_copy(update={"suggestions": [*meta.suggestions, event.payload]})

    if kind == DeltaKind.HTML_SMART_UPDATE.value:
        return meta.model_copy(update={"smart_updates": [*meta.smart_updates, event.text]})

    if kind == DeltaKind.PEXELS_AUTO_IMAGES.value:
        return meta.model_copy(update={"auto_images": event.text})

    return meta


def reduce_events(
    events: list[DeltaEvent],
    initial: Artifact | None = None,
    *,
    reveal_window: tuple[int, int] = DEFAULT_REVEAL_WINDOW,
) -> Artifact | None:
    """Fold *events* in order starting from *initial*."""
    artifact = initial
    for event in events:
        artifact = apply(artifact, event, reveal_window=reveal_window)
    return artifact
