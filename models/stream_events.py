"""Delta event contract for the artifact data stream.

A delta event is one unit of server → client information emitted while a
tool or model call is streaming.  The server writes them with
``dataStream.writeData({type, content})``; on this side every record becomes a
:class:`DeltaEvent` with a ``kind`` and a ``payload``.

Payload typing is decided per kind at the boundary:

- ``suggestion`` carries a structured :class:`Suggestion`.
- every other kind carries a string.  Structured values that arrive for a
  string kind are JSON-encoded and kept raw; interpreting them (e.g. the
  ``*-results`` JSON blobs) is left to the display layer via
  :func:`decode_result_payload`.
"""

from __future__ import annotations

import json
from enum import Enum
from typing import Any

from pydantic import ValidationError, field_validator, model_validator

from models.base import CamelModel, FrozenCamelModel


class DeltaKind(str, Enum):
    """Known delta event kinds.

    ``DeltaEvent.kind`` is a plain string so that kinds added by newer
    servers still parse; compare against these members.
    """

    TEXT_DELTA = "text-delta"
    CODE_DELTA = "code-delta"
    SHEET_DELTA = "sheet-delta"
    IMAGE_DELTA = "image-delta"
    HTML_DELTA = "html-delta"
    SVG_DELTA = "svg-delta"
    DIAGRAM_DELTA = "diagram-delta"
    SANDBOX_DELTA = "sandbox-delta"
    VIDEO_GENERATOR_DELTA = "video-generator-delta"
    HTML_SMART_UPDATE = "html-smart-update"
    TITLE = "title"
    ID = "id"
    SUGGESTION = "suggestion"
    CLEAR = "clear"
    FINISH = "finish"
    ARTIFACT_KIND = "artifact-kind"
    PEXELS_SEARCH_STATUS = "pexels-search-status"
    PEXELS_SEARCH_RESULTS = "pexels-search-results"
    PEXELS_AUTO_IMAGES = "pexels-auto-images"
    WEB_SEARCH_STATUS = "web-search-status"
    WEB_SEARCH_RESULTS = "web-search-results"
    WEBPAGE_SCREENSHOT_STATUS = "webpage-screenshot-status"
    WEBPAGE_SCREENSHOT_RESULT = "webpage-screenshot-result"
    WEB_SCRAPER_STATUS = "web-scraper-status"
    WEB_SCRAPER_RESULT = "web-scraper-result"


# Kinds whose payload is a full snapshot of the artifact body.
SNAPSHOT_DELTA_KINDS: frozenset[str] = frozenset({
    DeltaKind.CODE_DELTA.value,
    DeltaKind.SHEET_DELTA.value,
    DeltaKind.IMAGE_DELTA.value,
    DeltaKind.HTML_DELTA.value,
    DeltaKind.SVG_DELTA.value,
    DeltaKind.DIAGRAM_DELTA.value,
    DeltaKind.SANDBOX_DELTA.value,
    DeltaKind.VIDEO_GENERATOR_DELTA.value,
})

# The wire name the chat server uses for ``artifact-kind``.
LEGACY_KIND_ALIASES: dict[str, str] = {"kind": DeltaKind.ARTIFACT_KIND.value}


class Suggestion(CamelModel):
    """Inline edit suggestion attached to a document.

    ``original_text`` marks the selected range the suggestion replaces.
    """

    id: str
    document_id: str = ""
    original_text: str = ""
    suggested_text: str = ""
    description: str = ""
    is_resolved: bool = False


def _encode_raw(value: Any) -> str:
    if isinstance(value, str):
        return value
    if value is None:
        return ""
    if isinstance(value, CamelModel):
        return value.model_dump_json(by_alias=True)
    return json.dumps(value, ensure_ascii=False, default=str)


class DeltaEvent(FrozenCamelModel):
    """One streamed delta: ``kind`` plus a string or Suggestion ``payload``."""

    kind: str
    payload: str | Suggestion = ""

    @field_validator("kind", mode="before")
    @classmethod
    def _normalize_kind(cls, value: Any) -> Any:
        if isinstance(value, DeltaKind):
            return value.value
        if isinstance(value, str):
            return LEGACY_KIND_ALIASES.get(value, value)
        return value

    @model_validator(mode="before")
    @classmethod
    def _decode_payload(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        raw_kind = data.get("kind")
        kind = raw_kind.value if isinstance(raw_kind, DeltaKind) else raw_kind
        kind = LEGACY_KIND_ALIASES.get(kind, kind)
        payload = data.get("payload", "")

        if kind == DeltaKind.SUGGESTION.value and not isinstance(payload, Suggestion):
            candidate = payload
            if isinstance(candidate, str):
                try:
                    candidate = json.loads(candidate)
                except json.JSONDecodeError:
                    candidate = None
            try:
                data["payload"] = Suggestion.model_validate(candidate)
            except ValidationError:
                # Not a suggestion record; keep it raw.
                data["payload"] = _encode_raw(payload)
        elif kind != DeltaKind.SUGGESTION.value:
            data["payload"] = _encode_raw(payload)
        return data

    @property
    def known_kind(self) -> DeltaKind | None:
        """The matching :class:`DeltaKind`, or None for kinds this build does not know."""
        try:
            return DeltaKind(self.kind)
        except ValueError:
            return None

    @property
    def text(self) -> str:
        """Payload as a string (suggestions are JSON-encoded)."""
        return _encode_raw(self.payload)


def decode_result_payload(raw: str) -> Any:
    """Decode a ``*-results`` payload, keeping the raw string when it is not JSON."""
    if not raw:
        return raw
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, TypeError):
        return raw
