"""Data Stream Protocol encoder/decoder for artifact delta events.

Delta events travel as custom data parts of the Vercel AI SDK UI Message
Stream v1 (SSE format)::

    data: {"type": "data-<kind>", "data": <payload>}\\n\\n

Reference: https://ai-sdk.dev/docs/ai-sdk-ui/stream-protocol

Required response header: ``x-vercel-ai-ui-message-stream: v1``
Termination marker: ``data: [DONE]\\n\\n``

Decoding also accepts the record shapes a chat server writes with
``dataStream.writeData`` (``{"type": ..., "content": ...}``) and the
internal ``{"kind": ..., "payload": ...}`` shape.
"""

from __future__ import annotations

import json
import logging
import uuid
from typing import Any

from pydantic import ValidationError

from errors.exceptions import DeltaDecodeError
from models.stream_events import DeltaEvent

logger = logging.getLogger(__name__)

DATA_PART_PREFIX = "data-"
DONE_MARKER = "[DONE]"
STREAM_HEADERS: dict[str, str] = {"x-vercel-ai-ui-message-stream": "v1"}


class DataStreamEncoder:
    """Encode delta events into Vercel AI SDK Data Stream Protocol.

    Every public method returns a ready-to-yield SSE string.
    """

    @staticmethod
    def _sse(payload: dict[str, Any]) -> str:
        return f"data: {json.dumps(payload, ensure_ascii=False, default=str)}\n\n"

    @staticmethod
    def _id() -> str:
        return uuid.uuid4().hex[:8]

    # ── Message Control ──────────────────────────────────────────

    def start(self, message_id: str | None = None) -> str:
        return self._sse({"type": "start", "messageId": message_id or self._id()})

    def finish(self) -> str:
        return self._sse({"type": "finish"}) + f"data: {DONE_MARKER}\n\n"

    # ── Artifact deltas ──────────────────────────────────────────

    def data(self, name: str, payload: Any) -> str:
        return self._sse({"type": f"{DATA_PART_PREFIX}{name}", "data": payload})

    def delta(self, event: DeltaEvent) -> str:
        """Encode one delta event as a ``data-<kind>`` part."""
        payload = event.payload
        if not isinstance(payload, str):
            payload = payload.model_dump(by_alias=True)
        return self.data(event.kind, payload)

    def deltas(self, events: list[DeltaEvent]) -> str:
        return "".join(self.delta(e) for e in events)

    # ── Error ────────────────────────────────────────────────────

    def error(self, text: str) -> str:
        return self._sse({"type": "error", "errorText": text})


# ── Decoding ─────────────────────────────────────────────────────


def parse_delta(record: dict[str, Any]) -> DeltaEvent:
    """Turn one wire record into a :class:`DeltaEvent`.

    Accepted envelopes:
        - ``{"type": "data-<kind>", "data": payload}`` (UI message stream)
        - ``{"type": "<kind>", "content": payload}`` (``writeData``)
        - ``{"kind": "<kind>", "payload": payload}``

    Payloads are never rejected: non-string payloads of string kinds are
    JSON-encoded, malformed suggestions are kept raw.

    Raises:
        DeltaDecodeError: If the record is not a dict or names no kind.
    """
    if not isinstance(record, dict):
        raise DeltaDecodeError(
            f"delta record must be an object, got {type(record).__name__}", raw=record
        )

    if "kind" in record:
        kind = record["kind"]
        payload = record.get("payload", "")
    else:
        kind = record.get("type")
        if isinstance(kind, str) and kind.startswith(DATA_PART_PREFIX):
            kind = kind[len(DATA_PART_PREFIX):]
            payload = record.get("data", "")
        else:
            payload = record.get("content", record.get("data", ""))

    if not isinstance(kind, str) or not kind:
        raise DeltaDecodeError("delta record has no type/kind", raw=record)

    try:
        return DeltaEvent(kind=kind, payload=payload)
    except ValidationError as exc:
        raise DeltaDecodeError(f"invalid delta record: {exc}", raw=record) from exc


def decode_sse(text: str) -> list[DeltaEvent]:
    """Decode SSE text into delta events, in stream order.

    Only ``data-*`` parts carry deltas; every other part (``start``,
    ``finish``, chat ``text-delta``, tool parts, ``[DONE]``) is skipped.

    Raises:
        DeltaDecodeError: If a ``data:`` line is not valid JSON.
    """
    events: list[DeltaEvent] = []
    for line in text.splitlines():
        line = line.strip()
        if not line.startswith("data:"):
            continue
        body = line[len("data:"):].strip()
        if not body or body == DONE_MARKER:
            continue
        try:
            record = json.loads(body)
        except json.JSONDecodeError as exc:
            logger.warning("Undecodable SSE line: %.80s", body)
            raise DeltaDecodeError(f"SSE data line is not JSON: {exc}", raw=body) from exc
        part_type = record.get("type") if isinstance(record, dict) else None
        if not (isinstance(part_type, str) and part_type.startswith(DATA_PART_PREFIX)):
            continue
        events.append(parse_delta(record))
    return events
