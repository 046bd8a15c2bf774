"""Tests for DataStreamEncoder, parse_delta and decode_sse.

Validates that encoded output conforms to the Vercel AI SDK
Data Stream Protocol (UI Message Stream v1) and that every envelope the
chat server writes decodes to the same delta event.
"""

from __future__ import annotations

import json

import pytest

from errors.exceptions import DeltaDecodeError
from models.stream_events import DeltaEvent, Suggestion
from services.datastream import (
    DONE_MARKER,
    STREAM_HEADERS,
    DataStreamEncoder,
    decode_sse,
    parse_delta,
)


# ── Helpers ──────────────────────────────────────────────────────


def _parse_sse(sse_str: str) -> list[dict | str]:
    """Parse an SSE string into a list of payloads (dicts or raw strings)."""
    results = []
    for line in sse_str.strip().split("\n"):
        line = line.strip()
        if not line:
            continue
        if line.startswith("data: "):
            payload = line[len("data: ") :]
            if payload == "[DONE]":
                results.append("[DONE]")
            else:
                results.append(json.loads(payload))
    return results


@pytest.fixture
def enc() -> DataStreamEncoder:
    return DataStreamEncoder()


# ── Encoder ──────────────────────────────────────────────────────


class TestEncoder:
    def test_sse_framing(self, enc):
        out = enc.data("title", "Essay")
        assert out.startswith("data: ")
        assert out.endswith("\n\n")

    def test_start_has_message_id(self, enc):
        part = _parse_sse(enc.start("msg-1"))[0]
        assert part == {"type": "start", "messageId": "msg-1"}

    def test_start_generates_id(self, enc):
        part = _parse_sse(enc.start())[0]
        assert len(part["messageId"]) == 8

    def test_finish_ends_with_done(self, enc):
        parts = _parse_sse(enc.finish())
        assert parts == [{"type": "finish"}, DONE_MARKER]

    def test_delta_string_payload(self, enc):
        part = _parse_sse(enc.delta(DeltaEvent(kind="text-delta", payload="Hi")))[0]
        assert part == {"type": "data-text-delta", "data": "Hi"}

    def test_delta_keeps_unicode(self, enc):
        out = enc.delta(DeltaEvent(kind="title", payload="Café ☕"))
        assert "Café ☕" in out

    def test_delta_suggestion_payload_is_camel_case(self, enc):
        suggestion = Suggestion(id="s1", original_text="teh", suggested_text="the")
        part = _parse_sse(enc.delta(DeltaEvent(kind="suggestion", payload=suggestion)))[0]
        assert part["type"] == "data-suggestion"
        assert part["data"]["originalText"] == "teh"
        assert part["data"]["suggestedText"] == "the"
        assert part["data"]["isResolved"] is False

    def test_deltas_concatenates_in_order(self, enc):
        events = [DeltaEvent(kind="id", payload="d1"), DeltaEvent(kind="clear")]
        parts = _parse_sse(enc.deltas(events))
        assert [p["type"] for p in parts] == ["data-id", "data-clear"]

    def test_error(self, enc):
        part = _parse_sse(enc.error("INVALID_DELTA: boom"))[0]
        assert part == {"type": "error", "errorText": "INVALID_DELTA: boom"}

    def test_stream_header(self):
        assert STREAM_HEADERS == {"x-vercel-ai-ui-message-stream": "v1"}


# ── parse_delta ──────────────────────────────────────────────────


class TestParseDelta:
    @pytest.mark.parametrize(
        "record",
        [
            {"kind": "text-delta", "payload": "abc"},
            {"type": "data-text-delta", "data": "abc"},
            {"type": "text-delta", "content": "abc"},
        ],
    )
    def test_envelopes_decode_identically(self, record):
        assert parse_delta(record) == DeltaEvent(kind="text-delta", payload="abc")

    def test_legacy_kind_name(self):
        event = parse_delta({"type": "kind", "content": "code"})
        assert event.kind == "artifact-kind"
        assert event.text == "code"

    def test_structured_payload_is_json_encoded(self):
        event = parse_delta({"type": "web-search-results", "content": {"results": [1, 2]}})
        assert isinstance(event.payload, str)
        assert json.loads(event.payload) == {"results": [1, 2]}

    def test_missing_payload_is_empty(self):
        assert parse_delta({"type": "finish"}).payload == ""

    def test_suggestion_record(self):
        event = parse_delta({
            "type": "suggestion",
            "content": {"id": "s1", "originalText": "a", "suggestedText": "b"},
        })
        assert isinstance(event.payload, Suggestion)
        assert event.payload.suggested_text == "b"

    def test_unknown_kind_passes_through(self):
        event = parse_delta({"type": "brand-new-kind", "content": "x"})
        assert event.kind == "brand-new-kind"
        assert event.known_kind is None

    @pytest.mark.parametrize(
        "record",
        [
            ["not", "a", "dict"],
            {"content": "orphan"},
            {"type": ""},
            {"kind": 42, "payload": "x"},
        ],
    )
    def test_bad_envelopes_raise(self, record):
        with pytest.raises(DeltaDecodeError) as exc_info:
            parse_delta(record)
        assert exc_info.value.raw == record


# ── decode_sse ───────────────────────────────────────────────────


class TestDecodeSse:
    def test_encoder_output_decodes(self, enc):
        events = [
            DeltaEvent(kind="id", payload="doc-1"),
            DeltaEvent(kind="text-delta", payload="Hello"),
            DeltaEvent(kind="finish"),
        ]
        text = enc.start() + enc.deltas(events) + enc.finish()
        assert decode_sse(text) == events

    def test_skips_chat_and_control_parts(self):
        text = (
            'data: {"type": "start", "messageId": "m"}\n\n'
            'data: {"type": "text-delta", "id": "t1", "delta": "chat text"}\n\n'
            'data: {"type": "tool-input-start", "toolCallId": "c1"}\n\n'
            'data: {"type": "data-title", "data": "Essay"}\n\n'
            ": keep-alive comment\n\n"
            "data: [DONE]\n\n"
        )
        assert decode_sse(text) == [DeltaEvent(kind="title", payload="Essay")]

    def test_empty_text(self):
        assert decode_sse("") == []

    def test_bad_json_raises(self):
        with pytest.raises(DeltaDecodeError):
            decode_sse("data: {not json}\n\n")
