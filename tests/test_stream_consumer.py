"""Tests for services.stream_consumer — cursor-based delta consumption."""

from __future__ import annotations

from models.artifact import ArtifactKind, ArtifactStatus
from models.stream_events import DeltaEvent
from services.stream_consumer import ArtifactSession, StreamCursor, consume


def _suggestion_event(sid: str) -> DeltaEvent:
    return DeltaEvent(
        kind="suggestion",
        payload={"id": sid, "originalText": "a", "suggestedText": "b", "description": "d"},
    )


# ── StreamCursor ─────────────────────────────────────────────


class TestStreamCursor:
    def test_starts_before_first_index(self):
        assert StreamCursor().last_index == -1
        assert list(StreamCursor().pending(3)) == [0, 1, 2]

    def test_pending_after_progress(self):
        assert list(StreamCursor(1).pending(4)) == [2, 3]
        assert list(StreamCursor(3).pending(4)) == []

    def test_advance_never_moves_backwards(self):
        assert StreamCursor(5).advance(3).last_index == 5
        assert StreamCursor(1).advance(4).last_index == 3


# ── consume ──────────────────────────────────────────────────


class TestConsume:
    def test_growing_list_matches_single_pass(self, text_document_events):
        first = consume(text_document_events[:2])
        second = consume(text_document_events, first.cursor, first.artifact, first.metadata)
        direct = consume(text_document_events)

        assert second.artifact == direct.artifact
        assert second.cursor == direct.cursor == StreamCursor(4)
        assert first.applied == 2
        assert second.applied == 3

    def test_same_list_twice_is_idempotent(self, make_event):
        deltas = [make_event("text-delta", "a"), make_event("text-delta", "b")]
        first = consume(deltas)
        again = consume(deltas, first.cursor, first.artifact, first.metadata)
        assert again.applied == 0
        assert again.artifact.content == "ab"
        assert again.cursor == first.cursor

    def test_shrunk_list_applies_nothing(self, make_event):
        deltas = [make_event("text-delta", c) for c in "abc"]
        first = consume(deltas)
        shrunk = consume(deltas[:1], first.cursor, first.artifact, first.metadata)
        assert shrunk.applied == 0
        assert shrunk.cursor == first.cursor
        assert shrunk.artifact.content == "abc"

    def test_empty_list(self):
        result = consume([])
        assert result.artifact is None
        assert result.cursor == StreamCursor()
        assert result.metadata == {}

    def test_raw_write_data_records(self):
        records = [
            {"type": "id", "content": "doc-7"},
            {"type": "kind", "content": "code"},
            {"type": "code-delta", "content": "print('hi')"},
            {"type": "finish", "content": ""},
        ]
        result = consume(records)
        assert result.artifact.document_id == "doc-7"
        assert result.artifact.kind == ArtifactKind.CODE
        assert result.artifact.content == "print('hi')"
        assert result.artifact.is_visible is True
        assert result.artifact.status == ArtifactStatus.IDLE

    def test_undecodable_record_is_skipped(self):
        records = [
            {"type": "text-delta", "content": "a"},
            {"content": "no type"},
            {"type": "text-delta", "content": "b"},
        ]
        result = consume(records)
        assert result.artifact.content == "ab"
        assert result.cursor == StreamCursor(2)
        assert result.applied == 2
        assert result.skipped == 1

    def test_suggestions_survive_clear(self, make_event):
        deltas = [
            make_event("artifact-kind", "text"),
            _suggestion_event("s1"),
            make_event("clear"),
            _suggestion_event("s2"),
        ]
        result = consume(deltas)
        assert [s.id for s in result.metadata["text"].suggestions] == ["s1", "s2"]
        assert result.artifact.content == ""

    def test_metadata_keyed_by_current_kind(self, make_event):
        deltas = [
            make_event("artifact-kind", "html"),
            make_event("html-smart-update", '{"status": "starting"}'),
        ]
        result = consume(deltas)
        assert list(result.metadata) == ["html"]
        assert result.metadata["html"].smart_updates == ['{"status": "starting"}']

    def test_malformed_suggestion_recorded(self, make_event):
        deltas = [
            make_event("artifact-kind", "text"),
            make_event("suggestion", '{"description": "no id"}'),
        ]
        meta = consume(deltas).metadata["text"]
        assert meta.suggestions == []
        assert meta.invalid_suggestions == ['{"description": "no id"}']

    def test_input_metadata_not_mutated(self):
        metadata: dict = {}
        consume([_suggestion_event("s1")], metadata=metadata)
        assert metadata == {}


# ── ArtifactSession ──────────────────────────────────────────


class TestArtifactSession:
    def test_feed_growing_snapshots(self, text_document_events):
        session = ArtifactSession(chat_id="chat-1", reveal_window=(400, 450))
        session.feed(text_document_events[:3])
        assert session.artifact.content == "Hello "
        assert session.artifact.status == ArtifactStatus.STREAMING

        session.feed(text_document_events)
        assert session.artifact.content == "Hello world"
        assert session.artifact.status == ArtifactStatus.IDLE
        assert session.cursor == StreamCursor(4)

    def test_default_reveal_window_from_settings(self):
        assert ArtifactSession().reveal_window == (400, 450)

    def test_current_metadata(self, make_event):
        session = ArtifactSession()
        session.feed([make_event("artifact-kind", "text"), _suggestion_event("s1")])
        assert [s.id for s in session.current_metadata.suggestions] == ["s1"]

    def test_reset_starts_new_stream(self, make_event):
        session = ArtifactSession()
        session.feed([make_event("text-delta", "old")])
        session.reset()
        assert session.artifact is None
        assert session.cursor == StreamCursor()

        session.feed([make_event("text-delta", "new")])
        assert session.artifact.content == "new"

    def test_bad_record_does_not_stall_session(self):
        deltas = [{"type": "text-delta", "content": "a"}, {"content": "no type"}]
        session = ArtifactSession()
        session.feed(deltas)
        assert session.artifact.content == "a"
        assert session.cursor == StreamCursor(1)

        deltas.append({"type": "text-delta", "content": "b"})
        session.feed(deltas)
        assert session.artifact.content == "ab"
        assert session.cursor == StreamCursor(2)
