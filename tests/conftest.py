"""Shared pytest fixtures for artifact stream tests.

Provides:
- ``make_event``: Factory for DeltaEvent values
- ``streaming_artifact``: Factory for a streaming Artifact with N chars of content
- ``text_document_events``: The id → kind → text → finish scenario
"""

from __future__ import annotations

import pytest

from models.artifact import Artifact, ArtifactStatus
from models.stream_events import DeltaEvent


@pytest.fixture
def make_event():
    """Build a DeltaEvent from ``(kind, payload)``."""

    def _make(kind: str, payload="") -> DeltaEvent:
        return DeltaEvent(kind=kind, payload=payload)

    return _make


@pytest.fixture
def streaming_artifact():
    """Streaming artifact whose content is *length* characters long."""

    def _make(length: int = 0, **overrides) -> Artifact:
        fields = {"content": "x" * length, "status": ArtifactStatus.STREAMING}
        fields.update(overrides)
        return Artifact(**fields)

    return _make


@pytest.fixture
def text_document_events() -> list[DeltaEvent]:
    return [
        DeltaEvent(kind="id", payload="doc-1"),
        DeltaEvent(kind="artifact-kind", payload="text"),
        DeltaEvent(kind="text-delta", payload="Hello "),
        DeltaEvent(kind="text-delta", payload="world"),
        DeltaEvent(kind="finish", payload=""),
    ]
