"""API request / response models."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import Field

from models.artifact import Artifact, ArtifactMetadata
from models.base import CamelModel
from models.video import SceneBreak, TextReveal


class SceneBreaksRequest(CamelModel):
    """POST /api/video-timing/scene-breaks — request body."""

    script: str
    target_duration: float = Field(gt=0, description="Target narration length in seconds")

    # Per-request timing overrides; None keeps the configured default.
    words_per_minute: float | None = None
    min_scene_seconds: float | None = None
    max_scene_seconds: float | None = None

    def timing_overrides(self) -> dict[str, Any]:
        return {
            "words_per_minute": self.words_per_minute,
            "min_scene_seconds": self.min_scene_seconds,
            "max_scene_seconds": self.max_scene_seconds,
        }


class SceneBreaksResponse(CamelModel):
    """POST /api/video-timing/scene-breaks — response body."""

    scenes: list[SceneBreak]
    scene_count: int
    total_duration: float


class RevealsRequest(CamelModel):
    """POST /api/video-timing/reveals — request body."""

    text: str
    scene_duration: float = Field(gt=0)
    mode: Literal["char", "word"] = "word"
    include_filters: bool = False

    words_per_minute: float | None = None
    min_char_display_time: float | None = None
    max_char_display_time: float | None = None

    def timing_overrides(self) -> dict[str, Any]:
        return {
            "words_per_minute": self.words_per_minute,
            "min_char_display_time": self.min_char_display_time,
            "max_char_display_time": self.max_char_display_time,
        }


class RevealsResponse(CamelModel):
    """POST /api/video-timing/reveals — response body."""

    reveals: list[TextReveal]
    filters: str | None = None


class ReplayRequest(CamelModel):
    """POST /api/artifact/replay — fold raw delta records into an artifact.

    ``cursor`` is the index of the last delta already reflected in
    ``artifact``; only later entries are applied.
    """

    deltas: list[dict[str, Any]]
    artifact: Artifact | None = None
    metadata: dict[str, ArtifactMetadata] = Field(default_factory=dict)
    cursor: int = Field(default=-1, ge=-1)


class ReplayResponse(CamelModel):
    """POST /api/artifact/replay — response body."""

    artifact: Artifact | None
    metadata: dict[str, ArtifactMetadata]
    cursor: int
    applied: int
    skipped: int = 0
    tool_activity: dict[str, dict[str, str | None]] = Field(default_factory=dict)
