"""Video timing models — scene breaks and progressive text reveals."""

from __future__ import annotations

from pydantic import Field

from models.base import CamelModel, FrozenCamelModel


class SceneBreak(FrozenCamelModel):
    """One contiguous, sentence-aligned slice of a narration script."""

    text: str
    duration_seconds: float = Field(ge=0.0)
    estimated_word_count: int = Field(ge=0)


class TextReveal(FrozenCamelModel):
    """A fragment of on-screen text and the window in which it appears.

    ``cumulative_text`` is everything shown so far, including ``fragment``.
    """

    fragment: str
    start_time: float
    end_time: float
    cumulative_text: str


class OverlayPosition(CamelModel):
    """FFmpeg drawtext position expressions."""

    x: str = "(w-text_w)/2"
    y: str = "h-100"
