"""Reusable video timing parameters.

VideoTimingConfig is a standalone Pydantic model that can be:
- built from Settings as the global default,
- passed per-call to the planner functions for one-off overrides.

Priority chain (low → high):
    .env global defaults  →  per-call overrides
"""

from __future__ import annotations

from pydantic import BaseModel, Field, model_validator


class VideoTimingConfig(BaseModel):
    """Speaking-rate model and display clamps used by the scene planner."""

    words_per_minute: float = Field(default=150, gt=0, description="Narration speaking rate")
    max_scene_seconds: float = Field(default=30.0, gt=0, description="Upper cap per scene")
    min_scene_seconds: float = Field(default=5.0, ge=0, description="Floor per scene")
    min_scenes: int = Field(default=2, ge=1)
    min_char_display_time: float = Field(default=0.03, gt=0)
    max_char_display_time: float = Field(default=0.08, gt=0)
    max_char_reveals: int = Field(
        default=30, ge=1, description="Character reveals are grouped to stay near this count"
    )
    text_reveal_utilization: float = Field(default=0.85, gt=0, le=1.0)
    word_reveal_utilization: float = Field(default=0.90, gt=0, le=1.0)

    # FFmpeg typewriter overlay defaults
    typewriter_font_size: int = Field(default=40, gt=0)
    typewriter_font_color: str = "white@0.9"
    typewriter_font_file: str = "roboto.ttf"
    typewriter_fps: int = Field(default=30, gt=0)

    @model_validator(mode="after")
    def _check_char_clamp(self) -> VideoTimingConfig:
        if self.min_char_display_time > self.max_char_display_time:
            raise ValueError("min_char_display_time must not exceed max_char_display_time")
        return self

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @property
    def words_per_second(self) -> float:
        return self.words_per_minute / 60

    def merge(self, overrides: dict) -> VideoTimingConfig:
        """Return a new config: *self* as base, non-None *overrides* win."""
        base = self.model_dump()
        base.update({k: v for k, v in overrides.items() if v is not None})
        return VideoTimingConfig(**base)
