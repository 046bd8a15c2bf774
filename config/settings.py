"""Pydantic Settings — typed configuration with .env auto-loading."""

from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from config.timing_config import VideoTimingConfig


class Settings(BaseSettings):
    """Application configuration loaded from environment / .env file."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # ── Service ──────────────────────────────────────────────
    service_port: int = 5000
    cors_origins: list[str] = ["*"]
    debug: bool = False
    log_level: str = "INFO"

    # ── Artifact stream ──────────────────────────────────────
    # A streaming text artifact is revealed once its content length lands
    # strictly inside this window.
    reveal_min_chars: int = 400
    reveal_max_chars: int = 450
    max_replay_events: int = 5000  # per /api/artifact/replay request

    # ── Video timing ─────────────────────────────────────────
    words_per_minute: float = 150
    max_scene_seconds: float = 30.0
    min_scene_seconds: float = 5.0
    min_char_display_time: float = 0.03
    max_char_display_time: float = 0.08
    max_char_reveals: int = 30
    text_reveal_utilization: float = 0.85
    word_reveal_utilization: float = 0.90
    typewriter_font_size: int = 40
    typewriter_font_color: str = "white@0.9"
    typewriter_fps: int = 30

    # ── Helpers ───────────────────────────────────────────────

    @property
    def reveal_window(self) -> tuple[int, int]:
        return (self.reveal_min_chars, self.reveal_max_chars)

    def get_video_timing_config(self) -> VideoTimingConfig:
        """Build a :class:`VideoTimingConfig` from global .env defaults."""
        return VideoTimingConfig(
            words_per_minute=self.words_per_minute,
            max_scene_seconds=self.max_scene_seconds,
            min_scene_seconds=self.min_scene_seconds,
            min_char_display_time=self.min_char_display_time,
            max_char_display_time=self.max_char_display_time,
            max_char_reveals=self.max_char_reveals,
            text_reveal_utilization=self.text_reveal_utilization,
            word_reveal_utilization=self.word_reveal_utilization,
            typewriter_font_size=self.typewriter_font_size,
            typewriter_font_color=self.typewriter_font_color,
            typewriter_fps=self.typewriter_fps,
        )


@lru_cache
def get_settings() -> Settings:
    """Singleton accessor for application settings."""
    return Settings()
