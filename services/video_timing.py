"""Video timing — scene breaks, text reveal schedules, typewriter filters.

All functions are pure: no I/O, no shared state, safe to call from
concurrent requests.  Timing constants come from :class:`VideoTimingConfig`
(global defaults from Settings, overridable per call).

Speaking-rate model: ``words_per_minute / 60`` words per second (150 wpm by
default).  A scene never gets less than ``min_scene_seconds``.
"""

from __future__ import annotations

import logging
import math
import re

from config.settings import get_settings
from config.timing_config import VideoTimingConfig
from models.video import OverlayPosition, SceneBreak, TextReveal

logger = logging.getLogger(__name__)

_SENTENCE_END_RE = re.compile(r"[.!?]+")
SCENE_JOINER = ". "

# Characters FFmpeg drawtext needs escaped inside text='...'.
_DRAWTEXT_ESCAPES = {
    "'": "\\'",
    ":": "\\:",
    "[": "\\[",
    "]": "\\]",
    ",": "\\,",
    '"': '\\"',
    ";": "\\;",
}


def _config(config: VideoTimingConfig | None) -> VideoTimingConfig:
    return config if config is not None else get_settings().get_video_timing_config()


def count_words(text: str) -> int:
    """Whitespace-delimited, non-empty tokens."""
    return len(text.split())


def split_sentences(script: str) -> list[str]:
    """Split on runs of ``.``, ``!`` or ``?``; drop blank fragments."""
    return [s.strip() for s in _SENTENCE_END_RE.split(script) if s.strip()]


def estimate_speaking_time(text: str, config: VideoTimingConfig | None = None) -> float:
    """Seconds needed to narrate *text* at the configured speaking rate."""
    cfg = _config(config)
    return count_words(text) / cfg.words_per_second


# ── Scene breaks ─────────────────────────────────────────────────


def calculate_scene_breaks(
    script: str,
    target_duration_seconds: float,
    config: VideoTimingConfig | None = None,
) -> list[SceneBreak]:
    """Partition *script* into sentence-aligned scenes.

    Steps:
        1. sentences = script split on terminal punctuation.
        2. estimated speaking time = total words / words per second.
        3. per-scene cap = min(max_scene_seconds, target / 2).
        4. scene count = max(min_scenes, ceil(speaking time / cap)).
        5. contiguous chunks of ceil(sentences / scene count) sentences,
           joined with ". ".
        6. each scene lasts max(min_scene_seconds, its words / words per second).

    Fewer than ``scene count`` scenes come back when sentences run out.  A
    blank script gives ``[]``; a script with words but no sentence text
    (punctuation only) gives one empty scene at the floor duration.
    """
    cfg = _config(config)
    if not script or not script.strip():
        return []

    wps = cfg.words_per_second
    sentences = split_sentences(script)
    if not sentences:
        logger.debug("Script has no sentence text; returning a single floor scene")
        return [SceneBreak(text="", duration_seconds=cfg.min_scene_seconds, estimated_word_count=0)]

    estimated_speaking_time = count_words(script) / wps
    per_scene_cap = min(cfg.max_scene_seconds, target_duration_seconds / 2)
    if per_scene_cap > 0:
        scene_count = max(cfg.min_scenes, math.ceil(estimated_speaking_time / per_scene_cap))
    else:
        # Non-positive targets are the caller's problem; fall back to one
        # sentence per scene rather than dividing by zero.
        scene_count = max(cfg.min_scenes, len(sentences))
    sentences_per_scene = math.ceil(len(sentences) / scene_count)

    scenes: list[SceneBreak] = []
    for start in range(0, len(sentences), sentences_per_scene):
        text = SCENE_JOINER.join(sentences[start:start + sentences_per_scene]).strip()
        words = count_words(text)
        scenes.append(
            SceneBreak(
                text=text,
                duration_seconds=max(cfg.min_scene_seconds, words / wps),
                estimated_word_count=words,
            )
        )

    logger.debug(
        "Planned %d scenes (target %d) for %d sentences, ~%.1fs of narration",
        len(scenes),
        scene_count,
        len(sentences),
        estimated_speaking_time,
    )
    return scenes


# ── Text reveals ─────────────────────────────────────────────────


def calculate_text_reveals(
    text: str,
    scene_duration: float,
    config: VideoTimingConfig | None = None,
) -> list[TextReveal]:
    """Character-group reveals for a typewriter effect.

    Text is shown over min(speaking time, text_reveal_utilization × scene).
    Per-character time is clamped to [min_char_display_time,
    max_char_display_time]; characters are grouped so a scene has about
    ``max_char_reveals`` reveals.
    """
    cfg = _config(config)
    clean = (text or "").strip()
    if not clean:
        return []

    total_chars = len(clean)
    speaking_time = count_words(clean) / cfg.words_per_second
    actual_duration = min(speaking_time, scene_duration * cfg.text_reveal_utilization)
    time_per_char = max(
        cfg.min_char_display_time,
        min(cfg.max_char_display_time, actual_duration / total_chars),
    )
    chars_per_reveal = max(1, total_chars // cfg.max_char_reveals)

    reveals: list[TextReveal] = []
    for start in range(0, total_chars, chars_per_reveal):
        end = min(start + chars_per_reveal, total_chars)
        reveals.append(
            TextReveal(
                fragment=clean[start:end],
                start_time=start * time_per_char,
                end_time=min(end * time_per_char, actual_duration),
                cumulative_text=clean[:end],
            )
        )
    return reveals


def calculate_word_reveals(
    text: str,
    scene_duration: float,
    config: VideoTimingConfig | None = None,
) -> list[TextReveal]:
    """Word-by-word reveals spread evenly over the available time.

    Available time is min(speaking time, word_reveal_utilization × scene).
    """
    cfg = _config(config)
    words = (text or "").split()
    if not words:
        return []

    speaking_time = len(words) / cfg.words_per_second
    actual_duration = min(speaking_time, scene_duration * cfg.word_reveal_utilization)
    time_per_word = actual_duration / len(words)

    return [
        TextReveal(
            fragment=word,
            start_time=i * time_per_word,
            end_time=(i + 1) * time_per_word,
            cumulative_text=" ".join(words[: i + 1]),
        )
        for i, word in enumerate(words)
    ]


# ── FFmpeg overlay ───────────────────────────────────────────────


def escape_drawtext(text: str) -> str:
    return "".join(_DRAWTEXT_ESCAPES.get(ch, ch) for ch in text)


def generate_typewriter_filters(
    reveals: list[TextReveal],
    font_size: int | None = None,
    font_color: str | None = None,
    position: OverlayPosition | None = None,
    fps: int | None = None,
    config: VideoTimingConfig | None = None,
) -> str:
    """Chain of ``drawtext`` filters, one per reveal, each enabled on its frames.

    The result starts with ``,`` so it can be appended to an existing filter
    graph label.  Empty *reveals* give ``""``.
    """
    if not reveals:
        return ""
    cfg = _config(config)
    font_size = font_size if font_size is not None else cfg.typewriter_font_size
    font_color = font_color if font_color is not None else cfg.typewriter_font_color
    fps = fps if fps is not None else cfg.typewriter_fps
    position = position or OverlayPosition()

    parts: list[str] = []
    for reveal in reveals:
        start_frame = math.floor(reveal.start_time * fps)
        end_frame = math.floor(reveal.end_time * fps)
        parts.append(
            f",drawtext=text='{escape_drawtext(reveal.cumulative_text)}'"
            f":fontfile={cfg.typewriter_font_file}"
            f":fontsize={font_size}"
            f":fontcolor={font_color}"
            f":x={position.x}"
            f":y={position.y}"
            f":enable='between(n\\,{start_frame}\\,{end_frame})'"
            f":borderw=2"
            f":bordercolor=black@0.5"
        )
    return "".join(parts)
