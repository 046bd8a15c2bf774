"""Video timing endpoints — scene planning and text reveal schedules.

Endpoints:
- ``POST /api/video-timing/scene-breaks`` — split a narration script into scenes
- ``POST /api/video-timing/reveals``      — reveal schedule (+ optional FFmpeg filters)

Both accept optional timing overrides that are merged over the configured
defaults for that request only.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, HTTPException
from pydantic import ValidationError

from config.settings import get_settings
from config.timing_config import VideoTimingConfig
from models.errors import ErrorCode, format_error
from models.request import (
    RevealsRequest,
    RevealsResponse,
    SceneBreaksRequest,
    SceneBreaksResponse,
)
from services.video_timing import (
    calculate_scene_breaks,
    calculate_text_reveals,
    calculate_word_reveals,
    generate_typewriter_filters,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/video-timing", tags=["video-timing"])


def _request_config(overrides: dict[str, Any]) -> VideoTimingConfig:
    """Global timing defaults with this request's overrides applied.

    Raises:
        HTTPException: 422 ``INVALID_REQUEST`` when the merged config is invalid.
    """
    try:
        return get_settings().get_video_timing_config().merge(overrides)
    except ValidationError as exc:
        logger.warning("Rejected timing overrides %s", overrides)
        detail = "; ".join(err["msg"] for err in exc.errors())
        raise HTTPException(
            status_code=422, detail=format_error(ErrorCode.INVALID_REQUEST, detail)
        )


@router.post("/scene-breaks", response_model=SceneBreaksResponse)
async def scene_breaks(req: SceneBreaksRequest):
    """Plan sentence-aligned scenes for a script and target duration."""
    config = _request_config(req.timing_overrides())
    scenes = calculate_scene_breaks(req.script, req.target_duration, config=config)
    logger.info(
        "Scene plan: %d scenes for %d chars (target %.1fs)",
        len(scenes),
        len(req.script),
        req.target_duration,
    )
    return SceneBreaksResponse(
        scenes=scenes,
        scene_count=len(scenes),
        total_duration=sum(s.duration_seconds for s in scenes),
    )


@router.post("/reveals", response_model=RevealsResponse)
async def reveals(req: RevealsRequest):
    """Compute progressive on-screen text timing for one scene."""
    config = _request_config(req.timing_overrides())
    if req.mode == "char":
        schedule = calculate_text_reveals(req.text, req.scene_duration, config=config)
    else:
        schedule = calculate_word_reveals(req.text, req.scene_duration, config=config)
    filters = (
        generate_typewriter_filters(schedule, config=config) if req.include_filters else None
    )
    return RevealsResponse(reveals=schedule, filters=filters)
