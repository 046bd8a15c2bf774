"""Artifact stream endpoints.

Endpoints:
- ``POST /api/artifact/replay``  — fold delta records into the artifact (JSON)
- ``POST /api/artifact/stream``  — re-emit delta records as Data Stream Protocol SSE
"""

from __future__ import annotations

import logging
from typing import AsyncGenerator

from fastapi import APIRouter, HTTPException
from starlette.responses import StreamingResponse

from config.settings import get_settings
from errors.exceptions import DeltaDecodeError, ReplayLimitError
from models.errors import classify_error
from models.request import ReplayRequest, ReplayResponse
from services.datastream import STREAM_HEADERS, DataStreamEncoder, parse_delta
from services.stream_consumer import StreamCursor, consume

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/artifact", tags=["artifact"])


def _check_limit(count: int) -> None:
    limit = get_settings().max_replay_events
    if count > limit:
        raise ReplayLimitError(count, limit)


@router.post("/replay", response_model=ReplayResponse)
async def replay(req: ReplayRequest):
    """Apply the deltas after ``cursor`` and return the resulting state.

    Undecodable records are skipped and counted in ``skipped``.
    """
    settings = get_settings()
    try:
        _check_limit(len(req.deltas))
        result = consume(
            req.deltas,
            StreamCursor(req.cursor),
            req.artifact,
            req.metadata,
            reveal_window=settings.reveal_window,
        )
    except ReplayLimitError as exc:
        raise HTTPException(status_code=413, detail=classify_error(exc))

    return ReplayResponse(
        artifact=result.artifact,
        metadata=result.metadata,
        cursor=result.cursor.last_index,
        applied=result.applied,
        skipped=result.skipped,
        tool_activity=result.artifact.tool_activity() if result.artifact else {},
    )


@router.post("/stream")
async def stream(req: ReplayRequest):
    """Encode the deltas after ``cursor`` as an SSE data stream.

    Undecodable records end the stream with an ``error`` part.
    """
    try:
        _check_limit(len(req.deltas))
    except ReplayLimitError as exc:
        raise HTTPException(status_code=413, detail=classify_error(exc))

    records = req.deltas[req.cursor + 1:]
    enc = DataStreamEncoder()

    async def _generate() -> AsyncGenerator[str, None]:
        yield enc.start()
        for record in records:
            try:
                event = parse_delta(record)
            except DeltaDecodeError as exc:
                yield enc.error(classify_error(exc))
                break
            yield enc.delta(event)
        yield enc.finish()

    return StreamingResponse(
        _generate(),
        media_type="text/event-stream",
        headers={**STREAM_HEADERS, "Cache-Control": "no-cache"},
    )
