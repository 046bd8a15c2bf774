"""Structured error codes for SSE ``errorText`` and HTTP error details.

Errors surfaced to the client follow one format::

    {ERROR_CODE}: {human_readable_detail}
"""

from __future__ import annotations

from enum import Enum

from errors.exceptions import DeltaDecodeError, ReplayLimitError


class ErrorCode(str, Enum):
    """Error codes shared by the stream encoder and the HTTP routes."""

    INVALID_REQUEST = "INVALID_REQUEST"
    INVALID_DELTA = "INVALID_DELTA"
    REPLAY_TOO_LARGE = "REPLAY_TOO_LARGE"
    INTERNAL_ERROR = "INTERNAL_ERROR"


def format_error(code: ErrorCode, detail: str) -> str:
    """Format an error for SSE ``errorText``.

    Returns:
        ``{ERROR_CODE}: {detail}``
    """
    return f"{code.value}: {detail}"


def classify_error(exc: Exception) -> str:
    """Map an exception to a formatted ``errorText``.

    Classification order (first match wins):
        1. Undecodable delta envelope.
        2. Oversized replay.
        3. Fallback — ``INTERNAL_ERROR``.
    """
    if isinstance(exc, DeltaDecodeError):
        return format_error(ErrorCode.INVALID_DELTA, str(exc))
    if isinstance(exc, ReplayLimitError):
        return format_error(ErrorCode.REPLAY_TOO_LARGE, str(exc))
    return format_error(ErrorCode.INTERNAL_ERROR, f"{type(exc).__name__}: {exc}")
