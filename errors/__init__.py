"""Custom exception hierarchy for the artifact stream core."""

from errors.exceptions import DeltaDecodeError, ReplayLimitError, StreamCoreError

__all__ = ["DeltaDecodeError", "ReplayLimitError", "StreamCoreError"]
