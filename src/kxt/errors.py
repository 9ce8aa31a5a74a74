"""
Errors
======

Exceptions raised by the document log, the replay engine and the codec.

Rules:
    - Raised at the point of detection, never logged and swallowed
    - No partial application: a failed append leaves the log unchanged
    - Each exception carries one ErrorCode plus the offending frame
      index and/or timestamp so a host can surface them
"""

from typing import Optional

from kxt.models.error_codes import ErrorCode


class KxtError(Exception):
    """
    Base class for all Knowledge Text failures.

    Attributes:
        code: Machine-readable failure kind
        frame_index: Offending frame index, if known
        timestamp_ms: Offending resolved timestamp, if known
    """

    code: ErrorCode

    def __init__(
        self,
        message: str,
        frame_index: Optional[int] = None,
        timestamp_ms: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.frame_index = frame_index
        self.timestamp_ms = timestamp_ms

    def to_dict(self) -> dict:
        """Export as dictionary for logging/reporting."""
        return {
            "code": self.code.value,
            "message": str(self),
            "frame_index": self.frame_index,
            "timestamp_ms": self.timestamp_ms,
        }


class InvalidOrderingError(KxtError, ValueError):
    """Appended frame would resolve earlier than the end of the log."""

    code = ErrorCode.INVALID_ORDERING


class InvalidEditRangeError(KxtError, ValueError):
    """Cursor descriptor addresses a range outside the current document."""

    code = ErrorCode.INVALID_EDIT_RANGE


class FrameOutOfRangeError(KxtError, IndexError):
    """Frame index outside [0, frame_count)."""

    code = ErrorCode.OUT_OF_RANGE


class CorruptReplayError(KxtError):
    """Snapshot crossed during replay disagrees with the replayed content."""

    code = ErrorCode.CORRUPT_REPLAY


class CodecError(KxtError, ValueError):
    """Serialized log could not be decoded."""

    code = ErrorCode.MALFORMED_FILE

    def __init__(
        self,
        message: str,
        line_number: Optional[int] = None,
        frame_index: Optional[int] = None,
    ) -> None:
        super().__init__(message, frame_index=frame_index)
        self.line_number = line_number

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["line_number"] = self.line_number
        return data
