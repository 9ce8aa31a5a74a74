"""
Error Codes
===========

Fixed set of machine-readable codes for log and replay failures.

Every exception raised by the package carries exactly ONE of these codes,
so a host (viewer, CLI, diff tool) can report the failure kind together
with the offending frame index or timestamp.
"""

from enum import Enum


class ErrorCode(str, Enum):
    """
    Machine-readable failure kinds.

    Attributes:
        INVALID_ORDERING: Appended frame resolves earlier than the log's end
        INVALID_EDIT_RANGE: Cursor descriptor falls outside the document
        OUT_OF_RANGE: Frame index outside [0, frame_count)
        CORRUPT_REPLAY: Snapshot disagrees with incrementally replayed content
        MALFORMED_FILE: Serialized log cannot be decoded
    """

    # Append-time
    INVALID_ORDERING = "INVALID_ORDERING"
    INVALID_EDIT_RANGE = "INVALID_EDIT_RANGE"

    # Query-time
    OUT_OF_RANGE = "OUT_OF_RANGE"
    CORRUPT_REPLAY = "CORRUPT_REPLAY"

    # Persistence
    MALFORMED_FILE = "MALFORMED_FILE"
