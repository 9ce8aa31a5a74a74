"""
Data Models
===========

Pydantic models for Knowledge Text logs.

Models:
    Editor:
        - EditMode: INSERT or OVERWRITE
        - Editor: position/length/mode descriptor

    Frames:
        - SnapshotFrame: Full content checkpoint
        - CursorFrame: Pending edit descriptor
        - ContentFrame: Incremental text delta
        - Frame: Discriminated union of the three

    State:
        - ReplayState: Content and cursor as of one frame

    Errors:
        - ErrorCode: Machine-readable failure kinds
"""

from kxt.models.editor import EditMode, Editor
from kxt.models.error_codes import ErrorCode
from kxt.models.frames import ContentFrame, CursorFrame, Frame, SnapshotFrame
from kxt.models.state import ReplayState

__all__ = [
    # Editor
    "EditMode",
    "Editor",
    # Frames
    "SnapshotFrame",
    "CursorFrame",
    "ContentFrame",
    "Frame",
    # State
    "ReplayState",
    # Errors
    "ErrorCode",
]
