"""
Replay State
============

Working state of the reconstruction engine.

The engine folds frames into a ReplayState one at a time. The document log
keeps one of these as its head state (the document as it stands after the
last frame), and the query interface returns one for any target point.
"""

from dataclasses import dataclass
from typing import Optional

from kxt.models.editor import Editor


@dataclass(frozen=True, slots=True)
class ReplayState:
    """
    Document content and cursor as of one frame.

    Attributes:
        content: Reconstructed document text
        cursor: Working edit descriptor, None when no cursor frame is
            active (deltas then append at the end)
        frame_index: Index of the last frame folded into this state
        timestamp_ms: Resolved absolute time of that frame
    """

    content: str
    cursor: Optional[Editor]
    frame_index: int
    timestamp_ms: int

    @property
    def effective_cursor(self) -> Editor:
        """Cursor the next delta would be applied through."""
        if self.cursor is None:
            return Editor.append_at(len(self.content))
        return self.cursor

    def __repr__(self) -> str:
        return (
            f"ReplayState(frame={self.frame_index}, "
            f"t={self.timestamp_ms}ms, "
            f"len={len(self.content)})"
        )
