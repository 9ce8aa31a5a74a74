"""
Frame Reducer
=============

Folds one frame into a ReplayState.

This is the single place where cursor intent (CursorFrame) is reconciled
with content deltas (ContentFrame). Both the reconstruction engine and the
document log's head state go through `apply_frame`, so a state derived by
replay and the state the log validated appends against can never drift.

Application Rules:
    ContentFrame, no active cursor:
        append payload at the end of the content
    ContentFrame, INSERT at p:
        content[:p] + payload + content[p:], cursor moves to p + len(payload)
    ContentFrame, OVERWRITE at p spanning n:
        content[:p] + payload + content[p+n:], cursor moves to
        p + len(payload) and the span is consumed (n becomes 0)
    CursorFrame:
        replaces the working cursor, content unchanged
    SnapshotFrame:
        re-synchronises content; in strict mode a mismatch with the
        replayed content raises CorruptReplayError
"""

from kxt.errors import CorruptReplayError
from kxt.models.editor import EditMode
from kxt.models.frames import BaseFrame, ContentFrame, CursorFrame, SnapshotFrame
from kxt.models.state import ReplayState


def initial_state(snapshot: SnapshotFrame) -> ReplayState:
    """State right after the first frame of a log."""
    return ReplayState(
        content=snapshot.content,
        cursor=None,
        frame_index=0,
        timestamp_ms=snapshot.timestamp_ms,
    )


def apply_frame(
    state: ReplayState,
    frame: BaseFrame,
    frame_index: int,
    timestamp_ms: int,
    strict: bool = False,
) -> ReplayState:
    """
    Apply a frame to a state and return the resulting state.

    Args:
        state: State as of the previous frame
        frame: Frame to apply
        frame_index: Log index of `frame`
        timestamp_ms: Resolved absolute time of `frame`
        strict: Raise CorruptReplayError when a snapshot disagrees with
            the replayed content instead of re-synchronising to it

    Returns:
        New ReplayState; `state` is not modified.
    """
    if isinstance(frame, ContentFrame):
        return _apply_content(state, frame, frame_index, timestamp_ms)

    if isinstance(frame, CursorFrame):
        return ReplayState(
            content=state.content,
            cursor=frame.editor,
            frame_index=frame_index,
            timestamp_ms=timestamp_ms,
        )

    if isinstance(frame, SnapshotFrame):
        matches = frame.content == state.content
        if strict and not matches:
            raise CorruptReplayError(
                f"Snapshot at frame {frame_index} disagrees with replayed content "
                f"({len(frame.content)} chars vs {len(state.content)} chars)",
                frame_index=frame_index,
                timestamp_ms=timestamp_ms,
            )
        return ReplayState(
            content=frame.content,
            # A re-synchronised document invalidates the working cursor.
            cursor=state.cursor if matches else None,
            frame_index=frame_index,
            timestamp_ms=timestamp_ms,
        )

    raise TypeError(f"Unknown frame kind: {type(frame).__name__}")


def _apply_content(
    state: ReplayState,
    frame: ContentFrame,
    frame_index: int,
    timestamp_ms: int,
) -> ReplayState:
    payload = frame.content
    cursor = state.cursor

    if cursor is None:
        return ReplayState(
            content=state.content + payload,
            cursor=None,
            frame_index=frame_index,
            timestamp_ms=timestamp_ms,
        )

    start = cursor.position
    if cursor.mode is EditMode.OVERWRITE:
        stop = start + cursor.length
    else:
        stop = start

    return ReplayState(
        content=state.content[:start] + payload + state.content[stop:],
        cursor=cursor.advanced(len(payload)),
        frame_index=frame_index,
        timestamp_ms=timestamp_ms,
    )
