"""
Document Log
============

Append-only, time-ordered sequence of frames.

The log owns every frame exclusively and enforces the cross-frame
invariants that single frames cannot check on their own.

Design Rules:
    - The first frame is always a SnapshotFrame
    - Resolved times never decrease (content deltas are pre-resolved to
      absolute times once, at append, and cached)
    - Cursor descriptors must fit the document as it stands immediately
      before the append
    - Frames are never edited or removed; an append either fully succeeds
      or leaves the log unchanged
    - One RLock guards appends and reads on a live log; LogVersion views
      are read without it

Head State:
    The log folds every appended frame into a head ReplayState using the
    same reducer as the reconstruction engine. The head is "the document
    as it stands" for cursor validation and supplies the content of
    snapshots synthesized by the checkpoint policy. The working cursor at
    each snapshot is recorded so that replay seeded from any snapshot
    equals replay through it.
"""

import logging
import threading
from typing import ContextManager, Dict, Iterator, List, Optional, Sequence, Union

from kxt.errors import FrameOutOfRangeError, InvalidEditRangeError, InvalidOrderingError
from kxt.log.checkpoint import CheckpointPolicy
from kxt.log.version import LogVersion, ReconstructionQueries
from kxt.models.editor import EditMode, Editor
from kxt.models.frames import BaseFrame, ContentFrame, CursorFrame, SnapshotFrame
from kxt.models.state import ReplayState
from kxt.replay.engine import ReconstructionEngine
from kxt.replay.reducer import apply_frame, initial_state


logger = logging.getLogger(__name__)


class DocumentLog(ReconstructionQueries):
    """
    Temporal edit log of one document.

    Attributes:
        policy: Checkpoint policy consulted after every content/cursor append

    Example:
        log = DocumentLog.new()
        log.cursor(0, position=0, length=0, mode=EditMode.INSERT)
        log.content("Hello", delta_ms=100)
        log.content(" World", delta_ms=120)

        log.reconstruct_at(100)   # "Hello"
        log.reconstruct_at(220)   # "Hello World"
    """

    def __init__(self, policy: Optional[CheckpointPolicy] = None) -> None:
        """
        Initialize an empty log.

        The first append must be a SnapshotFrame. Use DocumentLog.new()
        to get a log already seeded with its initial snapshot.

        Args:
            policy: Checkpoint policy. None disables automatic snapshots.
        """
        self.policy = policy or CheckpointPolicy.disabled()

        self._lock = threading.RLock()
        self._frames: List[BaseFrame] = []
        self._times: List[int] = []
        self._snapshots: List[int] = []
        self._seed_cursors: Dict[int, Optional[Editor]] = {}
        self._head: Optional[ReplayState] = None

        self._frames_since_snapshot: int = 0
        self._longest_window: int = 0
        self._synthesized_count: int = 0

        self._engine = ReconstructionEngine(self)

    @classmethod
    def new(
        cls,
        content: str = "",
        timestamp_ms: int = 0,
        policy: Optional[CheckpointPolicy] = None,
    ) -> "DocumentLog":
        """Create a log holding its initial snapshot."""
        log = cls(policy=policy)
        log.snapshot(content, timestamp_ms)
        return log

    # =========================================================================
    # Writer API
    # =========================================================================

    def append(self, frame: BaseFrame) -> int:
        """
        Append a frame to the log.

        Args:
            frame: Snapshot, cursor or content frame

        Returns:
            Index of the appended frame. A snapshot synthesized by the
            checkpoint policy, if any, follows at the next index.

        Raises:
            InvalidOrderingError: first frame is not a snapshot, or the
                frame resolves earlier than the end of the log
            InvalidEditRangeError: cursor descriptor outside the document
        """
        with self._lock:
            index = self._commit(frame)

            if not isinstance(frame, SnapshotFrame) and self._checkpoint_due():
                self._synthesize_snapshot()

            return index

    def snapshot(self, content: str, timestamp_ms: int) -> int:
        """Append a full-content checkpoint at an absolute time."""
        return self.append(SnapshotFrame(content=content, timestamp_ms=timestamp_ms))

    def cursor(
        self,
        timestamp_ms: int,
        position: int = 0,
        length: int = 0,
        mode: Union[EditMode, str] = EditMode.INSERT,
    ) -> int:
        """Append an edit descriptor at an absolute time."""
        return self.append(CursorFrame.at(timestamp_ms, position, length, EditMode(mode)))

    def content(self, text: str, delta_ms: int = 0) -> int:
        """Append a content delta `delta_ms` after the previous frame."""
        return self.append(ContentFrame(content=text, delta_ms=delta_ms))

    def _commit(self, frame: BaseFrame) -> int:
        index = len(self._frames)

        if self._head is None:
            if not isinstance(frame, SnapshotFrame):
                raise InvalidOrderingError(
                    f"First frame must be a snapshot, got {type(frame).__name__}",
                    frame_index=index,
                )
            head = initial_state(frame)
            resolved = frame.timestamp_ms
        else:
            previous = self._times[-1]
            resolved = frame.resolve_time(previous)
            if resolved < previous:
                raise InvalidOrderingError(
                    f"Frame resolves to {resolved}ms, before log end at {previous}ms",
                    frame_index=index,
                    timestamp_ms=resolved,
                )
            if isinstance(frame, CursorFrame) and not frame.editor.fits(len(self._head.content)):
                editor = frame.editor
                raise InvalidEditRangeError(
                    f"{editor.mode.value} range [{editor.position}, {editor.end}) "
                    f"outside document of length {len(self._head.content)}",
                    frame_index=index,
                    timestamp_ms=resolved,
                )
            head = apply_frame(self._head, frame, frame_index=index, timestamp_ms=resolved)

        # Validation done: from here on the append cannot fail.
        self._frames.append(frame)
        self._times.append(resolved)
        self._head = head

        if isinstance(frame, SnapshotFrame):
            self._seed_cursors[index] = head.cursor
            self._snapshots.append(index)
            self._frames_since_snapshot = 0
        else:
            self._frames_since_snapshot += 1
            self._longest_window = max(self._longest_window, self._frames_since_snapshot)

        return index

    def _checkpoint_due(self) -> bool:
        if not self.policy.enabled:
            return False
        elapsed = self._times[-1] - self._times[self._snapshots[-1]]
        return self.policy.should_snapshot(self._frames_since_snapshot, elapsed)

    def _synthesize_snapshot(self) -> None:
        head = self._head
        index = self._commit(SnapshotFrame(content=head.content, timestamp_ms=head.timestamp_ms))
        self._synthesized_count += 1
        logger.debug(
            f"Synthesized snapshot at frame {index} "
            f"(t={head.timestamp_ms}ms, {len(head.content)} chars)"
        )

    # =========================================================================
    # Accessors
    # =========================================================================

    def _reading(self) -> ContextManager:
        return self._lock

    def frame_count(self) -> int:
        return len(self._frames)

    def frame_at(self, index: int) -> BaseFrame:
        """
        Frame at a log index.

        Raises:
            FrameOutOfRangeError: index outside [0, frame_count)
        """
        count = len(self._frames)
        if not 0 <= index < count:
            raise FrameOutOfRangeError(
                f"Frame index {index} outside [0, {count})",
                frame_index=index,
            )
        return self._frames[index]

    def resolved_time_at(self, index: int) -> int:
        """Cached absolute time of the frame at `index`."""
        self.frame_at(index)
        return self._times[index]

    def resolved_times(self) -> Sequence[int]:
        return self._times

    def snapshot_indices(self) -> Sequence[int]:
        """Ascending indices of all snapshot frames."""
        return self._snapshots

    def seed_cursor_at(self, snapshot_index: int) -> Optional[Editor]:
        return self._seed_cursors.get(snapshot_index)

    @property
    def head(self) -> ReplayState:
        """Document content and cursor after the last frame."""
        if self._head is None:
            raise FrameOutOfRangeError("Log is empty", frame_index=0)
        return self._head

    def version(self) -> LogVersion:
        """Immutable view of the log as it stands now."""
        with self._lock:
            return LogVersion(
                frames=self._frames,
                times=self._times,
                snapshots=self._snapshots,
                seed_cursors=self._seed_cursors,
                count=len(self._frames),
            )

    def __iter__(self) -> Iterator[BaseFrame]:
        return iter(self.version())

    def metrics(self) -> dict:
        """
        Get log metrics for observability.

        Returns:
            Dict with frame_count, snapshot_count, synthesized_snapshots,
            duration_ms, frames_since_snapshot, longest_replay_window
        """
        with self._lock:
            return {
                "frame_count": len(self._frames),
                "snapshot_count": len(self._snapshots),
                "synthesized_snapshots": self._synthesized_count,
                "duration_ms": self._times[-1] if self._times else 0,
                "frames_since_snapshot": self._frames_since_snapshot,
                "longest_replay_window": self._longest_window,
            }

    def __repr__(self) -> str:
        return (
            f"DocumentLog(frames={len(self._frames)}, "
            f"snapshots={len(self._snapshots)})"
        )
