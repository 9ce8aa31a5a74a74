"""
Reconstruction Engine
=====================

Produces document content and cursor state at any point in a log.

Algorithm:
    1. Boundary: last frame at or before the target. For a time target
       this is a binary search over the log's resolved-time index; for an
       index target it is the index itself.
    2. Checkpoint lookup: binary search over snapshot indices for the
       latest snapshot at or before the boundary (or an explicit seed).
    3. Seed: snapshot content plus the working cursor the log recorded
       at that snapshot.
    4. Forward replay: fold every frame after the seed up to and
       including the boundary through `apply_frame`.

Complexity:
    O(log frames) lookup + O(frames since seed) replay. The checkpoint
    policy bounds the replay window.

The engine reads through the FrameSource protocol, so it works against a
live DocumentLog (under the log's lock) or a lock-free LogVersion.
"""

import logging
from bisect import bisect_right
from typing import Optional, Protocol, Sequence

from kxt.errors import FrameOutOfRangeError
from kxt.models.editor import Editor
from kxt.models.frames import BaseFrame, SnapshotFrame
from kxt.models.state import ReplayState
from kxt.replay.reducer import apply_frame


logger = logging.getLogger(__name__)


class FrameSource(Protocol):
    """
    Read interface the engine replays from.

    Implemented by:
        - DocumentLog (live, append-only)
        - LogVersion (immutable prefix of a log)
    """

    def frame_count(self) -> int:
        ...

    def frame_at(self, index: int) -> BaseFrame:
        ...

    def resolved_times(self) -> Sequence[int]:
        """Resolved absolute time per frame; may extend past frame_count()."""
        ...

    def snapshot_indices(self) -> Sequence[int]:
        """Ascending snapshot indices; may extend past frame_count()."""
        ...

    def seed_cursor_at(self, snapshot_index: int) -> Optional[Editor]:
        """Working cursor recorded when the snapshot was appended."""
        ...


class ReconstructionEngine:
    """
    Replays a frame source to a target time or frame index.

    Example:
        engine = ReconstructionEngine(log)

        text = engine.reconstruct_at(timestamp_ms=200)
        state = engine.state_at_frame(4)
        print(state.content, state.effective_cursor)
    """

    def __init__(self, source: FrameSource) -> None:
        """
        Initialize engine.

        Args:
            source: Log or log version to replay
        """
        self._source = source

    # =========================================================================
    # Lookup
    # =========================================================================

    def boundary_for_time(self, timestamp_ms: int) -> int:
        """
        Index of the last frame whose resolved time is <= timestamp_ms.

        Frames with equal resolved time are all included, in log order.
        Targets before the first frame clamp to frame 0.
        """
        count = self._source.frame_count()
        position = bisect_right(self._source.resolved_times(), timestamp_ms, 0, count)
        return max(position - 1, 0)

    def seed_for(self, boundary: int) -> int:
        """Index of the latest snapshot at or before `boundary`."""
        snapshots = self._source.snapshot_indices()
        position = bisect_right(snapshots, boundary)
        # Frame 0 is always a snapshot, so position >= 1.
        return snapshots[position - 1]

    def _check_index(self, index: int) -> None:
        count = self._source.frame_count()
        if not 0 <= index < count:
            raise FrameOutOfRangeError(
                f"Frame index {index} outside [0, {count})",
                frame_index=index,
            )

    # =========================================================================
    # Replay
    # =========================================================================

    def state_at_frame(self, index: int, seed_index: Optional[int] = None) -> ReplayState:
        """
        Reconstruct state up to and including frame `index`.

        Args:
            index: Target frame index
            seed_index: Snapshot to replay from. Defaults to the latest
                snapshot at or before `index`. Any earlier snapshot gives
                the same result on a well-formed log.

        Returns:
            ReplayState as of frame `index`

        Raises:
            FrameOutOfRangeError: index (or seed_index) out of range
            ValueError: seed_index is not a snapshot at or before index
            CorruptReplayError: a snapshot crossed during replay disagrees
                with the replayed content
        """
        self._check_index(index)

        if seed_index is None:
            seed_index = self.seed_for(index)
        else:
            self._check_index(seed_index)
            if seed_index > index:
                raise ValueError(f"Seed {seed_index} is after target frame {index}")

        return self._replay(seed_index, index)

    def state_at(self, timestamp_ms: int, seed_index: Optional[int] = None) -> ReplayState:
        """Reconstruct state as of an absolute time in ms."""
        return self.state_at_frame(self.boundary_for_time(timestamp_ms), seed_index)

    def _replay(self, seed_index: int, boundary: int) -> ReplayState:
        source = self._source
        seed = source.frame_at(seed_index)
        if not isinstance(seed, SnapshotFrame):
            raise ValueError(f"Seed frame {seed_index} is not a snapshot")

        times = source.resolved_times()
        state = ReplayState(
            content=seed.content,
            cursor=source.seed_cursor_at(seed_index),
            frame_index=seed_index,
            timestamp_ms=times[seed_index],
        )

        logger.debug(f"Replaying frames {seed_index}..{boundary} from snapshot {seed_index}")

        for index in range(seed_index + 1, boundary + 1):
            state = apply_frame(
                state,
                source.frame_at(index),
                frame_index=index,
                timestamp_ms=times[index],
                strict=True,
            )
        return state

    def verify(self) -> ReplayState:
        """
        Replay the whole source from frame 0, checking every snapshot.

        Returns:
            Final ReplayState

        Raises:
            CorruptReplayError: first snapshot that disagrees with replay
        """
        return self._replay(0, self._source.frame_count() - 1)

    # =========================================================================
    # Query interface
    # =========================================================================

    def reconstruct_at(self, timestamp_ms: int) -> str:
        """Document text as of an absolute time in ms."""
        return self.state_at(timestamp_ms).content

    def reconstruct_at_frame(self, index: int) -> str:
        """Document text up to and including frame `index`."""
        return self.state_at_frame(index).content

    def cursor_at(self, timestamp_ms: int) -> Editor:
        """Effective edit descriptor as of an absolute time in ms."""
        return self.state_at(timestamp_ms).effective_cursor
