"""
Log Versions
============

Immutable, lock-free views of a document log prefix.

Because the log is append-only and frames are immutable, the first N
entries of its storage never change once written. A LogVersion captures N
and reads the shared storage directly: holding a version costs nothing,
and readers of a version never contend with the writer's lock.

This module also holds the query interface shared by DocumentLog and
LogVersion.
"""

from abc import ABC, abstractmethod
from contextlib import nullcontext
from typing import ContextManager, Dict, Iterator, List, Optional, Sequence

from kxt.errors import FrameOutOfRangeError
from kxt.models.editor import Editor
from kxt.models.frames import BaseFrame
from kxt.models.state import ReplayState
from kxt.replay.engine import ReconstructionEngine


class ReconstructionQueries(ABC):
    """
    Query interface over a frame source.

    Subclasses provide `_engine` and `_reading()`; the latter guards each
    query (the log's lock for a live log, nothing for a version).
    """

    _engine: ReconstructionEngine

    @abstractmethod
    def _reading(self) -> ContextManager:
        pass

    @abstractmethod
    def frame_count(self) -> int:
        pass

    @abstractmethod
    def resolved_time_at(self, index: int) -> int:
        pass

    def length(self) -> int:
        """Number of frames."""
        return self.frame_count()

    def __len__(self) -> int:
        return self.frame_count()

    def total_duration_ms(self) -> int:
        """Resolved absolute time of the last frame."""
        with self._reading():
            return self.resolved_time_at(self.frame_count() - 1)

    def duration_ms(self) -> int:
        return self.total_duration_ms()

    def state_at(self, timestamp_ms: int, seed_index: Optional[int] = None) -> ReplayState:
        with self._reading():
            return self._engine.state_at(timestamp_ms, seed_index)

    def state_at_frame(self, index: int, seed_index: Optional[int] = None) -> ReplayState:
        with self._reading():
            return self._engine.state_at_frame(index, seed_index)

    def reconstruct_at(self, timestamp_ms: int) -> str:
        """Document text as of an absolute time in ms."""
        with self._reading():
            return self._engine.reconstruct_at(timestamp_ms)

    def reconstruct_at_frame(self, index: int) -> str:
        """Document text up to and including frame `index`."""
        with self._reading():
            return self._engine.reconstruct_at_frame(index)

    def cursor_at(self, timestamp_ms: int) -> Editor:
        """Effective edit descriptor as of an absolute time in ms."""
        with self._reading():
            return self._engine.cursor_at(timestamp_ms)

    def verify(self) -> ReplayState:
        """Full replay from frame 0, checking every snapshot."""
        with self._reading():
            return self._engine.verify()


class LogVersion(ReconstructionQueries):
    """
    Read-only view of the first `frame_count()` frames of a log.

    Created by DocumentLog.version(). Later appends to the log are not
    visible through the version.

    Example:
        version = log.version()
        log.content("more", delta_ms=10)   # not visible to `version`
        text = version.reconstruct_at(version.duration_ms())
    """

    def __init__(
        self,
        frames: List[BaseFrame],
        times: List[int],
        snapshots: List[int],
        seed_cursors: Dict[int, Optional[Editor]],
        count: int,
    ) -> None:
        self._frames = frames
        self._times = times
        self._snapshots = snapshots
        self._seed_cursors = seed_cursors
        self._count = count
        self._engine = ReconstructionEngine(self)

    def _reading(self) -> ContextManager:
        return nullcontext()

    def frame_count(self) -> int:
        return self._count

    def frame_at(self, index: int) -> BaseFrame:
        if not 0 <= index < self._count:
            raise FrameOutOfRangeError(
                f"Frame index {index} outside [0, {self._count})",
                frame_index=index,
            )
        return self._frames[index]

    def resolved_time_at(self, index: int) -> int:
        self.frame_at(index)
        return self._times[index]

    def resolved_times(self) -> Sequence[int]:
        return self._times

    def snapshot_indices(self) -> Sequence[int]:
        return self._snapshots

    def seed_cursor_at(self, snapshot_index: int) -> Optional[Editor]:
        return self._seed_cursors.get(snapshot_index)

    def __iter__(self) -> Iterator[BaseFrame]:
        for index in range(self._count):
            yield self._frames[index]

    def __repr__(self) -> str:
        return f"LogVersion(frames={self._count})"
