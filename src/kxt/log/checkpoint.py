"""
Checkpoint Policy
=================

Decides when the document log must synthesize a snapshot.

Replay cost for any reconstruction is the number of frames between the
target and the nearest preceding snapshot. The policy bounds that window
by forcing a snapshot after either limit is reached:

    frames_since_snapshot >= max_frames_since_snapshot
    elapsed_ms_since_snapshot >= max_elapsed_ms_since_snapshot

Either limit may be None (disabled). A policy with both limits None never
forces a snapshot, which is what loaders use to reproduce a stored log
frame for frame.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from kxt.config import CheckpointConfig


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CheckpointPolicy:
    """
    Limits for automatic snapshot insertion.

    Attributes:
        max_frames_since_snapshot: Force a snapshot after N content/cursor
            frames since the last snapshot
        max_elapsed_ms_since_snapshot: Force a snapshot after M ms of log
            time since the last snapshot
    """

    max_frames_since_snapshot: Optional[int] = None
    max_elapsed_ms_since_snapshot: Optional[int] = None

    def __post_init__(self) -> None:
        """Validate limits."""
        if self.max_frames_since_snapshot is not None and self.max_frames_since_snapshot < 1:
            raise ValueError("max_frames_since_snapshot must be >= 1")
        if self.max_elapsed_ms_since_snapshot is not None and self.max_elapsed_ms_since_snapshot < 1:
            raise ValueError("max_elapsed_ms_since_snapshot must be >= 1")

    @classmethod
    def disabled(cls) -> "CheckpointPolicy":
        """Policy that never forces a snapshot."""
        return cls()

    @classmethod
    def from_config(cls, config: CheckpointConfig) -> "CheckpointPolicy":
        """Build a policy from the `checkpoint` config section."""
        policy = cls(
            max_frames_since_snapshot=config.max_frames_since_snapshot,
            max_elapsed_ms_since_snapshot=config.max_elapsed_ms_since_snapshot,
        )
        logger.info(
            f"CheckpointPolicy initialized: "
            f"max_frames={policy.max_frames_since_snapshot}, "
            f"max_elapsed_ms={policy.max_elapsed_ms_since_snapshot}"
        )
        return policy

    @property
    def enabled(self) -> bool:
        return (
            self.max_frames_since_snapshot is not None
            or self.max_elapsed_ms_since_snapshot is not None
        )

    def should_snapshot(self, frames_since_snapshot: int, elapsed_ms: int) -> bool:
        """
        Whether a snapshot must follow the frame just appended.

        Args:
            frames_since_snapshot: Content/cursor frames since the last snapshot
            elapsed_ms: Log time since the last snapshot

        Returns:
            True if either limit has been reached.
        """
        if (
            self.max_frames_since_snapshot is not None
            and frames_since_snapshot >= self.max_frames_since_snapshot
        ):
            return True
        if (
            self.max_elapsed_ms_since_snapshot is not None
            and elapsed_ms >= self.max_elapsed_ms_since_snapshot
        ):
            return True
        return False
