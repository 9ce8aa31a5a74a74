"""
Checkpoint Policy Tests
=======================

Automatic snapshot insertion and its effect on replay.
"""

import pytest

from kxt.config import CheckpointConfig
from kxt.log import CheckpointPolicy, DocumentLog
from kxt.models import SnapshotFrame


class TestCheckpointPolicy:
    """Tests for the policy object itself."""

    def test_disabled(self):
        policy = CheckpointPolicy.disabled()
        assert not policy.enabled
        assert not policy.should_snapshot(10_000, 10_000_000)

    def test_frame_limit(self):
        policy = CheckpointPolicy(max_frames_since_snapshot=3)
        assert not policy.should_snapshot(2, 0)
        assert policy.should_snapshot(3, 0)

    def test_elapsed_limit(self):
        policy = CheckpointPolicy(max_elapsed_ms_since_snapshot=100)
        assert not policy.should_snapshot(50, 99)
        assert policy.should_snapshot(1, 100)

    @pytest.mark.parametrize("field", ["max_frames_since_snapshot", "max_elapsed_ms_since_snapshot"])
    def test_rejects_non_positive_limits(self, field):
        with pytest.raises(ValueError):
            CheckpointPolicy(**{field: 0})

    def test_from_config(self):
        config = CheckpointConfig(max_frames_since_snapshot=10, max_elapsed_ms_since_snapshot=None)
        policy = CheckpointPolicy.from_config(config)
        assert policy == CheckpointPolicy(max_frames_since_snapshot=10)


class TestSynthesizedSnapshots:
    """The log appends snapshots the policy asks for."""

    def test_frame_limit_inserts_snapshots(self):
        log = DocumentLog.new(policy=CheckpointPolicy(max_frames_since_snapshot=3))
        for key in "abcdefg":
            log.content(key, delta_ms=10)

        assert list(log.snapshot_indices()) == [0, 4, 8]
        assert log.frame_count() == 10
        assert log.frame_at(4) == SnapshotFrame(content="abc", timestamp_ms=30)
        assert log.frame_at(8) == SnapshotFrame(content="abcdef", timestamp_ms=60)

        metrics = log.metrics()
        assert metrics["synthesized_snapshots"] == 2
        assert metrics["longest_replay_window"] == 3

    def test_append_returns_callers_index(self):
        log = DocumentLog.new(policy=CheckpointPolicy(max_frames_since_snapshot=1))
        assert log.content("a", delta_ms=1) == 1
        assert log.content("b", delta_ms=1) == 3

    def test_elapsed_limit_inserts_snapshot(self):
        log = DocumentLog.new(policy=CheckpointPolicy(max_elapsed_ms_since_snapshot=100))
        log.content("a", delta_ms=50)
        log.content("b", delta_ms=60)
        log.content("c", delta_ms=10)

        assert list(log.snapshot_indices()) == [0, 3]
        assert log.frame_at(3) == SnapshotFrame(content="ab", timestamp_ms=110)

    def test_cursor_frames_count_toward_limit(self):
        log = DocumentLog.new(policy=CheckpointPolicy(max_frames_since_snapshot=2))
        log.cursor(0, position=0)
        log.content("a", delta_ms=1)
        assert list(log.snapshot_indices()) == [0, 3]

    def test_caller_snapshot_resets_counter(self):
        log = DocumentLog.new(policy=CheckpointPolicy(max_frames_since_snapshot=3))
        log.content("a", delta_ms=1)
        log.content("b", delta_ms=1)
        log.snapshot("ab", 2)
        log.content("c", delta_ms=1)
        log.content("d", delta_ms=1)
        assert list(log.snapshot_indices()) == [0, 3]
        assert log.metrics()["synthesized_snapshots"] == 0

    def test_replay_window_is_bounded(self):
        log = DocumentLog.new(policy=CheckpointPolicy(max_frames_since_snapshot=4))
        for i in range(50):
            log.cursor(log.total_duration_ms(), position=i // 2)
            log.content(str(i % 10), delta_ms=7)
        assert log.metrics()["longest_replay_window"] <= 4

    def test_checkpoints_are_not_observable(self):
        """Reconstruction with and without checkpoints agrees at every time."""
        plain = DocumentLog.new("start", 0)
        checkpointed = DocumentLog.new(
            "start",
            0,
            policy=CheckpointPolicy(max_frames_since_snapshot=2, max_elapsed_ms_since_snapshot=25),
        )
        for log in (plain, checkpointed):
            log.cursor(0, position=2)
            for i, key in enumerate("overwrite me"):
                log.content(key, delta_ms=i % 4 * 5)
            log.cursor(log.total_duration_ms(), position=0, length=3, mode="overwrite")
            log.content("END", delta_ms=5)

        assert checkpointed.frame_count() > plain.frame_count()
        for t in range(0, plain.total_duration_ms() + 10):
            assert checkpointed.reconstruct_at(t) == plain.reconstruct_at(t)
        assert checkpointed.verify().content == plain.verify().content
