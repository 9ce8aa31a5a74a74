"""
Log Module
==========

Append-only document log and its checkpointing.

This module provides:
    - DocumentLog: Owning, validated, time-ordered frame sequence
    - LogVersion: Immutable lock-free view of a log prefix
    - CheckpointPolicy: When to synthesize snapshots

Example:
    from kxt.log import CheckpointPolicy, DocumentLog

    log = DocumentLog.new(policy=CheckpointPolicy(max_frames_since_snapshot=64))
    log.content("Hello", delta_ms=100)
    print(log.reconstruct_at(100))
"""

from kxt.log.checkpoint import CheckpointPolicy
from kxt.log.document_log import DocumentLog
from kxt.log.version import LogVersion


__all__ = [
    "CheckpointPolicy",
    "DocumentLog",
    "LogVersion",
]
