"""
Replay Module
=============

Reconstruction of document state from a frame log.

This module provides:
    - apply_frame: Fold one frame into a ReplayState
    - ReconstructionEngine: Snapshot lookup + forward replay
    - FrameSource: Read protocol the engine replays from

Example:
    from kxt.replay import ReconstructionEngine

    engine = ReconstructionEngine(log)
    print(engine.reconstruct_at(320))
"""

from kxt.replay.engine import FrameSource, ReconstructionEngine
from kxt.replay.reducer import apply_frame, initial_state


__all__ = [
    "apply_frame",
    "initial_state",
    "FrameSource",
    "ReconstructionEngine",
]
