"""
Knowledge Text (.kxt)
=====================

Temporal edit logs for text documents.

A Knowledge Text file records the history of edits to a document as an
ordered log of typed frames and can produce the document's exact content
at any point in that history, not just the final state.

Components:
    - models: Frame variants, editor descriptor, replay state
    - log: Append-only document log, checkpoint policy, log versions
    - replay: Reconstruction engine (snapshot lookup + forward replay)
    - codec: .kxt file reader and writer

Example:
    from kxt import DocumentLog, EditMode

    log = DocumentLog.new()
    log.cursor(0, position=0, length=0, mode=EditMode.INSERT)
    log.content("Hello", delta_ms=100)
    log.content(" World", delta_ms=120)

    print(log.reconstruct_at(100))   # Hello
"""

__version__ = "0.1.0"

from kxt.errors import (
    CodecError,
    CorruptReplayError,
    FrameOutOfRangeError,
    InvalidEditRangeError,
    InvalidOrderingError,
    KxtError,
)
from kxt.log import CheckpointPolicy, DocumentLog, LogVersion
from kxt.models import (
    ContentFrame,
    CursorFrame,
    EditMode,
    Editor,
    ErrorCode,
    Frame,
    ReplayState,
    SnapshotFrame,
)
from kxt.replay import ReconstructionEngine

__all__ = [
    "__version__",
    # Models
    "EditMode",
    "Editor",
    "SnapshotFrame",
    "CursorFrame",
    "ContentFrame",
    "Frame",
    "ReplayState",
    "ErrorCode",
    # Log
    "DocumentLog",
    "LogVersion",
    "CheckpointPolicy",
    # Replay
    "ReconstructionEngine",
    # Errors
    "KxtError",
    "InvalidOrderingError",
    "InvalidEditRangeError",
    "FrameOutOfRangeError",
    "CorruptReplayError",
    "CodecError",
]
