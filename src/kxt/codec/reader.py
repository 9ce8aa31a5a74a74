"""
KXT Reader
==========

Parses .kxt text back into a DocumentLog.

Every frame line is validated into its variant by the `kind` tag and then
appended through the log's writer API with checkpointing disabled. A
stored log is therefore reproduced frame for frame, and a file that
violates ordering or edit-range invariants fails exactly like the
equivalent direct append would.

Failure modes:
    - CodecError: missing/unknown magic line, undecodable frame line,
      content after the end marker, no frames
    - InvalidOrderingError / InvalidEditRangeError: from the log itself
"""

import logging
from pathlib import Path
from typing import Optional, Union

from pydantic import TypeAdapter, ValidationError

from kxt.codec.spec import EOF_MARKER, MAGIC, MAX_MAGIC_SCAN_BYTES, SUPPORTED_VERSIONS
from kxt.config import settings
from kxt.errors import CodecError
from kxt.log.checkpoint import CheckpointPolicy
from kxt.log.document_log import DocumentLog
from kxt.models.frames import Frame


logger = logging.getLogger(__name__)

FRAME_ADAPTER = TypeAdapter(Frame)


def is_kxt(path: Union[str, Path]) -> bool:
    """Fast check if a file is KXT format. Reads only the first 64 bytes."""
    with open(path, "rb") as f:
        head = f.read(MAX_MAGIC_SCAN_BYTES)
    return head.startswith(MAGIC.encode("utf-8"))


def _parse_magic(line: str) -> str:
    if not line.startswith(MAGIC):
        raise CodecError(f"Missing {MAGIC} magic line", line_number=1)
    version = line.split("/", 1)[1] if "/" in line else ""
    if version not in SUPPORTED_VERSIONS:
        raise CodecError(f"Unsupported format version: {version!r}", line_number=1)
    return version


def loads(text: str) -> DocumentLog:
    """
    Parse .kxt text into a DocumentLog.

    Args:
        text: Complete document text

    Returns:
        DocumentLog with checkpointing disabled, holding exactly the
        stored frames

    Raises:
        CodecError: malformed document
        InvalidOrderingError, InvalidEditRangeError: invalid frame sequence
    """
    lines = text.split("\n")
    _parse_magic(lines[0].rstrip("\r"))

    log = DocumentLog(policy=CheckpointPolicy.disabled())
    ended = False

    for line_number, raw in enumerate(lines[1:], start=2):
        line = raw.rstrip("\r")
        if not line.strip():
            continue
        if ended:
            raise CodecError("Content after end marker", line_number=line_number)
        if line.startswith(EOF_MARKER):
            ended = True
            continue

        try:
            frame = FRAME_ADAPTER.validate_json(line)
        except ValidationError as e:
            raise CodecError(
                f"Invalid frame on line {line_number}: {e.error_count()} error(s)",
                line_number=line_number,
                frame_index=log.frame_count(),
            ) from e

        log.append(frame)

    if log.frame_count() == 0:
        raise CodecError("Document holds no frames", line_number=len(lines))

    logger.debug(f"Loaded {log.frame_count()} frames")
    return log


def read_document(path: Union[str, Path], encoding: Optional[str] = None) -> DocumentLog:
    """Read a .kxt file into a DocumentLog."""
    with open(path, "r", encoding=encoding or settings.codec.encoding, newline="") as f:
        text = f.read()
    return loads(text)
