"""
KXT Writer
==========

Serializes a document log (or log version) to the .kxt line format.

Frames are written in log order, one JSON object per line, exactly as
appended. Snapshots synthesized by a checkpoint policy are ordinary frames
in the log and are written like any other.
"""

import logging
from pathlib import Path
from typing import Iterable, Optional, Union

from kxt.codec.spec import EOF_MARKER, FORMAT_VERSION, MAGIC
from kxt.config import settings
from kxt.models.frames import BaseFrame


logger = logging.getLogger(__name__)


def iter_lines(frames: Iterable[BaseFrame], end_marker: bool = True) -> Iterable[str]:
    """Yield the lines of a .kxt document, without newlines."""
    yield f"{MAGIC}/{FORMAT_VERSION}"
    for frame in frames:
        yield frame.model_dump_json()
    if end_marker:
        yield EOF_MARKER


def dumps(frames: Iterable[BaseFrame], end_marker: Optional[bool] = None) -> str:
    """
    Serialize frames to .kxt text.

    Args:
        frames: A DocumentLog, LogVersion, or any iterable of frames
        end_marker: Write the end marker line. Defaults to config.

    Returns:
        The complete document, newline-terminated
    """
    if end_marker is None:
        end_marker = settings.codec.write_end_marker
    return "\n".join(iter_lines(frames, end_marker)) + "\n"


def write_document(
    frames: Iterable[BaseFrame],
    path: Union[str, Path],
    encoding: Optional[str] = None,
) -> Path:
    """
    Write frames to a .kxt file.

    Args:
        frames: A DocumentLog, LogVersion, or any iterable of frames
        path: Destination file
        encoding: Text encoding. Defaults to config.

    Returns:
        Path written
    """
    path = Path(path)
    text = dumps(frames)
    with open(path, "w", encoding=encoding or settings.codec.encoding, newline="\n") as f:
        f.write(text)
    logger.debug(f"Wrote {path} ({len(text)} chars)")
    return path
