"""
Frame Models
============

The closed set of events that can appear in a document log.

Frame kinds:
    - SnapshotFrame: full document content at an absolute timestamp
    - CursorFrame: where and how the next delta applies (no content)
    - ContentFrame: incremental text payload, relative delta_ms

Every frame carries a `kind` tag. `Frame` is a discriminated union over the
three kinds, so a frame read back from storage is validated into exactly
one variant and code branching on kind can match exhaustively.

Time:
    Snapshot and cursor frames carry `timestamp_ms` (ms since log start).
    Content frames carry `delta_ms` (ms since the previous frame). The
    resolved absolute time of a content frame is the previous frame's
    resolved time plus its delta.

Length:
    `length_delta(editor)` is how much a frame changes the document length
    when applied through `editor`. The log computes its head by replay and
    does not call it; it is for consumers that track document length from
    a frame stream without rebuilding the text.

Text:
    Content must encode as UTF-8 (no lone surrogates), so every frame a
    log accepts can be written to a .kxt file.

Example:
    from kxt.models.frames import ContentFrame, CursorFrame, SnapshotFrame

    frames = [
        SnapshotFrame(content="", timestamp_ms=0),
        CursorFrame(timestamp_ms=0),
        ContentFrame(content="Hello", delta_ms=100),
    ]
"""

from abc import ABC, abstractmethod
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from kxt.models.editor import EditMode, Editor


MAX_TIMESTAMP_MS = 2**64 - 1
MAX_DELTA_MS = 2**16 - 1


class BaseFrame(BaseModel, ABC):
    """Fields and behaviour shared by every frame kind."""

    model_config = ConfigDict(frozen=True)

    content: str = Field(
        default="",
        description="Payload text associated with the event",
    )

    @field_validator("content")
    @classmethod
    def content_must_encode(cls, value: str) -> str:
        try:
            value.encode("utf-8")
        except UnicodeEncodeError as e:
            raise ValueError(f"content is not UTF-8 encodable at offset {e.start}") from e
        return value

    @abstractmethod
    def resolve_time(self, previous_ms: int) -> int:
        """Absolute time of this frame given the previous frame's time."""

    @abstractmethod
    def length_delta(self, editor: Optional[Editor] = None) -> int:
        """Change in document length when this frame is applied."""


class SnapshotFrame(BaseFrame):
    """
    Checkpoint holding the complete document text.

    Reconstructing the document at or after a snapshot never requires
    replaying anything before it.

    Attributes:
        content: Full document text
        timestamp_ms: Absolute time in ms since log start
    """

    kind: Literal["snapshot"] = "snapshot"

    timestamp_ms: int = Field(
        ...,
        ge=0,
        le=MAX_TIMESTAMP_MS,
        description="Absolute time in ms since log start",
    )

    def resolve_time(self, previous_ms: int) -> int:
        return self.timestamp_ms

    def length_delta(self, editor: Optional[Editor] = None) -> int:
        # Not incremental: the snapshot states the whole length.
        return len(self.content)


class CursorFrame(BaseFrame):
    """
    Declares where and how the next content delta must be applied.

    Attributes:
        content: Always empty
        timestamp_ms: Absolute time in ms since log start
        editor: Pending edit descriptor
    """

    kind: Literal["cursor"] = "cursor"

    content: Literal[""] = Field(
        default="",
        description="Cursor frames never carry content",
    )

    timestamp_ms: int = Field(
        ...,
        ge=0,
        le=MAX_TIMESTAMP_MS,
        description="Absolute time in ms since log start",
    )

    editor: Editor = Field(
        default_factory=Editor,
        description="Pending edit descriptor",
    )

    @classmethod
    def at(
        cls,
        timestamp_ms: int,
        position: int = 0,
        length: int = 0,
        mode: EditMode = EditMode.INSERT,
    ) -> "CursorFrame":
        """Build a cursor frame from flat descriptor fields."""
        return cls(
            timestamp_ms=timestamp_ms,
            editor=Editor(position=position, length=length, mode=mode),
        )

    def resolve_time(self, previous_ms: int) -> int:
        return self.timestamp_ms

    def length_delta(self, editor: Optional[Editor] = None) -> int:
        return 0


class ContentFrame(BaseFrame):
    """
    Incremental text captured during live typing.

    Attributes:
        content: Text inserted or written over at the cursor
        delta_ms: Milliseconds elapsed since the previous frame
    """

    kind: Literal["content"] = "content"

    delta_ms: int = Field(
        default=0,
        ge=0,
        le=MAX_DELTA_MS,
        description="Milliseconds since the previous frame",
    )

    def resolve_time(self, previous_ms: int) -> int:
        return previous_ms + self.delta_ms

    def length_delta(self, editor: Optional[Editor] = None) -> int:
        if editor is not None and editor.mode is EditMode.OVERWRITE:
            return len(self.content) - editor.length
        return len(self.content)


Frame = Annotated[
    Union[SnapshotFrame, CursorFrame, ContentFrame],
    Field(discriminator="kind"),
]
