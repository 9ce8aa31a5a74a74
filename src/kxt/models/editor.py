"""
Editor Descriptor
=================

This module defines where and how the next content delta is applied.

A CursorFrame does not change the document. It declares an Editor
descriptor that the following ContentFrame(s) are applied through:

    Editor = {
        position,  # offset within the document (u64)
        length,    # characters the upcoming edit spans (u32)
        mode       # INSERT or OVERWRITE
    }

Example:
    from kxt.models.editor import Editor, EditMode

    editor = Editor(position=6, length=5, mode=EditMode.OVERWRITE)
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


MAX_POSITION = 2**64 - 1
MAX_LENGTH = 2**32 - 1


class EditMode(str, Enum):
    """
    How a content delta is applied at the cursor.

    Attributes:
        INSERT: Splice the payload in at position, keeping what follows
        OVERWRITE: Replace `length` characters at position with the payload
    """

    INSERT = "insert"
    OVERWRITE = "overwrite"


class Editor(BaseModel):
    """
    Pending edit descriptor carried by a CursorFrame.

    Field ranges are validated on construction. Whether the range fits
    inside a document is a cross-frame concern checked by the log.

    Attributes:
        position: Offset within the document
        length: Number of characters the upcoming edit spans
        mode: INSERT or OVERWRITE
    """

    model_config = ConfigDict(frozen=True)

    position: int = Field(
        default=0,
        ge=0,
        le=MAX_POSITION,
        description="Offset within the document",
    )

    length: int = Field(
        default=0,
        ge=0,
        le=MAX_LENGTH,
        description="Length of the edit range in the document",
    )

    mode: EditMode = Field(
        default=EditMode.INSERT,
        description="Edit mode: insert or overwrite",
    )

    @property
    def end(self) -> int:
        """Offset one past the edit range."""
        return self.position + self.length

    def fits(self, document_length: int) -> bool:
        """Whether this descriptor addresses a valid range of the document."""
        if self.position > document_length:
            return False
        if self.mode is EditMode.OVERWRITE and self.end > document_length:
            return False
        return True

    def advanced(self, payload_length: int) -> "Editor":
        """Descriptor after applying a payload: moved past it, span consumed."""
        return Editor(
            position=self.position + payload_length,
            length=0,
            mode=self.mode,
        )

    @classmethod
    def append_at(cls, document_length: int) -> "Editor":
        """Descriptor equivalent to appending at the end of the document."""
        return cls(position=document_length, length=0, mode=EditMode.INSERT)
