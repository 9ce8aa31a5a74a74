"""
Codec Module
============

Persistence of document logs as .kxt files.

This module provides:
    - dumps / write_document: Log -> .kxt text / file
    - loads / read_document: .kxt text / file -> DocumentLog
    - is_kxt: Fast magic-line check

Example:
    from kxt.codec import read_document, write_document

    write_document(log, "notes.kxt")
    restored = read_document("notes.kxt")
    assert restored.reconstruct_at(500) == log.reconstruct_at(500)
"""

from kxt.codec.reader import is_kxt, loads, read_document
from kxt.codec.writer import dumps, write_document


__all__ = [
    "dumps",
    "write_document",
    "loads",
    "read_document",
    "is_kxt",
]
