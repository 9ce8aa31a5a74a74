"""
Test Configuration
==================

Pytest fixtures and test configuration for kxt.
"""

import pytest

from kxt.log import DocumentLog
from kxt.models import EditMode


@pytest.fixture
def hello_world_log():
    """Provide the typed "Hello World" session, frames at 0, 0, 100, 200, 320 ms."""
    log = DocumentLog.new("", 0)
    log.cursor(0, position=0, length=0, mode=EditMode.INSERT)
    log.content("Hello", delta_ms=100)
    log.content(" ", delta_ms=100)
    log.content("World", delta_ms=120)
    return log


@pytest.fixture
def sample_document():
    """Provide the example document typed one keystroke at a time."""
    log = DocumentLog.new("", 0)
    log.cursor(0)
    log.content("Hello", delta_ms=100)
    log.content(" ", delta_ms=100)
    for key, delta in [("W", 120), ("o", 118), ("r", 125), ("l", 132), ("d", 150), ("!", 150)]:
        log.content(key, delta_ms=delta)
    return log


@pytest.fixture
def sample_frame_lines():
    """Provide serialized frame lines for codec tests."""
    return [
        '{"content":"","kind":"snapshot","timestamp_ms":0}',
        '{"content":"","kind":"cursor","timestamp_ms":0,'
        '"editor":{"position":0,"length":0,"mode":"insert"}}',
        '{"content":"Hello","kind":"content","delta_ms":100}',
    ]
