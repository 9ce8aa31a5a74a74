"""
Codec Tests
===========

Reading and writing .kxt documents.
"""

import json

import pytest
from pydantic import ValidationError

from kxt.codec import dumps, is_kxt, loads, read_document, write_document
from kxt.codec.spec import EOF_MARKER, MAGIC
from kxt.errors import CodecError, InvalidEditRangeError, InvalidOrderingError
from kxt.log import CheckpointPolicy, DocumentLog
from kxt.models import CursorFrame, EditMode, ErrorCode


def _document(*lines: str) -> str:
    return "\n".join(lines) + "\n"


class TestWriter:
    """Tests for serialization."""

    def test_layout(self, hello_world_log):
        lines = dumps(hello_world_log, end_marker=True).splitlines()
        assert lines[0] == f"{MAGIC}/1.0"
        assert lines[-1] == EOF_MARKER
        assert len(lines) == hello_world_log.frame_count() + 2

        kinds = [json.loads(line)["kind"] for line in lines[1:-1]]
        assert kinds == ["snapshot", "cursor", "content", "content", "content"]

    def test_without_end_marker(self, hello_world_log):
        lines = dumps(hello_world_log, end_marker=False).splitlines()
        assert lines[-1] != EOF_MARKER
        assert len(lines) == hello_world_log.frame_count() + 1

    def test_content_frames_keep_relative_delta(self, hello_world_log):
        lines = dumps(hello_world_log).splitlines()
        assert json.loads(lines[5]) == {"content": "World", "kind": "content", "delta_ms": 120}

    def test_multiline_content_is_one_line(self):
        log = DocumentLog.new("line one\nline two", 0)
        lines = dumps(log, end_marker=False).splitlines()
        assert len(lines) == 2
        assert json.loads(lines[1])["content"] == "line one\nline two"

    def test_writes_log_version(self, hello_world_log):
        version = hello_world_log.version()
        hello_world_log.content("!", delta_ms=1)
        assert loads(dumps(version)).reconstruct_at(10_000) == "Hello World"

    def test_unencodable_content_never_reaches_the_log(self, hello_world_log):
        """Text with a lone surrogate is refused at append, so the log stays writable."""
        count = hello_world_log.frame_count()
        with pytest.raises(ValidationError):
            hello_world_log.content("a\ud800b", delta_ms=1)
        with pytest.raises(ValidationError):
            hello_world_log.snapshot("\udfff", 10_000)

        assert hello_world_log.frame_count() == count
        restored = loads(dumps(hello_world_log))
        assert restored.reconstruct_at(10_000) == "Hello World"


class TestReader:
    """Tests for parsing."""

    def test_loads(self, sample_frame_lines):
        log = loads(_document(f"{MAGIC}/1.0", *sample_frame_lines, EOF_MARKER))
        assert log.frame_count() == 3
        assert isinstance(log.frame_at(1), CursorFrame)
        assert log.reconstruct_at(100) == "Hello"

    def test_end_marker_optional(self, sample_frame_lines):
        log = loads(_document(f"{MAGIC}/1.0", *sample_frame_lines))
        assert log.frame_count() == 3

    def test_crlf_and_blank_lines(self, sample_frame_lines):
        text = "\r\n".join([f"{MAGIC}/1.0", "", *sample_frame_lines, EOF_MARKER]) + "\r\n"
        assert loads(text).reconstruct_at(100) == "Hello"

    def test_missing_magic(self, sample_frame_lines):
        with pytest.raises(CodecError) as exc_info:
            loads(_document(*sample_frame_lines))
        assert exc_info.value.code is ErrorCode.MALFORMED_FILE
        assert exc_info.value.line_number == 1

    def test_unsupported_version(self, sample_frame_lines):
        with pytest.raises(CodecError):
            loads(_document(f"{MAGIC}/9.9", *sample_frame_lines))

    def test_invalid_frame_line(self, sample_frame_lines):
        text = _document(f"{MAGIC}/1.0", sample_frame_lines[0], '{"kind": "content", "delta_ms": -5}')
        with pytest.raises(CodecError) as exc_info:
            loads(text)
        assert exc_info.value.line_number == 3
        assert exc_info.value.frame_index == 1

    def test_lone_surrogate_escape(self, sample_frame_lines):
        line = '{"kind": "content", "content": "a\\ud800b", "delta_ms": 1}'
        with pytest.raises(CodecError):
            loads(_document(f"{MAGIC}/1.0", sample_frame_lines[0], line))

    def test_not_json(self, sample_frame_lines):
        with pytest.raises(CodecError):
            loads(_document(f"{MAGIC}/1.0", sample_frame_lines[0], "hello"))

    def test_content_after_end_marker(self, sample_frame_lines):
        with pytest.raises(CodecError):
            loads(_document(f"{MAGIC}/1.0", *sample_frame_lines, EOF_MARKER, sample_frame_lines[2]))

    def test_no_frames(self):
        with pytest.raises(CodecError):
            loads(_document(f"{MAGIC}/1.0", EOF_MARKER))

    def test_invalid_sequence_fails_like_append(self, sample_frame_lines):
        """Stored frames are re-validated by the log."""
        with pytest.raises(InvalidOrderingError):
            loads(_document(f"{MAGIC}/1.0", sample_frame_lines[2]))

        late_cursor = CursorFrame.at(50, position=0).model_dump_json()
        early_cursor = CursorFrame.at(10, position=0).model_dump_json()
        with pytest.raises(InvalidOrderingError):
            loads(_document(f"{MAGIC}/1.0", sample_frame_lines[0], late_cursor, early_cursor))

        wide_cursor = CursorFrame.at(0, position=4, mode=EditMode.INSERT).model_dump_json()
        with pytest.raises(InvalidEditRangeError):
            loads(_document(f"{MAGIC}/1.0", sample_frame_lines[0], wide_cursor))


class TestRoundTrip:
    """Serialize-then-deserialize reproduces the log."""

    def test_frames_preserved(self, sample_document):
        restored = loads(dumps(sample_document))
        assert list(restored) == list(sample_document)

    def test_synthesized_snapshots_preserved(self):
        log = DocumentLog.new(policy=CheckpointPolicy(max_frames_since_snapshot=2))
        for key in "abcde":
            log.content(key, delta_ms=3)

        restored = loads(dumps(log))
        assert list(restored) == list(log)
        assert list(restored.snapshot_indices()) == list(log.snapshot_indices())
        assert restored.metrics()["synthesized_snapshots"] == 0

    def test_file_round_trip(self, tmp_path, hello_world_log):
        hello_world_log.cursor(320, position=6, length=5, mode=EditMode.OVERWRITE)
        hello_world_log.content("Wörld ✓", delta_ms=10)

        path = write_document(hello_world_log, tmp_path / "session.kxt")
        assert is_kxt(path)

        restored = read_document(path)
        for index in range(hello_world_log.frame_count()):
            assert restored.reconstruct_at_frame(index) == hello_world_log.reconstruct_at_frame(index)
        assert restored.reconstruct_at(330) == "Hello Wörld ✓"

    def test_is_kxt_rejects_other_files(self, tmp_path):
        path = tmp_path / "notes.txt"
        path.write_text("plain text\n")
        assert not is_kxt(path)
