"""Unit tests for sss_code.content."""

from __future__ import annotations

import io
from pathlib import Path

import pytest

from sss_code.content import ContentSource
from sss_code.exceptions import ContentUnavailableError


class TestContentSource:
    def test_inline(self) -> None:
        assert ContentSource.inline("x = 1").contents() == "x = 1"

    def test_file(self, tmp_path: Path) -> None:
        path = tmp_path / "main.rs"
        path.write_text("fn main() {}\n")
        assert ContentSource.from_arg(str(path)).contents() == "fn main() {}\n"

    def test_stdin(self) -> None:
        source = ContentSource.from_arg("-")
        assert source.is_stdin
        assert source.contents(io.StringIO("echo hi\n")) == "echo hi\n"

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ContentUnavailableError, match="Cannot read content"):
            ContentSource.from_arg(str(tmp_path / "missing.py")).contents()

    def test_empty_stream_is_empty_content(self) -> None:
        assert ContentSource().contents(io.StringIO("")) == ""

    def test_empty_inline_is_empty_content(self) -> None:
        assert ContentSource.inline("").contents() == ""

    def test_terminal_stdin_raises(self) -> None:
        class Terminal(io.StringIO):
            def isatty(self) -> bool:
                return True

        with pytest.raises(ContentUnavailableError, match="stdin is a terminal"):
            ContentSource().contents(Terminal())
