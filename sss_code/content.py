"""Where the code to render comes from."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path
from typing import TextIO

from sss_code.exceptions import ContentUnavailableError

STDIN = "-"


@dataclass(frozen=True)
class ContentSource:
    """A file path, an inline string, or standard input (``-``)."""

    path: Path | None = None
    text: str | None = None

    @classmethod
    def from_arg(cls, arg: str) -> ContentSource:
        if arg == STDIN:
            return cls()
        return cls(path=Path(arg))

    @classmethod
    def inline(cls, text: str) -> ContentSource:
        return cls(text=text)

    @property
    def is_stdin(self) -> bool:
        return self.path is None and self.text is None

    def contents(self, stdin: TextIO | None = None) -> str:
        """Read the content.

        Raises:
            ContentUnavailableError: If the source cannot be read. Empty
                content is returned as an empty string.
        """
        if self.text is not None:
            return self.text
        if self.path is not None:
            try:
                return self.path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                raise ContentUnavailableError(
                    f"Cannot read content from {self.path}", {"error": str(e)}
                ) from e

        stream = stdin if stdin is not None else sys.stdin
        if stream is None or stream.isatty():
            raise ContentUnavailableError("No content given and stdin is a terminal")
        return stream.read()
