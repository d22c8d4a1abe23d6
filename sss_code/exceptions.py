"""Exception hierarchy for sss-code.

Every failure the asset pipeline can hit is unrecoverable for the current
invocation. The CLI catches :class:`SssError`, prints the message and exits
with a non-zero status before anything is rendered.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any


class SssError(Exception):
    """Base class for all sss-code errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if not self.details:
            return self.message
        extra = ", ".join(f"{k}={v}" for k, v in self.details.items())
        return f"{self.message} ({extra})"


class AssetLoadError(SssError):
    """A syntax or theme blob could not be decoded."""

    def __init__(self, source: str | Path, details: dict[str, Any] | None = None) -> None:
        self.source = str(source)
        super().__init__(f"Cannot load assets from {self.source}", details)


class FolderLoadError(SssError):
    """A definitions folder is missing, unreadable or holds a bad definition."""

    def __init__(self, path: str | Path, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Cannot add definitions from {self.path}: {reason}")


class PersistError(SssError):
    """Writing a merged blob to disk failed."""

    def __init__(self, path: str | Path, details: dict[str, Any] | None = None) -> None:
        self.path = Path(path)
        super().__init__(f"Cannot dump assets to {self.path}", details)


class ContentUnavailableError(SssError):
    """The configured content source produced no data."""


class SyntaxNotFoundError(SssError):
    """No syntax matched the extension hint or the first line of content."""

    def __init__(self, query: str, by_extension: bool) -> None:
        self.query = query
        self.by_extension = by_extension
        if by_extension:
            message = f"Extension not found: {query}"
        else:
            message = f"Extension not found by code: {query!r}"
        super().__init__(message)


class ThemeLoadError(SssError):
    """A theme could not be found in the set nor loaded from a file."""

    def __init__(self, theme: str | Path, reason: str) -> None:
        self.theme = str(theme)
        self.reason = reason
        super().__init__(f"Cannot load theme {self.theme}: {reason}")


class ConfigError(SssError):
    """The configuration file or a command-line value is invalid."""


class RenderError(SssError):
    """The renderer could not produce or write the image."""
