"""Color themes and the mutable :class:`ThemeSet`.

Themes are read from TextMate ``.tmTheme`` property lists. Unlike syntax
sets, a theme set is a plain name -> theme mapping that grows in place.
"""

from __future__ import annotations

import logging
import plistlib
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any
from xml.parsers.expat import ExpatError

from sss_code.exceptions import FolderLoadError, ThemeLoadError

logger = logging.getLogger(__name__)

THEME_SUFFIX = ".tmTheme"

# tmTheme global setting key -> ThemeSettings attribute
_SETTING_KEYS = {
    "foreground": "foreground",
    "background": "background",
    "caret": "caret",
    "selection": "selection",
    "lineHighlight": "line_highlight",
    "gutter": "gutter",
    "gutterForeground": "gutter_foreground",
}


@dataclass(frozen=True)
class Color:
    """An RGBA color with 8-bit channels."""

    r: int
    g: int
    b: int
    a: int = 255

    @classmethod
    def parse(cls, value: str) -> Color:
        """Parse ``#RGB``, ``#RRGGBB`` or ``#RRGGBBAA``."""
        text = value.strip().lstrip("#")
        if len(text) == 3:
            text = "".join(ch * 2 for ch in text)
        if len(text) not in (6, 8):
            raise ValueError(f"Invalid color: {value!r}")
        try:
            channels = [int(text[i : i + 2], 16) for i in range(0, len(text), 2)]
        except ValueError:
            raise ValueError(f"Invalid color: {value!r}") from None
        return cls(*channels)

    def to_hex(self) -> str:
        if self.a == 255:
            return f"#{self.r:02x}{self.g:02x}{self.b:02x}"
        return f"#{self.r:02x}{self.g:02x}{self.b:02x}{self.a:02x}"

    def as_tuple(self) -> tuple[int, int, int, int]:
        return (self.r, self.g, self.b, self.a)


def _color_or_none(value: str | None) -> Color | None:
    return Color.parse(value) if value else None


@dataclass
class ThemeSettings:
    foreground: Color | None = None
    background: Color | None = None
    caret: Color | None = None
    selection: Color | None = None
    line_highlight: Color | None = None
    gutter: Color | None = None
    gutter_foreground: Color | None = None

    def to_dict(self) -> dict[str, str]:
        out = {}
        for f in fields(self):
            color = getattr(self, f.name)
            if color is not None:
                out[f.name] = color.to_hex()
        return out

    @classmethod
    def from_dict(cls, data: Mapping[str, str]) -> ThemeSettings:
        return cls(**{k: _color_or_none(v) for k, v in data.items()})


@dataclass
class ThemeItem:
    """A scope selector and the style applied to it."""

    scope: str
    foreground: Color | None = None
    background: Color | None = None
    font_style: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "scope": self.scope,
            "foreground": self.foreground.to_hex() if self.foreground else None,
            "background": self.background.to_hex() if self.background else None,
            "font_style": self.font_style,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ThemeItem:
        return cls(
            scope=data["scope"],
            foreground=_color_or_none(data.get("foreground")),
            background=_color_or_none(data.get("background")),
            font_style=data.get("font_style"),
        )


@dataclass
class Theme:
    name: str | None = None
    author: str | None = None
    settings: ThemeSettings = field(default_factory=ThemeSettings)
    scopes: list[ThemeItem] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "author": self.author,
            "settings": self.settings.to_dict(),
            "scopes": [item.to_dict() for item in self.scopes],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Theme:
        return cls(
            name=data.get("name"),
            author=data.get("author"),
            settings=ThemeSettings.from_dict(data.get("settings") or {}),
            scopes=[ThemeItem.from_dict(item) for item in data.get("scopes") or []],
        )


class ThemeSet:
    """Mapping of unique theme names to themes."""

    def __init__(self, themes: Mapping[str, Theme] | None = None) -> None:
        self.themes: dict[str, Theme] = dict(themes or {})

    def __len__(self) -> int:
        return len(self.themes)

    def __contains__(self, name: object) -> bool:
        return name in self.themes

    def __iter__(self) -> Iterator[str]:
        return iter(self.themes)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ThemeSet):
            return NotImplemented
        return self.themes == other.themes

    def __repr__(self) -> str:
        return f"ThemeSet({sorted(self.themes)})"

    def get(self, name: str) -> Theme | None:
        return self.themes.get(name)

    def names(self) -> list[str]:
        return list(self.themes)

    def add(self, name: str, theme: Theme) -> None:
        self.themes[name] = theme

    def add_from_folder(self, folder: str | Path) -> int:
        """Add every ``.tmTheme`` directly inside ``folder``, keyed by file stem."""
        folder = Path(folder)
        if not folder.is_dir():
            raise FolderLoadError(folder, "not a readable directory")

        try:
            paths = sorted(p for p in folder.glob(f"*{THEME_SUFFIX}") if p.is_file())
        except OSError as e:
            raise FolderLoadError(folder, str(e)) from e

        for path in paths:
            try:
                self.themes[path.stem] = load_theme(path)
            except ThemeLoadError as e:
                raise FolderLoadError(path, e.reason) from e

        logger.debug("Added %d themes from %s", len(paths), folder)
        return len(paths)


def load_theme(path: str | Path) -> Theme:
    """Load a single ``.tmTheme`` file."""
    path = Path(path)
    try:
        with open(path, "rb") as f:
            data = plistlib.load(f)
    except OSError as e:
        raise ThemeLoadError(path, str(e)) from e
    except (ValueError, ExpatError) as e:
        raise ThemeLoadError(path, f"invalid theme file: {e}") from e

    if not isinstance(data, dict):
        raise ThemeLoadError(path, "theme root must be a dictionary")

    try:
        return _theme_from_plist(data)
    except (KeyError, TypeError, ValueError) as e:
        raise ThemeLoadError(path, f"invalid theme file: {e}") from e


def _theme_from_plist(data: Mapping[str, Any]) -> Theme:
    theme = Theme(name=data.get("name"), author=data.get("author"))

    for entry in data.get("settings") or []:
        style = entry.get("settings") or {}
        scope = entry.get("scope")
        if scope is None:
            for key, attr in _SETTING_KEYS.items():
                if key in style:
                    setattr(theme.settings, attr, Color.parse(style[key]))
            continue
        theme.scopes.append(
            ThemeItem(
                scope=scope.strip(),
                foreground=_color_or_none(style.get("foreground")),
                background=_color_or_none(style.get("background")),
                font_style=style.get("fontStyle") or None,
            )
        )
    return theme
