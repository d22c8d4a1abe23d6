"""Configuration for sss-code.

Two objects come out of configuration loading:

- :class:`CodeConfig`: what to render and how to pick syntax/theme
- :class:`RenderConfig`: everything handed on to the image renderer

Both are filled from a YAML file first and then overridden by command-line
flags.

Example ``~/.config/sss/config.yaml``::

    theme: base16-ocean.dark
    extension: rs
    output: out.png
    colors:
      windows_background: "#4287f5"   # or ["#ff0000", "#0000ff"] for a gradient
    fonts:
      path: /usr/share/fonts/TTF/FiraCode-Regular.ttf
      size: 26
    padding_x: 80
    padding_y: 100
    window_controls: true
"""

from __future__ import annotations

import copy
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from sss_code.content import ContentSource
from sss_code.exceptions import ConfigError
from sss_code.highlighting.theme import Color

DEFAULT_THEME = "base16-ocean.dark"

# Themes only override the window background while it still equals this value.
DEFAULT_BACKGROUND = Color(0x42, 0x87, 0xF5, 255)


@dataclass(frozen=True)
class Solid:
    color: Color


@dataclass(frozen=True)
class Gradient:
    start: Color
    end: Color


Background = Solid | Gradient


def parse_background(value: Any, field_name: str = "background") -> Background:
    """Parse a hex color or a two-item list of hex colors."""
    try:
        if isinstance(value, str):
            return Solid(Color.parse(value))
        if isinstance(value, (list, tuple)) and len(value) == 2:
            return Gradient(Color.parse(value[0]), Color.parse(value[1]))
    except (ValueError, AttributeError) as e:
        raise ConfigError(f"{field_name}: {e}") from e
    raise ConfigError(f"{field_name}: expected a color or a list of two colors")


@dataclass
class ColorsConfig:
    windows_background: Background = field(default_factory=lambda: Solid(DEFAULT_BACKGROUND))


@dataclass
class FontConfig:
    path: Path | None = None
    size: float = 26.0


@dataclass
class RenderConfig:
    output: Path = Path("out.png")
    colors: ColorsConfig = field(default_factory=ColorsConfig)
    fonts: FontConfig = field(default_factory=FontConfig)
    padding_x: int = 80
    padding_y: int = 100
    line_pad: int = 2
    window_controls: bool = True

    def copy(self) -> RenderConfig:
        return copy.deepcopy(self)


@dataclass
class CodeConfig:
    content: ContentSource | None = None
    extension: str | None = None
    theme: str | None = None
    vim_theme: str | None = None
    extra_syntaxes: Path | None = None
    list_themes: bool = False
    list_file_types: bool = False
    build_cache: Path | None = None


_CODE_KEYS = {"theme", "extension", "vim_theme", "extra_syntaxes"}
_RENDER_KEYS = {
    "output",
    "colors",
    "fonts",
    "padding_x",
    "padding_y",
    "line_pad",
    "window_controls",
}


def default_config_path() -> Path:
    """Return the config file location (``SSS_CONFIG`` overrides it)."""
    env_path = os.environ.get("SSS_CONFIG")
    if env_path:
        return Path(env_path).expanduser()
    base = os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config"
    return Path(base) / "sss" / "config.yaml"


def _expect(
    data: dict[str, Any], key: str, kind: type | tuple[type, ...], section: str | None = None
) -> Any:
    value = data[key]
    if not isinstance(value, kind) or (isinstance(value, bool) and kind is not bool):
        name = kind.__name__ if isinstance(kind, type) else " or ".join(k.__name__ for k in kind)
        field_path = f"{section}.{key}" if section else key
        raise ConfigError(f"{field_path}: expected {name}, got {type(value).__name__}")
    return value


def _section(data: dict[str, Any], key: str, allowed: set[str]) -> dict[str, Any]:
    section = _expect(data, key, dict)
    extra = set(section) - allowed
    if extra:
        raise ConfigError(f"{key}: unknown keys: {', '.join(sorted(extra))}")
    return section


def parse_config(data: dict[str, Any]) -> tuple[CodeConfig, RenderConfig]:
    """Build both config objects from a parsed YAML mapping."""
    unknown = set(data) - _CODE_KEYS - _RENDER_KEYS
    if unknown:
        raise ConfigError(f"unknown configuration keys: {', '.join(sorted(unknown))}")

    code = CodeConfig()
    render = RenderConfig()

    if "theme" in data:
        code.theme = _expect(data, "theme", str)
    if "extension" in data:
        code.extension = _expect(data, "extension", str)
    if "vim_theme" in data:
        code.vim_theme = _expect(data, "vim_theme", str)
    if "extra_syntaxes" in data:
        code.extra_syntaxes = Path(_expect(data, "extra_syntaxes", str)).expanduser()

    if "output" in data:
        render.output = Path(_expect(data, "output", str)).expanduser()
    if "colors" in data:
        colors = _section(data, "colors", {"windows_background"})
        if "windows_background" in colors:
            render.colors.windows_background = parse_background(
                colors["windows_background"], "colors.windows_background"
            )
    if "fonts" in data:
        fonts = _section(data, "fonts", {"path", "size"})
        if "path" in fonts:
            render.fonts.path = Path(_expect(fonts, "path", str, "fonts")).expanduser()
        if "size" in fonts:
            size = _expect(fonts, "size", (int, float), "fonts")
            if size <= 0:
                raise ConfigError("fonts.size: must be positive")
            render.fonts.size = float(size)
    for key in ("padding_x", "padding_y", "line_pad"):
        if key in data:
            value = _expect(data, key, int)
            if value < 0:
                raise ConfigError(f"{key}: must not be negative")
            setattr(render, key, value)
    if "window_controls" in data:
        render.window_controls = _expect(data, "window_controls", bool)

    return code, render


def load_config(path: Path | None = None) -> tuple[CodeConfig, RenderConfig]:
    """Load configuration from YAML.

    An explicit ``path`` must exist; the default location is optional.

    Raises:
        ConfigError: If the file is unreadable or invalid.
    """
    explicit = path is not None
    config_path = path if explicit else default_config_path()

    if not config_path.exists():
        if explicit:
            raise ConfigError(f"Config file not found: {config_path}")
        return CodeConfig(), RenderConfig()

    try:
        data = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError(f"Cannot read config file {config_path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

    if data is None:
        return CodeConfig(), RenderConfig()
    if not isinstance(data, dict):
        raise ConfigError(f"{config_path}: top level must be a mapping")
    return parse_config(data)
