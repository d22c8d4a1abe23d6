"""Pytest configuration and shared fixtures for sss-code tests."""

from __future__ import annotations

from pathlib import Path
from textwrap import dedent

import pytest

from sss_code.config import CodeConfig, RenderConfig
from sss_code.highlighting.syntax import SyntaxDefinition, SyntaxSet
from sss_code.highlighting.theme import Color, Theme, ThemeSet, ThemeSettings
from sss_code.renderer import RenderContext

LUA_SYNTAX = dedent("""
    name: Lua
    file_extensions:
      - lua
    first_line_match: '^#!.*\\blua\\b'
    scope: source.lua
    contexts:
      main:
        - match: '--.*$'
          scope: comment.line.double-dash.lua
        - match: '\\b(local|function|end|if|then|else|return)\\b'
          scope: keyword.control.lua
""").lstrip()

DUSK_THEME = dedent("""
    <?xml version="1.0" encoding="UTF-8"?>
    <!DOCTYPE plist PUBLIC "-//Apple//DTD PLIST 1.0//EN" "http://www.apple.com/DTDs/PropertyList-1.0.dtd">
    <plist version="1.0">
    <dict>
      <key>name</key>
      <string>Dusk</string>
      <key>author</key>
      <string>Tester</string>
      <key>settings</key>
      <array>
        <dict>
          <key>settings</key>
          <dict>
            <key>background</key>
            <string>#0A141E</string>
            <key>foreground</key>
            <string>#F0F0F0</string>
            <key>lineHighlight</key>
            <string>#1E2832</string>
          </dict>
        </dict>
        <dict>
          <key>name</key>
          <string>Comment</string>
          <key>scope</key>
          <string>comment</string>
          <key>settings</key>
          <dict>
            <key>foreground</key>
            <string>#808080</string>
            <key>fontStyle</key>
            <string>italic</string>
          </dict>
        </dict>
      </array>
    </dict>
    </plist>
""").lstrip()


class RecordingRenderer:
    """Renderer stand-in that keeps every call instead of drawing."""

    def __init__(self) -> None:
        self.calls: list[tuple[RenderConfig, RenderContext]] = []

    def render(self, config: RenderConfig, context: RenderContext) -> None:
        self.calls.append((config, context))


@pytest.fixture
def renderer() -> RecordingRenderer:
    return RecordingRenderer()


@pytest.fixture
def cache_dir(tmp_path: Path) -> Path:
    """Return an empty, not yet created cache directory."""
    return tmp_path / "cache" / "sss"


@pytest.fixture
def lua_syntax_file(tmp_path: Path) -> Path:
    path = tmp_path / "single" / "Lua.sublime-syntax"
    path.parent.mkdir(parents=True)
    path.write_text(LUA_SYNTAX, encoding="utf-8")
    return path


@pytest.fixture
def dusk_theme_file(tmp_path: Path) -> Path:
    path = tmp_path / "single-theme" / "dusk.tmTheme"
    path.parent.mkdir(parents=True)
    path.write_text(DUSK_THEME, encoding="utf-8")
    return path


@pytest.fixture
def extra_syntaxes(tmp_path: Path) -> Path:
    """Folder with one syntax nested a level down."""
    folder = tmp_path / "extra"
    (folder / "lua").mkdir(parents=True)
    (folder / "lua" / "Lua.sublime-syntax").write_text(LUA_SYNTAX, encoding="utf-8")
    (folder / "README.md").write_text("not a syntax", encoding="utf-8")
    return folder


@pytest.fixture
def assets_source(tmp_path: Path) -> Path:
    """Build-cache source folder with one new syntax and one new theme."""
    source = tmp_path / "assets"
    (source / "syntaxes" / "lua").mkdir(parents=True)
    (source / "syntaxes" / "lua" / "Lua.sublime-syntax").write_text(
        LUA_SYNTAX, encoding="utf-8"
    )
    (source / "themes").mkdir()
    (source / "themes" / "dusk.tmTheme").write_text(DUSK_THEME, encoding="utf-8")
    return source


@pytest.fixture
def small_syntax_set() -> SyntaxSet:
    return SyntaxSet(
        [
            SyntaxDefinition(name="Plain Text", scope="text.plain", file_extensions=("txt",)),
            SyntaxDefinition(
                name="Python",
                scope="source.python",
                file_extensions=("py", "pyw"),
                first_line_match=r"^#!\s*/.*\bpython(\d(\.\d)?)?\b",
            ),
            SyntaxDefinition(name="Rust", scope="source.rust", file_extensions=("rs",)),
        ]
    )


@pytest.fixture
def small_theme_set() -> ThemeSet:
    return ThemeSet(
        {
            "base16-ocean.dark": Theme(
                name="Base16 Ocean Dark",
                settings=ThemeSettings(
                    foreground=Color(0xC0, 0xC5, 0xCE),
                    background=Color(0x2B, 0x30, 0x3B),
                ),
            ),
            "solarized": Theme(
                name="Solarized",
                settings=ThemeSettings(background=Color(10, 20, 30, 255)),
            ),
        }
    )


@pytest.fixture
def code_config() -> CodeConfig:
    return CodeConfig()


@pytest.fixture
def render_config(tmp_path: Path) -> RenderConfig:
    return RenderConfig(output=tmp_path / "out.png")
