"""Syntax and theme definitions for sss-code.

This subpackage provides:
- Immutable syntax sets built from ``.sublime-syntax`` folders
- Theme sets built from ``.tmTheme`` folders
- Binary dumps shared by the cache directory and the bundled defaults
- Translation of vim colorschemes into themes
"""

from sss_code.highlighting.dumps import (
    dump_binary,
    dump_to_file,
    from_binary,
    from_dump_file,
)
from sss_code.highlighting.syntax import (
    SyntaxDefinition,
    SyntaxSet,
    SyntaxSetBuilder,
    load_syntax_file,
)
from sss_code.highlighting.theme import (
    Color,
    Theme,
    ThemeItem,
    ThemeSet,
    ThemeSettings,
    load_theme,
)
from sss_code.highlighting.vim import theme_from_vim

__all__ = [
    "SyntaxDefinition",
    "SyntaxSet",
    "SyntaxSetBuilder",
    "load_syntax_file",
    "Color",
    "Theme",
    "ThemeItem",
    "ThemeSet",
    "ThemeSettings",
    "load_theme",
    "theme_from_vim",
    "dump_binary",
    "dump_to_file",
    "from_binary",
    "from_dump_file",
]
