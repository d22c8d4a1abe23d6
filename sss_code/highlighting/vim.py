"""Build a :class:`Theme` from a vim colorscheme.

Only GUI colors are used (``guifg``, ``guibg``, ``gui``); cterm values have
no RGB equivalent.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from sss_code.exceptions import ThemeLoadError
from sss_code.highlighting.theme import Color, Theme, ThemeItem

logger = logging.getLogger(__name__)

COLORSCHEME_DIRS = (
    Path("~/.vim/colors"),
    Path("~/.config/nvim/colors"),
    Path("~/vimfiles/colors"),
)

# vim highlight group -> TextMate scope selector
GROUP_SCOPES = {
    "Comment": "comment",
    "Constant": "constant",
    "String": "string",
    "Character": "constant.character",
    "Number": "constant.numeric",
    "Boolean": "constant.language",
    "Float": "constant.numeric.float",
    "Identifier": "variable",
    "Function": "entity.name.function",
    "Statement": "keyword",
    "Conditional": "keyword.control.conditional",
    "Repeat": "keyword.control.loop",
    "Operator": "keyword.operator",
    "Keyword": "keyword.other",
    "Exception": "keyword.control.exception",
    "PreProc": "meta.preprocessor",
    "Include": "keyword.control.import",
    "Define": "meta.preprocessor.macro",
    "Type": "storage.type",
    "StorageClass": "storage.modifier",
    "Structure": "entity.name.type",
    "Special": "constant.character.escape",
    "Tag": "entity.name.tag",
    "Todo": "comment.todo",
    "Error": "invalid",
}

_HIGHLIGHT = re.compile(r"^\s*hi(?:ghlight)?!?\s+(?:default\s+)?(?P<body>.+)$")
_COLORS_NAME = re.compile(r"""^\s*let\s+(?:g:)?colors_name\s*=\s*["'](?P<name>[^"']+)["']""")
_FONT_STYLES = ("bold", "italic", "underline")


def find_colorscheme(reference: str | Path) -> Path:
    """Resolve a file path or a colorscheme name to an existing ``.vim`` file."""
    path = Path(reference).expanduser()
    if path.is_file():
        return path
    name = path.name if path.suffix == ".vim" else f"{path.name}.vim"
    for directory in COLORSCHEME_DIRS:
        candidate = directory.expanduser() / name
        if candidate.is_file():
            return candidate
    raise ThemeLoadError(reference, "vim colorscheme not found")


def parse_highlights(text: str) -> tuple[str | None, dict[str, dict[str, str]]]:
    """Return ``(colors_name, {group: {key: value}})`` with links resolved."""
    name = None
    groups: dict[str, dict[str, str]] = {}
    links: dict[str, str] = {}

    for line in text.splitlines():
        if line.lstrip().startswith('"'):
            continue
        m = _COLORS_NAME.match(line)
        if m:
            name = m.group("name")
            continue
        m = _HIGHLIGHT.match(line)
        if not m:
            continue
        parts = m.group("body").split()
        if not parts:
            continue
        if parts[0] == "link" and len(parts) >= 3:
            links[parts[1]] = parts[2]
            continue
        if parts[0] in ("clear", "link"):
            continue
        attrs = groups.setdefault(parts[0], {})
        for part in parts[1:]:
            key, sep, value = part.partition("=")
            if sep:
                attrs[key.lower()] = value

    for group, target in links.items():
        seen = {group}
        while target in links and target not in seen:
            seen.add(target)
            target = links[target]
        if group not in groups and target in groups:
            groups[group] = dict(groups[target])

    return name, groups


def _gui_color(attrs: dict[str, str], key: str) -> Color | None:
    value = attrs.get(key)
    if not value or not value.startswith("#"):
        return None
    try:
        return Color.parse(value)
    except ValueError:
        logger.debug("Ignoring invalid vim color %r", value)
        return None


def _font_style(attrs: dict[str, str]) -> str | None:
    styles = [s for s in attrs.get("gui", "").lower().split(",") if s in _FONT_STYLES]
    return " ".join(styles) or None


def theme_from_vim(reference: str | Path) -> Theme:
    """Translate a vim colorscheme (file path or name) into a theme."""
    path = find_colorscheme(reference)
    try:
        text = path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        raise ThemeLoadError(path, str(e)) from e

    name, groups = parse_highlights(text)
    theme = Theme(name=name or path.stem)

    normal = groups.get("Normal", {})
    theme.settings.foreground = _gui_color(normal, "guifg")
    theme.settings.background = _gui_color(normal, "guibg")
    theme.settings.caret = _gui_color(groups.get("Cursor", {}), "guibg")
    theme.settings.selection = _gui_color(groups.get("Visual", {}), "guibg")
    theme.settings.line_highlight = _gui_color(groups.get("CursorLine", {}), "guibg")
    line_nr = groups.get("LineNr", {})
    theme.settings.gutter = _gui_color(line_nr, "guibg")
    theme.settings.gutter_foreground = _gui_color(line_nr, "guifg")

    for group, scope in GROUP_SCOPES.items():
        attrs = groups.get(group)
        if not attrs:
            continue
        item = ThemeItem(
            scope=scope,
            foreground=_gui_color(attrs, "guifg"),
            background=_gui_color(attrs, "guibg"),
            font_style=_font_style(attrs),
        )
        if item.foreground or item.background or item.font_style:
            theme.scopes.append(item)

    logger.debug("Translated vim colorscheme %s (%d scopes)", path, len(theme.scopes))
    return theme
