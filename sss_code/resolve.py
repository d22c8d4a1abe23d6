"""Pick the one syntax and the one theme used for a render."""

from __future__ import annotations

import logging
from pathlib import Path

from sss_code.config import DEFAULT_BACKGROUND, DEFAULT_THEME, CodeConfig, RenderConfig, Solid
from sss_code.exceptions import SyntaxNotFoundError
from sss_code.highlighting.syntax import SyntaxDefinition, SyntaxSet
from sss_code.highlighting.theme import Theme, ThemeSet, load_theme
from sss_code.highlighting.vim import theme_from_vim

logger = logging.getLogger(__name__)


def first_line(content: str) -> str:
    return content.split("\n", 1)[0]


def resolve_syntax(syntax_set: SyntaxSet, config: CodeConfig, content: str) -> SyntaxDefinition:
    """Find the syntax for ``content``.

    An explicit extension is the only thing consulted when it is set; the
    first line of content is only used without one.

    Raises:
        SyntaxNotFoundError: If the chosen lookup finds nothing.
    """
    if config.extension is not None:
        syntax = syntax_set.find_syntax_by_extension(config.extension)
        if syntax is None:
            raise SyntaxNotFoundError(config.extension, by_extension=True)
        logger.debug("Syntax %s selected by extension %r", syntax.name, config.extension)
        return syntax

    line = first_line(content)
    syntax = syntax_set.find_syntax_by_first_line(line)
    if syntax is None:
        raise SyntaxNotFoundError(line, by_extension=False)
    logger.debug("Syntax %s selected by first line", syntax.name)
    return syntax


def resolve_theme(theme_set: ThemeSet, config: CodeConfig) -> Theme:
    """Find the theme to render with.

    Order: vim colorscheme, theme set entry, theme file of the same name.

    Raises:
        ThemeLoadError: If the theme file fallback fails.
    """
    if config.vim_theme is not None:
        logger.debug("Theme from vim colorscheme %s", config.vim_theme)
        return theme_from_vim(config.vim_theme)

    name = DEFAULT_THEME if config.theme is None else config.theme
    theme = theme_set.get(name)
    if theme is not None:
        return theme

    logger.debug("Theme %r not in theme set, loading it as a file", name)
    return load_theme(Path(name).expanduser())


def apply_theme_background(theme: Theme, render_config: RenderConfig) -> bool:
    """Use the theme background for the window unless the user picked one.

    "Picked one" means the configured background differs from
    ``DEFAULT_BACKGROUND``; configuring that exact color is treated the same
    as leaving it unset. Returns True when the background was replaced.
    """
    background = theme.settings.background
    if background is None:
        return False
    if render_config.colors.windows_background != Solid(DEFAULT_BACKGROUND):
        return False
    render_config.colors.windows_background = Solid(background)
    logger.debug("Window background set from theme: %s", background.to_hex())
    return True
