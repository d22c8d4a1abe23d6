"""Top-level flow: load assets, pick a run mode, render.

The run mode is chosen once from the configuration before anything
render-specific is constructed. Listing modes print and return, build-cache
mode writes dumps and ends the process, render mode hands a single
:class:`RenderContext` to the renderer.
"""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import NoReturn, TextIO

import click

from sss_code.assets import SYNTAXES_FILE, THEMES_FILE, AssetStore
from sss_code.config import CodeConfig, RenderConfig
from sss_code.exceptions import ContentUnavailableError, PersistError
from sss_code.highlighting import dumps
from sss_code.highlighting.syntax import SyntaxSet
from sss_code.highlighting.theme import ThemeSet
from sss_code.renderer import RenderContext, Renderer
from sss_code.resolve import apply_theme_background, resolve_syntax, resolve_theme

logger = logging.getLogger(__name__)


class RunMode(Enum):
    RENDER = "render"
    LIST_THEMES = "list-themes"
    LIST_FILE_TYPES = "list-file-types"
    BUILD_CACHE = "build-cache"


def select_run_mode(config: CodeConfig) -> RunMode:
    if config.list_themes:
        return RunMode.LIST_THEMES
    if config.list_file_types:
        return RunMode.LIST_FILE_TYPES
    if config.build_cache is not None:
        return RunMode.BUILD_CACHE
    return RunMode.RENDER


def list_themes(theme_set: ThemeSet) -> None:
    for name in theme_set.names():
        click.echo(name)


def format_file_type(name: str, extensions: tuple[str, ...]) -> str:
    return f"- {name} (.{', .'.join(extensions)})"


def list_file_types(syntax_set: SyntaxSet) -> None:
    for syntax in syntax_set.syntaxes():
        click.echo(format_file_type(syntax.name, syntax.file_extensions))


def build_cache(
    source: Path, output: Path, syntax_set: SyntaxSet, theme_set: ThemeSet
) -> tuple[SyntaxSet, ThemeSet]:
    """Merge ``source/themes`` and ``source/syntaxes`` and dump both to ``output``.

    ``theme_set`` is extended in place; the syntax set is rebuilt.
    """
    theme_set.add_from_folder(source / "themes")
    builder = syntax_set.into_builder()
    builder.add_from_folder(source / "syntaxes", recursive=True)
    merged = builder.build()

    try:
        output.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise PersistError(output, details={"error": str(e)}) from e
    dumps.dump_to_file(theme_set, output / THEMES_FILE)
    dumps.dump_to_file(merged, output / SYNTAXES_FILE)
    logger.info(
        "Wrote %d themes and %d syntaxes to %s", len(theme_set), len(merged), output
    )
    return merged, theme_set


def _finish_build_cache(
    source: Path, output: Path, syntax_set: SyntaxSet, theme_set: ThemeSet
) -> NoReturn:
    build_cache(source, output, syntax_set, theme_set)
    raise SystemExit(0)


def run(
    config: CodeConfig,
    render_config: RenderConfig,
    renderer: Renderer,
    cache_dir: Path,
    stdin: TextIO | None = None,
) -> RunMode:
    """Run one invocation and return the mode that ran.

    Build-cache mode does not return: it raises ``SystemExit(0)`` once the
    dumps are written.
    """
    mode = select_run_mode(config)
    store = AssetStore(cache_dir)

    syntax_set = store.load_syntax_set()
    theme_set = store.load_theme_set()
    if config.extra_syntaxes is not None:
        syntax_set = store.extend_syntaxes(syntax_set, config.extra_syntaxes)

    if mode is RunMode.LIST_THEMES:
        list_themes(theme_set)
        return mode
    if mode is RunMode.LIST_FILE_TYPES:
        list_file_types(syntax_set)
        return mode
    if mode is RunMode.BUILD_CACHE and config.build_cache is not None:
        _finish_build_cache(config.build_cache, render_config.output, syntax_set, theme_set)

    if config.content is None:
        raise ContentUnavailableError("Cannot get content from args")
    content = config.content.contents(stdin)

    syntax = resolve_syntax(syntax_set, config, content)
    theme = resolve_theme(theme_set, config)
    apply_theme_background(theme, render_config)

    context = RenderContext(
        config=config,
        syntax=syntax,
        theme=theme,
        lib_config=render_config.copy(),
        syntax_set=syntax_set,
        content=content,
        font=render_config.fonts,
    )
    renderer.render(render_config.copy(), context)
    return mode
