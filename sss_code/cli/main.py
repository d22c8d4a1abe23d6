"""sss command - render code to an image."""

from __future__ import annotations

import logging
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from sss_code import __version__
from sss_code.assets import default_cache_dir
from sss_code.config import load_config, parse_background
from sss_code.content import ContentSource
from sss_code.exceptions import SssError
from sss_code.pipeline import run
from sss_code.renderer import ImageRenderer

err_console = Console(stderr=True)


def setup_logging(level: str) -> logging.Logger:
    """Attach a rich handler to the package logger once."""
    logger = logging.getLogger("sss_code")
    logger.setLevel(level.upper())
    if not logger.handlers:
        handler = RichHandler(console=err_console, show_path=False, show_time=False)
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)
    return logger


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("content", required=False)
@click.option("-c", "--code", help="Code to render, instead of a file")
@click.option("-e", "--extension", help="File extension used to pick the syntax (e.g. rs)")
@click.option("-t", "--theme", help="Theme name, or path to a .tmTheme file")
@click.option("--vim-theme", help="Vim colorscheme name or .vim file to use as theme")
@click.option(
    "--extra-syntaxes",
    type=click.Path(path_type=Path),
    help="Folder of .sublime-syntax files added to the cached syntaxes",
)
@click.option("--list-themes", is_flag=True, help="List available themes")
@click.option("--list-file-types", is_flag=True, help="List supported file types")
@click.option(
    "--build-cache",
    type=click.Path(path_type=Path),
    help="Build syntax/theme dumps from DIR/syntaxes and DIR/themes into --output",
)
@click.option("-o", "--output", type=click.Path(path_type=Path), help="Output image path")
@click.option("-b", "--background", help="Window background color (#RRGGBB)")
@click.option("-f", "--font", type=click.Path(path_type=Path), help="Font file")
@click.option("--font-size", type=float, help="Font size")
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path),
    help="Config file (default: ~/.config/sss/config.yaml)",
)
@click.option(
    "--cache-dir",
    type=click.Path(path_type=Path),
    help="Syntax/theme cache directory",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    show_default=True,
)
@click.version_option(__version__, prog_name="sss")
def cli(
    content: str | None,
    code: str | None,
    extension: str | None,
    theme: str | None,
    vim_theme: str | None,
    extra_syntaxes: Path | None,
    list_themes: bool,
    list_file_types: bool,
    build_cache: Path | None,
    output: Path | None,
    background: str | None,
    font: Path | None,
    font_size: float | None,
    config_path: Path | None,
    cache_dir: Path | None,
    log_level: str,
) -> None:
    """Take a screenshot of CONTENT (a file, or - for stdin)."""
    setup_logging(log_level)

    try:
        code_config, render_config = load_config(config_path)

        if code is not None:
            code_config.content = ContentSource.inline(code)
        else:
            code_config.content = ContentSource.from_arg(content or "-")
        if extension is not None:
            code_config.extension = extension
        if theme is not None:
            code_config.theme = theme
        if vim_theme is not None:
            code_config.vim_theme = vim_theme
        if extra_syntaxes is not None:
            code_config.extra_syntaxes = extra_syntaxes
        code_config.list_themes = list_themes
        code_config.list_file_types = list_file_types
        code_config.build_cache = build_cache

        if output is not None:
            render_config.output = output
        if background is not None:
            render_config.colors.windows_background = parse_background(
                background, "--background"
            )
        if font is not None:
            render_config.fonts.path = font
        if font_size is not None:
            render_config.fonts.size = font_size

        run(
            code_config,
            render_config,
            ImageRenderer(),
            cache_dir if cache_dir is not None else default_cache_dir(),
        )
    except SssError as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}", highlight=False)
        raise SystemExit(1) from e


def main() -> None:
    cli()
