"""sss-code: render source code to images.

This package resolves everything the image renderer needs:
- Syntax and theme sets from the user cache or the bundled defaults
- Extra syntax folders merged into the cached set
- One syntax per input, by extension or by first line
- One theme per input, from a vim colorscheme, the theme set or a file

Example:
    >>> from pathlib import Path
    >>> from sss_code import AssetStore
    >>> store = AssetStore(Path("/tmp/sss-cache"))
    >>> syntax_set = store.load_syntax_set()
    >>> syntax_set.find_syntax_by_extension("rs").name
    'Rust'
"""

from sss_code.assets import AssetStore, default_cache_dir
from sss_code.config import CodeConfig, RenderConfig, load_config
from sss_code.exceptions import (
    AssetLoadError,
    ConfigError,
    ContentUnavailableError,
    FolderLoadError,
    PersistError,
    RenderError,
    SssError,
    SyntaxNotFoundError,
    ThemeLoadError,
)
from sss_code.pipeline import RunMode, build_cache, run
from sss_code.renderer import ImageRenderer, RenderContext
from sss_code.resolve import apply_theme_background, resolve_syntax, resolve_theme

__version__ = "0.1.0"

__all__ = [
    # Pipeline
    "AssetStore",
    "default_cache_dir",
    "RunMode",
    "run",
    "build_cache",
    "resolve_syntax",
    "resolve_theme",
    "apply_theme_background",
    # Config
    "CodeConfig",
    "RenderConfig",
    "load_config",
    # Rendering
    "ImageRenderer",
    "RenderContext",
    # Exceptions
    "SssError",
    "AssetLoadError",
    "FolderLoadError",
    "PersistError",
    "ContentUnavailableError",
    "SyntaxNotFoundError",
    "ThemeLoadError",
    "ConfigError",
    "RenderError",
    # Metadata
    "__version__",
]
