"""Loading and caching of syntax and theme sets.

Sets are read from the user cache directory when a valid dump exists there,
otherwise from the dumps bundled with the package. Extra syntax folders are
merged in and the merged set is written back to the cache directory so later
runs pick it up without re-parsing.
"""

from __future__ import annotations

import logging
import os
import platform
from importlib import resources
from pathlib import Path

from sss_code.exceptions import AssetLoadError, PersistError
from sss_code.highlighting import dumps
from sss_code.highlighting.syntax import SyntaxSet
from sss_code.highlighting.theme import ThemeSet

logger = logging.getLogger(__name__)

CACHE_SUBDIR = "sss"
SYNTAXES_FILE = "syntaxes.bin"
THEMES_FILE = "themes.bin"


def _platform_cache_root() -> Path:
    system = platform.system()
    if system == "Windows":
        return Path(os.environ.get("LOCALAPPDATA", Path.home() / "AppData" / "Local"))
    if system == "Darwin":
        return Path.home() / "Library" / "Caches"
    return Path(os.environ.get("XDG_CACHE_HOME") or Path.home() / ".cache")


def default_cache_dir() -> Path:
    """Return the cache directory (``SSS_CACHE_DIR`` overrides it)."""
    env_path = os.environ.get("SSS_CACHE_DIR")
    if env_path:
        return Path(env_path).expanduser()
    return _platform_cache_root() / CACHE_SUBDIR


def _embedded(name: str) -> bytes:
    try:
        return resources.files("sss_code").joinpath("data").joinpath(name).read_bytes()
    except OSError as e:
        raise AssetLoadError(f"embedded {name}", details={"error": str(e)}) from e


def embedded_syntaxes() -> bytes:
    return _embedded(SYNTAXES_FILE)


def embedded_themes() -> bytes:
    return _embedded(THEMES_FILE)


def load_default_syntax_set() -> SyntaxSet:
    """Decode the bundled syntax set."""
    return dumps.from_binary(embedded_syntaxes(), "syntaxes", source="embedded syntaxes")


def load_default_theme_set() -> ThemeSet:
    """Decode the bundled theme set."""
    return dumps.from_binary(embedded_themes(), "themes", source="embedded themes")


class AssetStore:
    """Syntax and theme sets backed by one cache directory."""

    def __init__(self, cache_dir: Path | None = None) -> None:
        self.cache_dir = cache_dir if cache_dir is not None else default_cache_dir()

    @property
    def syntaxes_path(self) -> Path:
        return self.cache_dir / SYNTAXES_FILE

    @property
    def themes_path(self) -> Path:
        return self.cache_dir / THEMES_FILE

    def load_syntax_set(self) -> SyntaxSet:
        try:
            syntax_set = dumps.from_dump_file(self.syntaxes_path, "syntaxes")
        except AssetLoadError as e:
            logger.debug("Using embedded syntaxes: %s", e)
            return load_default_syntax_set()
        logger.debug("Loaded %d syntaxes from %s", len(syntax_set), self.syntaxes_path)
        return syntax_set

    def load_theme_set(self) -> ThemeSet:
        try:
            theme_set = dumps.from_dump_file(self.themes_path, "themes")
        except AssetLoadError as e:
            logger.debug("Using embedded themes: %s", e)
            return load_default_theme_set()
        logger.debug("Loaded %d themes from %s", len(theme_set), self.themes_path)
        return theme_set

    def extend_syntaxes(self, syntax_set: SyntaxSet, folder: Path) -> SyntaxSet:
        """Merge the syntaxes under ``folder`` into a new set and cache it.

        Raises:
            FolderLoadError: If the folder or one of its definitions is unusable.
            PersistError: If the merged set cannot be written.
        """
        builder = syntax_set.into_builder()
        added = builder.add_from_folder(folder, recursive=True)
        extended = builder.build()
        logger.info("Added %d syntaxes from %s", added, folder)

        self._ensure_cache_dir()
        dumps.dump_to_file(extended, self.syntaxes_path)
        return extended

    def _ensure_cache_dir(self) -> None:
        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise PersistError(self.cache_dir, details={"error": str(e)}) from e
