"""Unit tests for sss_code.assets (AssetStore).

Tests cover the cache-then-embedded fallback, extending the syntax set from a
folder and persisting the merged set back to the cache directory.
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from sss_code.assets import (
    AssetStore,
    default_cache_dir,
    load_default_syntax_set,
    load_default_theme_set,
)
from sss_code.exceptions import FolderLoadError, PersistError
from sss_code.highlighting.dumps import dump_to_file
from sss_code.highlighting.syntax import SyntaxSet
from sss_code.highlighting.theme import ThemeSet


class TestEmbeddedDefaults:
    """The bundled dumps must always decode."""

    def test_default_syntaxes_decode(self) -> None:
        syntax_set = load_default_syntax_set()
        names = {s.name for s in syntax_set}
        assert {"Plain Text", "Python", "Rust"} <= names

    def test_default_grammar_bodies_decode(self) -> None:
        python = load_default_syntax_set().find_syntax_by_name("Python")
        assert isinstance(python.contexts["main"], list)
        assert python.matches_first_line("#!/usr/bin/env python3")

    def test_default_themes_decode(self) -> None:
        theme_set = load_default_theme_set()
        assert "base16-ocean.dark" in theme_set
        assert theme_set.get("base16-ocean.dark").settings.background is not None


class TestCacheDir:
    def test_env_var_overrides_location(self, tmp_path: Path) -> None:
        with patch.dict("os.environ", {"SSS_CACHE_DIR": str(tmp_path / "custom")}):
            assert default_cache_dir() == tmp_path / "custom"

    def test_default_location_ends_with_sss(self) -> None:
        with patch.dict("os.environ", {}, clear=True):
            assert default_cache_dir().name == "sss"


class TestLoad:
    def test_missing_cache_falls_back_to_embedded(self, cache_dir: Path) -> None:
        store = AssetStore(cache_dir)
        assert store.load_syntax_set() == load_default_syntax_set()
        assert store.load_theme_set() == load_default_theme_set()

    def test_corrupt_cache_falls_back_to_embedded(self, cache_dir: Path) -> None:
        cache_dir.mkdir(parents=True)
        (cache_dir / "syntaxes.bin").write_bytes(b"\x00garbage")
        (cache_dir / "themes.bin").write_bytes(b"")
        store = AssetStore(cache_dir)
        assert store.load_syntax_set() == load_default_syntax_set()
        assert store.load_theme_set() == load_default_theme_set()

    def test_valid_cache_wins_over_embedded(
        self, cache_dir: Path, small_syntax_set: SyntaxSet, small_theme_set: ThemeSet
    ) -> None:
        """Whatever was last persisted is returned unchanged."""
        cache_dir.mkdir(parents=True)
        dump_to_file(small_syntax_set, cache_dir / "syntaxes.bin")
        dump_to_file(small_theme_set, cache_dir / "themes.bin")
        store = AssetStore(cache_dir)
        assert store.load_syntax_set() == small_syntax_set
        assert store.load_theme_set() == small_theme_set


class TestExtendSyntaxes:
    def test_extend_persists_merged_set(
        self, cache_dir: Path, small_syntax_set: SyntaxSet, extra_syntaxes: Path
    ) -> None:
        """Reloading after an extend yields old and new syntaxes."""
        store = AssetStore(cache_dir)
        extended = store.extend_syntaxes(small_syntax_set, extra_syntaxes)
        assert (cache_dir / "syntaxes.bin").exists()

        reloaded = AssetStore(cache_dir).load_syntax_set()
        assert reloaded == extended
        names = [s.name for s in reloaded]
        assert names == ["Plain Text", "Python", "Rust", "Lua"]

    def test_extend_overwrites_previous_cache(
        self, cache_dir: Path, small_syntax_set: SyntaxSet, extra_syntaxes: Path
    ) -> None:
        store = AssetStore(cache_dir)
        store.extend_syntaxes(small_syntax_set, extra_syntaxes)
        store.extend_syntaxes(SyntaxSet(), extra_syntaxes)
        assert [s.name for s in store.load_syntax_set()] == ["Lua"]

    def test_extend_bad_folder_does_not_touch_cache(
        self, cache_dir: Path, small_syntax_set: SyntaxSet, tmp_path: Path
    ) -> None:
        store = AssetStore(cache_dir)
        with pytest.raises(FolderLoadError):
            store.extend_syntaxes(small_syntax_set, tmp_path / "missing")
        assert not (cache_dir / "syntaxes.bin").exists()

    def test_extend_unwritable_cache_raises_persist_error(
        self, tmp_path: Path, small_syntax_set: SyntaxSet, extra_syntaxes: Path
    ) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("a file where the cache directory should be")
        store = AssetStore(blocker / "sss")
        with pytest.raises(PersistError):
            store.extend_syntaxes(small_syntax_set, extra_syntaxes)

    def test_extend_accepts_oniguruma_grammar(self, cache_dir: Path, tmp_path: Path) -> None:
        """A grammar using Oniguruma-only escapes is added and found by first line."""
        folder = tmp_path / "hex"
        folder.mkdir()
        (folder / "Hexdump.sublime-syntax").write_text(
            "name: Hexdump\nscope: source.hexdump\n"
            "first_line_match: '^\\h{8}:'\ncontexts:\n  main: []\n"
        )
        store = AssetStore(cache_dir)
        store.extend_syntaxes(SyntaxSet(), folder)
        reloaded = store.load_syntax_set()
        assert reloaded.find_syntax_by_first_line("00000000: 7f45 4c46").name == "Hexdump"
