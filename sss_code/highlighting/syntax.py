"""Syntax definitions and the immutable :class:`SyntaxSet`.

A syntax set is only ever produced by :class:`SyntaxSetBuilder`. Extending a
set means seeding a new builder from it, adding definitions and building a
fresh set; the old set is never touched.
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import onigurumacffi
import yaml

from sss_code.exceptions import FolderLoadError

logger = logging.getLogger(__name__)

SYNTAX_SUFFIX = ".sublime-syntax"
PLAIN_TEXT = "Plain Text"
_BOM = "\ufeff"

# Grammar regexes are Oniguruma patterns.
compile_regex = functools.lru_cache()(onigurumacffi.compile)


@dataclass(frozen=True)
class SyntaxDefinition:
    """A single language grammar.

    ``contexts`` is the raw grammar body. It is carried around untouched and
    only interpreted by the highlighter.
    """

    name: str
    scope: str
    file_extensions: tuple[str, ...] = ()
    first_line_match: str | None = None
    hidden: bool = False
    contexts: Mapping[str, Any] = field(default_factory=dict, compare=False, hash=False)

    def matches_first_line(self, line: str) -> bool:
        if not self.first_line_match:
            return False
        return compile_regex(self.first_line_match).search(line) is not None

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "scope": self.scope,
            "file_extensions": list(self.file_extensions),
            "first_line_match": self.first_line_match,
            "hidden": self.hidden,
            "contexts": yaml.safe_dump(dict(self.contexts), sort_keys=False, allow_unicode=True),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SyntaxDefinition:
        return cls(
            name=data["name"],
            scope=data["scope"],
            file_extensions=tuple(data.get("file_extensions") or ()),
            first_line_match=data.get("first_line_match"),
            hidden=bool(data.get("hidden", False)),
            contexts=_load_contexts(data.get("contexts")),
        )


def _load_contexts(raw: Any) -> Mapping[str, Any]:
    # Dumps keep the grammar body as YAML so integer capture keys survive.
    if isinstance(raw, str):
        raw = yaml.safe_load(raw)
    return raw or {}


class SyntaxSet:
    """Immutable, ordered collection of syntax definitions."""

    __slots__ = ("_syntaxes",)

    def __init__(self, syntaxes: Iterable[SyntaxDefinition] = ()) -> None:
        self._syntaxes: tuple[SyntaxDefinition, ...] = tuple(syntaxes)

    def __len__(self) -> int:
        return len(self._syntaxes)

    def __iter__(self):
        return iter(self._syntaxes)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SyntaxSet):
            return NotImplemented
        return self._syntaxes == other._syntaxes

    def __repr__(self) -> str:
        return f"SyntaxSet({len(self._syntaxes)} syntaxes)"

    def syntaxes(self) -> tuple[SyntaxDefinition, ...]:
        return self._syntaxes

    def into_builder(self) -> SyntaxSetBuilder:
        """Return a builder seeded with every definition of this set."""
        return SyntaxSetBuilder(self._syntaxes)

    # Lookups walk backwards so later additions shadow bundled definitions.

    def find_syntax_by_name(self, name: str) -> SyntaxDefinition | None:
        for syntax in reversed(self._syntaxes):
            if syntax.name == name:
                return syntax
        return None

    def find_syntax_by_extension(self, extension: str) -> SyntaxDefinition | None:
        for syntax in reversed(self._syntaxes):
            if extension in syntax.file_extensions:
                return syntax
        return None

    def find_syntax_by_first_line(self, line: str) -> SyntaxDefinition | None:
        if line.startswith(_BOM):
            line = line[len(_BOM) :]
        for syntax in reversed(self._syntaxes):
            if syntax.matches_first_line(line):
                return syntax
        return None

    def find_syntax_plain_text(self) -> SyntaxDefinition | None:
        return self.find_syntax_by_name(PLAIN_TEXT)


class SyntaxSetBuilder:
    """Append-only accumulator that finalizes into a :class:`SyntaxSet`."""

    def __init__(self, seed: Iterable[SyntaxDefinition] = ()) -> None:
        self._syntaxes: list[SyntaxDefinition] = list(seed)

    def __len__(self) -> int:
        return len(self._syntaxes)

    def add(self, syntax: SyntaxDefinition) -> None:
        self._syntaxes.append(syntax)

    def add_from_folder(self, folder: str | Path, recursive: bool = True) -> int:
        """Parse every ``.sublime-syntax`` file under ``folder``.

        Returns the number of definitions added. Nothing is added when any
        file fails to parse.
        """
        folder = Path(folder)
        if not folder.is_dir():
            raise FolderLoadError(folder, "not a readable directory")

        pattern = f"**/*{SYNTAX_SUFFIX}" if recursive else f"*{SYNTAX_SUFFIX}"
        try:
            paths = sorted(p for p in folder.glob(pattern) if p.is_file())
        except OSError as e:
            raise FolderLoadError(folder, str(e)) from e

        loaded = [load_syntax_file(path) for path in paths]
        self._syntaxes.extend(loaded)
        logger.debug("Added %d syntaxes from %s", len(loaded), folder)
        return len(loaded)

    def build(self) -> SyntaxSet:
        return SyntaxSet(self._syntaxes)


def load_syntax_file(path: str | Path) -> SyntaxDefinition:
    """Load a single ``.sublime-syntax`` (YAML) grammar file."""
    path = Path(path)
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise FolderLoadError(path, str(e)) from e
    except yaml.YAMLError as e:
        raise FolderLoadError(path, f"invalid YAML: {e}") from e

    if not isinstance(data, dict):
        raise FolderLoadError(path, "syntax definition must be a mapping")

    scope = data.get("scope")
    if not isinstance(scope, str) or not scope:
        raise FolderLoadError(path, "scope: required field is missing")

    contexts = data.get("contexts")
    if not isinstance(contexts, dict) or "main" not in contexts:
        raise FolderLoadError(path, "contexts: a 'main' context is required")

    extensions = data.get("file_extensions") or []
    if not isinstance(extensions, list):
        raise FolderLoadError(path, "file_extensions: expected a list")

    first_line = data.get("first_line_match")
    if first_line is not None:
        try:
            compile_regex(first_line)
        except (onigurumacffi.OnigError, TypeError) as e:
            raise FolderLoadError(path, f"first_line_match: {e}") from e

    return SyntaxDefinition(
        name=str(data.get("name") or path.name[: -len(SYNTAX_SUFFIX)]),
        scope=scope,
        file_extensions=tuple(str(ext) for ext in extensions),
        first_line_match=first_line,
        hidden=bool(data.get("hidden", False)),
        contexts=contexts,
    )
