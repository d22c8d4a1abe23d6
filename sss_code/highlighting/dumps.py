"""Binary dumps of syntax and theme sets.

A dump is gzip-compressed JSON wrapped in a small envelope::

    {"format": "sss-syntaxes", "version": 2, "items": [...]}

Grammar bodies are stored as YAML text inside the JSON so that integer
capture keys and YAML scalars come back with their original types.

The same decoder reads cache files and the blobs bundled with the package.
"""

from __future__ import annotations

import gzip
import json
import zlib
from pathlib import Path
from typing import Literal, overload

import yaml

from sss_code.exceptions import AssetLoadError, PersistError
from sss_code.highlighting.syntax import SyntaxDefinition, SyntaxSet
from sss_code.highlighting.theme import Theme, ThemeSet

DUMP_VERSION = 2
SYNTAXES_FORMAT = "sss-syntaxes"
THEMES_FORMAT = "sss-themes"

Kind = Literal["syntaxes", "themes"]


def dump_binary(obj: SyntaxSet | ThemeSet) -> bytes:
    """Serialize a syntax or theme set to bytes."""
    if isinstance(obj, SyntaxSet):
        envelope = {
            "format": SYNTAXES_FORMAT,
            "version": DUMP_VERSION,
            "items": [syntax.to_dict() for syntax in obj.syntaxes()],
        }
    elif isinstance(obj, ThemeSet):
        envelope = {
            "format": THEMES_FORMAT,
            "version": DUMP_VERSION,
            "items": {name: theme.to_dict() for name, theme in obj.themes.items()},
        }
    else:
        raise TypeError(f"Cannot dump {type(obj).__name__}")

    payload = json.dumps(envelope, ensure_ascii=False, separators=(",", ":"))
    return gzip.compress(payload.encode("utf-8"), mtime=0)


def dump_to_file(obj: SyntaxSet | ThemeSet, path: str | Path) -> None:
    """Write a dump to ``path``, replacing any existing file."""
    path = Path(path)
    try:
        data = dump_binary(obj)
    except (TypeError, ValueError, yaml.YAMLError) as e:
        raise PersistError(path, details={"error": f"cannot serialize: {e}"}) from e
    try:
        path.write_bytes(data)
    except OSError as e:
        raise PersistError(path, details={"error": str(e)}) from e


@overload
def from_binary(data: bytes, kind: Literal["syntaxes"], source: str = ...) -> SyntaxSet: ...
@overload
def from_binary(data: bytes, kind: Literal["themes"], source: str = ...) -> ThemeSet: ...


def from_binary(data: bytes, kind: Kind, source: str = "<binary>") -> SyntaxSet | ThemeSet:
    """Decode a dump produced by :func:`dump_binary`.

    Raises:
        AssetLoadError: If the data is corrupt or holds the wrong kind of set.
    """
    expected = SYNTAXES_FORMAT if kind == "syntaxes" else THEMES_FORMAT
    try:
        envelope = json.loads(gzip.decompress(data).decode("utf-8"))
    except (OSError, EOFError, zlib.error, UnicodeDecodeError, ValueError) as e:
        raise AssetLoadError(source, details={"error": str(e)}) from e

    if not isinstance(envelope, dict) or envelope.get("format") != expected:
        raise AssetLoadError(source, details={"error": f"not a {expected} dump"})
    if envelope.get("version") != DUMP_VERSION:
        raise AssetLoadError(
            source, details={"error": f"unsupported version {envelope.get('version')}"}
        )

    try:
        if kind == "syntaxes":
            return SyntaxSet(SyntaxDefinition.from_dict(item) for item in envelope["items"])
        return ThemeSet(
            {name: Theme.from_dict(item) for name, item in envelope["items"].items()}
        )
    except (KeyError, TypeError, ValueError, AttributeError, yaml.YAMLError) as e:
        raise AssetLoadError(source, details={"error": f"malformed entry: {e}"}) from e


@overload
def from_dump_file(path: str | Path, kind: Literal["syntaxes"]) -> SyntaxSet: ...
@overload
def from_dump_file(path: str | Path, kind: Literal["themes"]) -> ThemeSet: ...


def from_dump_file(path: str | Path, kind: Kind) -> SyntaxSet | ThemeSet:
    path = Path(path)
    try:
        data = path.read_bytes()
    except OSError as e:
        raise AssetLoadError(path, details={"error": str(e)}) from e
    return from_binary(data, kind, source=str(path))
