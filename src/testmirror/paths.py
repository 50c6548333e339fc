"""Path arithmetic: relativizing, test-name transformation, directory ensure."""

from __future__ import annotations

import os
from pathlib import PurePath
from typing import TYPE_CHECKING, Iterable

from .exceptions import BasePathNotContainedError, UnexpectedFileAtDirectoryPathError
from .fs import EntryKind

if TYPE_CHECKING:
    from .fs import FileSystem


DEFAULT_SUFFIX = ".Tests"


# ---------------------------------------------------------------------------
# Relativizing
# ---------------------------------------------------------------------------

def relativize(base: str | os.PathLike[str], item: str | os.PathLike[str]) -> str:
    """Return *item* relative to *base*, with no leading separator.

    Containment is checked segment by segment and case-insensitively, so
    ``/proj`` contains ``/PROJ/a.cs`` but not ``/proj2/a.cs``.  The
    returned path keeps the case of *item*.  Returns ``""`` when *item*
    is *base* itself.

    Raises :class:`BasePathNotContainedError` if *item* is not under *base*.
    """
    base_parts = PurePath(os.path.normpath(os.fspath(base))).parts
    item_parts = PurePath(os.path.normpath(os.fspath(item))).parts
    n = len(base_parts)
    if len(item_parts) < n or any(
        b.lower() != i.lower() for b, i in zip(base_parts, item_parts)
    ):
        raise BasePathNotContainedError(os.fspath(base), os.fspath(item))
    rest = item_parts[n:]
    return os.path.join(*rest) if rest else ""


# ---------------------------------------------------------------------------
# Test-name transformation
# ---------------------------------------------------------------------------

def _normalize_ext(ext: str) -> str:
    ext = ext.strip().lower()
    if ext and not ext.startswith("."):
        ext = "." + ext
    return ext


def normalize_extensions(extensions: Iterable[str]) -> tuple[str, ...]:
    """Lower-case *extensions*, add missing dots, drop duplicates.

    ``["cs", ".CS", ".razor"]`` → ``(".cs", ".razor")``.  Raises
    ``ValueError`` if nothing usable is left.
    """
    result: list[str] = []
    for raw in extensions:
        ext = _normalize_ext(raw)
        if ext in ("", "."):
            raise ValueError(f"Invalid extension: {raw!r}")
        if ext not in result:
            result.append(ext)
    if not result:
        raise ValueError("At least one extension is required")
    return tuple(result)


def match_extension(name: str, extensions: Iterable[str]) -> str | None:
    """Return the longest of *extensions* that *name* ends with, or ``None``."""
    lower = name.lower()
    best = None
    for ext in extensions:
        ext = _normalize_ext(ext)
        if ext and lower.endswith(ext) and (best is None or len(ext) > len(best)):
            best = ext
    return best


def transform_name(
    rel_path: str,
    extensions: Iterable[str],
    suffix: str = DEFAULT_SUFFIX,
) -> str:
    """Insert *suffix* before the matched trailing extension of *rel_path*.

    ``transform_name("Controllers/Foo.cs", [".cs"])`` returns
    ``"Controllers/Foo.Tests.cs"``.  Matching is case-insensitive and the
    longest matching extension wins; the input's own casing is kept.
    A path that matches none of *extensions* is returned unchanged.
    """
    ext = match_extension(rel_path, extensions)
    if ext is None:
        return rel_path
    cut = len(rel_path) - len(ext)
    return rel_path[:cut] + suffix + rel_path[cut:]


# ---------------------------------------------------------------------------
# Directory ensure
# ---------------------------------------------------------------------------

def _blocking_kind(fs: FileSystem, path: str) -> EntryKind | None:
    """Kind at *path*, following symlinks, but reporting dangling links."""
    kind = fs.kind(path, follow_symlinks=True)
    if kind is None:
        kind = fs.kind(path)
    return kind


def ensure_directory(fs: FileSystem, path: str | os.PathLike[str]) -> bool:
    """Make sure *path* exists as a directory.

    Creates every missing segment.  Returns ``True`` if anything was
    created, ``False`` if the directory was already there.  Never
    removes or replaces existing entries: a non-directory at *path* or at
    any ancestor raises :class:`UnexpectedFileAtDirectoryPathError`.
    """
    path = os.fspath(path)
    kind = _blocking_kind(fs, path)
    if kind is EntryKind.DIRECTORY:
        return False
    if kind is not None:
        raise UnexpectedFileAtDirectoryPathError(path)
    for parent in PurePath(path).parents:
        parent_kind = _blocking_kind(fs, str(parent))
        if parent_kind is EntryKind.DIRECTORY:
            break
        if parent_kind is not None:
            raise UnexpectedFileAtDirectoryPathError(path, str(parent))
    fs.create_directory(path)
    return True
