"""Source tree enumeration with top-level exclusion and extension filtering."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Iterable, Iterator

from .exceptions import BasePathNotContainedError, InvalidKindError, PathNotFoundError
from .fs import EntryKind, FileSystemEntry
from .paths import match_extension, normalize_extensions, relativize

if TYPE_CHECKING:
    from ._exclude import ExcludeFilter
    from .fs import FileSystem


DEFAULT_EXTENSIONS = (".cs",)
DEFAULT_EXCLUDE_DIRS = ("bin", "obj")


@dataclass(frozen=True)
class RootContext:
    """A root directory plus the rules governing enumeration under it.

    Attributes:
        root: Absolute path of the root directory.
        extensions: Normalized file extensions to include (``".cs"``).
        exclude_dirs: Lower-cased names of immediate children of *root*
            whose subtrees are skipped.
        exclude: Optional pattern filter applied at every depth.
        prune: Lower-cased ``/``-separated paths, relative to *root*, of
            directories whose subtrees are skipped at any depth.
    """
    root: str
    extensions: tuple[str, ...] = DEFAULT_EXTENSIONS
    exclude_dirs: frozenset[str] = frozenset(DEFAULT_EXCLUDE_DIRS)
    exclude: ExcludeFilter | None = None
    prune: frozenset[str] = frozenset()

    @classmethod
    def create(
        cls,
        root: str | os.PathLike[str],
        *,
        extensions: Iterable[str] = DEFAULT_EXTENSIONS,
        exclude_dirs: Iterable[str] = DEFAULT_EXCLUDE_DIRS,
        exclude: ExcludeFilter | None = None,
    ) -> RootContext:
        """Build a context, normalizing *root* and the rule sets."""
        return cls(
            root=os.path.abspath(os.fspath(root)),
            extensions=normalize_extensions(extensions),
            exclude_dirs=frozenset(n.strip().lower() for n in exclude_dirs if n.strip()),
            exclude=exclude if exclude is not None and exclude.active else None,
        )

    def is_excluded_top_level(self, name: str) -> bool:
        return name.lower() in self.exclude_dirs

    def includes_file(self, name: str) -> bool:
        return match_extension(name, self.extensions) is not None

    def is_pruned(self, rel: str) -> bool:
        return rel.lower() in self.prune

    def pruning(self, path: str | os.PathLike[str]) -> RootContext:
        """Return a copy that also skips the directory at *path*.

        *path* is left alone when it is the root itself or lies outside it.
        """
        try:
            rel = relativize(self.root, os.path.abspath(os.fspath(path)))
        except BasePathNotContainedError:
            return self
        if not rel:
            return self
        rel = rel.replace(os.sep, "/").lower()
        return replace(self, prune=self.prune | {rel})


def enumerate_tree(fs: FileSystem, ctx: RootContext) -> Iterator[FileSystemEntry]:
    """Return a lazy iterator over the entries under ``ctx.root``.

    Directories are yielded before their contents, and children in
    name order.  Subtrees of excluded top-level directories are never
    visited; a same-named directory deeper down is.  Directories listed
    in ``ctx.prune`` are skipped with their contents.  Files are yielded
    only if their name ends with one of ``ctx.extensions``.  Entries of
    unsupported kinds (symlinks, devices, ...) are yielded as-is so the
    caller can decide what to do with them.

    The root is checked eagerly: raises :class:`PathNotFoundError` if it
    does not exist and :class:`InvalidKindError` if it is not a directory.
    """
    kind = fs.kind(ctx.root, follow_symlinks=True)
    if kind is None:
        raise PathNotFoundError(ctx.root)
    if kind is not EntryKind.DIRECTORY:
        raise InvalidKindError(ctx.root, expected="directory", actual=str(kind))
    return _walk(fs, ctx, ctx.root, "")


def _walk(fs: FileSystem, ctx: RootContext, dir_path: str, rel_dir: str) -> Iterator[FileSystemEntry]:
    if ctx.exclude is not None:
        ctx.exclude.enter_directory(dir_path, rel_dir)
    for entry in fs.list_children(dir_path):
        rel = f"{rel_dir}/{entry.name}" if rel_dir else entry.name
        if entry.is_file:
            if not ctx.includes_file(entry.name):
                continue
            if ctx.exclude is not None and ctx.exclude.is_excluded(rel):
                continue
            yield entry
            continue

        if not rel_dir and ctx.is_excluded_top_level(entry.name):
            continue
        if ctx.is_pruned(rel):
            continue
        if ctx.exclude is not None and ctx.exclude.is_excluded(rel, is_dir=entry.is_dir):
            continue
        yield entry
        if entry.is_dir:
            yield from _walk(fs, ctx, entry.path, rel)
