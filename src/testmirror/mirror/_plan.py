"""Precondition checks and plan construction."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

from ..exceptions import InvalidKindError, PathNotFoundError, UnsupportedEntryKindError
from ..fs import EntryKind
from ..paths import DEFAULT_SUFFIX, relativize, transform_name
from ..walk import enumerate_tree
from ._types import MirrorPlanEntry, PlanKind

if TYPE_CHECKING:
    from ..fs import FileSystem
    from ..walk import RootContext


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

def _require_kind(fs: FileSystem, path: str, expected: EntryKind) -> None:
    kind = fs.kind(path, follow_symlinks=True)
    if kind is None:
        raise PathNotFoundError(path)
    if kind is not expected:
        raise InvalidKindError(path, expected=str(expected), actual=str(kind))


def validate_paths(
    fs: FileSystem,
    source: str,
    destination: str,
    template: str,
    *,
    require_destination: bool = False,
) -> None:
    """Check the preconditions of a mirror run without touching anything.

    *source* must be a directory and *template* a regular file.
    *destination* must be a directory if it exists; when
    *require_destination* is set it must also exist.

    Raises :class:`PathNotFoundError` or :class:`InvalidKindError`.
    """
    _require_kind(fs, source, EntryKind.DIRECTORY)
    dest_kind = fs.kind(destination, follow_symlinks=True)
    if dest_kind is None:
        if require_destination:
            raise PathNotFoundError(destination)
    elif dest_kind is not EntryKind.DIRECTORY:
        raise InvalidKindError(destination, expected="directory", actual=str(dest_kind))
    _require_kind(fs, template, EntryKind.FILE)


# ---------------------------------------------------------------------------
# Planning
# ---------------------------------------------------------------------------

def plan_mirror(
    fs: FileSystem,
    ctx: RootContext,
    destination: str | os.PathLike[str],
    *,
    suffix: str = DEFAULT_SUFFIX,
    mirror_directories: bool = False,
) -> list[MirrorPlanEntry]:
    """Enumerate ``ctx.root`` and map every item into *destination*.

    Each included file becomes a ``MATERIALIZE_FILE`` step whose target
    is the file's relative path with *suffix* inserted before its
    extension.  Directories only become ``ENSURE_DIRECTORY`` steps when
    *mirror_directories* is set; otherwise they appear in the destination
    only as parents of materialized files.

    The whole plan is built before anything is returned, so an entry of
    unsupported kind raises :class:`UnsupportedEntryKindError` before any
    step has run.  When *destination* lies inside ``ctx.root`` its subtree
    is not enumerated, so earlier output is never mirrored again.
    """
    dest_root = os.path.abspath(os.fspath(destination))
    ctx = ctx.pruning(dest_root)
    plan: list[MirrorPlanEntry] = []
    for entry in enumerate_tree(fs, ctx):
        if entry.kind is EntryKind.DIRECTORY:
            if mirror_directories:
                rel = relativize(ctx.root, entry.path)
                plan.append(MirrorPlanEntry(
                    entry.path, os.path.join(dest_root, rel), PlanKind.ENSURE_DIRECTORY,
                ))
        elif entry.kind is EntryKind.FILE:
            rel = transform_name(relativize(ctx.root, entry.path), ctx.extensions, suffix)
            plan.append(MirrorPlanEntry(
                entry.path, os.path.join(dest_root, rel), PlanKind.MATERIALIZE_FILE,
            ))
        else:
            raise UnsupportedEntryKindError(entry.path, entry.kind)
    return plan
