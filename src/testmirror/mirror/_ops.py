"""Mirror operations: run a plan against the filesystem, or pretend to."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING, Callable, Iterable

from ..exceptions import InvalidKindError, UnexpectedFileAtDirectoryPathError
from ..fs import EntryKind, LocalFileSystem
from ..paths import DEFAULT_SUFFIX, ensure_directory, relativize
from ..walk import DEFAULT_EXCLUDE_DIRS, DEFAULT_EXTENSIONS, RootContext
from ._plan import plan_mirror, validate_paths
from ._types import ActionKind, MirrorPlanEntry, MirrorReport, PlanKind

if TYPE_CHECKING:
    from .._exclude import ExcludeFilter
    from ..fs import FileSystem

ProgressCallback = Callable[[ActionKind, str], None]


# ---------------------------------------------------------------------------
# Executor
# ---------------------------------------------------------------------------

class _Executor:
    """Applies plan steps, recording outcomes in a :class:`MirrorReport`."""

    def __init__(self, fs: FileSystem, template: str, dest_root: str, *,
                 dry_run: bool = False, on_item: ProgressCallback | None = None):
        self.fs = fs
        self.template = template
        self.dest_root = dest_root
        self.dry_run = dry_run
        self.on_item = on_item
        self.report = MirrorReport(dry_run=dry_run)
        self._known_dirs: set[str] = set()

    def _record(self, bucket: list[str], action: ActionKind, path: str) -> None:
        rel = relativize(self.dest_root, path)
        bucket.append(rel)
        if self.on_item is not None:
            self.on_item(action, rel)

    def ensure_dir(self, path: str) -> None:
        """Ensure *path* and every missing ancestor below the destination root."""
        if path in self._known_dirs:
            return
        parent = os.path.dirname(path)
        if path != self.dest_root and parent != path:
            self.ensure_dir(parent)
        if self.dry_run:
            kind = self.fs.kind(path, follow_symlinks=True)
            if kind is not None and kind is not EntryKind.DIRECTORY:
                raise UnexpectedFileAtDirectoryPathError(path)
            created = kind is None
        else:
            created = ensure_directory(self.fs, path)
        if created and path != self.dest_root:
            self._record(self.report.directories, ActionKind.MKDIR, path)
        self._known_dirs.add(path)

    def materialize(self, path: str) -> None:
        """Copy the template to *path* unless something is already there."""
        self.ensure_dir(os.path.dirname(path))
        if self.fs.exists(path):
            kind = self.fs.kind(path)
            if kind is EntryKind.DIRECTORY:
                raise InvalidKindError(path, expected="file", actual=str(kind))
            self._record(self.report.skipped, ActionKind.SKIP, path)
            return
        if not self.dry_run:
            try:
                self.fs.copy_file(self.template, path)
            except FileExistsError:
                self._record(self.report.skipped, ActionKind.SKIP, path)
                return
        self._record(self.report.created, ActionKind.CREATE, path)

    def run(self, plan: Iterable[MirrorPlanEntry]) -> MirrorReport:
        self.ensure_dir(self.dest_root)
        for step in plan:
            if step.kind is PlanKind.ENSURE_DIRECTORY:
                self.ensure_dir(step.destination)
            else:
                self.materialize(step.destination)
        return self.report


def apply_plan(
    fs: FileSystem,
    plan: Iterable[MirrorPlanEntry],
    template: str | os.PathLike[str],
    destination: str | os.PathLike[str],
    *,
    dry_run: bool = False,
    on_item: ProgressCallback | None = None,
) -> MirrorReport:
    """Execute *plan* (from :func:`plan_mirror`) into *destination*.

    Creates *destination* if needed, then runs each step in order,
    copying *template* to every absent file target.  Existing files are
    never modified.  Stops at the first error.
    """
    executor = _Executor(
        fs, os.path.abspath(os.fspath(template)),
        os.path.abspath(os.fspath(destination)),
        dry_run=dry_run, on_item=on_item,
    )
    return executor.run(plan)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def mirror_tree(
    source: str | os.PathLike[str],
    destination: str | os.PathLike[str],
    template: str | os.PathLike[str],
    *,
    exclude_dirs: Iterable[str] = DEFAULT_EXCLUDE_DIRS,
    extensions: Iterable[str] = DEFAULT_EXTENSIONS,
    suffix: str = DEFAULT_SUFFIX,
    exclude: ExcludeFilter | None = None,
    mirror_directories: bool = False,
    create_destination: bool = True,
    dry_run: bool = False,
    fs: FileSystem | None = None,
    on_item: ProgressCallback | None = None,
) -> MirrorReport:
    """Mirror the layout of *source* into *destination*.

    Every file under *source* whose name ends with one of *extensions*
    gets a counterpart under *destination* at the same relative path,
    renamed by inserting *suffix* before the extension
    (``sub/Foo.cs`` → ``sub/Foo.Tests.cs``) and filled with a copy of
    *template*.  Counterparts that already exist are left untouched, so
    running again only fills in what is missing.

    Args:
        source: Root of the tree to mirror.
        destination: Root of the mirror.  Created if missing unless
            *create_destination* is ``False``.
        template: Regular file whose bytes seed every new file.
        exclude_dirs: Names of top-level directories of *source* to skip
            entirely (matched case-insensitively).
        extensions: File extensions to mirror.
        suffix: Text inserted before the extension of mirrored names.
        exclude: Optional gitignore-style :class:`ExcludeFilter`.
        mirror_directories: Also create destination directories for
            source directories that contain no mirrored files.
        create_destination: Create *destination* if it does not exist.
        dry_run: Compute the report without writing anything.
        fs: Filesystem to operate on (default: the local disk).
        on_item: Called with ``(action, relative_path)`` for each outcome.

    Returns:
        A :class:`MirrorReport` of created, skipped, and new directories.

    Raises:
        MirrorError: On the first failed precondition or step.  Nothing
            is written if a precondition fails or the source contains an
            entry that is neither a directory nor a regular file.
    """
    fs = fs if fs is not None else LocalFileSystem()
    source = os.path.abspath(os.fspath(source))
    destination = os.path.abspath(os.fspath(destination))
    template = os.path.abspath(os.fspath(template))

    validate_paths(fs, source, destination, template,
                   require_destination=not create_destination)
    ctx = RootContext.create(source, extensions=extensions,
                             exclude_dirs=exclude_dirs, exclude=exclude)
    plan = plan_mirror(fs, ctx, destination, suffix=suffix,
                       mirror_directories=mirror_directories)
    return apply_plan(fs, plan, template, destination,
                      dry_run=dry_run, on_item=on_item)


def mirror_tree_dry_run(
    source: str | os.PathLike[str],
    destination: str | os.PathLike[str],
    template: str | os.PathLike[str],
    **kwargs,
) -> MirrorReport:
    """Report what :func:`mirror_tree` would do, without writing anything.

    Accepts the same keyword arguments as :func:`mirror_tree`.
    """
    return mirror_tree(source, destination, template, dry_run=True, **kwargs)
