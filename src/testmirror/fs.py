"""Filesystem capability used by the mirror engine.

The engine never touches ``os`` directly; it goes through an object
implementing :class:`FileSystem`.  :class:`LocalFileSystem` is the real
implementation.  Tests substitute an in-memory one.
"""

from __future__ import annotations

import os
import shutil
import stat
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Protocol


class EntryKind(str, Enum):
    """Kind of a filesystem entry.

    Only ``DIRECTORY`` and ``FILE`` are supported by the mirror engine;
    the other members exist so that enumeration can report what it saw.
    """
    DIRECTORY = "directory"
    FILE = "file"
    SYMLINK = "symlink"
    OTHER = "other"

    def __str__(self) -> str:          # noqa: D105
        return self.value

    @property
    def supported(self) -> bool:
        return self in (EntryKind.DIRECTORY, EntryKind.FILE)

    @classmethod
    def from_mode(cls, mode: int) -> EntryKind:
        """Convert an ``st_mode`` to an :class:`EntryKind`."""
        if stat.S_ISDIR(mode):
            return cls.DIRECTORY
        if stat.S_ISREG(mode):
            return cls.FILE
        if stat.S_ISLNK(mode):
            return cls.SYMLINK
        return cls.OTHER


@dataclass(frozen=True)
class FileSystemEntry:
    """A directory, file, or unsupported item found during enumeration.

    Attributes:
        path: Absolute path of the entry.
        kind: :class:`EntryKind` of the entry (symlinks are not followed).
        extension: File extension including the dot (``".cs"``); empty for
            anything that is not a file.
    """
    path: str
    kind: EntryKind
    extension: str = ""

    @classmethod
    def from_path(cls, path: str, kind: EntryKind) -> FileSystemEntry:
        ext = os.path.splitext(path)[1] if kind is EntryKind.FILE else ""
        return cls(path, kind, ext)

    @property
    def name(self) -> str:
        return os.path.basename(self.path)

    @property
    def is_dir(self) -> bool:
        return self.kind is EntryKind.DIRECTORY

    @property
    def is_file(self) -> bool:
        return self.kind is EntryKind.FILE


class FileSystem(Protocol):
    """The filesystem primitives the mirror engine relies on."""

    def kind(self, path: str, *, follow_symlinks: bool = False) -> EntryKind | None:
        """Return the kind of *path*, or ``None`` if nothing is there."""
        ...

    def exists(self, path: str) -> bool:
        """Return True if anything (of any kind) is at *path*."""
        ...

    def list_children(self, path: str, recursive: bool = False) -> Iterator[FileSystemEntry]:
        """Yield the entries under directory *path*, sorted by name."""
        ...

    def create_directory(self, path: str) -> None:
        """Create *path* and any missing parents; no error if it exists."""
        ...

    def copy_file(self, src: str, dest: str) -> None:
        """Copy *src* to *dest* byte for byte; raise ``FileExistsError`` if *dest* exists."""
        ...


class LocalFileSystem:
    """:class:`FileSystem` backed by the local disk."""

    def kind(self, path: str, *, follow_symlinks: bool = False) -> EntryKind | None:
        try:
            st = os.stat(path) if follow_symlinks else os.lstat(path)
        except (FileNotFoundError, NotADirectoryError):
            return None
        return EntryKind.from_mode(st.st_mode)

    def exists(self, path: str) -> bool:
        return self.kind(path) is not None

    def list_children(self, path: str, recursive: bool = False) -> Iterator[FileSystemEntry]:
        with os.scandir(path) as it:
            entries = sorted(it, key=lambda e: e.name)
        for de in entries:
            entry = FileSystemEntry.from_path(de.path, _scandir_kind(de))
            yield entry
            if recursive and entry.is_dir:
                yield from self.list_children(entry.path, recursive=True)

    def create_directory(self, path: str) -> None:
        os.makedirs(path, exist_ok=True)

    def copy_file(self, src: str, dest: str) -> None:
        # "x" mode: the existence check and the create are one atomic step.
        with open(src, "rb") as fsrc, open(dest, "xb") as fdst:
            shutil.copyfileobj(fsrc, fdst)


def _scandir_kind(de: os.DirEntry) -> EntryKind:
    if de.is_symlink():
        return EntryKind.SYMLINK
    if de.is_dir(follow_symlinks=False):
        return EntryKind.DIRECTORY
    if de.is_file(follow_symlinks=False):
        return EntryKind.FILE
    return EntryKind.OTHER
