"""Shared fixtures for testmirror tests."""

import os

import pytest
from click.testing import CliRunner

from testmirror.fs import EntryKind, FileSystemEntry


class MemoryFileSystem:
    """In-memory FileSystem: absolute path -> (kind, data).

    Lets tests build trees containing entry kinds that are awkward to
    create on a real disk.  ``copies`` records every copy_file call.
    """

    def __init__(self):
        self.entries = {"/": (EntryKind.DIRECTORY, None)}
        self.copies = []

    def add(self, path, kind=EntryKind.FILE, data=b""):
        self.create_directory(os.path.dirname(path))
        self.entries[path] = (kind, data if kind is EntryKind.FILE else None)

    def read(self, path):
        return self.entries[path][1]

    def kind(self, path, *, follow_symlinks=False):
        entry = self.entries.get(path)
        return entry[0] if entry is not None else None

    def exists(self, path):
        return path in self.entries

    def list_children(self, path, recursive=False):
        names = sorted(
            p for p in self.entries
            if p != path and os.path.dirname(p) == path
        )
        for child in names:
            entry = FileSystemEntry.from_path(child, self.entries[child][0])
            yield entry
            if recursive and entry.is_dir:
                yield from self.list_children(child, recursive=True)

    def create_directory(self, path):
        missing = []
        while path not in self.entries:
            missing.append(path)
            path = os.path.dirname(path)
        for p in reversed(missing):
            self.entries[p] = (EntryKind.DIRECTORY, None)

    def copy_file(self, src, dest):
        if dest in self.entries:
            raise FileExistsError(dest)
        self.copies.append((src, dest))
        self.entries[dest] = (EntryKind.FILE, self.entries[src][1])


@pytest.fixture
def memory_fs():
    return MemoryFileSystem()


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def template(tmp_path):
    """A template file containing b"X"."""
    p = tmp_path / "T.cs"
    p.write_bytes(b"X")
    return p


@pytest.fixture
def source_tree(tmp_path):
    """Source tree: proj/{A.cs, sub/B.cs, bin/Ignore.cs}."""
    root = tmp_path / "proj"
    (root / "sub").mkdir(parents=True)
    (root / "bin").mkdir()
    (root / "A.cs").write_text("class A {}")
    (root / "sub" / "B.cs").write_text("class B {}")
    (root / "bin" / "Ignore.cs").write_text("class Ignore {}")
    return root


@pytest.fixture
def dest(tmp_path):
    """An empty destination directory."""
    p = tmp_path / "dest"
    p.mkdir()
    return p


def snapshot(root):
    """Return {relative_path: bytes or None for directories} under *root*."""
    result = {}
    for dirpath, dirnames, filenames in os.walk(root):
        for d in dirnames:
            full = os.path.join(dirpath, d)
            result[os.path.relpath(full, root)] = None
        for f in filenames:
            full = os.path.join(dirpath, f)
            with open(full, "rb") as fh:
                result[os.path.relpath(full, root)] = fh.read()
    return result


@pytest.fixture
def tree_snapshot():
    return snapshot
