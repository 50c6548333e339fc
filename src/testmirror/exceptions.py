"""Exceptions for testmirror.

Every failure of a mirror run is one of a closed set of kinds.  Each kind
is a :class:`MirrorError` subclass that pins a stable numeric
:class:`ErrorCode` and a message template, and keeps the offending
path(s) as structured context.
"""

from __future__ import annotations

from enum import IntEnum


class ErrorCode(IntEnum):
    """Stable numeric codes for :class:`MirrorError` kinds."""
    PATH_NOT_FOUND = 1
    INVALID_KIND = 2
    BASE_PATH_NOT_CONTAINED = 3
    UNEXPECTED_FILE_AT_DIRECTORY_PATH = 4
    UNSUPPORTED_ENTRY_KIND = 5


class MirrorError(Exception):
    """Base class for all mirror-run failures.

    Attributes:
        code: :class:`ErrorCode` of this kind.
        paths: The offending path(s), in the order they were passed.
    """

    code: ErrorCode
    template: str

    def __init__(self, *paths: str, **context: str) -> None:
        self.paths = paths
        self.context = context
        super().__init__(self.template.format(*paths, **context))

    @property
    def message(self) -> str:
        return str(self)


class PathNotFoundError(MirrorError):
    """A required source root, destination, or template path is missing."""
    code = ErrorCode.PATH_NOT_FOUND
    template = "Path not found: {0}"


class InvalidKindError(MirrorError):
    """A path exists but is the wrong kind (file vs. directory)."""
    code = ErrorCode.INVALID_KIND
    template = "Expected a {expected} at {0}, found a {actual}"

    def __init__(self, path: str, *, expected: str, actual: str) -> None:
        super().__init__(path, expected=expected, actual=actual)

    @property
    def expected(self) -> str:
        return self.context["expected"]

    @property
    def actual(self) -> str:
        return self.context["actual"]


class BasePathNotContainedError(MirrorError):
    """An item's path is not rooted under the base it is relativized to."""
    code = ErrorCode.BASE_PATH_NOT_CONTAINED
    template = "Path {1} is not contained in base path {0}"

    def __init__(self, base: str, item: str) -> None:
        super().__init__(base, item)

    @property
    def base(self) -> str:
        return self.paths[0]

    @property
    def item(self) -> str:
        return self.paths[1]


class UnexpectedFileAtDirectoryPathError(MirrorError):
    """A non-directory occupies a path that must be a directory."""
    code = ErrorCode.UNEXPECTED_FILE_AT_DIRECTORY_PATH
    template = "Cannot create directory {0}: a non-directory exists at {1}"

    def __init__(self, path: str, blocker: str | None = None) -> None:
        super().__init__(path, blocker if blocker is not None else path)

    @property
    def blocker(self) -> str:
        return self.paths[1]


class UnsupportedEntryKindError(MirrorError):
    """An enumerated entry is neither a directory nor a regular file."""
    code = ErrorCode.UNSUPPORTED_ENTRY_KIND
    template = "Unsupported entry kind '{kind}' at {0}"

    def __init__(self, path: str, kind: str) -> None:
        super().__init__(path, kind=str(kind))

    @property
    def kind(self) -> str:
        return self.context["kind"]
