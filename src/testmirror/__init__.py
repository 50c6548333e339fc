from .exceptions import (
    BasePathNotContainedError,
    ErrorCode,
    InvalidKindError,
    MirrorError,
    PathNotFoundError,
    UnexpectedFileAtDirectoryPathError,
    UnsupportedEntryKindError,
)
from .fs import EntryKind, FileSystem, FileSystemEntry, LocalFileSystem
from .paths import DEFAULT_SUFFIX, ensure_directory, normalize_extensions, relativize, transform_name
from .walk import DEFAULT_EXCLUDE_DIRS, DEFAULT_EXTENSIONS, RootContext, enumerate_tree
from ._exclude import ExcludeFilter
from .mirror import (
    ActionKind,
    MirrorAction,
    MirrorPlanEntry,
    MirrorReport,
    PlanKind,
    apply_plan,
    format_summary,
    mirror_tree,
    mirror_tree_dry_run,
    plan_mirror,
)

__all__ = [
    "ErrorCode", "MirrorError", "PathNotFoundError", "InvalidKindError",
    "BasePathNotContainedError", "UnexpectedFileAtDirectoryPathError",
    "UnsupportedEntryKindError",
    "EntryKind", "FileSystem", "FileSystemEntry", "LocalFileSystem",
    "DEFAULT_SUFFIX", "ensure_directory", "normalize_extensions", "relativize", "transform_name",
    "DEFAULT_EXCLUDE_DIRS", "DEFAULT_EXTENSIONS", "RootContext", "enumerate_tree",
    "ExcludeFilter",
    "ActionKind", "MirrorAction", "MirrorPlanEntry", "MirrorReport", "PlanKind",
    "apply_plan", "format_summary", "mirror_tree", "mirror_tree_dry_run", "plan_mirror",
]
