"""Data structures for mirror plans and reports."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class PlanKind(str, Enum):
    """What a :class:`MirrorPlanEntry` asks for."""
    ENSURE_DIRECTORY = "ensure-directory"
    MATERIALIZE_FILE = "materialize-file-if-absent"

    def __str__(self) -> str:          # noqa: D105
        return self.value


@dataclass(frozen=True)
class MirrorPlanEntry:
    """One step of a mirror run.

    Attributes:
        source: Absolute path of the source item.
        destination: Absolute path it maps to under the destination root.
        kind: :class:`PlanKind` of the step.
    """
    source: str
    destination: str
    kind: PlanKind


class ActionKind(str, Enum):
    """Outcome of a plan step: ``MKDIR``, ``CREATE``, or ``SKIP``."""
    MKDIR = "mkdir"
    CREATE = "create"
    SKIP = "skip"

    def __str__(self) -> str:          # noqa: D105
        return self.value


@dataclass
class MirrorAction:
    """A single outcome in a :class:`MirrorReport`.

    Attributes:
        path: Path relative to the destination root.
        action: :class:`ActionKind` value.
    """
    path: str
    action: ActionKind


@dataclass
class MirrorReport:
    """Result of a mirror run (real or dry).

    Paths are relative to the destination root.

    Attributes:
        created: Files materialized from the template.
        skipped: Files left alone because something already existed there.
        directories: Directories created.
        dry_run: ``True`` if nothing was actually written.
    """
    created: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    directories: list[str] = field(default_factory=list)
    dry_run: bool = False

    @property
    def in_sync(self) -> bool:
        """``True`` if the run had nothing to create."""
        return not self.created and not self.directories

    @property
    def total(self) -> int:
        """Number of files and directories created."""
        return len(self.created) + len(self.directories)

    def actions(self) -> list[MirrorAction]:
        """Return all outcomes as a flat list sorted by path."""
        result = [MirrorAction(p, ActionKind.MKDIR) for p in self.directories]
        result += [MirrorAction(p, ActionKind.CREATE) for p in self.created]
        result += [MirrorAction(p, ActionKind.SKIP) for p in self.skipped]
        result.sort(key=lambda a: a.path)
        return result


def format_summary(report: MirrorReport) -> str:
    """One-line summary such as ``"+3 files, +1 dir, 2 existing"``."""
    if report.in_sync and not report.skipped:
        return "Nothing to mirror"
    parts = []
    if report.created:
        n = len(report.created)
        parts.append(f"+{n} file" + ("s" if n != 1 else ""))
    if report.directories:
        n = len(report.directories)
        parts.append(f"+{n} dir" + ("s" if n != 1 else ""))
    if report.skipped:
        parts.append(f"{len(report.skipped)} existing")
    prefix = "Would mirror: " if report.dry_run else ""
    return prefix + ", ".join(parts)
