"""Pattern-based exclusion for source tree enumeration.

Top-level directory names (``bin``, ``obj``) are handled by
:class:`~testmirror.walk.RootContext`.  This module adds the optional
gitignore-style layer: ``--exclude`` patterns, an ``--exclude-from``
file, and ``.gitignore`` files found while walking.  Pattern semantics
come from ``dulwich.ignore.IgnoreFilter``; matching is case-insensitive
like the rest of the enumeration.
"""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

from dulwich.ignore import IgnoreFilter


class ExcludeFilter:
    """Combines --exclude patterns, --exclude-from, and .gitignore files."""

    def __init__(
        self,
        *,
        patterns: Sequence[str] | None = None,
        exclude_from: str | None = None,
        gitignore: bool = False,
    ) -> None:
        lines: list[bytes] = [p.encode("utf-8") for p in patterns or ()]
        if exclude_from is not None:
            for raw in Path(exclude_from).read_bytes().splitlines():
                line = raw.strip()
                if line and not line.startswith(b"#"):
                    lines.append(line)
        self._base: IgnoreFilter | None = (
            IgnoreFilter(lines, ignorecase=True) if lines else None
        )
        self._gitignore = gitignore
        # rel_dir -> filter loaded from that directory's .gitignore, for the
        # walk currently in progress
        self._dir_filters: dict[str, IgnoreFilter | None] = {}

    @property
    def active(self) -> bool:
        """True if any filtering is configured."""
        return self._base is not None or self._gitignore

    def enter_directory(self, abs_dir: str, rel_dir: str) -> None:
        """Load ``.gitignore`` from *abs_dir* (once) when gitignore mode is on.

        Entering the root (*rel_dir* ``""``) starts a new walk and forgets
        the files loaded by the previous one.
        """
        if not self._gitignore:
            return
        if not rel_dir:
            self._dir_filters.clear()
        elif rel_dir in self._dir_filters:
            return
        gi = Path(abs_dir) / ".gitignore"
        self._dir_filters[rel_dir] = (
            IgnoreFilter.from_path(str(gi), ignorecase=True) if gi.is_file() else None
        )

    def is_excluded(self, rel_path: str, *, is_dir: bool = False) -> bool:
        """Check *rel_path* (``/``-separated, relative to the source root).

        Base patterns are consulted first, then every loaded
        ``.gitignore`` from the root down to the deepest ancestor, each
        against the path relative to its own directory.  The deepest
        file with a matching rule (including ``!pattern``) decides.
        """
        check = rel_path + "/" if is_dir else rel_path
        if self._base is not None and self._base.is_ignored(check) is True:
            return True
        if not self._gitignore:
            return False

        parts = rel_path.split("/")
        if not is_dir and parts[-1] == ".gitignore":
            return True

        verdict = False
        for depth in range(len(parts)):
            filt = self._dir_filters.get("/".join(parts[:depth]))
            if filt is None:
                continue
            sub = "/".join(parts[depth:])
            result = filt.is_ignored(sub + "/" if is_dir else sub)
            if result is not None:
                verdict = result
        return verdict
