"""Mirror a source tree's layout into a destination tree of stub files.

Planning (:func:`plan_mirror`) enumerates the source and maps every
included file to its renamed counterpart under the destination.
Execution (:func:`apply_plan`) creates missing directories and copies the
template to each counterpart that does not exist yet.  :func:`mirror_tree`
does both after checking its preconditions.
"""

from ._types import (
    ActionKind,
    MirrorAction,
    MirrorPlanEntry,
    MirrorReport,
    PlanKind,
    format_summary,
)
from ._plan import plan_mirror, validate_paths
from ._ops import apply_plan, mirror_tree, mirror_tree_dry_run

__all__ = [
    "ActionKind", "MirrorAction", "MirrorPlanEntry", "MirrorReport", "PlanKind",
    "format_summary",
    "plan_mirror", "validate_paths",
    "apply_plan", "mirror_tree", "mirror_tree_dry_run",
]
