"""Tests for plan_mirror, apply_plan, mirror_tree and mirror_tree_dry_run."""

import os

import pytest

from testmirror import (
    ActionKind,
    MirrorReport,
    PlanKind,
    apply_plan,
    format_summary,
    mirror_tree,
    mirror_tree_dry_run,
    plan_mirror,
)
from testmirror._exclude import ExcludeFilter
from testmirror.exceptions import (
    InvalidKindError,
    PathNotFoundError,
    UnexpectedFileAtDirectoryPathError,
    UnsupportedEntryKindError,
)
from testmirror.fs import EntryKind, LocalFileSystem
from testmirror.paths import relativize
from testmirror.walk import RootContext


SUB_B = os.path.join("sub", "B.Tests.cs")


# ---------------------------------------------------------------------------
# Scenarios
# ---------------------------------------------------------------------------

class TestMirrorTree:
    def test_basic_scenario(self, source_tree, dest, template, tree_snapshot):
        report = mirror_tree(source_tree, dest, template,
                             exclude_dirs=["bin"], extensions=[".cs"])
        assert tree_snapshot(dest) == {
            "A.Tests.cs": b"X",
            "sub": None,
            SUB_B: b"X",
        }
        assert not (dest / "bin").exists()
        assert report.created == ["A.Tests.cs", SUB_B]
        assert report.directories == ["sub"]
        assert report.skipped == []
        assert report.dry_run is False

    def test_default_options(self, source_tree, dest, template):
        report = mirror_tree(source_tree, dest, template)
        assert sorted(report.created) == ["A.Tests.cs", SUB_B]
        assert not (dest / "bin").exists()

    def test_rerun_preserves_edits(self, source_tree, dest, template):
        mirror_tree(source_tree, dest, template, exclude_dirs=["bin"])
        (dest / "A.Tests.cs").write_bytes(b"Y")

        report = mirror_tree(source_tree, dest, template, exclude_dirs=["bin"])

        assert (dest / "A.Tests.cs").read_bytes() == b"Y"
        assert report.created == []
        assert report.skipped == ["A.Tests.cs", SUB_B]
        assert report.in_sync

    def test_idempotent(self, source_tree, dest, template, tree_snapshot):
        mirror_tree(source_tree, dest, template)
        first = tree_snapshot(dest)
        report = mirror_tree(source_tree, dest, template)
        assert tree_snapshot(dest) == first
        assert report.total == 0

    def test_destination_inside_source(self, source_tree, template, tree_snapshot):
        target = source_tree / "tests"
        mirror_tree(source_tree, target, template)
        first = tree_snapshot(source_tree)

        report = mirror_tree(source_tree, target, template)

        assert tree_snapshot(source_tree) == first
        assert report.total == 0
        assert sorted(os.listdir(target)) == ["A.Tests.cs", "sub"]

    def test_destination_nested_in_source(self, memory_fs):
        memory_fs.add("/proj/A.cs")
        memory_fs.add("/proj/Test/Unit/Old.cs")
        memory_fs.add("/T.cs", data=b"X")

        mirror_tree("/proj", "/proj/test/unit", "/T.cs", fs=memory_fs)
        report = mirror_tree("/proj", "/proj/test/unit", "/T.cs", fs=memory_fs)

        assert report.created == []
        assert report.skipped == ["A.Tests.cs"]
        assert not memory_fs.exists("/proj/test/unit/Test")

    def test_shared_gitignore_filter(self, tmp_path, template):
        first = tmp_path / "a"
        first.mkdir()
        (first / ".gitignore").write_text("X.cs\n")
        (first / "X.cs").write_text("")
        second = tmp_path / "b"
        second.mkdir()
        (second / "X.cs").write_text("")
        shared = ExcludeFilter(gitignore=True)

        report_a = mirror_tree(first, tmp_path / "out_a", template, exclude=shared)
        report_b = mirror_tree(second, tmp_path / "out_b", template, exclude=shared)

        assert report_a.created == []
        assert report_b.created == ["X.Tests.cs"]

    def test_fills_gaps_only(self, source_tree, dest, template):
        mirror_tree(source_tree, dest, template)
        (dest / "sub" / "Extra.cs").write_text("user file")
        os.remove(dest / "A.Tests.cs")

        report = mirror_tree(source_tree, dest, template)

        assert report.created == ["A.Tests.cs"]
        assert report.skipped == [SUB_B]
        assert (dest / "sub" / "Extra.cs").read_text() == "user file"

    def test_existing_file_untouched_regardless_of_content(self, source_tree, dest, template):
        (dest / "A.Tests.cs").write_bytes(b"")
        mirror_tree(source_tree, dest, template)
        assert (dest / "A.Tests.cs").read_bytes() == b""

    def test_custom_suffix_and_extensions(self, tmp_path, dest):
        src = tmp_path / "pkg"
        (src / "core").mkdir(parents=True)
        (src / "core" / "util.py").write_text("")
        (src / "Readme.md").write_text("")
        tmpl = tmp_path / "stub.py"
        tmpl.write_text("import pytest\n")

        report = mirror_tree(src, dest, tmpl, extensions=["py"], suffix="_test")

        assert report.created == [os.path.join("core", "util_test.py")]
        assert (dest / "core" / "util_test.py").read_text() == "import pytest\n"

    def test_creates_destination(self, source_tree, tmp_path, template):
        target = tmp_path / "new" / "tests"
        report = mirror_tree(source_tree, target, template)
        assert (target / "A.Tests.cs").read_bytes() == b"X"
        assert report.directories == ["sub"]

    def test_nested_directories_reported(self, tmp_path, dest, template):
        src = tmp_path / "src"
        (src / "a" / "b").mkdir(parents=True)
        (src / "a" / "b" / "C.cs").write_text("")
        report = mirror_tree(src, dest, template)
        assert report.directories == ["a", os.path.join("a", "b")]

    def test_progress_callback(self, source_tree, dest, template):
        seen = []
        mirror_tree(source_tree, dest, template,
                    on_item=lambda action, rel: seen.append((action, rel)))
        assert seen == [
            (ActionKind.CREATE, "A.Tests.cs"),
            (ActionKind.MKDIR, "sub"),
            (ActionKind.CREATE, SUB_B),
        ]


class TestMirrorDirectories:
    @pytest.fixture
    def src(self, tmp_path):
        root = tmp_path / "src"
        (root / "empty").mkdir(parents=True)
        (root / "docs").mkdir()
        (root / "docs" / "readme.md").write_text("")
        (root / "A.cs").write_text("")
        return root

    def test_off_by_default(self, src, dest, template):
        mirror_tree(src, dest, template)
        assert sorted(os.listdir(dest)) == ["A.Tests.cs"]

    def test_on(self, src, dest, template):
        report = mirror_tree(src, dest, template, mirror_directories=True)
        assert (dest / "empty").is_dir()
        assert (dest / "docs").is_dir()
        assert not (dest / "docs" / "readme.md").exists()
        assert report.directories == ["docs", "empty"]


# ---------------------------------------------------------------------------
# Dry run
# ---------------------------------------------------------------------------

class TestDryRun:
    def test_no_writes(self, source_tree, tmp_path, template):
        target = tmp_path / "out"
        report = mirror_tree_dry_run(source_tree, target, template)
        assert not target.exists()
        assert report.dry_run is True
        assert report.created == ["A.Tests.cs", SUB_B]
        assert report.directories == ["sub"]

    def test_reports_existing(self, source_tree, dest, template, tree_snapshot):
        mirror_tree(source_tree, dest, template)
        os.remove(dest / "A.Tests.cs")
        before = tree_snapshot(dest)

        report = mirror_tree(source_tree, dest, template, dry_run=True)

        assert tree_snapshot(dest) == before
        assert report.created == ["A.Tests.cs"]
        assert report.skipped == [SUB_B]

    def test_blocking_file_detected(self, source_tree, dest, template):
        (dest / "sub").write_text("in the way")
        with pytest.raises(UnexpectedFileAtDirectoryPathError):
            mirror_tree_dry_run(source_tree, dest, template)


# ---------------------------------------------------------------------------
# Preconditions
# ---------------------------------------------------------------------------

class TestPreconditions:
    def test_missing_source(self, tmp_path, dest, template):
        with pytest.raises(PathNotFoundError) as exc_info:
            mirror_tree(tmp_path / "nope", dest, template)
        assert exc_info.value.paths == (str(tmp_path / "nope"),)

    def test_source_is_file(self, dest, template):
        with pytest.raises(InvalidKindError) as exc_info:
            mirror_tree(template, dest, template)
        assert exc_info.value.expected == "directory"
        assert exc_info.value.actual == "file"

    def test_missing_template_writes_nothing(self, source_tree, tmp_path):
        target = tmp_path / "out"
        with pytest.raises(PathNotFoundError):
            mirror_tree(source_tree, target, tmp_path / "missing.cs")
        assert not target.exists()

    def test_template_is_directory(self, source_tree, dest, tmp_path):
        with pytest.raises(InvalidKindError) as exc_info:
            mirror_tree(source_tree, dest, tmp_path)
        assert exc_info.value.expected == "file"
        assert os.listdir(dest) == []

    def test_destination_is_file(self, source_tree, template, tmp_path):
        target = tmp_path / "out"
        target.write_text("x")
        with pytest.raises(InvalidKindError):
            mirror_tree(source_tree, target, template)
        assert target.read_text() == "x"

    def test_destination_required(self, source_tree, template, tmp_path):
        target = tmp_path / "out"
        with pytest.raises(PathNotFoundError):
            mirror_tree(source_tree, target, template, create_destination=False)
        assert not target.exists()

    def test_destination_required_and_present(self, source_tree, dest, template):
        report = mirror_tree(source_tree, dest, template, create_destination=False)
        assert len(report.created) == 2

    def test_empty_extensions(self, source_tree, dest, template):
        with pytest.raises(ValueError):
            mirror_tree(source_tree, dest, template, extensions=[])


# ---------------------------------------------------------------------------
# Failures during processing
# ---------------------------------------------------------------------------

class TestProcessingErrors:
    def test_directory_at_file_target(self, source_tree, dest, template):
        (dest / "A.Tests.cs").mkdir()
        with pytest.raises(InvalidKindError) as exc_info:
            mirror_tree(source_tree, dest, template)
        assert exc_info.value.actual == "directory"

    def test_file_blocks_directory(self, source_tree, dest, template):
        (dest / "sub").write_text("in the way")
        with pytest.raises(UnexpectedFileAtDirectoryPathError):
            mirror_tree(source_tree, dest, template)
        assert (dest / "sub").read_text() == "in the way"

    def test_unsupported_kind_aborts_before_any_copy(self, memory_fs):
        memory_fs.add("/src/A.cs")
        memory_fs.add("/src/pipe.cs", EntryKind.OTHER)
        memory_fs.add("/src/z/B.cs")
        memory_fs.add("/t.cs", data=b"X")

        with pytest.raises(UnsupportedEntryKindError) as exc_info:
            mirror_tree("/src", "/dest", "/t.cs", fs=memory_fs)

        assert exc_info.value.kind == "other"
        assert exc_info.value.paths[0] == "/src/pipe.cs"
        assert memory_fs.copies == []
        assert not memory_fs.exists("/dest")

    def test_local_symlink_aborts(self, source_tree, tmp_path, template):
        try:
            os.symlink(source_tree / "A.cs", source_tree / "sub" / "Link.cs")
        except (OSError, NotImplementedError):
            pytest.skip("symlinks not supported")
        target = tmp_path / "out"
        with pytest.raises(UnsupportedEntryKindError) as exc_info:
            mirror_tree(source_tree, target, template)
        assert exc_info.value.kind == "symlink"
        assert not target.exists()

    def test_non_file_at_target_left_alone(self, memory_fs):
        memory_fs.add("/src/A.cs")
        memory_fs.add("/dest/A.Tests.cs", EntryKind.SYMLINK)
        memory_fs.add("/t.cs", data=b"X")

        report = mirror_tree("/src", "/dest", "/t.cs", fs=memory_fs)

        assert report.skipped == ["A.Tests.cs"]
        assert memory_fs.kind("/dest/A.Tests.cs") is EntryKind.SYMLINK
        assert memory_fs.copies == []

    def test_copy_race_counts_as_skip(self, memory_fs):
        memory_fs.add("/src/A.cs")
        memory_fs.add("/t.cs", data=b"X")

        def racing_copy(src, dest):
            raise FileExistsError(dest)

        memory_fs.copy_file = racing_copy
        report = mirror_tree("/src", "/dest", "/t.cs", fs=memory_fs)
        assert report.created == []
        assert report.skipped == ["A.Tests.cs"]

    def test_memory_fs_scenario(self, memory_fs):
        memory_fs.add("/proj/A.cs")
        memory_fs.add("/proj/sub/B.cs")
        memory_fs.add("/proj/bin/Ignore.cs")
        memory_fs.add("/T.cs", data=b"X")

        mirror_tree("/proj", "/dest", "/T.cs", fs=memory_fs)

        assert memory_fs.read("/dest/A.Tests.cs") == b"X"
        assert memory_fs.read("/dest/sub/B.Tests.cs") == b"X"
        assert not memory_fs.exists("/dest/bin")


# ---------------------------------------------------------------------------
# Plan and apply
# ---------------------------------------------------------------------------

class TestPlan:
    def test_plan_entries(self, source_tree, dest):
        ctx = RootContext.create(source_tree, exclude_dirs=["bin"])
        plan = plan_mirror(LocalFileSystem(), ctx, dest)
        assert [(e.kind, relativize(dest, e.destination)) for e in plan] == [
            (PlanKind.MATERIALIZE_FILE, "A.Tests.cs"),
            (PlanKind.MATERIALIZE_FILE, SUB_B),
        ]
        assert plan[0].source == str(source_tree / "A.cs")

    def test_destinations_under_root(self, source_tree, dest):
        ctx = RootContext.create(source_tree)
        plan = plan_mirror(LocalFileSystem(), ctx, dest, mirror_directories=True)
        assert plan
        for entry in plan:
            assert entry.destination.startswith(str(dest) + os.sep)

    def test_directory_entries(self, source_tree, dest):
        ctx = RootContext.create(source_tree)
        plan = plan_mirror(LocalFileSystem(), ctx, dest, mirror_directories=True)
        dirs = [e for e in plan if e.kind is PlanKind.ENSURE_DIRECTORY]
        assert [relativize(dest, e.destination) for e in dirs] == ["sub"]

    def test_plan_writes_nothing(self, source_tree, tmp_path):
        target = tmp_path / "out"
        plan_mirror(LocalFileSystem(), RootContext.create(source_tree), target)
        assert not target.exists()

    def test_apply_plan(self, source_tree, tmp_path, template):
        fs = LocalFileSystem()
        target = tmp_path / "out"
        plan = plan_mirror(fs, RootContext.create(source_tree), target, suffix="Tests")
        report = apply_plan(fs, plan, template, target)
        assert (target / "ATests.cs").read_bytes() == b"X"
        assert report.created == ["ATests.cs", os.path.join("sub", "BTests.cs")]


# ---------------------------------------------------------------------------
# Report
# ---------------------------------------------------------------------------

class TestReport:
    def test_actions_sorted(self):
        report = MirrorReport(created=["b.cs", "a/x.cs"], skipped=["c.cs"], directories=["a"])
        assert [(a.path, a.action) for a in report.actions()] == [
            ("a", ActionKind.MKDIR),
            ("a/x.cs", ActionKind.CREATE),
            ("b.cs", ActionKind.CREATE),
            ("c.cs", ActionKind.SKIP),
        ]
        assert report.total == 3
        assert not report.in_sync

    def test_summary(self):
        assert format_summary(MirrorReport()) == "Nothing to mirror"
        report = MirrorReport(created=["a", "b"], directories=["d"], skipped=["s"])
        assert format_summary(report) == "+2 files, +1 dir, 1 existing"
        report = MirrorReport(created=["a"], dry_run=True)
        assert format_summary(report) == "Would mirror: +1 file"
