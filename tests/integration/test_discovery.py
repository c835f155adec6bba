"""Integration tests for project discovery on a real directory tree."""

from collections.abc import Sequence
from pathlib import Path

import pytest

from dotnet_coverage.discovery import discover_projects, is_ignored, normalize_pattern
from dotnet_coverage.errors import MissingPathError
from dotnet_coverage.models.project import TestProject
from dotnet_coverage.selection import SubsetSelector

from .conftest import CreateProjectFn


class RecordingSelector(SubsetSelector):
    """Selector returning a fixed slice of the candidates."""

    def __init__(self, keep: slice) -> None:
        self.keep = keep
        self.seen: list[TestProject] = []

    def select(self, candidates: Sequence[TestProject]) -> Sequence[TestProject]:
        self.seen = list(candidates)
        return list(candidates)[self.keep]


class TestDiscoverProjects:
    """Tests for discover_projects."""

    def test_excludes_projects_in_ignored_folders(
        self, tmp_path: Path, create_project: CreateProjectFn
    ) -> None:
        """Skips projects below bin and obj."""
        included = create_project("foo/src/X.Test.csproj")
        create_project("foo/bin/X.Test.csproj")
        create_project("foo/obj/Debug/X.Test.csproj")

        result = discover_projects(tmp_path, ".Test.csproj", "bin,obj")

        assert [p.path for p in result] == [included]

    def test_default_filters(
        self, tmp_path: Path, create_project: CreateProjectFn
    ) -> None:
        """Finds A.Test.csproj and ignores the duplicate in bin."""
        expected = create_project("A/A.Test.csproj")
        create_project("A/bin/Dup.Test.csproj")

        result = discover_projects(tmp_path)

        assert [p.path for p in result] == [expected]

    def test_matches_case_insensitively(
        self, tmp_path: Path, create_project: CreateProjectFn
    ) -> None:
        """Matches file names regardless of case."""
        create_project("lib/lib.test.CSPROJ")

        result = discover_projects(tmp_path, "*.Test.csproj")

        assert [p.name for p in result] == ["lib.test"]

    def test_ignores_non_matching_files(
        self, tmp_path: Path, create_project: CreateProjectFn
    ) -> None:
        """Skips production projects and unrelated files."""
        create_project("src/Lib/Lib.csproj")
        create_project("src/Lib/Lib.Test.cs")
        test_project = create_project("test/Lib.Test/Lib.Test.csproj")

        result = discover_projects(tmp_path)

        assert [p.path for p in result] == [test_project]

    def test_returns_projects_sorted_by_path(
        self, tmp_path: Path, create_project: CreateProjectFn
    ) -> None:
        """Returns projects in path order."""
        zebra = create_project("zebra/Zebra.Test.csproj")
        apple = create_project("apple/Apple.Test.csproj")
        mango = create_project("mango/Mango.Test.csproj")

        result = discover_projects(tmp_path)

        assert [p.path for p in result] == [apple, mango, zebra]

    def test_excludes_project_named_like_ignore_token(
        self, tmp_path: Path, create_project: CreateProjectFn
    ) -> None:
        """Excludes a candidate whose own name equals an ignore token."""
        create_project("src/Skip.Test.csproj")
        kept = create_project("src/Keep.Test.csproj")

        result = discover_projects(tmp_path, "*.Test.csproj", "Skip.Test.csproj")

        assert [p.path for p in result] == [kept]

    def test_blank_ignore_list_uses_defaults(
        self, tmp_path: Path, create_project: CreateProjectFn
    ) -> None:
        """Falls back to bin,obj when the ignore list is blank."""
        create_project("bin/X.Test.csproj")
        kept = create_project("src/X.Test.csproj")

        result = discover_projects(tmp_path, folders_to_ignore=" , ")

        assert [p.path for p in result] == [kept]

    def test_ignored_folder_above_root_does_not_exclude(
        self, tmp_path: Path, create_project: CreateProjectFn
    ) -> None:
        """Only segments below the root are checked."""
        project = create_project("bin/repo/X.Test.csproj")

        result = discover_projects(tmp_path / "bin" / "repo")

        assert [p.path for p in result] == [project]

    def test_interactive_reduces_to_selection(
        self, tmp_path: Path, create_project: CreateProjectFn
    ) -> None:
        """Keeps only the projects chosen by the selector."""
        first = create_project("a/A.Test.csproj")
        create_project("b/B.Test.csproj")
        selector = RecordingSelector(slice(0, 1))

        result = discover_projects(tmp_path, interactive=True, selector=selector)

        assert [p.path for p in result] == [first]
        assert len(selector.seen) == 2

    def test_interactive_cancel_returns_empty(
        self, tmp_path: Path, create_project: CreateProjectFn
    ) -> None:
        """Returns nothing when the selection is empty."""
        create_project("a/A.Test.csproj")

        result = discover_projects(
            tmp_path, interactive=True, selector=RecordingSelector(slice(0, 0))
        )

        assert result == []

    def test_selector_unused_when_not_interactive(
        self, tmp_path: Path, create_project: CreateProjectFn
    ) -> None:
        """Does not consult the selector for non-interactive runs."""
        create_project("a/A.Test.csproj")
        selector = RecordingSelector(slice(0, 0))

        result = discover_projects(tmp_path, selector=selector)

        assert len(result) == 1
        assert selector.seen == []

    def test_raises_for_missing_root(self, tmp_path: Path) -> None:
        """Raises MissingPathError when the root does not exist."""
        with pytest.raises(MissingPathError):
            discover_projects(tmp_path / "missing")


@pytest.mark.parametrize(
    ("project_filter", "expected"),
    [
        (".Test.csproj", "*.test.csproj"),
        ("*.Tests.csproj", "*.tests.csproj"),
        ("Lib?.csproj", "lib?.csproj"),
        ("", "*.test.csproj"),
    ],
)
def test_normalize_pattern(project_filter: str, expected: str) -> None:
    """Lower-cases filters and turns plain suffixes into globs."""
    assert normalize_pattern(project_filter) == expected


def test_is_ignored_checks_relative_segments() -> None:
    """Checks every segment below the root, case-insensitively."""
    root = Path("/repo")

    assert is_ignored(Path("/repo/foo/BIN/X.Test.csproj"), root, {"bin"})
    assert not is_ignored(Path("/repo/foo/src/X.Test.csproj"), root, {"bin"})
