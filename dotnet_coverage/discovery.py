"""Discover test projects in a directory tree."""

import logging
from collections.abc import Iterable, Sequence
from fnmatch import fnmatchcase
from pathlib import Path

from dotnet_coverage.config import (
    DEFAULT_FOLDERS_TO_IGNORE,
    DEFAULT_PROJECT_NAME_FILTER,
    split_folders,
)
from dotnet_coverage.errors import MissingPathError
from dotnet_coverage.models.project import TestProject
from dotnet_coverage.selection import PassThroughSelector, SubsetSelector

log = logging.getLogger(__name__)


def discover_projects(
    root: Path,
    project_name_filter: str = DEFAULT_PROJECT_NAME_FILTER,
    folders_to_ignore: str = DEFAULT_FOLDERS_TO_IGNORE,
    *,
    interactive: bool = False,
    selector: SubsetSelector | None = None,
) -> Sequence[TestProject]:
    """Find test project files under a root directory.

    Args:
        root: Directory to search recursively
        project_name_filter: Case-insensitive glob for the file name; a
            filter without wildcards matches as a suffix
        folders_to_ignore: Comma-separated directory names to skip
        interactive: Let the selector reduce the candidates
        selector: Selector used when interactive (default: select all)

    Returns:
        Matching projects sorted by path

    Raises:
        MissingPathError: If the root directory does not exist

    """
    if not root.is_dir():
        raise MissingPathError("Root directory", root)

    pattern = normalize_pattern(project_name_filter)
    ignored = {f.lower() for f in split_folders(folders_to_ignore)}
    if not ignored:
        ignored = {f.lower() for f in split_folders(DEFAULT_FOLDERS_TO_IGNORE)}

    candidates = sorted(
        (
            TestProject(path=path)
            for path in _iter_files(root)
            if fnmatchcase(path.name.lower(), pattern)
            and not is_ignored(path, root, ignored)
        ),
        key=lambda project: project.path,
    )
    log.info("Discovered %d test project(s) under %s", len(candidates), root)
    for project in candidates:
        log.debug("Found project: %s", project.path)

    if not interactive:
        return candidates

    selected = (selector or PassThroughSelector()).select(candidates)
    log.info("Selected %d of %d project(s)", len(selected), len(candidates))
    return selected


def normalize_pattern(project_name_filter: str) -> str:
    """Lower-case the filter and turn a plain suffix into a glob."""
    pattern = project_name_filter.strip().lower() or DEFAULT_PROJECT_NAME_FILTER.lower()
    if not any(char in pattern for char in "*?["):
        pattern = f"*{pattern}"
    return pattern


def is_ignored(path: Path, root: Path, ignored: Iterable[str]) -> bool:
    """Check whether any path segment below root is an ignored folder name."""
    ignored = set(ignored)
    return any(part.lower() in ignored for part in path.relative_to(root).parts)


def _iter_files(root: Path) -> Iterable[Path]:
    return (path for path in root.rglob("*") if path.is_file())
