"""Cleanup and relocation of coverage artifacts."""

import logging
import shutil
from collections.abc import Sequence
from fnmatch import fnmatchcase
from pathlib import Path

from dotnet_coverage.config import COVERAGE_FILENAME, RESULTS_FOLDER
from dotnet_coverage.errors import MissingPathError

log = logging.getLogger(__name__)


def clean_coverage(
    project_folder: Path,
    *,
    dry_run: bool = False,
    results_folder: str = RESULTS_FOLDER,
) -> bool:
    """Delete the results folder left over from a previous run.

    Args:
        project_folder: Folder containing the test project
        dry_run: Report the deletion without performing it
        results_folder: Name of the folder to delete

    Returns:
        True if a folder was removed (or would have been, in a dry run)

    Raises:
        MissingPathError: If the project folder does not exist

    """
    if not project_folder.is_dir():
        raise MissingPathError("Project folder", project_folder)

    target = project_folder / results_folder
    if not target.is_dir():
        log.debug("Nothing to clean in %s", project_folder)
        return False

    if dry_run:
        log.info("Would remove %s (dry run)", target)
        return True

    log.info("Removing %s", target)
    shutil.rmtree(target)
    return True


def find_coverage_files(
    project_folder: Path,
    coverage_filename: str = COVERAGE_FILENAME,
    *,
    results_folder: str = RESULTS_FOLDER,
) -> Sequence[Path]:
    """Find coverage files at any depth below the results folder."""
    search_root = project_folder / results_folder
    if not search_root.is_dir():
        return []

    pattern = coverage_filename.lower()
    return sorted(
        path
        for path in search_root.rglob("*")
        if path.is_file() and fnmatchcase(path.name.lower(), pattern)
    )


def copy_coverage(
    project_folder: Path,
    coverage_filename: str = COVERAGE_FILENAME,
    *,
    results_folder: str = RESULTS_FOLDER,
) -> Sequence[Path]:
    """Copy coverage files from the results folder to the project folder.

    The test runner writes coverage below a per-run GUID directory; copying it
    to the project folder gives the report generator a predictable input.
    Existing copies are overwritten.

    Returns:
        Destination paths that were written (empty if nothing matched)

    Raises:
        MissingPathError: If the project folder does not exist

    """
    if not project_folder.is_dir():
        raise MissingPathError("Project folder", project_folder)

    sources = find_coverage_files(
        project_folder, coverage_filename, results_folder=results_folder
    )
    if not sources:
        log.info(
            "No coverage file matching %s in %s", coverage_filename, project_folder
        )
        return []

    copied: list[Path] = []
    for source in sources:
        destination = project_folder / source.name
        if destination.exists():
            log.info("Overwriting %s with %s", destination, source)
        else:
            log.info("Copying %s to %s", source, destination)
        shutil.copyfile(source, destination)
        copied.append(destination)
    return copied
