"""Generation of the human-readable coverage report."""

import logging
from collections.abc import Sequence
from pathlib import Path

from dotnet_coverage.config import (
    COVERAGE_FILENAME,
    REPORT_FOLDER,
    default_report_generator_path,
)
from dotnet_coverage.errors import ChildProcessFailureError, MissingPathError
from dotnet_coverage.process import ProcessRunner

log = logging.getLogger(__name__)


def build_report_arguments(
    report_generator_path: Path,
    project_folder: Path,
    project_name: str,
    assembly: str,
    *,
    coverage_filename: str = COVERAGE_FILENAME,
    report_folder: str = REPORT_FOLDER,
) -> Sequence[str]:
    """Assemble the ReportGenerator command line.

    The assembly filter uses ReportGenerator's ``+`` inclusion prefix so only
    the assembly under test shows up in the report.
    """
    return [
        str(report_generator_path),
        f"-reports:{project_folder / coverage_filename}",
        f"-targetdir:{project_folder / report_folder}",
        f"-title:{project_name}",
        f"-assemblyFilters:+{assembly}",
    ]


async def generate_report(
    runner: ProcessRunner,
    project_folder: Path,
    project_name: str,
    assembly: str,
    *,
    coverage_filename: str | None = None,
    report_generator_path: Path | None = None,
    report_folder: str = REPORT_FOLDER,
) -> int:
    """Run ReportGenerator for one project.

    Args:
        runner: Runner used to start the report generator
        project_folder: Folder holding the relocated coverage file
        project_name: Title of the report
        assembly: Assembly under test, used as inclusion filter
        coverage_filename: Coverage file name (default: coverage.opencover.xml)
        report_generator_path: Executable (default: per-user tool install)
        report_folder: Output folder name below the project folder

    Returns:
        The report generator's exit code, always 0

    Raises:
        MissingPathError: If the project folder does not exist
        ChildProcessFailureError: If the generator fails or cannot start

    """
    if not project_folder.is_dir():
        raise MissingPathError("Project folder", project_folder)

    executable = report_generator_path or default_report_generator_path()
    args = build_report_arguments(
        executable,
        project_folder,
        project_name,
        assembly,
        coverage_filename=coverage_filename or COVERAGE_FILENAME,
        report_folder=report_folder,
    )

    log.info("Generating coverage report for %s", project_name)
    result = await runner.run(args, cwd=project_folder)

    if not result.succeeded:
        raise ChildProcessFailureError(args, result.returncode)

    log.info("Coverage report written to %s", project_folder / report_folder)
    return result.returncode
