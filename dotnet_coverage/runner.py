"""Invocation of the external test runner."""

import logging
from collections.abc import Sequence
from pathlib import Path

from dotnet_coverage.config import RESULTS_FILENAME, TEST_COMMAND
from dotnet_coverage.errors import MissingPathError
from dotnet_coverage.process import ProcessRunner

log = logging.getLogger(__name__)

COVERAGE_COLLECTOR = "XPlat Code Coverage"
COVERAGE_FORMAT_SETTING = (
    "DataCollectionRunSettings.DataCollector.Configuration.Format=opencover"
)


def build_test_arguments(
    project_path: Path,
    *,
    test_filter: str = "",
    configuration: str = "",
    collect_coverage: bool = False,
    list_tests: bool = False,
    test_command: Sequence[str] = TEST_COMMAND,
    results_filename: str = RESULTS_FILENAME,
) -> Sequence[str]:
    """Assemble the test runner command line.

    Order: command, project path, trx logger, list-only flag, build
    configuration, name filter, then the coverage collector and its run
    settings after the ``--`` separator.
    """
    args = [
        *test_command,
        str(project_path),
        "--logger",
        f"trx;LogFileName={results_filename}",
    ]
    if list_tests:
        args.append("--list-tests")
    if configuration:
        args.extend(["--configuration", configuration])
    if test_filter:
        args.extend(["--filter", f"FullyQualifiedName~{test_filter}"])
    if collect_coverage:
        args.extend(["--collect", COVERAGE_COLLECTOR, "--", COVERAGE_FORMAT_SETTING])
    return args


async def run_test_command(
    runner: ProcessRunner,
    project_path: Path,
    *,
    test_filter: str = "",
    configuration: str = "",
    collect_coverage: bool = False,
    list_tests: bool = False,
    test_command: Sequence[str] = TEST_COMMAND,
    results_filename: str = RESULTS_FILENAME,
) -> int:
    """Run the tests of one project and return the runner's exit code.

    A non-zero exit code is logged, not raised: failing tests still leave
    results and coverage behind for the later steps.

    Raises:
        MissingPathError: If the project file does not exist
        ChildProcessFailureError: If the test runner cannot be started

    """
    if not project_path.is_file():
        raise MissingPathError("Project file", project_path)

    project_path = project_path.resolve()
    args = build_test_arguments(
        project_path,
        test_filter=test_filter,
        configuration=configuration,
        collect_coverage=collect_coverage,
        list_tests=list_tests,
        test_command=test_command,
        results_filename=results_filename,
    )
    log.info("Running tests for %s", project_path.name)
    result = await runner.run(args, cwd=project_path.parent)

    if not result.succeeded:
        log.warning(
            "Test runner exited with code %d for %s",
            result.returncode,
            project_path.name,
        )
    return result.returncode
