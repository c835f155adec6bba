"""Pipeline coordinating the per-project test and coverage steps."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from dotnet_coverage.config import RunConfiguration, ToolDefaults
from dotnet_coverage.coverage import clean_coverage, copy_coverage
from dotnet_coverage.errors import (
    ChildProcessFailureError,
    CoverageRunnerError,
    exit_status,
)
from dotnet_coverage.models.project import TestProject
from dotnet_coverage.models.result import TestResultRecord
from dotnet_coverage.process import ProcessRunner
from dotnet_coverage.report import generate_report
from dotnet_coverage.results import log_results_table, read_test_results
from dotnet_coverage.runner import run_test_command

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class ProjectOutcome:
    """Result container for one project's pipeline run."""

    project: TestProject
    test_exit_code: int | None = None
    report_exit_code: int | None = None
    results: Sequence[TestResultRecord] = ()
    error: str | None = None
    error_exit_code: int | None = None

    @property
    def succeeded(self) -> bool:
        """Whether the pipeline reached its end without a hard failure."""
        return self.error is None

    @property
    def exit_code(self) -> int:
        """Exit status contributed by this project."""
        if self.error is None:
            return 0
        if self.error_exit_code == 0:
            return 1
        return exit_status(self.error_exit_code)


@dataclass(frozen=True, kw_only=True)
class TestPipeline:
    """Runs cleanup, tests, reporting and coverage steps for each project."""

    __test__ = False

    runner: ProcessRunner
    defaults: ToolDefaults = field(default_factory=ToolDefaults)

    async def run(
        self,
        projects: Sequence[TestProject],
        config: RunConfiguration,
    ) -> Sequence[ProjectOutcome]:
        """Run the pipeline for every project, one at a time.

        Args:
            projects: Projects to process, in order
            config: Options for this run

        Returns:
            One outcome per project, in the same order

        """
        if not projects:
            log.info("No test projects to run")
            return []

        log.info("Running pipeline for %d project(s)...", len(projects))
        outcomes: list[ProjectOutcome] = []
        for project in projects:
            try:
                outcome = await self._run_project(project, config)
            except ChildProcessFailureError as e:
                log.error("Pipeline failed for %s: %s", project.name, e)
                outcome = ProjectOutcome(
                    project=project, error=str(e), error_exit_code=e.returncode
                )
            except CoverageRunnerError as e:
                log.error("Pipeline failed for %s: %s", project.name, e, exc_info=e)
                outcome = ProjectOutcome(project=project, error=str(e))
            except Exception as e:
                log.error(
                    "Unexpected error for %s: %s", project.name, e, exc_info=e
                )
                outcome = ProjectOutcome(project=project, error=str(e))
            outcomes.append(outcome)

        log.info("Pipeline completed")
        return outcomes

    async def _run_project(
        self, project: TestProject, config: RunConfiguration
    ) -> ProjectOutcome:
        """Run every step for a single project."""
        defaults = self.defaults
        log.info("=== %s ===", project.name)

        clean_coverage(project.folder, results_folder=defaults.results_folder)

        collect_coverage = config.collect_coverage and not config.list_tests
        try:
            test_exit_code: int | None = await run_test_command(
                self.runner,
                project.path,
                test_filter=config.test_filter,
                configuration=config.configuration,
                collect_coverage=collect_coverage,
                list_tests=config.list_tests,
                test_command=defaults.test_command,
                results_filename=defaults.results_filename,
            )
        except ChildProcessFailureError as e:
            log.warning("Continuing after test runner failure: %s", e)
            test_exit_code = e.returncode

        results: Sequence[TestResultRecord] = ()
        if config.list_test_results and not config.list_tests:
            results = self._report_results(project)

        if not collect_coverage:
            return ProjectOutcome(
                project=project, test_exit_code=test_exit_code, results=results
            )

        copy_coverage(
            project.folder,
            defaults.coverage_filename,
            results_folder=defaults.results_folder,
        )
        report_exit_code = await generate_report(
            self.runner,
            project.folder,
            project.name,
            project.assembly_name,
            coverage_filename=defaults.coverage_filename,
            report_generator_path=defaults.report_generator_path,
            report_folder=defaults.report_folder,
        )
        return ProjectOutcome(
            project=project,
            test_exit_code=test_exit_code,
            report_exit_code=report_exit_code,
            results=results,
        )

    def _report_results(self, project: TestProject) -> Sequence[TestResultRecord]:
        """Read and log test results, tolerating missing or broken files."""
        results_folder = project.folder / self.defaults.results_folder
        results_path = results_folder / self.defaults.results_filename
        try:
            records = read_test_results(results_path)
        except FileNotFoundError:
            log.warning("No result file for %s at %s", project.name, results_path)
            return ()
        except CoverageRunnerError as e:
            log.error("Could not read results for %s: %s", project.name, e)
            return ()

        log_results_table(log, records)
        return records
