"""CLI entry point for the dotnet test and coverage runner."""

import argparse
import asyncio
import json
import logging
import sys
from collections.abc import Callable, Coroutine, Mapping, Sequence
from pathlib import Path
from typing import Any, TypeAlias

from dotnet_coverage.config import (
    COVERAGE_FILENAME,
    DEFAULT_FOLDERS_TO_IGNORE,
    DEFAULT_PROJECT_NAME_FILTER,
    RunConfiguration,
    ToolDefaults,
)
from dotnet_coverage.coverage import clean_coverage, copy_coverage
from dotnet_coverage.discovery import discover_projects
from dotnet_coverage.errors import (
    ChildProcessFailureError,
    MissingPathError,
    ParseFailureError,
    exit_status,
)
from dotnet_coverage.models.project import TestProject
from dotnet_coverage.orchestrator import ProjectOutcome, TestPipeline
from dotnet_coverage.process import ProcessRunner, SubprocessRunner
from dotnet_coverage.report import generate_report
from dotnet_coverage.results import (
    DEFAULT_RESULTS_PATH,
    log_results_table,
    read_test_results,
)
from dotnet_coverage.runner import run_test_command
from dotnet_coverage.selection import PromptSelector, SubsetSelector

EXIT_MISSING_PATH = 2
EXIT_INTERRUPTED = 130

STATUS_SYMBOLS = {
    True: "✅",
    False: "❌",
}

TRUE_VALUES = {"true", "yes", "y", "1", "on"}
FALSE_VALUES = {"false", "no", "n", "0", "off"}


def parse_bool(value: str) -> bool:
    """Parse a boolean command-line value."""
    normalized = value.strip().lower()
    if normalized in TRUE_VALUES:
        return True
    if normalized in FALSE_VALUES:
        return False
    raise argparse.ArgumentTypeError(f"Invalid boolean value: {value!r}")


def log_results_summary(
    log: logging.Logger, outcomes: Sequence[ProjectOutcome]
) -> None:
    """Log a formatted summary of every project's pipeline outcome."""
    log.info("=" * 80)
    log.info("Run Summary:")
    log.info("=" * 80)

    for outcome in outcomes:
        symbol = STATUS_SYMBOLS[outcome.succeeded]
        log.info(
            "%s %s: tests exit code %s, report exit code %s",
            symbol,
            outcome.project.name,
            outcome.test_exit_code,
            outcome.report_exit_code,
        )
        if outcome.error:
            log.info("  Error: %s", outcome.error)


def format_projects(projects: Sequence[TestProject]) -> list[dict[str, str]]:
    """Format discovered projects for JSON output."""
    return [
        {
            "name": project.name,
            "path": str(project.path),
            "folder": str(project.folder),
            "assembly": project.assembly_name,
        }
        for project in projects
    ]


def format_output(outcomes: Sequence[ProjectOutcome]) -> dict[str, Any]:
    """Format pipeline outcomes for JSON output."""
    projects = [
        {
            "project": outcome.project.name,
            "path": str(outcome.project.path),
            "test_exit_code": outcome.test_exit_code,
            "report_exit_code": outcome.report_exit_code,
            "results": [
                {"name": record.name, "outcome": record.outcome}
                for record in outcome.results
            ],
            "error": outcome.error,
        }
        for outcome in outcomes
    ]
    return {
        "total": len(outcomes),
        "succeeded": sum(1 for o in outcomes if o.succeeded),
        "failed": sum(1 for o in outcomes if not o.succeeded),
        "projects": projects,
    }


def exit_code_for(outcomes: Sequence[ProjectOutcome]) -> int:
    """Return the first failing project's exit code, or 0."""
    return next((o.exit_code for o in outcomes if o.exit_code != 0), 0)


async def run_tests(
    config: RunConfiguration,
    *,
    root: Path,
    runner: ProcessRunner,
    defaults: ToolDefaults | None = None,
    selector: SubsetSelector | None = None,
) -> int:
    """Discover projects and run the full pipeline; return the exit code."""
    log = logging.getLogger("dotnet_coverage")
    defaults = defaults or ToolDefaults()

    projects = await asyncio.to_thread(
        discover_projects,
        root,
        config.project_name_filter,
        config.folders_to_ignore,
        interactive=config.interactive,
        selector=selector,
    )

    if not projects:
        log.info("No test projects selected")
        print(json.dumps(format_output([])))
        return 0

    log.info("Projects: %s", ", ".join(p.name for p in projects))

    pipeline = TestPipeline(runner=runner, defaults=defaults)
    outcomes = await pipeline.run(projects, config)

    log_results_summary(log, outcomes)
    print(json.dumps(format_output(outcomes), indent=2))

    return exit_code_for(outcomes)


async def _run_tests_command(args: argparse.Namespace, runner: ProcessRunner) -> int:
    config = RunConfiguration(
        test_filter=args.filter,
        configuration=args.configuration,
        list_tests=args.list_tests,
        interactive=args.interactive,
        project_name_filter=args.project_name_filter,
        folders_to_ignore=args.folders_to_ignore,
        collect_coverage=not args.no_coverage,
        list_test_results=args.list_test_results,
    )
    defaults = ToolDefaults()
    if args.report_generator_path:
        defaults = defaults.model_copy(
            update={"report_generator_path": args.report_generator_path}
        )
    return await run_tests(
        config,
        root=args.root,
        runner=runner,
        defaults=defaults,
        selector=PromptSelector() if config.interactive else None,
    )


async def _discover_projects_command(
    args: argparse.Namespace, runner: ProcessRunner
) -> int:
    projects = await asyncio.to_thread(
        discover_projects,
        args.root,
        args.project_name_filter or DEFAULT_PROJECT_NAME_FILTER,
        args.folders_to_ignore or DEFAULT_FOLDERS_TO_IGNORE,
        interactive=args.interactive,
        selector=PromptSelector() if args.interactive else None,
    )
    print(json.dumps(format_projects(projects), indent=2))
    return 0


async def _clean_coverage_command(
    args: argparse.Namespace, runner: ProcessRunner
) -> int:
    clean_coverage(args.project_folder, dry_run=args.dry_run)
    return 0


async def _run_test_command(args: argparse.Namespace, runner: ProcessRunner) -> int:
    return await run_test_command(
        runner,
        args.project_path,
        test_filter=args.filter,
        configuration=args.configuration,
        collect_coverage=args.collect_coverage,
        list_tests=args.list_tests,
    )


async def _show_results_command(
    args: argparse.Namespace, runner: ProcessRunner
) -> int:
    log = logging.getLogger("dotnet_coverage")
    try:
        records = read_test_results(args.results_path)
    except FileNotFoundError as e:
        log.error("%s", e)
        return EXIT_MISSING_PATH
    except ParseFailureError as e:
        log.error("%s", e)
        return 1
    log_results_table(log, records)
    return 0


async def _copy_coverage_command(
    args: argparse.Namespace, runner: ProcessRunner
) -> int:
    copy_coverage(args.project_folder, args.coverage_filename)
    return 0


async def _generate_report_command(
    args: argparse.Namespace, runner: ProcessRunner
) -> int:
    return await generate_report(
        runner,
        args.project_folder,
        args.project_name,
        args.assembly,
        coverage_filename=args.coverage_filename,
        report_generator_path=args.report_generator_path,
    )


CommandHandler: TypeAlias = Callable[
    [argparse.Namespace, ProcessRunner], Coroutine[Any, Any, int]
]

COMMANDS: Mapping[str, CommandHandler] = {
    "run-tests": _run_tests_command,
    "discover-projects": _discover_projects_command,
    "clean-coverage": _clean_coverage_command,
    "run-test-command": _run_test_command,
    "show-results": _show_results_command,
    "copy-coverage": _copy_coverage_command,
    "generate-report": _generate_report_command,
}


async def dispatch(args: argparse.Namespace, runner: ProcessRunner) -> int:
    """Run the selected subcommand and return its exit code."""
    return await COMMANDS[args.command](args, runner)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with one subparser per command."""
    parser = argparse.ArgumentParser(
        description="Run dotnet tests and generate coverage reports"
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    bool_option: dict[str, Any] = {
        "type": parse_bool,
        "nargs": "?",
        "const": True,
        "default": False,
        "metavar": "BOOL",
    }

    run = subparsers.add_parser("run-tests", help="Run the full pipeline")
    run.add_argument("--filter", default="", help="Fully qualified name filter")
    run.add_argument("--configuration", default="", help="Build configuration")
    run.add_argument(
        "--list-tests", **bool_option, help="List tests without running them"
    )
    run.add_argument(
        "--interactive", **bool_option, help="Choose projects interactively"
    )
    run.add_argument(
        "--project-name-filter",
        default=DEFAULT_PROJECT_NAME_FILTER,
        help="Project file name filter",
    )
    run.add_argument(
        "--folders-to-ignore",
        default=DEFAULT_FOLDERS_TO_IGNORE,
        help="Comma-separated folder names to skip",
    )
    run.add_argument(
        "--list-test-results",
        action="store_true",
        help="Print test outcomes after each project",
    )
    run.add_argument(
        "--no-coverage",
        action="store_true",
        help="Skip coverage collection and report generation",
    )
    run.add_argument(
        "--report-generator-path",
        type=Path,
        default=None,
        help="Path to the ReportGenerator executable",
    )
    run.add_argument("--root", type=Path, default=Path.cwd(), help="Search root")

    discover = subparsers.add_parser(
        "discover-projects", help="List test projects under the root"
    )
    discover.add_argument(
        "--project-name-filter",
        default=DEFAULT_PROJECT_NAME_FILTER,
        help="Project file name filter",
    )
    discover.add_argument(
        "--folders-to-ignore",
        default=DEFAULT_FOLDERS_TO_IGNORE,
        help="Comma-separated folder names to skip",
    )
    discover.add_argument(
        "--interactive", **bool_option, help="Choose projects interactively"
    )
    discover.add_argument(
        "--root", type=Path, default=Path.cwd(), help="Search root"
    )

    clean = subparsers.add_parser(
        "clean-coverage", help="Delete the TestResults folder of a project"
    )
    clean.add_argument("--project-folder", type=Path, required=True)
    clean.add_argument(
        "--dry-run", action="store_true", help="Report without deleting"
    )

    test = subparsers.add_parser(
        "run-test-command", help="Run the test runner for one project"
    )
    test.add_argument("--project-path", type=Path, required=True)
    test.add_argument("--filter", default="", help="Fully qualified name filter")
    test.add_argument("--configuration", default="", help="Build configuration")
    test.add_argument(
        "--collect-coverage", action="store_true", help="Collect code coverage"
    )
    test.add_argument(
        "--list-tests", **bool_option, help="List tests without running them"
    )

    show = subparsers.add_parser("show-results", help="Print test outcomes")
    show.add_argument("--results-path", type=Path, default=DEFAULT_RESULTS_PATH)

    copy = subparsers.add_parser(
        "copy-coverage", help="Copy the coverage file to the project folder"
    )
    copy.add_argument("--project-folder", type=Path, required=True)
    copy.add_argument("--coverage-filename", default=COVERAGE_FILENAME)

    report = subparsers.add_parser(
        "generate-report", help="Run ReportGenerator for one project"
    )
    report.add_argument("--project-folder", type=Path, required=True)
    report.add_argument("--project-name", required=True)
    report.add_argument("--assembly", required=True)
    report.add_argument("--coverage-filename", default=None)
    report.add_argument("--report-generator-path", type=Path, default=None)

    return parser


def main() -> None:
    """CLI entry point."""
    args = build_parser().parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )
    log = logging.getLogger("dotnet_coverage")

    try:
        exit_code = asyncio.run(dispatch(args, SubprocessRunner()))
    except MissingPathError as e:
        log.error("%s", e)
        exit_code = EXIT_MISSING_PATH
    except ChildProcessFailureError as e:
        log.error("%s", e)
        exit_code = exit_status(e.returncode) or 1
    except KeyboardInterrupt:
        log.warning("Interrupted")
        exit_code = EXIT_INTERRUPTED
    sys.exit(exit_code)


if __name__ == "__main__":  # pragma: no cover
    main()
