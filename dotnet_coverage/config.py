"""Configuration for the coverage runner."""

import os
import sys
from collections.abc import Mapping, Sequence
from pathlib import Path

from pydantic import Field, field_validator

from dotnet_coverage.models.base import Model

DEFAULT_PROJECT_NAME_FILTER = "*.Test.csproj"
DEFAULT_FOLDERS_TO_IGNORE = "bin,obj"
RESULTS_FOLDER = "TestResults"
RESULTS_FILENAME = "DotNetTestLog.trx"
COVERAGE_FILENAME = "coverage.opencover.xml"
REPORT_FOLDER = "CodeCoverage"
TEST_COMMAND = ("dotnet", "test")


def default_report_generator_path(
    environ: Mapping[str, str] | None = None, platform: str | None = None
) -> Path:
    """Build the per-user ReportGenerator path from the profile variable.

    ``USERPROFILE`` is preferred, ``HOME`` is the fallback. The executable is
    the one installed by ``dotnet tool install --global``.
    """
    env = os.environ if environ is None else environ
    platform = sys.platform if platform is None else platform
    home = env.get("USERPROFILE") or env.get("HOME")
    base = Path(home) if home else Path.home()
    executable = "reportgenerator.exe" if platform == "win32" else "reportgenerator"
    return base / ".dotnet" / "tools" / executable


def split_folders(folders: str) -> Sequence[str]:
    """Parse a comma-separated folder list, dropping blank entries."""
    return tuple(f.strip() for f in folders.split(",") if f.strip())


class ToolDefaults(Model):
    """Defaults injected at the call boundary, overridable per invocation."""

    results_folder: str = RESULTS_FOLDER
    results_filename: str = RESULTS_FILENAME
    coverage_filename: str = COVERAGE_FILENAME
    report_folder: str = REPORT_FOLDER
    test_command: Sequence[str] = TEST_COMMAND
    report_generator_path: Path = Field(default_factory=default_report_generator_path)


class RunConfiguration(Model):
    """Options for a full ``run-tests`` invocation.

    Empty strings are treated like absent values so that options forwarded
    verbatim from a shell script fall back to the defaults.
    """

    test_filter: str = ""
    configuration: str = ""
    list_tests: bool = False
    interactive: bool = False
    project_name_filter: str = DEFAULT_PROJECT_NAME_FILTER
    folders_to_ignore: str = DEFAULT_FOLDERS_TO_IGNORE
    collect_coverage: bool = True
    list_test_results: bool = False

    @field_validator("test_filter", "configuration", mode="before")
    @classmethod
    def _none_to_empty(cls, value: str | None) -> str:
        return "" if value is None else value.strip()

    @field_validator("project_name_filter", mode="before")
    @classmethod
    def _default_name_filter(cls, value: str | None) -> str:
        if value is None or not value.strip():
            return DEFAULT_PROJECT_NAME_FILTER
        return value.strip()

    @field_validator("folders_to_ignore", mode="before")
    @classmethod
    def _default_folders(cls, value: str | None) -> str:
        if value is None or not split_folders(value):
            return DEFAULT_FOLDERS_TO_IGNORE
        return value
