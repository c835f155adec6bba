"""Fixtures for integration tests."""

from collections.abc import Sequence
from pathlib import Path
from typing import Protocol

import pytest

TRX_NAMESPACE = "http://microsoft.com/schemas/VisualStudio/TeamTest/2010"


class CreateProjectFn(Protocol):
    """Protocol for test project creation function."""

    def __call__(self, relative_path: str) -> Path:
        """Create an empty project file and return its path."""


class WriteTrxFn(Protocol):
    """Protocol for TRX result file creation function."""

    def __call__(self, path: Path, results: Sequence[tuple[str, str]]) -> Path:
        """Write a TRX file with (name, outcome) results and return its path."""


@pytest.fixture
def create_project(tmp_path: Path) -> CreateProjectFn:
    """Return a function to create project files below tmp_path."""

    def _create(relative_path: str) -> Path:
        project_path = tmp_path / relative_path
        project_path.parent.mkdir(parents=True, exist_ok=True)
        project_path.write_text('<Project Sdk="Microsoft.NET.Sdk" />\n')
        return project_path

    return _create


def trx_document(results: Sequence[tuple[str, str]]) -> str:
    """Render a minimal TRX document."""
    rows = "\n".join(
        f'    <UnitTestResult testId="{idx}" testName="{name}" outcome="{outcome}" />'
        for idx, (name, outcome) in enumerate(results)
    )
    return (
        '<?xml version="1.0" encoding="utf-8"?>\n'
        f'<TestRun id="run" xmlns="{TRX_NAMESPACE}">\n'
        "  <Results>\n"
        f"{rows}\n"
        "  </Results>\n"
        "</TestRun>\n"
    )


@pytest.fixture
def write_trx() -> WriteTrxFn:
    """Return a function to write TRX result files."""

    def _write(path: Path, results: Sequence[tuple[str, str]]) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(trx_document(results))
        return path

    return _write
