"""Errors raised by the coverage runner."""

from collections.abc import Sequence
from pathlib import Path


class CoverageRunnerError(Exception):
    """Base class for coverage runner errors."""


class MissingPathError(CoverageRunnerError):
    """Raised when a required file or directory does not exist."""

    def __init__(self, description: str, path: Path) -> None:
        super().__init__(f"{description} not found: {path}")
        self.path = path


def exit_status(returncode: int | None) -> int:
    """Map a child's return code to a status usable with ``sys.exit``.

    Children killed by a signal report ``-signum``; shells report those as
    ``128 + signum``. A child that never started maps to 1.
    """
    if returncode is None:
        return 1
    if returncode < 0:
        return 128 - returncode
    return returncode


class ChildProcessFailureError(CoverageRunnerError):
    """Raised when an external process fails or cannot be started.

    ``returncode`` is ``None`` when the process never started.
    """

    def __init__(
        self, command: Sequence[str], returncode: int | None, reason: str = ""
    ) -> None:
        program = command[0] if command else "<empty command>"
        if returncode is None:
            message = f"Could not start {program}: {reason}"
        else:
            message = f"{program} exited with code {returncode}"
        super().__init__(message)
        self.command = tuple(command)
        self.returncode = returncode


class ParseFailureError(CoverageRunnerError):
    """Raised when a result file cannot be parsed."""
