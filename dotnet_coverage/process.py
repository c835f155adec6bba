"""Execution of external processes."""

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from dotnet_coverage.errors import ChildProcessFailureError
from dotnet_coverage.models.process import ProcessResult

log = logging.getLogger(__name__)


class ProcessRunner(ABC):
    """Abstract runner for external commands.

    Implementations block the caller until the child exits. The pipeline
    only ever runs one child at a time.
    """

    @abstractmethod
    async def run(
        self,
        args: Sequence[str],
        *,
        cwd: Path | None = None,
        capture: bool = False,
    ) -> ProcessResult:
        """Run a command and wait for it to exit.

        Args:
            args: Program followed by its arguments
            cwd: Working directory for the child (default: inherited)
            capture: Capture stdout/stderr instead of inheriting them

        Returns:
            Exit status and, when captured, the decoded output streams

        Raises:
            ChildProcessFailureError: If the program cannot be started

        """


@dataclass(frozen=True, kw_only=True)
class SubprocessRunner(ProcessRunner):
    """Runs commands as asyncio subprocesses."""

    async def run(
        self,
        args: Sequence[str],
        *,
        cwd: Path | None = None,
        capture: bool = False,
    ) -> ProcessResult:
        """Start the command and wait for it to exit."""
        log.debug("Running: %s", " ".join(args))
        stream = asyncio.subprocess.PIPE if capture else None
        try:
            process = await asyncio.create_subprocess_exec(
                *args,
                cwd=cwd,
                stdout=stream,
                stderr=stream,
            )
        except OSError as e:
            raise ChildProcessFailureError(args, None, str(e)) from e

        try:
            stdout, stderr = await process.communicate()
        except asyncio.CancelledError:
            if process.returncode is None:
                log.debug("Terminating %s", args[0])
                process.terminate()
                await process.wait()
            raise

        returncode = await process.wait()
        log.debug("%s exited with code %d", args[0], returncode)
        return ProcessResult(
            returncode=returncode,
            stdout=stdout.decode() if stdout is not None else None,
            stderr=stderr.decode() if stderr is not None else None,
        )
