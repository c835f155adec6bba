"""Models for external process execution."""

from dataclasses import dataclass


@dataclass(frozen=True, kw_only=True)
class ProcessResult:
    """Exit status of an external process.

    Output streams are only populated when the caller asked for them to be
    captured; otherwise they are inherited by the child and left as ``None``.
    """

    returncode: int
    stdout: str | None = None
    stderr: str | None = None

    @property
    def succeeded(self) -> bool:
        """Whether the process exited with status zero."""
        return self.returncode == 0
