"""Models for test execution results."""

from dataclasses import dataclass


@dataclass(frozen=True, kw_only=True)
class TestResultRecord:
    """Outcome of a single test case read from a result file."""

    __test__ = False

    name: str
    outcome: str
