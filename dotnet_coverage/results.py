"""Reading and displaying test results from TRX files."""

import logging
import xml.etree.ElementTree as ET
from collections import Counter
from collections.abc import Mapping, Sequence
from pathlib import Path

from dotnet_coverage.config import RESULTS_FILENAME, RESULTS_FOLDER
from dotnet_coverage.errors import ParseFailureError
from dotnet_coverage.models.result import TestResultRecord

log = logging.getLogger(__name__)

DEFAULT_RESULTS_PATH = Path(RESULTS_FOLDER) / RESULTS_FILENAME

OUTCOME_SYMBOLS = {
    "passed": "✅",
    "failed": "❌",
    "notexecuted": "⏭️",
    "inconclusive": "❔",
    "timeout": "⏱️",
    "error": "❗",
}


def read_test_results(
    results_path: Path = DEFAULT_RESULTS_PATH,
) -> Sequence[TestResultRecord]:
    """Extract every test name and outcome from a TRX file.

    Records are returned in document order. Namespaces are ignored so files
    from older Visual Studio schemas parse the same way.

    Raises:
        FileNotFoundError: If the file does not exist
        ParseFailureError: If the file is not well-formed XML

    """
    if not results_path.is_file():
        raise FileNotFoundError(f"Result file not found: {results_path}")

    try:
        tree = ET.parse(results_path)
    except ET.ParseError as e:
        raise ParseFailureError(f"Cannot parse {results_path}: {e}") from e

    return [
        TestResultRecord(
            name=element.get("testName", ""),
            outcome=element.get("outcome", ""),
        )
        for element in tree.getroot().iter()
        if _local_name(element.tag) == "UnitTestResult"
    ]


def count_outcomes(records: Sequence[TestResultRecord]) -> Mapping[str, int]:
    """Count records per outcome, keeping first-seen order."""
    return dict(Counter(record.outcome for record in records))


def log_results_table(
    log: logging.Logger, records: Sequence[TestResultRecord]
) -> None:
    """Log a table of outcome and test name, one line per record."""
    log.info("=" * 80)
    log.info("Test Results:")
    log.info("=" * 80)

    if not records:
        log.info("No test results found")
        return

    width = max(len(record.outcome) for record in records)
    for record in records:
        symbol = OUTCOME_SYMBOLS.get(record.outcome.lower(), "?")
        log.info("%s %-*s %s", symbol, width, record.outcome, record.name)

    totals = ", ".join(
        f"{outcome}: {count}" for outcome, count in count_outcomes(records).items()
    )
    log.info("Total: %d (%s)", len(records), totals)


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]
