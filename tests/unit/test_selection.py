"""Tests for project subset selection."""

import io
from collections.abc import Sequence

import pytest

from dotnet_coverage.models.project import TestProject
from dotnet_coverage.selection import PassThroughSelector, PromptSelector
from dotnet_coverage.testing.factories import TestProjectFactory


@pytest.fixture
def candidates() -> Sequence[TestProject]:
    """Create three candidate projects."""
    return TestProjectFactory.batch(3)


def _prompt(answer: str) -> PromptSelector:
    return PromptSelector(input_fn=lambda: answer, output=io.StringIO())


def test_pass_through_selects_everything(candidates: Sequence[TestProject]) -> None:
    """Returns all candidates unchanged."""
    assert PassThroughSelector().select(candidates) == list(candidates)


class TestPromptSelector:
    """Tests for PromptSelector."""

    def test_lists_candidates(self, candidates: Sequence[TestProject]) -> None:
        """Writes a numbered list of candidates."""
        output = io.StringIO()
        selector = PromptSelector(input_fn=lambda: "1", output=output)

        selector.select(candidates)

        text = output.getvalue()
        for idx, project in enumerate(candidates, 1):
            assert f"{idx}. {project.name}" in text

    def test_selects_numbers_in_candidate_order(
        self, candidates: Sequence[TestProject]
    ) -> None:
        """Keeps chosen projects in candidate order."""
        result = _prompt("3, 1").select(candidates)

        assert result == [candidates[0], candidates[2]]

    def test_selects_all(self, candidates: Sequence[TestProject]) -> None:
        """Selects every candidate for 'all'."""
        assert _prompt("ALL").select(candidates) == list(candidates)

    def test_empty_input_cancels(self, candidates: Sequence[TestProject]) -> None:
        """Returns nothing on an empty line."""
        assert _prompt("   ").select(candidates) == []

    def test_end_of_input_cancels(self, candidates: Sequence[TestProject]) -> None:
        """Returns nothing when input is closed."""

        def _closed() -> str:
            raise EOFError

        selector = PromptSelector(input_fn=_closed, output=io.StringIO())

        assert selector.select(candidates) == []

    def test_ignores_invalid_tokens(
        self,
        candidates: Sequence[TestProject],
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        """Skips invalid and out of range choices with a warning."""
        result = _prompt("2 x 9").select(candidates)

        assert result == [candidates[1]]
        assert "invalid selection: x" in caplog.text
        assert "out of range selection: 9" in caplog.text

    def test_no_candidates_skips_prompt(self) -> None:
        """Does not prompt when there is nothing to choose."""

        def _unexpected() -> str:
            raise AssertionError("prompted")

        selector = PromptSelector(input_fn=_unexpected, output=io.StringIO())

        assert selector.select([]) == []
