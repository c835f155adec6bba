"""Selection of a subset of discovered projects."""

import logging
import sys
from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import TextIO

from dotnet_coverage.models.project import TestProject

log = logging.getLogger(__name__)


class SubsetSelector(ABC):
    """Chooses which candidate projects to run."""

    @abstractmethod
    def select(self, candidates: Sequence[TestProject]) -> Sequence[TestProject]:
        """Return the chosen projects, in candidate order.

        An empty result means the user cancelled or chose nothing.
        """


class PassThroughSelector(SubsetSelector):
    """Selects every candidate, for non-interactive runs."""

    def select(self, candidates: Sequence[TestProject]) -> Sequence[TestProject]:
        """Return all candidates unchanged."""
        return list(candidates)


@dataclass(frozen=True, kw_only=True)
class PromptSelector(SubsetSelector):
    """Prompts on the console for a multi-selection.

    Accepts a comma or space separated list of numbers, ``all``, or an empty
    line to cancel.
    """

    input_fn: Callable[[], str] = field(default=input, repr=False)
    output: TextIO = field(default_factory=lambda: sys.stderr, repr=False)

    def select(self, candidates: Sequence[TestProject]) -> Sequence[TestProject]:
        """Show numbered candidates and read the user's choice."""
        if not candidates:
            return []

        print("\nAvailable test projects:", file=self.output)
        for idx, project in enumerate(candidates, 1):
            print(f"  {idx}. {project.name} ({project.path})", file=self.output)
        print(
            "\nSelect projects (numbers separated by commas, 'all', "
            "or empty to cancel):",
            file=self.output,
            end=" ",
        )
        self.output.flush()

        try:
            user_input = self.input_fn().strip()
        except EOFError:
            user_input = ""

        if not user_input:
            log.info("Selection cancelled")
            return []

        if user_input.lower() == "all":
            return list(candidates)

        return self._parse_choice(user_input, candidates)

    @staticmethod
    def _parse_choice(
        user_input: str, candidates: Sequence[TestProject]
    ) -> Sequence[TestProject]:
        chosen: set[int] = set()
        for token in user_input.replace(",", " ").split():
            try:
                idx = int(token) - 1
            except ValueError:
                log.warning("Ignoring invalid selection: %s", token)
                continue
            if 0 <= idx < len(candidates):
                chosen.add(idx)
            else:
                log.warning("Ignoring out of range selection: %s", token)

        return [project for idx, project in enumerate(candidates) if idx in chosen]
