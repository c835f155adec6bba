"""Model for a discovered test project."""

from pathlib import Path

from pydantic import Field

from dotnet_coverage.models.base import Model

PROJECT_EXTENSION = ".csproj"
TEST_NAME_SUFFIXES = (".Tests", ".Test")


class TestProject(Model):
    """Reference to a single test project file."""

    __test__ = False

    path: Path = Field(..., description="Path to the project file")

    @property
    def name(self) -> str:
        """Project name, e.g. ``MyLib.Test`` for ``MyLib.Test.csproj``."""
        file_name = self.path.name
        if file_name.lower().endswith(PROJECT_EXTENSION):
            return file_name[: -len(PROJECT_EXTENSION)]
        return self.path.stem

    @property
    def folder(self) -> Path:
        """Directory holding the project file."""
        return self.path.parent

    @property
    def assembly_name(self) -> str:
        """Name of the assembly under test.

        The trailing ``.Test``/``.Tests`` segment is stripped, so
        ``MyLib.Tests`` covers ``MyLib``. Names without such a suffix are
        returned unchanged.
        """
        name = self.name
        for suffix in TEST_NAME_SUFFIXES:
            if name.lower().endswith(suffix.lower()) and len(name) > len(suffix):
                return name[: -len(suffix)]
        return name
