"""Code-coverage provider interface."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from liteunit.core.suite import TestSuite


@dataclass
class FileCoverage:
    """Coverage of a single source file."""

    path: str
    lines: list[str] = field(default_factory=list)
    covered: set[int] = field(default_factory=set)

    @classmethod
    def from_path(cls, path: Path | str) -> "FileCoverage":
        """Read the source lines of a file, with nothing covered yet."""
        path = Path(path)
        text = path.read_text(encoding="utf-8", errors="replace")
        return cls(path=str(path), lines=[line.rstrip("\r") for line in text.split("\n")])

    def cover(self, line: int) -> None:
        """Flag a (1-based) line number as covered."""
        self.covered.add(line)

    @property
    def uncovered_lines(self) -> dict[int, str]:
        """Source of every line that was not covered, by line number."""
        return {
            number: text
            for number, text in enumerate(self.lines, start=1)
            if number not in self.covered
        }

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "path": self.path,
            "total_lines": len(self.lines),
            "covered_lines": sorted(self.covered),
            "uncovered_count": len(self.uncovered_lines),
        }


@runtime_checkable
class CoverageProvider(Protocol):
    """Collects coverage while a suite runs its tests."""

    def enable(self, suite: "TestSuite") -> None:
        """Start collecting; called before the first test runs."""
        ...

    def disable(self, suite: "TestSuite") -> None:
        """Stop collecting; called after the last test has run."""
        ...

    def get_results(self, suite: "TestSuite") -> list[FileCoverage]:
        """Return the coverage gathered between enable and disable."""
        ...
