"""Coverage data models shared by the loader, aggregator and formatter."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

TOTAL_LABEL = "TOTAL"


class LineStatus(Enum):
    UNTRACKED = "untracked"
    HIT = "hit"
    MISSED = "missed"


@dataclass(frozen=True)
class LineCoverage:
    """Coverage data for a single physical line of a source file."""

    line_number: int
    execution_count: int | None
    """Times the line ran, or None when the line is not code."""

    @property
    def status(self) -> LineStatus:
        """Return the tracking state of this line."""
        if self.execution_count is None:
            return LineStatus.UNTRACKED
        if self.execution_count > 0:
            return LineStatus.HIT
        return LineStatus.MISSED


@dataclass(frozen=True)
class Percentage:
    """Coverage percentage rounded to one decimal place."""

    value: float

    def __str__(self) -> str:
        return f"{self.value:.1f}%"


@dataclass(frozen=True)
class NotApplicable:
    """Coverage of a file or total with no lines of code."""

    def __str__(self) -> str:
        return "N/A"


NOT_APPLICABLE = NotApplicable()

Coverage = Percentage | NotApplicable


def compute_coverage(lines_of_code: int, missed: int) -> Coverage:
    """Return the coverage for the given counts, N/A when there is no code."""
    if lines_of_code == 0:
        return NOT_APPLICABLE
    return Percentage(round(100 * (lines_of_code - missed) / lines_of_code, 1))


@dataclass(frozen=True)
class FileCoverage:
    """Per-line coverage of one source file in scope."""

    source_path: str
    """Absolute path of the source file."""

    display_path: str
    """Path shown in the report."""

    lines: list[LineCoverage] = field(default_factory=list)

    @property
    def lines_of_code(self) -> int:
        return sum(1 for line in self.lines if line.status is not LineStatus.UNTRACKED)

    @property
    def missed(self) -> int:
        return sum(1 for line in self.lines if line.status is LineStatus.MISSED)

    @property
    def coverage(self) -> Coverage:
        return compute_coverage(self.lines_of_code, self.missed)


@dataclass(frozen=True)
class ReportRow:
    """One line of the coverage table."""

    display_path: str
    lines_of_code: int
    missed: int
    coverage: Coverage

    @classmethod
    def from_file(cls, file_coverage: FileCoverage) -> ReportRow:
        """Project a FileCoverage into a report row."""
        return cls(
            display_path=file_coverage.display_path,
            lines_of_code=file_coverage.lines_of_code,
            missed=file_coverage.missed,
            coverage=file_coverage.coverage,
        )
