"""Fixed-width text rendering of a coverage report."""

from __future__ import annotations

from typing import TYPE_CHECKING

from jlcoverage.models import NotApplicable, Percentage

if TYPE_CHECKING:
    from collections.abc import Sequence

    from jlcoverage.models import Coverage, ReportRow

# Column widths do not depend on content; long paths push the row out.
_FILE_WIDTH = 38
_LOC_WIDTH = 13
_MISSED_WIDTH = 11
_COVERAGE_WIDTH = 11
_RULE = "-" * 79


def _format_coverage(coverage: Coverage) -> str:
    if isinstance(coverage, Percentage):
        return f"{coverage.value:.1f}%"
    if isinstance(coverage, NotApplicable):
        return "N/A"
    raise TypeError(f"Unexpected coverage value: {coverage!r}")


def _format_line(path: str, lines_of_code: object, missed: object, coverage: str) -> str:
    return (
        f"{path:<{_FILE_WIDTH}}"
        f"{lines_of_code:>{_LOC_WIDTH}}"
        f"{missed:>{_MISSED_WIDTH}}"
        f"{coverage:>{_COVERAGE_WIDTH}}"
    )


def format_row(row: ReportRow) -> str:
    """Render one table row without a trailing newline."""
    return _format_line(
        row.display_path,
        row.lines_of_code,
        row.missed,
        _format_coverage(row.coverage),
    )


def format_report(rows: Sequence[ReportRow], total: ReportRow) -> str:
    """Render the coverage table.

    The header is framed by rules, the file rows follow, and a final rule
    separates them from the TOTAL row. With no rows the two rules after the
    header appear back to back.
    """
    lines = [
        _RULE,
        _format_line("File", "Lines of Code", "Missed", "Coverage"),
        _RULE,
        *(format_row(row) for row in rows),
        _RULE,
        format_row(total),
    ]
    return "\n".join(lines) + "\n"
