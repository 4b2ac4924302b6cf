"""Roll per-file coverage up into report rows and a total."""

from __future__ import annotations

from typing import TYPE_CHECKING

from jlcoverage.models import TOTAL_LABEL, ReportRow, compute_coverage

if TYPE_CHECKING:
    from collections.abc import Sequence

    from jlcoverage.models import FileCoverage


def aggregate(files: Sequence[FileCoverage]) -> tuple[list[ReportRow], ReportRow]:
    """Return one row per file, in order, and the TOTAL row.

    Files with no lines of code add nothing to either total count, so they
    never change the overall percentage.
    """
    rows = [ReportRow.from_file(file_coverage) for file_coverage in files]
    lines_of_code = sum(row.lines_of_code for row in rows)
    missed = sum(row.missed for row in rows)
    total = ReportRow(
        display_path=TOTAL_LABEL,
        lines_of_code=lines_of_code,
        missed=missed,
        coverage=compute_coverage(lines_of_code, missed),
    )
    return rows, total
