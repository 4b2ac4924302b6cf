"""Adapter for Julia ``.cov`` sidecar files.

Running Julia with ``--code-coverage`` writes one ``<file>.jl.<pid>.cov`` file
next to every source file it loaded, one record per source line::

            - module Example
            3 add_one(x) = x + 1
            0 never_called() = nothing

The first nine characters hold the execution count, or ``-`` for lines that
are not code. Several processes produce several files; their counts are summed.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from jlcoverage.adapters.base import CoverageAdapter, count_source_lines
from jlcoverage.models import LineCoverage

logger = logging.getLogger(__name__)

# ── Constants ────────────────────────────────────────────────────

_COUNT_COLUMN_WIDTH = 9
_UNTRACKED_MARK = "-"
_COV_SUFFIX = ".cov"


def _merge_counts(current: int | None, new: int | None) -> int | None:
    if current is None:
        return new
    if new is None:
        return current
    return current + new


def parse_cov_text(content: str) -> list[int | None]:
    """Parse the count column of a ``.cov`` file.

    Raises:
        ValueError: If a count column is neither ``-`` nor an integer.
    """
    counts: list[int | None] = []
    for lineno, line in enumerate(content.splitlines(), start=1):
        segment = line[:_COUNT_COLUMN_WIDTH].strip()
        if segment == _UNTRACKED_MARK:
            counts.append(None)
            continue
        try:
            counts.append(int(segment))
        except ValueError as e:
            raise ValueError(f"line {lineno}: invalid execution count {segment!r}") from e
    return counts


class CovFileAdapter(CoverageAdapter):
    """Reads the ``.cov`` files Julia writes beside each source file."""

    @property
    def name(self) -> str:
        return "cov"

    def find_cov_files(self, source_path: Path) -> list[Path]:
        """Return the ``.cov`` files recorded for *source_path*, sorted by name."""
        pattern = re.compile(rf"^{re.escape(source_path.name)}(\.\d+)?{re.escape(_COV_SUFFIX)}$")
        directory = source_path.parent
        if not directory.is_dir():
            return []
        return sorted(
            candidate
            for candidate in directory.iterdir()
            if pattern.match(candidate.name) and candidate.is_file()
        )

    def load(self, source_path: str | Path) -> list[LineCoverage]:
        """Return merged per-line coverage for *source_path*.

        The result has one entry per physical line of the source file; lines
        past the end of the recorded data are untracked. When no ``.cov``
        file exists, an empty list is returned.
        """
        path = Path(source_path)
        cov_files = self.find_cov_files(path)
        if not cov_files:
            logger.debug("No coverage records for %s", path)
            return []

        num_lines = count_source_lines(path)
        merged: list[int | None] = [None] * num_lines
        for cov_file in cov_files:
            logger.debug("Reading %s", cov_file)
            try:
                counts = parse_cov_text(cov_file.read_text(encoding="utf-8"))
            except ValueError as e:
                raise ValueError(f"Malformed coverage file {cov_file}: {e}") from e
            for index, count in enumerate(counts[:num_lines]):
                merged[index] = _merge_counts(merged[index], count)

        return [
            LineCoverage(line_number=index + 1, execution_count=count)
            for index, count in enumerate(merged)
        ]
