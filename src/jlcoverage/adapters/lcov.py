"""Adapter for LCOV tracefiles.

Coverage.jl and most other producers can emit LCOV ``.info`` files. Only the
line records matter here::

    SF:src/Example.jl
    DA:2,3
    DA:3,0
    end_of_record

Lines without a ``DA`` entry are untracked. Records for the same file are
merged by summing counts.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from jlcoverage.adapters.base import CoverageAdapter, count_source_lines
from jlcoverage.models import LineCoverage

logger = logging.getLogger(__name__)

# ── Constants ────────────────────────────────────────────────────

_LCOV_SF = "SF"
_LCOV_DA = "DA"
_LCOV_END = "end_of_record"
_LCOV_DA_PARTS = 2


class LcovAdapter(CoverageAdapter):
    """Reads line coverage for source files out of one LCOV tracefile."""

    def __init__(self, tracefile: str | Path, *, base_dir: str | Path | None = None) -> None:
        """Initialize the adapter.

        Args:
            tracefile: Path of the LCOV ``.info`` file.
            base_dir: Directory relative ``SF:`` paths are resolved against.
                Defaults to the tracefile's directory.
        """
        self.tracefile = Path(tracefile)
        self.base_dir = Path(base_dir) if base_dir else self.tracefile.parent

    @property
    def name(self) -> str:
        return "lcov"

    def _normalize(self, path: str | Path) -> str:
        return os.path.normpath(Path(os.path.abspath(self.base_dir)) / path)

    def parse_lcov_string(self, content: str) -> dict[str, dict[int, int]]:
        """Parse LCOV text into ``{absolute source path: {line: count}}``.

        Raises:
            ValueError: If a ``DA`` record is malformed.
        """
        records: dict[str, dict[int, int]] = {}
        current: dict[int, int] | None = None

        for raw_line in content.splitlines():
            line = raw_line.strip()
            if not line:
                continue
            if line == _LCOV_END:
                current = None
                continue
            key, _, value = line.partition(":")
            if key == _LCOV_SF:
                current = records.setdefault(self._normalize(value.strip()), {})
            elif key == _LCOV_DA and current is not None:
                parts = value.split(",")
                if len(parts) < _LCOV_DA_PARTS:
                    raise ValueError(f"Malformed LCOV line record: {line!r}")
                line_number = int(parts[0].strip())
                count = int(parts[1].strip())
                current[line_number] = current.get(line_number, 0) + count

        return records

    def read_records(self) -> dict[str, dict[int, int]]:
        """Parse the tracefile as it is on disk now."""
        logger.debug("Parsing LCOV tracefile %s", self.tracefile)
        return self.parse_lcov_string(self.tracefile.read_text(encoding="utf-8"))

    def load(self, source_path: str | Path) -> list[LineCoverage]:
        """Return per-line coverage for *source_path* from the tracefile."""
        line_counts = self.read_records().get(self._normalize(source_path))
        if line_counts is None:
            logger.debug("No LCOV record for %s", source_path)
            return []

        num_lines = count_source_lines(Path(source_path))
        return [
            LineCoverage(line_number=n, execution_count=line_counts.get(n))
            for n in range(1, num_lines + 1)
        ]
