"""Base class for coverage record adapters."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

    from jlcoverage.models import LineCoverage


def count_source_lines(source_path: Path) -> int:
    """Return the number of physical lines in *source_path*."""
    with source_path.open("rb") as f:
        return sum(1 for _ in f)


class CoverageAdapter(ABC):
    """Abstract base class for coverage record adapters.

    Each concrete adapter knows where one coverage producer leaves its records
    and how to turn them into per-line coverage for a single source file.
    Adapters read from disk on every call and keep no state between engine
    invocations.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Record format identifier (e.g. 'cov', 'lcov')."""

    @abstractmethod
    def load(self, source_path: str | Path) -> list[LineCoverage]:
        """Return per-line coverage for one source file.

        Args:
            source_path: Absolute path of the source file.

        Returns:
            One LineCoverage per physical line of the file, or an empty list
            when the producer left no record for it.
        """
