"""Coverage record adapters."""

from __future__ import annotations

from typing import TYPE_CHECKING

from jlcoverage.adapters.base import CoverageAdapter
from jlcoverage.adapters.cov_files import CovFileAdapter
from jlcoverage.adapters.lcov import LcovAdapter

if TYPE_CHECKING:
    from jlcoverage.config import CoverageConfig


def create_adapter(config: CoverageConfig) -> CoverageAdapter:
    """Build the adapter selected by the coverage configuration."""
    if config.format == "lcov":
        return LcovAdapter(config.lcov_file, base_dir=config.base_dir or None)
    if config.format == "cov":
        return CovFileAdapter()
    raise ValueError(f"Unknown coverage format: {config.format}")


__all__ = [
    "CovFileAdapter",
    "CoverageAdapter",
    "LcovAdapter",
    "create_adapter",
]
