"""Report generation pipeline: resolve, load, aggregate, format."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import click

from jlcoverage.adapters import create_adapter
from jlcoverage.aggregate import aggregate
from jlcoverage.config import JlCoverageConfig
from jlcoverage.models import FileCoverage
from jlcoverage.reporters.text import format_report
from jlcoverage.resolver import resolve

if TYPE_CHECKING:
    import os
    from collections.abc import Sequence
    from pathlib import Path

    from jlcoverage.adapters.base import CoverageAdapter
    from jlcoverage.models import ReportRow
    from jlcoverage.resolver import ResolutionWarning

logger = logging.getLogger(__name__)


@dataclass
class CoverageRun:
    """Everything one engine invocation produced."""

    files: list[FileCoverage]
    rows: list[ReportRow]
    total: ReportRow
    warnings: list[ResolutionWarning] = field(default_factory=list)

    @property
    def report(self) -> str:
        """The formatted report table."""
        return format_report(self.rows, self.total)


def generate_report(
    paths: Sequence[str | os.PathLike[str]],
    *,
    verbose: bool = False,
    cwd: str | Path | None = None,
    config: JlCoverageConfig | None = None,
    adapter: CoverageAdapter | None = None,
) -> CoverageRun:
    """Compute coverage for *paths* without printing anything.

    Args:
        paths: Files or directories to report on; empty means the whole project.
        verbose: Log progress at INFO level. Does not change the result.
        cwd: Base directory for relative paths (defaults to the working directory).
        config: Project and coverage settings (defaults apply when omitted).
        adapter: Coverage record source. Built from ``config`` when omitted.

    Returns:
        The per-file coverage, report rows, total row and any resolution warnings.
    """
    config = config or JlCoverageConfig()
    resolution = resolve(paths, cwd=cwd, project=config.project, verbose=verbose)
    adapter = adapter or create_adapter(config.coverage)
    log = logger.info if verbose else logger.debug
    log("Reading %s coverage records", adapter.name)

    files: list[FileCoverage] = []
    for entry in resolution.entries:
        log("Processing %s", entry.source_path)
        files.append(
            FileCoverage(
                source_path=entry.source_path,
                display_path=entry.display_path,
                lines=adapter.load(entry.source_path),
            )
        )

    rows, total = aggregate(files)
    return CoverageRun(files=files, rows=rows, total=total, warnings=resolution.warnings)


def run(
    paths: Sequence[str | os.PathLike[str]],
    *,
    verbose: bool = False,
    cwd: str | Path | None = None,
    config: JlCoverageConfig | None = None,
    adapter: CoverageAdapter | None = None,
) -> str:
    """Generate the coverage report for *paths* and print it to stdout.

    Paths that do not exist are logged as warnings and skipped.

    Returns:
        The report text that was printed.
    """
    result = generate_report(paths, verbose=verbose, cwd=cwd, config=config, adapter=adapter)
    for warning in result.warnings:
        logger.warning("%s", warning.message)

    report = result.report
    click.echo(report, nl=False)
    return report
