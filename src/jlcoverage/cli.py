"""jlcoverage CLI: print a line-coverage report for a Julia package."""

from __future__ import annotations

import logging
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from jlcoverage import __version__
from jlcoverage.config import (
    ConfigError,
    JlCoverageConfig,
    load_config,
    load_config_file,
    validate_config,
)
from jlcoverage.engine import run

err_console = Console(stderr=True)

_PACKAGE_LOGGER = "jlcoverage"


def _configure_logging(*, verbose: bool) -> None:
    """Send package log records to stderr through rich."""
    package_logger = logging.getLogger(_PACKAGE_LOGGER)
    for handler in list(package_logger.handlers):
        if isinstance(handler, RichHandler):
            package_logger.removeHandler(handler)

    handler = RichHandler(console=err_console, show_time=False, show_path=False)
    handler.setFormatter(logging.Formatter("%(message)s"))
    package_logger.addHandler(handler)
    package_logger.propagate = False
    package_logger.setLevel(logging.INFO if verbose else logging.WARNING)


def _print_error(message: str) -> None:
    err_console.print(f"[red]✗[/red] {escape(message)}")


def _load_settings(config_file: str | None, lcov_file: str | None) -> JlCoverageConfig:
    try:
        config = load_config_file(config_file) if config_file else load_config(Path.cwd())
    except ConfigError as e:
        _print_error(f"Failed to load configuration: {e}")
        raise click.Abort from e

    if lcov_file:
        config.coverage.format = "lcov"
        config.coverage.lcov_file = lcov_file

    errors = validate_config(config)
    if errors:
        _print_error(f"Found {len(errors)} configuration error(s):")
        for idx, error in enumerate(errors, start=1):
            err_console.print(f"  {idx}. [red]{escape(error)}[/red]")
        raise click.Abort
    return config


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("paths", nargs=-1, type=click.Path())
@click.option("-v", "--verbose", is_flag=True, help="Log progress while collecting coverage.")
@click.option(
    "--lcov",
    "lcov_file",
    type=click.Path(exists=True, dir_okay=False, resolve_path=True),
    help="Read coverage from an LCOV tracefile instead of .cov files.",
)
@click.option(
    "--config",
    "config_file",
    type=click.Path(exists=True, dir_okay=False, resolve_path=True),
    help="Configuration file (default: .jlcoverage.yml in the current directory).",
)
@click.version_option(__version__, "-V", "--version", prog_name="jlcoverage")
def cli(
    paths: tuple[str, ...],
    *,
    verbose: bool,
    lcov_file: str | None,
    config_file: str | None,
) -> None:
    """Print a line-coverage report for PATHS.

    PATHS may be source files or directories. With no PATHS, the package
    containing the current directory is reported (its src and test
    directories), or the current directory alone when no package is found.

    Example:
      jlcoverage
      jlcoverage src/ test/runtests.jl
      jlcoverage --lcov lcov.info
    """
    _configure_logging(verbose=verbose)
    config = _load_settings(config_file, lcov_file)
    run(list(paths), verbose=verbose, config=config)
