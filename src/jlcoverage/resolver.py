"""Scope resolution: turn user-supplied paths into the source files to report on.

Explicit paths are expanded (directories recursively) and shown relative to the
working directory. With no paths, the project root is discovered by walking up
from the working directory to the nearest marker file, and the root's source
and test directories are scanned instead.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from jlcoverage.config import ProjectConfig

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator, Sequence

logger = logging.getLogger(__name__)


# ── Result types ─────────────────────────────────────────────────


@dataclass(frozen=True)
class SourceEntry:
    """A source file in scope and the path it is reported under."""

    source_path: str
    display_path: str


@dataclass(frozen=True)
class ResolutionWarning:
    """A requested path that could not be resolved and was skipped."""

    path: str
    """Absolute form of the missing path."""

    @property
    def message(self) -> str:
        return f"{self.path} not found. Skipping..."


@dataclass
class Resolution:
    """Outcome of resolving a list of paths."""

    entries: list[SourceEntry] = field(default_factory=list)
    warnings: list[ResolutionWarning] = field(default_factory=list)


@dataclass(frozen=True)
class RootFound:
    path: Path


@dataclass(frozen=True)
class RootNotFound:
    pass


RootSearchResult = RootFound | RootNotFound


# ── Helpers ──────────────────────────────────────────────────────


def _raise_walk_error(error: OSError) -> None:
    raise error


def _check_path_types(paths: Sequence[object]) -> None:
    if isinstance(paths, (str, bytes, os.PathLike)):
        raise TypeError(
            f"paths must be a sequence of paths, not a single {type(paths).__name__}: {paths!r}"
        )
    for path in paths:
        if not isinstance(path, (str, os.PathLike)):
            raise TypeError(
                f"paths must contain str or os.PathLike values, got {type(path).__name__}: "
                f"{path!r}"
            )


def _has_extension(name: str, extensions: Sequence[str]) -> bool:
    return any(name.endswith(ext) for ext in extensions)


def walk_source_files(
    directory: Path,
    extensions: Sequence[str],
    *,
    recursive: bool = True,
) -> Iterator[Path]:
    """Yield source files under *directory* in a stable order.

    Files of a directory come first, sorted by code point, followed by the
    files of each subdirectory, visited in sorted order.
    """
    for dirpath, dirnames, filenames in os.walk(directory, onerror=_raise_walk_error):
        if recursive:
            dirnames.sort()
        else:
            dirnames.clear()
        for name in sorted(filenames):
            if _has_extension(name, extensions):
                yield Path(dirpath) / name


def _relative_to(path: Path, base: Path) -> str | None:
    try:
        return str(path.relative_to(base))
    except ValueError:
        return None


def find_project_root(start: Path, markers: Sequence[str]) -> RootSearchResult:
    """Search *start* and its ancestors for the first directory holding a marker file."""
    for directory in (start, *start.parents):
        if any((directory / marker).is_file() for marker in markers):
            return RootFound(directory)
    return RootNotFound()


# ── Resolution ───────────────────────────────────────────────────


def _resolve_explicit(
    paths: Sequence[str | os.PathLike[str]],
    cwd: Path,
    project: ProjectConfig,
    log: Callable[..., None],
) -> Resolution:
    resolution = Resolution()

    for raw_path in paths:
        given = os.fspath(raw_path)
        absolute = Path(os.path.normpath(cwd / given))
        log("Resolving %s", absolute)

        if absolute.is_dir():
            for source in walk_source_files(absolute, project.extensions):
                display = _relative_to(source, cwd)
                if display is None:
                    display = os.path.join(given, str(source.relative_to(absolute)))
                resolution.entries.append(SourceEntry(str(source), display))
        elif absolute.exists():
            display = _relative_to(absolute, cwd)
            resolution.entries.append(SourceEntry(str(absolute), display or given))
        else:
            resolution.warnings.append(ResolutionWarning(str(absolute)))

    return resolution


def _resolve_project(cwd: Path, project: ProjectConfig, log: Callable[..., None]) -> Resolution:
    resolution = Resolution()

    found = find_project_root(cwd, project.markers)
    if isinstance(found, RootNotFound):
        log("No project root found above %s; scanning it alone", cwd)
        for source in walk_source_files(cwd, project.extensions, recursive=False):
            resolution.entries.append(SourceEntry(str(source), str(source.relative_to(cwd))))
        return resolution

    root = found.path
    log("Found project root at %s", root)
    for source_dir in project.source_dirs:
        directory = root / source_dir
        if not directory.is_dir():
            continue
        for source in walk_source_files(directory, project.extensions):
            resolution.entries.append(SourceEntry(str(source), str(source.relative_to(root))))

    return resolution


def resolve(
    paths: Sequence[str | os.PathLike[str]],
    *,
    cwd: str | Path | None = None,
    project: ProjectConfig | None = None,
    verbose: bool = False,
) -> Resolution:
    """Resolve *paths* into an ordered list of source files.

    Args:
        paths: Files or directories to report on. Empty means the whole project.
        cwd: Directory relative paths and display paths are based on. Defaults
            to the process working directory, which is only read.
        project: Project layout settings (markers, source dirs, extensions).
        verbose: Log resolution progress at INFO instead of DEBUG.

    Returns:
        The resolved entries plus one warning per path that does not exist.

    Raises:
        TypeError: If *paths* is a single path rather than a sequence, or an
            element of it is not a path-like value.
    """
    _check_path_types(paths)

    base = Path(cwd) if cwd is not None else Path.cwd()
    base = Path(os.path.abspath(base))
    project = project or ProjectConfig()
    log = logger.info if verbose else logger.debug

    if paths:
        resolution = _resolve_explicit(paths, base, project, log)
    else:
        resolution = _resolve_project(base, project, log)

    log("Resolved %d source file(s)", len(resolution.entries))
    return resolution
