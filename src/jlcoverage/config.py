"""Configuration parsing from ``.jlcoverage.yml``."""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".jlcoverage.yml"

_ENV_VAR_RE = re.compile(r"\$\{(\w+)\}")

_COVERAGE_FORMATS = ("cov", "lcov")


class ConfigError(ValueError):
    """Raised when a configuration file cannot be used."""


def _env_lookup(match: re.Match[str]) -> str:
    name = match.group(1)
    if name not in os.environ:
        logger.warning("Environment variable %s is not set (referenced in config)", name)
    return os.environ.get(name, "")


def _expand_env(value: Any) -> Any:
    """Substitute ``${VAR}`` in every string of a parsed YAML value."""
    if isinstance(value, str):
        return _ENV_VAR_RE.sub(_env_lookup, value)
    if isinstance(value, dict):
        return {key: _expand_env(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_expand_env(item) for item in value]
    return value


@dataclass
class ProjectConfig:
    """Where source files live and how the project root is recognised."""

    markers: list[str] = field(default_factory=lambda: ["Project.toml", "JuliaProject.toml"])
    """File names that mark a project root."""

    source_dirs: list[str] = field(default_factory=lambda: ["src", "test"])
    """Directories under the project root scanned when no paths are given."""

    extensions: list[str] = field(default_factory=lambda: [".jl"])
    """Suffixes of source files picked up from directories."""


@dataclass
class CoverageConfig:
    """Which coverage producer to read records from."""

    format: str = "cov"
    """Record format: ``cov`` (sidecar ``.cov`` files) or ``lcov`` (tracefile)."""

    lcov_file: str = ""
    """LCOV tracefile path, used when ``format`` is ``lcov``."""

    base_dir: str = ""
    """Directory relative ``SF:`` entries are resolved against (default: tracefile dir)."""


@dataclass
class JlCoverageConfig:
    """Complete jlcoverage configuration."""

    project: ProjectConfig = field(default_factory=ProjectConfig)
    coverage: CoverageConfig = field(default_factory=CoverageConfig)
    raw: dict[str, Any] = field(default_factory=dict)
    """The raw parsed YAML."""


def _str_list(value: Any, default: list[str]) -> list[str]:
    if value is None:
        return list(default)
    if isinstance(value, str):
        return [value]
    if isinstance(value, list):
        return [str(item) for item in value]
    raise ConfigError(f"Expected a list of strings, got {type(value).__name__}")


def _section(raw: dict[str, Any], name: str) -> dict[str, Any]:
    section = raw.get(name, {})
    if not isinstance(section, dict):
        return {}
    return section


def parse_config(raw: dict[str, Any]) -> JlCoverageConfig:
    """Build a configuration object from already-parsed YAML data."""
    resolved = _expand_env(raw)
    defaults = ProjectConfig()

    project_raw = _section(resolved, "project")
    project = ProjectConfig(
        markers=_str_list(project_raw.get("markers"), defaults.markers),
        source_dirs=_str_list(project_raw.get("source_dirs"), defaults.source_dirs),
        extensions=_str_list(project_raw.get("extensions"), defaults.extensions),
    )

    coverage_raw = _section(resolved, "coverage")
    coverage = CoverageConfig(
        format=str(coverage_raw.get("format", "cov")).lower(),
        lcov_file=str(coverage_raw.get("lcov_file", "")),
        base_dir=str(coverage_raw.get("base_dir", "")),
    )

    return JlCoverageConfig(project=project, coverage=coverage, raw=resolved)


def load_config_file(path: str | Path) -> JlCoverageConfig:
    """Load configuration from an explicit YAML file.

    Raises:
        ConfigError: If the file is not valid YAML or not a mapping.
    """
    config_path = Path(path)
    try:
        parsed = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

    if parsed is None:
        parsed = {}
    if not isinstance(parsed, dict):
        raise ConfigError(f"{config_path} must contain a mapping at the top level")

    config = parse_config(parsed)
    if config.coverage.lcov_file and not Path(config.coverage.lcov_file).is_absolute():
        config.coverage.lcov_file = str(config_path.parent.resolve() / config.coverage.lcov_file)
    return config


def load_config(root: str | Path) -> JlCoverageConfig:
    """Load ``.jlcoverage.yml`` from *root*, falling back to defaults when absent."""
    config_path = Path(root) / CONFIG_FILENAME
    if not config_path.is_file():
        return JlCoverageConfig()

    logger.debug("Loading configuration from %s", config_path)
    return load_config_file(config_path)


def validate_config(config: JlCoverageConfig) -> list[str]:
    """Return a list of human-readable problems with *config* (empty when valid)."""
    errors: list[str] = []

    if not config.project.markers:
        errors.append("project.markers must name at least one file")

    if not config.project.extensions:
        errors.append("project.extensions must list at least one suffix")

    for ext in config.project.extensions:
        if not ext.startswith("."):
            errors.append(f"project.extensions entries must start with '.' (got: {ext})")

    if config.coverage.format not in _COVERAGE_FORMATS:
        errors.append(
            f"coverage.format must be one of {', '.join(_COVERAGE_FORMATS)} "
            f"(got: {config.coverage.format})"
        )

    if config.coverage.format == "lcov" and not config.coverage.lcov_file:
        errors.append("coverage.lcov_file is required when coverage.format is lcov")

    return errors
