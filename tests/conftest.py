"""Shared fixtures: a small Julia package with recorded ``.cov`` files."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path


# ── File creation helpers ────────────────────────────────────────


def write_file(root: Path, rel: str, content: str) -> Path:
    """Write *content* to a file under *root*."""
    f = root / rel
    f.parent.mkdir(parents=True, exist_ok=True)
    f.write_text(content, encoding="utf-8")
    return f


def cov_text(source: str, counts: Sequence[int | None]) -> str:
    """Render *source* the way Julia writes a ``.cov`` file."""
    lines = source.splitlines()
    assert len(lines) == len(counts)
    return "".join(
        f"{'-' if count is None else count:>9} {line}\n" for line, count in zip(lines, counts)
    )


def write_source(root: Path, rel: str, source: str, counts: Sequence[int | None] | None) -> Path:
    """Write a source file and, when *counts* is given, its ``.cov`` record."""
    path = write_file(root, rel, source)
    if counts is not None:
        write_file(root, f"{rel}.4242.cov", cov_text(source, counts))
    return path


# ── Sample package ───────────────────────────────────────────────

_MODULE_SRC = """\
module TestPackage
export add_one, add_two, unused_one, unused_two
include("methods.jl")
include("more_methods.jl")
end
"""

_METHODS_SRC = '''\
"""Add one."""
function add_one(x)
    return x + 1
end

add_two(x) = x + 2

unused_one(x) = x - 1
'''

_MORE_METHODS_SRC = """\
function unused_two(x)
    return x - 2
end

unused_three(x) = x - 3
"""

_RUNTESTS_SRC = """\
using Test
using TestPackage

@test add_one(1) == 2
"""

PACKAGE_REPORT = """\
-------------------------------------------------------------------------------
File                                  Lines of Code     Missed   Coverage
-------------------------------------------------------------------------------
src/TestPackage.jl                                1          0     100.0%
src/methods.jl                                    3          1      66.7%
src/more_methods.jl                               2          2       0.0%
test/runtests.jl                                  0          0        N/A
-------------------------------------------------------------------------------
TOTAL                                             6          3      50.0%
"""

METHODS_REPORT = """\
-------------------------------------------------------------------------------
File                                  Lines of Code     Missed   Coverage
-------------------------------------------------------------------------------
src/methods.jl                                    3          1      66.7%
-------------------------------------------------------------------------------
TOTAL                                             3          1      66.7%
"""

EMPTY_REPORT = """\
-------------------------------------------------------------------------------
File                                  Lines of Code     Missed   Coverage
-------------------------------------------------------------------------------
-------------------------------------------------------------------------------
TOTAL                                             0          0        N/A
"""


@pytest.fixture
def test_package(tmp_path: Path) -> Path:
    """Create ``TestPackage`` with coverage recorded for its src files only."""
    root = tmp_path / "TestPackage"
    write_file(root, "Project.toml", 'name = "TestPackage"\n')
    write_source(root, "src/TestPackage.jl", _MODULE_SRC, [None, None, 1, None, None])
    write_source(
        root,
        "src/methods.jl",
        _METHODS_SRC,
        [None, None, 2, None, None, 1, None, 0],
    )
    write_source(root, "src/more_methods.jl", _MORE_METHODS_SRC, [None, 0, None, None, 0])
    write_source(root, "test/runtests.jl", _RUNTESTS_SRC, None)
    return root
