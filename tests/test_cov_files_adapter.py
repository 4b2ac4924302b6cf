"""Tests for CovFileAdapter (adapters/cov_files.py)."""

from __future__ import annotations

from pathlib import Path

import pytest

from jlcoverage.adapters.cov_files import CovFileAdapter, parse_cov_text
from jlcoverage.models import LineCoverage
from tests.conftest import cov_text, write_file, write_source

_SOURCE = """\
module Example
add_one(x) = x + 1

never_called() = nothing
end
"""


def _counts(lines: list[LineCoverage]) -> list[int | None]:
    return [line.execution_count for line in lines]


class TestCovFileAdapterIdentity:
    def test_name(self) -> None:
        assert CovFileAdapter().name == "cov"


class TestParseCovText:
    def test_parses_counts_and_untracked_marks(self) -> None:
        text = cov_text(_SOURCE, [None, 3, None, 0, None])
        assert parse_cov_text(text) == [None, 3, None, 0, None]

    def test_large_counts(self) -> None:
        assert parse_cov_text("123456789 x = 1\n") == [123456789]

    def test_malformed_count_raises(self) -> None:
        with pytest.raises(ValueError, match="line 2"):
            parse_cov_text("        - a\n      abc b\n")


class TestFindCovFiles:
    def test_matches_pid_and_plain_names_only(self, tmp_path: Path) -> None:
        source = write_file(tmp_path, "methods.jl", "x = 1\n")
        for name in [
            "methods.jl.cov",
            "methods.jl.100.cov",
            "methods.jl.7.cov",
            "more_methods.jl.100.cov",
            "methods.jl.bak.cov",
            "methods.jl.100.cov.orig",
        ]:
            write_file(tmp_path, name, "        1 x = 1\n")

        found = [p.name for p in CovFileAdapter().find_cov_files(source)]

        assert found == ["methods.jl.100.cov", "methods.jl.7.cov", "methods.jl.cov"]


class TestCovFileLoad:
    def test_load_single_record(self, tmp_path: Path) -> None:
        source = write_source(tmp_path, "Example.jl", _SOURCE, [None, 3, None, 0, None])
        lines = CovFileAdapter().load(source)
        assert _counts(lines) == [None, 3, None, 0, None]
        assert [line.line_number for line in lines] == [1, 2, 3, 4, 5]

    def test_accepts_string_path(self, tmp_path: Path) -> None:
        source = write_source(tmp_path, "Example.jl", _SOURCE, [None, 3, None, 0, None])
        assert len(CovFileAdapter().load(str(source))) == 5

    def test_merges_records_from_several_processes(self, tmp_path: Path) -> None:
        source = write_file(tmp_path, "Example.jl", _SOURCE)
        write_file(tmp_path, "Example.jl.11.cov", cov_text(_SOURCE, [None, 3, None, 0, None]))
        write_file(tmp_path, "Example.jl.22.cov", cov_text(_SOURCE, [None, 2, None, 0, 1]))

        assert _counts(CovFileAdapter().load(source)) == [None, 5, None, 0, 1]

    def test_short_record_pads_with_untracked(self, tmp_path: Path) -> None:
        source = write_file(tmp_path, "Example.jl", _SOURCE)
        write_file(tmp_path, "Example.jl.1.cov", "        - module Example\n        4 add_one\n")

        assert _counts(CovFileAdapter().load(source)) == [None, 4, None, None, None]

    def test_record_longer_than_source_is_truncated(self, tmp_path: Path) -> None:
        source = write_file(tmp_path, "Example.jl", "x = 1\n")
        write_file(tmp_path, "Example.jl.1.cov", "        1 x = 1\n        0 y = 2\n")

        assert _counts(CovFileAdapter().load(source)) == [1]

    def test_missing_record_returns_empty(self, tmp_path: Path) -> None:
        source = write_file(tmp_path, "Example.jl", _SOURCE)
        assert CovFileAdapter().load(source) == []

    def test_malformed_record_raises(self, tmp_path: Path) -> None:
        source = write_file(tmp_path, "Example.jl", "x = 1\n")
        write_file(tmp_path, "Example.jl.1.cov", "  garbage x = 1\n")

        with pytest.raises(ValueError, match="Malformed coverage file"):
            CovFileAdapter().load(source)

    def test_reads_fresh_data_each_call(self, tmp_path: Path) -> None:
        source = write_source(tmp_path, "Example.jl", _SOURCE, [None, 0, None, 0, None])
        adapter = CovFileAdapter()
        assert _counts(adapter.load(source)) == [None, 0, None, 0, None]

        write_file(tmp_path, "Example.jl.4242.cov", cov_text(_SOURCE, [None, 1, None, 1, None]))
        assert _counts(adapter.load(source)) == [None, 1, None, 1, None]
