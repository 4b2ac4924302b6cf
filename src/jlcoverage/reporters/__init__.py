"""Report renderers."""

from jlcoverage.reporters.text import format_report, format_row

__all__ = ["format_report", "format_row"]
