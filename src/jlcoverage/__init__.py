"""jlcoverage: line-coverage reports for Julia packages."""

__version__ = "0.1.0"
