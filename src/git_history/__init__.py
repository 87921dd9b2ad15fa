"""Git repository history analyzer with DuckDB."""

__version__ = "0.1.0"
