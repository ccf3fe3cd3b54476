"""myadm: a terminal browser for MySQL databases, tables and records."""

__version__ = "0.3.0"
