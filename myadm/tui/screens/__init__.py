"""Screen modules for the TUI, one per view mode."""
from __future__ import annotations

# Import all screen modules to register them with the router
from . import databases, records, tables, text

__all__ = [
    "databases",
    "records",
    "tables",
    "text",
]
