"""TUI (Terminal User Interface) module for myadm.

A stack of views over query results, driven one key at a time.
"""
from .navigator import Navigator, View
from .router import Router
from .state import AppState

# Register action handlers and screens with the router
from . import actions, screens  # noqa: E402,F401

__all__ = ["AppState", "Navigator", "Router", "View"]
