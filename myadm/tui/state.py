"""Session state shared by the run loop and the action it dispatches."""
from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class AppState:
    """Application state for a single browser session.

    Created once at startup and owned by the router; nothing else holds it.
    """

    # Cleared by the quit action; the run loop exits when it is False.
    running: bool = True

    # Views visited, for the debug log
    session_history: list[str] = field(default_factory=list)

    # Number of statements committed through the external editor
    commits: int = 0

    def add_to_history(self, view: str) -> None:
        """Record a view visit in session history.

        Args:
            view: Mode name of the view that was opened
        """
        self.session_history.append(view)

    def stop(self) -> None:
        self.running = False
