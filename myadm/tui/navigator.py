"""View stack: the navigation history of the browser."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable

from .dataset import Field, Row, TabularDataset

if TYPE_CHECKING:
    from .form import Form


@dataclass
class View:
    """One navigational screen.

    `choice` is a private copy of the row that was selected in the parent view
    when this view was opened, so refreshing the parent never changes it.
    `scope` carries names inherited down the stack (e.g. the open database).
    """

    name: str
    render: Callable[[View], None] | None = None
    dataset: TabularDataset = field(default_factory=TabularDataset)
    choice: Row | None = None
    cursor: int = 0
    scope: dict[str, str] = field(default_factory=dict)
    form: Form | None = None

    @property
    def rows(self) -> list[Row]:
        return self.dataset.rows

    @property
    def fields(self) -> list[Field]:
        return self.dataset.fields

    @property
    def nitems(self) -> int:
        return len(self.dataset.rows)

    def selected(self) -> Row | None:
        if 0 <= self.cursor < self.nitems:
            return self.dataset.rows[self.cursor]
        return None


class Navigator:
    """Stack-based navigation over views.

    - Push on open: navigating forward always pushes a brand-new view
    - Pop on back: returns to the previous view, the root view is never popped
    - Refresh: re-renders the active view in place
    """

    def __init__(self):
        self.stack: list[View] = []

    def open(self, name: str, render: Callable[[View], None], **scope: str) -> View:
        """Push a new view named `name` and populate it with `render`.

        The row selected in the current view is copied into the new view's
        `choice`. If `render` raises, the new view is discarded and the
        previous view stays active untouched.

        Args:
            name: Mode name of the new view
            render: Callable filling the view's dataset and form
            **scope: Names added to the inherited scope
        """
        parent = self.stack[-1] if self.stack else None
        selected = parent.selected() if parent else None
        view = View(
            name=name,
            render=render,
            choice=selected.copy() if selected else None,
            scope={**(parent.scope if parent else {}), **scope},
        )
        self.stack.append(view)
        try:
            render(view)
        except Exception:
            self.stack.pop()
            raise
        return view

    def back(self) -> View | None:
        """Go back to the previous view.

        Returns:
            The view that was popped, or None if at root
        """
        if len(self.stack) > 1:
            return self.stack.pop()
        return None

    def refresh(self) -> View:
        """Rebuild the active view's data, keeping a nonzero cursor."""
        view = self.current()
        cursor = view.cursor
        if view.render is not None:
            view.render(view)
        if cursor:
            view.cursor = min(cursor, max(view.nitems - 1, 0))
        return view

    def select(self, delta: int) -> int:
        """Move the active view's cursor by `delta`, clamped to its rows.

        Returns:
            The new cursor position
        """
        view = self.current()
        if not view.nitems:
            return view.cursor
        view.cursor = max(0, min(view.cursor + delta, view.nitems - 1))
        return view.cursor

    def selected(self) -> Row | None:
        if not self.stack:
            return None
        return self.current().selected()

    def current(self) -> View:
        return self.stack[-1]

    def drain(self) -> int:
        """Pop every view, root included. Used on exit.

        Returns:
            Number of views released
        """
        n = len(self.stack)
        self.stack.clear()
        return n

    def depth(self) -> int:
        return len(self.stack)
