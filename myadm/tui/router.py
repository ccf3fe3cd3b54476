"""Main run loop, key dispatch and the screen/action registries."""
from __future__ import annotations

import logging
from functools import partial
from typing import TYPE_CHECKING, Any, Callable, Sequence

from ..db import MyadmError
from .components import list_view, quote
from .form import Form
from .keys import KEYS, Action, KeyBinding, bound_keys, lookup

if TYPE_CHECKING:
    from rich.console import Console

    from ..db import QueryExecutor
    from ..settings import Settings
    from .navigator import Navigator, View
    from .state import AppState

logger = logging.getLogger(__name__)

ROOT_VIEW = "databases"


class Router:
    """Main loop with mode-scoped key dispatch.

    One iteration: draw the active view, block on one key, dispatch the
    matching action to completion. Library errors raised by an action are
    turned into a status message; they never leave the loop.
    """

    def __init__(
        self,
        console: Console,
        settings: Settings,
        state: AppState,
        nav: Navigator,
        executor: QueryExecutor,
        bindings: Sequence[KeyBinding] = KEYS,
        form_factory: Callable[[Console], Form] = Form,
    ):
        """Initialize router with dependencies.

        Args:
            console: Rich Console the forms draw on
            settings: Application settings
            state: Session state (running flag)
            nav: View stack
            executor: Query executor bound to the server connection
            bindings: Ordered key binding table
            form_factory: Builds the form of every new view
        """
        self.console = console
        self.settings = settings
        self.state = state
        self.nav = nav
        self.executor = executor
        self.bindings = bindings
        self.form_factory = form_factory

    # ── views ──────────────────────────────────────────────────────

    def screen(self, name: str) -> Callable[[View], None]:
        """Render function for mode `name`, bound to this router."""
        screen_fn = SCREENS.get(name)
        if screen_fn is None:
            raise KeyError(f"Unknown screen '{name}'")
        return partial(screen_fn, self)

    def open(self, name: str, **scope: str) -> View:
        view = self.nav.open(name, self.screen(name), **scope)
        self.state.add_to_history(name)
        logger.info("open %s %s", name, scope or "")
        return view

    def start(self) -> View:
        """Open the root view. A failure here is fatal for the caller."""
        return self.open(ROOT_VIEW)

    def form(self, view: View) -> Form:
        if view.form is None:
            view.form = self.form_factory(self.console)
        return view.form

    def show(
        self,
        view: View,
        title: str,
        info: str,
        max_column_width: int | None = None,
    ) -> None:
        """Project `view`'s dataset into its form and set the title/info slots.

        `title` and `info` are plain text; they are quoted here.
        """
        form = self.form(view)
        list_view(
            view,
            form,
            line_budget=self.console.width,
            separator=self.settings.MYADM_FIELD_SEPARATOR,
            max_column_width=max_column_width or self.settings.MYADM_MAX_COLUMN_WIDTH,
        )
        form.set("title", quote(title))
        form.set("info", quote(info))

    # ── status line ────────────────────────────────────────────────

    def message(self, text: str) -> None:
        if self.nav.depth():
            self.form(self.nav.current()).set("status", quote(text))

    def ask(self, message: str, opts: str = "yn") -> str:
        return self.form(self.nav.current()).ask(message, opts)

    def confirm(self, message: str) -> bool:
        return self.ask(message, "yn") == "y"

    # ── loop ───────────────────────────────────────────────────────

    def run(self) -> None:
        """Run the main loop until the quit action clears `state.running`."""
        while self.state.running:
            view = self.nav.current()
            form = self.form(view)
            form.set("pos", str(view.cursor))
            form.draw()
            try:
                key = form.read_key(bound_keys(self.bindings, view.name))
            except KeyboardInterrupt:
                key = "c-c"
            self.handle_key(key)

    def handle_key(self, key: str | None) -> KeyBinding | None:
        """Dispatch one captured key against the active view's mode.

        Returns:
            The binding that handled the key, or None if it was ignored
        """
        binding = lookup(self.bindings, self.nav.current().name, key)
        if binding is None:
            return None
        self.message("")
        self.dispatch(binding.action, binding.arg)
        return binding

    def dispatch(self, action: Action, arg: Any = None) -> None:
        handler = ACTIONS.get(action)
        if handler is None:
            logger.warning("no handler registered for %s", action)
            return
        try:
            handler(self, arg)
        except MyadmError as exc:
            logger.warning("%s failed: %s", action.value, exc)
            self.message(str(exc))

    def close(self) -> None:
        """Release every view and the server connection."""
        released = self.nav.drain()
        logger.info("closing: released %d view(s), history=%s", released, self.state.session_history)
        self.executor.close()


# Screen registry - maps mode names to render functions
SCREENS: dict[str, Callable[[Router, View], None]] = {}

# Action registry - maps actions to handlers taking (router, arg)
ACTIONS: dict[Action, Callable[[Router, Any], None]] = {}


def register_screen(name: str):
    """Decorator to register the render function of a mode.

    Usage:
        @register_screen("tables")
        def show_tables(router: Router, view: View) -> None:
            ...
    """
    def decorator(fn: Callable[[Router, View], None]):
        SCREENS[name] = fn
        return fn
    return decorator


def register_action(action: Action):
    """Decorator to register the handler of an action."""
    def decorator(fn: Callable[[Router, Any], None]):
        ACTIONS[action] = fn
        return fn
    return decorator
