"""Handlers for the actions of the key binding table."""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..db import MyadmError
from ..editor import (
    EditResult,
    build_alter_statement,
    build_update_statement,
    edit_and_commit,
    find_unique_key,
)
from .keys import Action
from .router import register_action

if TYPE_CHECKING:
    from .router import Router

logger = logging.getLogger(__name__)


@register_action(Action.QUIT)
def quit_browser(router: Router, confirm: bool | None) -> None:
    """Stop the run loop, asking first when `confirm` is set and enabled."""
    if confirm and router.settings.MYADM_CONFIRM_QUIT:
        if router.ask("Do you want to quit ([y]/n)?", "yn") != "y":
            return
    router.state.stop()


@register_action(Action.BACK)
def view_previous(router: Router, _arg=None) -> None:
    popped = router.nav.back()
    if popped is not None:
        logger.info("back from %s", popped.name)


@register_action(Action.SELECT)
def item_select(router: Router, delta: int | None) -> None:
    router.nav.select(int(delta or 0))


@register_action(Action.RELOAD)
def reload_view(router: Router, _arg=None) -> None:
    router.nav.refresh()


@register_action(Action.OPEN_DATABASE)
def open_database(router: Router, _arg=None) -> None:
    choice = router.nav.selected()
    if choice is None:
        router.message("No database selected.")
        return
    router.open("tables", database=choice.text(0))


@register_action(Action.OPEN_TABLE)
def open_table(router: Router, _arg=None) -> None:
    choice = router.nav.selected()
    if choice is None:
        router.message("No table selected.")
        return
    router.open("records", table=choice.text(0))


@register_action(Action.SHOW_SCHEMA)
def show_schema(router: Router, _arg=None) -> None:
    table = _target_table(router)
    if table:
        router.open("text", table=table)


@register_action(Action.EDIT_RECORD)
def edit_record(router: Router, _arg=None) -> None:
    view = router.nav.current()
    row = view.selected()
    if row is None:
        router.message("No record selected.")
        return
    table = view.scope.get("table", "")
    key = find_unique_key(router.executor, table)
    if key is None:
        router.message(f"No unique key found for `{table}`.")
        return
    statement = build_update_statement(row, view.fields, table, key)
    _commit(router, statement, "Record updated.")


@register_action(Action.EDIT_SCHEMA)
def edit_schema(router: Router, _arg=None) -> None:
    table = _target_table(router)
    if table:
        _commit(router, build_alter_statement(router.executor, table), "Table altered.")


def _target_table(router: Router) -> str | None:
    """Table the action applies to: the selected row in `tables`, else the view's scope."""
    view = router.nav.current()
    if view.name == "tables":
        choice = view.selected()
        if choice is None:
            router.message("No table selected.")
            return None
        return choice.text(0)
    table = view.scope.get("table")
    if not table:
        router.message("No table selected.")
    return table


def _commit(router: Router, statement: str, success: str) -> None:
    result = edit_and_commit(
        router.executor,
        statement,
        editor=router.settings.EDITOR,
        confirm=router.confirm,
    )
    if result is EditResult.UNCHANGED:
        router.message("No changes.")
    elif result is EditResult.ABANDONED:
        router.message("Changes discarded.")
    else:
        router.state.commits += 1
        try:
            router.nav.refresh()
        except MyadmError as exc:
            router.message(f"{success} Reload failed: {exc}")
            return
        router.message(success)
