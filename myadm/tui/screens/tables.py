"""Tables view: the tables of the database chosen in the parent view."""
from __future__ import annotations

from typing import TYPE_CHECKING

from ...db import MyadmError
from ..dataset import TabularDataset
from ..router import register_screen

if TYPE_CHECKING:
    from ..navigator import View
    from ..router import Router


@register_screen("tables")
def show_tables(router: Router, view: View) -> None:
    """List the tables of `view.scope["database"]`.

    The database is selected on the connection every time, so a refresh after
    coming back from another database still lists the right tables.
    """
    database = view.scope.get("database") or (view.choice.text(0) if view.choice else "")
    if not database:
        raise MyadmError("No database selected.")

    router.executor.select_db(database)
    result = router.executor.execute("SHOW TABLES")
    view.dataset = TabularDataset.from_result(result)
    router.show(
        view,
        title=f"Tables in `{database}`",
        info=f"{view.nitems} table(s)",
    )
