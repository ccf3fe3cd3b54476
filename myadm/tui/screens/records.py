"""Records view: every row of one table, with a column header."""
from __future__ import annotations

from typing import TYPE_CHECKING

from ...db import MyadmError, quote_ident
from ..dataset import TabularDataset
from ..router import register_screen

if TYPE_CHECKING:
    from ..navigator import View
    from ..router import Router


@register_screen("records")
def show_records(router: Router, view: View) -> None:
    database = view.scope.get("database", "")
    table = view.scope.get("table") or (view.choice.text(0) if view.choice else "")
    if not table:
        raise MyadmError("No table selected.")

    source = f"{quote_ident(database)}.{quote_ident(table)}" if database else quote_ident(table)
    result = router.executor.execute(f"SELECT * FROM {source}")
    view.dataset = TabularDataset.from_result(result, with_fields=True)
    router.show(
        view,
        title=f"Records in {source}",
        info=f"{view.nitems} record(s)",
    )
