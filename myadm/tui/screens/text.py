"""Schema view: the CREATE TABLE statement of a table, one line per item."""
from __future__ import annotations

from typing import TYPE_CHECKING

from ...db import MyadmError, quote_ident
from ..dataset import Row, TabularDataset
from ..router import register_screen

if TYPE_CHECKING:
    from ..navigator import View
    from ..router import Router


@register_screen("text")
def show_text(router: Router, view: View) -> None:
    database = view.scope.get("database", "")
    table = view.scope.get("table", "")
    if not table:
        raise MyadmError("No table selected.")

    result = router.executor.execute(f"SHOW CREATE TABLE {quote_ident(table)}")
    if not result.rows:
        raise MyadmError(f"No definition found for `{table}`.")

    definition = result.rows[0][1] or b""
    if isinstance(definition, str):
        definition = definition.encode("utf-8")
    lines = definition.split(b"\n")
    view.dataset = TabularDataset(
        rows=[Row(columns=(line,), position=i) for i, line in enumerate(lines)]
    )
    source = f"{quote_ident(database)}.{quote_ident(table)}" if database else quote_ident(table)
    router.show(
        view,
        title=f"Schema of {source}",
        info=f"{view.nitems} line(s)",
        max_column_width=router.console.width,
    )
