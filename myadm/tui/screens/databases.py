"""Databases view: the root of the navigation stack."""
from __future__ import annotations

from typing import TYPE_CHECKING

from ..dataset import TabularDataset
from ..router import register_screen

if TYPE_CHECKING:
    from ..navigator import View
    from ..router import Router


@register_screen("databases")
def show_databases(router: Router, view: View) -> None:
    result = router.executor.execute("SHOW DATABASES")
    view.dataset = TabularDataset.from_result(result)
    router.show(
        view,
        title=f"Databases in `{router.executor.host}`",
        info=f"{view.nitems} DB(s)",
    )
