"""Column sizing and line rendering for tabular views."""
from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

from rich.markup import escape

from .dataset import Field, Row

if TYPE_CHECKING:
    from .form import Form
    from .navigator import View


# ═══════════════════════════════════════════════════════════════════════════════
# WIDTHS
# ═══════════════════════════════════════════════════════════════════════════════

def compute_column_widths(
    rows: Sequence[Row],
    fields: Sequence[Field],
    max_column_width: int,
) -> list[int]:
    """Display width of every column.

    Each width is the largest of the field's declared width and every value
    seen in that column, capped at `max_column_width`. Without fields the
    column count comes from the first row.
    """
    if fields:
        ncols = len(fields)
    elif rows:
        ncols = len(rows[0])
    else:
        return []

    widths = [0] * ncols
    for i, fld in enumerate(fields):
        widths[i] = min(fld.declared_width, max_column_width)
    for row in rows:
        for i in range(min(ncols, len(row))):
            n = len(row.text(i))
            if widths[i] < n:
                widths[i] = min(n, max_column_width)
    return widths


# ═══════════════════════════════════════════════════════════════════════════════
# LINES
# ═══════════════════════════════════════════════════════════════════════════════

def render_line(
    columns: Sequence[str],
    widths: Sequence[int],
    line_budget: int,
    separator: str,
) -> str:
    """Render one fixed-width line.

    Values longer than their width are cut, shorter ones are padded with
    blanks, and non-printable characters become blanks. Output stops as soon
    as `line_budget` characters have been written: no wrapping, no ellipsis.
    """
    out: list[str] = []
    budget = max(line_budget, 0)

    for i, value in enumerate(columns[: len(widths)]):
        if not budget:
            break
        if i:
            take = separator[:budget]
            out.append(take)
            budget -= len(take)
            if not budget:
                break
        width = widths[i]
        piece = value[: min(len(value), width, budget)]
        out.append("".join(c if c.isprintable() else " " for c in piece))
        budget -= len(piece)
        pad = min(width - len(piece), budget)
        if pad > 0:
            out.append(" " * pad)
            budget -= pad

    return "".join(out)


def render_header(fields: Sequence[Field], widths: Sequence[int], line_budget: int, separator: str) -> str:
    return render_line([f.name for f in fields], widths, line_budget, separator)


def render_row(row: Row, widths: Sequence[int], line_budget: int, separator: str) -> str:
    return render_line([row.text(i) for i in range(len(row))], widths, line_budget, separator)


def quote(text: str) -> str:
    """Escape `text` for the form's markup; the form shows it back verbatim."""
    # escape() doubles a trailing backslash to guard a tag that might follow;
    # nothing follows in a form slot, so shield the end with a blank.
    return escape(text + " ")[:-1]


# ═══════════════════════════════════════════════════════════════════════════════
# LIST VIEW
# ═══════════════════════════════════════════════════════════════════════════════

def list_view(
    view: View,
    form: Form,
    line_budget: int,
    separator: str,
    max_column_width: int,
) -> None:
    """Fill `form` with the header and one list item per row of `view`."""
    widths = compute_column_widths(view.rows, view.fields, max_column_width)

    form.clear_list()
    header = render_header(view.fields, widths, line_budget, separator) if view.fields else ""
    form.set("subtle", quote(header))
    form.set("showsubtle", "1" if header else "0")

    for row in view.rows:
        form.append_list_item(quote(render_row(row, widths, line_budget, separator)))

    view.cursor = 0
    form.set("pos", "0")
