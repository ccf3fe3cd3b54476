"""Unit tests for column sizing and line rendering."""
from __future__ import annotations

import pytest
from rich.text import Text

from myadm.tui.components import compute_column_widths, quote, render_header, render_line, render_row
from myadm.tui.dataset import Field, Row

SEP = " | "


def _rows(*values):
    return [Row(columns=tuple(v.encode() for v in r), position=i) for i, r in enumerate(values)]


def test_widths_take_widest_value():
    rows = _rows(("1", "short"), ("22", "a much longer value"))
    fields = [Field("id", 2), Field("name", 4)]

    assert compute_column_widths(rows, fields, 40) == [2, 19]


def test_widths_are_capped():
    rows = _rows(("x" * 50,))
    assert compute_column_widths(rows, [Field("c" * 30, 30)], 19) == [19]


def test_widths_without_fields_use_first_row():
    rows = _rows(("abc", "de"), ("a", "defgh"))
    assert compute_column_widths(rows, [], 19) == [3, 5]
    assert compute_column_widths([], [], 19) == []


@pytest.mark.parametrize("cap", [1, 3, 19])
def test_width_bounds_hold_for_every_column(cap):
    rows = _rows(("", "ab", "abcdefghijklmnopqrstuvwxyz"), ("abcd", "", "x"))
    widths = compute_column_widths(rows, [], cap)
    for i, width in enumerate(widths):
        assert width <= cap
        for row in rows:
            assert width >= min(len(row.text(i)), cap)


def test_render_line_pads_and_separates():
    assert render_line(["a", "bc"], [3, 2], 80, SEP) == "a   | bc"


def test_render_line_truncates_to_width():
    assert render_line(["abcdef", "x"], [3, 1], 80, SEP) == "abc | x"


def test_render_line_replaces_non_printable():
    assert render_line(["a\tb\nc"], [5], 80, SEP) == "a b c"


def test_render_line_stops_at_budget():
    assert render_line(["abc", "def"], [3, 3], 5, SEP) == "abc |"
    assert render_line(["abc", "def"], [3, 3], 3, SEP) == "abc"
    assert render_line(["abc"], [3], 0, SEP) == ""


@pytest.mark.parametrize("budget", [0, 1, 4, 7, 10, 200])
def test_render_line_never_exceeds_budget(budget):
    columns = ["x" * 30, "", "y" * 5, "z"]
    widths = [19, 4, 19, 1]
    assert len(render_line(columns, widths, budget, SEP)) <= budget


def test_render_header_and_row_align():
    fields = [Field("id", 2), Field("name", 4)]
    rows = _rows(("5", "O'Brien"))
    widths = compute_column_widths(rows, fields, 19)

    header = render_header(fields, widths, 80, SEP)
    line = render_row(rows[0], widths, 80, SEP)
    assert header == "id | name   "
    assert line == "5  | O'Brien"
    assert len(header) == len(line)


@pytest.mark.parametrize("text", ["plain", "[bold]not markup[/bold]", "a\\", "x [y] \\[z]"])
def test_quote_round_trips_through_markup(text):
    assert Text.from_markup(quote(text)).plain == text
