"""Generic row/column container built from one query result."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterable

if TYPE_CHECKING:
    from ..db import QueryResult

@dataclass(frozen=True)
class Field:
    """Column descriptor: name and the width it declares for itself."""

    name: str
    declared_width: int


@dataclass(frozen=True)
class Row:
    """One fetched record.

    Columns are raw bytes (binary safe, SQL NULL becomes b""). `position` is
    the row's index inside its view and is what the UI cursor addresses.
    """

    columns: tuple[bytes, ...]
    position: int = 0

    def __len__(self) -> int:
        return len(self.columns)

    def text(self, index: int) -> str:
        """Column `index` decoded for display."""
        return self.columns[index].decode("utf-8", "replace")

    def copy(self) -> Row:
        return Row(columns=tuple(bytes(c) for c in self.columns), position=self.position)


@dataclass
class TabularDataset:
    fields: list[Field] = field(default_factory=list)
    rows: list[Row] = field(default_factory=list)

    @classmethod
    def from_result(cls, result: QueryResult, with_fields: bool = False) -> TabularDataset:
        """Build fields and rows from an executed query.

        Args:
            result: anything exposing `fields` (name/length pairs) and iterable rows
            with_fields: whether to keep the column metadata (records views only)
        """
        fields = (
            [
                Field(name=f.name, declared_width=f.length)
                for f in result.fields
            ]
            if with_fields
            else []
        )
        rows = list(_rows(result))
        return cls(fields=fields, rows=rows)


def _rows(raw_rows: Iterable) -> Iterable[Row]:
    for pos, raw in enumerate(raw_rows):
        yield Row(
            columns=tuple(_column(c) for c in raw),
            position=pos,
        )


def _column(value) -> bytes:
    if value is None:
        return b""
    if isinstance(value, str):
        return value.encode("utf-8")
    return bytes(value)
