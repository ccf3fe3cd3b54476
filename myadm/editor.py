"""Record and schema editing through the operator's $EDITOR.

A statement is synthesized from the selected row (UPDATE) or from the table
definition (ALTER), written to a temporary file, handed to the editor and,
if the file changed, sent to the server as typed.
"""
from __future__ import annotations

import logging
import os
import signal
import subprocess
import tempfile
from contextlib import contextmanager
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Iterator, Sequence

from .db import MyadmError, QueryError, quote_ident

if TYPE_CHECKING:
    from .db import QueryExecutor
    from .tui.dataset import Field, Row

logger = logging.getLogger(__name__)

ESCAPE_CHAR = "\\"

# Dispositions swapped for the lifetime of the editor child.
EDITOR_SIGNALS = tuple(
    getattr(signal, name) for name in ("SIGINT", "SIGTERM", "SIGWINCH") if hasattr(signal, name)
)


class EditError(MyadmError):
    """Editing failed: no unique key or definition, or the temp file or editor broke."""


class EditResult(Enum):
    UNCHANGED = "unchanged"
    APPLIED = "applied"
    ABANDONED = "abandoned"


# ═══════════════════════════════════════════════════════════════════════════════
# ESCAPING
# ═══════════════════════════════════════════════════════════════════════════════

def escape(text: str, delimiter: str, skip: str | None = None) -> tuple[str, int]:
    """Prefix every `delimiter` in `text` with a backslash.

    An occurrence directly preceded by `skip` is taken as already escaped and
    left alone, so escaping twice with the same `skip` changes nothing.

    Returns:
        (escaped text, number of characters added)
    """
    out: list[str] = []
    added = 0
    prev = ""
    for ch in text:
        if ch == delimiter and not (skip and prev == skip):
            out.append(ESCAPE_CHAR)
            added += 1
        out.append(ch)
        prev = ch
    return "".join(out), added


def quote_value(value: str) -> str:
    """Escape `value` for use inside a single-quoted MySQL string literal.

    Backslashes go first so the ones added for quotes are not doubled.
    """
    value, _ = escape(value, ESCAPE_CHAR)
    value, _ = escape(value, "'")
    return value.replace("\0", "\\0")


def sql_literal(value: bytes) -> str:
    """MySQL literal reproducing `value` byte for byte.

    Valid UTF-8 becomes a quoted string; anything else (BLOBs, latin1 text,
    binary keys) becomes a hex literal.
    """
    try:
        text = value.decode("utf-8")
    except UnicodeDecodeError:
        return f"X'{value.hex()}'"
    return f"'{quote_value(text)}'"


# ═══════════════════════════════════════════════════════════════════════════════
# STATEMENTS
# ═══════════════════════════════════════════════════════════════════════════════

def build_update_statement(row: Row, fields: Sequence[Field], table: str, unique_key: str) -> str:
    """UPDATE statement rewriting every column of `row`, keyed on `unique_key`.

    Raises:
        EditError: `unique_key` is not one of `fields`
    """
    names = [f.name for f in fields]
    if unique_key not in names:
        raise EditError(f"Unique key `{unique_key}` is not a column of `{table}`.")
    key_index = names.index(unique_key)

    assignments = ", ".join(
        f"{quote_ident(name)} = {sql_literal(row.columns[i])}" for i, name in enumerate(names)
    )
    return (
        f"UPDATE {quote_ident(table)} SET  {assignments} "
        f"WHERE {quote_ident(unique_key)} = {sql_literal(row.columns[key_index])}"
    )


def find_unique_key(executor: QueryExecutor, table: str) -> str | None:
    """Column of the first single-column unique index of `table`.

    The primary key wins when it is a single column. Multi-column and
    functional indexes are not eligible.
    """
    result = executor.execute(f"SHOW INDEX FROM {quote_ident(table)}")
    non_unique = result.column("Non_unique")
    key_name = result.column("Key_name")
    column_name = result.column("Column_name")

    keys: dict[str, list[str | None]] = {}
    for raw in result.rows:
        if _text(raw[non_unique]) != "0":
            continue
        col = raw[column_name]
        keys.setdefault(_text(raw[key_name]), []).append(_text(col) if col is not None else None)

    single = {name: cols[0] for name, cols in keys.items() if len(cols) == 1 and cols[0]}
    if "PRIMARY" in single:
        return single["PRIMARY"]
    return next(iter(single.values()), None)


def column_definitions(create_statement: str) -> list[str]:
    """Column definition lines of a SHOW CREATE TABLE statement."""
    lines = (line.lstrip(" ") for line in create_statement.split("\n"))
    return [line.rstrip() for line in lines if line.startswith("`")]


def build_alter_statement(executor: QueryExecutor, table: str) -> str:
    """ALTER TABLE statement with one MODIFY clause per column of `table`.

    Raises:
        EditError: the server returned no definition for `table`
    """
    result = executor.execute(f"SHOW CREATE TABLE {quote_ident(table)}")
    if not result.rows or len(result.rows[0]) < 2:
        raise EditError(f"No definition found for `{table}`.")

    definitions = column_definitions(_text(result.rows[0][1]))
    if not definitions:
        raise EditError(f"No column definitions found for `{table}`.")

    clauses = ",\n".join(f" MODIFY {d.rstrip(',')}" for d in definitions)
    return f"ALTER TABLE {quote_ident(table)}\n{clauses}"


def _text(value: bytes | str | None) -> str:
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8", "surrogateescape")
    return str(value)


# ═══════════════════════════════════════════════════════════════════════════════
# EDITOR ROUND TRIP
# ═══════════════════════════════════════════════════════════════════════════════

@contextmanager
def default_signals(signums: Sequence[int] = EDITOR_SIGNALS) -> Iterator[None]:
    """Run the block with default dispositions for `signums`.

    The previous handlers are put back on every exit path.
    """
    saved: dict[int, object] = {}
    try:
        for signum in signums:
            saved[signum] = signal.signal(signum, signal.SIG_DFL)
        yield
    finally:
        for signum, handler in saved.items():
            signal.signal(signum, handler if handler is not None else signal.SIG_DFL)


def run_editor(path: str | os.PathLike, editor: str) -> int:
    """Open `path` in `editor` through the shell and wait for it to exit.

    Returns:
        The editor's exit status
    """
    env = {**os.environ, "EDITOR": editor}
    logger.info("editing %s with %s", path, editor)
    with default_signals():
        completed = subprocess.run(["sh", "-c", f'$EDITOR "{os.fspath(path)}"'], env=env)
    return completed.returncode


def _stamp(path: Path) -> tuple[int, int]:
    try:
        st = path.stat()
    except OSError as exc:
        raise EditError(f"Temporary file is gone: {exc.strerror or exc}") from exc
    return st.st_size, st.st_mtime_ns


def _read_statement(path: Path) -> str:
    # Bytes that are not UTF-8 are carried as surrogates and sent back unchanged.
    try:
        return path.read_bytes().decode("utf-8", "surrogateescape").strip()
    except OSError as exc:
        raise EditError(f"Cannot read temporary file: {exc.strerror or exc}") from exc


def write_statement(statement: str) -> Path:
    """Write `statement` to a fresh temporary file.

    Raises:
        EditError: the file could not be created or written
    """
    try:
        fd, name = tempfile.mkstemp(prefix="myadm-", suffix=".sql")
        with os.fdopen(fd, "w", encoding="utf-8", errors="surrogateescape") as fh:
            fh.write(statement)
            fh.write("\n")
    except OSError as exc:
        logger.error("cannot write temporary file: %s", exc)
        raise EditError(f"Cannot create temporary file: {exc.strerror or exc}") from exc
    return Path(name)


def edit_and_commit(
    executor: QueryExecutor,
    statement: str,
    *,
    editor: str,
    confirm: Callable[[str], bool],
    run: Callable[[Path, str], int] = run_editor,
) -> EditResult:
    """Let the operator edit `statement`, then submit it.

    The file is compared by size and modification time around each editor
    session; an untouched file is never submitted. When the server rejects
    the statement, `confirm` decides between editing again and giving up.
    The temporary file is removed on every exit path.
    """
    path = write_statement(statement)
    try:
        while True:
            before = _stamp(path)
            try:
                run(path, editor)
            except OSError as exc:
                logger.error("cannot run editor %s: %s", editor, exc)
                raise EditError(f"Cannot run editor: {exc.strerror or exc}") from exc
            if _stamp(path) == before:
                logger.info("statement left unchanged")
                return EditResult.UNCHANGED

            sql = _read_statement(path)
            try:
                executor.execute(sql)
            except QueryError as exc:
                if confirm(f"{exc}. Continue editing ([y]/n)?"):
                    continue
                logger.info("edit abandoned after error: %s", exc)
                return EditResult.ABANDONED
            logger.info("statement applied")
            return EditResult.APPLIED
    finally:
        path.unlink(missing_ok=True)
