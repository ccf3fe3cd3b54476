from __future__ import annotations

import io
import os
import sys

import pytest


def _ensure_project_root_on_path() -> None:
    # When running via the venv's pytest entrypoint, the CWD is not guaranteed to
    # be on sys.path. Ensure the repository root (containing `myadm/`) is importable.
    project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
    if project_root not in sys.path:
        sys.path.insert(0, project_root)


_ensure_project_root_on_path()

from rich.console import Console  # noqa: E402

from myadm.db import QueryError, QueryResult, ResultField  # noqa: E402
from myadm.settings import Settings  # noqa: E402
from myadm.tui import AppState, Navigator, Router  # noqa: E402
from myadm.tui.form import Form  # noqa: E402


def make_result(names, rows) -> QueryResult:
    """Build a QueryResult the way the executor would: columns as raw bytes."""
    encoded = [
        tuple(None if c is None else (c if isinstance(c, bytes) else str(c).encode("utf-8")) for c in r)
        for r in rows
    ]
    return QueryResult(
        fields=[ResultField(name=n, length=len(n)) for n in names],
        rows=encoded,
        rowcount=len(encoded),
    )


class FakeExecutor:
    """In-memory stand-in for QueryExecutor keyed on exact SQL text."""

    def __init__(self, responses=None, host="localhost"):
        self.responses = dict(responses or {})
        self.host = host
        self.executed: list[str] = []
        self.selected: list[str] = []
        self.closed = False

    def execute(self, sql):
        self.executed.append(sql)
        response = self.responses.get(sql)
        if response is None:
            raise QueryError(f"unexpected statement: {sql}", sql=sql)
        if isinstance(response, Exception):
            raise response
        if isinstance(response, list):
            # Successive answers for the same statement; the last one sticks.
            item = response.pop(0) if len(response) > 1 else response[0]
            if isinstance(item, Exception):
                raise item
            return item
        return response

    def select_db(self, name):
        self.selected.append(name)

    def close(self):
        self.closed = True


class FakeForm(Form):
    """Form whose key presses come from a script instead of the terminal."""

    def __init__(self, console, keys):
        super().__init__(console)
        self._keys = keys
        self.draws = 0

    def draw(self) -> None:
        self.draws += 1

    def read_key(self, keys):
        if not self._keys:
            raise AssertionError("no scripted key left")
        key = self._keys.pop(0)
        return key if key in list(keys) else None


@pytest.fixture
def settings():
    return Settings(_env_file=None, EDITOR="true", MYADM_DB_HOST="localhost")


@pytest.fixture
def console():
    return Console(width=80, height=24, file=io.StringIO(), force_terminal=False)


@pytest.fixture
def server():
    """Executor answering for two databases with one table each."""
    return FakeExecutor(
        {
            "SHOW DATABASES": make_result(["Database"], [("db1",), ("db2",)]),
            "SHOW TABLES": make_result(["Tables_in_db1"], [("t1",), ("t2",)]),
            "SELECT * FROM `db1`.`t1`": make_result(
                ["id", "name"], [("5", "O'Brien"), ("6", "Smith")]
            ),
            "SHOW INDEX FROM `t1`": make_result(
                ["Table", "Non_unique", "Key_name", "Seq_in_index", "Column_name"],
                [("t1", "0", "PRIMARY", "1", "id")],
            ),
            "SHOW CREATE TABLE `t1`": make_result(
                ["Table", "Create Table"],
                [
                    (
                        "t1",
                        "CREATE TABLE `t1` (\n"
                        "  `id` int NOT NULL AUTO_INCREMENT,\n"
                        "  `name` varchar(64) DEFAULT NULL,\n"
                        "  PRIMARY KEY (`id`)\n"
                        ") ENGINE=InnoDB",
                    )
                ],
            ),
        }
    )


@pytest.fixture
def keys():
    """Scripted key presses shared by every form of a router."""
    return []


@pytest.fixture
def make_router(console, settings, keys):
    def _make(executor, start=True):
        router = Router(
            console=console,
            settings=settings,
            state=AppState(),
            nav=Navigator(),
            executor=executor,
            form_factory=lambda c: FakeForm(c, keys),
        )
        if start:
            router.start()
        return router

    return _make
