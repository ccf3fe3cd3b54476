"""PyMySQL-backed query executor.

Every value is fetched as raw bytes: the column decoders are switched off so
binary columns survive untouched and the UI decides how to display them.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import pymysql
from pymysql import converters

from .settings import Settings

logger = logging.getLogger(__name__)

# MySQL identifiers are at most 64 characters long.
MYSQL_ID_LEN = 64


class MyadmError(Exception):
    """Base class for all myadm errors."""


class ConnectError(MyadmError):
    """The initial connection to the server failed (fatal)."""


class QueryError(MyadmError):
    """A statement was rejected by the server or the connection dropped."""

    def __init__(self, message: str, sql: str | None = None):
        super().__init__(message)
        self.sql = sql


@dataclass(frozen=True)
class ResultField:
    name: str
    length: int


@dataclass
class QueryResult:
    """One fully fetched result set."""

    fields: list[ResultField] = field(default_factory=list)
    rows: list[tuple[bytes | None, ...]] = field(default_factory=list)
    rowcount: int = 0

    def __iter__(self):
        return iter(self.rows)

    def column(self, name: str) -> int:
        """Index of the column called `name` (case-insensitive)."""
        for i, f in enumerate(self.fields):
            if f.name.lower() == name.lower():
                return i
        raise KeyError(name)


def _raw_conversions() -> dict[Any, Any]:
    # Keep the Python -> SQL encoders, drop every SQL -> Python decoder.
    return {k: v for k, v in converters.conversions.items() if not isinstance(k, int)}


class QueryExecutor:
    """Thin wrapper around a single PyMySQL connection."""

    def __init__(self, conn, host: str = ""):
        self.conn = conn
        self.host = host

    def execute(self, sql: str) -> QueryResult:
        """Run one statement and fetch its whole result.

        The SQL text is sent verbatim: no parameter interpolation happens when
        no arguments are given, so `%` and backslashes reach the server as typed.
        Surrogate-escaped characters go back out as the raw bytes they stand for.
        """
        logger.debug("execute: %s", sql)
        try:
            with self.conn.cursor() as cur:
                cur.execute(sql.encode("utf-8", "surrogateescape"))
                description = cur.description or ()
                rows = list(cur.fetchall()) if description else []
                affected = cur.rowcount
        except pymysql.MySQLError as exc:
            logger.warning("query failed: %s (%s)", sql, exc)
            raise QueryError(_error_message(exc), sql=sql) from exc

        names = [_identifier(d[0]) for d in description]
        fields = [ResultField(name=n, length=len(n)) for n in names]
        return QueryResult(
            fields=fields,
            rows=[tuple(r) for r in rows],
            rowcount=len(rows) if description else max(affected, 0),
        )

    def select_db(self, name: str) -> None:
        logger.info("using database %s", name)
        try:
            self.conn.select_db(name)
        except pymysql.MySQLError as exc:
            logger.warning("cannot select database %s (%s)", name, exc)
            raise QueryError(_error_message(exc)) from exc

    def close(self) -> None:
        try:
            self.conn.close()
        except pymysql.MySQLError:
            # Already closed by the server; nothing left to release.
            logger.debug("connection already closed")


def _identifier(name: str | bytes) -> str:
    # The server bounds identifiers in bytes, not characters.
    raw = name if isinstance(name, bytes) else name.encode("utf-8", "surrogateescape")
    return raw[:MYSQL_ID_LEN].decode("utf-8", "ignore")


def _error_message(exc: Exception) -> str:
    args = getattr(exc, "args", ())
    if len(args) >= 2:
        return f"{args[1]} ({args[0]})"
    return str(exc)


def connect(settings: Settings) -> QueryExecutor:
    """Open the server connection described by `settings`.

    Raises:
        ConnectError: the server is unreachable or refused the credentials
    """
    try:
        conn = pymysql.connect(
            host=settings.MYADM_DB_HOST,
            port=settings.MYADM_DB_PORT,
            user=settings.MYADM_DB_USER,
            password=settings.MYADM_DB_PASS,
            charset="utf8mb4",
            use_unicode=False,
            conv=_raw_conversions(),
            autocommit=True,
        )
    except pymysql.MySQLError as exc:
        logger.error("connection to %s failed: %s", settings.MYADM_DB_HOST, exc)
        raise ConnectError(
            f"Cannot connect to the database: {_error_message(exc)}"
        ) from exc
    logger.info(
        "connected to %s:%s as %s",
        settings.MYADM_DB_HOST,
        settings.MYADM_DB_PORT,
        settings.MYADM_DB_USER,
    )
    return QueryExecutor(conn, host=settings.MYADM_DB_HOST)


def quote_ident(name: str) -> str:
    """Backtick-quote an identifier, doubling embedded backticks."""
    return "`" + name.replace("`", "``") + "`"
