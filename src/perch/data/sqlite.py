"""SQLite data source using stdlib sqlite3 + anyio.

Runs every blocking sqlite3 call in a worker thread via
``anyio.to_thread``. One connection is opened lazily and shared; calls
are serialized on it with an ``anyio.Lock``.

A model maps to the table named by its ``__table__`` attribute, else its
admin identifier. Only equality filters and offset paging are issued.
"""

import logging
import re
import sqlite3
from collections.abc import Callable, Mapping
from typing import Any

import anyio

from perch.data._mapping import map_row
from perch.data.source import applicable_filters
from perch.errors import DataError
from perch.models import model_identifier

logger = logging.getLogger("perch.data")

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def _quote(name: str) -> str:
    if not _IDENTIFIER.match(name):
        msg = f"Invalid SQL identifier: {name!r}"
        raise DataError(msg)
    return f'"{name}"'


def table_name(model: type) -> str:
    return getattr(model, "__table__", None) or model_identifier(model)


class SQLiteSource:
    """``DataSource`` over one SQLite database file.

    Usage::

        source = SQLiteSource("shop.db")
        admin = Admin(source=source, models=[Widget])
    """

    __slots__ = ("_columns", "_conn", "_lock", "path")

    def __init__(self, path: str) -> None:
        self.path = path
        self._conn: sqlite3.Connection | None = None
        self._columns: dict[str, list[str]] = {}
        self._lock = anyio.Lock()

    async def _run(self, func: Callable[..., Any], *args: Any) -> Any:
        async with self._lock:
            if self._conn is None:
                self._conn = await anyio.to_thread.run_sync(self._connect)
            conn = self._conn
            try:
                return await anyio.to_thread.run_sync(func, conn, *args)
            except sqlite3.Error as exc:
                raise DataError(str(exc)) from exc

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.path, autocommit=True, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        return conn

    async def close(self) -> None:
        async with self._lock:
            if self._conn is not None:
                await anyio.to_thread.run_sync(self._conn.close)
                self._conn = None

    def _table_columns(self, conn: sqlite3.Connection, table: str) -> list[str]:
        columns = self._columns.get(table)
        if columns is None:
            rows = conn.execute(f"PRAGMA table_info({_quote(table)})").fetchall()
            if not rows:
                msg = f"No table named {table!r} in {self.path}"
                raise DataError(msg)
            columns = [row["name"] for row in rows]
            self._columns[table] = columns
        return columns

    def _select(
        self,
        conn: sqlite3.Connection,
        model: type,
        filters: Mapping[str, Any],
        limit: int,
        offset: int,
    ) -> list[Any]:
        table = table_name(model)
        columns = self._table_columns(conn, table)
        wanted = applicable_filters(filters, columns)
        sql = f"SELECT * FROM {_quote(table)}"
        params: list[Any] = []
        if wanted:
            sql += " WHERE " + " AND ".join(f"{_quote(k)} = ?" for k in wanted)
            params.extend(wanted.values())
        sql += ' ORDER BY "id"' if "id" in columns else " ORDER BY rowid"
        sql += " LIMIT ? OFFSET ?"
        params.extend((limit, offset))
        logger.debug("%s %r", sql, params)
        rows = conn.execute(sql, params).fetchall()
        return [map_row(model, dict(row)) for row in rows]

    async def fetch_page(
        self, model: type, offset: int, limit: int, filters: Mapping[str, Any]
    ) -> list[Any]:
        return await self._run(self._select, model, filters, limit, offset)

    async def fetch_one(self, model: type, filters: Mapping[str, Any]) -> Any | None:
        rows = await self._run(self._select, model, filters, 1, 0)
        return rows[0] if rows else None

    async def execute_script(self, sql: str) -> None:
        """Run a SQL script; for schema setup and fixtures."""
        await self._run(lambda conn: conn.executescript(sql))
        self._columns.clear()
