"""Storage collaborator: one async query primitive over a SQL connection."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine

logger = logging.getLogger(__name__)


@runtime_checkable
class Storage(Protocol):
    """What the editor needs from the database."""

    table: str

    async def query(
        self, statement: str, params: Mapping[str, Any] | None = None
    ) -> list[dict[str, Any]]:
        """Run one statement. Returns result rows (empty for non-SELECT)."""
        ...

    async def close(self) -> None:
        ...


class SQLStorage:
    """Autocommit connection on a SQLAlchemy async engine.

    Every statement commits on its own: a truncate followed by failing
    inserts leaves the table truncated.
    """

    def __init__(self, url: str, table: str = "node") -> None:
        self.url = url
        self.table = table
        self._engine: AsyncEngine | None = None
        self._conn: AsyncConnection | None = None

    async def connect(self) -> None:
        self._engine = create_async_engine(self.url, isolation_level="AUTOCOMMIT")
        self._conn = await self._engine.connect()
        logger.info("Connected to %s", self._engine.url.render_as_string(hide_password=True))

    async def query(
        self, statement: str, params: Mapping[str, Any] | None = None
    ) -> list[dict[str, Any]]:
        if self._conn is None:
            raise RuntimeError("Storage not connected. Call connect() first.")
        logger.debug("Query: %s %s", statement, dict(params or {}))
        result = await self._conn.execute(text(statement), dict(params or {}))
        if not result.returns_rows:
            return []
        return [dict(row) for row in result.mappings()]

    async def close(self) -> None:
        if self._conn is not None:
            await self._conn.close()
            self._conn = None
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
        logger.debug("Storage closed")


def quote_identifier(name: str) -> str:
    return "`" + name.replace("`", "``") + "`"


def select_all(table: str) -> str:
    return f"SELECT * FROM {quote_identifier(table)}"


def truncate(table: str) -> str:
    return f"TRUNCATE {quote_identifier(table)}"


def insert_set(table: str, row: Mapping[str, Any]) -> str:
    """`INSERT INTO t SET a = :a, ...` with one bind parameter per column."""
    assignments = ", ".join(f"{quote_identifier(col)} = :{col}" for col in row)
    return f"INSERT INTO {quote_identifier(table)} SET {assignments}"
