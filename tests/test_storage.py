"""Tests for SQL statement building and the storage connection."""

import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from nodedit.storage import SQLStorage, Storage, insert_set, select_all, truncate


class TestStatements:
    def test_select_and_truncate(self):
        assert select_all("node") == "SELECT * FROM `node`"
        assert truncate("node") == "TRUNCATE `node`"

    def test_insert_set(self):
        stmt = insert_set("node", {"auto": 1, "group": "g", "project": "p"})
        assert stmt == "INSERT INTO `node` SET `auto` = :auto, `group` = :group, `project` = :project"

    def test_quotes_backticks(self):
        assert select_all("no`de") == "SELECT * FROM `no``de`"


class TestSQLStorage:
    def test_satisfies_protocol(self):
        assert isinstance(SQLStorage("mysql+aiomysql://x@y/z"), Storage)

    @pytest.mark.asyncio
    async def test_query_before_connect(self):
        storage = SQLStorage("mysql+aiomysql://x@y/z")
        with pytest.raises(RuntimeError, match="not connected"):
            await storage.query("SELECT 1")

    @pytest.mark.asyncio
    async def test_query_returns_mappings(self):
        result = MagicMock()
        result.returns_rows = True
        result.mappings.return_value = [{"id": 1, "project": "a"}]
        conn = MagicMock()
        conn.execute = AsyncMock(return_value=result)
        conn.close = AsyncMock()
        engine = MagicMock()
        engine.connect = AsyncMock(return_value=conn)
        engine.dispose = AsyncMock()

        with patch("nodedit.storage.create_async_engine", return_value=engine) as create:
            storage = SQLStorage("mysql+aiomysql://x@y/z")
            await storage.connect()
            rows = await storage.query("SELECT * FROM `node`")

        create.assert_called_once_with("mysql+aiomysql://x@y/z", isolation_level="AUTOCOMMIT")
        assert rows == [{"id": 1, "project": "a"}]

        await storage.close()
        conn.close.assert_awaited_once()
        engine.dispose.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_non_select_returns_empty(self):
        result = MagicMock()
        result.returns_rows = False
        conn = MagicMock()
        conn.execute = AsyncMock(return_value=result)
        engine = MagicMock()
        engine.connect = AsyncMock(return_value=conn)

        with patch("nodedit.storage.create_async_engine", return_value=engine):
            storage = SQLStorage("mysql+aiomysql://x@y/z")
            await storage.connect()
            assert await storage.query("TRUNCATE `node`") == []

        conn.execute.assert_awaited_once()
        params = conn.execute.await_args.args[1]
        assert params == {}
