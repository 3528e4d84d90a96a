"""
pytest 配置文件

提供測試環境設定、fixtures 和模擬的 ODBC 連線
"""

import asyncio
import sys
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

# 添加 src 目錄到 Python 路徑
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from mcp_sql_server.core.config import AppConfig, DatabaseConfig  # noqa: E402


class FakeDriverError(Exception):
    """模擬 pyodbc.Error：驅動程式回報的錯誤 args 為 (sqlstate, message)"""

    def __init__(self, sqlstate: str, message: str):
        super().__init__(sqlstate, message)

    @classmethod
    def internal(cls, message: str, sqlstate: str) -> "FakeDriverError":
        """pyodbc 自身拋出的錯誤，args 順序相反：(message, sqlstate)"""
        error = cls.__new__(cls)
        Exception.__init__(error, message, sqlstate)
        return error


class FakeCursor:
    """依 SQL 文字回放預設結果集的 cursor"""

    def __init__(self, connection: "FakeConnection"):
        self._connection = connection
        self._sql = None
        self._sets = []
        self._index = 0
        self._position = 0
        self._fetched = 0
        self._executing = False
        self.closed = False

    @property
    def description(self):
        if self._index >= len(self._sets):
            return None
        columns = self._sets[self._index][0]
        if not columns:
            return None
        return [(name, str, None, None, None, None, True) for name in columns]

    async def execute(self, sql):
        self._connection.executed.append(sql)
        self._connection.active += 1
        self._connection.max_active = max(self._connection.max_active, self._connection.active)
        self._executing = True
        await asyncio.sleep(0)
        if sql in self._connection.execute_errors:
            raise self._connection.execute_errors[sql]
        self._sql = sql
        self._sets = self._connection.responses.get(sql, [])

    async def fetchone(self):
        await asyncio.sleep(0)
        failure = self._connection.fetch_errors.get(self._sql)
        if failure is not None and self._fetched == failure[0]:
            raise failure[1]
        rows = self._sets[self._index][1]
        if self._position >= len(rows):
            return None
        row = self._connection.convert(self._sql, rows[self._position])
        self._position += 1
        self._fetched += 1
        return row

    async def nextset(self):
        await asyncio.sleep(0)
        self._index += 1
        self._position = 0
        return self._index < len(self._sets)

    async def close(self):
        if not self.closed:
            self.closed = True
            if self._executing:
                self._connection.active -= 1


class FakeConnection:
    """模擬 aioodbc.Connection

    responses: SQL -> [(columns or None, rows), ...]
    raw_columns: SQL -> {欄位索引: ODBC 型別}，以 output converter 轉換
    execute_errors: SQL -> 執行時拋出的例外
    fetch_errors: SQL -> (已回傳列數, 例外)
    """

    def __init__(self):
        self.responses = {}
        self.execute_errors = {}
        self.fetch_errors = {}
        self.raw_columns = {}
        self.output_converters = {}
        self.executed = []
        self.cursors = []
        self.active = 0
        self.max_active = 0
        self.close_calls = 0
        self._closed = False

    @property
    def closed(self):
        return self._closed

    async def add_output_converter(self, sqltype, func):
        self.output_converters[sqltype] = func

    def convert(self, sql, row):
        """依 pyodbc 行為套用 output converter；未註冊的型別拋出 HY106"""
        raw_columns = self.raw_columns.get(sql)
        if not raw_columns:
            return row
        values = list(row)
        for index, sqltype in raw_columns.items():
            converter = self.output_converters.get(sqltype)
            if converter is None:
                raise FakeDriverError.internal(
                    f"ODBC SQL type {sqltype} is not yet supported.  column-index={index}  type={sqltype}",
                    "HY106"
                )
            values[index] = converter(values[index])
        return tuple(values)

    async def cursor(self):
        cursor = FakeCursor(self)
        self.cursors.append(cursor)
        return cursor

    async def close(self):
        self.close_calls += 1
        await asyncio.sleep(0)
        self._closed = True


@pytest.fixture
def db_config():
    """測試用資料庫配置"""
    return DatabaseConfig(
        server="localhost",
        port=1433,
        database="testdb",
        username="sa",
        password="secret",
        driver="ODBC Driver 18 for SQL Server"
    )


@pytest.fixture
def app_config(db_config):
    """測試用應用配置"""
    return AppConfig(database=db_config)


@pytest.fixture
def fake_connection():
    """模擬的資料庫連線"""
    return FakeConnection()


@pytest.fixture
def fake_aioodbc(fake_connection):
    """以模擬連線取代 aioodbc.connect"""
    with patch("mcp_sql_server.database.connection.aioodbc") as mock_aioodbc:
        mock_aioodbc.connect = AsyncMock(return_value=fake_connection)
        yield mock_aioodbc


@pytest.fixture
def driver_error():
    """建立 pyodbc 風格例外的工廠"""
    return FakeDriverError


@pytest.fixture
def sample_query():
    """範例查詢 fixture"""
    return "SELECT 1 AS x"
