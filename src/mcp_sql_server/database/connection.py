"""Single persistent SQL Server connection with serialized query execution."""

import asyncio
import logging
from enum import Enum
from typing import Any, Dict, List, Optional

try:
    import aioodbc
except ImportError:
    aioodbc = None

from ..core.config import DatabaseConfig
from ..core.error_handling import describe_error, sqlstate_of
from ..core.exceptions import ConnectError, NotConnectedError, QueryError
from .values import SQL_SS_TIMESTAMPOFFSET, decode_datetimeoffset

logger = logging.getLogger(__name__)


class ConnectionState(str, Enum):
    """Lifecycle states of a ConnectionManager."""
    UNINITIALIZED = "uninitialized"
    CONNECTING = "connecting"
    ACTIVE = "active"
    CLOSING = "closing"
    CLOSED = "closed"


def is_connection_failure(error: BaseException) -> bool:
    """Return True for errors reporting a broken connection (SQLSTATE class 08)."""
    sqlstate = sqlstate_of(error)
    return sqlstate is not None and sqlstate.startswith("08")


class ConnectionManager:
    """
    Owner of the one database connection used by the process.

    The manager is single-use: once closed it cannot be reconnected.
    Overlapping ``query`` calls are queued behind an asyncio lock and run one
    at a time in submission order, since a single ODBC connection cannot
    multiplex requests.
    """

    def __init__(self, config: DatabaseConfig):
        self.config = config
        self._connection = None
        self._state = ConnectionState.UNINITIALIZED
        self._query_lock = asyncio.Lock()
        self._close_lock = asyncio.Lock()

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def is_connected(self) -> bool:
        """True when queries can be submitted."""
        return (
            self._state is ConnectionState.ACTIVE
            and self._connection is not None
            and not getattr(self._connection, "closed", False)
        )

    async def connect(self) -> None:
        """
        Open and authenticate the connection.

        Raises:
            ConnectError: If the manager was already used, or the server
                cannot be reached, rejects the login or fails TLS negotiation.
        """
        if self._state is not ConnectionState.UNINITIALIZED:
            raise ConnectError(
                f"Cannot connect: connection is {self._state.value}",
                details={"state": self._state.value}
            )
        if aioodbc is None:
            raise ConnectError("aioodbc is required for SQL Server connections")

        self._state = ConnectionState.CONNECTING
        connection = None
        try:
            connection = await aioodbc.connect(
                dsn=self.config.get_connection_string(),
                autocommit=True,
                timeout=self.config.timeout
            )
            await connection.add_output_converter(SQL_SS_TIMESTAMPOFFSET, decode_datetimeoffset)
        except Exception as e:
            if connection is not None:
                await self._close_quietly(connection)
            self._connection = None
            if self._state is ConnectionState.CONNECTING:
                self._state = ConnectionState.UNINITIALIZED
            message = describe_error(e)
            logger.error(f"Failed to connect to SQL Server at {self.config.describe()}: {message}")
            raise ConnectError(
                message,
                details={"server": self.config.server, "port": self.config.port, "sqlstate": sqlstate_of(e)}
            ) from e

        if self._state is not ConnectionState.CONNECTING:
            # disconnect() ran while the login was in progress
            await connection.close()
            raise ConnectError("Connection was closed while connecting")

        self._connection = connection
        self._state = ConnectionState.ACTIVE
        logger.info(f"✅ Connected to SQL Server at {self.config.describe()}")

    async def query(self, sql: str) -> List[Dict[str, Any]]:
        """
        Execute SQL and return every row it produces.

        Rows from all result sets are collected in delivery order and
        returned only after the last result set is exhausted.

        Args:
            sql: SQL text, passed to the server unchanged

        Returns:
            List of rows mapping column name to value

        Raises:
            NotConnectedError: If there is no active connection
            QueryError: If the server rejects or fails the statement
        """
        if not self.is_connected:
            raise NotConnectedError()

        async with self._query_lock:
            # The connection may have closed while this call was queued
            if not self.is_connected:
                raise NotConnectedError()

            cursor = None
            try:
                cursor = await self._connection.cursor()
                await cursor.execute(sql)
                rows = await self._collect_rows(cursor)
            except Exception as e:
                message = describe_error(e)
                if is_connection_failure(e):
                    await self._discard_connection(e)
                else:
                    logger.warning(f"Query failed: {message}")
                raise QueryError(message, details={"sqlstate": sqlstate_of(e)}) from e
            finally:
                if cursor is not None:
                    await self._close_cursor(cursor)

        logger.debug(f"Query returned {len(rows)} rows")
        return rows

    async def disconnect(self) -> None:
        """
        Close the connection. Safe to call in any state and more than once.

        Waits for an in-flight query to finish before closing.
        """
        async with self._close_lock:
            if self._state is ConnectionState.CLOSED:
                return

            self._state = ConnectionState.CLOSING
            try:
                async with self._query_lock:
                    connection, self._connection = self._connection, None
                    if connection is not None and not getattr(connection, "closed", False):
                        await connection.close()
                        logger.info("Database connection closed")
            except Exception as e:
                logger.warning(f"Error while closing database connection: {describe_error(e)}")
            finally:
                self._connection = None
                self._state = ConnectionState.CLOSED

    async def _collect_rows(self, cursor) -> List[Dict[str, Any]]:
        """Drain every result set of an executed cursor."""
        rows: List[Dict[str, Any]] = []
        while True:
            # Statements without a result set (e.g. INSERT) have no description
            if cursor.description:
                columns = [column[0] for column in cursor.description]
                while True:
                    record = await cursor.fetchone()
                    if record is None:
                        break
                    rows.append(dict(zip(columns, record)))
            if not await cursor.nextset():
                break
        return rows

    async def _close_cursor(self, cursor) -> None:
        try:
            await cursor.close()
        except Exception as e:
            logger.debug(f"Ignoring cursor close error: {describe_error(e)}")

    async def _discard_connection(self, error: Optional[BaseException] = None) -> None:
        """Drop a connection the driver reported as broken."""
        logger.error(f"Connection error: {describe_error(error) if error else 'connection lost'}")
        connection, self._connection = self._connection, None
        self._state = ConnectionState.CLOSED
        if connection is not None:
            await self._close_quietly(connection)

    async def _close_quietly(self, connection) -> None:
        try:
            await connection.close()
        except Exception as e:
            logger.debug(f"Ignoring close error on broken connection: {describe_error(e)}")
