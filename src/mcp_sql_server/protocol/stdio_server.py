"""STDIO transport MCP server and process lifecycle."""

import asyncio
import logging
import signal
from typing import List, Optional

from mcp.server.stdio import stdio_server

from ..core.config import AppConfig
from ..database.connection import ConnectionManager
from .base_server import BaseMCPServer

logger = logging.getLogger(__name__)

# Seconds to wait for the transport to stop after the connection is closed
SHUTDOWN_GRACE_SECONDS = 5.0

SHUTDOWN_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class StdioMCPServer(BaseMCPServer):
    """MCP server using STDIO transport."""

    async def run(self):
        """Run the STDIO MCP server until the client closes the stream."""
        logger.info("Starting STDIO MCP server")
        async with stdio_server() as (read_stream, write_stream):
            await self.server.run(
                read_stream,
                write_stream,
                self.server.create_initialization_options()
            )


def _install_signal_handlers(loop: asyncio.AbstractEventLoop, stop_event: asyncio.Event) -> List[int]:
    installed = []
    for sig in SHUTDOWN_SIGNALS:
        try:
            loop.add_signal_handler(sig, stop_event.set)
            installed.append(sig)
        except (NotImplementedError, RuntimeError):
            # Windows event loops and non-main threads
            logger.debug(f"Cannot install handler for {sig!r}")
    return installed


async def run_stdio_server(
    app_config: Optional[AppConfig] = None,
    stop_event: Optional[asyncio.Event] = None
) -> bool:
    """Connect to the database and serve MCP over STDIO.

    The connection is opened before the transport starts; a failure to
    connect propagates to the caller. On SIGINT/SIGTERM (or when
    ``stop_event`` is set) the connection is closed first, waiting for any
    in-flight query, and the transport is stopped afterwards.

    Args:
        app_config: App configuration (optional, defaults to env)
        stop_event: Event requesting shutdown (optional, created internally)

    Returns:
        True if the server was stopped by a signal, False if the client
        closed the transport.

    Raises:
        ConfigurationError: If the environment configuration is invalid
        ConnectError: If the database connection cannot be established
    """
    if app_config is None:
        app_config = AppConfig.from_env()
    if stop_event is None:
        stop_event = asyncio.Event()

    connection_manager = ConnectionManager(app_config.database)
    loop = asyncio.get_running_loop()
    installed = _install_signal_handlers(loop, stop_event)

    try:
        await connection_manager.connect()

        server = StdioMCPServer(
            connection_manager,
            server_name=app_config.server_name,
            tool_prefix=app_config.tool_prefix
        )
        serve_task = asyncio.create_task(server.run())
        stop_task = asyncio.create_task(stop_event.wait())
        logger.info("MCP SQL Server running on stdio")

        done, _ = await asyncio.wait({serve_task, stop_task}, return_when=asyncio.FIRST_COMPLETED)
        if serve_task in done:
            stop_task.cancel()
            serve_task.result()
            logger.info("STDIO transport closed")
            return False

        logger.info("Shutdown signal received")
        await connection_manager.disconnect()
        serve_task.cancel()
        await asyncio.wait({serve_task}, timeout=SHUTDOWN_GRACE_SECONDS)
        return True
    finally:
        await connection_manager.disconnect()
        for sig in installed:
            loop.remove_signal_handler(sig)
