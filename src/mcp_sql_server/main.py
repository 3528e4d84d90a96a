"""Entry point for MCP SQL Server.

Runs the MCP server over the STDIO transport, as spawned by an MCP client.

Usage:
    mcp-sql-server
    python -m mcp_sql_server.main --log-level DEBUG
"""

import argparse
import asyncio
import logging
import os
import sys
from typing import Optional

from .core.config import AppConfig
from .core.exceptions import ConfigurationError, ConnectError

logger = logging.getLogger(__name__)


def setup_logging(level: str = "INFO"):
    """Configure logging on stderr; stdout carries the MCP protocol."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        stream=sys.stderr
    )


async def run_stdio_mode(app_config: AppConfig):
    """Run MCP server in STDIO mode.

    Exits the process with status 1 when the server cannot start.
    """
    from .protocol.stdio_server import run_stdio_server

    try:
        stopped_by_signal = await run_stdio_server(app_config)
    except ConnectError as e:
        logger.error(f"Failed to start server: {e.message}")
        sys.exit(1)
    except Exception as e:
        logger.error(f"STDIO server error: {e}", exc_info=True)
        sys.exit(1)

    if stopped_by_signal:
        # The transport's stdin reader thread cannot be interrupted, so leave
        # without joining it. The database connection is already closed.
        logger.info("Shutdown complete")
        logging.shutdown()
        os._exit(0)


def main(argv: Optional[list] = None):
    """Main entry point with argument parsing."""
    parser = argparse.ArgumentParser(
        description="MCP SQL Server - SQL Server query tool over MCP STDIO"
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        help="Logging level (default: from LOG_LEVEL env or INFO)"
    )
    args = parser.parse_args(argv)

    try:
        app_config = AppConfig.from_env()
    except ConfigurationError as e:
        setup_logging(args.log_level or "INFO")
        logger.error(f"Failed to load configuration: {e.message}")
        sys.exit(1)

    setup_logging(args.log_level or app_config.log_level)
    logger.info(f"Configuration loaded: SQL Server @ {app_config.database.describe()}")
    asyncio.run(run_stdio_mode(app_config))


if __name__ == "__main__":
    main()
