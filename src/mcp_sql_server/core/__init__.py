"""Core modules for MCP SQL Server."""

from .exceptions import (
    MCPSQLError,
    ConnectError,
    NotConnectedError,
    QueryError,
    ConfigurationError
)

__all__ = [
    "MCPSQLError",
    "ConnectError",
    "NotConnectedError",
    "QueryError",
    "ConfigurationError"
]
