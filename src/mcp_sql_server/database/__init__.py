"""Database connection management for MCP SQL Server."""

from .connection import ConnectionManager, ConnectionState
from .values import ValueKind, classify_value, encode_value, serialize_rows

__all__ = [
    "ConnectionManager",
    "ConnectionState",
    "ValueKind",
    "classify_value",
    "encode_value",
    "serialize_rows"
]
