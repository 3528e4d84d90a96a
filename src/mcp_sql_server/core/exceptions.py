"""Custom exceptions for MCP SQL Server."""


class MCPSQLError(Exception):
    """Base exception for all MCP SQL Server errors."""

    def __init__(self, message: str, details: dict = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ConnectError(MCPSQLError):
    """Exception raised when the database connection cannot be established."""
    pass


class NotConnectedError(MCPSQLError):
    """Exception raised when a query is attempted without an active connection."""

    def __init__(self, message: str = "Database not connected", details: dict = None):
        super().__init__(message, details)


class QueryError(MCPSQLError):
    """Exception raised when the server rejects or fails a query."""
    pass


class ConfigurationError(MCPSQLError):
    """Exception raised when configuration is invalid."""
    pass
