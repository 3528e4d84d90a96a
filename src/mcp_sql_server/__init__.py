"""MCP SQL Server - execute SQL against Microsoft SQL Server over MCP."""

__version__ = "1.0.0"
