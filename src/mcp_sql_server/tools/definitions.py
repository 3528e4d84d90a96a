"""MCP tool definitions for MCP SQL Server."""

from typing import List
from mcp.types import Tool

# Tool suffix constants (used for matching in handlers)
TOOL_QUERY = "query"


def make_tool_name(suffix: str, prefix: str = "") -> str:
    """Generate a tool name with an optional prefix.

    Args:
        suffix: The tool suffix (e.g. 'query')
        prefix: Configured prefix, empty for none

    Returns:
        Full tool name (e.g. 'query' or 'sales_query')
    """
    return f"{prefix}_{suffix}" if prefix else suffix


def get_all_tools(prefix: str = "") -> List[Tool]:
    """Generate all MCP tool definitions with the configured prefix."""
    return [
        Tool(
            name=make_tool_name(TOOL_QUERY, prefix),
            description="Execute a SQL query against the connected SQL Server database",
            inputSchema={
                "type": "object",
                "properties": {
                    "sql": {
                        "type": "string",
                        "description": "The SQL query to execute"
                    }
                },
                "required": ["sql"]
            }
        )
    ]
