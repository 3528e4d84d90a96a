"""MCP tools package for MCP SQL Server."""

from .base import ToolHandler
from .bridge import ToolBridge
from .registry import ToolRegistry
from .definitions import TOOL_QUERY, get_all_tools, make_tool_name

__all__ = [
    'ToolHandler',
    'ToolBridge',
    'ToolRegistry',
    'TOOL_QUERY',
    'get_all_tools',
    'make_tool_name',
]
