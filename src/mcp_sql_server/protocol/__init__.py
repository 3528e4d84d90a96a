"""MCP protocol servers."""

from .base_server import BaseMCPServer, to_text_content
from .stdio_server import StdioMCPServer, run_stdio_server

__all__ = [
    "BaseMCPServer",
    "StdioMCPServer",
    "run_stdio_server",
    "to_text_content",
]
