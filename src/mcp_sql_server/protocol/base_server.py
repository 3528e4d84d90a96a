"""Base MCP server - transport-agnostic MCP protocol wiring."""

import logging
from typing import Any, Dict, List

from mcp.server import Server
from mcp.types import TextContent

from .. import __version__
from ..database.connection import ConnectionManager
from ..tools.bridge import ToolBridge
from ..tools.definitions import get_all_tools
from ..tools.registry import ToolRegistry

logger = logging.getLogger(__name__)

SERVER_INSTRUCTIONS = "SQL Server query server for MCP"


def to_text_content(response: Dict[str, Any]) -> List[TextContent]:
    """Convert a handler response dict into MCP text content blocks."""
    return [
        TextContent(type="text", text=block["text"])
        for block in response.get("content", [])
    ]


class BaseMCPServer:
    """Base MCP server providing core protocol functionality.

    This class encapsulates the MCP protocol logic independent of
    the transport mechanism.
    """

    def __init__(
        self,
        connection_manager: ConnectionManager,
        server_name: str = "mcp-sql-server",
        tool_prefix: str = ""
    ):
        """Initialize base MCP server.

        Args:
            connection_manager: The process-wide database connection owner
            server_name: Name of the MCP server
            tool_prefix: Optional prefix for tool names
        """
        self.connection_manager = connection_manager
        self.tool_prefix = tool_prefix
        self.registry = ToolRegistry([ToolBridge(connection_manager, tool_prefix)])
        self.server = Server(server_name, version=__version__, instructions=SERVER_INSTRUCTIONS)
        self._setup_handlers()
        logger.info(f"Initialized {server_name} MCP server")

    def _setup_handlers(self):
        """Setup MCP protocol handlers."""

        @self.server.list_tools()
        async def list_tools():
            """List all available tools."""
            return get_all_tools(self.tool_prefix)

        @self.server.call_tool()
        async def call_tool(name: str, arguments: dict):
            """Handle tool execution."""
            response = await self.registry.handle_tool(name, arguments or {})
            return to_text_content(response)
