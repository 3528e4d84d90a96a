"""Tool registry for routing MCP tool calls to handlers."""

import logging
from typing import Any, Dict, Iterable, List, Optional

from ..core.error_handling import format_tool_text
from .base import ToolHandler

logger = logging.getLogger(__name__)


class ToolRegistry:
    """
    Central registry for MCP tool handlers.

    Routes tool calls to appropriate handlers based on tool name.
    """

    def __init__(self, handlers: Iterable[ToolHandler]):
        self.handlers: Dict[str, ToolHandler] = {}
        for handler in handlers:
            self.register(handler)
        logger.info(f"✅ Registered {len(self.handlers)} MCP tools")

    def register(self, handler: ToolHandler) -> None:
        """Register every tool name a handler supports."""
        for tool_name in handler.tool_names:
            if tool_name in self.handlers:
                raise ValueError(f"Tool '{tool_name}' is already registered")
            self.handlers[tool_name] = handler
            logger.debug(f"Registered {tool_name} -> {handler.__class__.__name__}")

    async def handle_tool(
        self,
        name: str,
        arguments: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """
        Route tool call to appropriate handler.

        Args:
            name: Tool name from the MCP request
            arguments: Tool arguments from the MCP request

        Returns:
            Tool execution result, or an "Unknown tool" message
        """
        handler = self.handlers.get(name)
        if handler is None:
            logger.warning(f"Call to unknown tool: {name}")
            return format_tool_text(f"Unknown tool: {name}")

        logger.debug(f"Routing {name} to {handler.__class__.__name__}")
        return await handler.handle_call(arguments or {})

    def is_tool_registered(self, tool_name: str) -> bool:
        """Check if a tool has a registered handler."""
        return tool_name in self.handlers

    @property
    def tool_names(self) -> List[str]:
        return list(self.handlers)
