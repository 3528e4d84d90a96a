"""Base classes for MCP tool handlers."""

from abc import ABC, abstractmethod
from typing import Any, Dict, List

from ..core.error_handling import format_tool_error, format_tool_text


class ToolHandler(ABC):
    """Abstract base class for MCP tool handlers."""

    # Leading text of every error payload produced by this handler
    error_prefix = "Error"

    @property
    @abstractmethod
    def tool_names(self) -> List[str]:
        """Return list of tool names this handler supports."""
        pass

    @abstractmethod
    async def handle_call(self, arguments: Dict[str, Any]) -> Dict[str, Any]:
        """
        Handle tool invocation.

        Args:
            arguments: Tool arguments sent by the MCP client

        Returns:
            MCP response dictionary with 'content' key
        """
        pass

    def _error_response(self, error: Any) -> Dict[str, Any]:
        """Create standardized error response."""
        return format_tool_error(error, prefix=self.error_prefix)

    def _success_response(self, text: str) -> Dict[str, Any]:
        """Create standardized success response."""
        return format_tool_text(text)
