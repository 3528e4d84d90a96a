"""Query tool: runs SQL on the shared connection and returns rows as JSON."""

import logging
from typing import Any, Dict, List

from ..core.exceptions import MCPSQLError
from ..database.connection import ConnectionManager
from ..database.values import serialize_rows
from .base import ToolHandler
from .definitions import make_tool_name, TOOL_QUERY

logger = logging.getLogger(__name__)


class ToolBridge(ToolHandler):
    """Handler adapting the `query` tool to a ConnectionManager."""

    error_prefix = "Error executing query"

    def __init__(self, connection_manager: ConnectionManager, tool_prefix: str = ""):
        self.connection_manager = connection_manager
        self.tool_prefix = tool_prefix

    @property
    def tool_names(self) -> List[str]:
        return [make_tool_name(TOOL_QUERY, self.tool_prefix)]

    async def handle_call(self, arguments: Dict[str, Any]) -> Dict[str, Any]:
        sql = arguments.get("sql")
        if not isinstance(sql, str) or not sql.strip():
            return self._error_response("sql parameter is required")
        return await self.handle(sql)

    async def handle(self, sql: str) -> Dict[str, Any]:
        """
        Execute SQL and build the tool response.

        Never raises: failures of any kind become an error payload.

        Args:
            sql: SQL text to execute

        Returns:
            MCP response whose text is the pretty-printed JSON row array,
            or "Error executing query: <message>"
        """
        try:
            rows = await self.connection_manager.query(sql)
            text = serialize_rows(rows)
        except MCPSQLError as e:
            return self._error_response(e)
        except Exception as e:
            logger.error(f"Unexpected error while executing query: {e}", exc_info=True)
            return self._error_response(e)

        return self._success_response(text)
