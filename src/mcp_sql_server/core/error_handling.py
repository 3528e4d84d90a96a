"""Error handling helpers for MCP tool responses.

Tool failures are reported to the client as regular text content so that no
exception ever reaches the MCP transport.
"""

import logging
import re
from typing import Any, Dict, Optional, Tuple

logger = logging.getLogger(__name__)

_SQLSTATE_RE = re.compile(r"^[0-9A-Z]{5}$")


def _driver_args(error: BaseException) -> Optional[Tuple[str, str]]:
    """Split pyodbc-style error args into (sqlstate, message).

    Errors reported by the ODBC driver carry ``(sqlstate, message)``; errors
    raised by pyodbc itself carry ``(message, sqlstate)``.
    """
    args = getattr(error, "args", ())
    if len(args) < 2 or not all(isinstance(arg, str) for arg in args[:2]):
        return None
    first, second = args[0], args[1]
    if _SQLSTATE_RE.match(first):
        return first, second
    if _SQLSTATE_RE.match(second):
        return second, first
    return None


def sqlstate_of(error: BaseException) -> Optional[str]:
    """Return the SQLSTATE of a pyodbc-style error, if it carries one."""
    driver_args = _driver_args(error)
    return driver_args[0] if driver_args else None


def describe_error(error: BaseException) -> str:
    """Extract a human-readable message from an exception.

    For pyodbc-style errors the driver message is returned verbatim rather
    than the tuple repr produced by ``str(error)``.
    """
    message = getattr(error, "message", None)
    if isinstance(message, str) and message:
        return message

    driver_args = _driver_args(error)
    if driver_args is not None:
        return driver_args[1]

    text = str(error)
    return text if text else type(error).__name__


def format_tool_text(text: str) -> Dict[str, Any]:
    """Wrap text in the MCP tool content format."""
    return {
        "content": [{
            "type": "text",
            "text": text
        }]
    }


def format_tool_error(error: Any, prefix: str = "Error") -> Dict[str, Any]:
    """Format an error as an MCP tool payload.

    Args:
        error: Exception or plain message describing the failure
        prefix: Leading text, e.g. "Error executing query"

    Returns:
        MCP response dict with a single text content block
    """
    if isinstance(error, BaseException):
        error_message = describe_error(error)
        error_type = type(error).__name__
    else:
        error_message = str(error)
        error_type = "ToolError"

    logger.info(f"{error_type}: {error_message}")

    return format_tool_text(f"{prefix}: {error_message}")
