"""Tool Dispatch — resolve, validate, invoke, and wrap every tool call.

Invariants:
    - call() never raises: every outcome is a well-formed ToolCallResult
    - Unknown tools return isError with "unknown tool: <name>" (never raises)
    - Invalid arguments return isError naming the field; the handler is not invoked
    - Handler faults (domain or unexpected) return isError with the fault's message
    - Every call logged with tool name and outcome

Design Decisions:
    - Catch-all at this boundary only: handlers and the repository raise freely,
      the dispatcher is the single place that turns exceptions into results
    - Domain errors keep their own message; unexpected exceptions are logged with
      traceback and reported by message only
    - Protocol faults (unknown session, malformed JSON-RPC) are handled one level up
"""

import logging
from typing import Any

from student_mcp.core.errors import (
    StudentMcpError, ToolValidationError, UnknownToolError,
)
from student_mcp.core.tool_result import ToolCallResult, error_result, text_result
from student_mcp.core.validate_input import validate_tool_input
from student_mcp.services.tools_registry import ToolRegistry

logger = logging.getLogger(__name__)


class ToolDispatch:
    """Routes tool name -> registered handler with uniform result wrapping."""

    def __init__(self, registry: ToolRegistry):
        self._registry = registry

    @property
    def registry(self) -> ToolRegistry:
        return self._registry

    async def call(
        self, tool_name: str, raw_args: Any, session_id: str | None = None,
    ) -> ToolCallResult:
        """Execute one tool call. Returns a result for every input."""
        log_extra = {"tool_name": tool_name, "session_id": session_id}
        tool = self._registry.resolve(tool_name)
        if tool is None:
            error = UnknownToolError(tool_name)
            logger.warning(error.message, extra={**log_extra, "error_code": error.code})
            return error_result(error.to_tool_text())

        try:
            args = validate_tool_input(tool.input_shape, raw_args)
        except ToolValidationError as e:
            logger.info(
                f"Rejected arguments for '{tool_name}': {e.message}",
                extra={**log_extra, "error_code": e.code},
            )
            return error_result(e.to_tool_text())

        try:
            payload = await tool.handler(args)
        except StudentMcpError as e:
            logger.warning(
                f"Tool '{tool_name}' failed: {e.message}",
                extra={**log_extra, "error_code": e.code},
            )
            return error_result(e.to_tool_text())
        except Exception as e:
            logger.error(
                f"Tool '{tool_name}' raised unexpectedly: {e}",
                extra={**log_extra, "error_code": "INTERNAL_ERROR"},
                exc_info=True,
            )
            return error_result(f"Error: {e}")

        logger.info(f"Tool '{tool_name}' succeeded", extra={**log_extra, "is_error": False})
        return text_result(payload)
