"""Protocol Server — JSON-RPC 2.0 method routing for one MCP session (or one HTTP call).

Invariants:
    - handle() never raises: every request gets a response, every notification none
    - Tool failures come back as successful JSON-RPC responses with isError results;
      JSON-RPC errors are reserved for protocol faults (bad request, method, params)
    - When connected to a transport, one worker drains the inbox in arrival order:
      a session's messages are never processed concurrently or out of order
    - close() stops the worker; calling it again is a no-op

Design Decisions:
    - One ProtocolServer per streaming session, sharing the process-wide ToolDispatch:
      per-session state (initialize handshake, worker) stays isolated
    - Explicit method table: every supported method visible in one place
    - The synchronous /mcp route uses an unconnected instance and calls handle() directly
"""

import asyncio
import contextlib
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from student_mcp.core.domain_types import JsonRpcErrorCode
from student_mcp.core.errors import InvalidParamsError
from student_mcp.core.jsonrpc import (
    failure, is_client_response, is_notification, request_problem, success,
)
from student_mcp.infrastructure.sse_transport import SseTransport
from student_mcp.services.define_prompts import get_prompt, list_prompts
from student_mcp.services.tool_dispatch import ToolDispatch

logger = logging.getLogger(__name__)

MethodHandler = Callable[[dict], Awaitable[dict]]


@dataclass(frozen=True)
class ServerInfo:
    name: str
    version: str
    protocol_version: str
    instructions: str | None = None


class ProtocolServer:
    """Answers initialize, ping, tools/*, and prompts/* requests."""

    def __init__(self, dispatch: ToolDispatch, info: ServerInfo):
        self._dispatch = dispatch
        self._info = info
        self._worker: asyncio.Task | None = None
        self.session_id: str | None = None
        self._methods: dict[str, MethodHandler] = {
            "initialize": self._initialize,
            "ping": self._ping,
            "tools/list": self._list_tools,
            "tools/call": self._call_tool,
            "prompts/list": self._list_prompts,
            "prompts/get": self._get_prompt,
        }

    # ─── Transport binding ───────────────────────────────────────

    def connect(self, transport: SseTransport) -> None:
        """Start the worker that serves this transport's inbox."""
        if self._worker is not None:
            raise RuntimeError("Protocol server is already connected")
        self.session_id = transport.session_id
        self._worker = asyncio.create_task(
            self._serve(transport), name=f"mcp-session-{transport.session_id}",
        )

    async def close(self) -> None:
        worker, self._worker = self._worker, None
        if worker is None:
            return
        if not worker.done():
            worker.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await worker
        logger.info("Protocol server stopped", extra={"session_id": self.session_id})

    async def _serve(self, transport: SseTransport) -> None:
        while True:
            message = await transport.receive()
            if message is None and not transport.is_open:
                return
            response = await self.handle(message)
            if response is not None:
                await transport.send(response)

    # ─── Message handling ────────────────────────────────────────

    async def handle(self, message: Any) -> dict | None:
        """Process one JSON-RPC message. Returns the response, or None if none is due."""
        if isinstance(message, dict) and is_client_response(message):
            return None
        problem = request_problem(message)
        if problem:
            request_id = message.get("id") if isinstance(message, dict) else None
            return failure(request_id, JsonRpcErrorCode.INVALID_REQUEST, problem)

        method = message["method"]
        params = message.get("params") or {}
        if is_notification(message):
            self._on_notification(method)
            return None

        request_id = message["id"]
        handler = self._methods.get(method)
        if handler is None:
            return failure(
                request_id, JsonRpcErrorCode.METHOD_NOT_FOUND,
                f"Method not found: {method}",
            )
        try:
            return success(request_id, await handler(params))
        except InvalidParamsError as e:
            return failure(request_id, JsonRpcErrorCode.INVALID_PARAMS, e.message)
        except Exception as e:
            logger.error(
                f"Unhandled error in '{method}': {e}",
                extra={"session_id": self.session_id, "method": method},
                exc_info=True,
            )
            return failure(request_id, JsonRpcErrorCode.INTERNAL_ERROR, "Internal error")

    def _on_notification(self, method: str) -> None:
        logger.debug(
            f"Notification {method}",
            extra={"session_id": self.session_id, "method": method},
        )

    # ─── Methods ─────────────────────────────────────────────────

    async def _initialize(self, params: dict) -> dict:
        client = params.get("clientInfo")
        name = client.get("name") if isinstance(client, dict) else None
        logger.info(
            f"Client initializing: {name or 'unknown'}",
            extra={"session_id": self.session_id, "method": "initialize"},
        )
        result = {
            "protocolVersion": self._info.protocol_version,
            "capabilities": {"tools": {}, "prompts": {}},
            "serverInfo": {"name": self._info.name, "version": self._info.version},
        }
        if self._info.instructions:
            result["instructions"] = self._info.instructions
        return result

    async def _ping(self, params: dict) -> dict:
        return {}

    async def _list_tools(self, params: dict) -> dict:
        return {"tools": self._dispatch.registry.list_tools()}

    async def _call_tool(self, params: dict) -> dict:
        name = params.get("name")
        if not isinstance(name, str):
            raise InvalidParamsError("Field 'name' must be a string")
        result = await self._dispatch.call(
            name, params.get("arguments"), session_id=self.session_id,
        )
        return result.to_wire()

    async def _list_prompts(self, params: dict) -> dict:
        return {"prompts": list_prompts()}

    async def _get_prompt(self, params: dict) -> dict:
        name = params.get("name")
        prompt = get_prompt(name) if isinstance(name, str) else None
        if prompt is None:
            raise InvalidParamsError(f"Unknown prompt: {name}")
        return prompt
