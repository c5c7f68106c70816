"""MCP Runtime — wires the registry, dispatcher, sessions and endpoints for one process.

Invariants:
    - Built once per process by the lifespan (init_runtime); routes read it through
      get_runtime(), tests replace it the same way
    - The tool registry is populated before the first request can be served

Design Decisions:
    - Singleton mirrors the data store's lifecycle: created on startup, shut down
      before the store closes so no session outlives its data source
    - instructions.md is optional: absence means initialize carries no instructions
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from student_mcp.config import Settings
from student_mcp.core.repository_protocols import DataStore
from student_mcp.services.protocol_server import ProtocolServer, ServerInfo
from student_mcp.services.session_registry import SessionRegistry
from student_mcp.services.session_streams import MessageEndpoint, StreamingEndpoint
from student_mcp.services.student_repository import StudentRepository
from student_mcp.services.tool_dispatch import ToolDispatch
from student_mcp.services.tools_registry import build_tool_registry

logger = logging.getLogger(__name__)


@dataclass
class McpRuntime:
    info: ServerInfo
    repository: StudentRepository
    dispatch: ToolDispatch
    sessions: SessionRegistry
    streaming: StreamingEndpoint
    messages: MessageEndpoint

    def http_server(self) -> ProtocolServer:
        """Unconnected protocol server for one synchronous /mcp request."""
        return ProtocolServer(self.dispatch, self.info)

    async def shutdown(self) -> None:
        await self.streaming.shutdown()


def load_instructions(path: str) -> str | None:
    file = Path(path)
    if not file.is_file():
        return None
    return file.read_text(encoding="utf-8")


def build_runtime(store: DataStore, settings: Settings) -> McpRuntime:
    info = ServerInfo(
        name=settings.service_name,
        version=settings.service_version,
        protocol_version=settings.protocol_version,
        instructions=load_instructions(settings.instructions_path),
    )
    repository = StudentRepository(store)
    dispatch = ToolDispatch(build_tool_registry(repository))
    sessions = SessionRegistry()
    logger.info(f"Tool registry ready with {len(dispatch.registry)} tools")
    return McpRuntime(
        info=info,
        repository=repository,
        dispatch=dispatch,
        sessions=sessions,
        streaming=StreamingEndpoint(
            sessions, dispatch, info,
            message_path=settings.message_path,
            keepalive_seconds=settings.sse_keepalive_seconds,
        ),
        messages=MessageEndpoint(sessions),
    )


# Singleton (initialized on startup)
runtime: McpRuntime | None = None


def init_runtime(store: DataStore, settings: Settings) -> McpRuntime:
    global runtime
    runtime = build_runtime(store, settings)
    return runtime


def get_runtime() -> McpRuntime:
    """FastAPI dependency for the wired runtime."""
    if not runtime:
        raise RuntimeError("MCP runtime not initialized")
    return runtime
