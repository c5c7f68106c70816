"""Session Streams — the Streaming Endpoint and Message Endpoint behind /sse and /message.

Invariants:
    - open() without an id: CONNECTING -> session minted and registered -> protocol
      server connected -> OPEN, with no await between registration and binding
    - open() with an id never creates a session: unknown id -> SessionNotFoundError,
      open id -> SessionConflictError (reconnects are rejected, not stalled)
    - close() removes the registry entry first, then closes the transport and runs the
      session's cleanup hook; only the first close for an id does anything
    - post() never mints sessions and never reaches the dispatcher for an unknown id
    - A posted batch is queued element by element; each element is answered on its own
      (malformed elements get their own JSON-RPC error)

Design Decisions:
    - Reject reconnects explicitly: a stream is bound to one HTTP response, so an id
      cannot be re-attached to a new response without losing queued events
    - Stream teardown shielded from the cancelled response task: disconnects always
      finish cleanup even when the ASGI server cancels the stream mid-await
    - shutdown() is best-effort: one failing teardown does not stop the others
"""

import asyncio
import logging
from typing import Any, AsyncIterator

from student_mcp.core.errors import SessionConflictError, SessionNotFoundError
from student_mcp.infrastructure.sse_transport import SseTransport
from student_mcp.services.protocol_server import ProtocolServer, ServerInfo
from student_mcp.services.session_registry import Session, SessionRegistry
from student_mcp.services.tool_dispatch import ToolDispatch

logger = logging.getLogger(__name__)


class StreamingEndpoint:
    """Opens and closes streaming sessions."""

    def __init__(
        self,
        registry: SessionRegistry,
        dispatch: ToolDispatch,
        info: ServerInfo,
        message_path: str,
        keepalive_seconds: float = 15.0,
    ):
        self._registry = registry
        self._dispatch = dispatch
        self._info = info
        self._message_path = message_path
        self._keepalive_seconds = keepalive_seconds

    async def open(self, requested_session_id: str | None = None) -> SseTransport:
        """Mint a session for a new stream, or reject a reconnect attempt."""
        if requested_session_id:
            if requested_session_id in self._registry:
                logger.warning(
                    "Second stream requested for an open session",
                    extra={"session_id": requested_session_id},
                )
                raise SessionConflictError(requested_session_id)
            logger.warning(
                "Reconnect attempt for a session that is not open",
                extra={"session_id": requested_session_id},
            )
            raise SessionNotFoundError(requested_session_id)

        transport = SseTransport(self._message_path, self._keepalive_seconds)
        server = ProtocolServer(self._dispatch, self._info)
        session_id = await self._registry.create(transport, cleanup=server.close)
        transport.open(session_id)
        server.connect(transport)
        logger.info("Client connected", extra={"session_id": session_id})
        return transport

    async def stream(self, transport: SseTransport) -> AsyncIterator[str]:
        """SSE frames for the response body; the session closes when the body ends."""
        try:
            async for frame in transport.events():
                yield frame
        except asyncio.CancelledError:
            logger.info(
                "Client disconnected from stream",
                extra={"session_id": transport.session_id},
            )
            raise
        finally:
            await asyncio.shield(self.close(transport.session_id))

    async def close(self, session_id: str | None) -> bool:
        """Transition the session to CLOSED. False if it was already gone."""
        session = await self._registry.remove(session_id)
        if session is None:
            return False
        await _teardown(session)
        logger.info("Client disconnected", extra={"session_id": session_id})
        return True

    async def shutdown(self) -> int:
        """Close every open session. Returns how many were closed."""
        sessions = await self._registry.drain()
        for session in sessions:
            try:
                await _teardown(session)
            except Exception as e:
                logger.error(
                    f"Session teardown failed during shutdown: {e}",
                    extra={"session_id": session.id},
                )
        if sessions:
            logger.info(f"Closed {len(sessions)} open session(s) on shutdown")
        return len(sessions)


class MessageEndpoint:
    """Delivers posted messages to the session they are addressed to."""

    def __init__(self, registry: SessionRegistry):
        self._registry = registry

    def post(self, session_id: str | None, payload: Any) -> int:
        """Queue a message, or each element of a batch in order. Returns how many."""
        transport = self._registry.get(session_id)
        if transport is None:
            logger.warning(
                "No transport found for session", extra={"session_id": session_id},
            )
            raise SessionNotFoundError(session_id)
        messages = payload if isinstance(payload, list) else [payload]
        for message in messages:
            method = message.get("method") if isinstance(message, dict) else None
            logger.debug(
                "Client message", extra={"session_id": session_id, "method": method},
            )
            transport.deliver(message)
        return len(messages)


async def _teardown(session: Session) -> None:
    session.transport.close()
    if session.cleanup is not None:
        await session.cleanup()
