"""SSE Transport — one server-to-client event stream plus the inbox fed by posted messages.

Invariants:
    - State moves CONNECTING -> OPEN -> CLOSED only; CLOSED is terminal
    - The first event of every stream is "endpoint": the URL the client posts messages to
    - Nothing is queued after close(): send() on a closed transport drops the message
    - close() wakes both the stream reader and the inbox reader exactly once

Design Decisions:
    - asyncio.Queue for both directions: arrival order is delivery order, no locks needed
      within a single event loop
    - Keepalive comments while idle: prevents proxies from timing out quiet streams
    - Inbound messages are queued, not processed here: the bound protocol server
      drains the inbox with one worker, which preserves per-session ordering
"""

import asyncio
import json
import logging
from typing import Any, AsyncIterator

from student_mcp.core.domain_types import SessionId, StreamState
from student_mcp.core.errors import SessionNotFoundError

logger = logging.getLogger(__name__)

_CLOSE = object()


class SseTransport:
    """Streaming channel bound to at most one session id."""

    def __init__(self, message_path: str, keepalive_seconds: float = 15.0):
        self.session_id: SessionId | None = None
        self.state = StreamState.CONNECTING
        self._message_path = message_path
        self._keepalive_seconds = keepalive_seconds
        self._outbox: asyncio.Queue = asyncio.Queue()
        self._inbox: asyncio.Queue = asyncio.Queue()

    @property
    def is_open(self) -> bool:
        return self.state is StreamState.OPEN

    @property
    def endpoint_url(self) -> str:
        return f"{self._message_path}?sessionId={self.session_id}"

    def open(self, session_id: SessionId) -> None:
        """Bind the minted session id and announce the message endpoint."""
        if self.state is not StreamState.CONNECTING:
            raise RuntimeError(f"Cannot open transport in state {self.state.value}")
        self.session_id = session_id
        self.state = StreamState.OPEN
        self._outbox.put_nowait(("endpoint", self.endpoint_url))

    def deliver(self, message: Any) -> None:
        """Queue a posted client message for the bound protocol server."""
        if not self.is_open:
            raise SessionNotFoundError(self.session_id)
        self._inbox.put_nowait(message)

    async def receive(self) -> Any:
        """Next inbound message in arrival order; None once the transport closes."""
        item = await self._inbox.get()
        return None if item is _CLOSE else item

    async def send(self, message: dict) -> bool:
        """Queue a server message on the stream. False if the stream is gone."""
        if not self.is_open:
            logger.debug(
                "Dropped message for closed stream",
                extra={"session_id": self.session_id},
            )
            return False
        self._outbox.put_nowait(("message", json.dumps(message, ensure_ascii=False)))
        return True

    def close(self) -> None:
        if self.state is StreamState.CLOSED:
            return
        self.state = StreamState.CLOSED
        self._outbox.put_nowait(_CLOSE)
        self._inbox.put_nowait(_CLOSE)

    async def events(self) -> AsyncIterator[str]:
        """Formatted SSE frames until close(); keepalive comments while idle."""
        while True:
            try:
                item = await asyncio.wait_for(
                    self._outbox.get(), timeout=self._keepalive_seconds,
                )
            except asyncio.TimeoutError:
                yield ": keepalive\n\n"
                continue
            if item is _CLOSE:
                return
            event, data = item
            yield format_sse(event, data)


def format_sse(event: str, data: str) -> str:
    """One SSE frame. Multi-line data is split into several data: fields."""
    lines = data.splitlines() or [""]
    body = "".join(f"data: {line}\n" for line in lines)
    return f"event: {event}\n{body}\n"
