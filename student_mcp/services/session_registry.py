"""Session Registry — the only owner of session ids and their open transports.

Invariants:
    - Ids are minted here and nowhere else; a minted id is unique among open sessions
    - create/remove/drain are serialized by one asyncio.Lock: concurrent connections
      can never collide on an id
    - A registered id always maps to an OPEN transport; removal happens before the
      transport is closed, so no message is delivered to a dangling id
    - remove() is idempotent: the first caller gets the Session, later callers None

Design Decisions:
    - Encapsulated object instead of a module-level dict: only create/get/remove/drain
      are exposed, nothing else can mutate the map
    - get() takes no lock: a dict read is atomic within the event loop and every
      mutation completes without awaiting while holding the map
    - id_factory injectable so tests can force collisions
"""

import asyncio
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Awaitable, Callable

from student_mcp.core.domain_types import SessionId
from student_mcp.infrastructure.sse_transport import SseTransport

logger = logging.getLogger(__name__)

CleanupHook = Callable[[], Awaitable[None]]


@dataclass
class Session:
    id: SessionId
    transport: SseTransport
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    cleanup: CleanupHook | None = None


def _new_session_id() -> SessionId:
    return SessionId(uuid.uuid4().hex)


class SessionRegistry:
    """Concurrency-safe map from session id to its streaming transport."""

    def __init__(self, id_factory: Callable[[], SessionId] = _new_session_id):
        self._sessions: dict[SessionId, Session] = {}
        self._lock = asyncio.Lock()
        self._id_factory = id_factory

    async def create(
        self, transport: SseTransport, cleanup: CleanupHook | None = None,
    ) -> SessionId:
        """Mint a fresh id, bind the transport to it, and return the id."""
        async with self._lock:
            session_id = self._id_factory()
            while session_id in self._sessions:
                logger.warning("Session id collision, minting again")
                session_id = self._id_factory()
            self._sessions[session_id] = Session(
                id=session_id, transport=transport, cleanup=cleanup,
            )
        logger.info("Session registered", extra={"session_id": session_id})
        return session_id

    def get(self, session_id: str | None) -> SseTransport | None:
        session = self._sessions.get(session_id) if session_id else None
        return session.transport if session else None

    async def remove(self, session_id: str | None) -> Session | None:
        """Unregister the id. Returns the removed Session, or None if it was absent."""
        if not session_id:
            return None
        async with self._lock:
            session = self._sessions.pop(session_id, None)
        if session:
            logger.info("Session removed", extra={"session_id": session_id})
        return session

    async def drain(self) -> list[Session]:
        """Unregister every session (shutdown). Returns what was removed."""
        async with self._lock:
            sessions = list(self._sessions.values())
            self._sessions.clear()
        return sessions

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions
