"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - SessionId wraps the minted hex string — never a client-supplied value until looked up
    - All valid states encoded as Enums — no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders (JSON-RPC payloads are JSON)
"""

from enum import Enum, IntEnum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

SessionId = NewType("SessionId", str)


# ─── Enums ───────────────────────────────────────────────────────

class StreamState(str, Enum):
    """Lifecycle of one streaming connection. IDLE means no transport exists."""
    IDLE = "idle"
    CONNECTING = "connecting"
    OPEN = "open"
    CLOSED = "closed"


class ContentKind(str, Enum):
    """Kinds of content blocks carried in a tool result."""
    TEXT = "text"


class JsonRpcErrorCode(IntEnum):
    """JSON-RPC 2.0 reserved error codes used by the protocol server."""
    PARSE_ERROR = -32700
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    INTERNAL_ERROR = -32603
