"""Error Hierarchy — typed, categorized exceptions for every failure mode of the server.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) are recoverable; infrastructure errors (500-level) are critical
    - to_response() produces the REST envelope; to_tool_text() the text of an error tool result
    - No internal details leaked in user-facing messages beyond the store's own message

Design Decisions:
    - Single hierarchy with StudentMcpError base: FastAPI global handler catches all
    - Tool-level errors never reach the HTTP layer: the dispatcher renders them as
      isError results. Session errors are the only ones surfaced as HTTP statuses
    - ErrorContext as dataclass: rich observability without coupling to logging framework
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    SESSION = "session"
    DATABASE = "database"
    INTERNAL = "internal"
    CONFLICT = "conflict"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    session_id: str | None = None
    tool_name: str | None = None
    debug_info: dict[str, Any] | None = None


class StudentMcpError(Exception):
    """Base exception for all server errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "session_id": self.context.session_id,
                    "tool_name": self.context.tool_name,
                },
            }
        }

    def to_tool_text(self) -> str:
        """Text of the content block when this error is rendered as a tool result."""
        return f"Error: {self.message}"


# ─── Domain Errors (400-level) ──────────────────────────────────

class ToolValidationError(StudentMcpError):
    """Tool input validation failed."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.field = field

    def to_tool_text(self) -> str:
        return self.message


class UnknownToolError(StudentMcpError):
    """Tool name is not in the registry."""
    def __init__(self, tool_name: str, context: ErrorContext | None = None):
        super().__init__(
            f"unknown tool: {tool_name}",
            "UNKNOWN_TOOL", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
        )
        self.tool_name = tool_name

    def to_tool_text(self) -> str:
        return self.message


class QueryNotAllowedError(StudentMcpError):
    """Free-form query rejected by the read-only allow rules."""
    def __init__(self, reason: str, context: ErrorContext | None = None):
        super().__init__(
            reason, "QUERY_NOT_ALLOWED", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context, 400,
        )


class ResourceNotFoundError(StudentMcpError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class SessionNotFoundError(StudentMcpError):
    """No open stream is registered under the session id."""
    def __init__(self, session_id: str | None, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.session_id = session_id
        super().__init__(
            "Session not found",
            "SESSION_NOT_FOUND", ErrorCategory.SESSION,
            ErrorSeverity.WARNING, ctx, 404,
        )


class SessionConflictError(StudentMcpError):
    """A second stream was requested for a session that is already open."""
    def __init__(self, session_id: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.session_id = session_id
        super().__init__(
            "Session already has an open stream",
            "SESSION_ALREADY_OPEN", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, ctx, 409,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(StudentMcpError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation


class DataConflictError(DatabaseError):
    """A write violated a uniqueness or foreign-key constraint (client data, not an outage)."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(message, operation, context)
        self.code = "DATA_CONFLICT"
        self.category = ErrorCategory.CONFLICT
        self.severity = ErrorSeverity.WARNING
        self.http_status = 409


# ─── Protocol Errors ─────────────────────────────────────────────

class InvalidParamsError(StudentMcpError):
    """JSON-RPC params do not fit the method (answered with -32602, not a tool result)."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "INVALID_PARAMS", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
        )
