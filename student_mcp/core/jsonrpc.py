"""JSON-RPC 2.0 Framing — pure builders and classifiers for protocol messages.

Invariants:
    - Every response carries "jsonrpc": "2.0" and echoes the request id
    - A message without "id" is a notification and never gets a response
    - A message without "method" is a client-side response and is ignored by the server

Design Decisions:
    - Plain dicts over pydantic models: messages are relayed as-is to the stream,
      and malformed input must be answered, not rejected by FastAPI
"""

from typing import Any

from student_mcp.core.domain_types import JsonRpcErrorCode

JSONRPC_VERSION = "2.0"


def success(request_id: Any, result: dict) -> dict:
    return {"jsonrpc": JSONRPC_VERSION, "id": request_id, "result": result}


def failure(
    request_id: Any, code: JsonRpcErrorCode, message: str, data: Any = None,
) -> dict:
    error: dict[str, Any] = {"code": int(code), "message": message}
    if data is not None:
        error["data"] = data
    return {"jsonrpc": JSONRPC_VERSION, "id": request_id, "error": error}


def is_notification(message: dict) -> bool:
    return "method" in message and "id" not in message


def is_client_response(message: dict) -> bool:
    return "method" not in message and ("result" in message or "error" in message)


def request_problem(message: Any) -> str | None:
    """Why a message is not a valid request/notification, or None when it is."""
    if not isinstance(message, dict):
        return "Request must be a JSON object"
    if message.get("jsonrpc") != JSONRPC_VERSION:
        return "Field 'jsonrpc' must be \"2.0\""
    if not isinstance(message.get("method"), str):
        return "Field 'method' must be a string"
    params = message.get("params")
    if params is not None and not isinstance(params, dict):
        return "Field 'params' must be an object"
    return None
