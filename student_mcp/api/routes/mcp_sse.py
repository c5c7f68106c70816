"""MCP over SSE — GET /sse opens a session stream, POST /message feeds it.

Invariants:
    - GET /sse without sessionId always mints a new session; the first event names the
      message URL carrying the minted id
    - GET /sse?sessionId=<id> never creates a session (404 unknown, 409 already open)
    - POST /message answers 202 once the message is queued, 404 for an unknown session
      whatever JSON value the body holds: the session is looked up before the payload
      is inspected
    - A posted batch (JSON array) is queued element by element, in array order
    - The session closes when the response ends, whichever side ends it

Design Decisions:
    - Closing is wired twice (generator finally + response background task): the
      background task covers a client gone before the body ever started; close is
      idempotent so the second call is a no-op
    - POST /message returns before the request is processed: responses travel on the
      stream, never in the POST reply
"""

import logging

from typing import Any

from fastapi import APIRouter, Body, Depends, Query, status
from fastapi.responses import JSONResponse, StreamingResponse
from starlette.background import BackgroundTask

from student_mcp.services.mcp_runtime import McpRuntime, get_runtime

logger = logging.getLogger(__name__)
router = APIRouter(tags=["mcp"])

# SSE headers prevent proxy/browser buffering of streamed events.
_SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "X-Accel-Buffering": "no",
    "Connection": "keep-alive",
}


@router.get("/sse")
async def open_stream(
    session_id: str | None = Query(None, alias="sessionId"),
    runtime: McpRuntime = Depends(get_runtime),
):
    """Open an SSE stream bound to a freshly minted session."""
    transport = await runtime.streaming.open(session_id)
    return StreamingResponse(
        runtime.streaming.stream(transport),
        media_type="text/event-stream",
        headers=_SSE_HEADERS,
        background=BackgroundTask(runtime.streaming.close, transport.session_id),
    )


@router.post("/message")
async def post_message(
    session_id: str | None = Query(None, alias="sessionId"),
    payload: Any = Body(...),
    runtime: McpRuntime = Depends(get_runtime),
):
    """Queue a client JSON-RPC message (or batch) on its session's stream."""
    runtime.messages.post(session_id, payload)
    return JSONResponse(
        status_code=status.HTTP_202_ACCEPTED, content={"status": "accepted"},
    )
