"""MCP over plain HTTP — POST /mcp answers JSON-RPC synchronously.

Invariants:
    - A single message gets a single response object, a batch gets an array
    - Only notifications/responses posted -> 202 with an empty body
    - A body that is not JSON gets a -32700 parse error, never the REST error envelope
    - Shares the process-wide tool table with the SSE sessions; no session is created

Design Decisions:
    - Stateless: each request gets a fresh, unconnected ProtocolServer, so the
      initialize handshake is not required before tools/call
    - Raw body parsed here, not by a Body() parameter: a parse failure is a
      JSON-RPC error, not a request validation error
"""

import json
import logging

from fastapi import APIRouter, Depends, Request, Response, status

from student_mcp.core.domain_types import JsonRpcErrorCode
from student_mcp.core.jsonrpc import failure
from student_mcp.services.mcp_runtime import McpRuntime, get_runtime

logger = logging.getLogger(__name__)
router = APIRouter(tags=["mcp"])


@router.post("/mcp")
async def post_mcp(
    request: Request,
    runtime: McpRuntime = Depends(get_runtime),
):
    """Process a JSON-RPC message or batch and return the responses."""
    try:
        payload = json.loads(await request.body())
    except ValueError as e:
        logger.warning(f"Unparseable JSON-RPC body: {e}", extra={"path": "/mcp"})
        return failure(None, JsonRpcErrorCode.PARSE_ERROR, "Parse error")

    server = runtime.http_server()
    if isinstance(payload, list):
        if not payload:
            return failure(None, JsonRpcErrorCode.INVALID_REQUEST, "Empty batch")
        responses = [r for r in [await server.handle(m) for m in payload] if r]
        if not responses:
            return Response(status_code=status.HTTP_202_ACCEPTED)
        return responses
    response = await server.handle(payload)
    if response is None:
        return Response(status_code=status.HTTP_202_ACCEPTED)
    return response
