"""Session Streams — the Streaming and Message Endpoints end to end.

Tests cover:
    - Opening a stream mints a session and announces the message URL
    - Reconnect attempts are rejected without creating sessions
    - Posted messages are answered on the stream, in posting order
    - Closing is idempotent, unregisters the session first, runs cleanup once
    - A posted batch is answered element by element, in array order
    - Shutdown closes every open session

Design Decisions:
    - Endpoints driven directly: an HTTP test client buffers whole responses,
      which never completes for an open event stream
"""

import asyncio

import pytest

from student_mcp.core.domain_types import StreamState
from student_mcp.core.errors import SessionConflictError, SessionNotFoundError

from student_mcp.infrastructure.sse_transport import SseTransport

from tests.services.stream_frames import message_payload, parse_frame, read_frames


def _request(request_id, method, params=None) -> dict:
    message = {"jsonrpc": "2.0", "id": request_id, "method": method}
    if params is not None:
        message["params"] = params
    return message


@pytest.mark.asyncio
async def test_open_mints_session_and_announces_endpoint(runtime):
    transport = await runtime.streaming.open()
    assert transport.session_id in runtime.sessions
    assert transport.is_open
    frames = await read_frames(transport, 1)
    assert parse_frame(frames[0]) == (
        "endpoint", f"/message?sessionId={transport.session_id}",
    )


@pytest.mark.asyncio
async def test_each_stream_gets_its_own_session(runtime):
    first = await runtime.streaming.open()
    second = await runtime.streaming.open()
    assert first.session_id != second.session_id
    assert len(runtime.sessions) == 2


@pytest.mark.asyncio
async def test_reconnect_with_unknown_id_rejected(runtime):
    with pytest.raises(SessionNotFoundError):
        await runtime.streaming.open("not-a-session")
    assert len(runtime.sessions) == 0


@pytest.mark.asyncio
async def test_reconnect_with_open_id_rejected(runtime):
    transport = await runtime.streaming.open()
    with pytest.raises(SessionConflictError):
        await runtime.streaming.open(transport.session_id)
    assert len(runtime.sessions) == 1


@pytest.mark.asyncio
async def test_post_to_unknown_session_rejected(runtime):
    with pytest.raises(SessionNotFoundError):
        runtime.messages.post("missing", _request(1, "ping"))
    with pytest.raises(SessionNotFoundError):
        runtime.messages.post(None, _request(1, "ping"))
    assert len(runtime.sessions) == 0


@pytest.mark.asyncio
async def test_tool_call_answered_on_stream(runtime):
    transport = await runtime.streaming.open()
    runtime.messages.post(transport.session_id, _request(
        1, "initialize",
        {"protocolVersion": "2024-11-05", "capabilities": {}, "clientInfo": {"name": "t"}},
    ))
    runtime.messages.post(transport.session_id, {
        "jsonrpc": "2.0", "method": "notifications/initialized",
    })
    runtime.messages.post(transport.session_id, _request(
        2, "tools/call", {"name": "echo", "arguments": {"message": "hi"}},
    ))
    frames = await read_frames(transport, 3)
    initialize = message_payload(frames[1])
    assert initialize["id"] == 1
    assert initialize["result"]["serverInfo"]["name"] == "student-api-mcp"
    call = message_payload(frames[2])
    assert call["id"] == 2
    assert call["result"] == {
        "content": [{"type": "text", "text": "Echo: hi"}], "isError": False,
    }


@pytest.mark.asyncio
async def test_responses_follow_posting_order(runtime):
    transport = await runtime.streaming.open()
    for request_id in range(1, 6):
        runtime.messages.post(transport.session_id, _request(request_id, "ping"))
    frames = await read_frames(transport, 6)
    assert [message_payload(f)["id"] for f in frames[1:]] == [1, 2, 3, 4, 5]


@pytest.mark.asyncio
async def test_batch_answered_element_by_element(runtime):
    transport = await runtime.streaming.open()
    queued = runtime.messages.post(
        transport.session_id, [_request(1, "ping"), None, _request(2, "ping")],
    )
    assert queued == 3
    frames = await read_frames(transport, 4)
    payloads = [message_payload(f) for f in frames[1:]]
    assert payloads[0]["id"] == 1
    assert payloads[1]["error"]["code"] == -32600
    assert payloads[2]["id"] == 2


@pytest.mark.asyncio
async def test_sessions_do_not_see_each_others_responses(runtime):
    first = await runtime.streaming.open()
    second = await runtime.streaming.open()
    runtime.messages.post(first.session_id, _request("only-first", "ping"))
    frames = await read_frames(first, 2)
    assert message_payload(frames[1])["id"] == "only-first"
    assert second._outbox.qsize() == 1  # just the endpoint event


@pytest.mark.asyncio
async def test_close_is_idempotent(runtime):
    transport = await runtime.streaming.open()
    session_id = transport.session_id
    assert await runtime.streaming.close(session_id) is True
    assert await runtime.streaming.close(session_id) is False
    assert session_id not in runtime.sessions
    assert transport.state is StreamState.CLOSED


@pytest.mark.asyncio
async def test_cleanup_runs_once_under_concurrent_close(runtime):
    calls = []

    async def cleanup():
        calls.append(1)
        await asyncio.sleep(0)

    transport = SseTransport("/message")
    session_id = await runtime.sessions.create(transport, cleanup=cleanup)
    transport.open(session_id)

    results = await asyncio.gather(
        runtime.streaming.close(session_id),
        runtime.streaming.close(session_id),
        runtime.streaming.shutdown(),
    )
    assert calls == [1]
    assert results[0] is True and results[1] is False
    assert results[2] == 0
    assert transport.state is StreamState.CLOSED


@pytest.mark.asyncio
async def test_post_after_close_rejected(runtime):
    transport = await runtime.streaming.open()
    await runtime.streaming.close(transport.session_id)
    with pytest.raises(SessionNotFoundError):
        runtime.messages.post(transport.session_id, _request(1, "ping"))


@pytest.mark.asyncio
async def test_stream_body_ends_and_closes_session(runtime):
    transport = await runtime.streaming.open()
    frames = []

    async def consume():
        async for frame in runtime.streaming.stream(transport):
            frames.append(frame)

    consumer = asyncio.create_task(consume())
    await asyncio.sleep(0)
    transport.close()
    await asyncio.wait_for(consumer, 2.0)
    assert frames[0].startswith("event: endpoint")
    assert transport.session_id not in runtime.sessions


@pytest.mark.asyncio
async def test_cancelled_stream_still_unregisters(runtime):
    transport = await runtime.streaming.open()

    async def consume():
        async for _ in runtime.streaming.stream(transport):
            pass

    consumer = asyncio.create_task(consume())
    await asyncio.sleep(0.01)
    consumer.cancel()
    with pytest.raises(asyncio.CancelledError):
        await consumer
    await asyncio.sleep(0.01)
    assert transport.session_id not in runtime.sessions


@pytest.mark.asyncio
async def test_shutdown_closes_all_sessions(runtime):
    transports = [await runtime.streaming.open() for _ in range(3)]
    assert await runtime.streaming.shutdown() == 3
    assert len(runtime.sessions) == 0
    assert all(t.state is StreamState.CLOSED for t in transports)
