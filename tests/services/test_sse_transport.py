"""SSE Transport — state transitions, framing and keepalive."""

import asyncio

import pytest

from student_mcp.core.domain_types import StreamState
from student_mcp.core.errors import SessionNotFoundError
from student_mcp.infrastructure.sse_transport import SseTransport, format_sse

from tests.services.stream_frames import parse_frame, read_frames


def test_format_sse_single_line():
    assert format_sse("endpoint", "/message?sessionId=x") == (
        "event: endpoint\ndata: /message?sessionId=x\n\n"
    )


def test_format_sse_splits_multiline_data():
    assert format_sse("message", "a\nb") == "event: message\ndata: a\ndata: b\n\n"


@pytest.mark.asyncio
async def test_open_announces_endpoint():
    transport = SseTransport("/message")
    transport.open("abc")
    assert transport.state is StreamState.OPEN
    frames = await read_frames(transport, 1)
    assert parse_frame(frames[0]) == ("endpoint", "/message?sessionId=abc")


@pytest.mark.asyncio
async def test_open_twice_rejected():
    transport = SseTransport("/message")
    transport.open("abc")
    with pytest.raises(RuntimeError):
        transport.open("def")


@pytest.mark.asyncio
async def test_deliver_requires_open_transport():
    transport = SseTransport("/message")
    with pytest.raises(SessionNotFoundError):
        transport.deliver({"jsonrpc": "2.0", "id": 1, "method": "ping"})


@pytest.mark.asyncio
async def test_send_after_close_is_dropped():
    transport = SseTransport("/message")
    transport.open("abc")
    transport.close()
    assert await transport.send({"jsonrpc": "2.0", "id": 1, "result": {}}) is False


@pytest.mark.asyncio
async def test_close_ends_events_and_receive():
    transport = SseTransport("/message")
    transport.open("abc")
    transport.close()
    transport.close()
    frames = [frame async for frame in transport.events()]
    assert len(frames) == 1
    assert await transport.receive() is None


@pytest.mark.asyncio
async def test_keepalive_comment_when_idle():
    transport = SseTransport("/message", keepalive_seconds=0.01)
    transport.open("abc")
    events = transport.events()
    try:
        assert (await anext(events)).startswith("event: endpoint")
        assert await asyncio.wait_for(anext(events), 1.0) == ": keepalive\n\n"
    finally:
        await events.aclose()
