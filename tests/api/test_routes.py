"""HTTP routes — health, compatibility stubs, MCP transports and the REST API.

Tests cover:
    - Liveness/readiness contracts
    - /message and /sse reject unknown or duplicate sessions with 404/409
    - /message queues batches element by element
    - /mcp answers JSON-RPC synchronously (single, batch, notification-only, parse error)
    - REST routes return {"data": ...} and honour 404/400 contracts

Design Decisions:
    - GET /sse for a new session is not requested over HTTP: the test client
      buffers the whole body and an open stream never ends (covered in
      tests/services/test_session_streams.py instead)
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from student_mcp.infrastructure.database import get_store
from student_mcp.main import app

from tests.services.stream_frames import message_payload, read_frames


# ─── Health & compatibility ──────────────────────────────────────

@pytest.mark.asyncio
async def test_root_reports_service_name(client):
    response = await client.get("/")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "name": "student-api-mcp"}


@pytest.mark.asyncio
async def test_readiness_with_reachable_store(client):
    response = await client.get("/health/ready")
    assert response.status_code == 200
    assert response.json()["checks"] == {"database": "healthy"}


@pytest.mark.asyncio
async def test_readiness_with_unreachable_store(client):
    broken = MagicMock()
    broken.health_check = AsyncMock(return_value=False)
    app.dependency_overrides[get_store] = lambda: broken
    response = await client.get("/health/ready")
    assert response.status_code == 503
    assert response.json()["reason"] == "database_unavailable"


@pytest.mark.asyncio
async def test_register_stub(client):
    response = await client.post("/register", json={"client_name": "x"})
    assert response.json() == {"result": "ok"}


@pytest.mark.asyncio
async def test_oauth_discovery_is_empty(client):
    response = await client.get("/.well-known/oauth-authorization-server")
    assert response.status_code == 200
    assert response.json() == {}


# ─── MCP over SSE ────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_message_for_unknown_session_is_404(client, runtime):
    response = await client.post(
        "/message?sessionId=missing",
        json={"jsonrpc": "2.0", "id": 1, "method": "ping"},
    )
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "SESSION_NOT_FOUND"
    assert len(runtime.sessions) == 0


@pytest.mark.asyncio
async def test_message_without_session_id_is_404(client):
    response = await client.post("/message", json={"jsonrpc": "2.0", "id": 1, "method": "ping"})
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_message_accepted_and_answered_on_stream(client, runtime):
    transport = await runtime.streaming.open()
    response = await client.post(
        f"/message?sessionId={transport.session_id}",
        json={"jsonrpc": "2.0", "id": 1, "method": "tools/call",
              "params": {"name": "add", "arguments": {"a": 2, "b": 3}}},
    )
    assert response.status_code == 202
    assert response.json() == {"status": "accepted"}
    frames = await read_frames(transport, 2)
    result = message_payload(frames[1])["result"]
    assert result["content"][0]["text"] == "The sum of 2 and 3 is 5."


@pytest.mark.asyncio
async def test_message_batch_accepted_and_answered_in_order(client, runtime):
    transport = await runtime.streaming.open()
    response = await client.post(
        f"/message?sessionId={transport.session_id}",
        json=[
            {"jsonrpc": "2.0", "id": 1, "method": "ping"},
            {"jsonrpc": "2.0", "id": 2, "method": "tools/list"},
        ],
    )
    assert response.status_code == 202
    frames = await read_frames(transport, 3)
    assert [message_payload(f)["id"] for f in frames[1:]] == [1, 2]


@pytest.mark.asyncio
async def test_batch_for_unknown_session_is_404(client, runtime):
    response = await client.post(
        "/message?sessionId=missing",
        json=[{"jsonrpc": "2.0", "id": 1, "method": "ping"}],
    )
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "SESSION_NOT_FOUND"
    assert len(runtime.sessions) == 0

@pytest.mark.asyncio
async def test_stream_reconnect_with_unknown_id_is_404(client, runtime):
    response = await client.get("/sse?sessionId=missing")
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "SESSION_NOT_FOUND"
    assert len(runtime.sessions) == 0


@pytest.mark.asyncio
async def test_second_stream_for_open_session_is_409(client, runtime):
    transport = await runtime.streaming.open()
    response = await client.get(f"/sse?sessionId={transport.session_id}")
    assert response.status_code == 409
    assert response.json()["error"]["code"] == "SESSION_ALREADY_OPEN"
    assert len(runtime.sessions) == 1


# ─── MCP over HTTP ───────────────────────────────────────────────

@pytest.mark.asyncio
async def test_mcp_tools_list(client):
    response = await client.post(
        "/mcp", json={"jsonrpc": "2.0", "id": 1, "method": "tools/list"},
    )
    assert response.status_code == 200
    assert len(response.json()["result"]["tools"]) == 14


@pytest.mark.asyncio
async def test_mcp_batch(client):
    response = await client.post("/mcp", json=[
        {"jsonrpc": "2.0", "id": 1, "method": "ping"},
        {"jsonrpc": "2.0", "method": "notifications/initialized"},
        {"jsonrpc": "2.0", "id": 2, "method": "tools/call",
         "params": {"name": "get_student_by_id", "arguments": {"id": 1}}},
    ])
    body = response.json()
    assert [r["id"] for r in body] == [1, 2]
    assert body[1]["result"]["isError"] is False


@pytest.mark.asyncio
async def test_mcp_notification_only_is_202(client):
    response = await client.post(
        "/mcp", json={"jsonrpc": "2.0", "method": "notifications/initialized"},
    )
    assert response.status_code == 202


@pytest.mark.asyncio
async def test_mcp_unparseable_body_is_parse_error(client):
    response = await client.post(
        "/mcp", content=b"{not json", headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["id"] is None
    assert body["error"]["code"] == -32700

@pytest.mark.asyncio
async def test_mcp_unknown_method(client):
    response = await client.post(
        "/mcp", json={"jsonrpc": "2.0", "id": 1, "method": "nope"},
    )
    assert response.json()["error"]["code"] == -32601


# ─── Student REST API ────────────────────────────────────────────

@pytest.mark.asyncio
async def test_list_students(client):
    response = await client.get("/api/students")
    assert response.status_code == 200
    assert [s["first_name"] for s in response.json()["data"]] == ["Ana", "Bruno"]


@pytest.mark.asyncio
async def test_get_student_and_404(client):
    assert (await client.get("/api/students/1")).json()["data"]["last_name"] == "Silva"
    missing = await client.get("/api/students/999")
    assert missing.status_code == 404
    assert missing.json()["error"]["code"] == "RESOURCE_NOT_FOUND"


@pytest.mark.asyncio
async def test_non_integer_id_is_400(client):
    response = await client.get("/api/students/abc")
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_student_records(client):
    assert len((await client.get("/api/students/1/grades")).json()["data"]) == 3
    assert len((await client.get("/api/students/1/attendance")).json()["data"]) == 2
    assert len((await client.get("/api/students/1/payments")).json()["data"]) == 2
    average = (await client.get("/api/students/1/average")).json()["data"]
    assert average["overall_average"] == 7.75
    assert (await client.get("/api/students/999/grades")).status_code == 404


@pytest.mark.asyncio
async def test_search_and_class_listing(client):
    found = await client.get("/api/students/search/Costa")
    assert [s["id"] for s in found.json()["data"]] == [2]
    in_class = await client.get("/api/classes/1/students")
    assert len(in_class.json()["data"]) == 2


@pytest.mark.asyncio
async def test_create_update_delete_student(client):
    created = await client.post("/api/students", json={
        "national_id": "44444444", "first_name": "Dora", "last_name": "Lima",
        "birth_date": "2013-01-09", "gender": "F",
    })
    assert created.status_code == 201
    new_id = created.json()["data"]["id"]

    updated = await client.put(f"/api/students/{new_id}", json={"class_id": 2})
    assert updated.json()["data"] == {"message": "Student updated", "changes": 1}
    assert (await client.get(f"/api/students/{new_id}")).json()["data"]["class_name"] == "6B"

    deleted = await client.delete(f"/api/students/{new_id}")
    assert deleted.status_code == 200
    listed = (await client.get("/api/students")).json()["data"]
    assert new_id not in [s["id"] for s in listed]


@pytest.mark.asyncio
async def test_create_rejects_unknown_fields(client):
    response = await client.post("/api/students", json={
        "national_id": "44444444", "first_name": "Dora", "last_name": "Lima",
        "birth_date": "2013-01-09", "gender": "F", "nickname": "D",
    })
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_duplicate_national_id_is_409(client):
    response = await client.post("/api/students", json={
        "national_id": "11111111", "first_name": "Dora", "last_name": "Lima",
        "birth_date": "2013-01-09", "gender": "F",
    })
    assert response.status_code == 409
    assert response.json()["error"]["code"] == "DATA_CONFLICT"
    assert "UNIQUE" in response.json()["error"]["message"]

@pytest.mark.asyncio
async def test_update_without_fields_is_400(client):
    response = await client.put("/api/students/1", json={})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_update_and_delete_missing_student_are_404(client):
    assert (await client.put("/api/students/999", json={"phone": "1"})).status_code == 404
    assert (await client.delete("/api/students/999")).status_code == 404


@pytest.mark.asyncio
async def test_custom_query(client):
    ok = await client.post("/api/custom-query", json={
        "query": "SELECT name FROM classes WHERE level = ?", "params": ["6"],
    })
    assert ok.json() == {"data": [{"name": "6B"}]}
    rejected = await client.post("/api/custom-query", json={"query": "DROP TABLE students"})
    assert rejected.status_code == 400
    assert rejected.json()["error"]["code"] == "QUERY_NOT_ALLOWED"
