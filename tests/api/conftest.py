"""API test fixtures — FastAPI test client over the seeded store.

Invariants:
    - get_store and get_runtime overridden: the lifespan never runs in tests
    - Overrides cleared after every test
"""

import pytest
from httpx import ASGITransport, AsyncClient

from student_mcp.infrastructure.database import get_store
from student_mcp.main import app
from student_mcp.services.mcp_runtime import get_runtime


@pytest.fixture
async def client(store, runtime):
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_runtime] = lambda: runtime
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as ac:
        yield ac
    app.dependency_overrides.clear()
