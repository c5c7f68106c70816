"""Root conftest — shared test configuration and a seeded in-memory data store.

Invariants:
    - Every test gets a fresh in-memory SQLite database with the full schema
    - Seed data is small and fixed: tests assert on exact names and numbers
"""

import os

# Keep tests off any real database file and instructions document
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("INSTRUCTIONS_PATH", "tests-no-instructions.md")

import pytest  # noqa: E402
from sqlalchemy.ext.asyncio import create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

import student_mcp.models  # noqa: E402,F401
from student_mcp.config import Settings  # noqa: E402
from student_mcp.db.base import Base  # noqa: E402
from student_mcp.infrastructure.database import SqlDataStore  # noqa: E402
from student_mcp.services.mcp_runtime import build_runtime  # noqa: E402
from student_mcp.services.student_repository import StudentRepository  # noqa: E402

SEED_STATEMENTS = [
    "INSERT INTO classes (id, name, level) VALUES (1, '5A', 5), (2, '6B', 6)",
    "INSERT INTO courses (id, name, code) VALUES (1, 'Mathematics', 'MATH101'), "
    "(2, 'History', 'HIST101')",
    """INSERT INTO students
        (id, national_id, first_name, last_name, birth_date, gender, class_id, active)
       VALUES
        (1, '11111111', 'Ana', 'Silva', '2012-03-14', 'F', 1, 1),
        (2, '22222222', 'Bruno', 'Costa', '2012-07-02', 'M', 1, 1),
        (3, '33333333', 'Carla', 'Souza', '2011-11-20', 'F', 2, 0)""",
    """INSERT INTO grades (student_id, course_id, value, kind, date) VALUES
        (1, 1, 8.0, 'exam', '2024-03-01'),
        (1, 1, 9.0, 'quiz', '2024-04-01'),
        (1, 2, 7.0, 'exam', '2024-03-15')""",
    """INSERT INTO attendance (student_id, course_id, date, status) VALUES
        (1, 1, '2024-03-01', 'present'),
        (1, 2, '2024-03-02', 'absent')""",
    """INSERT INTO payments (student_id, amount, date, description, status) VALUES
        (1, 150.0, '2024-02-01', 'February tuition', 'paid'),
        (1, 150.0, '2024-03-01', 'March tuition', 'pending')""",
]


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def store(test_engine):
    data_store = SqlDataStore(test_engine)
    for statement in SEED_STATEMENTS:
        await data_store.execute(statement)
    return data_store


@pytest.fixture
def repository(store):
    return StudentRepository(store)


@pytest.fixture
def test_settings():
    return Settings(
        instructions_path="tests-no-instructions.md", sse_keepalive_seconds=5.0,
    )


@pytest.fixture
async def runtime(store, test_settings):
    mcp_runtime = build_runtime(store, test_settings)
    yield mcp_runtime
    await mcp_runtime.shutdown()
