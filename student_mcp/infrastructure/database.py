"""Data Store — async SQLAlchemy engine behind the query/execute/get_by_id contract.

Invariants:
    - Every SQLAlchemy exception mapped to DatabaseError (core/errors.py) carrying the
      driver's message: tool callers see why the store refused
    - Constraint violations map to DataConflictError (409): bad client data, not an outage
    - Writes serialized through one asyncio.Lock (SQLite has a single writer anyway)
    - Reads run on their own connection and never commit
    - read_only queries run with PRAGMA query_only on SQLite: the engine itself refuses writes
    - A cancelled read-only query invalidates its connection and re-raises the
      CancelledError: cancellation is never turned into DatabaseError

Design Decisions:
    - Singleton data_store initialized on startup: FastAPI lifespan manages lifecycle
      (no global import side effects)
    - Raw text statements over ORM queries: the repository owns the SQL, the store
      only executes it; ORM models exist for schema creation and migrations
    - Named params go through text(); positional params through exec_driver_sql
      (client-authored custom queries use "?" placeholders)
"""

import asyncio
import logging
from typing import Mapping

from sqlalchemy import MetaData, text
from sqlalchemy.engine import CursorResult
from sqlalchemy.exc import (
    DBAPIError, IntegrityError, OperationalError, SQLAlchemyError,
)
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine

from student_mcp.core.errors import DataConflictError, DatabaseError
from student_mcp.core.repository_protocols import Params, Row, WriteResult

logger = logging.getLogger(__name__)


class SqlDataStore:
    """Executes repository statements with error mapping and write serialization."""

    def __init__(self, engine: AsyncEngine):
        self.engine = engine
        self._write_lock = asyncio.Lock()
        self._is_sqlite = engine.dialect.name == "sqlite"

    @classmethod
    def from_url(cls, database_url: str) -> "SqlDataStore":
        return cls(create_async_engine(database_url, pool_pre_ping=True))

    async def query(
        self, statement: str, params: Params = None, *, read_only: bool = False,
    ) -> list[Row]:
        """Run a SELECT and return rows as plain dicts."""
        try:
            async with self.engine.connect() as conn:
                guard = read_only and self._is_sqlite
                if guard:
                    await conn.exec_driver_sql("PRAGMA query_only = ON")
                try:
                    result = await _run(conn, statement, params)
                    rows = [dict(row) for row in result.mappings()]
                except SQLAlchemyError:
                    if guard:
                        await conn.exec_driver_sql("PRAGMA query_only = OFF")
                    raise
                except BaseException:
                    # Cancelled mid-statement: the connection state is unknown,
                    # never return it to the pool in read-only mode
                    if guard:
                        await conn.invalidate()
                    raise
                if guard:
                    await conn.exec_driver_sql("PRAGMA query_only = OFF")
                return rows
        except SQLAlchemyError as e:
            raise _to_database_error(e, "query")

    async def execute(self, statement: str, params: Params = None) -> WriteResult:
        """Run an INSERT/UPDATE/DELETE in its own transaction."""
        is_insert = statement.lstrip().upper().startswith("INSERT")
        async with self._write_lock:
            try:
                async with self.engine.begin() as conn:
                    result = await _run(conn, statement, params)
                    return WriteResult(
                        inserted_id=result.lastrowid if is_insert else None,
                        rows_affected=result.rowcount,
                    )
            except SQLAlchemyError as e:
                raise _to_database_error(e, "execute")

    async def get_by_id(self, statement: str, record_id: int) -> Row | None:
        """Run a statement bound to :id and return the first row, if any."""
        rows = await self.query(statement, {"id": record_id})
        return rows[0] if rows else None

    async def create_schema(self, metadata: MetaData) -> None:
        """Create missing tables (startup convenience for fresh database files)."""
        try:
            async with self.engine.begin() as conn:
                await conn.run_sync(metadata.create_all)
        except SQLAlchemyError as e:
            raise _to_database_error(e, "schema creation")

    async def health_check(self) -> bool:
        """Check database connectivity (for readiness probes)."""
        try:
            await self.query("SELECT 1")
            return True
        except DatabaseError as e:
            logger.error(f"DB health check failed: {e}")
            return False

    async def close(self) -> None:
        await self.engine.dispose()
        logger.info("Database connection closed")


async def _run(
    conn: AsyncConnection, statement: str, params: Params,
) -> CursorResult:
    if params is None or isinstance(params, Mapping):
        return await conn.execute(text(statement), dict(params or {}))
    return await conn.exec_driver_sql(statement, tuple(params))


def _to_database_error(e: SQLAlchemyError, operation: str) -> DatabaseError:
    detail = str(getattr(e, "orig", None) or e)
    if isinstance(e, IntegrityError):
        logger.warning(f"DB integrity error: {detail}")
        return DataConflictError(detail, "commit")
    if isinstance(e, OperationalError):
        logger.error(f"DB operational error: {detail}")
    elif isinstance(e, DBAPIError):
        logger.error(f"DB driver error: {detail}")
    else:
        logger.error(f"SQLAlchemy error: {detail}")
    return DatabaseError(detail, operation)


# Singleton (initialized on startup)
data_store: SqlDataStore | None = None


def init_store(database_url: str) -> SqlDataStore:
    global data_store
    data_store = SqlDataStore.from_url(database_url)
    return data_store


def get_store() -> SqlDataStore:
    """FastAPI dependency for the data store."""
    if not data_store:
        raise RuntimeError("Database not initialized")
    return data_store
