"""Student MCP Server — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map StudentMcpError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Startup order: logging → data store (schema + connectivity check) → runtime;
      shutdown order: sessions drained → data store disposed

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - An unreachable data store at startup is fatal: the lifespan raises and the
      server never accepts connections
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from student_mcp.api.error_handlers import register_error_handlers
from student_mcp.api.routes import (
    classes, compat, health, mcp_http, mcp_sse, students,
)
from student_mcp.config import get_settings
from student_mcp.db.base import Base
from student_mcp.infrastructure.database import init_store
from student_mcp.infrastructure.observability import setup_logging
from student_mcp.services.mcp_runtime import init_runtime

import student_mcp.models  # noqa: F401  (registers tables on Base.metadata)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    store = init_store(settings.database_url)
    await store.create_schema(Base.metadata)
    if not await store.health_check():
        await store.close()
        raise RuntimeError("Data store unreachable at startup")
    runtime = init_runtime(store, settings)
    logger.info(
        f"{settings.service_name} started "
        f"(sse: /sse, messages: {settings.message_path}, http: /mcp)",
    )
    yield
    logger.info(f"{settings.service_name} shutting down")
    await runtime.shutdown()
    await store.close()
    logger.info("Shutdown complete")


settings = get_settings()
app = FastAPI(
    title=settings.service_name, version=settings.service_version, lifespan=lifespan,
)

# CORS — configured from settings, not hardcoded
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routes — explicit registration
app.include_router(health.router)
app.include_router(compat.router)
app.include_router(mcp_sse.router)
app.include_router(mcp_http.router)
app.include_router(students.router)
app.include_router(classes.router)

register_error_handlers(app)
