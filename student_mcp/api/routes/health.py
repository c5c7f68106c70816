"""Health & Readiness Probes — liveness and readiness endpoints.

Invariants:
    - GET / always returns 200 if the process is up (liveness)
    - GET /health/ready returns 503 if the data store is unreachable (readiness)

Design Decisions:
    - Separate liveness/readiness: liveness restarts, readiness removes from the
      load balancer
"""

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from student_mcp.config import get_settings
from student_mcp.core.repository_protocols import DataStore
from student_mcp.infrastructure.database import get_store

logger = logging.getLogger(__name__)
router = APIRouter(tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    """Basic liveness probe. Returns 200 if the process is up."""
    return {"status": "ok", "name": get_settings().service_name}


@router.get("/health/ready")
async def readiness_check(store: DataStore = Depends(get_store)):
    """Readiness probe — includes data store connectivity."""
    if not await store.health_check():
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "not_ready",
                "reason": "database_unavailable",
            },
        )
    return {"status": "ready", "checks": {"database": "healthy"}}
