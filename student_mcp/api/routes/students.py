"""Student REST API — the same repository operations the tools use, over plain HTTP.

Invariants:
    - Every success body is {"data": ...}
    - Missing students -> 404 via ResourceNotFoundError and the global handler
    - Request bodies validated by the shared pydantic shapes (unknown fields -> 400)

Design Decisions:
    - Thin routes: each one is a single repository call wrapped in the envelope
    - /search/{term} declared before /{student_id} so the literal segment wins
"""

import logging

from fastapi import APIRouter, Depends, status

from student_mcp.schemas.student import CustomQuery, StudentCreate, StudentPatch
from student_mcp.services.mcp_runtime import McpRuntime, get_runtime
from student_mcp.services.student_repository import StudentRepository

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["students"])


def get_repository(runtime: McpRuntime = Depends(get_runtime)) -> StudentRepository:
    return runtime.repository


@router.get("/students")
async def list_students(repo: StudentRepository = Depends(get_repository)):
    """All active students, ordered by name."""
    return {"data": await repo.list_active_students()}


@router.get("/students/search/{term}")
async def search_students(term: str, repo: StudentRepository = Depends(get_repository)):
    return {"data": await repo.search_students(term)}


@router.get("/students/{student_id}")
async def get_student(student_id: int, repo: StudentRepository = Depends(get_repository)):
    return {"data": await repo.get_student(student_id)}


@router.get("/students/{student_id}/grades")
async def student_grades(student_id: int, repo: StudentRepository = Depends(get_repository)):
    return {"data": await repo.student_grades(student_id)}


@router.get("/students/{student_id}/attendance")
async def student_attendance(
    student_id: int, repo: StudentRepository = Depends(get_repository),
):
    return {"data": await repo.student_attendance(student_id)}


@router.get("/students/{student_id}/payments")
async def student_payments(student_id: int, repo: StudentRepository = Depends(get_repository)):
    return {"data": await repo.student_payments(student_id)}


@router.get("/students/{student_id}/average")
async def student_average(student_id: int, repo: StudentRepository = Depends(get_repository)):
    return {"data": await repo.student_average(student_id)}


@router.post("/students", status_code=status.HTTP_201_CREATED)
async def create_student(
    body: StudentCreate, repo: StudentRepository = Depends(get_repository),
):
    """Enroll a new student."""
    return {"data": await repo.add_student(body)}


@router.put("/students/{student_id}")
async def update_student(
    student_id: int, body: StudentPatch,
    repo: StudentRepository = Depends(get_repository),
):
    """Partial update: only the fields present in the body are written."""
    return {"data": await repo.update_student(student_id, body.changed_fields())}


@router.delete("/students/{student_id}")
async def delete_student(student_id: int, repo: StudentRepository = Depends(get_repository)):
    """Soft delete (marks the student inactive)."""
    return {"data": await repo.delete_student(student_id)}


@router.post("/custom-query")
async def custom_query(body: CustomQuery, repo: StudentRepository = Depends(get_repository)):
    """Run a single read-only SELECT statement."""
    return {"data": await repo.custom_query(body.query, body.params)}
