"""Class REST API — students enrolled in a class."""

from fastapi import APIRouter, Depends

from student_mcp.api.routes.students import get_repository
from student_mcp.services.student_repository import StudentRepository

router = APIRouter(prefix="/api/classes", tags=["classes"])


@router.get("/{class_id}/students")
async def class_students(class_id: int, repo: StudentRepository = Depends(get_repository)):
    """Active students of one class, ordered by name."""
    return {"data": await repo.students_by_class(class_id)}
