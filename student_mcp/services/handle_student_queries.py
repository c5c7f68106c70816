"""Student Query Handlers — read-only student tools (4 methods).

Invariants:
    - Handlers receive already-validated shapes, never raw arguments
    - Handlers return plain data; the dispatcher renders it into the result envelope
    - Domain faults (ResourceNotFoundError, DatabaseError) propagate to the dispatcher

Design Decisions:
    - Handler class with an injected repository: explicit dependencies, no globals
    - Split handlers by concern, max ~4 methods per class
"""

from student_mcp.core.repository_protocols import Row
from student_mcp.schemas.student import (
    ClassIdInput, NoArguments, StudentIdInput, StudentSearch,
)
from student_mcp.services.student_repository import StudentRepository


class StudentQueryHandlers:
    """Listing, lookup and search of student records."""

    def __init__(self, repository: StudentRepository):
        self.repository = repository

    async def get_all_students(self, args: NoArguments) -> dict:
        return {"data": await self.repository.list_active_students()}

    async def get_student_by_id(self, args: StudentIdInput) -> dict:
        """Single student with class info. Missing id -> ResourceNotFoundError."""
        row: Row = await self.repository.get_student(args.id)
        return {"data": row}

    async def get_students_by_class(self, args: ClassIdInput) -> dict:
        return {"data": await self.repository.students_by_class(args.class_id)}

    async def search_students(self, args: StudentSearch) -> dict:
        return {"data": await self.repository.search_students(args.search)}
