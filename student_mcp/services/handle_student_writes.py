"""Student Write Handlers — create, update, soft delete, and the free-form query tool.

Invariants:
    - update_student writes only the fields the caller sent (exclude_unset)
    - delete_student is a soft delete; the row stays with active = 0
    - custom_query accepts a single SELECT/WITH statement and runs it read-only

Design Decisions:
    - custom_query lives with the writes: it is the one tool whose input is SQL text,
      so its guard sits next to the other statements that change behaviour by input
"""

from student_mcp.schemas.student import (
    CustomQuery, StudentCreate, StudentIdInput, StudentUpdate,
)
from student_mcp.services.student_repository import StudentRepository


class StudentWriteHandlers:
    """Mutations of student records plus guarded ad-hoc reads."""

    def __init__(self, repository: StudentRepository):
        self.repository = repository

    async def add_student(self, args: StudentCreate) -> dict:
        return await self.repository.add_student(args)

    async def update_student(self, args: StudentUpdate) -> dict:
        return await self.repository.update_student(args.id, args.changed_fields())

    async def delete_student(self, args: StudentIdInput) -> dict:
        return await self.repository.delete_student(args.id)

    async def custom_query(self, args: CustomQuery) -> dict:
        return {"data": await self.repository.custom_query(args.query, args.params)}
