"""Student Record Handlers — grades, attendance, payments and averages (4 methods).

Invariants:
    - Each lookup first confirms the student exists (repository raises not found)
    - Results wrapped as {"data": ...}, same envelope as the REST routes
"""

from student_mcp.schemas.student import StudentIdInput
from student_mcp.services.student_repository import StudentRepository


class StudentRecordHandlers:
    """Academic and payment history of one student."""

    def __init__(self, repository: StudentRepository):
        self.repository = repository

    async def get_student_grades(self, args: StudentIdInput) -> dict:
        return {"data": await self.repository.student_grades(args.id)}

    async def get_student_attendance(self, args: StudentIdInput) -> dict:
        return {"data": await self.repository.student_attendance(args.id)}

    async def get_student_payments(self, args: StudentIdInput) -> dict:
        return {"data": await self.repository.student_payments(args.id)}

    async def get_student_average(self, args: StudentIdInput) -> dict:
        return {"data": await self.repository.student_average(args.id)}
