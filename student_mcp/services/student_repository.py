"""Student Repository — every student-records statement, shared by tools and REST routes.

Invariants:
    - All SQL lives here; handlers and routes never build statements
    - Lookups of a missing student raise ResourceNotFoundError, never return None
    - Writes report what changed: inserted id or affected row count
    - Only listing and search hide inactive students; get_student returns any record

Design Decisions:
    - Named parameters everywhere: statements are static text, values are bound
    - update_student builds SET from the validated shape's field names only
      (never from raw client keys)
    - Soft delete (active = 0) keeps grades and payments referentially intact
"""

import logging

from student_mcp.core.errors import ResourceNotFoundError, ToolValidationError
from student_mcp.core.query_guard import ensure_read_only_query
from student_mcp.core.repository_protocols import DataStore, Row
from student_mcp.schemas.student import StudentCreate

logger = logging.getLogger(__name__)

_STUDENT_WITH_CLASS = """
    SELECT s.*, c.name AS class_name, c.level AS class_level
    FROM students s
    LEFT JOIN classes c ON s.class_id = c.id
"""

_ORDER_BY_NAME = " ORDER BY s.first_name, s.last_name"

_UPDATABLE = (
    "national_id", "first_name", "last_name", "birth_date", "gender",
    "phone", "email", "address", "guardian_name", "guardian_phone",
    "class_id", "active",
)


class StudentRepository:
    """Queries and writes for students and their academic/payment records."""

    def __init__(self, store: DataStore):
        self.store = store

    # ─── Reads ───────────────────────────────────────────────────

    async def list_active_students(self) -> list[Row]:
        return await self.store.query(
            _STUDENT_WITH_CLASS + " WHERE s.active = 1" + _ORDER_BY_NAME,
        )

    async def get_student(self, student_id: int) -> Row:
        row = await self.store.get_by_id(
            _STUDENT_WITH_CLASS + " WHERE s.id = :id", student_id,
        )
        if row is None:
            raise ResourceNotFoundError("Student", str(student_id))
        return row

    async def students_by_class(self, class_id: int) -> list[Row]:
        return await self.store.query(
            _STUDENT_WITH_CLASS
            + " WHERE s.class_id = :class_id AND s.active = 1"
            + _ORDER_BY_NAME,
            {"class_id": class_id},
        )

    async def search_students(self, term: str) -> list[Row]:
        return await self.store.query(
            _STUDENT_WITH_CLASS
            + """ WHERE (s.first_name LIKE :pattern
                   OR s.last_name LIKE :pattern
                   OR s.national_id LIKE :pattern)
                  AND s.active = 1"""
            + _ORDER_BY_NAME,
            {"pattern": f"%{term}%"},
        )

    async def student_grades(self, student_id: int) -> list[Row]:
        await self._require_student(student_id)
        return await self.store.query(
            """
            SELECT g.*, c.name AS course_name, c.code AS course_code
            FROM grades g
            JOIN courses c ON g.course_id = c.id
            WHERE g.student_id = :id
            ORDER BY g.date DESC
            """,
            {"id": student_id},
        )

    async def student_attendance(self, student_id: int) -> list[Row]:
        await self._require_student(student_id)
        return await self.store.query(
            """
            SELECT a.*, c.name AS course_name, c.code AS course_code
            FROM attendance a
            JOIN courses c ON a.course_id = c.id
            WHERE a.student_id = :id
            ORDER BY a.date DESC
            """,
            {"id": student_id},
        )

    async def student_payments(self, student_id: int) -> list[Row]:
        await self._require_student(student_id)
        return await self.store.query(
            "SELECT * FROM payments WHERE student_id = :id ORDER BY date DESC",
            {"id": student_id},
        )

    async def student_average(self, student_id: int) -> dict:
        """Per-course averages plus the overall average of those averages."""
        await self._require_student(student_id)
        rows = await self.store.query(
            """
            SELECT c.name AS course_name, c.code AS course_code,
                   COUNT(*) AS grade_count,
                   ROUND(AVG(g.value), 2) AS course_average
            FROM grades g
            JOIN courses c ON g.course_id = c.id
            WHERE g.student_id = :id
            GROUP BY c.id, c.name, c.code
            ORDER BY course_average DESC
            """,
            {"id": student_id},
        )
        overall = (
            round(sum(r["course_average"] for r in rows) / len(rows), 2)
            if rows else 0.0
        )
        return {"overall_average": overall, "course_averages": rows}

    async def custom_query(self, statement: str, params: list[str]) -> list[Row]:
        checked = ensure_read_only_query(statement)
        logger.info("Running custom query", extra={"tool_name": "custom_query"})
        return await self.store.query(checked, list(params), read_only=True)

    # ─── Writes ──────────────────────────────────────────────────

    async def add_student(self, student: StudentCreate) -> dict:
        values = student.model_dump()
        columns = ", ".join(values)
        placeholders = ", ".join(f":{name}" for name in values)
        result = await self.store.execute(
            f"INSERT INTO students ({columns}) VALUES ({placeholders})", values,
        )
        logger.info(f"Student added (id={result.inserted_id})")
        return {"message": "Student added", "id": result.inserted_id}

    async def update_student(self, student_id: int, changes: dict) -> dict:
        """Partial update: only the given fields are written."""
        fields = {k: v for k, v in changes.items() if k in _UPDATABLE}
        if not fields:
            raise ToolValidationError(
                "Invalid arguments: no fields to update", field="fields",
            )
        if "active" in fields and fields["active"] is not None:
            fields["active"] = int(fields["active"])
        assignments = ", ".join(f"{name} = :{name}" for name in fields)
        result = await self.store.execute(
            f"UPDATE students SET {assignments} WHERE id = :id",
            {**fields, "id": student_id},
        )
        if result.rows_affected == 0:
            raise ResourceNotFoundError("Student", str(student_id))
        return {"message": "Student updated", "changes": result.rows_affected}

    async def delete_student(self, student_id: int) -> dict:
        """Soft delete: the record stays, marked inactive."""
        result = await self.store.execute(
            "UPDATE students SET active = 0 WHERE id = :id", {"id": student_id},
        )
        if result.rows_affected == 0:
            raise ResourceNotFoundError("Student", str(student_id))
        return {"message": "Student deleted", "changes": result.rows_affected}

    async def _require_student(self, student_id: int) -> None:
        row = await self.store.get_by_id(
            "SELECT id FROM students WHERE id = :id", student_id,
        )
        if row is None:
            raise ResourceNotFoundError("Student", str(student_id))
