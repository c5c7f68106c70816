"""ORM Models — SQLAlchemy declarative models for the student-records schema.

Invariants:
    - All models inherit from Base (db/base.py)
    - Student is the aggregate root; grades, attendance and payments are scoped by student_id
    - Students are soft-deleted (active = 0), never removed

Design Decisions:
    - One file per entity for locality
    - All models imported here so Base.metadata is complete before create_all or
      autogenerate runs
"""

from student_mcp.models.school_class import SchoolClass  # noqa: F401
from student_mcp.models.student import Student  # noqa: F401
from student_mcp.models.course import Course  # noqa: F401
from student_mcp.models.grade import Grade  # noqa: F401
from student_mcp.models.attendance import Attendance  # noqa: F401
from student_mcp.models.payment import Payment  # noqa: F401
