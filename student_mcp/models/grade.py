"""Grade ORM — one graded assessment of a student in a course."""

from sqlalchemy import Float, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from student_mcp.db.base import Base


class Grade(Base):
    __tablename__ = "grades"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    student_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("students.id"), nullable=False,
    )
    course_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("courses.id"), nullable=False,
    )
    value: Mapped[float] = mapped_column(Float, nullable=False)
    # exam, quiz, project...
    kind: Mapped[str | None] = mapped_column(String(30), nullable=True)
    date: Mapped[str] = mapped_column(String(10), nullable=False)
