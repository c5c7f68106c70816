"""SchoolClass ORM — a class (homeroom) students are enrolled in."""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from student_mcp.db.base import Base


class SchoolClass(Base):
    __tablename__ = "classes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(50), nullable=False)
    level: Mapped[int | None] = mapped_column(Integer, nullable=True)
