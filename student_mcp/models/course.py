"""Course ORM — subjects that grades and attendance entries refer to."""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from student_mcp.db.base import Base


class Course(Base):
    __tablename__ = "courses"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    code: Mapped[str] = mapped_column(String(20), unique=True, nullable=False)
