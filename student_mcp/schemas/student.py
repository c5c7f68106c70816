"""Student Schemas — pydantic input shapes shared by tools and REST routes.

Invariants:
    - Every shape forbids unknown fields (ToolInputShape)
    - Field descriptions double as the tool documentation shown by tools/list
    - StudentCreate requires identity fields; StudentUpdate requires only the id

Design Decisions:
    - One declaration per shape for both transports: a REST body and a tool call
      cannot drift apart
    - Dates stay ISO strings (YYYY-MM-DD): the store keeps them as text
"""

from typing import Literal

from pydantic import Field

from student_mcp.core.validate_input import ToolInputShape

_STUDENT_ID = "Student ID"


class NoArguments(ToolInputShape):
    """Shape for tools that take no input."""


class StudentIdInput(ToolInputShape):
    id: int = Field(description=_STUDENT_ID)


class ClassIdInput(ToolInputShape):
    class_id: int = Field(description="Class ID")


class StudentSearch(ToolInputShape):
    search: str = Field(
        min_length=1, description="Search term (first name, last name or national ID)",
    )


class StudentFields(ToolInputShape):
    """Optional contact and enrollment fields common to create and update."""
    phone: str | None = Field(None, description="Phone")
    email: str | None = Field(None, description="Email")
    address: str | None = Field(None, description="Address")
    guardian_name: str | None = Field(None, description="Guardian name")
    guardian_phone: str | None = Field(None, description="Guardian phone")
    class_id: int | None = Field(None, description="Class ID")


class StudentCreate(StudentFields):
    national_id: str = Field(min_length=1, max_length=20, description="National ID number")
    first_name: str = Field(min_length=1, description="First name")
    last_name: str = Field(min_length=1, description="Last name")
    birth_date: str = Field(
        pattern=r"^\d{4}-\d{2}-\d{2}$", description="Birth date (YYYY-MM-DD)",
    )
    gender: Literal["M", "F"] = Field(description="Gender (M/F)")


class StudentUpdate(StudentFields):
    id: int = Field(description=_STUDENT_ID)
    national_id: str | None = Field(None, max_length=20, description="National ID number")
    first_name: str | None = Field(None, description="First name")
    last_name: str | None = Field(None, description="Last name")
    birth_date: str | None = Field(
        None, pattern=r"^\d{4}-\d{2}-\d{2}$", description="Birth date (YYYY-MM-DD)",
    )
    gender: Literal["M", "F"] | None = Field(None, description="Gender (M/F)")
    active: bool | None = Field(None, description="Active (enrolled) status")

    def changed_fields(self) -> dict:
        """Fields the caller actually sent, without the id."""
        return self.model_dump(exclude={"id"}, exclude_unset=True)


class StudentPatch(StudentUpdate):
    """REST body for PUT /api/students/{id}: the id comes from the path."""
    id: int | None = Field(None, description=_STUDENT_ID)


class CustomQuery(ToolInputShape):
    query: str = Field(min_length=1, description="SQL SELECT statement")
    params: list[str] = Field(
        default_factory=list, description="Positional query parameters for '?' placeholders",
    )
