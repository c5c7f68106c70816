"""Define Student Tools — names, descriptions and input shapes of the student-records tools.

Invariants:
    - Declaration order here is the order tools/list reports
    - Required fields enforced by the shape, not handler code
    - Every name has exactly one handler in tools_registry.py

Design Decisions:
    - Tool schemas in a dedicated file: explicit, no auto-discovery
    - custom_query description states the SELECT-only rule so clients do not
      have to learn it from errors
"""

from student_mcp.schemas.student import (
    ClassIdInput, CustomQuery, NoArguments, StudentCreate, StudentIdInput,
    StudentSearch, StudentUpdate,
)

TOOLS_STUDENT_QUERIES = [
    {
        "name": "get_all_students",
        "description": "Get all active students together with their class information",
        "input_shape": NoArguments,
    },
    {
        "name": "get_student_by_id",
        "description": "Get a student's details by ID",
        "input_shape": StudentIdInput,
    },
]

TOOLS_STUDENT_RECORDS = [
    {
        "name": "get_student_grades",
        "description": "Get a student's grades, newest first",
        "input_shape": StudentIdInput,
    },
    {
        "name": "get_student_attendance",
        "description": "Get a student's attendance (absence) records, newest first",
        "input_shape": StudentIdInput,
    },
    {
        "name": "get_student_payments",
        "description": "Get a student's payment records, newest first",
        "input_shape": StudentIdInput,
    },
]

TOOLS_STUDENT_LOOKUP = [
    {
        "name": "get_students_by_class",
        "description": "Get the active students enrolled in a class",
        "input_shape": ClassIdInput,
    },
    {
        "name": "search_students",
        "description": "Search active students by first name, last name or national ID",
        "input_shape": StudentSearch,
    },
    {
        "name": "get_student_average",
        "description": "Get a student's grade average per course and overall",
        "input_shape": StudentIdInput,
    },
]

TOOLS_STUDENT_WRITES = [
    {
        "name": "add_student",
        "description": "Add a new student",
        "input_shape": StudentCreate,
    },
    {
        "name": "update_student",
        "description": "Update a student's details; only the fields provided are changed",
        "input_shape": StudentUpdate,
    },
    {
        "name": "delete_student",
        "description": "Delete a student (soft delete: the record is marked inactive)",
        "input_shape": StudentIdInput,
    },
    {
        "name": "custom_query",
        "description": (
            "Run a custom read-only query. Only a single SELECT (or WITH ... SELECT) "
            "statement is accepted; use '?' placeholders with params"
        ),
        "input_shape": CustomQuery,
    },
]

TOOLS_STUDENTS = [
    *TOOLS_STUDENT_QUERIES,
    *TOOLS_STUDENT_RECORDS,
    *TOOLS_STUDENT_LOOKUP,
    *TOOLS_STUDENT_WRITES,
]
