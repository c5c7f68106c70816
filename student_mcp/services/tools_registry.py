"""Tools Registry — the immutable name -> {description, input shape, handler} table.

Invariants:
    - Built exactly once at startup; no register/unregister after construction
    - Names are unique (duplicates rejected when the registry is built)
    - list_tools() preserves declaration order: utility tools, then student tools
    - Every defined tool has exactly one handler and every handler one definition

Design Decisions:
    - Explicit dict from tool name to bound handler: every mapping visible in one place,
      adding a tool requires editing this file (no getattr magic, no auto-discovery)
    - MappingProxyType over a plain dict: read-only view, the registry cannot be mutated
      through resolve() callers
    - Input schemas rendered once at build time: tools/list is served from a cached list
      handed out as deep copies, so callers can never alter a later listing
"""

import copy
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Awaitable, Callable, Iterable

from pydantic import BaseModel

from student_mcp.core.validate_input import tool_input_schema
from student_mcp.services.define_student_tools import TOOLS_STUDENTS
from student_mcp.services.define_utility_tools import TOOLS_UTILITY
from student_mcp.services.handle_student_queries import StudentQueryHandlers
from student_mcp.services.handle_student_records import StudentRecordHandlers
from student_mcp.services.handle_student_writes import StudentWriteHandlers
from student_mcp.services.handle_utility import UtilityHandlers
from student_mcp.services.student_repository import StudentRepository

ToolHandler = Callable[[Any], Awaitable[Any]]


@dataclass(frozen=True)
class ToolDefinition:
    name: str
    description: str
    input_shape: type[BaseModel]
    handler: ToolHandler

    def describe(self) -> dict:
        """tools/list entry for this tool."""
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": tool_input_schema(self.input_shape),
        }


class ToolRegistry:
    """Read-only lookup of tool definitions in declaration order."""

    def __init__(self, tools: Iterable[ToolDefinition]):
        table: dict[str, ToolDefinition] = {}
        for tool in tools:
            if tool.name in table:
                raise ValueError(f"Duplicate tool name: {tool.name}")
            table[tool.name] = tool
        self._tools = MappingProxyType(table)
        self._listing = tuple(tool.describe() for tool in table.values())

    def list_tools(self) -> list[dict]:
        return copy.deepcopy(list(self._listing))

    def resolve(self, name: str) -> ToolDefinition | None:
        return self._tools.get(name)

    def names(self) -> list[str]:
        return list(self._tools)

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: object) -> bool:
        return name in self._tools


ALL_TOOLS: list[dict] = [
    *TOOLS_UTILITY,     # 2 tools
    *TOOLS_STUDENTS,    # 12 tools
]
# Total: 14


def build_tool_registry(repository: StudentRepository) -> ToolRegistry:
    """Pair every tool definition with its handler. Fails fast on a missing pairing."""
    utility = UtilityHandlers()
    queries = StudentQueryHandlers(repository)
    records = StudentRecordHandlers(repository)
    writes = StudentWriteHandlers(repository)

    handlers: dict[str, ToolHandler] = {
        # Connectivity (2 tools)
        "echo": utility.echo,
        "add": utility.add,

        # Lookups (4 tools)
        "get_all_students": queries.get_all_students,
        "get_student_by_id": queries.get_student_by_id,
        "get_students_by_class": queries.get_students_by_class,
        "search_students": queries.search_students,

        # Records (4 tools)
        "get_student_grades": records.get_student_grades,
        "get_student_attendance": records.get_student_attendance,
        "get_student_payments": records.get_student_payments,
        "get_student_average": records.get_student_average,

        # Writes + guarded query (4 tools)
        "add_student": writes.add_student,
        "update_student": writes.update_student,
        "delete_student": writes.delete_student,
        "custom_query": writes.custom_query,
    }

    defined = {tool["name"] for tool in ALL_TOOLS}
    unpaired = defined.symmetric_difference(handlers)
    if unpaired:
        raise ValueError(f"Tools without definition/handler pairing: {sorted(unpaired)}")

    return ToolRegistry(
        ToolDefinition(
            name=tool["name"],
            description=tool["description"],
            input_shape=tool["input_shape"],
            handler=handlers[tool["name"]],
        )
        for tool in ALL_TOOLS
    )
