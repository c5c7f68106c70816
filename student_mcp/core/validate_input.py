"""Tool Input Validation — raw JSON-RPC arguments checked against a tool's pydantic shape.

Invariants:
    - Validation is strict: no str->int coercion, bool stays bool (ints accepted for floats)
    - Unknown fields are rejected at every level, provided nested object shapes also
      derive from ToolInputShape (pydantic applies extra="forbid" per model, it is
      not inherited by plain BaseModel fields)
    - Every failure names the offending field (dotted path for nested shapes)
    - No side effects: a failed validation never reaches the handler

Design Decisions:
    - pydantic models as shape descriptors: one declaration yields both the
      validator and the JSON Schema advertised by tools/list
    - None arguments mean "no arguments" (clients omit the key for no-arg tools)
"""

from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError

from student_mcp.core.errors import ToolValidationError

ShapeT = TypeVar("ShapeT", bound=BaseModel)

_CONSTRAINTS = {
    "missing": "is required",
    "extra_forbidden": "is not an accepted field",
}


class ToolInputShape(BaseModel):
    """Base class for every tool input shape, nested object shapes included."""
    model_config = ConfigDict(extra="forbid")


def validate_tool_input(shape: type[ShapeT], raw_args: Any) -> ShapeT:
    """Validate raw arguments. Raises ToolValidationError naming the first bad field."""
    if raw_args is None:
        raw_args = {}
    if not isinstance(raw_args, dict):
        raise ToolValidationError(
            "Invalid arguments: 'arguments' must be an object", field="arguments",
        )
    try:
        return shape.model_validate(raw_args, strict=True)
    except ValidationError as exc:
        problems = [_describe(e) for e in exc.errors()]
        first_field = problems[0][0] if problems else "arguments"
        detail = "; ".join(f"'{f}' {c}" for f, c in problems)
        raise ToolValidationError(
            f"Invalid arguments: {detail}", field=first_field,
        ) from exc


def tool_input_schema(shape: type[BaseModel]) -> dict:
    """JSON Schema for tools/list — the shape's schema without the model title."""
    schema = shape.model_json_schema()
    schema.pop("title", None)
    schema.setdefault("type", "object")
    schema.setdefault("properties", {})
    return schema


def _describe(error: dict) -> tuple[str, str]:
    """(field path, constraint) for one pydantic error entry."""
    field = ".".join(str(part) for part in error.get("loc", ())) or "arguments"
    constraint = _CONSTRAINTS.get(error.get("type", ""))
    if constraint is None:
        constraint = f"is invalid: {error.get('msg', 'invalid value')}"
    return field, constraint
