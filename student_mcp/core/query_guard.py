"""Query Guard — pure allow rules for client-authored SQL.

Invariants:
    - Only one statement per call (a single trailing ";" is tolerated)
    - The statement must start with SELECT or WITH
    - Returns the normalized statement; raises QueryNotAllowedError otherwise

Design Decisions:
    - Prefix checks are a first filter only: the store additionally runs these
      statements with writes disabled (read_only=True)
"""

from student_mcp.core.errors import QueryNotAllowedError

_ALLOWED_PREFIXES = ("SELECT", "WITH")


def ensure_read_only_query(statement: str) -> str:
    normalized = statement.strip().rstrip(";").strip()
    if not normalized:
        raise QueryNotAllowedError("Query is empty")
    if ";" in normalized:
        raise QueryNotAllowedError("Only a single statement is allowed")
    first_word = normalized.split(None, 1)[0].upper()
    if first_word not in _ALLOWED_PREFIXES:
        raise QueryNotAllowedError("Only SELECT queries are supported")
    return normalized
