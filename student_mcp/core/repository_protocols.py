"""Boundary Protocols — contracts between the protocol core and the data shell.

Invariants:
    - Core and services depend on DataStore, never on SQLAlchemy directly
    - Implementations provided by infrastructure via dependency injection
    - Store faults surface as DatabaseError (core/errors.py), never as driver exceptions

Design Decisions:
    - Protocol over ABC: structural subtyping, fakes in tests need no inheritance
    - Named params (Mapping) for repository statements; positional params (Sequence)
      only for client-authored custom queries written with "?" placeholders
"""

from dataclasses import dataclass
from typing import Any, Mapping, Protocol, Sequence

Row = dict[str, Any]
Params = Mapping[str, Any] | Sequence[Any] | None


@dataclass(frozen=True)
class WriteResult:
    """Outcome of a write: inserted row id (INSERT) and affected row count."""
    inserted_id: int | None
    rows_affected: int


class DataStore(Protocol):
    """Contract for the single relational store behind every tool and route."""
    async def query(
        self, statement: str, params: Params = None, *, read_only: bool = False,
    ) -> list[Row]: ...
    async def execute(self, statement: str, params: Params = None) -> WriteResult: ...
    async def get_by_id(self, statement: str, record_id: int) -> Row | None: ...
    async def health_check(self) -> bool: ...
    async def close(self) -> None: ...
