"""Tool Result Envelope — the uniform shape every tools/call returns.

Invariants:
    - A result always has at least one content block
    - is_error distinguishes business failure from success; protocol faults never use it
    - to_wire() emits the JSON-RPC field names (isError, type/text)

Design Decisions:
    - Frozen dataclasses: results are transient values, never mutated after dispatch
    - Non-string payloads rendered as indented JSON (ensure_ascii=False keeps names readable);
      default=str covers dates and Decimals coming back from the store
"""

import json
from dataclasses import dataclass, field
from typing import Any

from student_mcp.core.domain_types import ContentKind


@dataclass(frozen=True)
class ContentBlock:
    kind: ContentKind
    text: str

    def to_wire(self) -> dict:
        return {"type": self.kind.value, "text": self.text}


@dataclass(frozen=True)
class ToolCallResult:
    content: tuple[ContentBlock, ...] = field(default_factory=tuple)
    is_error: bool = False

    @property
    def text(self) -> str:
        """All text blocks joined — convenience for logs and tests."""
        return "\n".join(block.text for block in self.content)

    def to_wire(self) -> dict:
        return {
            "content": [block.to_wire() for block in self.content],
            "isError": self.is_error,
        }


def text_result(payload: Any) -> ToolCallResult:
    """Successful result: strings verbatim, everything else as JSON."""
    return ToolCallResult(
        content=(ContentBlock(ContentKind.TEXT, render_payload(payload)),),
    )


def error_result(message: str) -> ToolCallResult:
    return ToolCallResult(
        content=(ContentBlock(ContentKind.TEXT, message),), is_error=True,
    )


def render_payload(payload: Any) -> str:
    if isinstance(payload, str):
        return payload
    return json.dumps(payload, indent=2, ensure_ascii=False, default=str)
