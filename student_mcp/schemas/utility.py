"""Utility Schemas — shapes for the connectivity-check tools."""

from pydantic import Field

from student_mcp.core.validate_input import ToolInputShape


class EchoInput(ToolInputShape):
    message: str = Field(description="Message to echo")


class AddInput(ToolInputShape):
    a: float = Field(description="First number")
    b: float = Field(description="Second number")
