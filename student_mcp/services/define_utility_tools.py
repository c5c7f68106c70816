"""Define Utility Tools — connectivity-check tools listed ahead of the student tools.

Invariants:
    - Entries carry name, description and a pydantic input shape; handlers are
      paired explicitly in tools_registry.py
"""

from student_mcp.schemas.utility import AddInput, EchoInput

TOOLS_UTILITY = [
    {
        "name": "echo",
        "description": "Echoes back the input",
        "input_shape": EchoInput,
    },
    {
        "name": "add",
        "description": "Adds two numbers",
        "input_shape": AddInput,
    },
]
