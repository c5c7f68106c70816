"""Schemas — pydantic shapes at the API boundary.

Invariants:
    - Tool input shapes derive from ToolInputShape (extra fields forbidden)
    - The same shape serves a tool call and its REST counterpart
"""
