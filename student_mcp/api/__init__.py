"""API Layer — FastAPI routes and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - All endpoints except the SSE stream return JSON

Design Decisions:
    - Thin routes delegate to services: the MCP transports to the runtime,
      the REST routes to the student repository
"""
