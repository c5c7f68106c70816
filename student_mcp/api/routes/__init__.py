"""Route Modules — one file per transport or resource.

Invariants:
    - Each module defines its own APIRouter
    - Routes never contain business logic (delegate to services/repository)

Design Decisions:
    - Explicit registration in main.py over auto-discovery
"""
