"""Core Layer — pure protocol logic, no IO, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - Functions are pure and deterministic (validation, envelopes, JSON-RPC framing)

Design Decisions:
    - Functional core separated from imperative shell
"""
