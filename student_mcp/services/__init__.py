"""Services Layer — tool registry, dispatch, protocol server, sessions, and handlers.

Invariants:
    - Handlers split by concern (max 4 methods each)
    - Tool dispatch uses an explicit name -> handler table (no auto-discovery)
    - Every transport shares the one ToolDispatch built at startup
"""
