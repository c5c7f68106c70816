"""Infrastructure Layer — data store, stream transport, and cross-cutting concerns.

Invariants:
    - Infrastructure imports from core/ only (errors, types, protocols)
    - Driver exceptions never escape: mapped to core errors at this boundary
"""
