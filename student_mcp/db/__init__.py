"""Schema Layer — SQLAlchemy declarative Base shared by models and migrations.

Invariants:
    - Base.metadata is the single source of truth for table definitions
    - Queries never go through the ORM: the data store executes repository SQL
"""
