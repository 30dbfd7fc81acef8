"""Database Infrastructure — declarative Base and a standalone session factory.

Invariants:
    - Request-scoped sessions come from infrastructure/database.py, not from here
    - All sessions are async (AsyncSession)

Design Decisions:
    - asyncpg driver for PostgreSQL in production, aiosqlite in tests
"""
