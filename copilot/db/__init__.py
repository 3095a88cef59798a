"""Database session and models."""

from copilot.db.session import (
    get_db,
    init_db,
    close_db,
    Base,
    AsyncSessionLocal,
    engine,
)

__all__ = [
    "get_db",
    "init_db",
    "close_db",
    "Base",
    "AsyncSessionLocal",
    "engine",
]
