"""Database module for SQLAlchemy async setup."""

from app.db.database import (
    Base,
    async_session_maker,
    engine,
    get_db,
    get_session_factory,
    init_db,
)

__all__ = [
    "Base",
    "engine",
    "async_session_maker",
    "get_db",
    "get_session_factory",
    "init_db",
]
