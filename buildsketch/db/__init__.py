"""Database package: shared engine and session factory."""

from buildsketch.db.base import Base, close_db, get_session_factory, init_db, make_session_factory

__all__ = [
    "Base",
    "close_db",
    "get_session_factory",
    "init_db",
    "make_session_factory",
]
