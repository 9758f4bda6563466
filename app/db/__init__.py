"""
Database package: engine, session and declarative base.

Lets callers write `from app.db import get_db, Base, engine` and keeps
imports consistent.
"""

from .session import (
    engine,
    AsyncSessionLocal,
    Base,
    get_db,
    init_db,
    close_db,
)

__all__ = [
    "engine",
    "AsyncSessionLocal",
    "Base",
    "get_db",
    "init_db",
    "close_db",
]
