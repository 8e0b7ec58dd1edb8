"""Database layer for Brassworks persistence."""

from .base import Base, get_engine, get_session, init_db
from .repository import GameRepository

__all__ = [
    "Base",
    "get_engine",
    "get_session",
    "init_db",
    "GameRepository",
]
