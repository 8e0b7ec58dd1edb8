"""Database base configuration for Brassworks."""

import os
from pathlib import Path
from typing import Generator

from sqlalchemy import Engine, create_engine, event
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

# Default database path
DEFAULT_DB_PATH = Path("data") / "brassworks.db"

# One engine per database file, tables created on first use
_engines: dict[Path, Engine] = {}


def get_db_path() -> Path:
    """Get database path from environment or use default.

    Returns:
        Path to database file.
    """
    db_path_str = os.getenv("DATABASE_PATH")
    if db_path_str:
        return Path(db_path_str)
    return DEFAULT_DB_PATH


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""


def _enable_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def get_engine(db_path: Path | str | None = None) -> Engine:
    """Get the engine for a snapshot store, creating it and its tables once.

    Args:
        db_path: Path to the SQLite database file. If None, uses DATABASE_PATH
            from env or default.

    Returns:
        SQLAlchemy engine.
    """
    path = Path(db_path) if db_path is not None else get_db_path()
    engine = _engines.get(path)
    if engine is None:
        path.parent.mkdir(parents=True, exist_ok=True)
        engine = create_engine(f"sqlite:///{path}", echo=False)
        event.listen(engine, "connect", _enable_foreign_keys)
        Base.metadata.create_all(bind=engine)
        _engines[path] = engine
    return engine


def get_session(
    db_path: Path | str | None = None,
) -> Generator[Session, None, None]:
    """Get a database session on the snapshot store.

    Args:
        db_path: Path to the SQLite database file.

    Yields:
        Database session.
    """
    session = sessionmaker(bind=get_engine(db_path), autoflush=False)()
    try:
        yield session
    finally:
        session.close()


def init_db(db_path: Path | str | None = None) -> Engine:
    """Initialize the database, creating all tables.

    Args:
        db_path: Path to the SQLite database file.

    Returns:
        The engine for the database.
    """
    return get_engine(db_path)
