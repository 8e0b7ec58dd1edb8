"""SQLAlchemy models for database persistence."""

import json
from datetime import datetime
from typing import Any

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base


class GameModel(Base):
    """Database model for games.

    The full engine snapshot lives in snapshot_json; the other columns
    mirror it for listing games without decoding.
    """

    __tablename__ = "games"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    status: Mapped[str] = mapped_column(String(32))  # setup, active, completed
    era: Mapped[str] = mapped_column(String(16), default="canal")
    round: Mapped[int] = mapped_column(Integer, default=1)
    state_path: Mapped[str] = mapped_column(String(128), default="setup")
    winner_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    snapshot_json: Mapped[str] = mapped_column(Text, default="{}")
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    # Relationships
    game_log: Mapped[list["GameLogModel"]] = relationship(
        back_populates="game",
        cascade="all, delete-orphan",
        order_by="GameLogModel.seq",
    )

    @property
    def snapshot(self) -> dict[str, Any]:
        """Get the engine snapshot as dictionary."""
        return json.loads(self.snapshot_json)

    @snapshot.setter
    def snapshot(self, value: dict[str, Any]) -> None:
        """Set the engine snapshot from dictionary."""
        self.snapshot_json = json.dumps(value)


class GameLogModel(Base):
    """Database model for game event log."""

    __tablename__ = "game_log"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    game_id: Mapped[str] = mapped_column(String(64), ForeignKey("games.id"), index=True)
    seq: Mapped[int] = mapped_column(Integer, default=0)  # GameState.log_sequence
    entry_type: Mapped[str] = mapped_column(String(64))
    message: Mapped[str] = mapped_column(Text, default="")
    data_json: Mapped[str] = mapped_column(Text, default="{}")
    era: Mapped[str] = mapped_column(String(16))
    round: Mapped[int] = mapped_column(Integer)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    # Relationship
    game: Mapped["GameModel"] = relationship(back_populates="game_log")

    @property
    def data(self) -> dict[str, Any]:
        """Get entry data as dictionary."""
        return json.loads(self.data_json)

    @data.setter
    def data(self, value: dict[str, Any]) -> None:
        """Set entry data from dictionary."""
        self.data_json = json.dumps(value)
