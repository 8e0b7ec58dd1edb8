"""Repository for game data persistence."""

import logging
from typing import Any

from sqlalchemy import func
from sqlalchemy.orm import Session

from brassworks.engine.game_engine import GameEngine
from brassworks.models.game_data import GameData
from brassworks.models.game_state import StatePath

from .models import GameLogModel, GameModel


class GameRepository:
    """Repository for saving and loading games.

    Attributes:
        session: SQLAlchemy database session.
    """

    def __init__(self, session: Session) -> None:
        """Initialize repository.

        Args:
            session: Database session.
        """
        self.session = session
        self.logger = logging.getLogger(__name__)

    # Game operations

    def create_game(self, game_id: str) -> GameModel:
        """Create a new game record.

        Args:
            game_id: Unique game ID.

        Returns:
            Game database model.
        """
        game = GameModel(id=game_id, status="setup", state_path=StatePath.SETUP.value)
        self.session.add(game)
        self.session.commit()
        return game

    def get_game(self, game_id: str) -> GameModel | None:
        """Get a game by ID.

        Args:
            game_id: Game ID.

        Returns:
            Game model or None.
        """
        return self.session.query(GameModel).filter_by(id=game_id).first()

    def save_game(self, engine: GameEngine) -> GameModel:
        """Save an engine snapshot, creating the game record if needed.

        Args:
            engine: Engine to save.

        Returns:
            Game database model.
        """
        state = engine.state
        self.logger.info(f"Saving game state for game {state.id}")

        game = self.get_game(state.id)
        if not game:
            self.logger.debug(f"Game {state.id} not found, creating new game record")
            game = self.create_game(state.id)

        if state.state_path == StatePath.SETUP:
            game.status = "setup"
        elif state.state_path == StatePath.GAME_OVER:
            game.status = "completed"
        else:
            game.status = "active"
        game.era = state.era.value
        game.round = state.round
        game.state_path = state.state_path.value
        game.winner_id = state.winner_id
        game.snapshot = engine.snapshot()

        self.session.commit()
        self.logger.info(
            f"Saved game {state.id} ({game.status}, {state.era.value} round {state.round})"
        )
        return game

    def load_game(self, game_id: str, data: GameData | None = None) -> GameEngine | None:
        """Resume an engine from its saved snapshot.

        Args:
            game_id: Game ID to load.
            data: Static tables the game was started with.

        Returns:
            GameEngine or None if not found.
        """
        game = self.get_game(game_id)
        if not game:
            return None
        return GameEngine.from_snapshot(game.snapshot, data)

    def list_games(self, status: str | None = None) -> list[GameModel]:
        """List games, most recently updated first.

        Args:
            status: Only games with this status, when given.

        Returns:
            List of game models.
        """
        query = self.session.query(GameModel)
        if status:
            query = query.filter(GameModel.status == status)
        return query.order_by(GameModel.updated_at.desc()).all()

    def delete_game(self, game_id: str) -> bool:
        """Delete a game and its log.

        Args:
            game_id: Game ID to delete.

        Returns:
            True if deleted, False if not found.
        """
        game = self.get_game(game_id)
        if not game:
            return False

        self.session.delete(game)
        self.session.commit()
        return True

    # Log operations

    def append_log_entries(self, game_id: str, entries: list[dict[str, Any]]) -> int:
        """Store game log entries permanently.

        Entries already stored for the game (by sequence number) are skipped,
        so the whole in-memory log can be streamed after every save.

        Args:
            game_id: Game the entries belong to.
            entries: Entries as produced by GameState.log_event.

        Returns:
            Number of entries stored.
        """
        if not self.get_game(game_id):
            raise ValueError(f"Game {game_id} not found")

        last_seq = (
            self.session.query(func.max(GameLogModel.seq))
            .filter(GameLogModel.game_id == game_id)
            .scalar()
            or 0
        )
        new_entries = [e for e in entries if e.get("seq", 0) > last_seq]
        for entry in new_entries:
            log = GameLogModel(
                game_id=game_id,
                seq=entry["seq"],
                entry_type=entry.get("type", "unknown"),
                message=entry.get("message", ""),
                era=entry.get("era", ""),
                round=entry.get("round", 0),
            )
            log.data = entry.get("data", {})
            self.session.add(log)
        self.session.commit()
        self.logger.debug(f"Stored {len(new_entries)} log entries for game {game_id}")
        return len(new_entries)

    def get_game_log(self, game_id: str, limit: int | None = None) -> list[dict[str, Any]]:
        """Get stored log entries, oldest first.

        Args:
            game_id: Game ID.
            limit: Only the most recent entries, when given.

        Returns:
            Entries in the same shape GameState.log_event produces.
        """
        query = (
            self.session.query(GameLogModel)
            .filter_by(game_id=game_id)
            .order_by(GameLogModel.seq.desc(), GameLogModel.id.desc())
        )
        if limit is not None:
            query = query.limit(limit)
        rows = list(reversed(query.all()))
        return [
            {
                "seq": row.seq,
                "type": row.entry_type,
                "message": row.message,
                "data": row.data,
                "era": row.era,
                "round": row.round,
            }
            for row in rows
        ]
