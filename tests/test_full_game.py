"""Full integration test for Brassworks.

Plays a complete 2-player game in which both players only pass, verifying:
- Round and era transitions happen on their own
- Income is collected between rounds
- The game ends after the rail era as a draw
"""

import logging

from brassworks.engine.game_engine import GameEngine
from brassworks.models.board import Era
from brassworks.models.game_state import StatePath

# Configure logging - suppress engine logging for cleaner test output
logging.basicConfig(level=logging.WARNING, format="%(message)s")
logger = logging.getLogger(__name__)


def test_full_game_of_passes():
    """Play until game over with every action a pass."""
    engine = GameEngine(game_id="full_game", seed=7)
    result = engine.send("START_GAME", players=["Alice", "Bob"])
    assert result["success"]

    eras_seen = []
    max_iterations = 500
    iteration = 0

    while engine.state.state_path != StatePath.GAME_OVER and iteration < max_iterations:
        iteration += 1
        if not eras_seen or eras_seen[-1] != engine.state.era:
            eras_seen.append(engine.state.era)

        player = engine.state.current_player
        assert engine.send("PASS")["success"]
        assert engine.send("SELECT_CARD", card_id=player.hand[0].id)["success"]
        assert engine.send("CONFIRM")["success"]

    state = engine.state
    assert state.state_path == StatePath.GAME_OVER, f"Game did not end after {iteration} actions"
    assert eras_seen == [Era.CANAL, Era.RAIL]
    assert state.era == Era.RAIL
    assert state.is_draw
    assert state.winner_id is None
    assert all(p.money > 17 for p in state.players)
    assert any(entry["type"] == "game_end" for entry in state.game_log)

    summary = engine.get_game_summary()
    assert summary["is_draw"]
    assert summary["winner"] is None
    logger.info(f"Game finished after {iteration} actions")
