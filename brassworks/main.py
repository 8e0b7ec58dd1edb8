"""Main entry point for Brassworks."""

import logging
import os
import sys

from dotenv import load_dotenv


def setup_logging() -> None:
    """Configure logging for the application."""
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
    )


def run_demo(turns: int = 6) -> None:
    """Play a few scripted turns, save the game and print a summary.

    Args:
        turns: Number of turns to play.
    """
    from brassworks.database import GameRepository, get_session
    from brassworks.engine.game_engine import GameEngine
    from brassworks.models.game_state import LOG_BUFFER_SIZE, StatePath

    logger = logging.getLogger(__name__)
    seed_str = os.getenv("GAME_SEED")
    seed = int(seed_str) if seed_str else None
    log_size = int(os.getenv("GAME_LOG_SIZE", LOG_BUFFER_SIZE))

    print("Brassworks Demo")
    print("=" * 40)

    engine = GameEngine("demo_game", seed=seed, log_size=log_size)
    engine.send("START_GAME", players=["Alice", "Bob"])

    for _ in range(turns):
        if engine.state.state_path == StatePath.GAME_OVER:
            break
        player = engine.state.current_player
        if engine.validator.can_take_loan(player)[0] and player.money < 10:
            action = "TAKE_LOAN"
        else:
            action = "PASS"
        engine.send(action)
        engine.send("SELECT_CARD", card_id=player.hand[0].id)
        result = engine.send("CONFIRM")
        logger.info(result["message"])

    session = next(get_session())
    try:
        repository = GameRepository(session)
        repository.save_game(engine)
        repository.append_log_entries(engine.state.id, list(engine.state.game_log))
    finally:
        session.close()

    summary = engine.get_game_summary()
    turn = summary["turn"]
    limit = f"/{turn['round_limit']}" if turn["round_limit"] else ""
    print(f"{turn['era'].capitalize()} era, round {turn['round']}{limit}")
    print(f"Current player: {turn['current_player']['name']}")
    for p in summary["players"]:
        print(f"  {p['name']}: £{p['money']}, income {p['income']}, {p['victory_points']} VP")
    print()
    for entry in list(engine.state.game_log)[-5:]:
        print(f"  [{entry['type']}] {entry['message']}")


def main() -> None:
    """Run the Brassworks demo game."""
    # Load environment variables
    load_dotenv()

    # Setup logging
    setup_logging()
    logger = logging.getLogger(__name__)

    logger.info("Starting Brassworks demo...")
    try:
        run_demo()
    except Exception as e:
        logger.exception(f"Demo failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
