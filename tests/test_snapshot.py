"""Tests for snapshots, rollback and the game repository."""

import json

import pytest

from brassworks.database import GameRepository, get_engine, get_session, init_db
from brassworks.engine.game_engine import GameEngine
from brassworks.models.game_state import StatePath


def pass_turn(engine):
    player = engine.state.current_player
    engine.send("PASS")
    engine.send("SELECT_CARD", card_id=player.hand[0].id)
    return engine.send("CONFIRM")


@pytest.fixture
def repository(tmp_path):
    session = next(get_session(tmp_path / "games.db"))
    yield GameRepository(session)
    session.close()


def test_snapshot_is_json_serializable(engine):
    snap = engine.snapshot()

    assert json.loads(json.dumps(snap)) == snap
    assert snap["version"] == 1
    assert snap["game_id"] == "test_game"
    assert snap["state_path"] == StatePath.SELECTING_ACTION.value


def test_restored_engine_plays_identically(engine):
    pass_turn(engine)
    restored = GameEngine.from_snapshot(json.loads(json.dumps(engine.snapshot())))

    assert restored.state.to_dict() == engine.state.to_dict()

    for game in (engine, restored):
        pass_turn(game)
        pass_turn(game)
        game.send("TRIGGER_CANAL_ERA_END")

    assert restored.state.to_dict() == engine.state.to_dict()


def test_unknown_snapshot_version_is_refused(engine):
    snap = engine.snapshot()
    snap["version"] = 99

    with pytest.raises(ValueError):
        GameEngine.from_snapshot(snap)


def test_rejected_event_leaves_state_untouched(engine):
    engine.send("PASS")
    before = engine.state.to_dict()
    rng_before = engine.rng.getstate()

    result = engine.send("SELECT_CARD", card_id="missing")

    assert not result["success"]
    assert engine.state.to_dict() == before
    assert engine.rng.getstate() == rng_before


def test_game_log_is_bounded():
    engine = GameEngine("bounded", seed=3, log_size=5)
    engine.send("START_GAME", players=["Alice", "Bob"])
    for _ in range(4):
        pass_turn(engine)

    assert len(engine.state.game_log) == 5

    restored = GameEngine.from_snapshot(engine.snapshot())
    pass_turn(restored)
    assert len(restored.state.game_log) == 5


# Repository


def test_save_and_load_game(repository, engine):
    model = repository.save_game(engine)

    assert model.status == "active"
    assert model.era == "canal"
    assert [g.id for g in repository.list_games()] == ["test_game"]
    assert repository.list_games(status="completed") == []

    loaded = repository.load_game("test_game")
    assert loaded.state.to_dict() == engine.state.to_dict()
    assert repository.load_game("missing") is None


def test_save_game_updates_existing_record(repository, engine):
    repository.save_game(engine)
    engine.send("TRIGGER_CANAL_ERA_END")

    model = repository.save_game(engine)

    assert model.era == "rail"
    assert len(repository.list_games()) == 1


def test_completed_game_status(repository, engine):
    engine.send("TRIGGER_CANAL_ERA_END")
    engine.send("TRIGGER_RAIL_ERA_END")

    model = repository.save_game(engine)

    assert model.status == "completed"
    assert model.state_path == StatePath.GAME_OVER.value


def test_game_log_persistence(repository, engine):
    repository.save_game(engine)
    entries = list(engine.state.game_log)

    stored = repository.append_log_entries("test_game", entries)

    assert stored == len(entries)
    log = repository.get_game_log("test_game")
    assert [e["type"] for e in log] == [e["type"] for e in entries]
    assert repository.get_game_log("test_game", limit=1) == log[-1:]

    with pytest.raises(ValueError):
        repository.append_log_entries("missing", entries)


def test_delete_game(repository, engine):
    repository.save_game(engine)
    repository.append_log_entries("test_game", list(engine.state.game_log))

    assert repository.delete_game("test_game")
    assert repository.get_game("test_game") is None
    assert repository.get_game_log("test_game") == []
    assert not repository.delete_game("test_game")


def test_log_streaming_skips_stored_entries(repository, engine):
    repository.save_game(engine)
    first = repository.append_log_entries("test_game", list(engine.state.game_log))

    pass_turn(engine)
    pass_turn(engine)
    repository.save_game(engine)
    second = repository.append_log_entries("test_game", list(engine.state.game_log))

    assert first > 0
    assert first + second == len(engine.state.game_log)
    assert repository.append_log_entries("test_game", list(engine.state.game_log)) == 0
    assert repository.get_game_log("test_game") == list(engine.state.game_log)


def test_log_sequence_survives_restore(engine):
    pass_turn(engine)
    last_seq = engine.state.game_log[-1]["seq"]

    restored = GameEngine.from_snapshot(engine.snapshot())
    pass_turn(restored)

    assert restored.state.game_log[-1]["seq"] > last_seq


def test_database_engine_is_shared_per_file(tmp_path):
    path = tmp_path / "shared.db"

    assert get_engine(path) is get_engine(str(path))
    assert init_db(path) is get_engine(path)
