"""Tests for era end, scoring and game end."""

import pytest

from brassworks.engine.events import InvalidEventError
from brassworks.models.board import Era, Link
from brassworks.models.game_state import StatePath


def pass_turn(engine):
    player = engine.state.current_player
    engine.send("PASS")
    engine.send("SELECT_CARD", card_id=player.hand[0].id)
    return engine.send("CONFIRM")


def test_canal_era_end_scores_and_cleans_up(engine, place_industry):
    state = engine.state
    alice = state.get_player("p1")
    alice.links.append(Link(from_city="worcester", to_city="gloucester", era=Era.CANAL, owner_id="p1"))
    place_industry(engine, "p1", "worcester", "cotton_1", flipped=True)
    mine = place_industry(engine, "p2", "dudley", "coal_2", coal=3)
    state.get_merchant("gloucester").has_beer = False
    deck_size = len(engine.data.create_deck(2))

    result = engine.send("TRIGGER_CANAL_ERA_END")

    assert result["success"]
    state = engine.state
    alice = state.get_player("p1")
    assert state.era == Era.RAIL
    assert state.round == 1
    assert state.actions_remaining == 2
    assert state.state_path == StatePath.SELECTING_ACTION
    # link: 1 cotton icon + 2 merchant icons; industry: 3 VP
    assert alice.victory_points == 3 + 3
    assert alice.links == []
    assert alice.industries == []
    assert [i.id for i in state.get_player("p2").industries] == [mine.id]
    assert state.get_player("p2").victory_points == 0
    assert state.get_merchant("gloucester").has_beer
    assert all(len(p.hand) == 8 for p in state.players)
    assert state.discard_pile == []
    assert len(state.draw_pile) == deck_size - 16


def test_era_triggers_are_guarded_on_era(engine):
    assert not engine.send("TRIGGER_RAIL_ERA_END")["success"]

    engine.send("TRIGGER_CANAL_ERA_END")

    assert not engine.send("TRIGGER_CANAL_ERA_END")["success"]
    assert engine.state.era == Era.RAIL


def test_rail_era_end_picks_winner(engine):
    engine.send("TRIGGER_CANAL_ERA_END")
    engine.state.get_player("p2").victory_points = 10

    engine.send("TRIGGER_RAIL_ERA_END")

    state = engine.state
    assert state.state_path == StatePath.GAME_OVER
    assert state.winner_id == "p2"
    assert not state.is_draw
    assert state.game_log[-1]["type"] == "game_end"
    assert engine.available_events() == []
    with pytest.raises(InvalidEventError):
        engine.send("PASS")


def test_winner_tiebreaks(engine):
    alice, bob = engine.state.players
    alice.victory_points = bob.victory_points = 5
    alice.income, bob.income = 12, 10

    assert engine.era_manager.determine_winner() is alice

    bob.income = 12
    bob.money = alice.money + 1
    assert engine.era_manager.determine_winner() is bob

    bob.money = alice.money
    assert engine.era_manager.determine_winner() is None


def test_round_limit_does_not_end_canal_era(engine):
    engine.state.round = engine.era_manager.round_limit

    pass_turn(engine)
    pass_turn(engine)
    pass_turn(engine)

    state = engine.state
    assert state.era == Era.CANAL
    assert state.round == engine.era_manager.round_limit + 1
    assert [p.money for p in state.players] == [27, 27]


def test_canal_era_runs_until_cards_are_exhausted(engine, monkeypatch):
    seen = []
    end_canal_era = engine.era_manager.end_canal_era

    def record_and_end():
        state = engine.state
        seen.append(([len(p.hand) for p in state.players], len(state.draw_pile), state.round))
        return end_canal_era()

    monkeypatch.setattr(engine.era_manager, "end_canal_era", record_and_end)

    for _ in range(500):
        if engine.state.era != Era.CANAL:
            break
        pass_turn(engine)

    assert engine.state.era == Era.RAIL
    hands, draw, last_round = seen[0]
    assert hands == [0, 0]
    assert draw == 0
    assert last_round > engine.era_manager.round_limit


def test_round_limit_ends_game_in_rail_era(engine):
    engine.send("TRIGGER_CANAL_ERA_END")
    engine.state.round = engine.era_manager.round_limit

    for _ in range(4):
        pass_turn(engine)

    state = engine.state
    assert state.state_path == StatePath.GAME_OVER
    assert state.is_draw
    assert state.winner_id is None


def test_running_out_of_cards_ends_era(engine):
    state = engine.state
    state.discard_pile.extend(state.draw_pile)
    state.draw_pile = []
    for player in state.players:
        state.discard_pile.extend(player.hand[1:])
        player.hand = player.hand[:1]

    pass_turn(engine)
    pass_turn(engine)

    assert engine.state.era == Era.RAIL
    assert all(len(p.hand) == 8 for p in engine.state.players)
