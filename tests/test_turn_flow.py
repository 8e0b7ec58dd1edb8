"""Tests for the event API, turn order and round flow."""

import pytest

from brassworks.engine.events import InvalidEventError
from brassworks.engine.game_engine import GameEngine
from brassworks.models.game_state import StatePath


def pass_turn(engine):
    player = engine.state.current_player
    engine.send("PASS")
    engine.send("SELECT_CARD", card_id=player.hand[0].id)
    return engine.send("CONFIRM")


def test_start_game_deals_and_sets_up(engine):
    state = engine.state

    assert state.state_path == StatePath.SELECTING_ACTION
    assert state.player_order == ["p1", "p2"]
    assert [p.color for p in state.players] == ["red", "blue"]
    assert all(len(p.hand) == 8 for p in state.players)
    assert len(state.draw_pile) == len(engine.data.create_deck(2)) - 16
    assert len(state.wild_location_pile) == 2
    assert [m.location for m in state.merchants] == ["warrington", "gloucester", "oxford", "shrewsbury"]
    assert state.game_log[-1]["type"] == "game_start"


def test_same_seed_deals_same_hands():
    hands = []
    for _ in range(2):
        engine = GameEngine("seeded", seed=123)
        engine.send("START_GAME", players=["Alice", "Bob"])
        hands.append([[c.id for c in p.hand] for p in engine.state.players])

    assert hands[0] == hands[1]


def test_start_game_with_added_players():
    engine = GameEngine("added", seed=1)
    engine.add_player("a", "Ann")
    engine.add_player("b", "Ben", color="green")

    assert engine.send("START_GAME")["success"]
    assert [p.color for p in engine.state.players] == ["red", "green"]


@pytest.mark.parametrize("players", [["Solo"], ["A", "B", "C", "D", "E"]])
def test_start_game_needs_two_to_four_players(players):
    engine = GameEngine("bad", seed=1)

    result = engine.send("START_GAME", players=players)

    assert not result["success"]
    assert engine.state.state_path == StatePath.SETUP
    assert engine.state.players == []


@pytest.mark.parametrize("players", [[{"id": "a", "name": "A"}, 7], "AB"])
def test_start_game_rejects_malformed_players(players):
    engine = GameEngine("bad", seed=1)

    result = engine.send("START_GAME", players=players)

    assert not result["success"]
    assert engine.state.state_path == StatePath.SETUP
    assert engine.state.players == []


def test_unexpected_handler_error_rolls_back(engine, monkeypatch):
    alice = engine.state.current_player
    card_id = alice.hand[0].id
    engine.send("PASS")
    engine.send("SELECT_CARD", card_id=card_id)
    before = engine.state.to_dict()
    rng_before = engine.rng.getstate()

    def boom(player):
        player.money = 0
        raise RuntimeError("resolver crashed")

    monkeypatch.setattr(engine.pass_resolver, "resolve", boom)

    with pytest.raises(RuntimeError):
        engine.send("CONFIRM")

    assert engine.state.to_dict() == before
    assert engine.rng.getstate() == rng_before
    assert engine.state.get_player("p1").money == 17


def test_events_not_accepted_in_state_raise(engine):
    with pytest.raises(InvalidEventError):
        engine.send("CONFIRM")
    with pytest.raises(InvalidEventError):
        engine.send("START_GAME", players=["Again", "Twice"])
    with pytest.raises(InvalidEventError):
        engine.send("FLY_TO_THE_MOON")


def test_dict_events_are_accepted(engine):
    result = engine.send({"type": "BUILD"})

    assert result["success"]
    assert result["state"] == StatePath.BUILD_SELECTING_CARD.value


def test_available_events(engine):
    assert GameEngine("fresh").available_events() == ["START_GAME"]

    events = engine.available_events()
    assert "BUILD" in events
    assert "TRIGGER_CANAL_ERA_END" in events
    assert "CONFIRM" not in events

    engine.send("BUILD")
    assert sorted(engine.available_events()) == ["CANCEL", "SELECT_CARD"]


def test_cancel_steps_back_one_selection(engine):
    card_id = engine.state.current_player.hand[0].id
    engine.send("BUILD")
    engine.send("SELECT_CARD", card_id=card_id)
    assert engine.state.state_path == StatePath.BUILD_SELECTING_LOCATION

    engine.send("CANCEL")
    assert engine.state.state_path == StatePath.BUILD_SELECTING_CARD
    assert engine.state.selected_card_id is None
    assert engine.state.selected_action == "build"

    engine.send("CANCEL")
    assert engine.state.state_path == StatePath.SELECTING_ACTION
    assert engine.state.selected_action is None


def test_select_card_not_in_hand_is_rejected(engine):
    engine.send("PASS")

    result = engine.send("SELECT_CARD", card_id="no_such_card")

    assert not result["success"]
    assert engine.state.state_path == StatePath.PASS_SELECTING_CARD


def test_pass_discards_and_refills(engine):
    draw_before = len(engine.state.draw_pile)
    card_id = engine.state.current_player.hand[0].id

    result = pass_turn(engine)

    assert result["success"]
    alice = engine.state.get_player("p1")
    assert len(alice.hand) == 8
    assert len(engine.state.draw_pile) == draw_before - 1
    assert [c.id for c in engine.state.discard_pile] == [card_id]


def test_round_end_collects_income(engine):
    pass_turn(engine)
    pass_turn(engine)

    state = engine.state
    assert state.round == 2
    assert state.actions_remaining == 2
    assert state.current_player.id == "p1"
    assert [p.money for p in state.players] == [27, 27]
    assert state.game_log[-1]["type"] == "round_start"


def test_two_actions_per_turn_after_first_round(engine):
    pass_turn(engine)
    pass_turn(engine)

    pass_turn(engine)
    assert engine.state.current_player.id == "p1"
    assert engine.state.actions_remaining == 1

    pass_turn(engine)
    assert engine.state.current_player.id == "p2"
    assert engine.state.actions_remaining == 2


def test_turn_order_follows_spending(engine, location_card):
    card = location_card("birmingham")
    engine.state.current_player.hand.append(card)
    engine.send("BUILD")
    engine.send("SELECT_CARD", card_id=card.id)
    engine.send("SELECT_LOCATION", city_id="birmingham")
    engine.send("SELECT_INDUSTRY_TYPE", industry_type="brewery")
    engine.send("CONFIRM")
    pass_turn(engine)

    state = engine.state
    assert state.player_order == ["p2", "p1"]
    assert state.current_player.id == "p2"
    assert state.player_spending == {}
    assert state.get_player("p1").money == 12 + 10


def test_player_with_empty_hand_is_skipped(engine):
    engine.state.get_player("p2").hand = []

    pass_turn(engine)

    assert engine.state.round == 2
    assert engine.state.current_player.id == "p1"


# Income


def test_negative_income_is_paid(engine):
    alice = engine.state.get_player("p1")
    alice.income = -3

    engine.turn_manager.collect_income()

    assert alice.money == 14


def test_income_shortfall_sells_industries(engine, place_industry):
    alice = engine.state.get_player("p1")
    alice.income = -5
    alice.money = 2
    place_industry(engine, "p1", "worcester", "cotton_1")

    results = engine.turn_manager.collect_income()

    assert alice.money == 3
    assert alice.industries == []
    assert alice.victory_points == 0
    assert results[0]["vp_lost"] == 0
    assert any("sold cotton industry for £6" in e["message"] for e in engine.state.game_log)


def test_income_shortfall_costs_victory_points(engine, place_industry):
    alice = engine.state.get_player("p1")
    alice.income = -10
    alice.money = 0
    alice.victory_points = 5
    place_industry(engine, "p1", "worcester", "cotton_1")
    place_industry(engine, "p1", "burton", "brewery_1")

    engine.turn_manager.collect_income()

    assert alice.industries == []
    assert alice.money == 0
    assert alice.victory_points == 5 - (10 - 6 - 2)


def test_victory_points_never_go_negative(engine):
    alice = engine.state.get_player("p1")
    alice.income = -10
    alice.money = 0
    alice.victory_points = 4

    engine.turn_manager.collect_income()

    assert alice.victory_points == 0


def test_tile_lookup_is_built_once(data):
    tiles = data.tiles_by_id

    assert data.tiles_by_id is tiles
    assert tiles["coal_1"].cost == 5
