"""Tests for network connectivity queries."""

import pytest

from brassworks.engine.network import NetworkGraph
from brassworks.models.board import Era, Link
from brassworks.models.game_state import GameState
from brassworks.models.merchant import create_merchants
from brassworks.models.player import Player


def add_link(state: GameState, owner_id: str, a: str, b: str) -> None:
    state.get_player(owner_id).links.append(Link(from_city=a, to_city=b, era=Era.CANAL, owner_id=owner_id))
    state.touch_topology()


@pytest.fixture
def state() -> GameState:
    state = GameState(id="network_test")
    state.add_player(Player(id="p1", name="Alice"))
    state.add_player(Player(id="p2", name="Bob"))
    state.merchants = create_merchants(2)
    return state


def test_distance_counts_links_across_owners(state):
    add_link(state, "p1", "birmingham", "dudley")
    add_link(state, "p2", "dudley", "wolverhampton")
    network = NetworkGraph(state)

    assert network.distance("birmingham", "wolverhampton") == 2
    assert network.are_connected("wolverhampton", "birmingham")
    assert not network.are_connected("birmingham", "stoke")
    assert network.distance("birmingham", "birmingham") == 0


def test_cache_refreshes_when_topology_changes(state):
    add_link(state, "p1", "birmingham", "dudley")
    network = NetworkGraph(state)
    assert not network.are_connected("birmingham", "kidderminster")

    add_link(state, "p1", "dudley", "kidderminster")

    assert network.are_connected("birmingham", "kidderminster")


def test_extra_links_do_not_pollute_cache(state):
    network = NetworkGraph(state)
    extra = (("birmingham", "coventry"),)

    assert network.are_connected("birmingham", "coventry", extra)
    assert not network.are_connected("birmingham", "coventry")


def test_connected_merchants_nearest_first(state):
    add_link(state, "p1", "worcester", "gloucester")
    add_link(state, "p1", "worcester", "kidderminster")
    add_link(state, "p2", "kidderminster", "dudley")
    network = NetworkGraph(state)

    merchants = network.connected_merchants("dudley")

    assert [m.location for m in merchants] == ["gloucester"]
    assert network.has_market_access("dudley")
    assert not network.has_market_access("birmingham")


def test_nottingham_only_in_three_player_games(state):
    assert "nottingham" not in [m.location for m in state.merchants]
    assert "nottingham" in [m.location for m in create_merchants(3)]


def test_player_network_and_bootstrap(state):
    network = NetworkGraph(state)
    alice = state.get_player("p1")

    assert network.is_in_network(alice, "stoke")

    add_link(state, "p1", "birmingham", "dudley")

    assert network.is_in_network(alice, "dudley")
    assert not network.is_in_network(alice, "stoke")
    assert network.touches_network(alice, "dudley", "wolverhampton")
    assert not network.touches_network(alice, "stoke", "leek")
    assert network.touches_network(alice, "wolverhampton", "cannock", (("dudley", "wolverhampton"),))
