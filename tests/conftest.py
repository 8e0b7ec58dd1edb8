"""
Pytest fixtures for Brassworks tests.
"""

import pytest

from brassworks.engine.game_engine import GameEngine
from brassworks.models.card import Card, CardType
from brassworks.models.game_data import GameData
from brassworks.models.industry import Industry, IndustryTile


@pytest.fixture
def data() -> GameData:
    """Standard Birmingham data."""
    return GameData.standard()


@pytest.fixture
def tiles(data: GameData) -> dict[str, IndustryTile]:
    """Tile definitions by id."""
    return data.tiles_by_id


@pytest.fixture
def engine() -> GameEngine:
    """A seeded 2-player game, first player to act."""
    engine = GameEngine("test_game", seed=42)
    result = engine.send("START_GAME", players=[{"id": "p1", "name": "Alice"}, {"id": "p2", "name": "Bob"}])
    assert result["success"]
    return engine


@pytest.fixture
def location_card():
    """Factory for location cards that are not part of the deck."""

    def make(city: str, suffix: str = "x") -> Card:
        return Card(id=f"test_{city}_{suffix}", card_type=CardType.LOCATION, location=city)

    return make


@pytest.fixture
def place_industry(tiles: dict[str, IndustryTile]):
    """Factory that puts a built industry straight onto the board."""

    def place(engine: GameEngine, owner_id: str, location: str, tile_id: str, slot: int = 0, **cubes) -> Industry:
        state = engine.state
        tile = tiles[tile_id]
        industry = Industry(
            id=state.new_industry_id(),
            owner_id=owner_id,
            location=location,
            slot_index=slot,
            tile=tile,
            coal=cubes.get("coal", tile.coal_produced),
            iron=cubes.get("iron", tile.iron_produced),
            beer=cubes.get("beer", tile.beer_produced),
            flipped=cubes.get("flipped", False),
        )
        state.get_player(owner_id).industries.append(industry)
        state.touch_topology()
        return industry

    return place
