"""Industry tile models for Brassworks."""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class IndustryType(Enum):
    """Types of industry that can be built."""

    COTTON = "cotton"
    COAL = "coal"
    IRON = "iron"
    MANUFACTURER = "manufacturer"
    POTTERY = "pottery"
    BREWERY = "brewery"


# Industries that flip by being sold to a merchant
SELLABLE_INDUSTRIES = (
    IndustryType.COTTON,
    IndustryType.MANUFACTURER,
    IndustryType.POTTERY,
)

# Industries that flip when their last cube is consumed
RESOURCE_INDUSTRIES = (
    IndustryType.COAL,
    IndustryType.IRON,
    IndustryType.BREWERY,
)


@dataclass(frozen=True)
class IndustryTile:
    """Definition of a single industry tile.

    Attributes:
        industry_type: Industry this tile belongs to.
        level: Tile level (1-4).
        cost: Money cost to build.
        coal_cost: Coal cubes consumed when built.
        iron_cost: Iron cubes consumed when built.
        beer_cost: Beer barrels needed to sell (sellable industries only).
        coal_produced: Coal cubes placed on the tile when built.
        iron_produced: Iron cubes placed on the tile when built.
        beer_produced: Beer barrels placed when built in the canal era.
        victory_points: VP scored at era end once flipped.
        income: Income levels gained when the tile flips.
        link_icons: Link-scoring icons shown once flipped.
        canal: Buildable in the canal era.
        rail: Buildable in the rail era.
        can_develop: False for tiles carrying the lightbulb icon.
    """

    industry_type: IndustryType
    level: int
    cost: int
    coal_cost: int = 0
    iron_cost: int = 0
    beer_cost: int = 0
    coal_produced: int = 0
    iron_produced: int = 0
    beer_produced: int = 0
    victory_points: int = 0
    income: int = 0
    link_icons: int = 0
    canal: bool = True
    rail: bool = True
    can_develop: bool = True

    @property
    def id(self) -> str:
        """Tile identifier, e.g. 'coal_2'."""
        return f"{self.industry_type.value}_{self.level}"

    def buildable_in(self, era: str) -> bool:
        """Check if the tile may be built in an era ('canal' or 'rail')."""
        return self.rail if era == "rail" else self.canal


def _tile(industry_type: IndustryType, level: int, cost: int, **kwargs: Any) -> IndustryTile:
    return IndustryTile(industry_type=industry_type, level=level, cost=cost, **kwargs)


_C = IndustryType.COTTON
_CO = IndustryType.COAL
_I = IndustryType.IRON
_M = IndustryType.MANUFACTURER
_P = IndustryType.POTTERY
_B = IndustryType.BREWERY

TILE_DEFINITIONS: tuple[IndustryTile, ...] = (
    _tile(_C, 1, 12, beer_cost=1, victory_points=3, income=2, link_icons=1, rail=False),
    _tile(_C, 2, 16, coal_cost=1, beer_cost=1, victory_points=5, income=3, link_icons=1),
    _tile(_C, 3, 20, coal_cost=1, iron_cost=1, beer_cost=1, victory_points=9, income=4, link_icons=1),
    _tile(_C, 4, 24, coal_cost=1, iron_cost=1, beer_cost=1, victory_points=12, income=5, link_icons=1),
    _tile(_CO, 1, 5, coal_produced=2, victory_points=1, income=1, rail=False),
    _tile(_CO, 2, 7, coal_produced=3, victory_points=2, income=1),
    _tile(_CO, 3, 10, iron_cost=1, coal_produced=4, victory_points=3, income=2),
    _tile(_CO, 4, 13, iron_cost=1, coal_produced=5, victory_points=4, income=2),
    _tile(_I, 1, 5, coal_cost=1, iron_produced=4, victory_points=1, income=1, rail=False),
    _tile(_I, 2, 7, coal_cost=1, iron_produced=5, victory_points=2, income=1),
    _tile(_I, 3, 9, coal_cost=1, iron_produced=6, victory_points=3, income=2),
    _tile(_I, 4, 12, coal_cost=1, iron_produced=7, victory_points=5, income=3),
    _tile(_M, 1, 8, beer_cost=1, victory_points=1, income=1, link_icons=1, rail=False),
    _tile(_M, 2, 10, coal_cost=1, beer_cost=1, victory_points=2, income=1, link_icons=1),
    _tile(_M, 3, 12, coal_cost=1, iron_cost=1, beer_cost=1, victory_points=3, income=2, link_icons=1),
    _tile(_M, 4, 16, coal_cost=1, iron_cost=1, beer_cost=1, victory_points=6, income=3, link_icons=1),
    _tile(_P, 1, 5, coal_cost=1, beer_cost=1, victory_points=1, income=1, link_icons=1, can_develop=False),
    _tile(_P, 2, 7, coal_cost=1, beer_cost=1, victory_points=2, income=1, link_icons=1),
    _tile(_P, 3, 10, coal_cost=1, iron_cost=1, beer_cost=1, victory_points=5, income=2, link_icons=1),
    _tile(_P, 4, 12, coal_cost=1, iron_cost=1, beer_cost=1, victory_points=8, income=3, link_icons=1),
    _tile(_B, 1, 5, beer_produced=1, victory_points=1, income=1, rail=False),
    _tile(_B, 2, 7, coal_cost=1, beer_produced=1, victory_points=2, income=1),
    _tile(_B, 3, 9, coal_cost=1, beer_produced=1, victory_points=3, income=2),
    _tile(_B, 4, 12, coal_cost=1, iron_cost=1, beer_produced=1, victory_points=5, income=3),
)

# Copies of each tile on a player mat, by tile id
TILE_QUANTITIES: dict[str, int] = {
    "cotton_1": 3,
    "cotton_2": 2,
    "cotton_3": 3,
    "cotton_4": 3,
    "coal_1": 1,
    "coal_2": 2,
    "coal_3": 2,
    "coal_4": 2,
    "iron_1": 1,
    "iron_2": 1,
    "iron_3": 1,
    "iron_4": 1,
    "manufacturer_1": 1,
    "manufacturer_2": 2,
    "manufacturer_3": 1,
    "manufacturer_4": 1,
    "pottery_1": 1,
    "pottery_2": 1,
    "pottery_3": 1,
    "pottery_4": 1,
    "brewery_1": 2,
    "brewery_2": 2,
    "brewery_3": 2,
    "brewery_4": 1,
}


@dataclass
class Industry:
    """An industry tile built on the board.

    Attributes:
        id: Unique identifier within the game.
        owner_id: Player who built the tile.
        location: City the tile sits in.
        slot_index: Index of the city slot it occupies.
        tile: Tile definition.
        flipped: Whether the tile has flipped.
        coal: Coal cubes currently on the tile.
        iron: Iron cubes currently on the tile.
        beer: Beer barrels currently on the tile.
    """

    id: str
    owner_id: str
    location: str
    slot_index: int
    tile: IndustryTile
    flipped: bool = False
    coal: int = 0
    iron: int = 0
    beer: int = 0

    @property
    def industry_type(self) -> IndustryType:
        return self.tile.industry_type

    @property
    def level(self) -> int:
        return self.tile.level

    def resource_count(self) -> int:
        """Cubes of the tile's own resource still on it."""
        if self.industry_type == IndustryType.COAL:
            return self.coal
        if self.industry_type == IndustryType.IRON:
            return self.iron
        if self.industry_type == IndustryType.BREWERY:
            return self.beer
        return 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "owner_id": self.owner_id,
            "location": self.location,
            "slot_index": self.slot_index,
            "tile": self.tile.id,
            "flipped": self.flipped,
            "coal": self.coal,
            "iron": self.iron,
            "beer": self.beer,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any], tiles: dict[str, IndustryTile]) -> "Industry":
        return cls(
            id=data["id"],
            owner_id=data["owner_id"],
            location=data["location"],
            slot_index=data["slot_index"],
            tile=tiles[data["tile"]],
            flipped=data["flipped"],
            coal=data["coal"],
            iron=data["iron"],
            beer=data["beer"],
        )
