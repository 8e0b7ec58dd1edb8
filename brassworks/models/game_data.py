"""Static game data tables for Brassworks."""

from dataclasses import dataclass, field
from functools import cached_property

from .board import Board
from .card import (
    INDUSTRY_CARD_COUNTS,
    LOCATION_CARD_COUNTS,
    WILD_CARDS_PER_PILE,
    Card,
    CardType,
    build_deck,
    build_wild_pile,
)
from .industry import TILE_DEFINITIONS, TILE_QUANTITIES, IndustryTile, IndustryType
from .merchant import MERCHANTS_BIRMINGHAM, Merchant, MerchantBonus, create_merchants

STARTING_MONEY = 17
STARTING_INCOME = 10
HAND_SIZE = 8
MIN_INCOME = -10
MAX_INCOME = 30

# Rounds per era based on player count
ROUND_LIMITS = {
    2: 10,
    3: 9,
    4: 8,
}

PLAYER_COLORS = ["red", "blue", "green", "yellow"]
PLAYER_CHARACTERS = [
    "Richard Arkwright",
    "Eliza Tinsley",
    "Isambard Kingdom Brunel",
    "George Stephenson",
]


@dataclass(frozen=True)
class GameData:
    """Read-only tables the engine plays with.

    Attributes:
        board: Cities, merchant locations and connections.
        tiles: Industry tile definitions.
        tile_quantities: Copies of each tile per player mat.
        location_card_counts: Location cards per city for 2/3/4 players.
        industry_card_counts: Industry cards per type for 2/3/4 players.
        merchants: Merchant bonus table.
        wild_cards_per_pile: Size of each wild pile.
    """

    board: Board
    tiles: tuple[IndustryTile, ...] = TILE_DEFINITIONS
    tile_quantities: dict[str, int] = field(default_factory=lambda: dict(TILE_QUANTITIES))
    location_card_counts: dict[str, tuple[int, int, int]] = field(
        default_factory=lambda: dict(LOCATION_CARD_COUNTS)
    )
    industry_card_counts: dict[str, tuple[int, int, int]] = field(
        default_factory=lambda: dict(INDUSTRY_CARD_COUNTS)
    )
    merchants: dict[str, tuple[MerchantBonus, int, int]] = field(
        default_factory=lambda: dict(MERCHANTS_BIRMINGHAM)
    )
    wild_cards_per_pile: int = WILD_CARDS_PER_PILE

    @classmethod
    def standard(cls) -> "GameData":
        """Create the Birmingham data set."""
        return cls(board=Board.birmingham())

    @cached_property
    def tiles_by_id(self) -> dict[str, IndustryTile]:
        return {tile.id: tile for tile in self.tiles}

    def create_mat(self) -> dict[IndustryType, list[IndustryTile]]:
        """Create a full player mat, lowest level first in each stack."""
        mat: dict[IndustryType, list[IndustryTile]] = {t: [] for t in IndustryType}
        for tile in sorted(self.tiles, key=lambda t: (t.industry_type.value, t.level)):
            mat[tile.industry_type].extend([tile] * self.tile_quantities.get(tile.id, 0))
        return mat

    def create_deck(self, player_count: int) -> list[Card]:
        """Create the unshuffled draw deck."""
        colors = {name: city.color for name, city in self.board.cities.items()}
        return build_deck(
            player_count,
            colors,
            location_counts=self.location_card_counts,
            industry_counts=self.industry_card_counts,
        )

    def create_wild_piles(self) -> tuple[list[Card], list[Card]]:
        """Create the wild location and wild industry piles."""
        return (
            build_wild_pile(CardType.WILD_LOCATION, self.wild_cards_per_pile),
            build_wild_pile(CardType.WILD_INDUSTRY, self.wild_cards_per_pile),
        )

    def create_merchants(self, player_count: int) -> list[Merchant]:
        return create_merchants(player_count, self.merchants)

    def round_limit(self, player_count: int) -> int:
        """Rounds per era for a player count."""
        return ROUND_LIMITS.get(player_count, ROUND_LIMITS[4])
