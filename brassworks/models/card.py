"""Card models for Brassworks."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .industry import IndustryType


class CardType(Enum):
    """Kinds of card."""

    LOCATION = "location"
    INDUSTRY = "industry"
    WILD_LOCATION = "wild_location"
    WILD_INDUSTRY = "wild_industry"


@dataclass(frozen=True)
class Card:
    """A playing card.

    Attributes:
        id: Unique card identifier, e.g. 'birmingham_1'.
        card_type: Kind of card.
        location: City named by a location card.
        color: Colour of a location card.
        industries: Industry types an industry card allows.
    """

    id: str
    card_type: CardType
    location: str | None = None
    color: str | None = None
    industries: tuple[IndustryType, ...] = field(default_factory=tuple)

    @property
    def is_wild(self) -> bool:
        return self.card_type in (CardType.WILD_LOCATION, CardType.WILD_INDUSTRY)

    def allows_industry(self, industry_type: IndustryType) -> bool:
        """Check if this card can be used to build an industry type."""
        if self.card_type == CardType.INDUSTRY:
            return industry_type in self.industries
        return True

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.card_type.value,
            "location": self.location,
            "color": self.color,
            "industries": [i.value for i in self.industries],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Card":
        return cls(
            id=data["id"],
            card_type=CardType(data["type"]),
            location=data.get("location"),
            color=data.get("color"),
            industries=tuple(IndustryType(i) for i in data.get("industries", [])),
        )


# Location card counts for (2, 3, 4) players
LOCATION_CARD_COUNTS: dict[str, tuple[int, int, int]] = {
    "belper": (0, 0, 2),
    "derby": (0, 0, 3),
    "leek": (0, 2, 2),
    "stoke": (0, 3, 3),
    "stone": (0, 2, 2),
    "uttoxeter": (0, 1, 2),
    "stafford": (2, 2, 2),
    "burton": (2, 2, 2),
    "cannock": (2, 2, 2),
    "tamworth": (1, 1, 1),
    "walsall": (1, 1, 1),
    "coalbrookdale": (3, 3, 3),
    "dudley": (2, 2, 2),
    "kidderminster": (2, 2, 2),
    "wolverhampton": (2, 2, 2),
    "worcester": (2, 2, 2),
    "birmingham": (3, 3, 3),
    "coventry": (3, 3, 3),
    "nuneaton": (1, 1, 1),
    "redditch": (1, 1, 1),
}

# Industry card counts for (2, 3, 4) players
INDUSTRY_CARD_COUNTS: dict[str, tuple[int, int, int]] = {
    "iron": (4, 4, 4),
    "coal": (2, 2, 3),
    "manufacturer": (2, 2, 2),
    "pottery": (2, 2, 2),
    "brewery": (5, 5, 5),
}

# Industry cards that cover more than one industry type
INDUSTRY_CARD_TYPES: dict[str, tuple[IndustryType, ...]] = {
    "manufacturer": (IndustryType.MANUFACTURER, IndustryType.COTTON),
}

WILD_CARDS_PER_PILE = 2


def _count_for(counts: tuple[int, int, int], player_count: int) -> int:
    index = min(max(player_count, 2), 4) - 2
    return counts[index]


def build_deck(
    player_count: int,
    city_colors: dict[str, str],
    location_counts: dict[str, tuple[int, int, int]] | None = None,
    industry_counts: dict[str, tuple[int, int, int]] | None = None,
) -> list[Card]:
    """Build the unshuffled draw deck for a player count.

    Args:
        player_count: Number of players (2-4).
        city_colors: City name to card colour.
        location_counts: Location card counts, defaults to the Birmingham table.
        industry_counts: Industry card counts, defaults to the Birmingham table.

    Returns:
        List of cards.
    """
    location_counts = location_counts or LOCATION_CARD_COUNTS
    industry_counts = industry_counts or INDUSTRY_CARD_COUNTS

    deck: list[Card] = []
    for city, counts in location_counts.items():
        for i in range(_count_for(counts, player_count)):
            deck.append(
                Card(
                    id=f"{city}_{i + 1}",
                    card_type=CardType.LOCATION,
                    location=city,
                    color=city_colors.get(city),
                )
            )

    for name, counts in industry_counts.items():
        types = INDUSTRY_CARD_TYPES.get(name, (IndustryType(name),))
        for i in range(_count_for(counts, player_count)):
            deck.append(
                Card(id=f"{name}_{i + 1}", card_type=CardType.INDUSTRY, industries=types)
            )

    return deck


def build_wild_pile(card_type: CardType, count: int = WILD_CARDS_PER_PILE) -> list[Card]:
    """Build a pile of wild cards of one kind."""
    return [Card(id=f"{card_type.value}_{i + 1}", card_type=card_type) for i in range(count)]
