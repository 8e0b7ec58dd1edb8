"""Merchant models for Brassworks."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .industry import IndustryType


class MerchantBonus(Enum):
    """Bonus granted when a merchant's beer is consumed."""

    MONEY = "money"
    DEVELOP = "develop"
    INCOME = "income"
    VICTORY_POINTS = "victory_points"


@dataclass
class Merchant:
    """A merchant location.

    Attributes:
        location: Merchant location name.
        accepts: Industry types this merchant buys.
        bonus: Kind of bonus granted for its beer.
        bonus_amount: Size of the bonus.
        min_players: Fewest players for which the merchant is in play.
        market_access: Connection here gives coal/iron market access.
        link_icons: Link-scoring icons for adjacent links.
        has_beer: Whether its beer barrel is still available.
    """

    location: str
    accepts: tuple[IndustryType, ...] = field(default_factory=tuple)
    bonus: MerchantBonus = MerchantBonus.MONEY
    bonus_amount: int = 0
    min_players: int = 2
    market_access: bool = True
    link_icons: int = 2
    has_beer: bool = True

    def buys(self, industry_type: IndustryType) -> bool:
        return industry_type in self.accepts

    def to_dict(self) -> dict[str, Any]:
        return {
            "location": self.location,
            "accepts": [i.value for i in self.accepts],
            "bonus": self.bonus.value,
            "bonus_amount": self.bonus_amount,
            "min_players": self.min_players,
            "market_access": self.market_access,
            "link_icons": self.link_icons,
            "has_beer": self.has_beer,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Merchant":
        return cls(
            location=data["location"],
            accepts=tuple(IndustryType(i) for i in data["accepts"]),
            bonus=MerchantBonus(data["bonus"]),
            bonus_amount=data["bonus_amount"],
            min_players=data["min_players"],
            market_access=data["market_access"],
            link_icons=data["link_icons"],
            has_beer=data["has_beer"],
        )


_GOODS = (IndustryType.COTTON, IndustryType.MANUFACTURER, IndustryType.POTTERY)

# location -> (bonus, amount, min players)
MERCHANTS_BIRMINGHAM: dict[str, tuple[MerchantBonus, int, int]] = {
    "warrington": (MerchantBonus.MONEY, 5, 2),
    "gloucester": (MerchantBonus.DEVELOP, 1, 2),
    "oxford": (MerchantBonus.INCOME, 2, 2),
    "nottingham": (MerchantBonus.VICTORY_POINTS, 2, 3),
    "shrewsbury": (MerchantBonus.VICTORY_POINTS, 2, 2),
}


def create_merchants(
    player_count: int,
    table: dict[str, tuple[MerchantBonus, int, int]] | None = None,
) -> list[Merchant]:
    """Create the merchants in play for a player count."""
    table = table or MERCHANTS_BIRMINGHAM
    return [
        Merchant(
            location=location,
            accepts=_GOODS,
            bonus=bonus,
            bonus_amount=amount,
            min_players=min_players,
        )
        for location, (bonus, amount, min_players) in table.items()
        if player_count >= min_players
    ]
