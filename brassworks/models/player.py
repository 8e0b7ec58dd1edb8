"""Player model for Brassworks."""

from dataclasses import dataclass, field
from typing import Any

from .board import Link
from .card import Card
from .game_data import MAX_INCOME, MIN_INCOME, STARTING_INCOME, STARTING_MONEY
from .industry import Industry, IndustryTile, IndustryType


@dataclass
class Player:
    """Represents a player in the game.

    Attributes:
        id: Unique identifier for the player.
        name: Display name of the player.
        color: Player colour.
        character: Character portrait name.
        money: Current money in pounds.
        income: Income level, clamped to [-10, 30].
        victory_points: Victory points scored so far.
        hand: Cards in hand.
        links: Links this player has built.
        industries: Industries this player has built, in build order.
        mat: Undeveloped tiles per industry type, lowest level first.
    """

    id: str
    name: str
    color: str = ""
    character: str = ""
    money: int = STARTING_MONEY
    income: int = STARTING_INCOME
    victory_points: int = 0
    hand: list[Card] = field(default_factory=list)
    links: list[Link] = field(default_factory=list)
    industries: list[Industry] = field(default_factory=list)
    mat: dict[IndustryType, list[IndustryTile]] = field(default_factory=dict)

    def add_money(self, amount: int) -> None:
        """Add money to player."""
        self.money += amount

    def remove_money(self, amount: int) -> None:
        """Remove money from player."""
        if amount > self.money:
            raise ValueError(f"Cannot remove £{amount}, only have £{self.money}")
        self.money -= amount

    def can_afford(self, amount: int) -> bool:
        """Check if player can afford an amount."""
        return self.money >= amount

    def adjust_income(self, amount: int) -> int:
        """Move the income level, clamped to its track.

        Args:
            amount: Levels to move (negative to decrease).

        Returns:
            The new income level.
        """
        self.income = max(MIN_INCOME, min(MAX_INCOME, self.income + amount))
        return self.income

    def add_victory_points(self, amount: int) -> None:
        self.victory_points = max(0, self.victory_points + amount)

    def has_wild_card(self) -> bool:
        return any(card.is_wild for card in self.hand)

    def get_card(self, card_id: str) -> Card | None:
        """Find a card in hand by id."""
        for card in self.hand:
            if card.id == card_id:
                return card
        return None

    def remove_card(self, card_id: str) -> Card:
        """Remove a card from hand."""
        card = self.get_card(card_id)
        if card is None:
            raise ValueError(f"Card {card_id} not in hand of {self.id}")
        self.hand.remove(card)
        return card

    def top_tile(self, industry_type: IndustryType) -> IndustryTile | None:
        """Get the lowest-level undeveloped tile of a type."""
        stack = self.mat.get(industry_type, [])
        return stack[0] if stack else None

    def take_top_tile(self, industry_type: IndustryType) -> IndustryTile:
        """Remove the lowest-level tile of a type from the mat."""
        stack = self.mat.get(industry_type, [])
        if not stack:
            raise ValueError(f"No {industry_type.value} tiles left on mat")
        return stack.pop(0)

    def get_industry(self, industry_id: str) -> Industry | None:
        for industry in self.industries:
            if industry.id == industry_id:
                return industry
        return None

    @property
    def owns_tiles(self) -> bool:
        """Whether the player has any industry or link on the board."""
        return bool(self.industries or self.links)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "color": self.color,
            "character": self.character,
            "money": self.money,
            "income": self.income,
            "victory_points": self.victory_points,
            "hand": [card.to_dict() for card in self.hand],
            "links": [link.to_dict() for link in self.links],
            "industries": [industry.to_dict() for industry in self.industries],
            "mat": {
                industry_type.value: [tile.id for tile in stack]
                for industry_type, stack in self.mat.items()
            },
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any], tiles: dict[str, IndustryTile]) -> "Player":
        return cls(
            id=data["id"],
            name=data["name"],
            color=data["color"],
            character=data["character"],
            money=data["money"],
            income=data["income"],
            victory_points=data["victory_points"],
            hand=[Card.from_dict(c) for c in data["hand"]],
            links=[Link.from_dict(link) for link in data["links"]],
            industries=[Industry.from_dict(i, tiles) for i in data["industries"]],
            mat={
                IndustryType(industry_type): [tiles[tile_id] for tile_id in stack]
                for industry_type, stack in data["mat"].items()
            },
        )
