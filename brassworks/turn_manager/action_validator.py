"""Action validator for Brassworks."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from brassworks.engine.network import ExtraLinks, NetworkGraph
    from brassworks.models.card import Card
    from brassworks.models.game_data import GameData
    from brassworks.models.game_state import GameState
    from brassworks.models.industry import Industry, IndustryTile
    from brassworks.models.player import Player

from brassworks.models.board import Era
from brassworks.models.card import CardType
from brassworks.models.game_data import MIN_INCOME
from brassworks.models.industry import SELLABLE_INDUSTRIES, IndustryType


class ActionValidator:
    """Validates player selections for legality.

    Every method returns a tuple of (is_valid, error_message) and never
    changes the state.

    Attributes:
        state: Reference to game state.
        data: Static game data.
        network: Connectivity queries.
    """

    def __init__(self, state: "GameState", data: "GameData", network: "NetworkGraph") -> None:
        """Initialize action validator.

        Args:
            state: The game state to validate against.
            data: Static game data.
            network: Network graph over the same state.
        """
        self.state = state
        self.data = data
        self.network = network

    def validate_card(self, player: "Player", card_id: str | None) -> tuple[bool, str]:
        """Check that a card is in the player's hand."""
        if not card_id:
            return False, "Card ID required"
        if player.get_card(card_id) is None:
            return False, f"Card {card_id} is not in hand"
        return True, ""

    # Build

    def validate_build_location(
        self, player: "Player", card: "Card", location: str | None
    ) -> tuple[bool, str]:
        """Check that the selected card lets the player build at a city."""
        if not location:
            return False, "Location required"
        if not self.data.board.is_city(location):
            return False, f"{location} is not a city with industry slots"

        if card.card_type == CardType.LOCATION:
            if card.location != location:
                return False, f"Card {card.id} only builds in {card.location}"
            return True, ""

        if card.card_type == CardType.WILD_LOCATION:
            return True, ""

        if not self.network.is_in_network(player, location):
            return False, f"{location} is not in {player.name}'s network"
        return True, ""

    def validate_build_tile(
        self, player: "Player", card: "Card", location: str, tile: "IndustryTile | None"
    ) -> tuple[bool, str]:
        """Check card compatibility, era, canal restriction and slot space."""
        if tile is None:
            return False, "No tiles of that industry left"
        if not card.allows_industry(tile.industry_type):
            return False, f"Card {card.id} cannot build {tile.industry_type.value}"
        if not tile.buildable_in(self.state.era.value):
            return False, f"{tile.id} cannot be built in the {self.state.era.value} era"
        target = self.find_build_target(player, location, tile)
        if target is None:
            return False, f"No space for {tile.industry_type.value} in {location}"
        replaced = target[1]
        if self.state.era == Era.CANAL and any(
            i.location == location and i is not replaced for i in player.industries
        ):
            return False, f"Only one industry per location in the canal era ({location})"
        return True, ""

    def find_build_target(
        self, player: "Player", location: str, tile: "IndustryTile"
    ) -> tuple[int, "Industry | None"] | None:
        """Find where a tile can go in a city.

        Args:
            player: Player building.
            location: City to build in.
            tile: Tile being built.

        Returns:
            Tuple of (slot index, industry being overbuilt or None), or None
            if the tile does not fit.
        """
        occupied = {
            i.slot_index: i for i in self.state.all_industries() if i.location == location
        }
        slots = self.data.board.get_slots(location)

        for index, allowed in enumerate(slots):
            if index not in occupied and tile.industry_type in allowed:
                return index, None

        for index in range(len(slots)):
            existing = occupied.get(index)
            if existing is not None and self.can_overbuild(player, existing, tile):
                return index, existing

        return None

    def can_overbuild(self, player: "Player", existing: "Industry", tile: "IndustryTile") -> bool:
        """Check if a tile may replace an existing industry."""
        if existing.industry_type != tile.industry_type:
            return False
        if tile.level <= existing.level:
            return False
        if existing.owner_id == player.id:
            return True
        if tile.industry_type == IndustryType.COAL:
            on_board = sum(
                i.coal for i in self.state.all_industries() if i.industry_type == IndustryType.COAL
            )
            return on_board == 0 and self.state.coal_market.total_cubes == 0
        if tile.industry_type == IndustryType.IRON:
            on_board = sum(
                i.iron for i in self.state.all_industries() if i.industry_type == IndustryType.IRON
            )
            return on_board == 0 and self.state.iron_market.total_cubes == 0
        return False

    # Develop

    def validate_develop_type(
        self, player: "Player", industry_type: IndustryType, selected: list[IndustryType]
    ) -> tuple[bool, str]:
        """Check that another tile of a type can be developed."""
        if len(selected) >= 2:
            return False, "At most two tiles can be developed"
        stack = player.mat.get(industry_type, [])
        position = selected.count(industry_type)
        if position >= len(stack):
            return False, f"No {industry_type.value} tiles left to develop"
        if not stack[position].can_develop:
            return False, f"{stack[position].id} cannot be developed"
        return True, ""

    # Sell

    def validate_sell_industry(
        self, player: "Player", industry_id: str | None, selected: list[str]
    ) -> tuple[bool, str]:
        """Check that an industry can be offered for sale."""
        if not industry_id:
            return False, "Industry required"
        industry = player.get_industry(industry_id)
        if industry is None:
            return False, f"{player.name} does not own industry {industry_id}"
        if industry.industry_type not in SELLABLE_INDUSTRIES:
            return False, f"{industry.industry_type.value} cannot be sold"
        if industry.flipped:
            return False, f"Industry {industry_id} has already been sold"
        if industry_id in selected:
            return False, f"Industry {industry_id} already selected"
        if not any(
            m.buys(industry.industry_type)
            for m in self.network.connected_merchants(industry.location)
        ):
            return False, f"Cannot sell: no merchant connected to {industry.location}"
        return True, ""

    # Network

    def validate_link(
        self,
        player: "Player",
        from_city: str | None,
        to_city: str | None,
        extra_links: "ExtraLinks" = (),
    ) -> tuple[bool, str]:
        """Check that a link can be placed by the player."""
        if not from_city or not to_city:
            return False, "Link requires two locations"
        connection = self.data.board.get_connection(from_city, to_city)
        if connection is None:
            return False, f"No connection between {from_city} and {to_city}"
        if not connection.allowed_in(self.state.era):
            return False, f"{from_city}-{to_city} cannot be built in the {self.state.era.value} era"
        if any(link.joins(from_city, to_city) for link in self.state.all_links()):
            return False, f"{from_city}-{to_city} is already built"
        if any({a, b} == {from_city, to_city} for a, b in extra_links):
            return False, f"{from_city}-{to_city} is already selected"
        if not self.network.touches_network(player, from_city, to_city, extra_links):
            return False, f"{from_city}-{to_city} is not adjacent to {player.name}'s network"
        return True, ""

    # Loan and scout

    def can_take_loan(self, player: "Player") -> tuple[bool, str]:
        if player.income <= MIN_INCOME:
            return False, f"Income already at {MIN_INCOME}, no loan possible"
        return True, ""

    def can_scout(self, player: "Player") -> tuple[bool, str]:
        if player.has_wild_card():
            return False, "Cannot scout with a wild card in hand"
        if len(player.hand) < 3:
            return False, "Scouting needs three cards"
        if not self.state.wild_location_pile or not self.state.wild_industry_pile:
            return False, "No wild cards left"
        return True, ""

    def validate_scout_card(
        self, player: "Player", card_id: str | None, selected: list[str]
    ) -> tuple[bool, str]:
        valid, error = self.validate_card(player, card_id)
        if not valid:
            return valid, error
        if card_id in selected:
            return False, f"Card {card_id} already selected"
        if len(selected) >= 3:
            return False, "Three cards already selected"
        return True, ""
