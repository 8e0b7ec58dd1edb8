"""Game state model for Brassworks."""

import logging
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .board import Era, Link
from .card import Card
from .industry import Industry, IndustryTile, IndustryType
from .market import ResourceMarket, create_coal_market, create_iron_market
from .merchant import Merchant
from .player import Player

LOG_BUFFER_SIZE = 500


class StatePath(Enum):
    """Flattened state machine paths."""

    SETUP = "setup"
    SELECTING_ACTION = "playing.playerTurn.selectingAction"

    BUILD_SELECTING_CARD = "playing.playerTurn.building.selectingCard"
    BUILD_SELECTING_LOCATION = "playing.playerTurn.building.selectingLocation"
    BUILD_SELECTING_INDUSTRY = "playing.playerTurn.building.selectingIndustry"
    BUILD_CONFIRMING = "playing.playerTurn.building.confirmingBuild"

    DEVELOP_SELECTING_CARD = "playing.playerTurn.developing.selectingCard"
    DEVELOP_SELECTING_INDUSTRY = "playing.playerTurn.developing.selectingIndustry"
    DEVELOP_CONFIRMING = "playing.playerTurn.developing.confirmingDevelop"

    SELL_SELECTING_CARD = "playing.playerTurn.selling.selectingCard"
    SELL_SELECTING_INDUSTRY = "playing.playerTurn.selling.selectingIndustry"
    SELL_CONFIRMING = "playing.playerTurn.selling.confirmingSell"

    LOAN_SELECTING_CARD = "playing.playerTurn.takingLoan.selectingCard"
    LOAN_CONFIRMING = "playing.playerTurn.takingLoan.confirmingLoan"

    SCOUT_SELECTING_CARDS = "playing.playerTurn.scouting.selectingCards"
    SCOUT_CONFIRMING = "playing.playerTurn.scouting.confirmingScout"

    NETWORK_SELECTING_CARD = "playing.playerTurn.networking.selectingCard"
    NETWORK_SELECTING_LINK = "playing.playerTurn.networking.selectingLink"
    NETWORK_CONFIRMING = "playing.playerTurn.networking.confirmingLink"
    NETWORK_SELECTING_SECOND_LINK = "playing.playerTurn.networking.selectingSecondLink"
    NETWORK_CONFIRMING_DOUBLE = "playing.playerTurn.networking.confirmingDoubleLink"

    PASS_SELECTING_CARD = "playing.playerTurn.passing.selectingCard"
    PASS_CONFIRMING = "playing.playerTurn.passing.confirmingPass"

    GAME_OVER = "gameOver"


@dataclass
class GameState:
    """Complete game state for Brassworks.

    This class holds all state needed to fully represent a game in progress.

    Attributes:
        id: Unique game identifier.
        players: Players in current turn order.
        current_player_index: Index of the active player.
        state_path: Current state machine path.
        era: Current era.
        round: Round number within the era.
        actions_remaining: Actions left for the active player.
        draw_pile: Face-down draw deck (top is the end of the list).
        discard_pile: Spent regular cards.
        wild_location_pile: Wild location cards available to scouting.
        wild_industry_pile: Wild industry cards available to scouting.
        coal_market: Coal price ladder.
        iron_market: Iron price ladder.
        merchants: Merchants in play.
        selected_action: Action chosen this step, if any.
        selected_card_id: Card chosen for the action.
        selected_location: City chosen for a build.
        selected_industry_tile: Tile id chosen for a build.
        selected_link: First link chosen for a network action.
        selected_second_link: Second link of a double rail build.
        selected_cards_for_scout: Cards chosen to discard when scouting.
        selected_develop_types: Industry types chosen to develop.
        selected_sell_industries: Industry ids chosen to sell.
        player_spending: Money spent this round per player.
        winner_id: Winning player once the game is over.
        is_draw: True when the game ended in an unresolved tie.
        next_industry_number: Counter for industry ids.
        topology_version: Bumped whenever links or industries change.
        log_sequence: Number of the last game log entry written.
        game_log: Bounded log of game events.
    """

    id: str
    players: list[Player] = field(default_factory=list)
    current_player_index: int = 0
    state_path: StatePath = StatePath.SETUP
    era: Era = Era.CANAL
    round: int = 1
    actions_remaining: int = 0
    draw_pile: list[Card] = field(default_factory=list)
    discard_pile: list[Card] = field(default_factory=list)
    wild_location_pile: list[Card] = field(default_factory=list)
    wild_industry_pile: list[Card] = field(default_factory=list)
    coal_market: ResourceMarket = field(default_factory=create_coal_market)
    iron_market: ResourceMarket = field(default_factory=create_iron_market)
    merchants: list[Merchant] = field(default_factory=list)
    selected_action: str | None = None
    selected_card_id: str | None = None
    selected_location: str | None = None
    selected_industry_tile: str | None = None
    selected_link: tuple[str, str] | None = None
    selected_second_link: tuple[str, str] | None = None
    selected_cards_for_scout: list[str] = field(default_factory=list)
    selected_develop_types: list[IndustryType] = field(default_factory=list)
    selected_sell_industries: list[str] = field(default_factory=list)
    player_spending: dict[str, int] = field(default_factory=dict)
    winner_id: str | None = None
    is_draw: bool = False
    next_industry_number: int = 1
    topology_version: int = 0
    log_sequence: int = 0
    game_log: deque = field(default_factory=lambda: deque(maxlen=LOG_BUFFER_SIZE))

    def __post_init__(self) -> None:
        """Post-initialization setup."""
        self.logger = logging.getLogger(__name__)

    @property
    def current_player(self) -> Player | None:
        """Get the current player."""
        if not self.players:
            return None
        if self.current_player_index >= len(self.players):
            return None
        return self.players[self.current_player_index]

    @property
    def player_order(self) -> list[str]:
        return [p.id for p in self.players]

    def get_player(self, player_id: str) -> Player | None:
        for player in self.players:
            if player.id == player_id:
                return player
        return None

    def add_player(self, player: Player) -> None:
        """Add a player to the game."""
        self.players.append(player)
        self.logger.info(f"Player {player.name} ({player.id}) added to game {self.id}")

    def all_industries(self) -> list[Industry]:
        """All industries on the board, grouped by player in turn order."""
        return [i for p in self.players for i in p.industries]

    def all_links(self) -> list[Link]:
        return [link for p in self.players for link in p.links]

    def get_industry(self, industry_id: str) -> Industry | None:
        for industry in self.all_industries():
            if industry.id == industry_id:
                return industry
        return None

    def get_merchant(self, location: str) -> Merchant | None:
        for merchant in self.merchants:
            if merchant.location == location:
                return merchant
        return None

    def new_industry_id(self) -> str:
        industry_id = f"ind-{self.next_industry_number}"
        self.next_industry_number += 1
        return industry_id

    def touch_topology(self) -> None:
        """Mark links or industries as changed."""
        self.topology_version += 1

    def record_spending(self, player_id: str, amount: int) -> None:
        """Track money a player spent this round."""
        self.player_spending[player_id] = self.player_spending.get(player_id, 0) + amount

    def clear_selections(self) -> None:
        """Reset every in-progress selection."""
        self.selected_action = None
        self.selected_card_id = None
        self.selected_location = None
        self.selected_industry_tile = None
        self.selected_link = None
        self.selected_second_link = None
        self.selected_cards_for_scout = []
        self.selected_develop_types = []
        self.selected_sell_industries = []

    def log_event(self, event_type: str, message: str, data: dict[str, Any] | None = None) -> None:
        """Log a game event, numbering entries from 1 for the whole game."""
        self.log_sequence += 1
        self.game_log.append(
            {
                "seq": self.log_sequence,
                "type": event_type,
                "message": message,
                "data": data or {},
                "era": self.era.value,
                "round": self.round,
            }
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize the state to JSON-compatible data."""
        return {
            "id": self.id,
            "players": [p.to_dict() for p in self.players],
            "current_player_index": self.current_player_index,
            "state_path": self.state_path.value,
            "era": self.era.value,
            "round": self.round,
            "actions_remaining": self.actions_remaining,
            "draw_pile": [c.to_dict() for c in self.draw_pile],
            "discard_pile": [c.to_dict() for c in self.discard_pile],
            "wild_location_pile": [c.to_dict() for c in self.wild_location_pile],
            "wild_industry_pile": [c.to_dict() for c in self.wild_industry_pile],
            "coal_market": self.coal_market.to_dict(),
            "iron_market": self.iron_market.to_dict(),
            "merchants": [m.to_dict() for m in self.merchants],
            "selected_action": self.selected_action,
            "selected_card_id": self.selected_card_id,
            "selected_location": self.selected_location,
            "selected_industry_tile": self.selected_industry_tile,
            "selected_link": list(self.selected_link) if self.selected_link else None,
            "selected_second_link": (
                list(self.selected_second_link) if self.selected_second_link else None
            ),
            "selected_cards_for_scout": list(self.selected_cards_for_scout),
            "selected_develop_types": [t.value for t in self.selected_develop_types],
            "selected_sell_industries": list(self.selected_sell_industries),
            "player_spending": dict(self.player_spending),
            "winner_id": self.winner_id,
            "is_draw": self.is_draw,
            "next_industry_number": self.next_industry_number,
            "topology_version": self.topology_version,
            "log_sequence": self.log_sequence,
            "log_size": self.game_log.maxlen,
            "game_log": list(self.game_log),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any], tiles: dict[str, IndustryTile]) -> "GameState":
        """Rebuild a state from to_dict() output.

        Args:
            data: Serialized state.
            tiles: Tile definitions by id.

        Returns:
            The restored GameState.
        """
        selected_link = data.get("selected_link")
        selected_second_link = data.get("selected_second_link")
        return cls(
            id=data["id"],
            players=[Player.from_dict(p, tiles) for p in data["players"]],
            current_player_index=data["current_player_index"],
            state_path=StatePath(data["state_path"]),
            era=Era(data["era"]),
            round=data["round"],
            actions_remaining=data["actions_remaining"],
            draw_pile=[Card.from_dict(c) for c in data["draw_pile"]],
            discard_pile=[Card.from_dict(c) for c in data["discard_pile"]],
            wild_location_pile=[Card.from_dict(c) for c in data["wild_location_pile"]],
            wild_industry_pile=[Card.from_dict(c) for c in data["wild_industry_pile"]],
            coal_market=ResourceMarket.from_dict(data["coal_market"]),
            iron_market=ResourceMarket.from_dict(data["iron_market"]),
            merchants=[Merchant.from_dict(m) for m in data["merchants"]],
            selected_action=data.get("selected_action"),
            selected_card_id=data.get("selected_card_id"),
            selected_location=data.get("selected_location"),
            selected_industry_tile=data.get("selected_industry_tile"),
            selected_link=tuple(selected_link) if selected_link else None,
            selected_second_link=tuple(selected_second_link) if selected_second_link else None,
            selected_cards_for_scout=list(data.get("selected_cards_for_scout", [])),
            selected_develop_types=[
                IndustryType(t) for t in data.get("selected_develop_types", [])
            ],
            selected_sell_industries=list(data.get("selected_sell_industries", [])),
            player_spending=dict(data.get("player_spending", {})),
            winner_id=data.get("winner_id"),
            is_draw=data.get("is_draw", False),
            next_industry_number=data.get("next_industry_number", 1),
            topology_version=data.get("topology_version", 0),
            log_sequence=data.get("log_sequence", 0),
            game_log=deque(
                data.get("game_log", []), maxlen=data.get("log_size", LOG_BUFFER_SIZE)
            ),
        )
