"""Game engine for Brassworks."""

from __future__ import annotations

import logging
import random
from collections import deque
from typing import Any

from brassworks.engine.auto_flip import AutoFlipper
from brassworks.engine.build import BuildResolver
from brassworks.engine.card_actions import LoanResolver, PassResolver, ScoutResolver
from brassworks.engine.consumption import ResourceConsumer
from brassworks.engine.develop import DevelopResolver
from brassworks.engine.era_manager import EraManager
from brassworks.engine.events import (
    Event,
    EventType,
    InvalidEventError,
    RuleViolation,
    parse_event_type,
)
from brassworks.engine.network import NetworkGraph
from brassworks.engine.network_builder import NetworkResolver
from brassworks.engine.sell import SellResolver
from brassworks.models.board import Era
from brassworks.models.card import Card, CardType
from brassworks.models.game_data import (
    HAND_SIZE,
    PLAYER_CHARACTERS,
    PLAYER_COLORS,
    STARTING_INCOME,
    STARTING_MONEY,
    GameData,
)
from brassworks.models.game_state import LOG_BUFFER_SIZE, GameState, StatePath
from brassworks.models.industry import IndustryTile, IndustryType
from brassworks.models.market import create_coal_market, create_iron_market
from brassworks.models.player import Player
from brassworks.turn_manager.action_validator import ActionValidator
from brassworks.turn_manager.turn_manager import TurnManager

SNAPSHOT_VERSION = 1
MIN_PLAYERS = 2
MAX_PLAYERS = 4

S = StatePath
E = EventType

# (state, event) -> handler method name
TRANSITIONS: dict[tuple[StatePath, EventType], str] = {
    (S.SETUP, E.START_GAME): "_on_start_game",
    (S.SELECTING_ACTION, E.BUILD): "_on_choose_action",
    (S.SELECTING_ACTION, E.DEVELOP): "_on_choose_action",
    (S.SELECTING_ACTION, E.SELL): "_on_choose_action",
    (S.SELECTING_ACTION, E.TAKE_LOAN): "_on_choose_action",
    (S.SELECTING_ACTION, E.SCOUT): "_on_choose_action",
    (S.SELECTING_ACTION, E.NETWORK): "_on_choose_action",
    (S.SELECTING_ACTION, E.PASS): "_on_choose_action",
    (S.SELECTING_ACTION, E.TRIGGER_CANAL_ERA_END): "_on_trigger_era_end",
    (S.SELECTING_ACTION, E.TRIGGER_RAIL_ERA_END): "_on_trigger_era_end",
    # Build
    (S.BUILD_SELECTING_CARD, E.SELECT_CARD): "_on_select_card",
    (S.BUILD_SELECTING_CARD, E.CANCEL): "_on_cancel",
    (S.BUILD_SELECTING_LOCATION, E.SELECT_LOCATION): "_on_select_build_location",
    (S.BUILD_SELECTING_LOCATION, E.CANCEL): "_on_cancel",
    (S.BUILD_SELECTING_INDUSTRY, E.SELECT_INDUSTRY_TYPE): "_on_select_build_tile",
    (S.BUILD_SELECTING_INDUSTRY, E.SELECT_INDUSTRY_TILE): "_on_select_build_tile",
    (S.BUILD_SELECTING_INDUSTRY, E.CANCEL): "_on_cancel",
    (S.BUILD_CONFIRMING, E.CONFIRM): "_on_confirm_build",
    (S.BUILD_CONFIRMING, E.CANCEL): "_on_cancel",
    # Develop
    (S.DEVELOP_SELECTING_CARD, E.SELECT_CARD): "_on_select_card",
    (S.DEVELOP_SELECTING_CARD, E.CANCEL): "_on_cancel",
    (S.DEVELOP_SELECTING_INDUSTRY, E.SELECT_INDUSTRY_TYPE): "_on_select_develop_type",
    (S.DEVELOP_SELECTING_INDUSTRY, E.CANCEL): "_on_cancel",
    (S.DEVELOP_CONFIRMING, E.SELECT_INDUSTRY_TYPE): "_on_select_develop_type",
    (S.DEVELOP_CONFIRMING, E.CONFIRM): "_on_confirm_develop",
    (S.DEVELOP_CONFIRMING, E.CANCEL): "_on_cancel",
    # Sell
    (S.SELL_SELECTING_CARD, E.SELECT_CARD): "_on_select_card",
    (S.SELL_SELECTING_CARD, E.CANCEL): "_on_cancel",
    (S.SELL_SELECTING_INDUSTRY, E.SELECT_INDUSTRY_TILE): "_on_select_sell_industry",
    (S.SELL_SELECTING_INDUSTRY, E.CANCEL): "_on_cancel",
    (S.SELL_CONFIRMING, E.SELECT_INDUSTRY_TILE): "_on_select_sell_industry",
    (S.SELL_CONFIRMING, E.CONFIRM): "_on_confirm_sell",
    (S.SELL_CONFIRMING, E.CANCEL): "_on_cancel",
    # Loan
    (S.LOAN_SELECTING_CARD, E.SELECT_CARD): "_on_select_card",
    (S.LOAN_SELECTING_CARD, E.CANCEL): "_on_cancel",
    (S.LOAN_CONFIRMING, E.CONFIRM): "_on_confirm_loan",
    (S.LOAN_CONFIRMING, E.CANCEL): "_on_cancel",
    # Scout
    (S.SCOUT_SELECTING_CARDS, E.SELECT_CARD): "_on_select_scout_card",
    (S.SCOUT_SELECTING_CARDS, E.CANCEL): "_on_cancel",
    (S.SCOUT_CONFIRMING, E.CONFIRM): "_on_confirm_scout",
    (S.SCOUT_CONFIRMING, E.CANCEL): "_on_cancel",
    # Network
    (S.NETWORK_SELECTING_CARD, E.SELECT_CARD): "_on_select_card",
    (S.NETWORK_SELECTING_CARD, E.CANCEL): "_on_cancel",
    (S.NETWORK_SELECTING_LINK, E.SELECT_LINK): "_on_select_link",
    (S.NETWORK_SELECTING_LINK, E.CANCEL): "_on_cancel",
    (S.NETWORK_CONFIRMING, E.CONFIRM): "_on_confirm_network",
    (S.NETWORK_CONFIRMING, E.CHOOSE_DOUBLE_LINK_BUILD): "_on_choose_double_link",
    (S.NETWORK_CONFIRMING, E.CANCEL): "_on_cancel",
    (S.NETWORK_SELECTING_SECOND_LINK, E.SELECT_SECOND_LINK): "_on_select_second_link",
    (S.NETWORK_SELECTING_SECOND_LINK, E.CANCEL): "_on_cancel",
    (S.NETWORK_CONFIRMING_DOUBLE, E.CONFIRM): "_on_confirm_network",
    (S.NETWORK_CONFIRMING_DOUBLE, E.CANCEL): "_on_cancel",
    # Pass
    (S.PASS_SELECTING_CARD, E.SELECT_CARD): "_on_select_card",
    (S.PASS_SELECTING_CARD, E.CANCEL): "_on_cancel",
    (S.PASS_CONFIRMING, E.CONFIRM): "_on_confirm_pass",
    (S.PASS_CONFIRMING, E.CANCEL): "_on_cancel",
}

# Action event -> (selected action name, first state of its sub-flow)
ACTION_ENTRY: dict[EventType, tuple[str, StatePath]] = {
    E.BUILD: ("build", S.BUILD_SELECTING_CARD),
    E.DEVELOP: ("develop", S.DEVELOP_SELECTING_CARD),
    E.SELL: ("sell", S.SELL_SELECTING_CARD),
    E.TAKE_LOAN: ("loan", S.LOAN_SELECTING_CARD),
    E.SCOUT: ("scout", S.SCOUT_SELECTING_CARDS),
    E.NETWORK: ("network", S.NETWORK_SELECTING_CARD),
    E.PASS: ("pass", S.PASS_SELECTING_CARD),
}

# Card-selection state -> next state
CARD_NEXT_STATE: dict[StatePath, StatePath] = {
    S.BUILD_SELECTING_CARD: S.BUILD_SELECTING_LOCATION,
    S.DEVELOP_SELECTING_CARD: S.DEVELOP_SELECTING_INDUSTRY,
    S.SELL_SELECTING_CARD: S.SELL_SELECTING_INDUSTRY,
    S.LOAN_SELECTING_CARD: S.LOAN_CONFIRMING,
    S.NETWORK_SELECTING_CARD: S.NETWORK_SELECTING_LINK,
    S.PASS_SELECTING_CARD: S.PASS_CONFIRMING,
}

# State -> (previous state, selection field cleared on CANCEL)
CANCEL_STEPS: dict[StatePath, tuple[StatePath, str | None]] = {
    S.BUILD_SELECTING_CARD: (S.SELECTING_ACTION, "selected_action"),
    S.BUILD_SELECTING_LOCATION: (S.BUILD_SELECTING_CARD, "selected_card_id"),
    S.BUILD_SELECTING_INDUSTRY: (S.BUILD_SELECTING_LOCATION, "selected_location"),
    S.BUILD_CONFIRMING: (S.BUILD_SELECTING_INDUSTRY, "selected_industry_tile"),
    S.DEVELOP_SELECTING_CARD: (S.SELECTING_ACTION, "selected_action"),
    S.DEVELOP_SELECTING_INDUSTRY: (S.DEVELOP_SELECTING_CARD, "selected_card_id"),
    S.SELL_SELECTING_CARD: (S.SELECTING_ACTION, "selected_action"),
    S.SELL_SELECTING_INDUSTRY: (S.SELL_SELECTING_CARD, "selected_card_id"),
    S.LOAN_SELECTING_CARD: (S.SELECTING_ACTION, "selected_action"),
    S.LOAN_CONFIRMING: (S.LOAN_SELECTING_CARD, "selected_card_id"),
    S.SCOUT_SELECTING_CARDS: (S.SELECTING_ACTION, "selected_action"),
    S.NETWORK_SELECTING_CARD: (S.SELECTING_ACTION, "selected_action"),
    S.NETWORK_SELECTING_LINK: (S.NETWORK_SELECTING_CARD, "selected_card_id"),
    S.NETWORK_CONFIRMING: (S.NETWORK_SELECTING_LINK, "selected_link"),
    S.NETWORK_SELECTING_SECOND_LINK: (S.NETWORK_CONFIRMING, None),
    S.NETWORK_CONFIRMING_DOUBLE: (S.NETWORK_SELECTING_SECOND_LINK, "selected_second_link"),
    S.PASS_SELECTING_CARD: (S.SELECTING_ACTION, "selected_action"),
    S.PASS_CONFIRMING: (S.PASS_SELECTING_CARD, "selected_card_id"),
}

# States holding a list selection: CANCEL drops the last entry.
# state -> (field, state once the list is empty, state otherwise)
LIST_CANCEL_STEPS: dict[StatePath, tuple[str, StatePath, StatePath]] = {
    S.DEVELOP_CONFIRMING: (
        "selected_develop_types",
        S.DEVELOP_SELECTING_INDUSTRY,
        S.DEVELOP_CONFIRMING,
    ),
    S.SELL_CONFIRMING: (
        "selected_sell_industries",
        S.SELL_SELECTING_INDUSTRY,
        S.SELL_CONFIRMING,
    ),
    S.SCOUT_SELECTING_CARDS: (
        "selected_cards_for_scout",
        S.SCOUT_SELECTING_CARDS,
        S.SCOUT_SELECTING_CARDS,
    ),
    S.SCOUT_CONFIRMING: (
        "selected_cards_for_scout",
        S.SCOUT_SELECTING_CARDS,
        S.SCOUT_SELECTING_CARDS,
    ),
}


def _field(payload: dict[str, Any], *names: str) -> Any:
    """First non-empty payload value among alternative field names."""
    for name in names:
        value = payload.get(name)
        if value is not None:
            return value
    return None


class GameEngine:
    """Main game engine: a flat state machine driven by one event at a time.

    Attributes:
        state: The current game state.
        data: Static game data.
        rng: Random source for shuffling.
    """

    def __init__(
        self,
        game_id: str,
        data: GameData | None = None,
        seed: int | None = None,
        rng: random.Random | None = None,
        log_size: int = LOG_BUFFER_SIZE,
    ) -> None:
        """Initialize a new game engine.

        Args:
            game_id: Unique identifier for this game.
            data: Static tables; the Birmingham set when omitted.
            seed: Seed for a fresh random source.
            rng: Random source to use instead of seeding one.
            log_size: Capacity of the game log ring buffer.
        """
        self.data = data or GameData.standard()
        self.rng = rng or random.Random(seed)
        self.logger = logging.getLogger(__name__)
        self._bind(GameState(id=game_id, game_log=deque(maxlen=log_size)))

    def _bind(self, state: GameState) -> None:
        """Wire every component to a state object."""
        self.state = state
        self.network = NetworkGraph(state)
        self.consumer = ResourceConsumer(state, self.network)
        self.flipper = AutoFlipper(state)
        self.validator = ActionValidator(state, self.data, self.network)
        self.turn_manager = TurnManager(state, self.data)
        self.era_manager = EraManager(state, self.data, self.rng)

        parts = (state, self.data, self.network, self.consumer, self.flipper, self.validator)
        self.build_resolver = BuildResolver(*parts)
        self.develop_resolver = DevelopResolver(*parts)
        self.sell_resolver = SellResolver(*parts)
        self.network_resolver = NetworkResolver(*parts)
        self.loan_resolver = LoanResolver(*parts)
        self.scout_resolver = ScoutResolver(*parts)
        self.pass_resolver = PassResolver(*parts)

    # Public API

    def add_player(
        self,
        player_id: str,
        name: str,
        color: str | None = None,
        character: str | None = None,
    ) -> Player:
        """Add a player before the game starts.

        Args:
            player_id: Unique identifier for the player.
            name: Display name of the player.
            color: Player colour, assigned by seat when omitted.
            character: Character name, assigned by seat when omitted.

        Returns:
            The created Player object.
        """
        if self.state.state_path != S.SETUP:
            raise ValueError("Players can only join during setup")
        if self.state.get_player(player_id):
            raise ValueError(f"Player {player_id} already in game")
        if len(self.state.players) >= MAX_PLAYERS:
            raise ValueError(f"Maximum {MAX_PLAYERS} players allowed")

        seat = len(self.state.players)
        player = Player(
            id=player_id,
            name=name,
            color=color or PLAYER_COLORS[seat % len(PLAYER_COLORS)],
            character=character or PLAYER_CHARACTERS[seat % len(PLAYER_CHARACTERS)],
        )
        self.state.add_player(player)
        return player

    def send(self, event: EventType | str | Event | dict[str, Any], **payload: Any) -> dict[str, Any]:
        """Deliver one event to the engine.

        Args:
            event: Event type (or name), an Event, or a {"type": ..., ...} dict.
            **payload: Event fields when event is a type or name.

        Returns:
            Result dictionary with "success" and either "message" or "error".

        Raises:
            InvalidEventError: If the event is unknown or not accepted in the
                current state.
        """
        if isinstance(event, Event):
            ev = event
        elif isinstance(event, dict):
            ev = Event.from_dict(event)
        else:
            ev = Event(event_type=parse_event_type(event), payload=payload)

        path = self.state.state_path
        handler_name = TRANSITIONS.get((path, ev.event_type))
        if handler_name is None:
            raise InvalidEventError(
                f"Invalid call of event {ev.event_type.value} in state {path.value}"
            )

        backup = self.state.to_dict()
        rng_state = self.rng.getstate()
        try:
            return getattr(self, handler_name)(ev)
        except RuleViolation as e:
            self._restore(backup, rng_state)
            return self._reject(str(e))
        except Exception:
            self._restore(backup, rng_state)
            raise

    def available_events(self) -> list[str]:
        """Event names accepted in the current state."""
        path = self.state.state_path
        return [event.value for (state, event) in TRANSITIONS if state == path]

    def get_turn_info(self) -> dict[str, Any]:
        return self.turn_manager.get_turn_info()

    def get_game_summary(self) -> dict[str, Any]:
        """Get a read-only summary of the game for display.

        Returns:
            Dictionary with turn information and per-player standings.
        """
        return {
            "game_id": self.state.id,
            "turn": self.turn_manager.get_turn_info(),
            "players": [
                {
                    "id": p.id,
                    "name": p.name,
                    "money": p.money,
                    "income": p.income,
                    "victory_points": p.victory_points,
                    "hand_size": len(p.hand),
                    "industries": len(p.industries),
                    "links": len(p.links),
                }
                for p in self.state.players
            ],
            "coal_price": self.state.coal_market.current_price(),
            "iron_price": self.state.iron_market.current_price(),
            "winner": self.state.winner_id,
            "is_draw": self.state.is_draw,
        }

    def snapshot(self) -> dict[str, Any]:
        """Get a JSON-serializable snapshot of the whole engine state."""
        version, internal, gauss = self.rng.getstate()
        return {
            "version": SNAPSHOT_VERSION,
            "game_id": self.state.id,
            "state_path": self.state.state_path.value,
            "state": self.state.to_dict(),
            "rng_state": [version, list(internal), gauss],
        }

    @classmethod
    def from_snapshot(cls, snapshot: dict[str, Any], data: GameData | None = None) -> GameEngine:
        """Resume an engine from snapshot() output.

        Args:
            snapshot: Snapshot dictionary.
            data: Static tables the game was started with.

        Returns:
            A GameEngine positioned exactly where the snapshot was taken.
        """
        if snapshot.get("version") != SNAPSHOT_VERSION:
            raise ValueError(f"Unsupported snapshot version: {snapshot.get('version')}")

        state_data = snapshot["state"]
        engine = cls(game_id=state_data["id"], data=data)
        engine._bind(GameState.from_dict(state_data, engine.data.tiles_by_id))
        rng_state = snapshot.get("rng_state")
        if rng_state:
            version, internal, gauss = rng_state
            engine.rng.setstate((version, tuple(internal), gauss))
        return engine

    # Helpers

    def _ok(self, message: str, **extra: Any) -> dict[str, Any]:
        return {
            "success": True,
            "message": message,
            "state": self.state.state_path.value,
            **extra,
        }

    def _reject(self, error: str) -> dict[str, Any]:
        self.logger.warning(f"Game {self.state.id}: rejected ({error})")
        return {"success": False, "error": error, "state": self.state.state_path.value}

    def _restore(self, backup: dict[str, Any], rng_state: tuple) -> None:
        """Put state and rng back to how they were before the event."""
        self._bind(GameState.from_dict(backup, self.data.tiles_by_id))
        self.rng.setstate(rng_state)

    def _require(self, check: tuple[bool, str]) -> None:
        valid, error = check
        if not valid:
            raise RuleViolation(error)

    def _player(self) -> Player:
        player = self.state.current_player
        if player is None:
            raise RuleViolation("No active player")
        return player

    def _selected_card(self, player: Player) -> Card:
        card = player.get_card(self.state.selected_card_id or "")
        if card is None:
            raise RuleViolation("No card selected")
        return card

    def _discard(self, card: Card) -> None:
        """Put a spent card back: wild cards to their pile, others to discard."""
        if card.card_type == CardType.WILD_LOCATION:
            self.state.wild_location_pile.append(card)
        elif card.card_type == CardType.WILD_INDUSTRY:
            self.state.wild_industry_pile.append(card)
        else:
            self.state.discard_pile.append(card)

    # Setup

    def _on_start_game(self, event: Event) -> dict[str, Any]:
        entries = event.payload.get("players") or []
        if not isinstance(entries, (list, tuple)):
            raise RuleViolation("Players must be given as a list")
        for index, entry in enumerate(entries):
            if isinstance(entry, str):
                entry = {"name": entry}
            elif not isinstance(entry, dict):
                raise RuleViolation(f"Player entry {index + 1} must be a name or a mapping")
            player_id = entry.get("id") or f"p{index + 1}"
            if self.state.get_player(player_id):
                raise RuleViolation(f"Duplicate player id {player_id}")
            seat = len(self.state.players)
            self.state.add_player(
                Player(
                    id=player_id,
                    name=entry.get("name") or player_id,
                    color=entry.get("color") or PLAYER_COLORS[seat % len(PLAYER_COLORS)],
                    character=entry.get("character")
                    or PLAYER_CHARACTERS[seat % len(PLAYER_CHARACTERS)],
                )
            )

        count = len(self.state.players)
        if not MIN_PLAYERS <= count <= MAX_PLAYERS:
            raise RuleViolation(f"Need {MIN_PLAYERS}-{MAX_PLAYERS} players, got {count}")

        state = self.state
        deck = self.data.create_deck(count)
        self.rng.shuffle(deck)
        state.draw_pile = deck
        state.discard_pile = []
        state.wild_location_pile, state.wild_industry_pile = self.data.create_wild_piles()
        state.coal_market = create_coal_market()
        state.iron_market = create_iron_market()
        state.merchants = self.data.create_merchants(count)

        for player in state.players:
            player.money = STARTING_MONEY
            player.income = STARTING_INCOME
            player.victory_points = 0
            player.links = []
            player.industries = []
            player.mat = self.data.create_mat()
            player.hand = [state.draw_pile.pop() for _ in range(HAND_SIZE)]

        state.era = Era.CANAL
        state.round = 1
        state.current_player_index = 0
        state.player_spending = {}
        state.touch_topology()
        self.turn_manager.start_turn()
        state.state_path = S.SELECTING_ACTION

        message = f"Game {state.id} started with {count} players"
        state.log_event("game_start", message, {"players": state.player_order})
        self.logger.info(message)
        return self._ok(message)

    # Action selection

    def _on_choose_action(self, event: Event) -> dict[str, Any]:
        player = self._player()
        if event.event_type == E.TAKE_LOAN:
            self._require(self.validator.can_take_loan(player))
        elif event.event_type == E.SCOUT:
            self._require(self.validator.can_scout(player))

        action, next_state = ACTION_ENTRY[event.event_type]
        self.state.clear_selections()
        self.state.selected_action = action
        self.state.state_path = next_state
        return self._ok(f"{player.name} chose {action}")

    def _on_select_card(self, event: Event) -> dict[str, Any]:
        player = self._player()
        card_id = _field(event.payload, "card_id", "cardId")
        self._require(self.validator.validate_card(player, card_id))
        self.state.selected_card_id = card_id
        self.state.state_path = CARD_NEXT_STATE[self.state.state_path]
        return self._ok(f"Selected card {card_id}")

    def _on_cancel(self, event: Event) -> dict[str, Any]:
        path = self.state.state_path
        list_step = LIST_CANCEL_STEPS.get(path)
        if list_step and getattr(self.state, list_step[0]):
            field_name, emptied_state, other_state = list_step
            selection = getattr(self.state, field_name)
            selection.pop()
            self.state.state_path = other_state if selection else emptied_state
        else:
            previous, field_name = CANCEL_STEPS[path]
            if field_name:
                setattr(self.state, field_name, None)
            if previous == S.SELECTING_ACTION:
                self.state.clear_selections()
            self.state.state_path = previous
        return self._ok("Cancelled")

    # Build

    def _on_select_build_location(self, event: Event) -> dict[str, Any]:
        player = self._player()
        card = self._selected_card(player)
        location = _field(event.payload, "city_id", "cityId", "location")
        self._require(self.validator.validate_build_location(player, card, location))
        self.state.selected_location = location
        self.state.state_path = S.BUILD_SELECTING_INDUSTRY
        return self._ok(f"Selected {location}")

    def _on_select_build_tile(self, event: Event) -> dict[str, Any]:
        player = self._player()
        card = self._selected_card(player)
        tile = self._tile_from_event(player, event)
        location = self.state.selected_location or ""
        self._require(self.validator.validate_build_tile(player, card, location, tile))
        self.state.selected_industry_tile = tile.id
        self.state.state_path = S.BUILD_CONFIRMING
        return self._ok(f"Selected {tile.id}")

    def _tile_from_event(self, player: Player, event: Event) -> IndustryTile:
        """Resolve SELECT_INDUSTRY_TYPE / SELECT_INDUSTRY_TILE to the top mat tile."""
        if event.event_type == E.SELECT_INDUSTRY_TILE:
            tile_id = _field(event.payload, "tile", "tile_id")
            definition = self.data.tiles_by_id.get(tile_id or "")
            if definition is None:
                raise RuleViolation(f"Unknown tile {tile_id}")
            industry_type = definition.industry_type
        else:
            industry_type = self._industry_type(event)
            tile_id = None

        tile = player.top_tile(industry_type)
        if tile is None:
            raise RuleViolation(f"No {industry_type.value} tiles left")
        if tile_id is not None and tile.id != tile_id:
            raise RuleViolation(f"{tile_id} is not the next {industry_type.value} tile")
        return tile

    def _industry_type(self, event: Event) -> IndustryType:
        value = _field(event.payload, "industry_type", "industryType")
        try:
            return IndustryType(value)
        except ValueError:
            raise RuleViolation(f"Unknown industry type {value}") from None

    def _on_confirm_build(self, event: Event) -> dict[str, Any]:
        player = self._player()
        card = self._selected_card(player)
        if not self.state.selected_location or not self.state.selected_industry_tile:
            raise RuleViolation("Nothing selected to build")
        result = self.build_resolver.resolve(
            player, card, self.state.selected_location, self.state.selected_industry_tile
        )
        return self._complete_action(result, [card.id])

    # Develop

    def _on_select_develop_type(self, event: Event) -> dict[str, Any]:
        player = self._player()
        industry_type = self._industry_type(event)
        self._require(
            self.validator.validate_develop_type(
                player, industry_type, self.state.selected_develop_types
            )
        )
        self.state.selected_develop_types.append(industry_type)
        self.state.state_path = S.DEVELOP_CONFIRMING
        return self._ok(f"Selected {industry_type.value} to develop")

    def _on_confirm_develop(self, event: Event) -> dict[str, Any]:
        player = self._player()
        card = self._selected_card(player)
        result = self.develop_resolver.resolve(player, list(self.state.selected_develop_types))
        return self._complete_action(result, [card.id])

    # Sell

    def _on_select_sell_industry(self, event: Event) -> dict[str, Any]:
        player = self._player()
        industry_id = _field(event.payload, "tile", "industry_id", "industryId")
        self._require(
            self.validator.validate_sell_industry(
                player, industry_id, self.state.selected_sell_industries
            )
        )
        self.state.selected_sell_industries.append(industry_id)
        self.state.state_path = S.SELL_CONFIRMING
        return self._ok(f"Selected industry {industry_id} to sell")

    def _on_confirm_sell(self, event: Event) -> dict[str, Any]:
        player = self._player()
        card = self._selected_card(player)
        result = self.sell_resolver.resolve(player, list(self.state.selected_sell_industries))
        return self._complete_action(result, [card.id])

    # Loan

    def _on_confirm_loan(self, event: Event) -> dict[str, Any]:
        player = self._player()
        card = self._selected_card(player)
        result = self.loan_resolver.resolve(player)
        return self._complete_action(result, [card.id])

    # Scout

    def _on_select_scout_card(self, event: Event) -> dict[str, Any]:
        player = self._player()
        card_id = _field(event.payload, "card_id", "cardId")
        self._require(
            self.validator.validate_scout_card(
                player, card_id, self.state.selected_cards_for_scout
            )
        )
        self.state.selected_cards_for_scout.append(card_id)
        if len(self.state.selected_cards_for_scout) == 3:
            self.state.state_path = S.SCOUT_CONFIRMING
        return self._ok(f"Selected card {card_id} to discard")

    def _on_confirm_scout(self, event: Event) -> dict[str, Any]:
        player = self._player()
        card_ids = list(self.state.selected_cards_for_scout)
        result = self.scout_resolver.resolve(player, card_ids)
        return self._complete_action(result, card_ids)

    # Network

    def _link_from_event(self, event: Event) -> tuple[str, str]:
        from_city = _field(event.payload, "from", "from_city")
        to_city = _field(event.payload, "to", "to_city")
        return from_city, to_city

    def _on_select_link(self, event: Event) -> dict[str, Any]:
        player = self._player()
        from_city, to_city = self._link_from_event(event)
        self._require(self.validator.validate_link(player, from_city, to_city))
        self.state.selected_link = (from_city, to_city)
        self.state.state_path = S.NETWORK_CONFIRMING
        return self._ok(f"Selected link {from_city}-{to_city}")

    def _on_choose_double_link(self, event: Event) -> dict[str, Any]:
        if self.state.era != Era.RAIL:
            raise RuleViolation("Double links can only be built in the rail era")
        self.state.state_path = S.NETWORK_SELECTING_SECOND_LINK
        return self._ok("Building two rail links")

    def _on_select_second_link(self, event: Event) -> dict[str, Any]:
        player = self._player()
        from_city, to_city = self._link_from_event(event)
        first = self.state.selected_link
        if first is None:
            raise RuleViolation("Select the first link before the second")
        self._require(self.validator.validate_link(player, from_city, to_city, (first,)))
        self.state.selected_second_link = (from_city, to_city)
        self.state.state_path = S.NETWORK_CONFIRMING_DOUBLE
        return self._ok(f"Selected second link {from_city}-{to_city}")

    def _on_confirm_network(self, event: Event) -> dict[str, Any]:
        player = self._player()
        card = self._selected_card(player)
        links = [self.state.selected_link]
        if self.state.state_path == S.NETWORK_CONFIRMING_DOUBLE:
            links.append(self.state.selected_second_link)
        if any(link is None for link in links):
            raise RuleViolation("No link selected")
        result = self.network_resolver.resolve(player, links)
        return self._complete_action(result, [card.id])

    # Pass

    def _on_confirm_pass(self, event: Event) -> dict[str, Any]:
        player = self._player()
        card = self._selected_card(player)
        result = self.pass_resolver.resolve(player)
        return self._complete_action(result, [card.id])

    # Turn flow

    def _complete_action(self, result: dict[str, Any], spent_card_ids: list[str]) -> dict[str, Any]:
        """Discard spent cards, refill the hand and hand over if the turn is done."""
        player = self._player()
        for card_id in spent_card_ids:
            self._discard(player.remove_card(card_id))

        self.state.actions_remaining = max(0, self.state.actions_remaining - 1)
        self.state.clear_selections()
        self.turn_manager.refill_hand(player)

        if self.state.actions_remaining > 0 and player.hand:
            self.state.state_path = S.SELECTING_ACTION
        else:
            self._next_player()

        extra = {k: v for k, v in result.items() if k not in ("success", "message")}
        return self._ok(result.get("message", ""), **extra)

    def _next_player(self) -> None:
        """Hand play to the next player, closing rounds and eras as needed."""
        while True:
            wrapped = self.turn_manager.advance_turn()
            if wrapped:
                final = self.era_manager.is_final_round()
                self.turn_manager.end_round(collect_income=not final)
                if final:
                    self._end_era()
                    return
            elif self.era_manager.cards_exhausted():
                self._end_era()
                return

            self.turn_manager.start_turn()
            player = self._player()
            if player.hand:
                self.state.state_path = S.SELECTING_ACTION
                return
            self.logger.debug(f"{player.id} has no cards, skipping turn")

    def _end_era(self) -> None:
        if self.state.era == Era.CANAL:
            self.era_manager.end_canal_era()
            self.state.state_path = S.SELECTING_ACTION
        else:
            self.era_manager.end_rail_era()
            self.state.state_path = S.GAME_OVER

    def _on_trigger_era_end(self, event: Event) -> dict[str, Any]:
        expected = Era.CANAL if event.event_type == E.TRIGGER_CANAL_ERA_END else Era.RAIL
        if self.state.era != expected:
            raise RuleViolation(f"Not in the {expected.value} era")
        self._end_era()
        return self._ok(f"{expected.value.capitalize()} era ended")
