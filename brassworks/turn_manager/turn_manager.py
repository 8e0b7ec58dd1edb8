"""Turn manager for Brassworks game flow control."""

import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from brassworks.models.game_data import GameData
    from brassworks.models.game_state import GameState
    from brassworks.models.player import Player

from brassworks.models.board import Era
from brassworks.models.game_data import HAND_SIZE


class TurnManager:
    """Manages turn order and round flow.

    Handles the number of actions per turn, hand refills, income at the
    end of each round and the spending-based turn order.

    Attributes:
        state: Reference to game state.
        data: Static game data.
    """

    def __init__(self, state: "GameState", data: "GameData") -> None:
        """Initialize turn manager.

        Args:
            state: The game state to manage.
            data: Static game data.
        """
        self.state = state
        self.data = data
        self.logger = logging.getLogger(__name__)

    def actions_for_round(self) -> int:
        """Actions per turn: one in the first canal round, two otherwise."""
        if self.state.era == Era.CANAL and self.state.round == 1:
            return 1
        return 2

    def start_turn(self) -> None:
        """Reset per-turn fields for the current player."""
        self.state.actions_remaining = self.actions_for_round()
        self.state.clear_selections()

    def advance_turn(self) -> bool:
        """Move to the next player in turn order.

        Returns:
            True if play wrapped around to the first player (round over).
        """
        self.state.current_player_index = (self.state.current_player_index + 1) % len(
            self.state.players
        )
        return self.state.current_player_index == 0

    def refill_hand(self, player: "Player") -> int:
        """Draw up to a full hand from the draw pile.

        Args:
            player: Player whose hand is refilled.

        Returns:
            Number of cards drawn.
        """
        drawn = 0
        while len(player.hand) < HAND_SIZE and self.state.draw_pile:
            player.hand.append(self.state.draw_pile.pop())
            drawn += 1
        if drawn:
            self.logger.debug(f"{player.id} drew {drawn} cards, {len(self.state.draw_pile)} left")
        return drawn

    def end_round(self, collect_income: bool = True) -> None:
        """Close the current round and open the next one.

        Args:
            collect_income: False for the final round of an era.
        """
        if collect_income:
            self.collect_income()
        self.reorder_players_by_spending()
        self.state.round += 1
        self.state.current_player_index = 0
        self.state.log_event(
            "round_start",
            f"Round {self.state.round} of the {self.state.era.value} era begins",
            {"order": self.state.player_order},
        )
        self.logger.info(
            f"Game {self.state.id}: {self.state.era.value} round {self.state.round}, "
            f"order {self.state.player_order}"
        )

    def reorder_players_by_spending(self) -> None:
        """Sort players by money spent this round (least first), then reset spending."""
        spending = self.state.player_spending
        self.state.players.sort(key=lambda p: spending.get(p.id, 0))
        self.state.player_spending = {}

    def collect_income(self) -> list[dict[str, Any]]:
        """Pay each player their income in turn order.

        Returns:
            One entry per player describing what happened.
        """
        results = [self._collect_for(player) for player in self.state.players]
        return results

    def _collect_for(self, player: "Player") -> dict[str, Any]:
        income = player.income
        if income >= 0:
            player.add_money(income)
            self.state.log_event(
                "income", f"{player.name} collected £{income} income", {"player": player.id}
            )
            return {"player": player.id, "collected": income}

        owed = -income
        if player.money >= owed:
            player.money -= owed
            self.state.log_event(
                "income", f"{player.name} paid £{owed} negative income", {"player": player.id}
            )
            return {"player": player.id, "paid": owed}

        shortfall = owed - player.money
        player.money = 0
        sold = []
        while shortfall > 0 and player.industries:
            industry = player.industries.pop(0)
            value = industry.tile.cost // 2
            sold.append(industry.id)
            self.state.touch_topology()
            self.state.log_event(
                "shortfall",
                f"{player.name} sold {industry.industry_type.value} industry for £{value}",
                {"player": player.id, "industry_id": industry.id, "value": value},
            )
            if value >= shortfall:
                player.money += value - shortfall
                shortfall = 0
            else:
                shortfall -= value

        if shortfall > 0:
            player.add_victory_points(-shortfall)
            self.state.log_event(
                "shortfall",
                f"{player.name} lost {shortfall} VP for unpaid income",
                {"player": player.id, "victory_points": shortfall},
            )
        self.logger.info(
            f"{player.id} could not cover £{owed} income: sold {len(sold)} industries, "
            f"lost {shortfall} VP"
        )
        return {"player": player.id, "paid": owed - shortfall, "sold": sold, "vp_lost": shortfall}

    def get_turn_info(self) -> dict[str, Any]:
        """Get information about the current turn.

        Returns:
            Dictionary with turn information.
        """
        current_player = self.state.current_player
        return {
            "state": self.state.state_path.value,
            "era": self.state.era.value,
            "round": self.state.round,
            "round_limit": (
                self.data.round_limit(len(self.state.players))
                if self.state.era == Era.RAIL
                else None
            ),
            "actions_remaining": self.state.actions_remaining,
            "current_player": {
                "id": current_player.id if current_player else None,
                "name": current_player.name if current_player else None,
            },
            "player_order": self.state.player_order,
            "draw_pile": len(self.state.draw_pile),
        }
