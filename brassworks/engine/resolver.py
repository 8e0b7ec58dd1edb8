"""Shared plumbing for action resolvers."""

import logging
from typing import TYPE_CHECKING

from brassworks.engine.events import RuleViolation

if TYPE_CHECKING:
    from brassworks.engine.auto_flip import AutoFlipper
    from brassworks.engine.consumption import ConsumptionPlan, ResourceConsumer
    from brassworks.engine.network import NetworkGraph
    from brassworks.models.game_data import GameData
    from brassworks.models.game_state import GameState
    from brassworks.models.industry import Industry
    from brassworks.models.player import Player
    from brassworks.turn_manager.action_validator import ActionValidator


class ActionResolver:
    """Base class for the per-action resolvers.

    Resolvers raise RuleViolation when an action cannot be completed;
    the engine rolls the state back in that case.

    Attributes:
        state: Reference to game state.
        data: Static game data.
        network: Connectivity queries.
        consumer: Resource consumption planner.
        flipper: Auto-flip engine.
        validator: Selection guards.
    """

    def __init__(
        self,
        state: "GameState",
        data: "GameData",
        network: "NetworkGraph",
        consumer: "ResourceConsumer",
        flipper: "AutoFlipper",
        validator: "ActionValidator",
    ) -> None:
        self.state = state
        self.data = data
        self.network = network
        self.consumer = consumer
        self.flipper = flipper
        self.validator = validator
        self.logger = logging.getLogger(self.__class__.__module__)

    def _require(self, check: tuple[bool, str]) -> None:
        """Raise RuleViolation for a failed validator check."""
        valid, error = check
        if not valid:
            raise RuleViolation(error)

    def _pay(self, player: "Player", amount: int) -> None:
        """Take money from a player and record it as spent this round."""
        if amount <= 0:
            return
        if not player.can_afford(amount):
            raise RuleViolation(f"{player.name} cannot afford £{amount} (has £{player.money})")
        player.remove_money(amount)
        self.state.record_spending(player.id, amount)

    def _consume(self, *plans: "ConsumptionPlan") -> list["Industry"]:
        """Apply consumption plans and flip anything they emptied."""
        affected: list["Industry"] = []
        for plan in plans:
            affected.extend(self.consumer.consume(plan))
        self.flipper.check(affected)
        return affected
