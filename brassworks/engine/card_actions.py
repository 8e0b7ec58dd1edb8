"""Loan, scout and pass actions for Brassworks."""

from typing import TYPE_CHECKING, Any

from brassworks.engine.events import RuleViolation
from brassworks.engine.resolver import ActionResolver

if TYPE_CHECKING:
    from brassworks.models.player import Player

LOAN_AMOUNT = 30
LOAN_INCOME_PENALTY = 3


class LoanResolver(ActionResolver):
    """Takes a £30 loan against three income levels."""

    def resolve(self, player: "Player") -> dict[str, Any]:
        self._require(self.validator.can_take_loan(player))
        player.add_money(LOAN_AMOUNT)
        player.adjust_income(-LOAN_INCOME_PENALTY)

        message = f"{player.name} took a £{LOAN_AMOUNT} loan, income now {player.income}"
        self.state.log_event(
            "loan", message, {"player": player.id, "money": player.money, "income": player.income}
        )
        self.logger.info(message)
        return {"success": True, "message": message}


class ScoutResolver(ActionResolver):
    """Discards three cards for a wild location and a wild industry card."""

    def resolve(self, player: "Player", card_ids: list[str]) -> dict[str, Any]:
        """Take the two wild cards.

        The three selected cards are discarded by the engine with the
        other spent cards.

        Args:
            player: Player scouting.
            card_ids: The three cards being discarded.

        Returns:
            Result dictionary.
        """
        self._require(self.validator.can_scout(player))
        if len(set(card_ids)) != 3:
            raise RuleViolation("Scouting discards exactly three cards")

        wild_location = self.state.wild_location_pile.pop()
        wild_industry = self.state.wild_industry_pile.pop()
        player.hand.extend([wild_location, wild_industry])

        message = f"{player.name} scouted for {wild_location.id} and {wild_industry.id}"
        self.state.log_event("scout", message, {"player": player.id, "discarded": list(card_ids)})
        self.logger.info(message)
        return {"success": True, "message": message}


class PassResolver(ActionResolver):
    """Spends a card with no other effect."""

    def resolve(self, player: "Player") -> dict[str, Any]:
        message = f"{player.name} passed"
        self.state.log_event("pass", message, {"player": player.id})
        self.logger.info(message)
        return {"success": True, "message": message}
