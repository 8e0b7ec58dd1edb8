"""Develop action for Brassworks."""

from typing import TYPE_CHECKING, Any

from brassworks.engine.events import RuleViolation
from brassworks.engine.resolver import ActionResolver

if TYPE_CHECKING:
    from brassworks.models.industry import IndustryType
    from brassworks.models.player import Player


class DevelopResolver(ActionResolver):
    """Removes tiles from a player mat at the cost of one iron each."""

    def resolve(self, player: "Player", industry_types: list["IndustryType"]) -> dict[str, Any]:
        """Develop one or two tiles.

        Args:
            player: Player developing.
            industry_types: Type of each tile to remove (one or two entries).

        Returns:
            Result dictionary.

        Raises:
            RuleViolation: If the tiles cannot be developed.
        """
        if not 1 <= len(industry_types) <= 2:
            raise RuleViolation("Develop removes one or two tiles")
        checked: list["IndustryType"] = []
        for industry_type in industry_types:
            self._require(self.validator.validate_develop_type(player, industry_type, checked))
            checked.append(industry_type)

        iron_plan = self.consumer.plan_iron(len(industry_types))
        if not player.can_afford(iron_plan.cost):
            raise RuleViolation(f"{player.name} cannot afford £{iron_plan.cost} of iron")

        self._consume(iron_plan)
        self._pay(player, iron_plan.cost)

        removed = [player.take_top_tile(t).id for t in industry_types]
        message = f"{player.name} developed {', '.join(removed)}"
        self.state.log_event(
            "develop",
            message,
            {"player": player.id, "tiles": removed, "cost": iron_plan.cost},
        )
        self.logger.info(message)
        return {"success": True, "message": message, "tiles": removed}
