"""Network action for Brassworks."""

from typing import TYPE_CHECKING, Any

from brassworks.engine.events import RuleViolation
from brassworks.engine.resolver import ActionResolver
from brassworks.models.board import Era, Link

if TYPE_CHECKING:
    from brassworks.models.player import Player

CANAL_LINK_COST = 3
RAIL_LINK_COST = 5
DOUBLE_RAIL_LINK_COST = 15


class NetworkResolver(ActionResolver):
    """Places canal or rail links."""

    def resolve(self, player: "Player", links: list[tuple[str, str]]) -> dict[str, Any]:
        """Build one link, or two rail links in the same action.

        Args:
            player: Player building.
            links: Selected (from, to) pairs.

        Returns:
            Result dictionary.

        Raises:
            RuleViolation: If the links cannot be built.
        """
        if not links:
            raise RuleViolation("Select a link to build")
        if len(links) > 2 or (len(links) == 2 and self.state.era != Era.RAIL):
            raise RuleViolation("Two links may only be built together in the rail era")

        placed: tuple[tuple[str, str], ...] = ()
        for from_city, to_city in links:
            self._require(self.validator.validate_link(player, from_city, to_city, placed))
            placed += ((from_city, to_city),)

        if self.state.era == Era.CANAL:
            total = CANAL_LINK_COST
            self._pay(player, total)
        else:
            total = self._pay_rail(player, placed)

        for from_city, to_city in placed:
            player.links.append(
                Link(from_city=from_city, to_city=to_city, era=self.state.era, owner_id=player.id)
            )
        self.state.touch_topology()

        names = ", ".join(f"{a}-{b}" for a, b in placed)
        message = f"{player.name} built {self.state.era.value} link {names} for £{total}"
        self.state.log_event(
            "network",
            message,
            {"player": player.id, "links": [list(link) for link in placed], "cost": total},
        )
        self.logger.info(message)
        return {"success": True, "message": message}

    def _pay_rail(self, player: "Player", placed: tuple[tuple[str, str], ...]) -> int:
        """Consume coal per link (and beer for a double) and pay for rail links."""
        base = RAIL_LINK_COST if len(placed) == 1 else DOUBLE_RAIL_LINK_COST
        coal_plans = []
        for index, (from_city, _) in enumerate(placed):
            plan = self.consumer.plan_coal(from_city, 1, extra_links=placed[: index + 1])
            coal_plans.append(plan)
            self._consume(plan)

        total = base + sum(plan.cost for plan in coal_plans)
        if len(placed) == 2:
            beer_plan = self.consumer.plan_beer(player, placed[1][0], 1, extra_links=placed)
            self._consume(beer_plan)

        if not player.can_afford(total):
            raise RuleViolation(f"{player.name} cannot afford £{total} for rail links")
        self._pay(player, total)
        return total
