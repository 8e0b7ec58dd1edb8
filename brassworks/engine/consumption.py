"""Resource consumption for Brassworks."""

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from brassworks.engine.events import RuleViolation
from brassworks.engine.network import ExtraLinks, NetworkGraph
from brassworks.models.industry import Industry, IndustryType

if TYPE_CHECKING:
    from brassworks.models.game_state import GameState
    from brassworks.models.merchant import Merchant
    from brassworks.models.player import Player


@dataclass
class ResourceDraw:
    """Cubes taken from one source.

    Attributes:
        amount: Cubes taken.
        industry_id: Source industry, if any.
        merchant: Source merchant location, if any.
    """

    amount: int
    industry_id: str | None = None
    merchant: str | None = None

    @property
    def from_market(self) -> bool:
        return self.industry_id is None and self.merchant is None


@dataclass
class ConsumptionPlan:
    """Where each unit of a resource will come from.

    Attributes:
        resource: 'coal', 'iron' or 'beer'.
        draws: Sources in the order they are drawn.
        cost: Money owed for market purchases.
    """

    resource: str
    draws: list[ResourceDraw] = field(default_factory=list)
    cost: int = 0

    @property
    def market_cubes(self) -> int:
        return sum(d.amount for d in self.draws if d.from_market)

    @property
    def merchant_draw(self) -> ResourceDraw | None:
        for draw in self.draws:
            if draw.merchant:
                return draw
        return None


class ResourceConsumer:
    """Plans and applies coal, iron and beer consumption.

    Plans never touch the state, so an action can check every resource
    it needs before anything is consumed.

    Attributes:
        state: Reference to game state.
        network: Connectivity queries.
    """

    def __init__(self, state: "GameState", network: NetworkGraph) -> None:
        """Initialize the consumer.

        Args:
            state: The game state.
            network: Network graph over the same state.
        """
        self.state = state
        self.network = network
        self.logger = logging.getLogger(__name__)

    def plan_coal(
        self, location: str, amount: int, extra_links: ExtraLinks = ()
    ) -> ConsumptionPlan:
        """Plan coal for a location: nearest connected mines, then the market.

        Args:
            location: Where the coal is needed.
            amount: Cubes needed.
            extra_links: Links being placed by the same action.

        Returns:
            The consumption plan.

        Raises:
            RuleViolation: If the coal cannot be sourced.
        """
        plan = ConsumptionPlan(resource="coal")
        if amount <= 0:
            return plan

        distances = self.network.distances_from(location, extra_links)
        mines = [
            i
            for i in self.state.all_industries()
            if i.industry_type == IndustryType.COAL
            and not i.flipped
            and i.coal > 0
            and i.location in distances
        ]
        mines.sort(key=lambda i: distances[i.location])

        remaining = amount
        for mine in mines:
            if remaining == 0:
                break
            taken = min(mine.coal, remaining)
            plan.draws.append(ResourceDraw(amount=taken, industry_id=mine.id))
            remaining -= taken

        if remaining > 0:
            if not self.network.has_market_access(location, extra_links):
                raise RuleViolation(f"No coal source connected to {location}")
            plan.draws.append(ResourceDraw(amount=remaining))
            plan.cost = self.state.coal_market.quote(remaining)

        return plan

    def plan_iron(self, amount: int) -> ConsumptionPlan:
        """Plan iron: any iron works first, then the market.

        Args:
            amount: Cubes needed.

        Returns:
            The consumption plan.
        """
        plan = ConsumptionPlan(resource="iron")
        if amount <= 0:
            return plan

        remaining = amount
        for works in self.state.all_industries():
            if remaining == 0:
                break
            if works.industry_type != IndustryType.IRON or works.flipped or works.iron <= 0:
                continue
            taken = min(works.iron, remaining)
            plan.draws.append(ResourceDraw(amount=taken, industry_id=works.id))
            remaining -= taken

        if remaining > 0:
            plan.draws.append(ResourceDraw(amount=remaining))
            plan.cost = self.state.iron_market.quote(remaining)

        return plan

    def plan_beer(
        self,
        player: "Player",
        location: str,
        amount: int,
        merchant: "Merchant | None" = None,
        extra_links: ExtraLinks = (),
    ) -> ConsumptionPlan:
        """Plan beer: own breweries, connected opponent breweries, merchant beer.

        Args:
            player: Player consuming the beer.
            location: Where the beer is needed.
            amount: Barrels needed.
            merchant: Merchant whose barrel may be used (sales only).
            extra_links: Links being placed by the same action.

        Returns:
            The consumption plan.

        Raises:
            RuleViolation: If not enough beer is available.
        """
        plan = ConsumptionPlan(resource="beer")
        if amount <= 0:
            return plan

        remaining = amount
        for brewery in self._breweries(player.id, own=True):
            if remaining == 0:
                break
            taken = min(brewery.beer, remaining)
            plan.draws.append(ResourceDraw(amount=taken, industry_id=brewery.id))
            remaining -= taken

        if remaining > 0:
            distances = self.network.distances_from(location, extra_links)
            for brewery in self._breweries(player.id, own=False):
                if remaining == 0:
                    break
                if brewery.location not in distances:
                    continue
                taken = min(brewery.beer, remaining)
                plan.draws.append(ResourceDraw(amount=taken, industry_id=brewery.id))
                remaining -= taken

        if remaining > 0 and merchant is not None and merchant.has_beer:
            plan.draws.append(ResourceDraw(amount=1, merchant=merchant.location))
            remaining -= 1

        if remaining > 0:
            raise RuleViolation(f"Not enough beer for {location}")

        return plan

    def _breweries(self, player_id: str, own: bool) -> list[Industry]:
        return [
            i
            for i in self.state.all_industries()
            if i.industry_type == IndustryType.BREWERY
            and not i.flipped
            and i.beer > 0
            and (i.owner_id == player_id) == own
        ]

    def consume(self, plan: ConsumptionPlan) -> list[Industry]:
        """Apply a plan to the state.

        Args:
            plan: Plan from one of the plan_* methods.

        Returns:
            Industries that gave up cubes.
        """
        affected: list[Industry] = []
        for draw in plan.draws:
            if draw.industry_id:
                industry = self.state.get_industry(draw.industry_id)
                if industry is None:
                    raise RuleViolation(f"Industry {draw.industry_id} no longer exists")
                setattr(industry, plan.resource, getattr(industry, plan.resource) - draw.amount)
                affected.append(industry)
                self.logger.debug(
                    f"Took {draw.amount} {plan.resource} from {industry.id} at {industry.location}"
                )
            elif draw.merchant:
                merchant = self.state.get_merchant(draw.merchant)
                if merchant is not None:
                    merchant.has_beer = False
                self.logger.debug(f"Took merchant beer at {draw.merchant}")
            else:
                market = (
                    self.state.coal_market if plan.resource == "coal" else self.state.iron_market
                )
                paid = market.buy(draw.amount)
                self.logger.debug(f"Bought {draw.amount} {plan.resource} from market for £{paid}")
        return affected
