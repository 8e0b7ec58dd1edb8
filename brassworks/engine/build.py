"""Build action for Brassworks."""

from typing import TYPE_CHECKING, Any

from brassworks.engine.events import RuleViolation
from brassworks.engine.resolver import ActionResolver
from brassworks.models.board import Era
from brassworks.models.industry import Industry, IndustryType

if TYPE_CHECKING:
    from brassworks.models.card import Card
    from brassworks.models.player import Player


class BuildResolver(ActionResolver):
    """Places an industry tile on the board."""

    def resolve(
        self, player: "Player", card: "Card", location: str, tile_id: str
    ) -> dict[str, Any]:
        """Build the player's top tile of a type in a city.

        Args:
            player: Player building.
            card: Card spent on the action.
            location: City to build in.
            tile_id: Tile being built; must be the top of its mat stack.

        Returns:
            Result dictionary with the new industry id.

        Raises:
            RuleViolation: If the build is not possible.
        """
        definition = self.data.tiles_by_id.get(tile_id)
        if definition is None:
            raise RuleViolation(f"Unknown tile {tile_id}")
        industry_type = definition.industry_type
        tile = player.top_tile(industry_type)
        if tile is None or tile.id != tile_id:
            raise RuleViolation(f"{tile_id} is not the next {industry_type.value} tile")

        self._require(self.validator.validate_build_location(player, card, location))
        self._require(self.validator.validate_build_tile(player, card, location, tile))
        target = self.validator.find_build_target(player, location, tile)
        if target is None:
            raise RuleViolation(f"No space for {tile.id} in {location}")
        slot_index, replaced = target

        coal_plan = self.consumer.plan_coal(location, tile.coal_cost)
        iron_plan = self.consumer.plan_iron(tile.iron_cost)
        total = tile.cost + coal_plan.cost + iron_plan.cost
        if not player.can_afford(total):
            raise RuleViolation(f"{player.name} cannot afford £{total} to build {tile.id}")

        self._consume(coal_plan, iron_plan)
        self._pay(player, total)

        if replaced is not None:
            self._remove_overbuilt(replaced)

        player.take_top_tile(industry_type)
        industry = Industry(
            id=self.state.new_industry_id(),
            owner_id=player.id,
            location=location,
            slot_index=slot_index,
            tile=tile,
            coal=tile.coal_produced,
            iron=tile.iron_produced,
            beer=tile.beer_produced * (2 if self.state.era == Era.RAIL else 1),
        )
        player.industries.append(industry)
        self.state.touch_topology()

        self._move_cubes_to_market(player, industry)

        message = f"{player.name} built {tile.id} in {location} for £{total}"
        self.state.log_event(
            "build",
            message,
            {"player": player.id, "industry_id": industry.id, "tile": tile.id, "cost": total},
        )
        self.logger.info(message)
        return {"success": True, "message": message, "industry_id": industry.id}

    def _remove_overbuilt(self, replaced: Industry) -> None:
        owner = self.state.get_player(replaced.owner_id)
        if owner is not None:
            owner.industries.remove(replaced)
        self.state.log_event(
            "overbuild",
            f"{replaced.tile.id} at {replaced.location} was overbuilt",
            {"industry_id": replaced.id, "owner": replaced.owner_id},
        )

    def _move_cubes_to_market(self, player: "Player", industry: Industry) -> None:
        """Sell fresh coal (when merchant-connected) or iron to the market."""
        if industry.industry_type == IndustryType.COAL:
            if industry.coal == 0 or not self.network.has_market_access(industry.location):
                return
            sold, earned = self.state.coal_market.sell(industry.coal)
            industry.coal -= sold
        elif industry.industry_type == IndustryType.IRON:
            if industry.iron == 0:
                return
            sold, earned = self.state.iron_market.sell(industry.iron)
            industry.iron -= sold
        else:
            return

        if sold:
            player.add_money(earned)
            self.state.log_event(
                "market_sale",
                f"{player.name} sold {sold} {industry.industry_type.value} to the market for £{earned}",
                {"player": player.id, "industry_id": industry.id, "cubes": sold, "money": earned},
            )
        self.flipper.check([industry])
