"""Sell action for Brassworks."""

from typing import TYPE_CHECKING, Any

from brassworks.engine.events import RuleViolation
from brassworks.engine.resolver import ActionResolver
from brassworks.models.merchant import Merchant, MerchantBonus

if TYPE_CHECKING:
    from brassworks.engine.consumption import ConsumptionPlan
    from brassworks.models.industry import Industry
    from brassworks.models.player import Player


class SellResolver(ActionResolver):
    """Sells cotton, manufactured goods and pottery to merchants."""

    def resolve(self, player: "Player", industry_ids: list[str]) -> dict[str, Any]:
        """Sell each selected industry in turn.

        Args:
            player: Player selling.
            industry_ids: Industries to sell, in order.

        Returns:
            Result dictionary.

        Raises:
            RuleViolation: If any of the sales fails.
        """
        if not industry_ids:
            raise RuleViolation("Select at least one industry to sell")

        sold = []
        for industry_id in industry_ids:
            self._require(self.validator.validate_sell_industry(player, industry_id, []))
            industry = player.get_industry(industry_id)
            merchant = self._sell_one(player, industry)
            sold.append({"industry_id": industry.id, "merchant": merchant.location})

        message = f"{player.name} sold {len(sold)} industr{'y' if len(sold) == 1 else 'ies'}"
        self.state.log_event("sell", message, {"player": player.id, "sales": sold})
        self.logger.info(message)
        return {"success": True, "message": message, "sales": sold}

    def _sell_one(self, player: "Player", industry: "Industry") -> Merchant:
        merchants = [
            m
            for m in self.network.connected_merchants(industry.location)
            if m.buys(industry.industry_type)
        ]
        if not merchants:
            raise RuleViolation(f"Cannot sell: no merchant buys from {industry.location}")

        merchant, plan = self._plan_beer(player, industry, merchants)
        self._consume(plan)
        if plan.merchant_draw is not None:
            self._apply_bonus(player, merchant, industry)

        self.flipper.flip(industry)
        self.state.log_event(
            "sale",
            f"{player.name} sold {industry.tile.id} at {industry.location} to {merchant.location}",
            {"player": player.id, "industry_id": industry.id, "merchant": merchant.location},
        )
        return merchant

    def _plan_beer(
        self, player: "Player", industry: "Industry", merchants: list[Merchant]
    ) -> tuple[Merchant, "ConsumptionPlan"]:
        needed = industry.tile.beer_cost
        try:
            return merchants[0], self.consumer.plan_beer(player, industry.location, needed)
        except RuleViolation:
            for merchant in merchants:
                if merchant.has_beer:
                    plan = self.consumer.plan_beer(
                        player, industry.location, needed, merchant=merchant
                    )
                    return merchant, plan
            raise

    def _apply_bonus(self, player: "Player", merchant: Merchant, industry: "Industry") -> None:
        """Grant the bonus of a merchant whose beer was drunk."""
        amount = merchant.bonus_amount
        if merchant.bonus == MerchantBonus.MONEY:
            player.add_money(amount)
        elif merchant.bonus == MerchantBonus.INCOME:
            player.adjust_income(amount)
        elif merchant.bonus == MerchantBonus.VICTORY_POINTS:
            player.add_victory_points(amount)
        elif merchant.bonus == MerchantBonus.DEVELOP:
            for _ in range(amount):
                tile = player.top_tile(industry.industry_type)
                if tile is None or not tile.can_develop:
                    self.logger.debug(f"No {industry.industry_type.value} tile to develop for free")
                    break
                player.take_top_tile(industry.industry_type)

        self.state.log_event(
            "merchant_bonus",
            f"{player.name} took merchant beer at {merchant.location} "
            f"({merchant.bonus.value} +{amount})",
            {"player": player.id, "merchant": merchant.location, "bonus": merchant.bonus.value},
        )
