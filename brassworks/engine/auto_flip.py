"""Automatic tile flipping for Brassworks."""

import logging
from typing import TYPE_CHECKING

from brassworks.models.industry import RESOURCE_INDUSTRIES, Industry

if TYPE_CHECKING:
    from brassworks.models.game_state import GameState


class AutoFlipper:
    """Flips industries and advances their owners' income.

    Attributes:
        state: Reference to game state.
    """

    def __init__(self, state: "GameState") -> None:
        self.state = state
        self.logger = logging.getLogger(__name__)

    def check(self, industries: list[Industry]) -> list[Industry]:
        """Flip every resource industry that has run out of cubes.

        Args:
            industries: Industries that just gave up cubes.

        Returns:
            Industries flipped by this call.
        """
        flipped = []
        seen: set[str] = set()
        for industry in industries:
            if industry.id in seen:
                continue
            seen.add(industry.id)
            if industry.flipped or industry.industry_type not in RESOURCE_INDUSTRIES:
                continue
            if industry.resource_count() == 0:
                self.flip(industry)
                flipped.append(industry)
        return flipped

    def flip(self, industry: Industry) -> None:
        """Flip an industry and raise its owner's income (max 30)."""
        industry.flipped = True
        owner = self.state.get_player(industry.owner_id)
        if owner is None:
            return
        new_income = owner.adjust_income(industry.tile.income)
        self.state.log_event(
            "flip",
            f"{owner.name}'s {industry.industry_type.value} at {industry.location} flipped",
            {"industry_id": industry.id, "owner": owner.id, "income": new_income},
        )
        self.logger.debug(
            f"Flipped {industry.id} ({industry.tile.id}) for {owner.id}, income now {new_income}"
        )
