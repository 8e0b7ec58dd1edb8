"""Era end, scoring and game end for Brassworks."""

import logging
import random
from typing import TYPE_CHECKING, Any

from brassworks.models.board import Era
from brassworks.models.card import CardType
from brassworks.models.game_data import HAND_SIZE

if TYPE_CHECKING:
    from brassworks.models.card import Card
    from brassworks.models.game_data import GameData
    from brassworks.models.game_state import GameState
    from brassworks.models.player import Player


class EraManager:
    """Detects era ends and runs scoring and cleanup.

    Attributes:
        state: Reference to game state.
        data: Static game data.
        rng: Random source used for the reshuffle.
    """

    def __init__(self, state: "GameState", data: "GameData", rng: random.Random) -> None:
        """Initialize the era manager.

        Args:
            state: The game state.
            data: Static game data.
            rng: Seedable random source.
        """
        self.state = state
        self.data = data
        self.rng = rng
        self.logger = logging.getLogger(__name__)

    @property
    def round_limit(self) -> int:
        return self.data.round_limit(len(self.state.players))

    def cards_exhausted(self) -> bool:
        """Check if the draw pile and every hand are empty."""
        return not self.state.draw_pile and all(not p.hand for p in self.state.players)

    def is_final_round(self) -> bool:
        """Check if the round now ending closes the era.

        The canal era runs until the cards are gone; the rail era also
        stops at its round limit.
        """
        if self.cards_exhausted():
            return True
        return self.state.era == Era.RAIL and self.state.round >= self.round_limit

    def location_icons(self, location: str) -> int:
        """Link-scoring icons shown at a location."""
        icons = sum(
            i.tile.link_icons
            for i in self.state.all_industries()
            if i.location == location and i.flipped
        )
        merchant = self.state.get_merchant(location)
        if merchant is not None:
            icons += merchant.link_icons
        return icons

    def score_links(self) -> dict[str, int]:
        """Score every link for its owner, then remove all links.

        Returns:
            Points scored per player id.
        """
        scores: dict[str, int] = {}
        for player in self.state.players:
            points = sum(
                self.location_icons(link.from_city) + self.location_icons(link.to_city)
                for link in player.links
            )
            player.add_victory_points(points)
            scores[player.id] = points
        for player in self.state.players:
            player.links.clear()
        self.state.touch_topology()
        self.logger.debug(f"Link scores: {scores}")
        return scores

    def score_industries(self) -> dict[str, int]:
        """Score flipped industries for their owners; tiles stay in place.

        Returns:
            Points scored per player id.
        """
        scores: dict[str, int] = {}
        for player in self.state.players:
            points = sum(i.tile.victory_points for i in player.industries if i.flipped)
            player.add_victory_points(points)
            scores[player.id] = points
        self.logger.debug(f"Industry scores: {scores}")
        return scores

    def end_canal_era(self) -> dict[str, Any]:
        """Score the canal era and prepare the rail era."""
        self.logger.info(f"Canal era ending for game {self.state.id}")
        link_scores = self.score_links()
        industry_scores = self.score_industries()

        self._remove_level_one_tiles()
        self._reset_merchant_beer()
        self._reshuffle_and_deal()

        self.state.era = Era.RAIL
        self.state.round = 1
        self.state.actions_remaining = 2
        self.state.current_player_index = 0
        self.state.player_spending = {}
        self.state.clear_selections()

        self.state.log_event(
            "era_end",
            "Canal era ended, rail era begins",
            {"links": link_scores, "industries": industry_scores},
        )
        return {"era": Era.CANAL.value, "links": link_scores, "industries": industry_scores}

    def end_rail_era(self) -> dict[str, Any]:
        """Score the rail era and decide the winner."""
        self.logger.info(f"Rail era ending for game {self.state.id}")
        link_scores = self.score_links()
        industry_scores = self.score_industries()

        winner = self.determine_winner()
        self.state.winner_id = winner.id if winner else None
        self.state.is_draw = winner is None
        self.state.actions_remaining = 0
        self.state.clear_selections()

        message = f"Game over, {winner.name} wins" if winner else "Game over, draw"
        self.state.log_event(
            "game_end",
            message,
            {
                "links": link_scores,
                "industries": industry_scores,
                "winner": self.state.winner_id,
                "scores": {p.id: p.victory_points for p in self.state.players},
            },
        )
        self.logger.info(message)
        return {"era": Era.RAIL.value, "winner": self.state.winner_id}

    def determine_winner(self) -> "Player | None":
        """Highest VP, then income, then money; None on an unresolved tie."""
        if not self.state.players:
            return None

        def key(p: "Player") -> tuple[int, int, int]:
            return (p.victory_points, p.income, p.money)

        ranked = sorted(self.state.players, key=key, reverse=True)
        if len(ranked) > 1 and key(ranked[0]) == key(ranked[1]):
            return None
        return ranked[0]

    def _remove_level_one_tiles(self) -> None:
        removed = 0
        for player in self.state.players:
            keep = [i for i in player.industries if i.level != 1]
            removed += len(player.industries) - len(keep)
            player.industries = keep
        self.state.touch_topology()
        self.state.log_event("cleanup", f"Removed {removed} level 1 industries", {})

    def _reset_merchant_beer(self) -> None:
        for merchant in self.state.merchants:
            merchant.has_beer = True
        self.state.log_event("cleanup", "Reset merchant beer", {})

    def _reshuffle_and_deal(self) -> None:
        pool: list["Card"] = list(self.state.draw_pile) + list(self.state.discard_pile)
        for player in self.state.players:
            for card in player.hand:
                if card.card_type == CardType.WILD_LOCATION:
                    self.state.wild_location_pile.append(card)
                elif card.card_type == CardType.WILD_INDUSTRY:
                    self.state.wild_industry_pile.append(card)
                else:
                    pool.append(card)
            player.hand = []

        total = len(pool)
        self.rng.shuffle(pool)
        self.state.draw_pile = pool
        self.state.discard_pile = []
        for player in self.state.players:
            for _ in range(HAND_SIZE):
                if not self.state.draw_pile:
                    break
                player.hand.append(self.state.draw_pile.pop())

        self.state.log_event(
            "cleanup",
            f"Reshuffled {total} cards and dealt new hands",
            {"draw_pile": len(self.state.draw_pile)},
        )
