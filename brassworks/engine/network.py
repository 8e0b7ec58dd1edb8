"""Network connectivity queries for Brassworks."""

import logging
from collections import deque
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from brassworks.models.game_state import GameState
    from brassworks.models.merchant import Merchant
    from brassworks.models.player import Player

ExtraLinks = tuple[tuple[str, str], ...]


class NetworkGraph:
    """Answers connectivity questions over the built links.

    The adjacency map is rebuilt only when the state's topology version
    changes; breadth-first distances are memoized per source location
    until then.

    Attributes:
        state: Reference to game state.
    """

    def __init__(self, state: "GameState") -> None:
        """Initialize the network graph.

        Args:
            state: The game state.
        """
        self.state = state
        self.logger = logging.getLogger(__name__)
        self._version: int | None = None
        self._adjacency: dict[str, set[str]] = {}
        self._distances: dict[str, dict[str, int]] = {}

    def _refresh(self) -> None:
        if self._version == self.state.topology_version:
            return
        adjacency: dict[str, set[str]] = {}
        for link in self.state.all_links():
            adjacency.setdefault(link.from_city, set()).add(link.to_city)
            adjacency.setdefault(link.to_city, set()).add(link.from_city)
        self._adjacency = adjacency
        self._distances = {}
        self._version = self.state.topology_version
        self.logger.debug(
            f"Rebuilt adjacency for game {self.state.id} "
            f"(version {self._version}, {len(adjacency)} locations)"
        )

    def adjacency(self, extra_links: ExtraLinks = ()) -> dict[str, set[str]]:
        """Get location adjacency, optionally with hypothetical links added."""
        self._refresh()
        if not extra_links:
            return self._adjacency
        adjacency = {k: set(v) for k, v in self._adjacency.items()}
        for a, b in extra_links:
            adjacency.setdefault(a, set()).add(b)
            adjacency.setdefault(b, set()).add(a)
        return adjacency

    def distances_from(self, location: str, extra_links: ExtraLinks = ()) -> dict[str, int]:
        """Link distance from a location to everything reachable from it.

        Args:
            location: Starting location.
            extra_links: Links not yet built to include in the search.

        Returns:
            Location to number of links away (the start itself is 0).
        """
        if not extra_links:
            self._refresh()
            cached = self._distances.get(location)
            if cached is not None:
                return cached

        adjacency = self.adjacency(extra_links)
        distances = {location: 0}
        queue = deque([location])
        while queue:
            current = queue.popleft()
            for neighbour in sorted(adjacency.get(current, ())):
                if neighbour not in distances:
                    distances[neighbour] = distances[current] + 1
                    queue.append(neighbour)

        if not extra_links:
            self._distances[location] = distances
        return distances

    def are_connected(self, a: str, b: str, extra_links: ExtraLinks = ()) -> bool:
        """Check if a path of links joins two locations."""
        return b in self.distances_from(a, extra_links)

    def distance(self, a: str, b: str, extra_links: ExtraLinks = ()) -> int | None:
        return self.distances_from(a, extra_links).get(b)

    def player_network(self, player: "Player") -> set[str]:
        """Locations with the player's industries or next to the player's links."""
        locations = {industry.location for industry in player.industries}
        for link in player.links:
            locations.update(link.endpoints)
        return locations

    def is_in_network(self, player: "Player", location: str) -> bool:
        """Check if a location is in the player's network.

        A player with nothing on the board may start anywhere.
        """
        if not player.owns_tiles:
            return True
        return location in self.player_network(player)

    def touches_network(
        self, player: "Player", from_city: str, to_city: str, extra_links: ExtraLinks = ()
    ) -> bool:
        """Check if a new link would be adjacent to the player's network.

        Args:
            player: Player building the link.
            from_city: One end of the link.
            to_city: Other end of the link.
            extra_links: Links the player is placing in the same action.

        Returns:
            True if either end is already in the player's network.
        """
        if not player.owns_tiles and not extra_links:
            return True
        network = self.player_network(player)
        for a, b in extra_links:
            network.update((a, b))
        return from_city in network or to_city in network

    def connected_merchants(
        self, location: str, extra_links: ExtraLinks = ()
    ) -> list["Merchant"]:
        """Merchants in play reachable from a location, nearest first."""
        distances = self.distances_from(location, extra_links)
        reachable = [m for m in self.state.merchants if m.location in distances]
        return sorted(reachable, key=lambda m: distances[m.location])

    def has_market_access(self, location: str, extra_links: ExtraLinks = ()) -> bool:
        """Check if a location connects to a merchant with market access."""
        return any(m.market_access for m in self.connected_merchants(location, extra_links))
