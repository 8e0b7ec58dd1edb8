"""Coal and iron market models for Brassworks."""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class MarketTier:
    """One price step of a resource market.

    Attributes:
        price: Price per cube at this step.
        cubes: Cubes currently held.
        max_cubes: Capacity, None for the unbounded last step.
    """

    price: int
    cubes: int = 0
    max_cubes: int | None = 2

    @property
    def unbounded(self) -> bool:
        return self.max_cubes is None

    @property
    def spare(self) -> int:
        """Free capacity of a finite tier."""
        if self.max_cubes is None:
            return 0
        return self.max_cubes - self.cubes


@dataclass
class ResourceMarket:
    """A stepped price ladder for coal or iron.

    Buying draws from the cheapest non-empty tier first and falls back
    to the unbounded tier's price once the finite tiers are empty.
    Selling fills the most expensive finite tier with spare room first.

    Attributes:
        resource: 'coal' or 'iron'.
        tiers: Tiers in ascending price order, last one unbounded.
    """

    resource: str
    tiers: list[MarketTier] = field(default_factory=list)

    @property
    def fallback_price(self) -> int:
        return self.tiers[-1].price

    @property
    def finite_tiers(self) -> list[MarketTier]:
        return [t for t in self.tiers if not t.unbounded]

    @property
    def total_cubes(self) -> int:
        return sum(t.cubes for t in self.finite_tiers)

    @property
    def capacity(self) -> int:
        """Cubes the market can still absorb."""
        return sum(t.spare for t in self.finite_tiers)

    def current_price(self) -> int:
        """Price of the next cube bought."""
        for tier in self.finite_tiers:
            if tier.cubes > 0:
                return tier.price
        return self.fallback_price

    def quote(self, count: int) -> int:
        """Cost of buying cubes without changing the market.

        Args:
            count: Number of cubes wanted.

        Returns:
            Total price.
        """
        remaining = count
        total = 0
        for tier in self.finite_tiers:
            if remaining == 0:
                break
            taken = min(tier.cubes, remaining)
            total += taken * tier.price
            remaining -= taken
        return total + remaining * self.fallback_price

    def buy(self, count: int) -> int:
        """Buy cubes, cheapest first.

        Args:
            count: Number of cubes to buy.

        Returns:
            Total price paid.
        """
        remaining = count
        total = 0
        for tier in self.finite_tiers:
            if remaining == 0:
                break
            taken = min(tier.cubes, remaining)
            tier.cubes -= taken
            total += taken * tier.price
            remaining -= taken
        return total + remaining * self.fallback_price

    def sell(self, count: int) -> tuple[int, int]:
        """Sell cubes into the market, most expensive tier first.

        Args:
            count: Cubes offered.

        Returns:
            Tuple of (cubes sold, money earned).
        """
        remaining = count
        sold = 0
        earned = 0
        for tier in reversed(self.finite_tiers):
            if remaining == 0:
                break
            placed = min(tier.spare, remaining)
            tier.cubes += placed
            earned += placed * tier.price
            sold += placed
            remaining -= placed
        return sold, earned

    def to_dict(self) -> dict[str, Any]:
        return {
            "resource": self.resource,
            "tiers": [
                {"price": t.price, "cubes": t.cubes, "max_cubes": t.max_cubes}
                for t in self.tiers
            ],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ResourceMarket":
        return cls(
            resource=data["resource"],
            tiers=[
                MarketTier(price=t["price"], cubes=t["cubes"], max_cubes=t["max_cubes"])
                for t in data["tiers"]
            ],
        )


# (price, starting cubes, capacity); capacity None is unbounded
COAL_MARKET_TIERS: list[tuple[int, int, int | None]] = [
    (1, 1, 2),
    (2, 2, 2),
    (3, 2, 2),
    (4, 2, 2),
    (5, 2, 2),
    (6, 2, 2),
    (7, 2, 2),
    (8, 0, None),
]

IRON_MARKET_TIERS: list[tuple[int, int, int | None]] = [
    (1, 0, 2),
    (2, 2, 2),
    (3, 2, 2),
    (4, 2, 2),
    (5, 2, 2),
    (6, 0, None),
]


def _create_market(resource: str, tiers: list[tuple[int, int, int | None]]) -> ResourceMarket:
    return ResourceMarket(
        resource=resource,
        tiers=[MarketTier(price=p, cubes=c, max_cubes=m) for p, c, m in tiers],
    )


def create_coal_market() -> ResourceMarket:
    """Create the coal market in its starting position."""
    return _create_market("coal", COAL_MARKET_TIERS)


def create_iron_market() -> ResourceMarket:
    """Create the iron market in its starting position."""
    return _create_market("iron", IRON_MARKET_TIERS)
