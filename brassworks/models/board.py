"""Board and link models for Brassworks."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .industry import IndustryType


class Era(Enum):
    """Game eras."""

    CANAL = "canal"
    RAIL = "rail"


@dataclass(frozen=True)
class City:
    """A city on the board.

    Attributes:
        name: City identifier.
        color: Colour printed on the city's location cards.
        slots: Industry slots, each listing the industry types it accepts.
    """

    name: str
    color: str
    slots: tuple[tuple[IndustryType, ...], ...] = ()


@dataclass(frozen=True)
class Connection:
    """A potential link between two locations.

    Attributes:
        a: First location.
        b: Second location.
        canal: Link may be built in the canal era.
        rail: Link may be built in the rail era.
    """

    a: str
    b: str
    canal: bool = True
    rail: bool = True

    def allowed_in(self, era: Era) -> bool:
        """Check if this connection can be built in an era."""
        return self.rail if era == Era.RAIL else self.canal

    def joins(self, from_city: str, to_city: str) -> bool:
        """Check if this connection joins two locations in either direction."""
        return {self.a, self.b} == {from_city, to_city}


@dataclass
class Link:
    """A canal or rail link built by a player.

    Attributes:
        from_city: One end of the link.
        to_city: Other end of the link.
        era: Era the link was built in (canal or rail).
        owner_id: Player who built the link.
    """

    from_city: str
    to_city: str
    era: Era
    owner_id: str

    @property
    def endpoints(self) -> tuple[str, str]:
        return (self.from_city, self.to_city)

    def joins(self, from_city: str, to_city: str) -> bool:
        return {self.from_city, self.to_city} == {from_city, to_city}

    def to_dict(self) -> dict[str, Any]:
        return {
            "from": self.from_city,
            "to": self.to_city,
            "type": self.era.value,
            "owner_id": self.owner_id,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Link":
        return cls(
            from_city=data["from"],
            to_city=data["to"],
            era=Era(data["type"]),
            owner_id=data["owner_id"],
        )


_C = IndustryType.COTTON
_CO = IndustryType.COAL
_I = IndustryType.IRON
_M = IndustryType.MANUFACTURER
_P = IndustryType.POTTERY
_B = IndustryType.BREWERY

# Birmingham board: city -> (card colour, slots)
CITIES_BIRMINGHAM: dict[str, tuple[str, list[tuple[IndustryType, ...]]]] = {
    "birmingham": ("purple", [(_C, _I), (_M, _P), (_B,), (_C, _M)]),
    "coventry": ("purple", [(_C, _M), (_P,), (_I, _M)]),
    "nuneaton": ("purple", [(_M, _B), (_C, _CO)]),
    "tamworth": ("purple", [(_C, _CO), (_C, _CO)]),
    "redditch": ("yellow", [(_M, _CO), (_I,)]),
    "worcester": ("yellow", [(_C,), (_C,)]),
    "kidderminster": ("yellow", [(_C, _CO), (_C,)]),
    "dudley": ("red", [(_CO,), (_I,), (_B,)]),
    "wolverhampton": ("red", [(_CO,), (_I,), (_M,)]),
    "walsall": ("red", [(_I, _M), (_M, _B)]),
    "cannock": ("red", [(_M, _CO), (_CO,)]),
    "coalbrookdale": ("red", [(_I, _B), (_I,), (_CO,)]),
    "stoke": ("blue", [(_CO,), (_P,)]),
    "leek": ("blue", [(_C, _M), (_C, _CO)]),
    "stone": ("blue", [(_C, _B), (_M, _CO)]),
    "uttoxeter": ("blue", [(_M, _B), (_C, _B)]),
    "stafford": ("blue", [(_M, _B), (_P,)]),
    "burton": ("teal", [(_B,), (_B,)]),
    "derby": ("teal", [(_C, _B), (_C, _M), (_I,)]),
    "belper": ("teal", [(_C, _M), (_CO,), (_P,)]),
}

MERCHANT_LOCATIONS = ("warrington", "gloucester", "oxford", "nottingham", "shrewsbury")

# (a, b, canal, rail)
CONNECTIONS_BIRMINGHAM: list[tuple[str, str, bool, bool]] = [
    ("birmingham", "redditch", True, True),
    ("birmingham", "dudley", True, True),
    ("birmingham", "walsall", True, True),
    ("birmingham", "tamworth", True, True),
    ("birmingham", "coventry", True, True),
    ("dudley", "wolverhampton", True, True),
    ("dudley", "kidderminster", True, True),
    ("wolverhampton", "walsall", True, True),
    ("wolverhampton", "cannock", True, True),
    ("wolverhampton", "coalbrookdale", False, True),
    ("stone", "stoke", True, True),
    ("stoke", "leek", True, True),
    ("stone", "stafford", True, True),
    ("stafford", "cannock", True, True),
    ("uttoxeter", "stoke", False, True),
    ("uttoxeter", "derby", False, True),
    ("burton", "derby", True, True),
    ("derby", "belper", True, True),
    ("tamworth", "burton", True, True),
    ("tamworth", "nuneaton", False, True),
    ("coventry", "nuneaton", True, True),
    ("walsall", "tamworth", False, True),
    ("redditch", "worcester", False, True),
    ("worcester", "kidderminster", True, True),
    ("coalbrookdale", "shrewsbury", False, True),
    ("stoke", "warrington", True, True),
    ("worcester", "gloucester", True, True),
    ("coventry", "oxford", True, True),
    ("belper", "nottingham", False, True),
]


@dataclass(frozen=True)
class Board:
    """Static board layout: cities, merchant locations and connections.

    Attributes:
        cities: City name to City.
        merchant_locations: Names of merchant locations.
        connections: All buildable connections.
    """

    cities: dict[str, City] = field(default_factory=dict)
    merchant_locations: tuple[str, ...] = ()
    connections: tuple[Connection, ...] = ()

    @classmethod
    def birmingham(cls) -> "Board":
        """Create the standard Birmingham board."""
        cities = {
            name: City(name=name, color=color, slots=tuple(slots))
            for name, (color, slots) in CITIES_BIRMINGHAM.items()
        }
        connections = tuple(
            Connection(a=a, b=b, canal=canal, rail=rail)
            for a, b, canal, rail in CONNECTIONS_BIRMINGHAM
        )
        return cls(
            cities=cities,
            merchant_locations=MERCHANT_LOCATIONS,
            connections=connections,
        )

    def is_city(self, name: str) -> bool:
        return name in self.cities

    def get_connection(self, from_city: str, to_city: str) -> Connection | None:
        """Find the connection joining two locations, if any."""
        for connection in self.connections:
            if connection.joins(from_city, to_city):
                return connection
        return None

    def get_slots(self, city: str) -> tuple[tuple[IndustryType, ...], ...]:
        """Get the industry slots of a city (empty for merchants)."""
        city_obj = self.cities.get(city)
        if not city_obj:
            return ()
        return city_obj.slots
