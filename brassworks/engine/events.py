"""Events and engine errors for Brassworks."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class EventType(Enum):
    """Events the engine accepts from its caller."""

    START_GAME = "START_GAME"
    BUILD = "BUILD"
    DEVELOP = "DEVELOP"
    SELL = "SELL"
    TAKE_LOAN = "TAKE_LOAN"
    SCOUT = "SCOUT"
    NETWORK = "NETWORK"
    PASS = "PASS"
    SELECT_CARD = "SELECT_CARD"
    SELECT_LOCATION = "SELECT_LOCATION"
    SELECT_INDUSTRY_TYPE = "SELECT_INDUSTRY_TYPE"
    SELECT_INDUSTRY_TILE = "SELECT_INDUSTRY_TILE"
    SELECT_LINK = "SELECT_LINK"
    SELECT_SECOND_LINK = "SELECT_SECOND_LINK"
    CHOOSE_DOUBLE_LINK_BUILD = "CHOOSE_DOUBLE_LINK_BUILD"
    CONFIRM = "CONFIRM"
    CANCEL = "CANCEL"
    TRIGGER_CANAL_ERA_END = "TRIGGER_CANAL_ERA_END"
    TRIGGER_RAIL_ERA_END = "TRIGGER_RAIL_ERA_END"


@dataclass
class Event:
    """An event with its payload.

    Attributes:
        event_type: Which event this is.
        payload: Event fields, e.g. {"card_id": "birmingham_1"}.
    """

    event_type: EventType
    payload: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Event":
        """Build an event from a {"type": ..., **fields} dict."""
        payload = dict(data)
        name = payload.pop("type", None)
        return cls(event_type=parse_event_type(name), payload=payload)


class InvalidEventError(ValueError):
    """Raised when an event is not accepted in the current state."""


class RuleViolation(ValueError):
    """Raised by resolvers when an action breaks a game rule."""


def parse_event_type(name: Any) -> EventType:
    """Convert an event name into an EventType.

    Raises:
        InvalidEventError: If the name is not a known event.
    """
    if isinstance(name, EventType):
        return name
    try:
        return EventType(name)
    except ValueError:
        raise InvalidEventError(f"Unknown event: {name}") from None
