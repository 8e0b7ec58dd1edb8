"""Game engine for Brassworks."""

from .events import Event, EventType, InvalidEventError, RuleViolation
from .game_engine import GameEngine
from .network import NetworkGraph

__all__ = [
    "Event",
    "EventType",
    "GameEngine",
    "InvalidEventError",
    "NetworkGraph",
    "RuleViolation",
]
