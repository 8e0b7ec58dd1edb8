"""Game models for Brassworks."""

from .board import Board, City, Connection, Era, Link
from .card import Card, CardType
from .game_data import GameData
from .game_state import GameState, StatePath
from .industry import Industry, IndustryTile, IndustryType
from .market import MarketTier, ResourceMarket
from .merchant import Merchant, MerchantBonus
from .player import Player

__all__ = [
    "Board",
    "City",
    "Connection",
    "Era",
    "Link",
    "Card",
    "CardType",
    "GameData",
    "GameState",
    "StatePath",
    "Industry",
    "IndustryTile",
    "IndustryType",
    "MarketTier",
    "ResourceMarket",
    "Merchant",
    "MerchantBonus",
    "Player",
]
