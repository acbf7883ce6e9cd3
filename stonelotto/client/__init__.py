"""Client round and chat core for Stone Lotto."""

from .announcer import OutcomeAnnouncer, compose_announcement, winner_names
from .catalog import STONE_CATALOG, PayoutClass, Stone, StoneCatalog
from .chat_tracker import ChatActivityTracker
from .config import ClientSettings, load_settings
from .gateway import HttpSessionGateway, SessionGateway, create_gateway
from .round_controller import RollState, RoundStateController
from .session import GameSession

__all__ = [
    "ChatActivityTracker",
    "ClientSettings",
    "compose_announcement",
    "create_gateway",
    "GameSession",
    "HttpSessionGateway",
    "load_settings",
    "OutcomeAnnouncer",
    "PayoutClass",
    "RollState",
    "RoundStateController",
    "SessionGateway",
    "Stone",
    "STONE_CATALOG",
    "StoneCatalog",
    "winner_names",
]
