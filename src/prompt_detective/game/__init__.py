"""Game modes: detective, auditor and sandbox."""

from .actions import GameService, get_game_service

__all__ = ["GameService", "get_game_service"]
