"""
Models package for the Sideline Manager.

This package contains the core data models used throughout the application.
"""
from .player import Player
from .team import Team
from .lineup import FieldPosition, PlayerLineupState, LineupSlot, SavedLineup
from .game_event import GameEvent
from .game import Game
from .game_report import GameReport, PlayerTimeSummary

__all__ = [
    "Player", "Team", "FieldPosition", "PlayerLineupState", "LineupSlot",
    "SavedLineup", "GameEvent", "Game", "GameReport", "PlayerTimeSummary"
]
