"""
Services package for the Sideline Manager.

This package contains the game engine (clock, lineup moves, event log), the
persistence gateway and the game manager that ties them together.
"""
from .errors import (
    SidelineError, GatewayError, SessionError, ValidationError,
    GameValidationError, PlayerValidationError, LineupValidationError
)
from .persistence_service import GameGateway, InMemoryGateway, JsonFileGateway
from .session import TeamSession
from .game_manager import GameManager, OperationResult
from .lineup_service import LineupPlanner, SavedLineupStore
from .report_service import ReportService, GameReportExporter
from .schedule_service import Schedule, GameHistory, classify_games, game_history, game_result
from .service_factory import ServiceFactory

__all__ = [
    "SidelineError", "GatewayError", "SessionError", "ValidationError",
    "GameValidationError", "PlayerValidationError", "LineupValidationError",
    "GameGateway", "InMemoryGateway", "JsonFileGateway", "TeamSession",
    "GameManager", "OperationResult", "LineupPlanner", "SavedLineupStore",
    "ReportService", "GameReportExporter", "Schedule", "GameHistory",
    "classify_games", "game_history", "game_result", "ServiceFactory",
]
