"""
Sideline Manager

Track a youth soccer team's games from the sideline: roster, schedule, the
live game clock, substitutions with per-player playing time, and goals.

The game engine lives in :mod:`sideline.services`; :mod:`sideline.ui`
exposes it as a Flask JSON API.
"""
from .models import Player, Team, Game, GameEvent, PlayerLineupState, FieldPosition
from .services import GameManager, TeamSession, InMemoryGateway, JsonFileGateway, ServiceFactory
from .ui import create_app, run_web_app
from .utils import fmt_mmss, now_ms, APP_TITLE

__version__ = "1.0.0"

__all__ = [
    "Player", "Team", "Game", "GameEvent", "PlayerLineupState", "FieldPosition",
    "GameManager", "TeamSession", "InMemoryGateway", "JsonFileGateway", "ServiceFactory",
    "create_app", "run_web_app", "fmt_mmss", "now_ms", "APP_TITLE",
]
