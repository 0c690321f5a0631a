"""
Utilities package for the Sideline Manager.

This package contains utility functions and constants used throughout the application.
"""
from .time_utils import fmt_mmss, now_ms, round_half_up, elapsed_seconds, ms_to_iso, iso_to_ms
from .constants import (
    APP_TITLE, BENCH, FIELD, INACTIVE, LINEUP_LOCATIONS, PLANNER_LOCATIONS,
    HOME, AWAY, TEAM_SIDES, TIMER_STOPPED, TIMER_RUNNING, TIMER_STATUSES,
    EVENT_GOAL, EVENT_SUBSTITUTION, EVENT_TYPES, DEFAULT_TEAM_NAME
)
from .config import AppConfig, configure_logging

__all__ = [
    "fmt_mmss", "now_ms", "round_half_up", "elapsed_seconds", "ms_to_iso", "iso_to_ms",
    "APP_TITLE", "BENCH", "FIELD", "INACTIVE", "LINEUP_LOCATIONS", "PLANNER_LOCATIONS",
    "HOME", "AWAY", "TEAM_SIDES", "TIMER_STOPPED", "TIMER_RUNNING", "TIMER_STATUSES",
    "EVENT_GOAL", "EVENT_SUBSTITUTION", "EVENT_TYPES", "DEFAULT_TEAM_NAME",
    "AppConfig", "configure_logging",
]
