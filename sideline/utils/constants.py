"""
Constants for the Sideline Manager application.

This module contains configuration constants used throughout the application.
"""

# Application metadata
APP_TITLE = "Sideline Manager"

# Lineup locations
BENCH = "bench"
FIELD = "field"
INACTIVE = "inactive"
LINEUP_LOCATIONS = (BENCH, FIELD, INACTIVE)
PLANNER_LOCATIONS = (BENCH, FIELD)

# Game side of the user's team, also used as event team
HOME = "home"
AWAY = "away"
TEAM_SIDES = (HOME, AWAY)

# Game timer states
TIMER_STOPPED = "stopped"
TIMER_RUNNING = "running"
TIMER_STATUSES = (TIMER_STOPPED, TIMER_RUNNING)

# Game event types
EVENT_GOAL = "goal"
EVENT_SUBSTITUTION = "substitution"
EVENT_TYPES = (EVENT_GOAL, EVENT_SUBSTITUTION)

# Field coordinates are percentages of the pitch
POSITION_MIN = 0.0
POSITION_MAX = 100.0

# Team defaults
DEFAULT_TEAM_NAME = "My Team"

# Web server defaults
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 7122

# Persistence defaults
DEFAULT_DATA_FILE = "sideline_data.json"
DEFAULT_LINEUPS_FILE = "saved_lineups.json"
