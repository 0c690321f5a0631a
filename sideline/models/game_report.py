"""Dataclasses representing per-game playtime reports."""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class PlayerTimeSummary:
    """Raw counters for a single player in one game."""

    player_id: str
    name: str
    number: Optional[str]
    location: str
    is_starter: bool
    playtime_seconds: int
    subbed_on_count: int
    subbed_off_count: int
    goals: int = 0
    assists: int = 0


@dataclass
class GameReport:
    """Snapshot of a game's clock, score and per-player counters."""

    game_id: str
    generated_ms: int
    elapsed_seconds: int
    home_score: int
    away_score: int
    substitution_count: int
    players: List[PlayerTimeSummary] = field(default_factory=list)
    total_playtime_seconds: int = 0
