"""
Game model for the Sideline Manager application.

This module contains the Game dataclass, the snapshot every engine operation
reads and replaces. It also owns the mapping between the in-engine shape
(epoch milliseconds, typed lineup and events) and the gateway record shape
(ISO-8601 text, JSON-compatible blobs).
"""
import copy
from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import Any, Dict, Iterable, List, Optional

from .game_event import GameEvent
from .lineup import PlayerLineupState
from ..utils import AWAY, HOME, TIMER_RUNNING, TIMER_STOPPED, iso_to_ms, ms_to_iso


@dataclass
class Game:
    """
    Represents one scheduled or played game of the user's team.

    Attributes:
        id: Unique identifier assigned by the gateway
        team_id: Owning team
        opponent: Opponent name
        game_date: Scheduled date
        game_time: Scheduled kickoff time, if known
        location: ``home`` or ``away`` from the user's team perspective
        season: Optional season tag (e.g. "Fall 2024")
        competition: Optional competition tag
        home_score: Goals for the home side
        away_score: Goals for the away side
        timer_status: ``stopped`` or ``running``
        timer_start_time: Epoch ms when the current run began (running only)
        timer_elapsed_seconds: Seconds accumulated before the current run
        is_explicitly_finished: Set when the coach marks the game finished
        lineup: One entry per player, in insertion order
        events: Goals and substitutions, in append order
    """
    id: str
    team_id: str
    opponent: str
    game_date: date
    game_time: Optional[time] = None
    location: str = HOME
    season: Optional[str] = None
    competition: Optional[str] = None
    home_score: int = 0
    away_score: int = 0
    timer_status: str = TIMER_STOPPED
    timer_start_time: Optional[int] = None
    timer_elapsed_seconds: int = 0
    is_explicitly_finished: bool = False
    lineup: List[PlayerLineupState] = field(default_factory=list)
    events: List[GameEvent] = field(default_factory=list)
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @property
    def is_running(self) -> bool:
        return self.timer_status == TIMER_RUNNING

    @property
    def scheduled_at(self) -> datetime:
        """Scheduled kickoff as a naive datetime (midnight when no time is set)."""
        return datetime.combine(self.game_date, self.game_time or time(0, 0))

    @property
    def team_side(self) -> str:
        """Event team for the user's own side."""
        return HOME if self.location == HOME else AWAY

    def copy(self) -> "Game":
        """Deep copy used as the starting point of every new snapshot."""
        return copy.deepcopy(self)

    def find_entry(self, player_id: str) -> Optional[PlayerLineupState]:
        for entry in self.lineup:
            if entry.id == player_id:
                return entry
        return None

    def to_record(self, fields: Optional[Iterable[str]] = None) -> Dict[str, Any]:
        """
        Convert to a gateway record.

        Args:
            fields: Restrict the record to these keys (default: all)

        Returns:
            JSON-compatible dictionary with instants as ISO-8601 text
        """
        record = {
            "id": self.id,
            "team_id": self.team_id,
            "opponent": self.opponent,
            "game_date": self.game_date.isoformat(),
            "game_time": self.game_time.isoformat() if self.game_time else None,
            "location": self.location,
            "season": self.season,
            "competition": self.competition,
            "home_score": self.home_score,
            "away_score": self.away_score,
            "timer_status": self.timer_status,
            "timer_start_time": ms_to_iso(self.timer_start_time),
            "timer_elapsed_seconds": self.timer_elapsed_seconds,
            "is_explicitly_finished": self.is_explicitly_finished,
            "lineup": [entry.to_dict() for entry in self.lineup],
            "events": [event.to_dict() for event in self.events],
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }
        if fields is None:
            return record
        return {key: record[key] for key in fields}

    @classmethod
    def from_record(cls, data: Dict[str, Any]) -> "Game":
        """
        Create from a gateway record, filling defaults for missing columns.

        Args:
            data: Record as returned by the gateway

        Returns:
            New Game instance
        """
        game_time = data.get("game_time")
        status = TIMER_RUNNING if data.get("timer_status") == TIMER_RUNNING else TIMER_STOPPED
        return cls(
            id=str(data["id"]),
            team_id=str(data.get("team_id", "")),
            opponent=data.get("opponent") or "",
            game_date=date.fromisoformat(data["game_date"]),
            game_time=time.fromisoformat(game_time) if game_time else None,
            location=HOME if data.get("location", HOME) == HOME else AWAY,
            season=data.get("season") or None,
            competition=data.get("competition") or None,
            home_score=int(data.get("home_score") or 0),
            away_score=int(data.get("away_score") or 0),
            timer_status=status,
            timer_start_time=iso_to_ms(data.get("timer_start_time")),
            timer_elapsed_seconds=int(data.get("timer_elapsed_seconds") or 0),
            is_explicitly_finished=bool(data.get("is_explicitly_finished") or False),
            lineup=[PlayerLineupState.from_dict(item) for item in data.get("lineup") or []],
            events=[GameEvent.from_dict(item) for item in data.get("events") or []],
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
        )
