"""Lineup models for the Sideline Manager."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..utils import BENCH, FIELD, LINEUP_LOCATIONS
from ..utils.constants import POSITION_MAX, POSITION_MIN


@dataclass(frozen=True)
class FieldPosition:
    """A spot on the pitch as percentage coordinates."""
    x: float  # 0-100, left to right
    y: float  # 0-100, top to bottom

    def clamped(self) -> FieldPosition:
        """Return a copy with both coordinates kept inside the pitch."""
        return FieldPosition(
            x=min(max(float(self.x), POSITION_MIN), POSITION_MAX),
            y=min(max(float(self.y), POSITION_MIN), POSITION_MAX),
        )

    def to_dict(self) -> Dict[str, float]:
        """Convert to dictionary for serialization."""
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional[FieldPosition]:
        """Create from dictionary; ``None`` stays ``None``."""
        if not data:
            return None
        return cls(x=float(data["x"]), y=float(data["y"]))


@dataclass
class PlayerLineupState:
    """
    Placement and playing time of one player within one game.

    Attributes:
        id: Player id this entry refers to
        location: One of bench, field or inactive
        position: Pitch coordinates while on the field
        initial_position: Field position captured at kickoff (starters only)
        playtime_seconds: Accumulated on-field seconds, never decreasing
        playtimer_start_time: Epoch ms when the current on-field slice began
        is_starter: True if on field or bench at kickoff
        subbed_on_count: Number of bench to field moves during play
        subbed_off_count: Number of field to bench moves during play
    """
    id: str
    location: str = BENCH
    position: Optional[FieldPosition] = None
    initial_position: Optional[FieldPosition] = None
    playtime_seconds: int = 0
    playtimer_start_time: Optional[int] = None
    is_starter: bool = False
    subbed_on_count: int = 0
    subbed_off_count: int = 0

    @property
    def on_field(self) -> bool:
        return self.location == FIELD

    @property
    def timer_running(self) -> bool:
        return self.playtimer_start_time is not None

    @classmethod
    def fresh(cls, player_id: str) -> PlayerLineupState:
        """A bench entry with all counters at zero."""
        return cls(id=player_id)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for the persisted lineup blob."""
        return {
            "id": self.id,
            "location": self.location,
            "position": self.position.to_dict() if self.position else None,
            "initial_position": self.initial_position.to_dict() if self.initial_position else None,
            "playtime_seconds": self.playtime_seconds,
            "playtimer_start_time": self.playtimer_start_time,
            "is_starter": self.is_starter,
            "subbed_on_count": self.subbed_on_count,
            "subbed_off_count": self.subbed_off_count,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> PlayerLineupState:
        """Create from a persisted lineup blob entry, tolerating missing keys."""
        location = data.get("location", BENCH)
        if location not in LINEUP_LOCATIONS:
            location = BENCH
        start = data.get("playtimer_start_time")
        return cls(
            id=str(data["id"]),
            location=location,
            position=FieldPosition.from_dict(data.get("position")),
            initial_position=FieldPosition.from_dict(data.get("initial_position")),
            playtime_seconds=int(data.get("playtime_seconds") or 0),
            playtimer_start_time=int(start) if start is not None else None,
            is_starter=bool(data.get("is_starter", False)),
            subbed_on_count=int(data.get("subbed_on_count") or 0),
            subbed_off_count=int(data.get("subbed_off_count") or 0),
        )


@dataclass
class LineupSlot:
    """Placement of a player in the pre-game planning lineup."""
    id: str
    location: str = BENCH
    position: Optional[FieldPosition] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "location": self.location,
            "position": self.position.to_dict() if self.position else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> LineupSlot:
        return cls(
            id=str(data["id"]),
            location=data.get("location", BENCH),
            position=FieldPosition.from_dict(data.get("position")),
        )


@dataclass
class SavedLineup:
    """A named snapshot of the planning lineup."""
    name: str
    players: List[LineupSlot] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "players": [slot.to_dict() for slot in self.players]}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> SavedLineup:
        return cls(
            name=str(data["name"]),
            players=[LineupSlot.from_dict(item) for item in data.get("players", [])],
        )
