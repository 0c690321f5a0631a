"""Game event model: goals and substitutions recorded during play."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from ..utils import EVENT_GOAL, EVENT_SUBSTITUTION


def _new_event_id() -> str:
    return str(uuid.uuid4())


@dataclass(frozen=True)
class GameEvent:
    """
    One entry in a game's append-only event log.

    Goal events may name a scorer and an assist. Substitution events name
    exactly one of ``player_in_id`` or ``player_out_id``.

    Attributes:
        type: ``goal`` or ``substitution``
        team: ``home`` or ``away``
        timestamp: Wall-clock creation time in epoch milliseconds
        game_seconds: Game clock seconds at creation, rounded
    """
    type: str
    team: str
    timestamp: int
    game_seconds: int
    scorer_player_id: Optional[str] = None
    assist_player_id: Optional[str] = None
    player_in_id: Optional[str] = None
    player_out_id: Optional[str] = None
    id: str = field(default_factory=_new_event_id)

    @classmethod
    def goal(
        cls,
        team: str,
        timestamp: int,
        game_seconds: int,
        scorer_player_id: Optional[str] = None,
        assist_player_id: Optional[str] = None,
    ) -> GameEvent:
        return cls(
            type=EVENT_GOAL,
            team=team,
            timestamp=timestamp,
            game_seconds=game_seconds,
            scorer_player_id=scorer_player_id,
            assist_player_id=assist_player_id,
        )

    @classmethod
    def substitution(
        cls,
        team: str,
        timestamp: int,
        game_seconds: int,
        *,
        player_in_id: Optional[str] = None,
        player_out_id: Optional[str] = None,
    ) -> GameEvent:
        if (player_in_id is None) == (player_out_id is None):
            raise ValueError("A substitution names exactly one of player_in_id or player_out_id")
        return cls(
            type=EVENT_SUBSTITUTION,
            team=team,
            timestamp=timestamp,
            game_seconds=game_seconds,
            player_in_id=player_in_id,
            player_out_id=player_out_id,
        )

    @property
    def is_goal(self) -> bool:
        return self.type == EVENT_GOAL

    def references(self, player_id: str) -> bool:
        """True if any player field of this event points at ``player_id``."""
        return player_id in (
            self.scorer_player_id,
            self.assist_player_id,
            self.player_in_id,
            self.player_out_id,
        )

    def without_player(self, player_id: str) -> GameEvent:
        """Copy of the event with every reference to ``player_id`` nulled."""

        def _keep(value: Optional[str]) -> Optional[str]:
            return None if value == player_id else value

        return GameEvent(
            type=self.type,
            team=self.team,
            timestamp=self.timestamp,
            game_seconds=self.game_seconds,
            scorer_player_id=_keep(self.scorer_player_id),
            assist_player_id=_keep(self.assist_player_id),
            player_in_id=_keep(self.player_in_id),
            player_out_id=_keep(self.player_out_id),
            id=self.id,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for the persisted events blob."""
        return {
            "id": self.id,
            "type": self.type,
            "team": self.team,
            "scorer_player_id": self.scorer_player_id,
            "assist_player_id": self.assist_player_id,
            "player_in_id": self.player_in_id,
            "player_out_id": self.player_out_id,
            "timestamp": self.timestamp,
            "game_seconds": self.game_seconds,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> GameEvent:
        """Create from a persisted events blob entry."""
        return cls(
            id=str(data.get("id") or _new_event_id()),
            type=data["type"],
            team=data["team"],
            timestamp=int(data.get("timestamp") or 0),
            game_seconds=int(data.get("game_seconds") or 0),
            scorer_player_id=data.get("scorer_player_id"),
            assist_player_id=data.get("assist_player_id"),
            player_in_id=data.get("player_in_id"),
            player_out_id=data.get("player_out_id"),
        )
