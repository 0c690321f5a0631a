"""
Player model for the Sideline Manager application.

A player is a roster record owned by a team. Lineup placement and playing
time live on the per-game ``PlayerLineupState``, never on the player itself.
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class Player:
    """
    Represents a rostered player.

    Attributes:
        id: Unique identifier (uuid string) assigned by the gateway
        team_id: Identifier of the owning team
        first_name: Player's first name (may be empty if last name is set)
        last_name: Player's last name (may be empty if first name is set)
        number: Jersey number as text, or None
        created_at: ISO-8601 creation timestamp from the gateway
    """
    id: str
    team_id: str
    first_name: str = ""
    last_name: str = ""
    number: Optional[str] = None
    created_at: Optional[str] = None

    @property
    def full_name(self) -> str:
        """First and last name joined, ignoring empty parts."""
        return " ".join(part for part in (self.first_name, self.last_name) if part)

    @property
    def display_name(self) -> str:
        """Name prefixed with jersey number when one is set."""
        if self.number:
            return f"#{self.number} {self.full_name}"
        return self.full_name

    def sort_key(self) -> str:
        return (self.first_name or "").lower()

    def to_record(self) -> Dict[str, Any]:
        """Convert to a gateway record."""
        return {
            "id": self.id,
            "team_id": self.team_id,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "number": self.number,
            "created_at": self.created_at,
        }

    @classmethod
    def from_record(cls, data: Dict[str, Any]) -> "Player":
        """Create from a gateway record."""
        return cls(
            id=str(data["id"]),
            team_id=str(data.get("team_id", "")),
            first_name=data.get("first_name") or "",
            last_name=data.get("last_name") or "",
            number=data.get("number") or None,
            created_at=data.get("created_at"),
        )
