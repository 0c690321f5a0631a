"""Team model for the Sideline Manager."""
from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..utils import DEFAULT_TEAM_NAME


@dataclass
class Team:
    """A user's team. Each signed-in user owns exactly one."""
    id: str
    user_id: str
    name: str = DEFAULT_TEAM_NAME
    logo_url: Optional[str] = None
    created_at: Optional[str] = None

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "name": self.name,
            "logo_url": self.logo_url,
            "created_at": self.created_at,
        }

    @classmethod
    def from_record(cls, data: Dict[str, Any]) -> "Team":
        return cls(
            id=str(data["id"]),
            user_id=str(data["user_id"]),
            name=data.get("name") or DEFAULT_TEAM_NAME,
            logo_url=data.get("logo_url"),
            created_at=data.get("created_at"),
        )
