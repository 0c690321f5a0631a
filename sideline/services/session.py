"""
Signed-in session for the Sideline Manager.

A ``TeamSession`` is created when a user signs in and closed at sign-out.
It is handed explicitly to whatever needs the current user and team.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from ..models import Team
from ..utils import DEFAULT_TEAM_NAME
from .errors import SessionError
from .persistence_service import GameGateway

logger = logging.getLogger(__name__)


@dataclass
class TeamSession:
    """The signed-in user and the team they manage."""
    user_id: str
    team: Team
    active: bool = True

    @property
    def team_id(self) -> str:
        return self.team.id

    @classmethod
    def sign_in(cls, gateway: GameGateway, user_id: str) -> "TeamSession":
        """
        Open a session for ``user_id``.

        Raises:
            SessionError: If the user has no team
            GatewayError: If the team cannot be read
        """
        record = gateway.fetch_team(user_id)
        if record is None:
            raise SessionError(f"No team found for user {user_id}")
        logger.info("User %s signed in", user_id)
        return cls(user_id=user_id, team=Team.from_record(record))

    @classmethod
    def sign_up(cls, gateway: GameGateway, user_id: str, team_name: Optional[str] = None) -> "TeamSession":
        """Create the user's team and open a session for it."""
        name = (team_name or "").strip() or DEFAULT_TEAM_NAME
        record = gateway.insert_team({"user_id": user_id, "name": name, "logo_url": None})
        logger.info("Created team %s for user %s", record["id"], user_id)
        return cls(user_id=user_id, team=Team.from_record(record))

    def require_active(self) -> None:
        if not self.active:
            raise SessionError("Not signed in")

    def sign_out(self) -> None:
        self.active = False
        logger.info("User %s signed out", self.user_id)

