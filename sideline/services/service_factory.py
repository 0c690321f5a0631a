"""
Service factory for the Sideline Manager.

Builds the gateway, session-bound game manager, lineup planner and report
service from an :class:`AppConfig`, so entry points and tests wire the same
objects the same way.
"""
import logging
from typing import Optional

from ..utils import AppConfig
from .errors import SessionError
from .game_manager import GameManager
from .lineup_service import LineupPlanner, SavedLineupStore
from .persistence_service import GameGateway, JsonFileGateway
from .report_service import ExportServiceInterface, GameReportExporter, ReportService
from .session import TeamSession

logger = logging.getLogger(__name__)


class ServiceFactory:
    """
    Factory for creating service instances with their dependencies injected.

    The gateway and export service are created once and shared by every
    service the factory hands out.
    """

    def __init__(self, config: Optional[AppConfig] = None, gateway: Optional[GameGateway] = None):
        self.config = config or AppConfig()
        self._gateway = gateway
        self._export_service: Optional[ExportServiceInterface] = None

    @property
    def gateway(self) -> GameGateway:
        """Shared gateway; a JSON file gateway on ``config.data_file`` unless one was injected."""
        if self._gateway is None:
            self._gateway = JsonFileGateway(self.config.data_file)
        return self._gateway

    def open_session(self, user_id: str, team_name: Optional[str] = None) -> TeamSession:
        """
        Sign ``user_id`` in, creating their team on first use.

        Args:
            user_id: Identity of the coach
            team_name: Name for a newly created team

        Returns:
            Active session for the user's team
        """
        try:
            return TeamSession.sign_in(self.gateway, user_id)
        except SessionError:
            logger.info("No team for user %s yet, creating one", user_id)
            return TeamSession.sign_up(self.gateway, user_id, team_name)

    def create_game_manager(self, session: TeamSession) -> GameManager:
        """Create a manager for ``session`` and load its roster and games."""
        manager = GameManager(session, self.gateway)
        result = manager.load()
        if not result.ok:
            logger.warning("Starting with empty state: %s", result.error)
        return manager

    def create_lineup_planner(self, manager: GameManager) -> LineupPlanner:
        store = SavedLineupStore(self.config.lineups_file)
        return LineupPlanner(manager.players, store=store)

    def create_report_service(self) -> ReportService:
        return ReportService(export_service=self._get_export_service())

    def configure_custom_export_service(self, exporter: ExportServiceInterface) -> None:
        self._export_service = exporter

    def _get_export_service(self) -> ExportServiceInterface:
        if self._export_service is None:
            self._export_service = GameReportExporter()
        return self._export_service
