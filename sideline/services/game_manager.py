"""
Game manager for the Sideline Manager application.

The manager is the single entry point the UI calls. Each operation follows the
same two steps:

1. compute the next snapshot from the last committed one with the pure
   clock, lineup and event log functions;
2. write it through the gateway and, only if the write succeeds, adopt the
   gateway's returned record as the new committed snapshot.

Operations return an ``OperationResult`` rather than raising, so a failed
write or a stale reference never escapes to the caller as an exception.
"""
import logging
from dataclasses import dataclass, field
from datetime import date, time
from typing import Any, Callable, Dict, List, Optional

from ..models import FieldPosition, Game, Player, Team
from ..utils import HOME, now_ms
from . import event_log, game_clock
from .errors import GatewayError, SessionError, ValidationError
from .lineup_service import create_default_lineup, move_player_in_game, remove_player_from_game
from .persistence_service import GameGateway
from .session import TeamSession
from .validation import (
    MAX_NAME_LENGTH, clean_optional, ensure_text_fields, ensure_valid_game, ensure_valid_player
)

logger = logging.getLogger(__name__)

FAILURE_GATEWAY = "gateway"
FAILURE_INVALID = "invalid"
FAILURE_UNAUTHENTICATED = "unauthenticated"

CLOCK_FIELDS = ("timer_status", "timer_start_time", "timer_elapsed_seconds", "is_explicitly_finished", "lineup")
MOVE_FIELDS = ("lineup", "events")
SCORE_FIELDS = ("events", "home_score", "away_score")
RESET_FIELDS = CLOCK_FIELDS + SCORE_FIELDS
DETAIL_FIELDS = ("opponent", "game_date", "game_time", "location", "season", "competition")

Compute = Callable[[Game, int], Optional[Game]]


@dataclass
class OperationResult:
    """
    Outcome of one manager operation.

    Attributes:
        ok: False only when the operation was rejected or the write failed
        snapshot: Committed game, player or team after the operation
        error: Failure reason for the caller to show
        kind: Failure category (gateway, invalid, unauthenticated)
        changed: True when a new snapshot was committed
        unsynced_game_ids: Games a follow-up write could not update
    """
    ok: bool
    snapshot: Any = None
    error: Optional[str] = None
    kind: Optional[str] = None
    changed: bool = False
    unsynced_game_ids: List[str] = field(default_factory=list)

    @classmethod
    def success(cls, snapshot: Any) -> "OperationResult":
        return cls(ok=True, snapshot=snapshot, changed=True)

    @classmethod
    def unchanged(cls, snapshot: Any = None) -> "OperationResult":
        return cls(ok=True, snapshot=snapshot, changed=False)

    @classmethod
    def failure(cls, error: str, kind: str) -> "OperationResult":
        return cls(ok=False, error=error, kind=kind)


def _sort_games(games: List[Game]) -> List[Game]:
    """Newest date first; within a date, latest kickoff first and unknown times last."""
    return sorted(games, key=lambda g: (g.game_date, g.game_time or time.min), reverse=True)


class GameManager:
    """
    Coordinates roster, schedule and live-game operations for one team.

    Holds the last committed snapshot of every game and the roster; these are
    only replaced by what the gateway returns after a successful write.
    """

    def __init__(self, session: TeamSession, gateway: GameGateway):
        self.session = session
        self.gateway = gateway
        self._players: List[Player] = []
        self._games: Dict[str, Game] = {}

    # ------------------------------------------------------------------
    # State access
    # ------------------------------------------------------------------
    @property
    def team(self) -> Team:
        return self.session.team

    @property
    def players(self) -> List[Player]:
        return list(self._players)

    @property
    def games(self) -> List[Game]:
        return _sort_games(list(self._games.values()))

    def get_game(self, game_id: str) -> Optional[Game]:
        return self._games.get(game_id)

    def get_player(self, player_id: str) -> Optional[Player]:
        return next((p for p in self._players if p.id == player_id), None)

    def load(self) -> OperationResult:
        """Fetch the roster and games of the signed-in team."""
        denied = self._check_session()
        if denied:
            return denied
        try:
            roster = self.gateway.fetch_roster(self.team.id)
            games = self.gateway.fetch_games(self.team.id)
        except GatewayError as exc:
            logger.error("Error loading team %s: %s", self.team.id, exc)
            return OperationResult.failure(str(exc), FAILURE_GATEWAY)
        self._set_players([Player.from_record(record) for record in roster])
        self._games = {record["id"]: Game.from_record(record) for record in games}
        logger.info("Loaded %d players and %d games for team %s", len(self._players), len(self._games), self.team.id)
        return OperationResult.unchanged(self.team)

    # ------------------------------------------------------------------
    # Live game operations
    # ------------------------------------------------------------------
    def start_game_timer(self, game_id: str) -> OperationResult:
        return self._apply(game_id, "starting game timer", game_clock.start_timer, CLOCK_FIELDS)

    def stop_game_timer(self, game_id: str) -> OperationResult:
        return self._apply(game_id, "stopping game timer", game_clock.stop_timer, CLOCK_FIELDS)

    def mark_game_finished(self, game_id: str) -> OperationResult:
        return self._apply(game_id, "marking game as finished", game_clock.finish_game, CLOCK_FIELDS)

    def reset_game_lineup(self, game_id: str) -> OperationResult:
        roster = self.players
        return self._apply(
            game_id,
            "resetting game lineup",
            lambda game, now: event_log.reset_lineup(game, roster),
            RESET_FIELDS,
        )

    def move_player_in_game(
        self,
        game_id: str,
        player_id: str,
        source_location: str,
        target_location: str,
        new_position: Optional[FieldPosition] = None,
    ) -> OperationResult:
        return self._apply(
            game_id,
            "moving player in game",
            lambda game, now: move_player_in_game(
                game, player_id, source_location, target_location, new_position, now=now
            ),
            MOVE_FIELDS,
        )

    def add_goal(
        self,
        game_id: str,
        team: str,
        scorer_player_id: Optional[str] = None,
        assist_player_id: Optional[str] = None,
    ) -> OperationResult:
        return self._apply(
            game_id,
            "adding game event",
            lambda game, now: event_log.add_goal(game, team, scorer_player_id, assist_player_id, now=now),
            SCORE_FIELDS,
        )

    def remove_last_goal(self, game_id: str, team: str) -> OperationResult:
        return self._apply(
            game_id,
            "removing last game event",
            lambda game, now: event_log.remove_last_goal(game, team),
            SCORE_FIELDS,
        )

    # ------------------------------------------------------------------
    # Game CRUD
    # ------------------------------------------------------------------
    def add_game(
        self,
        opponent: str,
        game_date: date,
        game_time: Optional[time] = None,
        location: str = HOME,
        season: Optional[str] = None,
        competition: Optional[str] = None,
    ) -> OperationResult:
        """Schedule a game with a bench-only lineup of the current roster."""
        denied = self._check_session()
        if denied:
            return denied
        try:
            ensure_valid_game(opponent, game_date, location, game_time, season, competition)
        except ValidationError as exc:
            return OperationResult.failure(str(exc), FAILURE_INVALID)

        draft = Game(
            id="",
            team_id=self.team.id,
            opponent=opponent.strip(),
            game_date=game_date,
            game_time=game_time,
            location=location,
            season=clean_optional(season),
            competition=clean_optional(competition),
            lineup=create_default_lineup(self._players),
        )
        record = draft.to_record()
        for key in ("id", "created_at", "updated_at"):
            record.pop(key)
        try:
            saved = self.gateway.insert_game(record)
        except GatewayError as exc:
            logger.error("Error adding game: %s", exc)
            return OperationResult.failure(str(exc), FAILURE_GATEWAY)
        game = Game.from_record(saved)
        self._games[game.id] = game
        logger.info("Scheduled game %s against %s", game.id, game.opponent)
        return OperationResult.success(game)

    def update_game(self, game_id: str, **changes: Any) -> OperationResult:
        """
        Edit scheduling details of a game.

        Only opponent, date, time, location, season and competition may be
        changed here; live state changes through the dedicated operations.
        """
        denied = self._check_session()
        if denied:
            return denied
        unknown = sorted(set(changes) - set(DETAIL_FIELDS))
        if unknown:
            return OperationResult.failure(f"Cannot update fields: {', '.join(unknown)}", FAILURE_INVALID)
        game = self._games.get(game_id)
        if game is None:
            logger.warning("Cannot update game %s: not found", game_id)
            return OperationResult.unchanged()

        try:
            ensure_text_fields(**{k: v for k, v in changes.items() if k in ("opponent", "season", "competition")})
        except ValidationError as exc:
            return OperationResult.failure(str(exc), FAILURE_INVALID)

        updated = game.copy()
        for key, value in changes.items():
            if key in ("season", "competition"):
                value = clean_optional(value)
            elif key == "opponent":
                value = (value or "").strip()
            setattr(updated, key, value)
        try:
            ensure_valid_game(
                updated.opponent, updated.game_date, updated.location, updated.game_time, updated.season, updated.competition
            )
        except ValidationError as exc:
            return OperationResult.failure(str(exc), FAILURE_INVALID)
        return self._commit(game_id, updated, tuple(changes), "updating game")

    def delete_game(self, game_id: str) -> OperationResult:
        """Delete a game together with its lineup and events."""
        denied = self._check_session()
        if denied:
            return denied
        if game_id not in self._games:
            logger.warning("Cannot delete game %s: not found", game_id)
            return OperationResult.unchanged()
        try:
            self.gateway.delete_game(game_id)
        except GatewayError as exc:
            logger.error("Error deleting game %s: %s", game_id, exc)
            return OperationResult.failure(str(exc), FAILURE_GATEWAY)
        removed = self._games.pop(game_id)
        return OperationResult.success(removed)

    # ------------------------------------------------------------------
    # Roster CRUD
    # ------------------------------------------------------------------
    def add_player(self, first_name: str, last_name: str = "", number: Optional[str] = None) -> OperationResult:
        denied = self._check_session()
        if denied:
            return denied
        try:
            ensure_valid_player(first_name, last_name, number)
        except ValidationError as exc:
            return OperationResult.failure(str(exc), FAILURE_INVALID)
        record = {
            "team_id": self.team.id,
            "first_name": (first_name or "").strip(),
            "last_name": (last_name or "").strip(),
            "number": clean_optional(number),
        }
        try:
            saved = self.gateway.insert_player(record)
        except GatewayError as exc:
            logger.error("Error adding player: %s", exc)
            return OperationResult.failure(str(exc), FAILURE_GATEWAY)
        player = Player.from_record(saved)
        self._set_players(self._players + [player])
        return OperationResult.success(player)

    def update_player(
        self,
        player_id: str,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        number: Optional[str] = None,
    ) -> OperationResult:
        """Edit a player's name or number. ``None`` leaves a field as is; a blank number clears it."""
        denied = self._check_session()
        if denied:
            return denied
        player = self.get_player(player_id)
        if player is None:
            logger.warning("Cannot update player %s: not found", player_id)
            return OperationResult.unchanged()

        try:
            ensure_text_fields(first_name=first_name, last_name=last_name, number=number)
        except ValidationError as exc:
            return OperationResult.failure(str(exc), FAILURE_INVALID)

        fields: Dict[str, Any] = {}
        if first_name is not None:
            fields["first_name"] = first_name.strip()
        if last_name is not None:
            fields["last_name"] = last_name.strip()
        if number is not None:
            fields["number"] = clean_optional(number)
        try:
            ensure_valid_player(
                fields.get("first_name", player.first_name),
                fields.get("last_name", player.last_name),
                fields.get("number", player.number),
            )
        except ValidationError as exc:
            return OperationResult.failure(str(exc), FAILURE_INVALID)
        if not fields:
            return OperationResult.unchanged(player)
        try:
            saved = self.gateway.update_player(player_id, fields)
        except GatewayError as exc:
            logger.error("Error updating player %s: %s", player_id, exc)
            return OperationResult.failure(str(exc), FAILURE_GATEWAY)
        updated = Player.from_record(saved)
        self._set_players([updated if p.id == player_id else p for p in self._players])
        return OperationResult.success(updated)

    def delete_player(self, player_id: str) -> OperationResult:
        """
        Delete a player and drop them from every game.

        Lineup entries are pruned and event references nulled so the event
        log keeps its length and order. A game whose cleanup write fails keeps
        its previous snapshot and is listed in ``unsynced_game_ids``; the stale
        reference is harmless because moves of unknown players are ignored.
        """
        denied = self._check_session()
        if denied:
            return denied
        player = self.get_player(player_id)
        if player is None:
            logger.warning("Cannot delete player %s: not found", player_id)
            return OperationResult.unchanged()
        try:
            self.gateway.delete_player(player_id)
        except GatewayError as exc:
            logger.error("Error deleting player %s: %s", player_id, exc)
            return OperationResult.failure(str(exc), FAILURE_GATEWAY)
        self._set_players([p for p in self._players if p.id != player_id])

        result = OperationResult.success(player)
        for game_id, game in list(self._games.items()):
            cleaned = remove_player_from_game(game, player_id)
            if cleaned is None:
                continue
            if not self._commit(game_id, cleaned, MOVE_FIELDS, "removing deleted player from game").ok:
                result.unsynced_game_ids.append(game_id)
        if result.unsynced_game_ids:
            logger.warning(
                "Player %s deleted but games %s still reference them", player_id, ", ".join(result.unsynced_game_ids)
            )
        return result

    # ------------------------------------------------------------------
    # Team
    # ------------------------------------------------------------------
    def rename_team(self, name: str) -> OperationResult:
        if name is not None and not isinstance(name, str):
            return OperationResult.failure("Team name must be text", FAILURE_INVALID)
        clean_name = (name or "").strip()
        if not clean_name or len(clean_name) > MAX_NAME_LENGTH:
            return OperationResult.failure(f"Team name must be 1 to {MAX_NAME_LENGTH} characters", FAILURE_INVALID)
        return self._update_team({"name": clean_name})

    def set_team_logo(self, logo_url: Optional[str]) -> OperationResult:
        if logo_url is not None and not isinstance(logo_url, str):
            return OperationResult.failure("Logo url must be text", FAILURE_INVALID)
        return self._update_team({"logo_url": clean_optional(logo_url)})

    def _update_team(self, fields: Dict[str, Any]) -> OperationResult:
        denied = self._check_session()
        if denied:
            return denied
        try:
            saved = self.gateway.update_team(self.team.id, fields)
        except GatewayError as exc:
            logger.error("Error updating team %s: %s", self.team.id, exc)
            return OperationResult.failure(str(exc), FAILURE_GATEWAY)
        self.session.team = Team.from_record(saved)
        return OperationResult.success(self.session.team)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _check_session(self) -> Optional[OperationResult]:
        try:
            self.session.require_active()
        except SessionError as exc:
            return OperationResult.failure(str(exc), FAILURE_UNAUTHENTICATED)
        return None

    def _set_players(self, players: List[Player]) -> None:
        self._players = sorted(players, key=Player.sort_key)

    def _current_game(self, game_id: str) -> Optional[Game]:
        game = self._games.get(game_id)
        if game is not None:
            return game
        record = self.gateway.fetch_game(game_id)
        if record is None or record.get("team_id") != self.team.id:
            return None
        game = Game.from_record(record)
        self._games[game_id] = game
        return game

    def _apply(self, game_id: str, action: str, compute: Compute, fields) -> OperationResult:
        denied = self._check_session()
        if denied:
            return denied
        try:
            game = self._current_game(game_id)
        except GatewayError as exc:
            logger.error("Error %s for game %s: %s", action, game_id, exc)
            return OperationResult.failure(str(exc), FAILURE_GATEWAY)
        if game is None:
            logger.warning("Ignoring %s: game %s not found", action, game_id)
            return OperationResult.unchanged()

        try:
            next_game = compute(game, now_ms())
        except ValidationError as exc:
            return OperationResult.failure(str(exc), FAILURE_INVALID)
        if next_game is None:
            return OperationResult.unchanged(game)
        return self._commit(game_id, next_game, fields, action)

    def _commit(self, game_id: str, next_game: Game, fields, action: str) -> OperationResult:
        try:
            record = self.gateway.save_game(game_id, next_game.to_record(fields))
        except GatewayError as exc:
            logger.error("Error %s for game %s: %s", action, game_id, exc)
            return OperationResult.failure(str(exc), FAILURE_GATEWAY)
        committed = Game.from_record(record)
        self._games[game_id] = committed
        logger.debug("Committed %s for game %s", action, game_id)
        return OperationResult.success(committed)
