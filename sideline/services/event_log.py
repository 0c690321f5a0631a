"""
Event log and scoring for the Sideline Manager.

The score of each side always equals the number of goal events for it, so
every score change goes through a matching change to the log.
"""
import logging
from typing import Optional, Sequence

from ..models import Game, GameEvent, Player
from ..utils import AWAY, HOME, TEAM_SIDES, TIMER_STOPPED
from .errors import GameValidationError
from .lineup_service import create_default_lineup
from .playtime import current_game_seconds

logger = logging.getLogger(__name__)


def _check_team(team: str) -> None:
    if team not in TEAM_SIDES:
        raise GameValidationError([f"Team must be one of {', '.join(TEAM_SIDES)}, got {team!r}"])


def add_goal(
    game: Game,
    team: str,
    scorer_player_id: Optional[str] = None,
    assist_player_id: Optional[str] = None,
    *,
    now: int,
) -> Game:
    """
    Record a goal for ``team`` and bump its score by one.

    Args:
        game: Current snapshot
        team: ``home`` or ``away``
        scorer_player_id: Scorer, when known
        assist_player_id: Assisting player, when known
        now: Current instant in epoch milliseconds

    Returns:
        New snapshot
    """
    _check_team(team)
    result = game.copy()
    result.events.append(
        GameEvent.goal(team, now, current_game_seconds(result, now), scorer_player_id, assist_player_id)
    )
    if team == HOME:
        result.home_score = (result.home_score or 0) + 1
    else:
        result.away_score = (result.away_score or 0) + 1
    return result


def remove_last_goal(game: Game, team: str) -> Optional[Game]:
    """
    Remove the most recent goal event for ``team`` and take one off its score.

    Returns:
        New snapshot, or None when ``team`` has no goal to remove
    """
    _check_team(team)
    for index in range(len(game.events) - 1, -1, -1):
        event = game.events[index]
        if event.is_goal and event.team == team:
            break
    else:
        logger.warning("No goal event found for team %s in game %s to remove", team, game.id)
        return None

    result = game.copy()
    del result.events[index]
    if team == HOME:
        result.home_score = max(0, (result.home_score or 0) - 1)
    elif team == AWAY:
        result.away_score = max(0, (result.away_score or 0) - 1)
    return result


def reset_lineup(game: Game, roster: Sequence[Player]) -> Game:
    """
    Wipe all live state of a game.

    The lineup is rebuilt bench-only from the current roster, events and
    scores are cleared, and the clock goes back to stopped at zero.
    """
    result = game.copy()
    result.lineup = create_default_lineup(roster)
    result.events = []
    result.home_score = 0
    result.away_score = 0
    result.timer_status = TIMER_STOPPED
    result.timer_start_time = None
    result.timer_elapsed_seconds = 0
    result.is_explicitly_finished = False
    return result


def score_matches_events(game: Game) -> bool:
    """True if both scores equal the goal-event counts."""
    home = sum(1 for event in game.events if event.is_goal and event.team == HOME)
    away = sum(1 for event in game.events if event.is_goal and event.team == AWAY)
    return game.home_score == home and game.away_score == away
