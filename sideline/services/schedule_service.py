"""Schedule views derived from a team's games."""
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Sequence

from ..models import Game
from ..utils import HOME

RESULT_WIN = "win"
RESULT_LOSS = "loss"
RESULT_DRAW = "draw"


@dataclass
class Schedule:
    """Games split by status, each list in display order."""
    ongoing: List[Game] = field(default_factory=list)
    upcoming: List[Game] = field(default_factory=list)
    previous: List[Game] = field(default_factory=list)


@dataclass
class GameHistory:
    """Distinct season and competition tags, most recent first."""
    seasons: List[str] = field(default_factory=list)
    competitions: List[str] = field(default_factory=list)

    @property
    def most_recent_season(self) -> Optional[str]:
        return self.seasons[0] if self.seasons else None

    @property
    def most_recent_competition(self) -> Optional[str]:
        return self.competitions[0] if self.competitions else None


def is_ongoing(game: Game) -> bool:
    """Running, or paused with time on the clock and not marked finished."""
    if game.is_running:
        return True
    return game.timer_elapsed_seconds > 0 and not game.is_explicitly_finished


def is_not_started(game: Game) -> bool:
    return not game.is_running and game.timer_elapsed_seconds == 0 and not game.is_explicitly_finished


def classify_games(games: Sequence[Game], now: datetime) -> Schedule:
    """
    Split games into ongoing, upcoming and previous.

    Upcoming games are unstarted games scheduled at or after ``now``; an
    unstarted game whose kickoff has passed counts as previous. Ongoing and
    upcoming are sorted soonest first, previous most recent first.

    Args:
        games: Games to classify
        now: Reference instant, naive local time like ``Game.scheduled_at``
    """
    schedule = Schedule()
    for game in games:
        if is_ongoing(game):
            schedule.ongoing.append(game)
        elif is_not_started(game) and game.scheduled_at >= now:
            schedule.upcoming.append(game)
        else:
            schedule.previous.append(game)

    schedule.ongoing.sort(key=lambda g: g.scheduled_at)
    schedule.upcoming.sort(key=lambda g: g.scheduled_at)
    schedule.previous.sort(key=lambda g: g.scheduled_at, reverse=True)
    return schedule


def game_result(game: Game) -> str:
    """Win, loss or draw from the user's team perspective."""
    if game.location == HOME:
        ours, theirs = game.home_score, game.away_score
    else:
        ours, theirs = game.away_score, game.home_score
    if ours > theirs:
        return RESULT_WIN
    if ours < theirs:
        return RESULT_LOSS
    return RESULT_DRAW


def game_history(games: Sequence[Game]) -> GameHistory:
    """Collect distinct season and competition tags, reverse-alphabetical."""
    seasons = {game.season for game in games if game.season}
    competitions = {game.competition for game in games if game.competition}
    return GameHistory(
        seasons=sorted(seasons, reverse=True),
        competitions=sorted(competitions, reverse=True),
    )
