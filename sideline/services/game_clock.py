"""
Game clock for the Sideline Manager application.

The clock is a two-state machine. While stopped, all played time sits in
``timer_elapsed_seconds``. While running, ``timer_start_time`` marks the
start of the current run and the live game time is the accumulated seconds
plus the time since that instant.

Each function takes a game snapshot and returns a new snapshot, or ``None``
when the transition does not apply. The input snapshot is never modified.
"""
import logging
from typing import Optional

from ..models import Game
from ..utils import BENCH, FIELD, TIMER_RUNNING, TIMER_STOPPED, elapsed_seconds, round_half_up
from .playtime import ACCRUING_LOCATIONS, flush_playtime

logger = logging.getLogger(__name__)


def is_fresh(game: Game) -> bool:
    """True when the clock has never run for this game."""
    return (game.timer_elapsed_seconds or 0) == 0 and game.timer_start_time is None


def start_timer(game: Game, now: int) -> Optional[Game]:
    """
    Start or resume the game clock.

    On the first start of a fresh game, every player on the field or bench is
    marked as a starter and field players keep their current position as
    their initial position. Every field player opens a playtime slice.

    Args:
        game: Current snapshot
        now: Current instant in epoch milliseconds

    Returns:
        New snapshot, or None if the game is finished or already running
    """
    if game.is_explicitly_finished:
        logger.debug("Ignoring start for finished game %s", game.id)
        return None
    if game.is_running:
        logger.debug("Ignoring start for running game %s", game.id)
        return None

    fresh = is_fresh(game)
    result = game.copy()
    for entry in result.lineup:
        if fresh:
            entry.is_starter = entry.location in (FIELD, BENCH)
            if entry.location == FIELD:
                entry.initial_position = entry.position
        if entry.on_field:
            entry.playtimer_start_time = now

    result.timer_status = TIMER_RUNNING
    result.timer_start_time = now
    result.is_explicitly_finished = False
    return result


def _reconcile_run(result: Game, now: int) -> None:
    """Close the current run: bank game seconds and flush player slices."""
    run_seconds = max(0.0, elapsed_seconds(result.timer_start_time, now))
    result.timer_elapsed_seconds = round_half_up((result.timer_elapsed_seconds or 0) + run_seconds)
    for entry in result.lineup:
        if entry.location in ACCRUING_LOCATIONS and entry.timer_running:
            flush_playtime(entry, now)
    result.timer_status = TIMER_STOPPED
    result.timer_start_time = None


def stop_timer(game: Game, now: int) -> Optional[Game]:
    """
    Pause the game clock.

    Args:
        game: Current snapshot
        now: Current instant in epoch milliseconds

    Returns:
        New snapshot, or None unless the clock was running
    """
    if not game.is_running or game.timer_start_time is None:
        return None
    result = game.copy()
    _reconcile_run(result, now)
    return result


def finish_game(game: Game, now: int) -> Game:
    """
    Mark the game finished, closing the current run if there is one.

    Finishing twice leaves the clock where the first call put it.
    Every open playtime slice is cleared, whatever the player's location.
    """
    result = game.copy()
    if result.is_running and result.timer_start_time is not None:
        _reconcile_run(result, now)
    for entry in result.lineup:
        entry.playtimer_start_time = None
    result.timer_status = TIMER_STOPPED
    result.timer_start_time = None
    result.is_explicitly_finished = True
    return result
