"""
Playtime ledger for the Sideline Manager.

A player's ``playtime_seconds`` is the total time spent on the field while the
game clock was running. It is accrued in slices: a slice opens when the player
is on the field and the clock runs (``playtimer_start_time`` is set) and is
folded into ``playtime_seconds`` when the clock stops or the player leaves the
field. Every slice is rounded on its own, so player totals may drift a few
seconds from the game total over a long game.

All helpers here take the current instant explicitly so callers decide what
"now" means for a whole operation.
"""
from ..models import Game, PlayerLineupState
from ..utils import FIELD, INACTIVE, TIMER_STOPPED, elapsed_seconds, round_half_up

# Locations whose running slice must be flushed when the clock stops
ACCRUING_LOCATIONS = (FIELD, INACTIVE)


def flush_playtime(entry: PlayerLineupState, now: int) -> None:
    """
    Fold the running slice of ``entry`` into its playtime and close it.

    Does nothing when no slice is open.

    Args:
        entry: Lineup entry to update in place
        now: Current instant in epoch milliseconds
    """
    if entry.playtimer_start_time is None:
        return
    slice_seconds = max(0.0, elapsed_seconds(entry.playtimer_start_time, now))
    entry.playtime_seconds = round_half_up(entry.playtime_seconds + slice_seconds)
    entry.playtimer_start_time = None


def start_playtimer(entry: PlayerLineupState, now: int) -> None:
    """Open a fresh slice for ``entry`` unless one is already open."""
    if entry.playtimer_start_time is None:
        entry.playtimer_start_time = now


def live_playtime_seconds(entry: PlayerLineupState, now: int) -> int:
    """Playtime including the open slice, without changing the entry."""
    if not entry.timer_running:
        return entry.playtime_seconds
    slice_seconds = max(0.0, elapsed_seconds(entry.playtimer_start_time, now))
    return round_half_up(entry.playtime_seconds + slice_seconds)


def game_elapsed_seconds(game: Game, now: int) -> float:
    """
    Authoritative game time: accumulated seconds plus the current run.

    Args:
        game: Game snapshot
        now: Current instant in epoch milliseconds

    Returns:
        Unrounded elapsed seconds
    """
    total = float(game.timer_elapsed_seconds or 0)
    if game.is_running and game.timer_start_time is not None:
        total += max(0.0, elapsed_seconds(game.timer_start_time, now))
    return total


def current_game_seconds(game: Game, now: int) -> int:
    """Rounded game time, as stamped on new events."""
    return round_half_up(game_elapsed_seconds(game, now))


def is_game_active(game: Game) -> bool:
    """True once play has begun: clock running, or paused with time on it."""
    if game.is_running:
        return True
    return game.timer_status == TIMER_STOPPED and (game.timer_elapsed_seconds or 0) > 0
