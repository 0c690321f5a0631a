import unittest
from datetime import date

from sideline.models import FieldPosition, Game, PlayerLineupState
from sideline.services.game_clock import finish_game, is_fresh, start_timer, stop_timer
from sideline.utils import BENCH, FIELD, INACTIVE, TIMER_RUNNING, TIMER_STOPPED

T0 = 1_700_000_000_000


def make_game(**overrides) -> Game:
    lineup = [
        PlayerLineupState(id="p1", location=FIELD, position=FieldPosition(50, 40)),
        PlayerLineupState(id="p2", location=BENCH),
        PlayerLineupState(id="p3", location=INACTIVE),
    ]
    values = dict(id="g1", team_id="t1", opponent="Rovers", game_date=date(2024, 9, 1), lineup=lineup)
    values.update(overrides)
    return Game(**values)


class GameClockTests(unittest.TestCase):
    def test_first_start_marks_starters_and_opens_field_slices(self) -> None:
        game = make_game()
        started = start_timer(game, T0)

        self.assertEqual(started.timer_status, TIMER_RUNNING)
        self.assertEqual(started.timer_start_time, T0)
        self.assertFalse(started.is_explicitly_finished)

        p1, p2, p3 = started.lineup
        self.assertTrue(p1.is_starter)
        self.assertEqual(p1.initial_position, FieldPosition(50, 40))
        self.assertEqual(p1.playtimer_start_time, T0)
        self.assertTrue(p2.is_starter)
        self.assertIsNone(p2.playtimer_start_time)
        self.assertFalse(p3.is_starter)
        self.assertIsNone(p3.playtimer_start_time)

        # Input snapshot is untouched
        self.assertEqual(game.timer_status, TIMER_STOPPED)
        self.assertFalse(game.lineup[0].is_starter)

    def test_start_is_noop_when_running_or_finished(self) -> None:
        running = start_timer(make_game(), T0)
        self.assertIsNone(start_timer(running, T0 + 5_000))
        self.assertIsNone(start_timer(make_game(is_explicitly_finished=True), T0))

    def test_stop_banks_elapsed_and_playtime(self) -> None:
        running = start_timer(make_game(), T0)
        stopped = stop_timer(running, T0 + 600_000)

        self.assertEqual(stopped.timer_status, TIMER_STOPPED)
        self.assertIsNone(stopped.timer_start_time)
        self.assertEqual(stopped.timer_elapsed_seconds, 600)
        self.assertEqual(stopped.lineup[0].playtime_seconds, 600)
        self.assertIsNone(stopped.lineup[0].playtimer_start_time)
        self.assertEqual(stopped.lineup[1].playtime_seconds, 0)

    def test_stop_is_noop_when_not_running(self) -> None:
        self.assertIsNone(stop_timer(make_game(), T0))

    def test_resume_keeps_starters_from_kickoff(self) -> None:
        stopped = stop_timer(start_timer(make_game(), T0), T0 + 60_000)
        self.assertFalse(is_fresh(stopped))

        # Bring the inactive player on and move the starter before resuming
        stopped.lineup[2].location = FIELD
        stopped.lineup[0].position = FieldPosition(10, 10)
        resumed = start_timer(stopped, T0 + 120_000)

        self.assertFalse(resumed.lineup[2].is_starter)
        self.assertEqual(resumed.lineup[2].playtimer_start_time, T0 + 120_000)
        self.assertEqual(resumed.lineup[0].initial_position, FieldPosition(50, 40))

    def test_each_run_is_rounded_half_up(self) -> None:
        first = stop_timer(start_timer(make_game(), T0), T0 + 1_500)
        self.assertEqual(first.timer_elapsed_seconds, 2)
        self.assertEqual(first.lineup[0].playtime_seconds, 2)

        second = stop_timer(start_timer(first, T0 + 10_000), T0 + 11_400)
        self.assertEqual(second.timer_elapsed_seconds, 3)
        self.assertEqual(second.lineup[0].playtime_seconds, 3)

    def test_finish_while_running_reconciles_once(self) -> None:
        running = start_timer(make_game(), T0)
        finished = finish_game(running, T0 + 90_000)

        self.assertTrue(finished.is_explicitly_finished)
        self.assertEqual(finished.timer_status, TIMER_STOPPED)
        self.assertEqual(finished.timer_elapsed_seconds, 90)
        self.assertEqual(finished.lineup[0].playtime_seconds, 90)

        again = finish_game(finished, T0 + 200_000)
        self.assertTrue(again.is_explicitly_finished)
        self.assertEqual(again.timer_elapsed_seconds, 90)
        self.assertEqual(again.lineup[0].playtime_seconds, 90)

    def test_finish_clears_every_open_slice(self) -> None:
        game = make_game()
        game.lineup[1].playtimer_start_time = T0
        finished = finish_game(game, T0 + 30_000)

        self.assertIsNone(finished.lineup[1].playtimer_start_time)
        self.assertEqual(finished.lineup[1].playtime_seconds, 0)
        self.assertIsNone(start_timer(finished, T0 + 40_000))


def test_is_fresh_only_before_first_run() -> None:
    game = make_game()
    assert is_fresh(game)
    assert not is_fresh(start_timer(game, T0))
    assert not is_fresh(make_game(timer_elapsed_seconds=5))
