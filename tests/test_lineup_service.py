"""
Unit tests for live-game lineup moves.

Covers substitution logging, playtime slices across moves, stale moves and
removal of deleted players from a game.
"""
import random
import unittest
from datetime import date

from sideline.models import FieldPosition, Game, GameEvent, Player, PlayerLineupState
from sideline.services.errors import LineupValidationError
from sideline.services.game_clock import finish_game, start_timer, stop_timer
from sideline.services.lineup_service import (
    create_default_lineup, move_player_in_game, remove_player_from_game
)
from sideline.services.playtime import live_playtime_seconds
from sideline.utils import AWAY, BENCH, EVENT_SUBSTITUTION, FIELD, HOME, INACTIVE, round_half_up

T0 = 1_700_000_000_000


def make_game(location: str = HOME) -> Game:
    return Game(
        id="g1",
        team_id="t1",
        opponent="Rovers",
        game_date=date(2024, 9, 1),
        location=location,
        lineup=[
            PlayerLineupState(id="alice", location=FIELD, position=FieldPosition(30, 30)),
            PlayerLineupState(id="bob", location=BENCH),
            PlayerLineupState(id="cara", location=INACTIVE),
        ],
    )


class MovePlayerBeforeKickoffTests(unittest.TestCase):
    def test_bench_to_field_sets_clamped_position_without_event(self) -> None:
        game = make_game()
        moved = move_player_in_game(game, "bob", BENCH, FIELD, FieldPosition(120, -5), now=T0)

        bob = moved.find_entry("bob")
        self.assertEqual(bob.location, FIELD)
        self.assertEqual(bob.position, FieldPosition(100, 0))
        self.assertEqual(bob.subbed_on_count, 0)
        self.assertIsNone(bob.playtimer_start_time)
        self.assertEqual(moved.events, [])

    def test_input_game_is_not_modified(self) -> None:
        game = make_game()
        move_player_in_game(game, "bob", BENCH, FIELD, FieldPosition(50, 50), now=T0)
        self.assertEqual(game.find_entry("bob").location, BENCH)

    def test_stale_source_is_ignored(self) -> None:
        game = make_game()
        self.assertIsNone(move_player_in_game(game, "bob", FIELD, BENCH, now=T0))

    def test_unknown_player_is_ignored(self) -> None:
        self.assertIsNone(move_player_in_game(make_game(), "zed", BENCH, FIELD, now=T0))

    def test_unknown_location_is_rejected(self) -> None:
        with self.assertRaises(LineupValidationError):
            move_player_in_game(make_game(), "bob", BENCH, "stands", now=T0)


class MovePlayerDuringPlayTests(unittest.TestCase):
    def setUp(self) -> None:
        self.running = start_timer(make_game(), T0)

    def test_sub_on_logs_event_and_opens_slice(self) -> None:
        moved = move_player_in_game(self.running, "bob", BENCH, FIELD, FieldPosition(60, 60), now=T0 + 60_000)

        bob = moved.find_entry("bob")
        self.assertEqual(bob.subbed_on_count, 1)
        self.assertEqual(bob.playtimer_start_time, T0 + 60_000)
        self.assertEqual(len(moved.events), 1)
        event = moved.events[0]
        self.assertEqual(event.type, EVENT_SUBSTITUTION)
        self.assertEqual(event.team, HOME)
        self.assertEqual(event.player_in_id, "bob")
        self.assertIsNone(event.player_out_id)
        self.assertEqual(event.game_seconds, 60)
        self.assertEqual(event.timestamp, T0 + 60_000)

    def test_sub_off_flushes_playtime_and_logs_event(self) -> None:
        moved = move_player_in_game(self.running, "alice", FIELD, BENCH, now=T0 + 300_000)

        alice = moved.find_entry("alice")
        self.assertEqual(alice.location, BENCH)
        self.assertIsNone(alice.position)
        self.assertEqual(alice.playtime_seconds, 300)
        self.assertIsNone(alice.playtimer_start_time)
        self.assertEqual(alice.subbed_off_count, 1)
        self.assertEqual(moved.events[-1].player_out_id, "alice")

    def test_full_rotation_splits_playtime(self) -> None:
        game = move_player_in_game(self.running, "alice", FIELD, BENCH, now=T0 + 300_000)
        game = move_player_in_game(game, "bob", BENCH, FIELD, FieldPosition(30, 30), now=T0 + 300_000)
        game = stop_timer(game, T0 + 600_000)

        self.assertEqual(game.timer_elapsed_seconds, 600)
        self.assertEqual(game.find_entry("alice").playtime_seconds, 300)
        self.assertEqual(game.find_entry("bob").playtime_seconds, 300)
        self.assertEqual([e.game_seconds for e in game.events], [300, 300])

    def test_sub_off_after_pause_counts_both_runs(self) -> None:
        game = stop_timer(self.running, T0 + 600_000)
        game = start_timer(game, T0 + 900_000)
        game = move_player_in_game(game, "alice", FIELD, BENCH, now=T0 + 1_200_000)

        self.assertEqual(game.find_entry("alice").playtime_seconds, 900)
        self.assertEqual(len(game.events), 1)
        self.assertEqual(game.events[0].player_out_id, "alice")
        self.assertIsNone(game.events[0].player_in_id)
        self.assertEqual(game.events[0].game_seconds, 900)

    def test_reposition_on_field_restarts_slice_without_event(self) -> None:
        moved = move_player_in_game(self.running, "alice", FIELD, FIELD, FieldPosition(70, 20), now=T0 + 45_000)

        alice = moved.find_entry("alice")
        self.assertEqual(alice.position, FieldPosition(70, 20))
        self.assertEqual(alice.playtime_seconds, 45)
        self.assertEqual(alice.playtimer_start_time, T0 + 45_000)
        self.assertEqual(moved.events, [])

    def test_inactive_moves_never_log_events(self) -> None:
        moved = move_player_in_game(self.running, "alice", FIELD, INACTIVE, now=T0 + 20_000)
        moved = move_player_in_game(moved, "cara", INACTIVE, FIELD, FieldPosition(10, 90), now=T0 + 20_000)

        self.assertEqual(moved.events, [])
        self.assertEqual(moved.find_entry("alice").playtime_seconds, 20)
        self.assertEqual(moved.find_entry("alice").subbed_off_count, 0)
        self.assertEqual(moved.find_entry("cara").subbed_on_count, 0)
        self.assertEqual(moved.find_entry("cara").playtimer_start_time, T0 + 20_000)

    def test_paused_game_logs_substitution_without_slice(self) -> None:
        paused = stop_timer(self.running, T0 + 120_000)
        moved = move_player_in_game(paused, "bob", BENCH, FIELD, FieldPosition(40, 40), now=T0 + 180_000)

        bob = moved.find_entry("bob")
        self.assertEqual(bob.subbed_on_count, 1)
        self.assertIsNone(bob.playtimer_start_time)
        self.assertEqual(moved.events[0].game_seconds, 120)

    def test_away_game_logs_away_team(self) -> None:
        running = start_timer(make_game(location=AWAY), T0)
        moved = move_player_in_game(running, "bob", BENCH, FIELD, now=T0 + 1_000)
        self.assertEqual(moved.events[0].team, AWAY)


class RemovePlayerFromGameTests(unittest.TestCase):
    def test_prunes_entry_and_nulls_event_references(self) -> None:
        game = make_game()
        game.events = [
            GameEvent.goal(HOME, T0, 10, scorer_player_id="alice", assist_player_id="bob"),
            GameEvent.substitution(HOME, T0, 20, player_out_id="alice"),
        ]
        cleaned = remove_player_from_game(game, "alice")

        self.assertIsNone(cleaned.find_entry("alice"))
        self.assertEqual(len(cleaned.events), 2)
        self.assertIsNone(cleaned.events[0].scorer_player_id)
        self.assertEqual(cleaned.events[0].assist_player_id, "bob")
        self.assertEqual(cleaned.events[0].id, game.events[0].id)
        self.assertIsNone(cleaned.events[1].player_out_id)

    def test_unreferenced_player_returns_none(self) -> None:
        self.assertIsNone(remove_player_from_game(make_game(), "zed"))


def test_default_lineup_is_bench_only_in_roster_order() -> None:
    players = [Player(id="a", team_id="t1", first_name="Ann"), Player(id="b", team_id="t1", first_name="Ben")]
    lineup = create_default_lineup(players)
    assert [entry.id for entry in lineup] == ["a", "b"]
    assert all(entry.location == BENCH and entry.playtime_seconds == 0 for entry in lineup)


def test_many_runs_and_substitutions_stay_consistent() -> None:
    rng = random.Random(20240901)
    ids = [f"p{i}" for i in range(6)]
    game = Game(
        id="g1",
        team_id="t1",
        opponent="Rovers",
        game_date=date(2024, 9, 1),
        lineup=[
            PlayerLineupState(id=pid, location=FIELD if i < 3 else BENCH, position=FieldPosition(50, 50) if i < 3 else None)
            for i, pid in enumerate(ids)
        ],
    )
    on_field = set(ids[:3])
    slice_start = {}
    exact_ms = dict.fromkeys(ids, 0)
    slices = dict.fromkeys(ids, 0)
    last_seen = dict.fromkeys(ids, 0)
    runs = []

    def close_slice(pid: str, now: int) -> None:
        exact_ms[pid] += now - slice_start.pop(pid)
        slices[pid] += 1

    def check_monotonic(now: int) -> None:
        for pid in ids:
            value = live_playtime_seconds(game.find_entry(pid), now)
            assert value >= last_seen[pid]
            last_seen[pid] = value

    now = T0
    for cycle in range(8):
        game = start_timer(game, now)
        run_start = now
        slice_start.update(dict.fromkeys(on_field, now))
        check_monotonic(now)

        for _ in range(5):
            now += rng.randint(1, 90_000)
            out_id = rng.choice(sorted(on_field))
            in_id = rng.choice(sorted(set(ids) - on_field))
            game = move_player_in_game(game, out_id, FIELD, BENCH, now=now)
            close_slice(out_id, now)
            check_monotonic(now)
            game = move_player_in_game(game, in_id, BENCH, FIELD, FieldPosition(50, 50), now=now)
            slice_start[in_id] = now
            on_field = (on_field - {out_id}) | {in_id}
            check_monotonic(now)

        now += rng.randint(1, 90_000)
        runs.append((now - run_start) / 1000)
        game = finish_game(game, now) if cycle == 7 else stop_timer(game, now)
        for pid in list(slice_start):
            close_slice(pid, now)
        check_monotonic(now)
        now += rng.randint(1_000, 60_000)

    assert game.is_explicitly_finished
    assert game.timer_elapsed_seconds == sum(round_half_up(run) for run in runs)
    assert [e.game_seconds for e in game.events] == sorted(e.game_seconds for e in game.events)
    assert len(game.events) == 8 * 5 * 2
    for pid in ids:
        entry = game.find_entry(pid)
        assert entry.playtimer_start_time is None
        assert abs(entry.playtime_seconds - exact_ms[pid] / 1000) <= 0.5 * slices[pid]
