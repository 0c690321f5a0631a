"""Test per-game playtime reports and CSV export."""

import csv
import io
import unittest
from datetime import date

from sideline.models import Game, GameEvent, Player, PlayerLineupState
from sideline.services.report_service import CSV_HEADER, ReportService
from sideline.utils import BENCH, FIELD, HOME, TIMER_RUNNING

T0 = 1_700_000_000_000


class TestReportService(unittest.TestCase):
    """Report counters and CSV layout."""

    def setUp(self) -> None:
        self.players = [
            Player(id="alice", team_id="t1", first_name="Alice", number="7"),
            Player(id="bob", team_id="t1", first_name="Bob"),
            Player(id="cara", team_id="t1", first_name="Cara"),
        ]
        self.game = Game(
            id="g1",
            team_id="t1",
            opponent="Rovers",
            game_date=date(2024, 9, 1),
            timer_status=TIMER_RUNNING,
            timer_start_time=T0,
            timer_elapsed_seconds=300,
            home_score=2,
            lineup=[
                PlayerLineupState(id="bob", location=BENCH, playtime_seconds=300, is_starter=True, subbed_off_count=1),
                PlayerLineupState(id="alice", location=FIELD, playtime_seconds=0, playtimer_start_time=T0, subbed_on_count=1),
                PlayerLineupState(id="cara", location=BENCH, playtime_seconds=300, is_starter=True),
                PlayerLineupState(id="gone", location=BENCH, playtime_seconds=10),
            ],
            events=[
                GameEvent.substitution(HOME, T0, 300, player_in_id="alice"),
                GameEvent.goal(HOME, T0, 320, scorer_player_id="alice", assist_player_id="bob"),
                GameEvent.goal(HOME, T0, 400, scorer_player_id="alice"),
            ],
        )
        self.service = ReportService()
        self.report = self.service.generate_game_report(self.game, self.players, T0 + 120_000)

    def test_report_totals(self) -> None:
        self.assertEqual(self.report.elapsed_seconds, 420)
        self.assertEqual(self.report.home_score, 2)
        self.assertEqual(self.report.substitution_count, 1)
        self.assertEqual(self.report.total_playtime_seconds, 300 + 120 + 300 + 10)

    def test_players_sorted_by_playtime_then_name(self) -> None:
        self.assertEqual([s.player_id for s in self.report.players], ["bob", "cara", "alice", "gone"])

    def test_player_counters(self) -> None:
        by_id = {s.player_id: s for s in self.report.players}
        self.assertEqual(by_id["alice"].playtime_seconds, 120)
        self.assertEqual(by_id["alice"].goals, 2)
        self.assertEqual(by_id["alice"].subbed_on_count, 1)
        self.assertEqual(by_id["bob"].assists, 1)
        self.assertTrue(by_id["bob"].is_starter)
        self.assertEqual(by_id["gone"].name, "gone")

    def test_csv_export(self) -> None:
        rows = list(csv.reader(io.StringIO(self.service.generate_report_csv(self.report))))
        self.assertEqual(rows[0], CSV_HEADER)
        self.assertEqual(len(rows), 5)
        alice = next(row for row in rows if row[0] == "Alice")
        self.assertEqual(alice[1], "7")
        self.assertEqual(alice[4], "02:00")
        self.assertEqual(alice[8], "2")
