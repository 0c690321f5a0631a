"""Unit tests for pre-game lineup planning and saved lineups."""
import json
import os
import shutil
import tempfile
import unittest

from sideline.models import FieldPosition, Player
from sideline.services.errors import LineupValidationError
from sideline.services.lineup_service import LineupPlanner, SavedLineupStore
from sideline.utils import BENCH, FIELD, INACTIVE


def roster(*names):
    return [Player(id=name.lower(), team_id="t1", first_name=name) for name in names]


class TestLineupPlanner(unittest.TestCase):
    """Placement, swapping and saved lineups."""

    def setUp(self) -> None:
        self.temp_dir = tempfile.mkdtemp()
        self.lineups_file = os.path.join(self.temp_dir, "lineups.json")
        self.store = SavedLineupStore(self.lineups_file)
        self.planner = LineupPlanner(roster("Alice", "Bob", "Cara"), store=self.store)

    def tearDown(self) -> None:
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_everyone_starts_on_bench(self) -> None:
        self.assertEqual([slot.id for slot in self.planner.slots], ["alice", "bob", "cara"])
        self.assertTrue(all(slot.location == BENCH for slot in self.planner.slots))

    def test_move_to_field_clamps_position(self) -> None:
        self.assertTrue(self.planner.move_player("alice", FIELD, FieldPosition(105, 50)))
        slot = self.planner.slots[0]
        self.assertEqual(slot.location, FIELD)
        self.assertEqual(slot.position, FieldPosition(100, 50))

        self.assertTrue(self.planner.move_player("alice", BENCH, FieldPosition(10, 10)))
        self.assertIsNone(self.planner.slots[0].position)

    def test_move_rejects_inactive_and_unknown_players(self) -> None:
        with self.assertRaises(LineupValidationError):
            self.planner.move_player("alice", INACTIVE)
        self.assertFalse(self.planner.move_player("zed", FIELD))

    def test_swap_exchanges_placements(self) -> None:
        self.planner.move_player("alice", FIELD, FieldPosition(20, 80))
        self.assertTrue(self.planner.swap_players("alice", "bob"))

        alice, bob, _ = self.planner.slots
        self.assertEqual(alice.location, BENCH)
        self.assertIsNone(alice.position)
        self.assertEqual(bob.location, FIELD)
        self.assertEqual(bob.position, FieldPosition(20, 80))
        self.assertFalse(self.planner.swap_players("alice", "zed"))

    def test_reset_sends_everyone_to_bench(self) -> None:
        self.planner.move_player("alice", FIELD, FieldPosition(20, 80))
        self.planner.move_player("bob", FIELD, FieldPosition(50, 50))
        self.planner.reset()
        self.assertTrue(all(slot.location == BENCH and slot.position is None for slot in self.planner.slots))

    def test_saved_lineups_persist_across_planners(self) -> None:
        self.planner.move_player("bob", FIELD, FieldPosition(40, 60))
        self.planner.save_lineup("  Kickoff  ")

        reloaded = LineupPlanner(roster("Alice", "Bob", "Cara"), store=SavedLineupStore(self.lineups_file))
        self.assertEqual([l.name for l in reloaded.saved_lineups], ["Kickoff"])
        self.assertTrue(reloaded.load_lineup("Kickoff"))
        self.assertEqual(reloaded.slots[1].location, FIELD)
        self.assertEqual(reloaded.slots[1].position, FieldPosition(40, 60))

    def test_saving_same_name_replaces_lineup(self) -> None:
        self.planner.save_lineup("Kickoff")
        self.planner.move_player("cara", FIELD, FieldPosition(5, 5))
        self.planner.save_lineup("Kickoff")

        self.assertEqual(len(self.planner.saved_lineups), 1)
        saved = {slot.id: slot for slot in self.planner.saved_lineups[0].players}
        self.assertEqual(saved["cara"].location, FIELD)

    def test_blank_name_is_rejected(self) -> None:
        with self.assertRaises(LineupValidationError):
            self.planner.save_lineup("   ")

    def test_load_sends_unsaved_players_to_bench(self) -> None:
        self.planner.move_player("alice", FIELD, FieldPosition(50, 50))
        self.planner.save_lineup("Two")
        self.planner.sync_roster(roster("Alice", "Bob", "Cara", "Dan"))
        self.planner.move_player("dan", FIELD, FieldPosition(70, 70))

        self.assertTrue(self.planner.load_lineup("Two"))
        slots = {slot.id: slot for slot in self.planner.slots}
        self.assertEqual(slots["alice"].location, FIELD)
        self.assertEqual(slots["dan"].location, BENCH)
        self.assertFalse(self.planner.load_lineup("Missing"))

    def test_delete_lineup(self) -> None:
        self.planner.save_lineup("Kickoff")
        self.planner.delete_lineup("Kickoff")
        self.assertEqual(self.planner.saved_lineups, [])
        with open(self.lineups_file, "r", encoding="utf-8") as f:
            self.assertEqual(json.load(f), [])

    def test_sync_roster_keeps_remaining_placements(self) -> None:
        self.planner.move_player("bob", FIELD, FieldPosition(30, 30))
        self.planner.sync_roster(roster("Bob", "Eve"))

        self.assertEqual([slot.id for slot in self.planner.slots], ["bob", "eve"])
        self.assertEqual(self.planner.slots[0].location, FIELD)
        self.assertEqual(self.planner.slots[1].location, BENCH)


class TestSavedLineupStore(unittest.TestCase):
    def test_missing_file_means_no_lineups(self) -> None:
        store = SavedLineupStore(os.path.join(tempfile.gettempdir(), "does-not-exist-lineups.json"))
        self.assertEqual(store.load(), [])

    def test_corrupted_file_is_removed(self) -> None:
        with tempfile.NamedTemporaryFile(mode="w", suffix=".json", delete=False) as f:
            f.write("{not json")
            path = f.name
        try:
            self.assertEqual(SavedLineupStore(path).load(), [])
            self.assertFalse(os.path.exists(path))
        finally:
            if os.path.exists(path):
                os.remove(path)

    def test_store_without_path_keeps_nothing(self) -> None:
        store = SavedLineupStore()
        planner = LineupPlanner(roster("Alice"), store=store)
        planner.save_lineup("Kickoff")
        self.assertEqual(store.load(), [])
        self.assertEqual(len(planner.saved_lineups), 1)
