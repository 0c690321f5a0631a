"""
Lineup operations for the Sideline Manager.

Two lineups exist. The live game lineup belongs to a ``Game`` and carries
playtime and substitution counters; it changes through
``move_player_in_game``. The planning lineup is a pre-game sketch of who
starts where; it changes through ``LineupPlanner`` and never touches a game.
"""
import json
import logging
import os
from typing import Dict, List, Optional, Sequence

from ..models import FieldPosition, Game, GameEvent, LineupSlot, Player, PlayerLineupState, SavedLineup
from ..utils import BENCH, FIELD, LINEUP_LOCATIONS, PLANNER_LOCATIONS, TIMER_RUNNING
from .errors import LineupValidationError
from .playtime import current_game_seconds, flush_playtime, is_game_active, start_playtimer

logger = logging.getLogger(__name__)


def create_default_lineup(players: Sequence[Player]) -> List[PlayerLineupState]:
    """Bench-only lineup with one zeroed entry per roster player."""
    return [PlayerLineupState.fresh(player.id) for player in players]


def move_player_in_game(
    game: Game,
    player_id: str,
    source_location: str,
    target_location: str,
    new_position: Optional[FieldPosition] = None,
    *,
    now: int,
) -> Optional[Game]:
    """
    Move a player within a game's live lineup.

    The player's open playtime slice is flushed before the move and a new
    one is opened if the player lands on the field while the clock runs.
    Once the game is under way, a bench to field move logs a substitution
    event with ``player_in_id`` and a field to bench move logs one with
    ``player_out_id``. Moves involving ``inactive`` and repositioning on the
    field never log events.

    Args:
        game: Current snapshot
        player_id: Player to move
        source_location: Where the caller believes the player is
        target_location: Destination location
        new_position: Pitch coordinates when the target is the field
        now: Current instant in epoch milliseconds

    Returns:
        New snapshot, or None when the player is not in the lineup or the
        source location is stale

    Raises:
        LineupValidationError: If either location is unknown
    """
    unknown = [loc for loc in (source_location, target_location) if loc not in LINEUP_LOCATIONS]
    if unknown:
        raise LineupValidationError([f"Unknown lineup location: {loc}" for loc in unknown])

    current = game.find_entry(player_id)
    if current is None:
        logger.warning("Player %s is not in the lineup of game %s", player_id, game.id)
        return None
    if current.location != source_location:
        logger.warning(
            "Stale move for player %s in game %s: expected %s, found %s",
            player_id, game.id, source_location, current.location,
        )
        return None

    result = game.copy()
    entry = result.find_entry(player_id)

    flush_playtime(entry, now)
    if target_location == FIELD and result.timer_status == TIMER_RUNNING:
        start_playtimer(entry, now)

    if is_game_active(result):
        event = None
        if source_location == BENCH and target_location == FIELD:
            entry.subbed_on_count += 1
            event = GameEvent.substitution(
                result.team_side, now, current_game_seconds(result, now), player_in_id=player_id,
            )
        elif source_location == FIELD and target_location == BENCH:
            entry.subbed_off_count += 1
            event = GameEvent.substitution(
                result.team_side, now, current_game_seconds(result, now), player_out_id=player_id,
            )
        if event is not None:
            result.events.append(event)

    entry.location = target_location
    if target_location == FIELD:
        entry.position = new_position.clamped() if new_position is not None else None
    else:
        entry.position = None
    return result


def remove_player_from_game(game: Game, player_id: str) -> Optional[Game]:
    """
    Drop a deleted player from a game.

    The lineup entry is pruned; events keep their place in the log with
    references to the player nulled.

    Returns:
        New snapshot, or None if the game never referenced the player
    """
    in_lineup = game.find_entry(player_id) is not None
    in_events = any(event.references(player_id) for event in game.events)
    if not in_lineup and not in_events:
        return None
    result = game.copy()
    result.lineup = [entry for entry in result.lineup if entry.id != player_id]
    result.events = [
        event.without_player(player_id) if event.references(player_id) else event
        for event in result.events
    ]
    return result


class SavedLineupStore:
    """
    Stores named planning lineups in a JSON file.

    A missing file means no saved lineups. A corrupted file is removed and
    treated the same way.
    """

    def __init__(self, file_path: Optional[str] = None):
        self.file_path = file_path

    def load(self) -> List[SavedLineup]:
        if not self.file_path or not os.path.exists(self.file_path):
            return []
        try:
            with open(self.file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
            return [SavedLineup.from_dict(item) for item in data or []]
        except (OSError, ValueError, KeyError, TypeError) as exc:
            logger.error("Error reading saved lineups from %s: %s", self.file_path, exc)
            try:
                os.remove(self.file_path)
                logger.warning("Removed potentially corrupted lineup file %s", self.file_path)
            except OSError as remove_exc:
                logger.error("Failed to remove corrupted lineup file %s: %s", self.file_path, remove_exc)
            return []

    def save(self, lineups: List[SavedLineup]) -> None:
        if not self.file_path:
            return
        directory = os.path.dirname(self.file_path)
        if directory and not os.path.exists(directory):
            os.makedirs(directory)
        try:
            with open(self.file_path, "w", encoding="utf-8") as f:
                json.dump([lineup.to_dict() for lineup in lineups], f, indent=2)
        except OSError as exc:
            logger.error("Error writing saved lineups to %s: %s", self.file_path, exc)


class LineupPlanner:
    """
    Pre-game lineup planning for the team's roster.

    Placements are kept per player in roster order. Players may only be on
    the bench or the field here; nothing in the planner records time or
    events.
    """

    def __init__(self, players: Sequence[Player] = (), store: Optional[SavedLineupStore] = None):
        self.store = store or SavedLineupStore()
        self._slots: List[LineupSlot] = []
        self.saved_lineups: List[SavedLineup] = self.store.load()
        self.sync_roster(players)

    @property
    def slots(self) -> List[LineupSlot]:
        return list(self._slots)

    def sync_roster(self, players: Sequence[Player]) -> None:
        """Follow roster changes, keeping placements of remaining players."""
        existing: Dict[str, LineupSlot] = {slot.id: slot for slot in self._slots}
        self._slots = [existing.get(player.id) or LineupSlot(id=player.id) for player in players]

    def _index_of(self, player_id: str) -> int:
        for index, slot in enumerate(self._slots):
            if slot.id == player_id:
                return index
        return -1

    def move_player(
        self, player_id: str, target_location: str, position: Optional[FieldPosition] = None
    ) -> bool:
        """
        Place a player on the bench or the field.

        Returns:
            False if the player is not in the planning lineup
        """
        if target_location not in PLANNER_LOCATIONS:
            raise LineupValidationError([f"Cannot plan a player into location: {target_location}"])
        index = self._index_of(player_id)
        if index == -1:
            return False
        placed = position.clamped() if target_location == FIELD and position is not None else None
        self._slots[index] = LineupSlot(id=player_id, location=target_location, position=placed)
        return True

    def swap_players(self, player1_id: str, player2_id: str) -> bool:
        """Exchange the location and position of two players."""
        first = self._index_of(player1_id)
        second = self._index_of(player2_id)
        if first == -1 or second == -1:
            return False
        a, b = self._slots[first], self._slots[second]
        self._slots[first] = LineupSlot(id=a.id, location=b.location, position=b.position)
        self._slots[second] = LineupSlot(id=b.id, location=a.location, position=a.position)
        return True

    def reset(self) -> None:
        """Send everyone back to the bench."""
        self._slots = [LineupSlot(id=slot.id) for slot in self._slots]

    def save_lineup(self, name: str) -> SavedLineup:
        """
        Save the current placements under ``name``, replacing a lineup of the same name.

        Raises:
            LineupValidationError: If the name is blank or not text
        """
        if name is not None and not isinstance(name, str):
            raise LineupValidationError(["Lineup name must be text"])
        clean_name = (name or "").strip()
        if not clean_name:
            raise LineupValidationError(["Please enter a lineup name"])
        lineup = SavedLineup(
            name=clean_name,
            players=[LineupSlot(id=s.id, location=s.location, position=s.position) for s in self._slots],
        )
        self.saved_lineups = [l for l in self.saved_lineups if l.name != clean_name] + [lineup]
        self.store.save(self.saved_lineups)
        return lineup

    def load_lineup(self, name: str) -> bool:
        """
        Apply a saved lineup. Players missing from it go to the bench.

        Returns:
            False if no lineup has that name
        """
        lineup = next((l for l in self.saved_lineups if l.name == name), None)
        if lineup is None:
            logger.warning("Lineup %r not found", name)
            return False
        saved = {slot.id: slot for slot in lineup.players}
        self._slots = [
            LineupSlot(id=slot.id, location=saved[slot.id].location, position=saved[slot.id].position)
            if slot.id in saved else LineupSlot(id=slot.id)
            for slot in self._slots
        ]
        return True

    def delete_lineup(self, name: str) -> None:
        self.saved_lineups = [l for l in self.saved_lineups if l.name != name]
        self.store.save(self.saved_lineups)
