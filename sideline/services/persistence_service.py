"""
Persistence gateway for the Sideline Manager application.

The gateway is the durable store for team, player and game records. Records
are plain JSON-compatible dictionaries: instants are ISO-8601 text and the
game lineup and events are lists of dictionaries keyed by player id. The
engine maps records to models and back; the gateway never sees a model.

Every call may raise ``GatewayError``. A failed write leaves the store as it
was before the call.
"""
import copy
import json
import logging
import os
import tempfile
import uuid
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Protocol

from .errors import GatewayError

logger = logging.getLogger(__name__)

Record = Dict[str, Any]
Tables = Dict[str, Dict[str, Record]]


class GameGateway(Protocol):
    """Interface the game manager needs from durable storage."""

    def fetch_team(self, user_id: str) -> Optional[Record]:
        ...

    def insert_team(self, record: Record) -> Record:
        ...

    def update_team(self, team_id: str, fields: Record) -> Record:
        ...

    def fetch_roster(self, team_id: str) -> List[Record]:
        ...

    def insert_player(self, record: Record) -> Record:
        ...

    def update_player(self, player_id: str, fields: Record) -> Record:
        ...

    def delete_player(self, player_id: str) -> None:
        ...

    def fetch_games(self, team_id: str) -> List[Record]:
        ...

    def fetch_game(self, game_id: str) -> Optional[Record]:
        ...

    def insert_game(self, record: Record) -> Record:
        ...

    def save_game(self, game_id: str, fields: Record) -> Record:
        ...

    def delete_game(self, game_id: str) -> None:
        ...


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds")


def _empty_tables() -> Tables:
    return {"teams": {}, "players": {}, "games": {}}


def _game_sort_key(record: Record):
    return (record.get("game_date") or "", record.get("game_time") or "")


class InMemoryGateway:
    """
    Dictionary-backed gateway.

    Mutations are applied to a copy of the tables and only swapped in once
    ``_persist`` succeeds, so subclasses that write elsewhere get all-or-nothing
    behaviour for free. Returned records are always copies.
    """

    def __init__(self, tables: Optional[Tables] = None):
        self._tables: Tables = copy.deepcopy(tables) if tables else _empty_tables()
        for name in ("teams", "players", "games"):
            self._tables.setdefault(name, {})

    # ------------------------------------------------------------------
    # Storage hooks
    # ------------------------------------------------------------------
    def _persist(self, tables: Tables) -> None:
        """Write ``tables`` to durable storage. Nothing to do in memory."""

    def _mutate(self, change: Callable[[Tables], Any]) -> Any:
        tables = copy.deepcopy(self._tables)
        outcome = change(tables)
        self._persist(tables)
        self._tables = tables
        return copy.deepcopy(outcome)

    def _get(self, table: str, record_id: str) -> Optional[Record]:
        record = self._tables[table].get(record_id)
        return copy.deepcopy(record) if record is not None else None

    @staticmethod
    def _insert(tables: Tables, table: str, record: Record) -> Record:
        stored = dict(record)
        stored["id"] = str(stored.get("id") or uuid.uuid4())
        now = _timestamp()
        stored.setdefault("created_at", now)
        if table == "games":
            stored["updated_at"] = now
        tables[table][stored["id"]] = stored
        return stored

    @staticmethod
    def _update(tables: Tables, table: str, record_id: str, fields: Record) -> Record:
        stored = tables[table].get(record_id)
        if stored is None:
            raise GatewayError(f"No {table[:-1]} with id {record_id}")
        for key in ("id", "created_at"):
            fields.pop(key, None)
        stored.update(fields)
        if table == "games":
            stored["updated_at"] = _timestamp()
        return stored

    @staticmethod
    def _delete(tables: Tables, table: str, record_id: str) -> None:
        if tables[table].pop(record_id, None) is None:
            raise GatewayError(f"No {table[:-1]} with id {record_id}")

    # ------------------------------------------------------------------
    # Teams
    # ------------------------------------------------------------------
    def fetch_team(self, user_id: str) -> Optional[Record]:
        for record in self._tables["teams"].values():
            if record.get("user_id") == user_id:
                return copy.deepcopy(record)
        return None

    def insert_team(self, record: Record) -> Record:
        if self.fetch_team(record.get("user_id")) is not None:
            raise GatewayError(f"User {record.get('user_id')} already owns a team")
        return self._mutate(lambda tables: self._insert(tables, "teams", record))

    def update_team(self, team_id: str, fields: Record) -> Record:
        return self._mutate(lambda tables: self._update(tables, "teams", team_id, dict(fields)))

    # ------------------------------------------------------------------
    # Players
    # ------------------------------------------------------------------
    def fetch_roster(self, team_id: str) -> List[Record]:
        players = [
            copy.deepcopy(record)
            for record in self._tables["players"].values()
            if record.get("team_id") == team_id
        ]
        players.sort(key=lambda record: (record.get("first_name") or "").lower())
        return players

    def insert_player(self, record: Record) -> Record:
        return self._mutate(lambda tables: self._insert(tables, "players", record))

    def update_player(self, player_id: str, fields: Record) -> Record:
        return self._mutate(lambda tables: self._update(tables, "players", player_id, dict(fields)))

    def delete_player(self, player_id: str) -> None:
        self._mutate(lambda tables: self._delete(tables, "players", player_id))

    # ------------------------------------------------------------------
    # Games
    # ------------------------------------------------------------------
    def fetch_games(self, team_id: str) -> List[Record]:
        games = [
            copy.deepcopy(record)
            for record in self._tables["games"].values()
            if record.get("team_id") == team_id
        ]
        games.sort(key=_game_sort_key, reverse=True)
        return games

    def fetch_game(self, game_id: str) -> Optional[Record]:
        return self._get("games", game_id)

    def insert_game(self, record: Record) -> Record:
        return self._mutate(lambda tables: self._insert(tables, "games", record))

    def save_game(self, game_id: str, fields: Record) -> Record:
        return self._mutate(lambda tables: self._update(tables, "games", game_id, dict(fields)))

    def delete_game(self, game_id: str) -> None:
        self._mutate(lambda tables: self._delete(tables, "games", game_id))


class JsonFileGateway(InMemoryGateway):
    """
    Gateway persisting every table to a single JSON file.

    The file is rewritten on each mutation through a temporary file and an
    atomic rename, so a crash mid-write leaves the previous document intact.
    """

    def __init__(self, file_path: str):
        self.file_path = file_path
        super().__init__(self._load())

    def _load(self) -> Tables:
        if not os.path.exists(self.file_path):
            return _empty_tables()
        try:
            with open(self.file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as exc:
            raise GatewayError(f"Cannot read data file {self.file_path}: {exc}") from exc
        if not isinstance(data, dict):
            raise GatewayError(f"Data file {self.file_path} does not hold a JSON object")
        return data

    def _persist(self, tables: Tables) -> None:
        directory = os.path.dirname(os.path.abspath(self.file_path))
        try:
            if not os.path.exists(directory):
                os.makedirs(directory)
            fd, temp_path = tempfile.mkstemp(prefix=".sideline-", suffix=".json", dir=directory)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(tables, f, indent=2)
                os.replace(temp_path, self.file_path)
            except BaseException:
                if os.path.exists(temp_path):
                    os.remove(temp_path)
                raise
        except (OSError, TypeError, ValueError) as exc:
            logger.error("Failed to write data file %s: %s", self.file_path, exc)
            raise GatewayError(f"Cannot write data file {self.file_path}: {exc}") from exc
