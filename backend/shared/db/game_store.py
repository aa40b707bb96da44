"""SQLite-backed game store."""

from __future__ import annotations

import asyncio
import json
import sqlite3
import uuid
from typing import TYPE_CHECKING, Any

import structlog

from shared.dal.exceptions import RecordNotFoundError, RoomFullError, VersionConflictError
from shared.dal.game_store import GameStore
from shared.dal.models import ChangeEvent, GameStateRecord, PlayerRecord, RoomRecord, utc_now
from shared.dal.notifier import ChangeNotifier

if TYPE_CHECKING:
    from shared.dal.models import PlayerUpdate
    from shared.dal.notifier import ChangeListener, Unsubscribe
    from shared.db.connection import Database

logger = structlog.get_logger()

_ROOM_COLUMNS = ("id", "name", "host_id", "status", "current_players", "max_players", "created_at", "updated_at")
_PLAYER_COLUMNS = (
    "id",
    "room_id",
    "user_id",
    "display_name",
    "position",
    "hand",
    "score",
    "is_current_player",
    "is_connected",
    "joined_at",
)


def _row_to_dict(columns: tuple[str, ...], row: tuple[Any, ...]) -> dict[str, Any]:
    return dict(zip(columns, row, strict=True))


class SqliteGameStore(GameStore):
    """SQLite implementation of GameStore.

    Rooms and seats are plain columns; the game state is stored as a JSON
    snapshot next to indexed version and phase columns, so the conditional
    turn write is a single ``UPDATE ... WHERE version = ?``. Multi-row
    writes run inside one ``BEGIN IMMEDIATE`` transaction.
    """

    def __init__(self, db: Database) -> None:
        self._db = db
        self._lock = asyncio.Lock()
        self._notifier = ChangeNotifier()

    @property
    def _conn(self) -> sqlite3.Connection:
        return self._db.connection

    async def create_room(self, room_id: str, name: str, host_id: str, max_players: int = 4) -> RoomRecord:
        """Insert a room. Logs a warning and returns the stored room on duplicate id."""
        room = RoomRecord(id=room_id, name=name, host_id=host_id, max_players=max_players)
        async with self._lock:
            try:
                self._conn.execute(
                    f"INSERT INTO rooms ({', '.join(_ROOM_COLUMNS)}) VALUES (?, ?, ?, ?, ?, ?, ?, ?)",  # noqa: S608
                    (
                        room.id,
                        room.name,
                        room.host_id,
                        room.status,
                        room.current_players,
                        room.max_players,
                        room.created_at.isoformat(),
                        room.updated_at.isoformat(),
                    ),
                )
            except sqlite3.IntegrityError:
                logger.warning("room already exists, ignoring duplicate create", room_id=room_id)
                existing = self._fetch_room(room_id)
                if existing is None:
                    raise
                return existing
        self._notifier.publish(ChangeEvent(table="rooms", room_id=room_id))
        return room

    def _fetch_room(self, room_id: str) -> RoomRecord | None:
        row = self._conn.execute(
            f"SELECT {', '.join(_ROOM_COLUMNS)} FROM rooms WHERE id = ?",  # noqa: S608
            (room_id,),
        ).fetchone()
        if row is None:
            return None
        return RoomRecord.model_validate(_row_to_dict(_ROOM_COLUMNS, row))

    def _fetch_player(self, room_id: str, user_id: str) -> PlayerRecord | None:
        row = self._conn.execute(
            f"SELECT {', '.join(_PLAYER_COLUMNS)} FROM room_players WHERE room_id = ? AND user_id = ?",  # noqa: S608
            (room_id, user_id),
        ).fetchone()
        if row is None:
            return None
        return PlayerRecord.model_validate(_row_to_dict(_PLAYER_COLUMNS, row))

    async def get_room(self, room_id: str) -> RoomRecord | None:
        return self._fetch_room(room_id)

    async def join_room(self, room_id: str, user_id: str, display_name: str) -> PlayerRecord:
        async with self._lock:
            conn = self._conn
            try:
                conn.execute("BEGIN IMMEDIATE")
                room = self._fetch_room(room_id)
                if room is None:
                    raise RecordNotFoundError(f"room {room_id} not found")
                existing = self._fetch_player(room_id, user_id)
                if existing is not None:
                    conn.execute(
                        "UPDATE room_players SET is_connected = 1 WHERE room_id = ? AND user_id = ?",
                        (room_id, user_id),
                    )
                    player = existing.model_copy(update={"is_connected": True})
                else:
                    if room.current_players >= room.max_players:
                        raise RoomFullError(f"room {room_id} is full")
                    player = PlayerRecord(
                        id=uuid.uuid4().hex,
                        room_id=room_id,
                        user_id=user_id,
                        display_name=display_name,
                        position=room.current_players,
                    )
                    conn.execute(
                        f"INSERT INTO room_players ({', '.join(_PLAYER_COLUMNS)}) "  # noqa: S608
                        "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                        (
                            player.id,
                            player.room_id,
                            player.user_id,
                            player.display_name,
                            player.position,
                            player.hand,
                            player.score,
                            int(player.is_current_player),
                            int(player.is_connected),
                            player.joined_at.isoformat(),
                        ),
                    )
                    conn.execute(
                        "UPDATE rooms SET current_players = current_players + 1, updated_at = ? WHERE id = ?",
                        (utc_now().isoformat(), room_id),
                    )
                conn.execute("COMMIT")
            except Exception:
                conn.execute("ROLLBACK")
                raise
        self._notifier.publish(ChangeEvent(table="room_players", room_id=room_id))
        return player

    async def list_players(self, room_id: str) -> list[PlayerRecord]:
        rows = self._conn.execute(
            f"SELECT {', '.join(_PLAYER_COLUMNS)} FROM room_players WHERE room_id = ? ORDER BY position",  # noqa: S608
            (room_id,),
        ).fetchall()
        return [PlayerRecord.model_validate(_row_to_dict(_PLAYER_COLUMNS, row)) for row in rows]

    async def set_player_connected(self, room_id: str, user_id: str, *, connected: bool) -> None:
        async with self._lock:
            cursor = self._conn.execute(
                "UPDATE room_players SET is_connected = ? WHERE room_id = ? AND user_id = ?",
                (int(connected), room_id, user_id),
            )
            if cursor.rowcount == 0:
                raise RecordNotFoundError(f"player {user_id} not in room {room_id}")
        self._notifier.publish(ChangeEvent(table="room_players", room_id=room_id))

    async def get_game_state(self, room_id: str) -> GameStateRecord | None:
        row = self._conn.execute("SELECT data FROM game_states WHERE room_id = ?", (room_id,)).fetchone()
        if row is None:
            return None
        return GameStateRecord.model_validate(json.loads(row[0]))

    def _stored_version(self, room_id: str) -> int | None:
        row = self._conn.execute("SELECT version FROM game_states WHERE room_id = ?", (room_id,)).fetchone()
        return None if row is None else row[0]

    def _write_player_updates(self, room_id: str, players: list[PlayerUpdate]) -> None:
        for update in players:
            cursor = self._conn.execute(
                "UPDATE room_players SET hand = ?, score = ?, is_current_player = ? WHERE room_id = ? AND user_id = ?",
                (update.hand, update.score, int(update.is_current_player), room_id, update.user_id),
            )
            if cursor.rowcount == 0:
                raise RecordNotFoundError(f"player {update.user_id} not in room {room_id}")

    async def start_game(self, game_state: GameStateRecord, players: list[PlayerUpdate]) -> None:
        room_id = game_state.room_id
        async with self._lock:
            conn = self._conn
            try:
                conn.execute("BEGIN IMMEDIATE")
                cursor = conn.execute(
                    "UPDATE rooms SET status = 'in_progress', updated_at = ? WHERE id = ? AND status = 'waiting'",
                    (utc_now().isoformat(), room_id),
                )
                if cursor.rowcount == 0:
                    if self._fetch_room(room_id) is None:
                        raise RecordNotFoundError(f"room {room_id} not found")
                    raise VersionConflictError(room_id, 0, self._stored_version(room_id))
                self._write_player_updates(room_id, players)
                conn.execute(
                    "INSERT OR REPLACE INTO game_states (room_id, version, phase, data) VALUES (?, ?, ?, ?)",
                    (room_id, game_state.version, game_state.phase, game_state.model_dump_json()),
                )
                conn.execute("COMMIT")
            except Exception:
                conn.execute("ROLLBACK")
                raise
        self._notifier.publish(ChangeEvent(table="game_states", room_id=room_id, version=game_state.version))

    async def commit_turn(
        self,
        game_state: GameStateRecord,
        players: list[PlayerUpdate],
        expected_version: int,
    ) -> None:
        room_id = game_state.room_id
        async with self._lock:
            conn = self._conn
            try:
                conn.execute("BEGIN IMMEDIATE")
                cursor = conn.execute(
                    "UPDATE game_states SET version = ?, phase = ?, data = ? WHERE room_id = ? AND version = ?",
                    (game_state.version, game_state.phase, game_state.model_dump_json(), room_id, expected_version),
                )
                if cursor.rowcount == 0:
                    raise VersionConflictError(room_id, expected_version, self._stored_version(room_id))
                self._write_player_updates(room_id, players)
                if game_state.phase == "finished":
                    conn.execute(
                        "UPDATE rooms SET status = 'finished', updated_at = ? WHERE id = ?",
                        (utc_now().isoformat(), room_id),
                    )
                conn.execute("COMMIT")
            except Exception:
                conn.execute("ROLLBACK")
                raise
        self._notifier.publish(ChangeEvent(table="game_states", room_id=room_id, version=game_state.version))

    def subscribe(self, room_id: str, listener: ChangeListener) -> Unsubscribe:
        return self._notifier.subscribe(room_id, listener)

    async def wait_for_notifications(self) -> None:
        await self._notifier.wait_for_deliveries()
