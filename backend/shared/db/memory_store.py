"""In-memory GameStore for tests and single-process multiplayer."""

from __future__ import annotations

import asyncio
import uuid
from typing import TYPE_CHECKING

import structlog

from shared.dal.exceptions import RecordNotFoundError, RoomFullError, VersionConflictError
from shared.dal.game_store import GameStore
from shared.dal.models import ChangeEvent, GameStateRecord, PlayerRecord, RoomRecord, utc_now
from shared.dal.notifier import ChangeNotifier

if TYPE_CHECKING:
    from shared.dal.models import PlayerUpdate
    from shared.dal.notifier import ChangeListener, Unsubscribe

logger = structlog.get_logger()


class InMemoryGameStore(GameStore):
    """Dictionary-backed store. Writes are serialized by one lock, so each call is atomic."""

    def __init__(self) -> None:
        self._rooms: dict[str, RoomRecord] = {}
        self._players: dict[str, dict[str, PlayerRecord]] = {}
        self._states: dict[str, GameStateRecord] = {}
        self._lock = asyncio.Lock()
        self._notifier = ChangeNotifier()

    async def create_room(self, room_id: str, name: str, host_id: str, max_players: int = 4) -> RoomRecord:
        async with self._lock:
            if room_id in self._rooms:
                logger.warning("room already exists, ignoring duplicate create", room_id=room_id)
                return self._rooms[room_id]
            room = RoomRecord(id=room_id, name=name, host_id=host_id, max_players=max_players)
            self._rooms[room_id] = room
            self._players[room_id] = {}
        self._notifier.publish(ChangeEvent(table="rooms", room_id=room_id))
        return room

    async def get_room(self, room_id: str) -> RoomRecord | None:
        return self._rooms.get(room_id)

    async def join_room(self, room_id: str, user_id: str, display_name: str) -> PlayerRecord:
        async with self._lock:
            room = self._rooms.get(room_id)
            if room is None:
                raise RecordNotFoundError(f"room {room_id} not found")
            seats = self._players[room_id]
            existing = seats.get(user_id)
            if existing is not None:
                player = existing.model_copy(update={"is_connected": True})
            else:
                if room.current_players >= room.max_players:
                    raise RoomFullError(f"room {room_id} is full")
                player = PlayerRecord(
                    id=uuid.uuid4().hex,
                    room_id=room_id,
                    user_id=user_id,
                    display_name=display_name,
                    position=len(seats),
                )
                self._rooms[room_id] = room.model_copy(
                    update={"current_players": room.current_players + 1, "updated_at": utc_now()}
                )
            seats[user_id] = player
        self._notifier.publish(ChangeEvent(table="room_players", room_id=room_id))
        return player

    async def list_players(self, room_id: str) -> list[PlayerRecord]:
        return sorted(self._players.get(room_id, {}).values(), key=lambda p: p.position)

    async def set_player_connected(self, room_id: str, user_id: str, *, connected: bool) -> None:
        async with self._lock:
            player = self._players.get(room_id, {}).get(user_id)
            if player is None:
                raise RecordNotFoundError(f"player {user_id} not in room {room_id}")
            self._players[room_id][user_id] = player.model_copy(update={"is_connected": connected})
        self._notifier.publish(ChangeEvent(table="room_players", room_id=room_id))

    async def get_game_state(self, room_id: str) -> GameStateRecord | None:
        return self._states.get(room_id)

    async def start_game(self, game_state: GameStateRecord, players: list[PlayerUpdate]) -> None:
        room_id = game_state.room_id
        async with self._lock:
            room = self._rooms.get(room_id)
            if room is None:
                raise RecordNotFoundError(f"room {room_id} not found")
            if room.status != "waiting":
                current = self._states.get(room_id)
                raise VersionConflictError(room_id, 0, current.version if current else None)
            self._apply_player_updates(room_id, players)
            self._states[room_id] = game_state
            self._rooms[room_id] = room.model_copy(update={"status": "in_progress", "updated_at": utc_now()})
        self._notifier.publish(ChangeEvent(table="game_states", room_id=room_id, version=game_state.version))

    async def commit_turn(
        self,
        game_state: GameStateRecord,
        players: list[PlayerUpdate],
        expected_version: int,
    ) -> None:
        room_id = game_state.room_id
        async with self._lock:
            current = self._states.get(room_id)
            if current is None or current.version != expected_version:
                raise VersionConflictError(room_id, expected_version, current.version if current else None)
            self._apply_player_updates(room_id, players)
            self._states[room_id] = game_state
            if game_state.phase == "finished":
                room = self._rooms[room_id]
                self._rooms[room_id] = room.model_copy(update={"status": "finished", "updated_at": utc_now()})
        self._notifier.publish(ChangeEvent(table="game_states", room_id=room_id, version=game_state.version))

    def _apply_player_updates(self, room_id: str, players: list[PlayerUpdate]) -> None:
        seats = self._players[room_id]
        for update in players:
            player = seats.get(update.user_id)
            if player is None:
                raise RecordNotFoundError(f"player {update.user_id} not in room {room_id}")
        for update in players:
            seats[update.user_id] = seats[update.user_id].model_copy(
                update={"hand": update.hand, "score": update.score, "is_current_player": update.is_current_player}
            )

    def subscribe(self, room_id: str, listener: ChangeListener) -> Unsubscribe:
        return self._notifier.subscribe(room_id, listener)

    async def wait_for_notifications(self) -> None:
        await self._notifier.wait_for_deliveries()
