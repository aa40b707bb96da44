"""Abstract interface for shared room and game state persistence."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from shared.dal.models import GameStateRecord, PlayerRecord, PlayerUpdate, RoomRecord
    from shared.dal.notifier import ChangeListener, Unsubscribe


class GameStore(ABC):
    """
    Abstract interface for the shared backend a synchronized game runs on.

    Every multi-record write is atomic: start_game and commit_turn either
    apply completely or not at all. Change notifications are delivered in
    the background after the write, never inside the writer's call.
    """

    @abstractmethod
    async def create_room(self, room_id: str, name: str, host_id: str, max_players: int = 4) -> RoomRecord: ...

    @abstractmethod
    async def get_room(self, room_id: str) -> RoomRecord | None: ...

    @abstractmethod
    async def join_room(self, room_id: str, user_id: str, display_name: str) -> PlayerRecord:
        """
        Seat a user at the next free position, or reconnect an existing seat.

        Raises RecordNotFoundError for an unknown room and RoomFullError
        when every seat is taken.
        """
        ...

    @abstractmethod
    async def list_players(self, room_id: str) -> list[PlayerRecord]:
        """Return the room's players ordered by seat position."""
        ...

    @abstractmethod
    async def set_player_connected(self, room_id: str, user_id: str, *, connected: bool) -> None: ...

    @abstractmethod
    async def get_game_state(self, room_id: str) -> GameStateRecord | None: ...

    @abstractmethod
    async def start_game(self, game_state: GameStateRecord, players: list[PlayerUpdate]) -> None:
        """
        Write dealt hands, the initial game state and the room status in one transaction.

        Raises VersionConflictError when the room is no longer waiting.
        """
        ...

    @abstractmethod
    async def commit_turn(
        self,
        game_state: GameStateRecord,
        players: list[PlayerUpdate],
        expected_version: int,
    ) -> None:
        """
        Write a turn only if the stored version still equals ``expected_version``.

        Raises VersionConflictError otherwise. A finished game also marks
        the room finished.
        """
        ...

    @abstractmethod
    def subscribe(self, room_id: str, listener: ChangeListener) -> Unsubscribe: ...

    @abstractmethod
    async def wait_for_notifications(self) -> None:
        """Wait until change notifications already published have reached every listener."""
        ...
