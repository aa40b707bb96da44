"""Room creation and joining on a shared store."""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

import structlog

from domino.logic.settings import MAX_PLAYERS
from domino.session.retry import retry_async, with_timeout
from domino.session.settings import SessionSettings

if TYPE_CHECKING:
    from shared.dal.game_store import GameStore
    from shared.dal.models import PlayerRecord, RoomRecord

logger = structlog.get_logger()


async def create_room(
    store: GameStore,
    *,
    name: str,
    host_id: str,
    host_name: str,
    settings: SessionSettings | None = None,
) -> tuple[RoomRecord, PlayerRecord]:
    """
    Create a room and seat its host at position 0.

    The room id is chosen up front so a retried attempt after a transient
    failure finds the room it already created instead of making a second one.
    """
    settings = settings or SessionSettings()
    room_id = uuid.uuid4().hex

    async def attempt() -> tuple[RoomRecord, PlayerRecord]:
        room = await with_timeout(
            store.create_room(room_id, name, host_id, max_players=MAX_PLAYERS),
            settings.request_timeout_seconds,
            operation="create_room",
        )
        host = await with_timeout(
            store.join_room(room_id, host_id, host_name),
            settings.request_timeout_seconds,
            operation="join_room",
        )
        return room, host

    room, host = await retry_async(
        attempt,
        attempts=settings.retry_attempts,
        base_delay=settings.retry_base_delay_seconds,
        description="create_room",
    )
    logger.info("room created", room_id=room.id, host_id=host_id)
    return room, host


async def join_room(
    store: GameStore,
    room_id: str,
    *,
    user_id: str,
    display_name: str,
    settings: SessionSettings | None = None,
) -> PlayerRecord:
    """Seat a user. RoomFullError and RecordNotFoundError propagate to the caller."""
    settings = settings or SessionSettings()
    player = await with_timeout(
        store.join_room(room_id, user_id, display_name),
        settings.request_timeout_seconds,
        operation="join_room",
    )
    logger.info("player joined room", room_id=room_id, user_id=user_id, position=player.position)
    return player
