"""Shared fixtures for store-backed session tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from domino.logic.game import start_game
from domino.session.codec import records_to_state, state_to_records
from domino.session.settings import SessionSettings
from domino.session.synced import SyncedGameSession
from shared.db import InMemoryGameStore

if TYPE_CHECKING:
    from collections.abc import Sequence

    from domino.logic.tiles import Tile
    from shared.dal.game_store import GameStore

ROOM_ID = "room-1"


def fast_settings(**overrides: object) -> SessionSettings:
    values: dict[str, object] = {
        "request_timeout_seconds": 1.0,
        "retry_attempts": 2,
        "retry_base_delay_seconds": 0,
        "poll_interval_seconds": 0.01,
    }
    values.update(overrides)
    return SessionSettings(**values)


async def seat_room(store: GameStore, count: int, room_id: str = ROOM_ID) -> None:
    """Create ``room_id`` hosted by user-0 and seat user-0..user-(count-1)."""
    await store.create_room(room_id, "Test Room", "user-0")
    for seat in range(count):
        await store.join_room(room_id, f"user-{seat}", f"Player{seat}")


async def start_with_hands(store: GameStore, hands: Sequence[Sequence[Tile]], room_id: str = ROOM_ID) -> None:
    """Start the room's game with a fixed deal instead of a shuffled one."""
    players = await store.list_players(room_id)
    state = records_to_state(room_id, players, None)
    state = state.model_copy(update={"settings": state.settings.model_copy(update={"num_players": len(players)})})
    record, updates = state_to_records(start_game(state, hands=hands).new_state)
    await store.start_game(record, updates)


def make_session(store: GameStore, user_id: str, room_id: str = ROOM_ID, **overrides: object) -> SyncedGameSession:
    return SyncedGameSession(store, room_id, user_id, settings=fast_settings(**overrides))


@pytest.fixture
def store() -> InMemoryGameStore:
    return InMemoryGameStore()
