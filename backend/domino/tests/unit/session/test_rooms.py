"""
Tests for creating and joining rooms on a shared store.
"""

import pytest

from domino.session.rooms import create_room, join_room
from domino.tests.unit.session.conftest import fast_settings
from shared.dal.exceptions import RecordNotFoundError, RoomFullError, StoreUnavailableError
from shared.db import InMemoryGameStore


class FlakyCreateStore(InMemoryGameStore):
    """Fails the first join after a successful create, as a dropped response would."""

    def __init__(self) -> None:
        super().__init__()
        self.join_attempts = 0

    async def join_room(self, room_id, user_id, display_name):
        self.join_attempts += 1
        if self.join_attempts == 1:
            raise StoreUnavailableError("connection reset")
        return await super().join_room(room_id, user_id, display_name)


class TestCreateRoom:
    async def test_host_takes_first_seat(self, store):
        room, host = await create_room(store, name="Friday", host_id="host", host_name="Hana", settings=fast_settings())
        assert room.name == "Friday"
        assert room.host_id == "host"
        assert room.max_players == 4
        assert host.position == 0
        assert host.user_id == "host"
        stored = await store.get_room(room.id)
        assert stored.current_players == 1

    async def test_retry_does_not_duplicate_room(self):
        store = FlakyCreateStore()
        room, host = await create_room(store, name="Retry", host_id="host", host_name="Hana", settings=fast_settings())
        assert store.join_attempts == 2
        assert host.position == 0
        assert len(store._rooms) == 1
        assert len(await store.list_players(room.id)) == 1


class TestJoinRoom:
    async def test_positions_follow_join_order(self, store):
        room, _ = await create_room(store, name="R", host_id="u0", host_name="A", settings=fast_settings())
        second = await join_room(store, room.id, user_id="u1", display_name="B", settings=fast_settings())
        third = await join_room(store, room.id, user_id="u2", display_name="C", settings=fast_settings())
        assert (second.position, third.position) == (1, 2)

    async def test_fifth_player_rejected(self, store):
        room, _ = await create_room(store, name="R", host_id="u0", host_name="A", settings=fast_settings())
        for i in range(1, 4):
            await join_room(store, room.id, user_id=f"u{i}", display_name=f"P{i}", settings=fast_settings())
        with pytest.raises(RoomFullError):
            await join_room(store, room.id, user_id="u4", display_name="P4", settings=fast_settings())

    async def test_rejoin_keeps_seat(self, store):
        room, _ = await create_room(store, name="R", host_id="u0", host_name="A", settings=fast_settings())
        await join_room(store, room.id, user_id="u1", display_name="B", settings=fast_settings())
        again = await join_room(store, room.id, user_id="u1", display_name="B", settings=fast_settings())
        assert again.position == 1
        assert (await store.get_room(room.id)).current_players == 2

    async def test_missing_room(self, store):
        with pytest.raises(RecordNotFoundError):
            await join_room(store, "nope", user_id="u1", display_name="B", settings=fast_settings())
