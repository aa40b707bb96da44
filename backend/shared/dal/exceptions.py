"""Persistence errors raised by GameStore implementations."""


class StoreError(Exception):
    """Base exception for game store failures."""


class RecordNotFoundError(StoreError):
    """The room, player or game state does not exist."""


class RoomFullError(StoreError):
    """The room already seats its maximum number of players."""


class VersionConflictError(StoreError):
    """A conditional write lost the race: the stored version moved on."""

    def __init__(self, room_id: str, expected: int, actual: int | None) -> None:
        self.room_id = room_id
        self.expected = expected
        self.actual = actual
        super().__init__(f"room {room_id}: expected version {expected}, found {actual}")


class StoreUnavailableError(StoreError):
    """The store could not be reached or did not answer in time."""
