"""Data access layer: store interface, persistence models and errors."""

from shared.dal.exceptions import (
    RecordNotFoundError,
    RoomFullError,
    StoreError,
    StoreUnavailableError,
    VersionConflictError,
)
from shared.dal.game_store import GameStore
from shared.dal.models import ChangeEvent, GameStateRecord, PlayerRecord, PlayerUpdate, RoomRecord
from shared.dal.notifier import ChangeListener, ChangeNotifier

__all__ = [
    "ChangeEvent",
    "ChangeListener",
    "ChangeNotifier",
    "GameStateRecord",
    "GameStore",
    "PlayerRecord",
    "PlayerUpdate",
    "RecordNotFoundError",
    "RoomFullError",
    "RoomRecord",
    "StoreError",
    "StoreUnavailableError",
    "VersionConflictError",
]
