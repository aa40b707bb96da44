"""Persistence models for the data access layer.

Hands, placed tiles, turn order and boneyard are stored as JSON text;
encoding and decoding them is the session codec's job, not the store's.
"""

from datetime import UTC, datetime

from pydantic import BaseModel, Field


def utc_now() -> datetime:
    return datetime.now(tz=UTC)


class RoomRecord(BaseModel, frozen=True):
    """A multiplayer room."""

    id: str
    name: str
    host_id: str
    status: str = "waiting"  # "waiting" | "in_progress" | "finished"
    current_players: int = 0
    max_players: int = 4
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class PlayerRecord(BaseModel, frozen=True):
    """A seat in a room. ``hand`` is JSON and must only reach its owner."""

    id: str
    room_id: str
    user_id: str
    display_name: str
    position: int  # seat 0..3, join order
    hand: str = "[]"
    score: int = 0
    is_current_player: bool = False
    is_connected: bool = True
    joined_at: datetime = Field(default_factory=utc_now)


class GameStateRecord(BaseModel, frozen=True):
    """Shared game state for a room. ``version`` guards conditional writes."""

    room_id: str
    left_end: int | None = None
    right_end: int | None = None
    placed_tiles: str = "[]"
    current_player_id: str | None = None
    turn_order: str = "[]"  # user ids in seat order
    boneyard: str = "[]"
    phase: str = "waiting"  # "waiting" | "playing" | "finished"
    winner_id: str | None = None
    end_reason: str | None = None
    seed: str = ""
    version: int = 0
    updated_at: datetime = Field(default_factory=utc_now)


class PlayerUpdate(BaseModel, frozen=True):
    """Per-player fields written together with a game state."""

    user_id: str
    hand: str
    score: int
    is_current_player: bool


class ChangeEvent(BaseModel, frozen=True):
    """A row-level change notification. Carries no game data, only what changed."""

    table: str  # "rooms" | "room_players" | "game_states"
    room_id: str
    version: int | None = None
