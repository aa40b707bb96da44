"""Domain event models and service event transport container.

Domain event classes are the canonical event types for the game logic layer.
ServiceEvent is the transport wrapper used to route events to clients.
convert_events() maps domain events into ServiceEvent containers with typed
routing targets.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from domino.logic.enums import BoardSide, GameErrorCode
from domino.logic.types import GamePlayerInfo, GameResult, PlacedTile

# ---------------------------------------------------------------------------
# Typed routing targets
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class BroadcastTarget:
    """Event should be sent to all players in the game."""


@dataclass(frozen=True)
class SeatTarget:
    """Event should be sent to a specific seat."""

    seat: int


@dataclass(frozen=True)
class PlayerTarget:
    """Event should be sent only to the requesting player, who may hold no seat."""

    user_id: str


EventTarget = BroadcastTarget | SeatTarget | PlayerTarget


def parse_event_target(value: str) -> EventTarget:
    """Parse a string target into a typed EventTarget."""
    if value == "all":
        return BroadcastTarget()
    if value.startswith("seat_"):
        seat = int(value.split("_")[1])
        if seat < 0:
            raise ValueError(f"invalid seat number in target: {value}")
        return SeatTarget(seat=seat)
    if value.startswith("player_"):
        user_id = value.removeprefix("player_")
        if not user_id:
            raise ValueError(f"missing user id in target: {value}")
        return PlayerTarget(user_id=user_id)
    raise ValueError(f"invalid target value: {value}")


def seat_target(seat: int) -> str:
    return f"seat_{seat}"


def player_target(user_id: str) -> str:
    return f"player_{user_id}"


# ---------------------------------------------------------------------------
# Event type enum
# ---------------------------------------------------------------------------


class EventType(StrEnum):
    """Types of game events."""

    GAME_STARTED = "game_started"
    TURN = "turn"
    TILE_PLAYED = "tile_played"
    SIDE_CHOICE_REQUIRED = "side_choice_required"
    TURN_PASSED = "turn_passed"
    GAME_END = "game_end"
    ERROR = "error"


# ---------------------------------------------------------------------------
# Domain event models
# ---------------------------------------------------------------------------


class GameEvent(BaseModel):
    """Base class for all domain game events."""

    model_config = ConfigDict(frozen=True)

    type: EventType
    target: str


class GameStartedEvent(GameEvent):
    """Event broadcast to all players when the tiles are dealt."""

    type: Literal[EventType.GAME_STARTED] = EventType.GAME_STARTED
    target: str = "all"
    game_id: str
    players: list[GamePlayerInfo]
    starting_seat: int
    boneyard_count: int


class TurnEvent(GameEvent):
    """Event sent to the player whose turn it is."""

    type: Literal[EventType.TURN] = EventType.TURN
    current_seat: int
    playable_tile_ids: list[str]
    left_end: int | None
    right_end: int | None


class TilePlayedEvent(GameEvent):
    """Event broadcast when a tile joins the chain."""

    type: Literal[EventType.TILE_PLAYED] = EventType.TILE_PLAYED
    target: str = "all"
    seat: int
    placed: PlacedTile
    left_end: int
    right_end: int
    hand_count: int


class SideChoiceRequiredEvent(GameEvent):
    """Event sent to a player whose tile fits both ends of the chain."""

    type: Literal[EventType.SIDE_CHOICE_REQUIRED] = EventType.SIDE_CHOICE_REQUIRED
    seat: int
    tile_id: str
    sides: list[BoardSide]


class TurnPassedEvent(GameEvent):
    """Event broadcast when a player without a legal move passes."""

    type: Literal[EventType.TURN_PASSED] = EventType.TURN_PASSED
    target: str = "all"
    seat: int


class GameEndedEvent(GameEvent):
    """Event broadcast when the game ends; every hand is revealed."""

    type: Literal[EventType.GAME_END] = EventType.GAME_END
    target: str = "all"
    result: GameResult = Field(discriminator="reason")


class ErrorEvent(GameEvent):
    """Event sent to a player when an action is rejected."""

    type: Literal[EventType.ERROR] = EventType.ERROR
    code: GameErrorCode
    message: str


Event = (
    GameStartedEvent
    | TurnEvent
    | TilePlayedEvent
    | SideChoiceRequiredEvent
    | TurnPassedEvent
    | GameEndedEvent
    | ErrorEvent
)


# ---------------------------------------------------------------------------
# Service event transport container
# ---------------------------------------------------------------------------


class ServiceEvent(BaseModel):
    """Event transport container for the game session layer.

    Uses typed internal targets (BroadcastTarget / SeatTarget / PlayerTarget) for routing.
    """

    model_config = {"arbitrary_types_allowed": True}

    event: EventType
    data: GameEvent
    target: EventTarget = BroadcastTarget()

    @model_validator(mode="after")
    def _ensure_event_matches_data(self) -> ServiceEvent:
        if self.event.value != self.data.type.value:
            raise ValueError(
                f"ServiceEvent.event '{self.event.value}' does not match data.type '{self.data.type.value}'",
            )
        return self


# ---------------------------------------------------------------------------
# Event conversion helpers
# ---------------------------------------------------------------------------


def convert_events(raw_events: list[GameEvent]) -> list[ServiceEvent]:
    """Convert typed events to service events with typed targets."""
    return [
        ServiceEvent(event=event.type, data=event, target=parse_event_target(event.target)) for event in raw_events
    ]


def events_for_seat(events: list[ServiceEvent], seat: int) -> list[ServiceEvent]:
    """Keep broadcast events and events addressed to ``seat``."""
    return [e for e in events if isinstance(e.target, BroadcastTarget) or e.target == SeatTarget(seat=seat)]

