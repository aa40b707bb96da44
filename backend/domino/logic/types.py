"""
Pydantic models for game logic data structures.

Contains typed models for seat configuration, client action payloads,
placed tiles, round results and player views that cross component boundaries.
"""

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from domino.logic.enums import AIPlayerStrategy, BoardSide, Direction, GameAction, GameEndReason, GamePhase
from domino.logic.tiles import Tile


class SeatConfig(BaseModel):
    """Who sits at a seat: a human bound to a user id, or an AI player."""

    model_config = ConfigDict(frozen=True)

    name: str
    user_id: str = ""
    ai_player_type: AIPlayerStrategy | None = None


# ---------------------------------------------------------------------------
# Client actions
# ---------------------------------------------------------------------------


class StartGameAction(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal[GameAction.START_GAME] = GameAction.START_GAME


class PlayTileAction(BaseModel):
    """Play a tile from hand; ``side`` may be omitted when only one end fits."""

    model_config = ConfigDict(frozen=True)

    type: Literal[GameAction.PLAY_TILE] = GameAction.PLAY_TILE
    tile_id: str = Field(min_length=1)
    side: BoardSide | None = None


class SelectSideAction(BaseModel):
    """Resolve a pending side choice for a tile that fits both ends."""

    model_config = ConfigDict(frozen=True)

    type: Literal[GameAction.SELECT_SIDE] = GameAction.SELECT_SIDE
    side: BoardSide


class PassTurnAction(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal[GameAction.PASS] = GameAction.PASS


class LeaveRoomAction(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal[GameAction.LEAVE_ROOM] = GameAction.LEAVE_ROOM


ClientAction = Annotated[
    StartGameAction | PlayTileAction | SelectSideAction | PassTurnAction | LeaveRoomAction,
    Field(discriminator="type"),
]

client_action_adapter: TypeAdapter[ClientAction] = TypeAdapter(ClientAction)


# ---------------------------------------------------------------------------
# Board
# ---------------------------------------------------------------------------


class PlacedTile(BaseModel):
    """
    A tile on the board with its layout placement.

    ``left_pip``/``right_pip`` are the tile's pips as read left-to-right along
    the chain. ``connection_pip`` is the pip that touched the chain when the
    tile was played (None for the opening tile).
    """

    model_config = ConfigDict(frozen=True)

    tile: Tile
    x: float
    y: float
    rotation: int
    side: BoardSide
    direction: Direction
    is_corner_turn: bool = False
    connection_pip: int | None = None
    left_pip: int
    right_pip: int
    sequence: int


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


class DominoResult(BaseModel):
    """A player emptied their hand."""

    model_config = ConfigDict(frozen=True)

    reason: Literal[GameEndReason.DOMINO] = GameEndReason.DOMINO
    winner_seat: int
    pip_totals: dict[int, int]
    score_changes: dict[int, int]
    hands: dict[int, list[Tile]]


class BlockedResult(BaseModel):
    """Nobody could play; lowest pip total wins, a tie leaves no winner."""

    model_config = ConfigDict(frozen=True)

    reason: Literal[GameEndReason.BLOCKED] = GameEndReason.BLOCKED
    winner_seat: int | None = None
    pip_totals: dict[int, int]
    score_changes: dict[int, int]
    hands: dict[int, list[Tile]]


GameResult = DominoResult | BlockedResult


# ---------------------------------------------------------------------------
# Views
# ---------------------------------------------------------------------------


class PlayerView(BaseModel):
    """One seat as seen by a viewer. ``hand`` is empty unless the viewer may see it."""

    seat: int
    name: str
    user_id: str = ""
    score: int
    is_current_player: bool
    is_connected: bool
    hand_count: int
    hand: list[Tile] = Field(default_factory=list)


class GameView(BaseModel):
    """Complete game state as visible to one seat."""

    game_id: str
    seat: int
    phase: GamePhase
    current_seat: int
    left_end: int | None
    right_end: int | None
    chain: list[PlacedTile]
    boneyard_count: int
    players: list[PlayerView]
    playable_tile_ids: list[str] = Field(default_factory=list)
    awaiting_side_choice: str | None = None
    winner_seat: int | None = None
    end_reason: GameEndReason | None = None
    version: int = 0


class GamePlayerInfo(BaseModel):
    """Basic player information for the game start message."""

    seat: int
    name: str
    is_ai_player: bool
