"""
Game state models for dominoes.

All state objects are frozen pydantic models. Every accepted action returns
a new TurnState; rejected actions leave the caller's state untouched.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, NamedTuple

from pydantic import BaseModel, ConfigDict, Field

from domino.logic.enums import GameEndReason, GamePhase
from domino.logic.rules import playable_tiles
from domino.logic.settings import GameSettings
from domino.logic.tiles import Tile, find_tile
from domino.logic.types import GameView, PlacedTile, PlayerView

if TYPE_CHECKING:
    from domino.logic.events import GameEvent


class DominoPlayer(BaseModel):
    """A seated player and their hand."""

    model_config = ConfigDict(frozen=True)

    seat: int
    name: str
    user_id: str = ""
    hand: tuple[Tile, ...] = ()
    score: int = 0
    is_connected: bool = True

    def find_tile(self, tile_id: str) -> Tile | None:
        return find_tile(self.hand, tile_id)


class TurnState(BaseModel):
    """
    Aggregate state of one game.

    ``turn_order`` is the fixed cyclic seat order; ``current_seat`` is always a
    member of it. ``chain`` is ordered left-to-right as on the table.
    ``awaiting_side_choice`` holds the id of a tile that fits both ends while
    its owner picks a side; the turn does not advance until it is resolved.
    """

    model_config = ConfigDict(frozen=True)

    game_id: str
    players: tuple[DominoPlayer, ...]
    turn_order: tuple[int, ...]
    current_seat: int = 0
    left_end: int | None = None
    right_end: int | None = None
    chain: tuple[PlacedTile, ...] = ()
    boneyard: tuple[Tile, ...] = ()
    phase: GamePhase = GamePhase.WAITING
    awaiting_side_choice: str | None = None
    winner_seat: int | None = None
    end_reason: GameEndReason | None = None
    placement_count: int = 0
    seed: str = ""
    settings: GameSettings = Field(default_factory=GameSettings)
    version: int = 0

    @property
    def current_player(self) -> DominoPlayer:
        return self.players[self.current_seat]

    @property
    def is_opening(self) -> bool:
        return self.left_end is None and self.right_end is None

    def seat_for_user(self, user_id: str) -> int | None:
        for player in self.players:
            if user_id and player.user_id == user_id:
                return player.seat
        return None


def get_player_view(state: TurnState, seat: int) -> GameView:
    """
    Return the visible game state for a specific seat.

    Each player can see:
    - Their own hand, and which of its tiles are playable on their turn
    - Every player's hand size, score and connectivity
    - The whole chain and both open ends
    - The boneyard size

    They cannot see other players' hands until the game is finished, when
    every hand is revealed.
    """
    reveal_all = state.phase == GamePhase.FINISHED
    is_viewer_turn = state.phase == GamePhase.PLAYING and state.current_seat == seat

    players_view = [
        PlayerView(
            seat=p.seat,
            name=p.name,
            user_id=p.user_id,
            score=p.score,
            is_current_player=state.phase == GamePhase.PLAYING and p.seat == state.current_seat,
            is_connected=p.is_connected,
            hand_count=len(p.hand),
            hand=list(p.hand) if reveal_all or p.seat == seat else [],
        )
        for p in state.players
    ]

    playable: list[str] = []
    if is_viewer_turn:
        hand = state.players[seat].hand
        playable = [t.id for t in playable_tiles(hand, state.left_end, state.right_end, state.settings.opening_rule)]

    return GameView(
        game_id=state.game_id,
        seat=seat,
        phase=state.phase,
        current_seat=state.current_seat,
        left_end=state.left_end,
        right_end=state.right_end,
        chain=list(state.chain),
        boneyard_count=len(state.boneyard),
        players=players_view,
        playable_tile_ids=playable,
        awaiting_side_choice=state.awaiting_side_choice if is_viewer_turn else None,
        winner_seat=state.winner_seat,
        end_reason=state.end_reason,
        version=state.version,
    )


class TurnResult(NamedTuple):
    """New state after an accepted action, plus the events it produced."""

    new_state: TurnState
    events: list[GameEvent]
