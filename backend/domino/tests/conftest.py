from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from domino.logic.enums import GamePhase
from domino.logic.layout import LayoutBounds, create_layout_context
from domino.logic.settings import GameSettings
from domino.logic.state import DominoPlayer, TurnState
from domino.logic.tiles import Tile, create_tile_set
from domino.logic.types import SeatConfig

if TYPE_CHECKING:
    from collections.abc import Sequence

    from domino.logic.layout import LayoutContext
    from domino.logic.types import PlacedTile

_TILES_BY_PIPS = {(t.left, t.right): t for t in create_tile_set()}

# wide enough that a full chain never turns a corner
WIDE_BOUNDS = LayoutBounds(width=8000, height=8000)


# ============================================================================
# Test State Builder Helpers
# ============================================================================


def tile(a: int, b: int) -> Tile:
    """Return the canonical set tile with pips a and b, in either order."""
    return _TILES_BY_PIPS[(min(a, b), max(a, b))]


def tiles(*pairs: tuple[int, int]) -> tuple[Tile, ...]:
    return tuple(tile(a, b) for a, b in pairs)


def create_player(
    seat: int = 0,
    name: str | None = None,
    *,
    hand: Sequence[Tile] | None = None,
    user_id: str | None = None,
    score: int = 0,
    is_connected: bool = True,
) -> DominoPlayer:
    """Create a DominoPlayer with sensible defaults for testing."""
    return DominoPlayer(
        seat=seat,
        name=name if name is not None else f"Player{seat}",
        user_id=user_id if user_id is not None else f"user-{seat}",
        hand=tuple(hand) if hand is not None else (),
        score=score,
        is_connected=is_connected,
    )


def create_turn_state(
    hands: Sequence[Sequence[Tile]] | None = None,
    *,
    current_seat: int = 0,
    left_end: int | None = None,
    right_end: int | None = None,
    chain: Sequence[PlacedTile] = (),
    boneyard: Sequence[Tile] = (),
    phase: GamePhase = GamePhase.PLAYING,
    settings: GameSettings | None = None,
    awaiting_side_choice: str | None = None,
    version: int = 1,
) -> TurnState:
    """Create a TurnState with sensible defaults for testing."""
    hands = hands if hands is not None else [(), (), (), ()]
    players = tuple(create_player(seat, hand=hand) for seat, hand in enumerate(hands))
    return TurnState(
        game_id="test-game",
        players=players,
        turn_order=tuple(range(len(players))),
        current_seat=current_seat,
        left_end=left_end,
        right_end=right_end,
        chain=tuple(chain),
        boneyard=tuple(boneyard),
        phase=phase,
        awaiting_side_choice=awaiting_side_choice,
        placement_count=len(chain),
        settings=settings or GameSettings(num_players=len(players)),
        version=version,
    )


def seat_configs(count: int = 4, *, ai_from: int | None = None) -> list[SeatConfig]:
    """Seat configs with user ids user-0..user-N; seats from ``ai_from`` on are AI players."""
    from domino.logic.enums import AIPlayerStrategy

    return [
        SeatConfig(
            name=f"Player{seat}",
            user_id=f"user-{seat}",
            ai_player_type=AIPlayerStrategy.FIRST_PLAYABLE if ai_from is not None and seat >= ai_from else None,
        )
        for seat in range(count)
    ]


@pytest.fixture
def layout() -> LayoutContext:
    return create_layout_context(WIDE_BOUNDS)
