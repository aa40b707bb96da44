"""
Immutable state update utilities using Pydantic model_copy.

These functions never mutate the input state - they always return new
state objects with the requested changes applied.
"""

from domino.logic.exceptions import TileNotInHandError
from domino.logic.state import DominoPlayer, TurnState
from domino.logic.tiles import Tile

_PLAYER_FIELDS = set(DominoPlayer.model_fields)


def update_player(state: TurnState, seat: int, **updates: object) -> TurnState:
    """
    Return new state with updated player at seat.

    Raises:
        ValueError: If seat is out of bounds or update fields are invalid

    """
    if not (0 <= seat < len(state.players)):
        raise ValueError(f"Invalid seat {seat}, expected 0-{len(state.players) - 1}")
    invalid_fields = set(updates) - _PLAYER_FIELDS
    if invalid_fields:
        raise ValueError(f"Invalid player fields: {invalid_fields}")
    players = list(state.players)
    players[seat] = state.players[seat].model_copy(update=updates)
    return state.model_copy(update={"players": tuple(players)})


def remove_tile_from_hand(state: TurnState, seat: int, tile_id: str) -> tuple[TurnState, Tile]:
    """Return new state without the tile in the seat's hand, plus the removed tile."""
    player = state.players[seat]
    tile = player.find_tile(tile_id)
    if tile is None:
        raise TileNotInHandError(f"tile {tile_id} is not in hand of seat {seat}")
    new_hand = tuple(t for t in player.hand if t.id != tile_id)
    return update_player(state, seat, hand=new_hand), tile


def next_seat(state: TurnState, seat: int | None = None) -> int:
    """Seat after ``seat`` (default: the current seat) in the fixed turn order."""
    seat = state.current_seat if seat is None else seat
    index = state.turn_order.index(seat)
    return state.turn_order[(index + 1) % len(state.turn_order)]


def advance_turn(state: TurnState) -> TurnState:
    """Return new state with the turn passed to the next seat, clearing any pending side choice."""
    return state.model_copy(update={"current_seat": next_seat(state), "awaiting_side_choice": None})
