"""
Turn processing: playing a tile, resolving a side choice and passing.

Every function validates before building anything, so a rejected action
raises a GameRuleError and leaves both the state and the layout context
untouched. Accepted actions return a TurnResult with a new state.

Boneyard tiles are never drawn: a player without a legal move passes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from domino.logic.enums import BoardSide, GameEndReason, GamePhase
from domino.logic.events import (
    GameEvent,
    SideChoiceRequiredEvent,
    TilePlayedEvent,
    TurnPassedEvent,
    seat_target,
)
from domino.logic.exceptions import (
    AmbiguousSideRequiredError,
    GameNotInProgressError,
    IllegalMoveError,
    InvalidActionError,
    MustPlayIfAbleError,
    NotYourTurnError,
    TileNotInHandError,
)
from domino.logic.game import create_turn_event, finish_game
from domino.logic.layout import calculate_next_position
from domino.logic.rules import (
    choose_side,
    has_legal_move,
    opening_tiles,
    playable_sides,
    playable_tiles,
    resolve_orientation,
)
from domino.logic.state import TurnResult
from domino.logic.state_utils import advance_turn, remove_tile_from_hand
from domino.logic.tiles import tile_str
from domino.logic.types import PlacedTile

if TYPE_CHECKING:
    from domino.logic.layout import LayoutContext
    from domino.logic.state import TurnState
    from domino.logic.tiles import Tile

logger = structlog.get_logger()


def _require_turn(state: TurnState, seat: int) -> None:
    if state.phase != GamePhase.PLAYING:
        raise GameNotInProgressError(f"game is {state.phase}, not in progress")
    if seat != state.current_seat:
        raise NotYourTurnError(f"seat {seat} acted on seat {state.current_seat}'s turn")


def play_tile(
    state: TurnState,
    layout: LayoutContext,
    seat: int,
    tile_id: str,
    side: BoardSide | None = None,
) -> TurnResult:
    """
    Play ``tile_id`` from ``seat``'s hand.

    A tile that fits both ends with no side given does not reach the board:
    the state records it as awaiting a side choice and only its owner is told.
    """
    _require_turn(state, seat)
    tile = state.players[seat].find_tile(tile_id)
    if tile is None:
        raise TileNotInHandError(f"tile {tile_id} is not in hand of seat {seat}")

    if state.is_opening:
        allowed = opening_tiles(state.players[seat].hand, state.settings.opening_rule)
        if tile not in allowed:
            required = ", ".join(tile_str(t) for t in allowed)
            raise IllegalMoveError(f"the game must open with {required}")
        return _apply_play(state, layout, seat, tile, BoardSide.RIGHT)

    try:
        chosen = choose_side(tile, state.left_end, state.right_end, side)
    except AmbiguousSideRequiredError:
        return _await_side_choice(state, seat, tile)
    return _apply_play(state, layout, seat, tile, chosen)


def select_side(state: TurnState, layout: LayoutContext, seat: int, side: BoardSide) -> TurnResult:
    """Place the tile awaiting a side choice on ``side``."""
    _require_turn(state, seat)
    if state.awaiting_side_choice is None:
        raise InvalidActionError("no tile is waiting for a side choice")
    tile = state.players[seat].find_tile(state.awaiting_side_choice)
    if tile is None:
        raise TileNotInHandError(f"tile {state.awaiting_side_choice} is not in hand of seat {seat}")
    chosen = choose_side(tile, state.left_end, state.right_end, side)
    return _apply_play(state, layout, seat, tile, chosen)


def pass_turn(state: TurnState, seat: int) -> TurnResult:
    """
    Pass the turn. Only allowed when the player has no legal move.

    When no player can move the game ends blocked.
    """
    _require_turn(state, seat)
    hand = state.players[seat].hand
    if playable_tiles(hand, state.left_end, state.right_end, state.settings.opening_rule):
        raise MustPlayIfAbleError(f"seat {seat} holds a playable tile")

    events: list[GameEvent] = [TurnPassedEvent(seat=seat)]
    if not any(has_legal_move(p.hand, state.left_end, state.right_end) for p in state.players):
        logger.info("game blocked", game_id=state.game_id, seat=seat)
        bumped = state.model_copy(update={"version": state.version + 1})
        finished, end_events = finish_game(bumped, GameEndReason.BLOCKED)
        return TurnResult(finished, events + end_events)

    new_state = advance_turn(state).model_copy(update={"version": state.version + 1})
    logger.info("turn passed", game_id=state.game_id, seat=seat, next_seat=new_state.current_seat)
    events.append(create_turn_event(new_state))
    return TurnResult(new_state, events)


def _await_side_choice(state: TurnState, seat: int, tile: Tile) -> TurnResult:
    new_state = state.model_copy(update={"awaiting_side_choice": tile.id})
    sides = list(playable_sides(tile, state.left_end, state.right_end))
    logger.info("side choice required", game_id=state.game_id, seat=seat, tile=tile_str(tile))
    return TurnResult(
        new_state,
        [SideChoiceRequiredEvent(seat=seat, tile_id=tile.id, sides=sides, target=seat_target(seat))],
    )


def _apply_play(state: TurnState, layout: LayoutContext, seat: int, tile: Tile, side: BoardSide) -> TurnResult:
    is_first = state.is_opening
    if is_first:
        left_pip, right_pip = tile.left, tile.right
        connection_pip = None
        left_end, right_end = tile.left, tile.right
    else:
        target_end = state.left_end if side == BoardSide.LEFT else state.right_end
        if target_end is None:
            raise IllegalMoveError(f"{side} end is not open")
        left_pip, right_pip = resolve_orientation(tile, target_end, side)
        connection_pip = target_end
        left_end = left_pip if side == BoardSide.LEFT else state.left_end
        right_end = right_pip if side == BoardSide.RIGHT else state.right_end

    # layout is advanced only once the play is known to be legal
    position = calculate_next_position(layout, tile, side, is_first=is_first)
    placed = PlacedTile(
        tile=tile,
        x=position.x,
        y=position.y,
        rotation=position.rotation,
        side=side,
        direction=position.direction,
        is_corner_turn=position.is_corner_turn,
        connection_pip=connection_pip,
        left_pip=left_pip,
        right_pip=right_pip,
        sequence=state.placement_count,
    )
    chain = (placed, *state.chain) if side == BoardSide.LEFT else (*state.chain, placed)

    new_state, _ = remove_tile_from_hand(state, seat, tile.id)
    new_state = new_state.model_copy(
        update={
            "chain": chain,
            "left_end": left_end,
            "right_end": right_end,
            "placement_count": state.placement_count + 1,
            "awaiting_side_choice": None,
            "version": state.version + 1,
        }
    )
    hand_count = len(new_state.players[seat].hand)
    logger.info(
        "tile played",
        game_id=state.game_id,
        seat=seat,
        tile=tile_str(tile),
        side=side,
        left_end=left_end,
        right_end=right_end,
    )
    events: list[GameEvent] = [
        TilePlayedEvent(seat=seat, placed=placed, left_end=left_end, right_end=right_end, hand_count=hand_count)
    ]

    if hand_count == 0:
        finished, end_events = finish_game(new_state, GameEndReason.DOMINO, winner_seat=seat)
        return TurnResult(finished, events + end_events)

    new_state = advance_turn(new_state)
    events.append(create_turn_event(new_state))
    return TurnResult(new_state, events)
