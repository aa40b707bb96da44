"""
Action handlers for in-game actions.

Each handler validates input against the current TurnState and returns an
ActionResult. Rule violations raised by the turn logic are caught here and
converted to an ErrorEvent addressed to the acting seat; the state is then
left unchanged (new_state is None).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, NamedTuple

import structlog
from pydantic import ValidationError

from domino.logic.enums import GameErrorCode
from domino.logic.events import ErrorEvent, GameEvent, seat_target
from domino.logic.exceptions import GameRuleError
from domino.logic.turn import pass_turn, play_tile, select_side
from domino.logic.types import (
    ClientAction,
    PassTurnAction,
    PlayTileAction,
    SelectSideAction,
    client_action_adapter,
)

if TYPE_CHECKING:
    from domino.logic.layout import LayoutContext
    from domino.logic.state import TurnResult, TurnState

logger = structlog.get_logger()


class ActionResult(NamedTuple):
    """Result of an action handler execution."""

    events: list[GameEvent]
    new_state: TurnState | None = None


def create_error_result(seat: int, code: GameErrorCode, message: str) -> ActionResult:
    return ActionResult([ErrorEvent(code=code, message=message, target=seat_target(seat))])


def parse_action(data: dict[str, Any]) -> ClientAction:
    """Validate a raw client payload into a typed action. Raises ValidationError."""
    return client_action_adapter.validate_python(data)


def handle_play_tile(state: TurnState, layout: LayoutContext, seat: int, action: PlayTileAction) -> TurnResult:
    return play_tile(state, layout, seat, action.tile_id, action.side)


def handle_select_side(state: TurnState, layout: LayoutContext, seat: int, action: SelectSideAction) -> TurnResult:
    return select_side(state, layout, seat, action.side)


def handle_pass(state: TurnState, seat: int) -> TurnResult:
    return pass_turn(state, seat)


def dispatch_action(
    state: TurnState,
    layout: LayoutContext,
    seat: int,
    action: ClientAction | dict[str, Any],
) -> ActionResult:
    """
    Route an in-game action to its handler.

    Room-level actions (start, leave) are handled by the session and are
    reported here as unknown.
    """
    if isinstance(action, dict):
        try:
            action = parse_action(action)
        except ValidationError as e:
            logger.warning("invalid action payload", game_id=state.game_id, seat=seat, error=str(e))
            return create_error_result(seat, GameErrorCode.VALIDATION_ERROR, f"invalid action data: {e}")

    try:
        if isinstance(action, PlayTileAction):
            result = handle_play_tile(state, layout, seat, action)
        elif isinstance(action, SelectSideAction):
            result = handle_select_side(state, layout, seat, action)
        elif isinstance(action, PassTurnAction):
            result = handle_pass(state, seat)
        else:
            logger.warning("unknown action", game_id=state.game_id, seat=seat, action=action.type)
            return create_error_result(seat, GameErrorCode.UNKNOWN_ACTION, f"unknown action: {action.type}")
    except GameRuleError as e:
        logger.info("action rejected", game_id=state.game_id, seat=seat, action=action.type, code=e.code)
        return create_error_result(seat, e.code, str(e))

    return ActionResult(result.events, result.new_state)
