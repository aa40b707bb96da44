"""
Unit tests for action dispatch and rule-violation conversion.
"""

from domino.logic.action_handlers import dispatch_action, parse_action
from domino.logic.enums import BoardSide, GameErrorCode
from domino.logic.events import ErrorEvent, TilePlayedEvent
from domino.logic.types import PassTurnAction, PlayTileAction, SelectSideAction, StartGameAction
from domino.tests.conftest import create_turn_state, tile


def _state():
    hands = [[tile(5, 6), tile(3, 5), tile(0, 0)], [tile(2, 2)], [tile(4, 4)], [tile(1, 1)]]
    return create_turn_state(hands, left_end=3, right_end=5)


def _error(result) -> ErrorEvent:
    assert result.new_state is None
    (event,) = result.events
    assert isinstance(event, ErrorEvent)
    return event


class TestParseAction:
    def test_parses_play_tile(self):
        action = parse_action({"type": "play_tile", "tile_id": "domino-3", "side": "left"})
        assert action == PlayTileAction(tile_id="domino-3", side=BoardSide.LEFT)

    def test_parses_pass(self):
        assert parse_action({"type": "pass"}) == PassTurnAction()


class TestDispatchAction:
    def test_accepted_play(self, layout):
        result = dispatch_action(_state(), layout, 0, PlayTileAction(tile_id=tile(5, 6).id))
        assert result.new_state is not None
        assert isinstance(result.events[0], TilePlayedEvent)

    def test_dict_payload(self, layout):
        result = dispatch_action(_state(), layout, 0, {"type": "play_tile", "tile_id": tile(5, 6).id})
        assert result.new_state is not None

    def test_invalid_payload(self, layout):
        event = _error(dispatch_action(_state(), layout, 0, {"type": "play_tile"}))
        assert event.code == GameErrorCode.VALIDATION_ERROR
        assert event.target == "seat_0"

    def test_unknown_type(self, layout):
        event = _error(dispatch_action(_state(), layout, 0, {"type": "draw"}))
        assert event.code == GameErrorCode.VALIDATION_ERROR

    def test_room_action_is_not_a_turn_action(self, layout):
        event = _error(dispatch_action(_state(), layout, 0, StartGameAction()))
        assert event.code == GameErrorCode.UNKNOWN_ACTION

    def test_not_your_turn(self, layout):
        event = _error(dispatch_action(_state(), layout, 2, PlayTileAction(tile_id=tile(4, 4).id)))
        assert event.code == GameErrorCode.NOT_YOUR_TURN
        assert event.target == "seat_2"

    def test_tile_not_in_hand(self, layout):
        event = _error(dispatch_action(_state(), layout, 0, PlayTileAction(tile_id=tile(6, 6).id)))
        assert event.code == GameErrorCode.TILE_NOT_IN_HAND

    def test_illegal_move(self, layout):
        event = _error(dispatch_action(_state(), layout, 0, PlayTileAction(tile_id=tile(0, 0).id)))
        assert event.code == GameErrorCode.ILLEGAL_MOVE

    def test_must_play_if_able(self, layout):
        event = _error(dispatch_action(_state(), layout, 0, PassTurnAction()))
        assert event.code == GameErrorCode.MUST_PLAY_IF_ABLE

    def test_select_side_without_pending(self, layout):
        event = _error(dispatch_action(_state(), layout, 0, SelectSideAction(side=BoardSide.LEFT)))
        assert event.code == GameErrorCode.INVALID_ACTION

    def test_ambiguous_play_returns_pending_state(self, layout):
        result = dispatch_action(_state(), layout, 0, PlayTileAction(tile_id=tile(3, 5).id))
        assert result.new_state is not None
        assert result.new_state.awaiting_side_choice == tile(3, 5).id
