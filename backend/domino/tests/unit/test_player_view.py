"""
Unit tests for per-seat game views: hidden hands and turn hints.
"""

from domino.logic.enums import GamePhase
from domino.logic.state import get_player_view
from domino.tests.conftest import create_turn_state, tile


def _state(**kwargs):
    hands = [[tile(5, 6), tile(0, 0)], [tile(2, 3)], [tile(4, 4), tile(1, 4)], [tile(1, 1)]]
    return create_turn_state(hands, left_end=3, right_end=5, **kwargs)


class TestGetPlayerView:
    def test_only_own_hand_visible(self):
        view = get_player_view(_state(), 2)
        assert view.seat == 2
        assert view.players[2].hand == [tile(4, 4), tile(1, 4)]
        for seat in (0, 1, 3):
            assert view.players[seat].hand == []
        assert [p.hand_count for p in view.players] == [2, 1, 2, 1]

    def test_serialized_view_has_no_foreign_tiles(self):
        dumped = get_player_view(_state(), 1).model_dump_json()
        assert tile(5, 6).id not in dumped
        assert tile(4, 4).id not in dumped
        assert tile(2, 3).id in dumped

    def test_playable_only_on_own_turn(self):
        assert get_player_view(_state(), 0).playable_tile_ids == [tile(5, 6).id]
        assert get_player_view(_state(), 1).playable_tile_ids == []

    def test_current_player_flag(self):
        view = get_player_view(_state(current_seat=3), 0)
        assert [p.is_current_player for p in view.players] == [False, False, False, True]

    def test_side_choice_only_shown_to_owner(self):
        state = _state(awaiting_side_choice=tile(5, 6).id)
        assert get_player_view(state, 0).awaiting_side_choice == tile(5, 6).id
        assert get_player_view(state, 1).awaiting_side_choice is None

    def test_finished_game_reveals_all_hands(self):
        view = get_player_view(_state(phase=GamePhase.FINISHED), 1)
        assert view.players[0].hand == [tile(5, 6), tile(0, 0)]
        assert view.playable_tile_ids == []
        assert not any(p.is_current_player for p in view.players)

    def test_board_fields(self):
        view = get_player_view(_state(version=7), 0)
        assert (view.left_end, view.right_end) == (3, 5)
        assert view.boneyard_count == 0
        assert view.version == 7
        assert view.phase == GamePhase.PLAYING
