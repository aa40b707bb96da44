"""
Unit tests for the pure rule functions: matching, side choice, orientation
and who opens the game.
"""

import pytest

from domino.logic.enums import BoardSide, OpeningRule
from domino.logic.exceptions import AmbiguousSideRequiredError, IllegalMoveError
from domino.logic.rules import (
    can_play,
    choose_side,
    find_starting_player,
    has_legal_move,
    legal_moves,
    opening_tiles,
    playable_sides,
    playable_tiles,
    resolve_orientation,
    tile_rank,
)
from domino.tests.conftest import tile


class TestCanPlay:
    def test_empty_chain_accepts_anything(self):
        assert can_play(tile(1, 2), None, None) is True

    def test_matches_either_end(self):
        assert can_play(tile(1, 3), 3, 5) is True
        assert can_play(tile(5, 6), 3, 5) is True

    def test_no_match(self):
        assert can_play(tile(1, 2), 3, 5) is False


class TestPlayableSides:
    def test_empty_chain_reports_right(self):
        assert playable_sides(tile(4, 4), None, None) == (BoardSide.RIGHT,)

    def test_single_side(self):
        assert playable_sides(tile(3, 6), 3, 5) == (BoardSide.LEFT,)
        assert playable_sides(tile(5, 6), 3, 5) == (BoardSide.RIGHT,)

    def test_both_sides(self):
        assert playable_sides(tile(3, 5), 3, 5) == (BoardSide.LEFT, BoardSide.RIGHT)
        assert playable_sides(tile(2, 4), 4, 4) == (BoardSide.LEFT, BoardSide.RIGHT)


class TestChooseSide:
    def test_single_match_needs_no_side(self):
        assert choose_side(tile(3, 6), 3, 5) == BoardSide.LEFT

    def test_empty_chain_goes_right(self):
        assert choose_side(tile(6, 6), None, None) == BoardSide.RIGHT

    def test_ambiguous_without_side_raises(self):
        with pytest.raises(AmbiguousSideRequiredError):
            choose_side(tile(2, 4), 4, 4)

    def test_ambiguous_with_side(self):
        assert choose_side(tile(2, 4), 4, 4, BoardSide.LEFT) == BoardSide.LEFT
        assert choose_side(tile(2, 4), 4, 4, BoardSide.RIGHT) == BoardSide.RIGHT

    def test_side_that_does_not_match(self):
        with pytest.raises(IllegalMoveError):
            choose_side(tile(3, 6), 3, 5, BoardSide.RIGHT)

    def test_no_match(self):
        with pytest.raises(IllegalMoveError):
            choose_side(tile(0, 1), 3, 5)


class TestResolveOrientation:
    def test_right_side_puts_matching_pip_first(self):
        assert resolve_orientation(tile(2, 5), 5, BoardSide.RIGHT) == (5, 2)

    def test_left_side_puts_matching_pip_last(self):
        assert resolve_orientation(tile(2, 5), 2, BoardSide.LEFT) == (5, 2)
        assert resolve_orientation(tile(2, 5), 5, BoardSide.LEFT) == (2, 5)

    def test_double(self):
        assert resolve_orientation(tile(4, 4), 4, BoardSide.LEFT) == (4, 4)

    def test_non_matching_raises(self):
        with pytest.raises(IllegalMoveError):
            resolve_orientation(tile(2, 5), 3, BoardSide.RIGHT)


class TestTileRank:
    def test_pip_total_then_larger_pip(self):
        assert tile_rank(tile(1, 5)) == (6, 5)
        assert tile_rank(tile(0, 6)) > tile_rank(tile(2, 4))
        assert tile_rank(tile(5, 6)) > tile_rank(tile(0, 6))


class TestFindStartingPlayer:
    def test_highest_double_starts(self):
        hands = [
            [tile(5, 5), tile(0, 1)],
            [tile(6, 6)],
            [tile(5, 6)],
            [tile(3, 3)],
        ]
        assert find_starting_player(hands) == 1

    def test_double_beats_higher_regular_tile(self):
        hands = [[tile(5, 6)], [tile(0, 0)], [tile(4, 6)], []]
        assert find_starting_player(hands) == 1

    def test_highest_tile_without_doubles(self):
        hands = [[tile(0, 1), tile(2, 3)], [tile(4, 6)], [tile(5, 6)], [tile(1, 4)]]
        assert find_starting_player(hands) == 2

    def test_equal_pip_total_prefers_larger_pip(self):
        hands = [[tile(2, 4)], [tile(1, 5)], [tile(0, 6)]]
        assert find_starting_player(hands) == 2

    def test_all_empty_starts_at_zero(self):
        assert find_starting_player([[], [], [], []]) == 0


class TestOpeningTiles:
    def test_highest_double(self):
        hand = [tile(1, 1), tile(5, 6), tile(4, 4)]
        assert opening_tiles(hand, OpeningRule.HIGHEST_DOUBLE) == (tile(4, 4),)

    def test_highest_tile_without_double(self):
        hand = [tile(1, 2), tile(5, 6), tile(0, 4)]
        assert opening_tiles(hand, OpeningRule.HIGHEST_DOUBLE) == (tile(5, 6),)

    def test_any_tile(self):
        hand = [tile(1, 2), tile(5, 6)]
        assert opening_tiles(hand, OpeningRule.ANY_TILE) == (tile(1, 2), tile(5, 6))

    def test_empty_hand(self):
        assert opening_tiles([], OpeningRule.HIGHEST_DOUBLE) == ()


class TestLegalMoves:
    def test_filters_hand(self):
        hand = [tile(0, 1), tile(3, 6), tile(5, 5)]
        assert legal_moves(hand, 3, 5) == (tile(3, 6), tile(5, 5))
        assert has_legal_move(hand, 3, 5) is True

    def test_blocked_hand(self):
        assert has_legal_move([tile(0, 1), tile(1, 2)], 4, 6) is False

    def test_playable_tiles_applies_opening_rule_only_on_empty_chain(self):
        hand = [tile(1, 1), tile(6, 6), tile(1, 6)]
        assert playable_tiles(hand, None, None, OpeningRule.HIGHEST_DOUBLE) == (tile(6, 6),)
        assert playable_tiles(hand, 1, 2, OpeningRule.HIGHEST_DOUBLE) == (tile(1, 1), tile(1, 6))
