"""
Unit tests for end-of-game scoring.
"""

from domino.logic.enums import GameEndReason
from domino.logic.settings import GameSettings
from domino.logic.scoring import hand_pip_totals, score_blocked_game, score_domino_win
from domino.tests.conftest import create_turn_state, tile


class TestHandPipTotals:
    def test_totals_per_seat(self):
        state = create_turn_state([[tile(6, 6), tile(0, 1)], [], [tile(2, 3)], [tile(0, 0)]])
        assert hand_pip_totals(state) == {0: 13, 1: 0, 2: 5, 3: 0}


class TestScoreDominoWin:
    def test_winner_collects_remaining_pips(self):
        state = create_turn_state([[], [tile(6, 6)], [tile(1, 2)], [tile(0, 4)]])
        result = score_domino_win(state, 0)
        assert result.reason == GameEndReason.DOMINO
        assert result.winner_seat == 0
        assert result.score_changes == {0: 19, 1: 0, 2: 0, 3: 0}
        assert result.hands[1] == [tile(6, 6)]

    def test_scoring_disabled(self):
        state = create_turn_state(
            [[], [tile(6, 6)], [tile(1, 2)], [tile(0, 4)]],
            settings=GameSettings(score_domino_win=False),
        )
        result = score_domino_win(state, 0)
        assert result.score_changes == {0: 0, 1: 0, 2: 0, 3: 0}


class TestScoreBlockedGame:
    def test_unique_lowest_wins(self):
        state = create_turn_state([[tile(5, 6)], [tile(0, 1)], [tile(3, 3)], [tile(2, 4)]])
        result = score_blocked_game(state)
        assert result.reason == GameEndReason.BLOCKED
        assert result.winner_seat == 1
        # others hold 11 + 6 + 6, the winner's own 1 is subtracted
        assert result.score_changes == {0: 0, 1: 22, 2: 0, 3: 0}

    def test_tie_for_lowest_has_no_winner(self):
        state = create_turn_state([[tile(0, 2)], [tile(1, 1)], [tile(6, 6)], [tile(5, 5)]])
        result = score_blocked_game(state)
        assert result.winner_seat is None
        assert set(result.score_changes.values()) == {0}
        assert result.pip_totals == {0: 2, 1: 2, 2: 12, 3: 10}
