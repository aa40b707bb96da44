"""
End-of-game scoring.

A player who empties their hand scores the pips left in every other hand.
In a blocked game the player with the uniquely lowest pip total wins and
scores the other hands' pips less their own remainder; a tie for lowest
leaves the game without a winner and nobody scores.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from domino.logic.tiles import pip_total
from domino.logic.types import BlockedResult, DominoResult

if TYPE_CHECKING:
    from domino.logic.state import TurnState


def hand_pip_totals(state: TurnState) -> dict[int, int]:
    return {p.seat: pip_total(p.hand) for p in state.players}


def _revealed_hands(state: TurnState) -> dict[int, list]:
    return {p.seat: list(p.hand) for p in state.players}


def score_domino_win(state: TurnState, winner_seat: int) -> DominoResult:
    totals = hand_pip_totals(state)
    score_changes = {seat: 0 for seat in totals}
    if state.settings.score_domino_win:
        score_changes[winner_seat] = sum(total for seat, total in totals.items() if seat != winner_seat)
    return DominoResult(
        winner_seat=winner_seat,
        pip_totals=totals,
        score_changes=score_changes,
        hands=_revealed_hands(state),
    )


def score_blocked_game(state: TurnState) -> BlockedResult:
    totals = hand_pip_totals(state)
    score_changes = {seat: 0 for seat in totals}
    lowest = min(totals.values())
    lowest_seats = [seat for seat, total in totals.items() if total == lowest]

    winner_seat: int | None = None
    if len(lowest_seats) == 1:
        winner_seat = lowest_seats[0]
        others = sum(total for seat, total in totals.items() if seat != winner_seat)
        score_changes[winner_seat] = others - lowest

    return BlockedResult(
        winner_seat=winner_seat,
        pip_totals=totals,
        score_changes=score_changes,
        hands=_revealed_hands(state),
    )
