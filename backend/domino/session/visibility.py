"""Hand redaction for player lists and states leaving the session."""

from __future__ import annotations

from typing import TYPE_CHECKING

from domino.logic.enums import GamePhase
from domino.logic.types import PlayerView
from domino.session.codec import decode_hand_lenient

if TYPE_CHECKING:
    from collections.abc import Sequence

    from domino.logic.state import TurnState
    from shared.dal.models import PlayerRecord


def redact_player_records(
    records: Sequence[PlayerRecord],
    viewer_id: str,
    *,
    reveal_all: bool = False,
) -> list[PlayerView]:
    """
    Convert player records to views for ``viewer_id``.

    Only the viewer's own hand is included unless ``reveal_all`` is set
    (finished games). Every view carries ``hand_count``.
    """
    views: list[PlayerView] = []
    for record in sorted(records, key=lambda r: r.position):
        hand = decode_hand_lenient(record.hand)
        visible = reveal_all or record.user_id == viewer_id
        views.append(
            PlayerView(
                seat=record.position,
                name=record.display_name,
                user_id=record.user_id,
                score=record.score,
                is_current_player=record.is_current_player,
                is_connected=record.is_connected,
                hand_count=len(hand),
                hand=hand if visible else [],
            )
        )
    return views


def redact_state(state: TurnState, user_id: str) -> TurnState:
    """
    Return ``state`` as known to ``user_id``: other hands and the boneyard are emptied.

    A finished game is returned unchanged, matching the revealed roster.
    """
    if state.phase == GamePhase.FINISHED:
        return state
    players = tuple(p if p.user_id == user_id else p.model_copy(update={"hand": ()}) for p in state.players)
    return state.model_copy(update={"players": players, "boneyard": ()})
