"""
Game lifecycle: seating, dealing the opening hands and finishing the game.

Turn-by-turn play lives in turn.py; this module owns the transitions into
and out of the playing phase.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from domino.logic.dealer import deal
from domino.logic.enums import GameEndReason, GamePhase
from domino.logic.events import GameEndedEvent, GameEvent, GameStartedEvent, TurnEvent, seat_target
from domino.logic.exceptions import InvalidActionError
from domino.logic.rng import create_deal_rng, generate_seed
from domino.logic.rules import find_starting_player, playable_tiles
from domino.logic.scoring import score_blocked_game, score_domino_win
from domino.logic.settings import GameSettings, validate_settings
from domino.logic.state import DominoPlayer, TurnResult, TurnState
from domino.logic.tiles import create_tile_set
from domino.logic.types import GamePlayerInfo

if TYPE_CHECKING:
    from collections.abc import Sequence

    from domino.logic.tiles import Tile
    from domino.logic.types import GameResult, SeatConfig

logger = structlog.get_logger()


def init_game(
    seat_configs: Sequence[SeatConfig],
    *,
    game_id: str,
    settings: GameSettings | None = None,
    seed: str | None = None,
) -> TurnState:
    """
    Seat the players and return a waiting game.

    Seats are assigned in join order; the turn order is fixed to seat order.
    """
    settings = settings or GameSettings(num_players=len(seat_configs))
    if len(seat_configs) != settings.num_players:
        raise ValueError(f"expected {settings.num_players} seats, got {len(seat_configs)}")
    validate_settings(settings)

    players = tuple(
        DominoPlayer(seat=seat, name=config.name, user_id=config.user_id) for seat, config in enumerate(seat_configs)
    )
    return TurnState(
        game_id=game_id,
        players=players,
        turn_order=tuple(range(len(players))),
        seed=seed if seed is not None else generate_seed(),
        settings=settings,
    )


def start_game(
    state: TurnState,
    *,
    hands: Sequence[Sequence[Tile]] | None = None,
    ai_seats: set[int] | None = None,
) -> TurnResult:
    """
    Deal and move the game from waiting to playing.

    When ``hands`` is given it replaces the shuffled deal (tests and replays);
    the boneyard then holds every tile not dealt.
    """
    if state.phase != GamePhase.WAITING:
        raise InvalidActionError(f"game {state.game_id} already started")

    if hands is None:
        dealt = deal(
            create_tile_set(),
            len(state.players),
            create_deal_rng(state.seed),
            hand_size=state.settings.hand_size,
        )
        hand_tuples = dealt.hands
        boneyard = dealt.boneyard
    else:
        if len(hands) != len(state.players):
            raise ValueError(f"expected {len(state.players)} hands, got {len(hands)}")
        hand_tuples = tuple(tuple(h) for h in hands)
        dealt_ids = {t.id for h in hand_tuples for t in h}
        boneyard = tuple(t for t in create_tile_set() if t.id not in dealt_ids)

    starting_seat = state.turn_order[find_starting_player([hand_tuples[seat] for seat in state.turn_order])]
    players = tuple(p.model_copy(update={"hand": hand_tuples[p.seat]}) for p in state.players)
    new_state = state.model_copy(
        update={
            "players": players,
            "boneyard": boneyard,
            "current_seat": starting_seat,
            "left_end": None,
            "right_end": None,
            "chain": (),
            "placement_count": 0,
            "phase": GamePhase.PLAYING,
            "version": state.version + 1,
        }
    )
    logger.info("game started", game_id=state.game_id, starting_seat=starting_seat, boneyard=len(boneyard))

    ai_seats = ai_seats or set()
    events: list[GameEvent] = [
        GameStartedEvent(
            game_id=state.game_id,
            players=[GamePlayerInfo(seat=p.seat, name=p.name, is_ai_player=p.seat in ai_seats) for p in players],
            starting_seat=starting_seat,
            boneyard_count=len(boneyard),
        ),
        create_turn_event(new_state),
    ]
    return TurnResult(new_state, events)


def create_turn_event(state: TurnState) -> TurnEvent:
    """Tell the current player which of their tiles they may play."""
    hand = state.current_player.hand
    playable = playable_tiles(hand, state.left_end, state.right_end, state.settings.opening_rule)
    return TurnEvent(
        current_seat=state.current_seat,
        playable_tile_ids=[t.id for t in playable],
        left_end=state.left_end,
        right_end=state.right_end,
        target=seat_target(state.current_seat),
    )


def finish_game(state: TurnState, reason: GameEndReason, winner_seat: int | None = None) -> TurnResult:
    """Score the game, reveal every hand and move to the finished phase."""
    result: GameResult
    if reason == GameEndReason.DOMINO:
        if winner_seat is None:
            raise ValueError("a domino finish needs a winner")
        result = score_domino_win(state, winner_seat)
    else:
        result = score_blocked_game(state)

    players = tuple(
        p.model_copy(update={"score": p.score + result.score_changes.get(p.seat, 0)}) for p in state.players
    )
    new_state = state.model_copy(
        update={
            "players": players,
            "phase": GamePhase.FINISHED,
            "winner_seat": result.winner_seat,
            "end_reason": reason,
            "awaiting_side_choice": None,
        }
    )
    logger.info("game finished", game_id=state.game_id, reason=reason, winner_seat=result.winner_seat)
    return TurnResult(new_state, [GameEndedEvent(result=result)])
