"""
Translation between store records and the in-memory TurnState.

The store keeps hands, the chain, the boneyard and the turn order as JSON
text. This module is the only place that reads or writes that JSON.
Authoritative decoding is strict: malformed data raises CodecError.
Hand decoding for display (decode_hand_lenient) tolerates malformed or
already-decoded input and falls back to an empty hand.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import structlog
from pydantic import TypeAdapter, ValidationError

from domino.logic.enums import GameEndReason, GamePhase
from domino.logic.settings import GameSettings
from domino.logic.state import DominoPlayer, TurnState
from domino.logic.tiles import Tile
from domino.logic.types import PlacedTile
from shared.dal.models import GameStateRecord, PlayerUpdate

if TYPE_CHECKING:
    from collections.abc import Sequence

    from shared.dal.models import PlayerRecord

logger = structlog.get_logger()

_TILES: TypeAdapter[list[Tile]] = TypeAdapter(list[Tile])
_CHAIN: TypeAdapter[list[PlacedTile]] = TypeAdapter(list[PlacedTile])
_USER_IDS: TypeAdapter[list[str]] = TypeAdapter(list[str])


class CodecError(ValueError):
    """Stored JSON could not be decoded into game data."""


def encode_tiles(tiles: Sequence[Tile]) -> str:
    return _TILES.dump_json(list(tiles)).decode()


def decode_tiles(raw: str) -> tuple[Tile, ...]:
    try:
        return tuple(_TILES.validate_json(raw))
    except ValidationError as e:
        raise CodecError(f"invalid tile list: {e}") from e


def decode_hand_lenient(raw: str | list[Any] | None) -> list[Tile]:
    """Decode a hand that may be JSON text, a decoded list, or missing."""
    if raw is None:
        return []
    try:
        if isinstance(raw, str):
            return _TILES.validate_json(raw)
        return _TILES.validate_python(raw)
    except ValidationError as e:
        logger.warning("could not decode hand, treating as empty", error=str(e))
        return []


def encode_chain(chain: Sequence[PlacedTile]) -> str:
    return _CHAIN.dump_json(list(chain)).decode()


def decode_chain(raw: str) -> tuple[PlacedTile, ...]:
    try:
        return tuple(_CHAIN.validate_json(raw))
    except ValidationError as e:
        raise CodecError(f"invalid placed tile list: {e}") from e


def encode_turn_order(user_ids: Sequence[str]) -> str:
    return json.dumps(list(user_ids))


def decode_turn_order(raw: str) -> list[str]:
    try:
        return _USER_IDS.validate_json(raw)
    except ValidationError as e:
        raise CodecError(f"invalid turn order: {e}") from e


def records_to_state(
    room_id: str,
    players: Sequence[PlayerRecord],
    record: GameStateRecord | None,
    settings: GameSettings | None = None,
) -> TurnState:
    """
    Build a TurnState from store records.

    Seats follow join position. Without a game state record the room is
    still waiting and hands are empty.
    """
    ordered = sorted(players, key=lambda p: p.position)
    seat_by_user = {p.user_id: seat for seat, p in enumerate(ordered)}
    domino_players = tuple(
        DominoPlayer(
            seat=seat,
            name=p.display_name,
            user_id=p.user_id,
            hand=decode_tiles(p.hand) if record is not None else (),
            score=p.score,
            is_connected=p.is_connected,
        )
        for seat, p in enumerate(ordered)
    )
    settings = settings or GameSettings()
    if record is None:
        return TurnState(
            game_id=room_id,
            players=domino_players,
            turn_order=tuple(range(len(domino_players))),
            settings=settings,
        )

    try:
        turn_order = tuple(seat_by_user[user_id] for user_id in decode_turn_order(record.turn_order))
        current_seat = seat_by_user[record.current_player_id] if record.current_player_id else turn_order[0]
        winner_seat = seat_by_user[record.winner_id] if record.winner_id else None
    except (KeyError, IndexError) as e:
        raise CodecError(f"game state for room {room_id} references an unknown player: {e}") from e

    chain = decode_chain(record.placed_tiles)
    return TurnState(
        game_id=room_id,
        players=domino_players,
        turn_order=turn_order,
        current_seat=current_seat,
        left_end=record.left_end,
        right_end=record.right_end,
        chain=chain,
        boneyard=decode_tiles(record.boneyard),
        phase=GamePhase(record.phase),
        winner_seat=winner_seat,
        end_reason=GameEndReason(record.end_reason) if record.end_reason else None,
        placement_count=len(chain),
        seed=record.seed,
        settings=settings.model_copy(update={"num_players": len(domino_players)}),
        version=record.version,
    )


def state_to_records(state: TurnState) -> tuple[GameStateRecord, list[PlayerUpdate]]:
    """Encode a TurnState as the game state record plus per-player updates."""
    user_ids = {p.seat: p.user_id for p in state.players}
    record = GameStateRecord(
        room_id=state.game_id,
        left_end=state.left_end,
        right_end=state.right_end,
        placed_tiles=encode_chain(state.chain),
        current_player_id=user_ids[state.current_seat],
        turn_order=encode_turn_order([user_ids[seat] for seat in state.turn_order]),
        boneyard=encode_tiles(state.boneyard),
        phase=state.phase.value,
        winner_id=user_ids[state.winner_seat] if state.winner_seat is not None else None,
        end_reason=state.end_reason.value if state.end_reason else None,
        seed=state.seed,
        version=state.version,
    )
    updates = [
        PlayerUpdate(
            user_id=p.user_id,
            hand=encode_tiles(p.hand),
            score=p.score,
            is_current_player=state.phase == GamePhase.PLAYING and p.seat == state.current_seat,
        )
        for p in state.players
    ]
    return record, updates
