"""Run computer-only dominoes games and print the outcomes.

Local mode plays every seat with an AI player inside one LocalGameSession.
Synced mode seats four users in a room on a SQLite store and drives each
user's SyncedGameSession with the same AI decisions, exercising the
store round trip on every turn.

Usage:
    uv run python bin/simulate.py --games 10
    uv run python bin/simulate.py --games 3 --seed <64 hex chars> --strategy heaviest
    uv run python bin/simulate.py --synced --store backend/data/simulate.sqlite3
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from collections import Counter

from domino.logic.ai_player import AIPlayer
from domino.logic.enums import AIPlayerStrategy, GamePhase
from domino.logic.local_session import LocalGameSession
from domino.logic.rng import generate_seed, validate_seed_hex
from domino.logic.types import SeatConfig
from domino.session.rooms import create_room, join_room
from domino.session.settings import SessionSettings
from domino.session.synced import SyncedGameSession
from shared.db import Database, SqliteGameStore
from shared.logging import setup_logging

SEAT_NAMES = ("North", "East", "South", "West")
# every turn either removes a tile or passes; a game cannot outlast this
MAX_SYNCED_TURNS = 400


async def run_local_game(seed: str, strategy: AIPlayerStrategy) -> tuple[int | None, str, list[int]]:
    seats = [SeatConfig(name=name, ai_player_type=strategy) for name in SEAT_NAMES]
    session = LocalGameSession(seats, seed=seed)
    await session.start()
    state = session.state
    if state.phase != GamePhase.FINISHED:
        raise RuntimeError(f"game {session.game_id} did not finish")
    return state.winner_seat, str(state.end_reason), [p.score for p in state.players]


async def run_synced_game(store_path: str, strategy: AIPlayerStrategy) -> tuple[int | None, str, list[int]]:
    settings = SessionSettings(store_path=store_path)
    db = Database(settings.store_path)
    db.connect()
    store = SqliteGameStore(db)
    sessions: list[SyncedGameSession] = []
    try:
        user_ids = [f"user-{name.lower()}" for name in SEAT_NAMES]
        room, _ = await create_room(
            store, name="simulation", host_id=user_ids[0], host_name=SEAT_NAMES[0], settings=settings
        )
        for user_id, name in zip(user_ids[1:], SEAT_NAMES[1:], strict=True):
            await join_room(store, room.id, user_id=user_id, display_name=name, settings=settings)
        sessions = [SyncedGameSession(store, room.id, user_id, settings=settings) for user_id in user_ids]
        for session in sessions:
            await session.connect()

        await sessions[0].apply_action(user_ids[0], {"type": "start_game"})
        ai_player = AIPlayer(strategy)
        for _ in range(MAX_SYNCED_TURNS):
            await sessions[0].refresh()
            state = sessions[0].state
            if state is None or state.phase != GamePhase.PLAYING:
                break
            acting = sessions[state.current_seat]
            await acting.refresh()
            acting_state = acting.state
            if acting_state is None:
                break
            action = ai_player.get_action(acting_state, acting_state.current_seat)
            await acting.apply_action(acting.user_id, action)

        await sessions[0].refresh()
        final = sessions[0].state
        if final is None or final.phase != GamePhase.FINISHED:
            raise RuntimeError(f"room {room.id} did not finish")
        return final.winner_seat, str(final.end_reason), [p.score for p in final.players]
    finally:
        for session in sessions:
            await session.close()
        db.close()


async def main(args: argparse.Namespace) -> int:
    log_dir = SessionSettings().log_dir if args.log_to_file else None
    log_file = setup_logging(log_dir=log_dir, level=getattr(logging, args.log_level))
    if log_file is not None:
        print(f"logging to {log_file}")
    strategy = AIPlayerStrategy(args.strategy)
    if args.seed is not None:
        validate_seed_hex(args.seed)

    reasons: Counter[str] = Counter()
    for game_number in range(args.games):
        if args.synced:
            winner, reason, scores = await run_synced_game(args.store, strategy)
        else:
            seed = args.seed if args.seed is not None and args.games == 1 else generate_seed()
            winner, reason, scores = await run_local_game(seed, strategy)
        reasons[reason] += 1
        winner_name = SEAT_NAMES[winner] if winner is not None else "nobody"
        print(f"game {game_number + 1}: {reason:<8} winner={winner_name:<6} scores={scores}")

    print()
    print(", ".join(f"{reason}: {count}" for reason, count in sorted(reasons.items())))
    return 0


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Simulate computer-only dominoes games")
    parser.add_argument("--games", type=int, default=1, help="number of games to play")
    parser.add_argument("--seed", default=None, help="deal seed (64 hex chars), used when --games is 1")
    parser.add_argument(
        "--strategy",
        choices=[s.value for s in AIPlayerStrategy],
        default=AIPlayerStrategy.FIRST_PLAYABLE.value,
    )
    parser.add_argument("--synced", action="store_true", help="play through a SQLite-backed room")
    parser.add_argument("--store", default=":memory:", help="SQLite path for --synced")
    parser.add_argument("--log-level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    parser.add_argument("--log-to-file", action="store_true", help="also write logs under DOMINO_LOG_DIR")
    return parser.parse_args(argv)


if __name__ == "__main__":
    sys.exit(asyncio.run(main(parse_args())))
