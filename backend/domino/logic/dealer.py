"""
Deal a shuffled tile set into player hands and a boneyard.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, NamedTuple

from domino.logic.rng import shuffle_tiles

if TYPE_CHECKING:
    import random

    from domino.logic.tiles import Tile

DEFAULT_HAND_SIZE = 7


class DealResult(NamedTuple):
    """Hands in seat order plus the undealt remainder."""

    hands: tuple[tuple[Tile, ...], ...]
    boneyard: tuple[Tile, ...]


def deal(
    tiles: tuple[Tile, ...] | list[Tile],
    player_count: int,
    rng: random.Random,
    hand_size: int = DEFAULT_HAND_SIZE,
) -> DealResult:
    """
    Shuffle ``tiles`` and slice consecutive runs of ``hand_size`` into hands.

    Hand i receives shuffled[i * hand_size:(i + 1) * hand_size]; everything
    past the last hand becomes the boneyard. The input is not modified.

    Raises:
        ValueError: If the set cannot cover every hand.

    """
    if player_count < 1:
        raise ValueError(f"player_count must be positive, got {player_count}")
    if hand_size < 1:
        raise ValueError(f"hand_size must be positive, got {hand_size}")
    needed = player_count * hand_size
    if needed > len(tiles):
        raise ValueError(f"cannot deal {player_count} hands of {hand_size} from {len(tiles)} tiles")

    shuffled = shuffle_tiles(tiles, rng)
    hands = tuple(tuple(shuffled[i * hand_size : (i + 1) * hand_size]) for i in range(player_count))
    return DealResult(hands=hands, boneyard=tuple(shuffled[needed:]))
