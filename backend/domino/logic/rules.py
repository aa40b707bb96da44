"""
Pure dominoes rule functions.

Nothing in this module touches game state; every function takes tiles and
chain ends and answers a question about them. Chain ends are ``None``
until the first tile is placed.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from domino.logic.enums import BoardSide, OpeningRule
from domino.logic.exceptions import AmbiguousSideRequiredError, IllegalMoveError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from domino.logic.tiles import Tile


def is_double(tile: Tile) -> bool:
    return tile.left == tile.right


def tile_rank(tile: Tile) -> tuple[int, int]:
    """Ordering key for "highest tile": pip total, then the larger pip."""
    return tile.pip_total, max(tile.left, tile.right)


def can_play(tile: Tile, left_end: int | None, right_end: int | None) -> bool:
    """A tile is playable on an empty chain, or when either pip matches an open end."""
    if left_end is None and right_end is None:
        return True
    return (left_end is not None and tile.has_pip(left_end)) or (right_end is not None and tile.has_pip(right_end))


def playable_sides(tile: Tile, left_end: int | None, right_end: int | None) -> tuple[BoardSide, ...]:
    """
    Return the ends the tile can be attached to.

    An empty chain has no ends yet; the opening tile is reported as a
    right-side play.
    """
    if left_end is None and right_end is None:
        return (BoardSide.RIGHT,)
    sides: list[BoardSide] = []
    if left_end is not None and tile.has_pip(left_end):
        sides.append(BoardSide.LEFT)
    if right_end is not None and tile.has_pip(right_end):
        sides.append(BoardSide.RIGHT)
    return tuple(sides)


def choose_side(
    tile: Tile,
    left_end: int | None,
    right_end: int | None,
    side: BoardSide | None = None,
) -> BoardSide:
    """
    Resolve the end a tile will be played on.

    Raises:
        IllegalMoveError: tile matches no end, or the requested side does not accept it
        AmbiguousSideRequiredError: tile matches both ends and no side was given

    """
    sides = playable_sides(tile, left_end, right_end)
    if not sides:
        raise IllegalMoveError(f"tile {tile.left}-{tile.right} does not match {left_end} or {right_end}")
    if left_end is None and right_end is None:
        return BoardSide.RIGHT
    if side is not None:
        if side not in sides:
            end = left_end if side == BoardSide.LEFT else right_end
            raise IllegalMoveError(f"tile {tile.left}-{tile.right} does not match {side} end {end}")
        return side
    if len(sides) > 1:
        raise AmbiguousSideRequiredError(f"tile {tile.left}-{tile.right} fits both ends, choose a side")
    return sides[0]


def resolve_orientation(tile: Tile, target_end: int, side: BoardSide) -> tuple[int, int]:
    """
    Order the tile's pips as read left-to-right along the chain.

    The pip matching ``target_end`` touches the chain: on the right side it
    comes first, on the left side it comes last.
    """
    if not tile.has_pip(target_end):
        raise IllegalMoveError(f"tile {tile.left}-{tile.right} has no {target_end} pip")
    outer = tile.other_pip(target_end)
    if side == BoardSide.RIGHT:
        return target_end, outer
    return outer, target_end


def find_starting_player(hands: Sequence[Sequence[Tile]]) -> int:
    """
    Return the index of the hand that opens the game.

    The holder of the highest double starts. When no hand holds a double, the
    holder of the highest tile (by tile_rank) starts. Ties keep the first
    hand encountered; all-empty hands start at 0.
    """
    best_player: int | None = None
    best_double = -1
    for index, hand in enumerate(hands):
        for tile in hand:
            if is_double(tile) and tile.left > best_double:
                best_double = tile.left
                best_player = index
    if best_player is not None:
        return best_player

    best_rank = (-1, -1)
    best_player = 0
    for index, hand in enumerate(hands):
        for tile in hand:
            rank = tile_rank(tile)
            if rank > best_rank:
                best_rank = rank
                best_player = index
    return best_player


def opening_tiles(hand: Sequence[Tile], rule: OpeningRule) -> tuple[Tile, ...]:
    """Tiles the starting player may open with under ``rule``."""
    if not hand:
        return ()
    if rule == OpeningRule.ANY_TILE:
        return tuple(hand)
    doubles = [tile for tile in hand if is_double(tile)]
    if doubles:
        return (max(doubles, key=lambda t: t.left),)
    return (max(hand, key=tile_rank),)


def legal_moves(hand: Sequence[Tile], left_end: int | None, right_end: int | None) -> tuple[Tile, ...]:
    return tuple(tile for tile in hand if can_play(tile, left_end, right_end))


def has_legal_move(hand: Sequence[Tile], left_end: int | None, right_end: int | None) -> bool:
    return any(can_play(tile, left_end, right_end) for tile in hand)


def playable_tiles(
    hand: Sequence[Tile],
    left_end: int | None,
    right_end: int | None,
    opening_rule: OpeningRule,
) -> tuple[Tile, ...]:
    """Legal moves for a hand, restricted by the opening rule while the chain is empty."""
    if left_end is None and right_end is None:
        return opening_tiles(hand, opening_rule)
    return legal_moves(hand, left_end, right_end)
