"""
Chain layout engine.

Maps accepted plays to 2-D board positions, independent of any renderer.
The engine is stateful: a LayoutContext holds one cursor per open end of
the chain. The right cursor grows east and the left cursor grows west from
the opening tile at the centre of the board. When the next step would
enter the margin band along a board edge, the cursor turns a corner: the
tile is placed one step in a new direction perpendicular to the old one,
pointing back toward the board interior, and that direction is kept.

Doubles lie crosswise to the chain: rotated 90 degrees on a horizontal run
and upright on a vertical run, the opposite of regular tiles.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, NamedTuple

from domino.logic.enums import BoardSide, Direction

if TYPE_CHECKING:
    from collections.abc import Iterable

    from domino.logic.tiles import Tile
    from domino.logic.types import PlacedTile

TILE_WIDTH = 64
TILE_HEIGHT = 128
TILE_SPACING = 8
DEFAULT_BOARD_WIDTH = 1200
DEFAULT_BOARD_HEIGHT = 600
DEFAULT_BOUNDARY_MARGIN = 20

_STEPS: dict[Direction, tuple[int, int]] = {
    Direction.EAST: (TILE_WIDTH + TILE_SPACING, 0),
    Direction.WEST: (-(TILE_WIDTH + TILE_SPACING), 0),
    Direction.NORTH: (0, -(TILE_HEIGHT + TILE_SPACING)),
    Direction.SOUTH: (0, TILE_HEIGHT + TILE_SPACING),
}


@dataclass(frozen=True)
class LayoutBounds:
    """Board size. ``margin`` is added to the tile footprint to form the edge band."""

    width: float = DEFAULT_BOARD_WIDTH
    height: float = DEFAULT_BOARD_HEIGHT
    margin: float = DEFAULT_BOUNDARY_MARGIN

    @property
    def margin_x(self) -> float:
        return TILE_WIDTH + self.margin

    @property
    def margin_y(self) -> float:
        return TILE_HEIGHT + self.margin


@dataclass
class LayoutCursor:
    """Position of the last tile on one end of the chain and its growth direction."""

    x: float
    y: float
    direction: Direction


@dataclass
class LayoutContext:
    bounds: LayoutBounds
    left: LayoutCursor
    right: LayoutCursor
    chain_length: int = 0
    corner_turns: int = 0


class LayoutPosition(NamedTuple):
    """Where and how a tile is drawn."""

    x: float
    y: float
    rotation: int
    direction: Direction
    is_corner_turn: bool


def tile_rotation(direction: Direction, *, is_double: bool) -> int:
    if direction.is_horizontal:
        return 90 if is_double else 0
    return 0 if is_double else 90


def create_layout_context(bounds: LayoutBounds | None = None) -> LayoutContext:
    bounds = bounds or LayoutBounds()
    context = LayoutContext(
        bounds=bounds,
        left=LayoutCursor(0, 0, Direction.WEST),
        right=LayoutCursor(0, 0, Direction.EAST),
    )
    reset_layout(context)
    return context


def reset_layout(context: LayoutContext) -> None:
    """Return both cursors to the board centre and forget every placement."""
    cx = context.bounds.width / 2
    cy = context.bounds.height / 2
    context.left = LayoutCursor(cx, cy, Direction.WEST)
    context.right = LayoutCursor(cx, cy, Direction.EAST)
    context.chain_length = 0
    context.corner_turns = 0


def _reaches_boundary(bounds: LayoutBounds, x: float, y: float) -> bool:
    return (
        x <= bounds.margin_x
        or x >= bounds.width - bounds.margin_x
        or y <= bounds.margin_y
        or y >= bounds.height - bounds.margin_y
    )


def _corner_direction(bounds: LayoutBounds, cursor: LayoutCursor) -> Direction:
    """Pick the perpendicular direction that heads back toward the board interior."""
    if cursor.direction == Direction.EAST:
        return Direction.SOUTH if cursor.y <= bounds.height / 2 else Direction.NORTH
    if cursor.direction == Direction.WEST:
        return Direction.NORTH if cursor.y >= bounds.height / 2 else Direction.SOUTH
    return Direction.WEST if cursor.x > bounds.width / 2 else Direction.EAST


def calculate_next_position(
    context: LayoutContext,
    tile: Tile,
    side: BoardSide,
    *,
    is_first: bool = False,
) -> LayoutPosition:
    """
    Place ``tile`` on ``side`` of the chain and advance that side's cursor.

    The opening tile sits at the board centre, unrotated, heading east.
    """
    if is_first:
        reset_layout(context)
        context.chain_length = 1
        return LayoutPosition(context.right.x, context.right.y, 0, Direction.EAST, False)

    cursor = context.left if side == BoardSide.LEFT else context.right
    dx, dy = _STEPS[cursor.direction]
    next_x, next_y = cursor.x + dx, cursor.y + dy
    direction = cursor.direction
    is_corner_turn = False

    if _reaches_boundary(context.bounds, next_x, next_y):
        direction = _corner_direction(context.bounds, cursor)
        dx, dy = _STEPS[direction]
        next_x, next_y = cursor.x + dx, cursor.y + dy
        is_corner_turn = True
        context.corner_turns += 1

    cursor.x, cursor.y, cursor.direction = next_x, next_y, direction
    context.chain_length += 1
    return LayoutPosition(
        next_x,
        next_y,
        tile_rotation(direction, is_double=tile.is_double),
        direction,
        is_corner_turn,
    )


def replay_layout(context: LayoutContext, chain: Iterable[PlacedTile]) -> None:
    """Rebuild cursor state from placed tiles, in placement order."""
    reset_layout(context)
    for index, placed in enumerate(sorted(chain, key=lambda p: p.sequence)):
        calculate_next_position(context, placed.tile, placed.side, is_first=index == 0)
