"""
Double-six domino tile set.

The set holds exactly one tile for every unordered pip pair (a, b) with
0 <= a <= b <= 6. Tile ids are assigned in generation order as
``domino-{n}`` and are stable across games, so ids stored by one client
resolve to the same tile for every other client.
"""

from pydantic import BaseModel, ConfigDict, Field, computed_field

MAX_PIP = 6
TILE_COUNT = 28
TILE_ID_PREFIX = "domino-"


class Tile(BaseModel):
    """A single domino. Pip values are listed as generated, lower first."""

    model_config = ConfigDict(frozen=True)

    id: str
    left: int = Field(ge=0, le=MAX_PIP)
    right: int = Field(ge=0, le=MAX_PIP)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_double(self) -> bool:
        return self.left == self.right

    @property
    def pip_total(self) -> int:
        return self.left + self.right

    def has_pip(self, pip: int) -> bool:
        return pip in (self.left, self.right)

    def other_pip(self, pip: int) -> int:
        """Return the pip on the opposite half from ``pip``."""
        if pip == self.left:
            return self.right
        if pip == self.right:
            return self.left
        raise ValueError(f"tile {self.id} has no {pip} pip")


def create_tile_set() -> tuple[Tile, ...]:
    """Generate the canonical 28-tile double-six set in (left, right) ascending order."""
    tiles: list[Tile] = []
    for left in range(MAX_PIP + 1):
        for right in range(left, MAX_PIP + 1):
            tiles.append(Tile(id=f"{TILE_ID_PREFIX}{len(tiles)}", left=left, right=right))
    return tuple(tiles)


def tile_str(tile: Tile) -> str:
    """Human-readable tile label used in logs, e.g. ``6-4``."""
    return f"{tile.left}-{tile.right}"


def pip_total(tiles: tuple[Tile, ...] | list[Tile]) -> int:
    return sum(tile.pip_total for tile in tiles)


def find_tile(tiles: tuple[Tile, ...] | list[Tile], tile_id: str) -> Tile | None:
    for tile in tiles:
        if tile.id == tile_id:
            return tile
    return None
