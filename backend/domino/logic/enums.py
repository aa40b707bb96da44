"""
String enum definitions for dominoes game concepts.
"""

from enum import StrEnum


class GamePhase(StrEnum):
    """Lifecycle of a single game."""

    WAITING = "waiting"
    PLAYING = "playing"
    FINISHED = "finished"


class BoardSide(StrEnum):
    """Open end of the chain a tile is attached to."""

    LEFT = "left"
    RIGHT = "right"


class Direction(StrEnum):
    """Growth direction of a chain end on the board."""

    NORTH = "north"
    SOUTH = "south"
    EAST = "east"
    WEST = "west"

    @property
    def is_horizontal(self) -> bool:
        return self in (Direction.EAST, Direction.WEST)


class GameAction(StrEnum):
    """Actions dispatched from client to game session."""

    START_GAME = "start_game"
    PLAY_TILE = "play_tile"
    SELECT_SIDE = "select_side"
    PASS = "pass"  # noqa: S105
    LEAVE_ROOM = "leave_room"


class GameErrorCode(StrEnum):
    """Error codes sent to clients for rejected actions."""

    NOT_YOUR_TURN = "not_your_turn"
    TILE_NOT_IN_HAND = "tile_not_in_hand"
    ILLEGAL_MOVE = "illegal_move"
    MUST_PLAY_IF_ABLE = "must_play_if_able"
    AMBIGUOUS_SIDE_REQUIRED = "ambiguous_side_required"
    GAME_NOT_IN_PROGRESS = "game_not_in_progress"
    INVALID_ACTION = "invalid_action"
    AUTHENTICATION_REQUIRED = "authentication_required"
    ROOM_FULL = "room_full"
    ROOM_NOT_FOUND = "room_not_found"
    CONCURRENCY_CONFLICT = "concurrency_conflict"
    STORE_UNAVAILABLE = "store_unavailable"
    VALIDATION_ERROR = "validation_error"
    UNKNOWN_ACTION = "unknown_action"
    GAME_ERROR = "game_error"


class GameEndReason(StrEnum):
    """How a game reached the finished phase."""

    DOMINO = "domino"  # a player emptied their hand
    BLOCKED = "blocked"  # nobody can play


class OpeningRule(StrEnum):
    """Which tile the starting player must open with."""

    HIGHEST_DOUBLE = "highest_double"
    ANY_TILE = "any_tile"


class RoomStatus(StrEnum):
    """Status of a shared room record."""

    WAITING = "waiting"
    IN_PROGRESS = "in_progress"
    FINISHED = "finished"


class AIPlayerStrategy(StrEnum):
    """Tile selection strategy for computer-controlled seats."""

    FIRST_PLAYABLE = "first_playable"
    HEAVIEST = "heaviest"
