"""Typed domain exceptions for dominoes rule violations.

All domain-level rule violations use subclasses of GameRuleError
rather than raw ValueError. This enables consistent catch-and-convert
at the session boundary: each subclass carries the GameErrorCode the
client receives in the resulting ErrorEvent.
"""

from domino.logic.enums import GameErrorCode


class GameRuleError(Exception):
    """Base exception for game rule violations.

    Raised by domain logic (rules.py, turn.py, game.py) when a player
    action violates game rules. Caught at the session boundary
    (action_handlers.py) and converted to ErrorEvent responses.
    """

    code: GameErrorCode = GameErrorCode.GAME_ERROR


class NotYourTurnError(GameRuleError):
    """Action sent by a player who is not the current player."""

    code = GameErrorCode.NOT_YOUR_TURN


class TileNotInHandError(GameRuleError):
    """Played tile is not in the acting player's hand."""

    code = GameErrorCode.TILE_NOT_IN_HAND


class IllegalMoveError(GameRuleError):
    """Tile does not match the chosen end, or violates the opening rule."""

    code = GameErrorCode.ILLEGAL_MOVE


class MustPlayIfAbleError(GameRuleError):
    """Pass attempted while holding a playable tile."""

    code = GameErrorCode.MUST_PLAY_IF_ABLE


class AmbiguousSideRequiredError(GameRuleError):
    """Tile fits both ends and no side was chosen."""

    code = GameErrorCode.AMBIGUOUS_SIDE_REQUIRED


class GameNotInProgressError(GameRuleError):
    """Action sent while the game is waiting or already finished."""

    code = GameErrorCode.GAME_NOT_IN_PROGRESS


class InvalidActionError(GameRuleError):
    """Action is not valid in the current game state."""

    code = GameErrorCode.INVALID_ACTION


class AuthenticationRequiredError(GameRuleError):
    """Action sent without an identity bound to the session."""

    code = GameErrorCode.AUTHENTICATION_REQUIRED


class UnsupportedSettingsError(GameRuleError):
    """Game settings contain values that cannot produce a valid deal."""
