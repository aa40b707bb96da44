"""Centralized game settings for dominoes - all configurable gameplay rules."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from domino.logic.enums import OpeningRule
from domino.logic.exceptions import UnsupportedSettingsError
from domino.logic.tiles import TILE_COUNT

MIN_PLAYERS = 2
MAX_PLAYERS = 4


class GameSettings(BaseModel):
    """
    Configuration for a single game.

    Defaults describe the standard four-player block game: seven tiles per
    hand, no boneyard draws, opening with the highest double.
    """

    model_config = ConfigDict(frozen=True)

    num_players: int = Field(default=MAX_PLAYERS, ge=MIN_PLAYERS, le=MAX_PLAYERS)
    hand_size: int = Field(default=7, ge=1)
    opening_rule: OpeningRule = OpeningRule.HIGHEST_DOUBLE
    # winner of a hand-empty game scores the pips left in the other hands
    score_domino_win: bool = True


def validate_settings(settings: GameSettings) -> None:
    """Reject combinations the dealer cannot satisfy."""
    needed = settings.num_players * settings.hand_size
    if needed > TILE_COUNT:
        raise UnsupportedSettingsError(
            f"{settings.num_players} hands of {settings.hand_size} need {needed} tiles, set has {TILE_COUNT}"
        )
