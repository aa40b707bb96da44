"""
AI player decision making for the local dominoes simulation.

Two strategies are available: play the first playable tile in hand order,
or play the playable tile carrying the most pips (shedding weight early
lowers the penalty if the game blocks). Ambiguous tiles go on the right
end; with nothing playable the AI passes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from domino.logic.enums import AIPlayerStrategy, BoardSide, GamePhase
from domino.logic.rules import playable_sides, playable_tiles, tile_rank
from domino.logic.types import PassTurnAction, PlayTileAction, SelectSideAction

if TYPE_CHECKING:
    from domino.logic.state import TurnState
    from domino.logic.tiles import Tile


class AIPlayer:
    """AI player with a configurable tile selection strategy."""

    def __init__(self, strategy: AIPlayerStrategy = AIPlayerStrategy.FIRST_PLAYABLE) -> None:
        self.strategy = strategy

    def select_tile(self, playable: tuple[Tile, ...]) -> Tile:
        if self.strategy == AIPlayerStrategy.HEAVIEST:
            return max(playable, key=tile_rank)
        return playable[0]

    def select_side(self, sides: tuple[BoardSide, ...]) -> BoardSide:
        return BoardSide.RIGHT if BoardSide.RIGHT in sides else sides[0]

    def get_action(self, state: TurnState, seat: int) -> PlayTileAction | SelectSideAction | PassTurnAction:
        """Decide the action for ``seat`` on its turn."""
        if state.awaiting_side_choice is not None:
            return SelectSideAction(side=BoardSide.RIGHT)

        hand = state.players[seat].hand
        playable = playable_tiles(hand, state.left_end, state.right_end, state.settings.opening_rule)
        if not playable:
            return PassTurnAction()

        tile = self.select_tile(playable)
        if state.is_opening:
            return PlayTileAction(tile_id=tile.id)
        side = self.select_side(playable_sides(tile, state.left_end, state.right_end))
        return PlayTileAction(tile_id=tile.id, side=side)


class AIPlayerController:
    """
    Decision-maker for AI-controlled seats.

    Does not orchestrate game flow; the session asks it for actions.
    """

    def __init__(self, ai_players: dict[int, AIPlayer]) -> None:
        self._ai_players = ai_players

    def add_ai_player(self, seat: int, ai_player: AIPlayer) -> None:
        """Register an AI player at a seat (replacing a player who left)."""
        self._ai_players[seat] = ai_player

    @property
    def ai_player_seats(self) -> set[int]:
        return set(self._ai_players.keys())

    def get_turn_action(
        self,
        state: TurnState,
    ) -> PlayTileAction | SelectSideAction | PassTurnAction | None:
        """Return the current seat's action, or None when a human is to act or the game is over."""
        if state.phase != GamePhase.PLAYING:
            return None
        ai_player = self._ai_players.get(state.current_seat)
        if ai_player is None:
            return None
        return ai_player.get_action(state, state.current_seat)
