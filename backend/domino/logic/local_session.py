"""
In-process game session.

Holds the authoritative TurnState in memory. Seats configured with an AI
strategy are played automatically after every accepted action, so a single
human can play a full game against three computer opponents.
"""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING, Any

import structlog
from pydantic import ValidationError

from domino.logic.action_handlers import ActionResult, create_error_result, dispatch_action, parse_action
from domino.logic.ai_player import AIPlayer, AIPlayerController
from domino.logic.enums import GameErrorCode, GamePhase
from domino.logic.events import ErrorEvent, ServiceEvent, convert_events, player_target
from domino.logic.exceptions import AuthenticationRequiredError
from domino.logic.game import init_game, start_game
from domino.logic.layout import create_layout_context
from domino.logic.service import GameSession, StateListener, Unsubscribe
from domino.logic.state import get_player_view
from domino.logic.state_utils import update_player
from domino.logic.types import LeaveRoomAction, StartGameAction

if TYPE_CHECKING:
    from collections.abc import Sequence

    from domino.logic.layout import LayoutBounds
    from domino.logic.settings import GameSettings
    from domino.logic.state import TurnState
    from domino.logic.tiles import Tile
    from domino.logic.types import ClientAction, GameView, SeatConfig

logger = structlog.get_logger()

# upper bound on consecutive AI actions between two human actions
MAX_AI_ACTIONS = 200
HOST_SEAT = 0


def _error(seat: int, code: GameErrorCode, message: str) -> list[ServiceEvent]:
    return convert_events(create_error_result(seat, code, message).events)


class LocalGameSession(GameSession):
    """
    In-memory session for a single-process game.

    Seat 0 is the host. Human seats are addressed by their configured
    user_id; a human who leaves is replaced by an AI player.
    """

    def __init__(
        self,
        seat_configs: Sequence[SeatConfig],
        *,
        game_id: str | None = None,
        settings: GameSettings | None = None,
        seed: str | None = None,
        layout_bounds: LayoutBounds | None = None,
    ) -> None:
        self.game_id = game_id or uuid.uuid4().hex
        self._state = init_game(seat_configs, game_id=self.game_id, settings=settings, seed=seed)
        self._layout = create_layout_context(layout_bounds)
        self._ai_controller = AIPlayerController(
            {
                seat: AIPlayer(config.ai_player_type)
                for seat, config in enumerate(seat_configs)
                if config.ai_player_type is not None
            }
        )
        self._listeners: dict[str, list[StateListener]] = {}

    @property
    def state(self) -> TurnState:
        return self._state

    async def fetch_state(self, player_id: str) -> GameView:
        seat = self._state.seat_for_user(player_id)
        if seat is None:
            raise AuthenticationRequiredError(f"player {player_id} is not seated in game {self.game_id}")
        return get_player_view(self._state, seat)

    async def start(self, *, hands: Sequence[Sequence[Tile]] | None = None) -> list[ServiceEvent]:
        """Deal and run AI turns up to the first human decision."""
        result = start_game(self._state, hands=hands, ai_seats=self._ai_controller.ai_player_seats)
        self._state = result.new_state
        events = convert_events(result.events)
        events.extend(self._process_ai_followup())
        await self._notify()
        return events

    async def apply_action(
        self,
        player_id: str,
        action: ClientAction | dict[str, Any],
    ) -> list[ServiceEvent]:
        seat = self._state.seat_for_user(player_id)
        if seat is None:
            logger.warning("action from unknown player", game_id=self.game_id, player_id=player_id)
            error = ErrorEvent(
                code=GameErrorCode.AUTHENTICATION_REQUIRED,
                message="player not in game",
                target=player_target(player_id),
            )
            return convert_events([error])
        structlog.contextvars.bind_contextvars(game_id=self.game_id, seat=seat)

        if isinstance(action, dict):
            try:
                action = parse_action(action)
            except ValidationError as e:
                return _error(seat, GameErrorCode.VALIDATION_ERROR, f"invalid action data: {e}")

        if isinstance(action, StartGameAction):
            return await self._handle_start(seat)
        if isinstance(action, LeaveRoomAction):
            return await self._handle_leave(seat)

        result = dispatch_action(self._state, self._layout, seat, action)
        self._update_state_from_result(result)
        events = convert_events(result.events)
        if result.new_state is not None:
            events.extend(self._process_ai_followup())
            await self._notify()
        return events

    async def _handle_start(self, seat: int) -> list[ServiceEvent]:
        if seat != HOST_SEAT:
            return _error(seat, GameErrorCode.INVALID_ACTION, "only the host can start the game")
        if self._state.phase != GamePhase.WAITING:
            return _error(seat, GameErrorCode.INVALID_ACTION, "game already started")
        return await self.start()

    async def _handle_leave(self, seat: int) -> list[ServiceEvent]:
        """Mark the player disconnected and let an AI player take over the seat."""
        self._state = update_player(self._state, seat, is_connected=False)
        self._ai_controller.add_ai_player(seat, AIPlayer())
        logger.info("player left, seat handed to AI player", game_id=self.game_id, seat=seat)
        events = self._process_ai_followup() if self._state.phase == GamePhase.PLAYING else []
        await self._notify()
        return events

    def _update_state_from_result(self, result: ActionResult) -> None:
        """Update stored state from ActionResult if new state was returned."""
        if result.new_state is None:
            return
        self._state = result.new_state
        if self._state.phase == GamePhase.FINISHED:
            logger.info("game over", game_id=self.game_id, winner_seat=self._state.winner_seat)

    def _process_ai_followup(self) -> list[ServiceEvent]:
        """
        Play AI turns until a human is to act or the game ends.

        Rejections of AI actions are logged and stop the loop.
        """
        all_events: list[ServiceEvent] = []
        for _ in range(MAX_AI_ACTIONS):
            action = self._ai_controller.get_turn_action(self._state)
            if action is None:
                break
            seat = self._state.current_seat
            result = dispatch_action(self._state, self._layout, seat, action)
            if result.new_state is None:
                logger.error("AI action rejected", game_id=self.game_id, seat=seat, action=action.type)
                break
            self._update_state_from_result(result)
            all_events.extend(convert_events(result.events))
        return all_events

    def subscribe_to_changes(self, player_id: str, listener: StateListener) -> Unsubscribe:
        self._listeners.setdefault(player_id, []).append(listener)

        def unsubscribe() -> None:
            listeners = self._listeners.get(player_id, [])
            if listener in listeners:
                listeners.remove(listener)

        return unsubscribe

    async def _notify(self) -> None:
        for player_id, listeners in list(self._listeners.items()):
            seat = self._state.seat_for_user(player_id)
            if seat is None:
                continue
            view = get_player_view(self._state, seat)
            for listener in list(listeners):
                try:
                    await listener(view)
                except Exception:
                    logger.exception("state listener failed", game_id=self.game_id, player_id=player_id)

    async def close(self) -> None:
        self._listeners.clear()
