"""
Store-backed game session for realtime multiplayer.

Each client holds a SyncedGameSession bound to one authenticated user. The
shared store is the source of truth: the session keeps a cached TurnState,
refreshes it on store change notifications (push) and, while the room is
still waiting for players, on a polling interval (pull). Refreshing is
idempotent and never moves the cache to an older version.

Actions are validated against a fresh snapshot with the same rules engine
the local session uses, then written with a version-conditional commit. A
lost race surfaces as a concurrency conflict and the cache is refreshed.
A tile waiting for a side choice stays in this session only; it is not
written to the store.
"""

from __future__ import annotations

import asyncio
import contextlib
from typing import TYPE_CHECKING, Any, TypeVar

import structlog
from pydantic import ValidationError

from domino.logic.action_handlers import dispatch_action, parse_action
from domino.logic.enums import GameErrorCode, GamePhase, RoomStatus
from domino.logic.events import ErrorEvent, ServiceEvent, convert_events, player_target, seat_target
from domino.logic.exceptions import AuthenticationRequiredError, GameRuleError
from domino.logic.game import start_game
from domino.logic.layout import create_layout_context, replay_layout
from domino.logic.rng import generate_seed
from domino.logic.service import GameSession, StateListener, Unsubscribe
from domino.logic.settings import MIN_PLAYERS, GameSettings, validate_settings
from domino.logic.state import get_player_view
from domino.logic.types import LeaveRoomAction, StartGameAction
from domino.session.codec import records_to_state, state_to_records
from domino.session.retry import retry_async, with_timeout
from domino.session.settings import SessionSettings
from domino.session.visibility import redact_player_records, redact_state
from shared.dal.exceptions import RecordNotFoundError, StoreError, VersionConflictError

if TYPE_CHECKING:
    from collections.abc import Awaitable

    from domino.logic.state import TurnState
    from domino.logic.types import ClientAction, GameView, PlayerView
    from shared.dal.game_store import GameStore
    from shared.dal.models import ChangeEvent, RoomRecord

logger = structlog.get_logger()

T = TypeVar("T")


def _error(code: GameErrorCode, message: str, target: str) -> list[ServiceEvent]:
    return convert_events([ErrorEvent(code=code, message=message, target=target)])


class SyncedGameSession(GameSession):
    """Game session whose authoritative state lives in a shared GameStore."""

    def __init__(
        self,
        store: GameStore,
        room_id: str,
        user_id: str,
        *,
        settings: SessionSettings | None = None,
        game_settings: GameSettings | None = None,
    ) -> None:
        if not user_id:
            raise AuthenticationRequiredError("a synchronized session needs an authenticated user")
        self._store = store
        self.room_id = room_id
        self.user_id = user_id
        # errors raised before a seat is known go back to this user only
        self._requester = player_target(user_id)
        self._settings = settings or SessionSettings()
        self._game_settings = game_settings or GameSettings()
        self._room: RoomRecord | None = None
        self._state: TurnState | None = None
        self._listeners: list[StateListener] = []
        self._store_unsubscribe: Unsubscribe | None = None
        self._poll_task: asyncio.Task[None] | None = None

    @property
    def state(self) -> TurnState | None:
        """Cached state as this user may see it. Other hands and the boneyard are never exposed."""
        if self._state is None:
            return None
        return redact_state(self._state, self.user_id)

    @property
    def room(self) -> RoomRecord | None:
        return self._room

    @property
    def is_polling(self) -> bool:
        return self._poll_task is not None and not self._poll_task.done()

    # --- Lifecycle ---

    async def connect(self) -> GameView:
        """Subscribe to store changes, load the room and poll while it is waiting."""
        if self._store_unsubscribe is None:
            self._store_unsubscribe = self._store.subscribe(self.room_id, self._on_store_change)
        await self.refresh()
        if self._room is not None and self._room.status == RoomStatus.WAITING:
            self.start_polling()
        return await self.fetch_state(self.user_id)

    async def close(self) -> None:
        await self.stop_polling()
        if self._store_unsubscribe is not None:
            self._store_unsubscribe()
            self._store_unsubscribe = None
        self._listeners.clear()

    def start_polling(self) -> None:
        """Start the waiting-room poll task. Idempotent."""
        if self.is_polling:
            return
        self._poll_task = asyncio.create_task(self._poll_loop())

    async def stop_polling(self) -> None:
        """Stop the waiting-room poll task."""
        if self._poll_task is not None:
            self._poll_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._poll_task
            self._poll_task = None

    async def _poll_loop(self) -> None:
        """Refresh periodically until the room leaves the waiting status."""
        while True:
            await asyncio.sleep(self._settings.poll_interval_seconds)
            try:
                await self.refresh()
            except Exception:
                logger.exception("room poll failed", room_id=self.room_id)
                continue
            if self._room is not None and self._room.status != RoomStatus.WAITING:
                logger.debug("room no longer waiting, polling stopped", room_id=self.room_id)
                return

    # --- Store access ---

    async def _call(self, awaitable: Awaitable[T], operation: str) -> T:
        return await with_timeout(awaitable, self._settings.request_timeout_seconds, operation=operation)

    async def _load(self) -> tuple[RoomRecord, TurnState]:
        async def attempt() -> tuple[RoomRecord, TurnState]:
            room = await self._call(self._store.get_room(self.room_id), "get_room")
            if room is None:
                raise RecordNotFoundError(f"room {self.room_id} not found")
            players = await self._call(self._store.list_players(self.room_id), "list_players")
            record = await self._call(self._store.get_game_state(self.room_id), "get_game_state")
            return room, records_to_state(self.room_id, players, record, self._game_settings)

        return await retry_async(
            attempt,
            attempts=self._settings.retry_attempts,
            base_delay=self._settings.retry_base_delay_seconds,
            description="load_room",
        )

    async def refresh(self) -> bool:
        """
        Reload the room from the store.

        Returns True when the cached state changed. Listeners are notified
        only on change.
        """
        room, state = await self._load()
        changed = self._apply_snapshot(room, state)
        if changed:
            await self._notify()
        return changed

    def _apply_snapshot(self, room: RoomRecord, state: TurnState) -> bool:
        current = self._state
        if current is not None and state.version < current.version:
            logger.debug("ignoring stale snapshot", room_id=self.room_id, version=state.version, cached=current.version)
            return False
        if current is not None and state.version == current.version and current.awaiting_side_choice is not None:
            # keep the local side choice while nothing was committed in between
            state = state.model_copy(update={"awaiting_side_choice": current.awaiting_side_choice})
        room_changed = room != self._room
        self._room = room
        if state == current:
            return room_changed
        self._state = state
        return True

    async def _on_store_change(self, event: ChangeEvent) -> None:
        if event.version is not None and self._state is not None and event.version <= self._state.version:
            return
        await self.refresh()

    # --- GameSession ---

    async def fetch_state(self, player_id: str) -> GameView:
        if player_id != self.user_id:
            raise AuthenticationRequiredError(f"session is bound to {self.user_id}, not {player_id}")
        if self._state is None:
            await self.refresh()
        if self._state is None:
            raise RecordNotFoundError(f"room {self.room_id} not loaded")
        seat = self._state.seat_for_user(self.user_id)
        if seat is None:
            raise AuthenticationRequiredError(f"{self.user_id} is not seated in room {self.room_id}")
        return get_player_view(self._state, seat)

    async def list_players(self) -> list[PlayerView]:
        """Room roster as seen by this user; other hands are hidden until the game ends."""
        room = await self._call(self._store.get_room(self.room_id), "get_room")
        players = await self._call(self._store.list_players(self.room_id), "list_players")
        reveal_all = room is not None and room.status == RoomStatus.FINISHED
        return redact_player_records(players, self.user_id, reveal_all=reveal_all)

    async def apply_action(
        self,
        player_id: str,
        action: ClientAction | dict[str, Any],
    ) -> list[ServiceEvent]:
        if player_id != self.user_id:
            logger.warning("action from unauthenticated player", room_id=self.room_id, player_id=player_id)
            return _error(GameErrorCode.AUTHENTICATION_REQUIRED, "authentication required", player_target(player_id))
        structlog.contextvars.bind_contextvars(game_id=self.room_id, user_id=self.user_id)

        if isinstance(action, dict):
            try:
                action = parse_action(action)
            except ValidationError as e:
                return _error(GameErrorCode.VALIDATION_ERROR, f"invalid action data: {e}", self._requester)

        try:
            await self.refresh()
        except RecordNotFoundError as e:
            return _error(GameErrorCode.ROOM_NOT_FOUND, str(e), self._requester)
        except StoreError as e:
            return _error(GameErrorCode.STORE_UNAVAILABLE, str(e), self._requester)

        state = self._state
        room = self._room
        if state is None or room is None:
            return _error(GameErrorCode.ROOM_NOT_FOUND, f"room {self.room_id} not found", self._requester)
        seat = state.seat_for_user(self.user_id)
        if seat is None:
            return _error(GameErrorCode.AUTHENTICATION_REQUIRED, "player not in room", self._requester)
        structlog.contextvars.bind_contextvars(seat=seat)

        if isinstance(action, StartGameAction):
            return await self._handle_start(room, state, seat)
        if isinstance(action, LeaveRoomAction):
            return await self._handle_leave(seat)

        layout = create_layout_context(self._settings.layout_bounds())
        replay_layout(layout, state.chain)
        result = dispatch_action(state, layout, seat, action)
        events = convert_events(result.events)
        if result.new_state is None:
            return events
        if result.new_state.version == state.version:
            # side choice pending: nothing to commit yet
            self._state = result.new_state
            await self._notify()
            return events
        conflict = await self._commit(result.new_state, expected_version=state.version, seat=seat)
        return conflict or events

    async def _commit(self, new_state: TurnState, *, expected_version: int, seat: int) -> list[ServiceEvent] | None:
        """Write the new state; return error events if the write did not happen."""
        record, updates = state_to_records(new_state)
        try:
            await self._call(self._store.commit_turn(record, updates, expected_version), "commit_turn")
        except VersionConflictError as e:
            logger.info("turn commit lost race", room_id=self.room_id, expected=e.expected, actual=e.actual)
            await self._refresh_after_failure()
            return _error(GameErrorCode.CONCURRENCY_CONFLICT, "the game changed, try again", seat_target(seat))
        except StoreError as e:
            logger.warning("turn commit failed", room_id=self.room_id, error=str(e))
            return _error(GameErrorCode.STORE_UNAVAILABLE, str(e), seat_target(seat))
        if self._room is not None and self._apply_snapshot(self._room, new_state):
            await self._notify()
        return None

    async def _refresh_after_failure(self) -> None:
        try:
            await self.refresh()
        except StoreError:
            logger.exception("refresh after failed write failed", room_id=self.room_id)

    async def _handle_start(self, room: RoomRecord, state: TurnState, seat: int) -> list[ServiceEvent]:
        if room.host_id != self.user_id:
            return _error(GameErrorCode.INVALID_ACTION, "only the host can start the game", seat_target(seat))
        if room.status != RoomStatus.WAITING or state.phase != GamePhase.WAITING:
            return _error(GameErrorCode.INVALID_ACTION, "game already started", seat_target(seat))
        if len(state.players) < MIN_PLAYERS:
            return _error(GameErrorCode.INVALID_ACTION, f"at least {MIN_PLAYERS} players are needed", seat_target(seat))

        settings = self._game_settings.model_copy(update={"num_players": len(state.players)})
        try:
            validate_settings(settings)
            result = start_game(state.model_copy(update={"settings": settings, "seed": generate_seed()}))
        except GameRuleError as e:
            return _error(e.code, str(e), seat_target(seat))

        record, updates = state_to_records(result.new_state)
        try:
            await self._call(self._store.start_game(record, updates), "start_game")
        except VersionConflictError:
            await self._refresh_after_failure()
            return _error(GameErrorCode.CONCURRENCY_CONFLICT, "game already started", seat_target(seat))
        except StoreError as e:
            logger.warning("start game failed", room_id=self.room_id, error=str(e))
            return _error(GameErrorCode.STORE_UNAVAILABLE, str(e), seat_target(seat))

        logger.info("game started", room_id=self.room_id, players=len(state.players))
        await self.stop_polling()
        if self._room is not None and self._apply_snapshot(self._room, result.new_state):
            await self._notify()
        return convert_events(result.events)

    async def _handle_leave(self, seat: int) -> list[ServiceEvent]:
        """Mark this player disconnected; the seat and its hand stay in the room."""
        try:
            await self._call(
                self._store.set_player_connected(self.room_id, self.user_id, connected=False),
                "set_player_connected",
            )
        except StoreError as e:
            return _error(GameErrorCode.STORE_UNAVAILABLE, str(e), seat_target(seat))
        logger.info("player left room", room_id=self.room_id, seat=seat)
        await self.stop_polling()
        return []

    # --- Listeners ---

    def subscribe_to_changes(self, player_id: str, listener: StateListener) -> Unsubscribe:
        if player_id != self.user_id:
            raise AuthenticationRequiredError(f"session is bound to {self.user_id}, not {player_id}")
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def _notify(self) -> None:
        if self._state is None:
            return
        seat = self._state.seat_for_user(self.user_id)
        if seat is None:
            return
        view = get_player_view(self._state, seat)
        for listener in list(self._listeners):
            try:
                await listener(view)
            except Exception:
                logger.exception("state listener failed", room_id=self.room_id)
