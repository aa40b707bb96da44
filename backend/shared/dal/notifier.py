"""In-process change notification fan-out used by the game stores."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from shared.dal.models import ChangeEvent

logger = structlog.get_logger()

ChangeListener = Callable[["ChangeEvent"], Awaitable[None]]
Unsubscribe = Callable[[], None]


class ChangeNotifier:
    """
    Per-room listener registry.

    ``publish`` schedules delivery as a background task and returns at once,
    so a writer never waits on subscribers and a writer that is cancelled
    or times out cannot cut a delivery short. A failing listener never
    affects the others.
    """

    def __init__(self) -> None:
        self._listeners: dict[str, list[ChangeListener]] = {}
        self._pending: set[asyncio.Task[None]] = set()

    def subscribe(self, room_id: str, listener: ChangeListener) -> Unsubscribe:
        self._listeners.setdefault(room_id, []).append(listener)

        def unsubscribe() -> None:
            listeners = self._listeners.get(room_id, [])
            if listener in listeners:
                listeners.remove(listener)
            if not listeners:
                self._listeners.pop(room_id, None)

        return unsubscribe

    def listener_count(self, room_id: str) -> int:
        return len(self._listeners.get(room_id, []))

    def publish(self, event: ChangeEvent) -> None:
        listeners = list(self._listeners.get(event.room_id, []))
        if not listeners:
            return
        task = asyncio.create_task(self._deliver(event, listeners))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _deliver(self, event: ChangeEvent, listeners: list[ChangeListener]) -> None:
        for listener in listeners:
            try:
                await listener(event)
            except Exception:
                logger.exception("change listener failed", room_id=event.room_id, table=event.table)

    async def wait_for_deliveries(self) -> None:
        """Wait until every scheduled delivery, including ones scheduled meanwhile, has finished."""
        while self._pending:
            await asyncio.gather(*self._pending)
