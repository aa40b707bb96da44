from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from domino.logic.events import ServiceEvent
    from domino.logic.types import ClientAction, GameView

StateListener = Callable[["GameView"], Awaitable[None]]
Unsubscribe = Callable[[], None]


class GameSession(ABC):
    """
    Abstract interface shared by the local and the synchronized game sessions.

    Both variants run the same rules engine and turn state machine; they
    differ only in where the authoritative state lives. Views handed out by
    a session never contain another player's hand while the game is running.

    Events returned by apply_action include a 'target' field:
    - "all": broadcast to all players in the game
    - "seat_0", "seat_1", etc.: send only to player at that seat
    """

    @abstractmethod
    async def fetch_state(self, player_id: str) -> GameView:
        """Return the current game as seen by ``player_id``."""
        ...

    @abstractmethod
    async def apply_action(
        self,
        player_id: str,
        action: ClientAction | dict[str, Any],
    ) -> list[ServiceEvent]:
        """
        Apply a client action on behalf of ``player_id``.

        Rejected actions come back as an error event; they never raise.
        """
        ...

    @abstractmethod
    def subscribe_to_changes(self, player_id: str, listener: StateListener) -> Unsubscribe:
        """
        Call ``listener`` with ``player_id``'s view whenever the game changes.

        Returns a callable that removes the listener.
        """
        ...

    @abstractmethod
    async def close(self) -> None:
        """Release background tasks and listeners."""
        ...
