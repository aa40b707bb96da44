"""Game store implementations: SQLite and in-memory."""

from shared.db.connection import Database
from shared.db.game_store import SqliteGameStore
from shared.db.memory_store import InMemoryGameStore

__all__ = [
    "Database",
    "InMemoryGameStore",
    "SqliteGameStore",
]
