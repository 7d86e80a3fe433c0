"""Store interfaces and SQLite implementations for snapshots and runs."""

from .base import EndOfDayStore, PreMarketStore, RunStore
from .market_store import SQLiteMarketDataStore
from .run_store import SQLiteRunStore

__all__ = [
    "EndOfDayStore",
    "PreMarketStore",
    "RunStore",
    "SQLiteMarketDataStore",
    "SQLiteRunStore",
]
