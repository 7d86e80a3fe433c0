"""SQLite store for pre-market and end-of-day snapshots."""

import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterable, Optional

import structlog

from ..data.models import EndOfDayRecord, LiquidityBucket, PreMarketRecord
from ..errors import PersistenceError
from .base import EndOfDayStore, PreMarketStore

_TABLES = ("premarket", "bhavcopy")


class SQLiteMarketDataStore:
    """
    SQLite-based snapshot store.

    Holds one ``premarket`` and one ``bhavcopy`` table, both keyed by
    (symbol, date). The ``premarket`` and ``end_of_day`` attributes expose
    the two read interfaces the signal generator consumes.
    """

    def __init__(self, db_path: str = "market.db"):
        self.db_path = Path(db_path)
        self.logger = structlog.get_logger("market.store")
        self._lock = threading.Lock()

        self._init_database()

        self.premarket: PreMarketStore = _PreMarketView(self)
        self.end_of_day: EndOfDayStore = _EndOfDayView(self)

    def _init_database(self) -> None:
        """Initialize database schema."""
        with self._get_connection("init_schema") as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS premarket (
                    symbol TEXT NOT NULL,
                    date TEXT NOT NULL,
                    gap_percent REAL,
                    vol_surge REAL,
                    near_high_flag INTEGER,
                    liquidity_bucket TEXT,
                    pre_open_price REAL,
                    PRIMARY KEY (symbol, date)
                )
            """)

            conn.execute("""
                CREATE TABLE IF NOT EXISTS bhavcopy (
                    symbol TEXT NOT NULL,
                    date TEXT NOT NULL,
                    open REAL,
                    close REAL,
                    prev_close REAL,
                    volume REAL,
                    avg_vol20 REAL,
                    atr20 REAL,
                    high_52w REAL,
                    rs20 REAL,
                    PRIMARY KEY (symbol, date)
                )
            """)

            conn.execute("""
                CREATE INDEX IF NOT EXISTS idx_premarket_date ON premarket(date)
            """)

            conn.execute("""
                CREATE INDEX IF NOT EXISTS idx_bhavcopy_date ON bhavcopy(date)
            """)

            conn.commit()

    @contextmanager
    def _get_connection(self, operation: str):
        """Get database connection, mapping sqlite errors to PersistenceError."""
        conn = None
        try:
            conn = sqlite3.connect(self.db_path, timeout=30.0)
            conn.row_factory = sqlite3.Row
            yield conn
        except sqlite3.Error as e:
            if conn:
                conn.rollback()
            self.logger.error("Database error", operation=operation, error=str(e))
            raise PersistenceError(
                f"Market data store {operation} failed: {e}",
                operation=operation,
                target=str(self.db_path)
            ) from e
        finally:
            if conn:
                conn.close()

    def upsert_premarket(self, records: Iterable[PreMarketRecord]) -> int:
        """Insert or replace pre-market records. Returns rows written."""
        rows = [
            (
                r.symbol, r.date, r.gap_percent, r.vol_surge,
                None if r.near_high_flag is None else int(r.near_high_flag),
                r.liquidity_bucket.value if r.liquidity_bucket else None,
                r.pre_open_price,
            )
            for r in records
        ]
        with self._lock:
            with self._get_connection("upsert_premarket") as conn:
                conn.executemany("""
                    INSERT OR REPLACE INTO premarket (
                        symbol, date, gap_percent, vol_surge, near_high_flag,
                        liquidity_bucket, pre_open_price
                    ) VALUES (?, ?, ?, ?, ?, ?, ?)
                """, rows)
                conn.commit()

        self.logger.info("Pre-market records stored", count=len(rows))
        return len(rows)

    def upsert_end_of_day(self, records: Iterable[EndOfDayRecord]) -> int:
        """Insert or replace end-of-day records. Returns rows written."""
        rows = [
            (
                r.symbol, r.date, r.open, r.close, r.prev_close, r.volume,
                r.avg_vol20, r.atr20, r.high_52w, r.rs20,
            )
            for r in records
        ]
        with self._lock:
            with self._get_connection("upsert_end_of_day") as conn:
                conn.executemany("""
                    INSERT OR REPLACE INTO bhavcopy (
                        symbol, date, open, close, prev_close, volume,
                        avg_vol20, atr20, high_52w, rs20
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """, rows)
                conn.commit()

        self.logger.info("End-of-day records stored", count=len(rows))
        return len(rows)

    def find_premarket_by_date(self, date: str) -> list[PreMarketRecord]:
        """Get all pre-market records for a date."""
        with self._get_connection("find_premarket") as conn:
            rows = conn.execute("""
                SELECT * FROM premarket WHERE date = ? ORDER BY rowid
            """, (date,)).fetchall()

        return [self._row_to_premarket(row) for row in rows]

    def find_end_of_day_by_date(self, date: str) -> list[EndOfDayRecord]:
        """Get all end-of-day records for a date."""
        with self._get_connection("find_bhavcopy") as conn:
            rows = conn.execute("""
                SELECT * FROM bhavcopy WHERE date = ? ORDER BY rowid
            """, (date,)).fetchall()

        return [self._row_to_end_of_day(row) for row in rows]

    def count_by_date(self, table: str, date: str) -> int:
        """Number of records in ``premarket`` or ``bhavcopy`` for a date."""
        self._check_table(table)
        with self._get_connection("count_by_date") as conn:
            return conn.execute(
                f"SELECT COUNT(*) FROM {table} WHERE date = ?", (date,)
            ).fetchone()[0]

    def latest_date(self, table: str) -> Optional[str]:
        """Most recent date present in ``premarket`` or ``bhavcopy``."""
        self._check_table(table)
        with self._get_connection("latest_date") as conn:
            return conn.execute(f"SELECT MAX(date) FROM {table}").fetchone()[0]

    @staticmethod
    def _check_table(table: str) -> None:
        if table not in _TABLES:
            raise ValueError(f"Unknown table {table!r}, expected one of {_TABLES}")

    @staticmethod
    def _row_to_premarket(row: sqlite3.Row) -> PreMarketRecord:
        flag = row["near_high_flag"]
        bucket = row["liquidity_bucket"]
        return PreMarketRecord(
            symbol=row["symbol"],
            date=row["date"],
            gap_percent=row["gap_percent"],
            vol_surge=row["vol_surge"],
            near_high_flag=None if flag is None else bool(flag),
            liquidity_bucket=LiquidityBucket(bucket) if bucket else None,
            pre_open_price=row["pre_open_price"],
        )

    @staticmethod
    def _row_to_end_of_day(row: sqlite3.Row) -> EndOfDayRecord:
        return EndOfDayRecord(
            symbol=row["symbol"],
            date=row["date"],
            open=row["open"],
            close=row["close"],
            prev_close=row["prev_close"],
            volume=row["volume"],
            avg_vol20=row["avg_vol20"],
            atr20=row["atr20"],
            high_52w=row["high_52w"],
            rs20=row["rs20"],
        )


class _PreMarketView(PreMarketStore):
    def __init__(self, store: SQLiteMarketDataStore):
        self._store = store

    def find_by_date(self, date: str) -> list[PreMarketRecord]:
        return self._store.find_premarket_by_date(date)


class _EndOfDayView(EndOfDayStore):
    def __init__(self, store: SQLiteMarketDataStore):
        self._store = store

    def find_by_date(self, date: str) -> list[EndOfDayRecord]:
        return self._store.find_end_of_day_by_date(date)
