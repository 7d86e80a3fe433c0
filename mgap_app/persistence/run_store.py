"""Run persistence layer for audit trails and replay capabilities."""

import json
import sqlite3
import threading
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Optional

import structlog

from ..errors import PersistenceError
from ..models.signals import Signal, SignalRun
from .base import RunStore


class SQLiteRunStore(RunStore):
    """
    SQLite-based run persistence layer.

    Runs are write-once: inserting an existing run_id fails. Signals
    reference their run with ON DELETE CASCADE, so deleting a run removes
    its signals.
    """

    def __init__(self, db_path: str = "signals.db"):
        self.db_path = Path(db_path)
        self.logger = structlog.get_logger("run.store")
        self._lock = threading.Lock()

        self._init_database()

    def _init_database(self) -> None:
        """Initialize database schema."""
        with self._get_connection("init_schema") as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS signal_runs (
                    run_id TEXT PRIMARY KEY,
                    date TEXT NOT NULL,
                    bhavcopy_date TEXT NOT NULL,
                    session TEXT NOT NULL,
                    regime_code TEXT NOT NULL,
                    strategies_used TEXT NOT NULL,
                    params_hash TEXT NOT NULL,
                    created_at TEXT NOT NULL
                )
            """)

            conn.execute("""
                CREATE TABLE IF NOT EXISTS signals (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    run_id TEXT NOT NULL
                        REFERENCES signal_runs(run_id) ON DELETE CASCADE,
                    date TEXT NOT NULL,
                    symbol TEXT NOT NULL,
                    strategy_name TEXT NOT NULL,
                    side TEXT NOT NULL,
                    score INTEGER NOT NULL,
                    entry_price REAL NOT NULL,
                    stop_loss REAL NOT NULL,
                    target_price REAL NOT NULL,
                    confidence_score REAL NOT NULL,
                    feature_fields TEXT NOT NULL,
                    data_sources TEXT NOT NULL,
                    ai_explanation TEXT,
                    UNIQUE(run_id, symbol)
                )
            """)

            conn.execute("""
                CREATE INDEX IF NOT EXISTS idx_signal_runs_date ON signal_runs(date)
            """)

            conn.execute("""
                CREATE INDEX IF NOT EXISTS idx_signals_run_id ON signals(run_id)
            """)

            conn.execute("""
                CREATE INDEX IF NOT EXISTS idx_signals_date ON signals(date)
            """)

            conn.commit()

    @contextmanager
    def _get_connection(self, operation: str):
        """Get database connection, mapping sqlite errors to PersistenceError."""
        conn = None
        try:
            conn = sqlite3.connect(self.db_path, timeout=30.0)
            conn.row_factory = sqlite3.Row
            conn.execute("PRAGMA foreign_keys = ON")
            yield conn
        except sqlite3.Error as e:
            if conn:
                conn.rollback()
            self.logger.error("Database error", operation=operation, error=str(e))
            raise PersistenceError(
                f"Run store {operation} failed: {e}",
                operation=operation,
                target=str(self.db_path)
            ) from e
        finally:
            if conn:
                conn.close()

    def insert_run(self, run: SignalRun) -> None:
        """Store a run record."""
        with self._lock:
            with self._get_connection("insert_run") as conn:
                conn.execute("""
                    INSERT INTO signal_runs (
                        run_id, date, bhavcopy_date, session, regime_code,
                        strategies_used, params_hash, created_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """, (
                    run.run_id,
                    run.date,
                    run.bhavcopy_date,
                    run.session,
                    run.regime_code,
                    json.dumps(list(run.strategies_used)),
                    run.params_hash,
                    run.created_at.isoformat(),
                ))
                conn.commit()

        self.logger.info("Signal run stored", run_id=run.run_id, date=run.date)

    def insert_signals(self, signals: list[Signal]) -> int:
        """Store a batch of signals in a single transaction."""
        if not signals:
            return 0

        rows = [
            (
                s.run_id, s.date, s.symbol, s.strategy_name, s.side, s.score,
                s.entry_price, s.stop_loss, s.target_price, s.confidence_score,
                json.dumps(s.feature_fields), json.dumps(s.data_sources),
                s.ai_explanation,
            )
            for s in signals
        ]

        with self._lock:
            with self._get_connection("insert_signals") as conn:
                conn.executemany("""
                    INSERT INTO signals (
                        run_id, date, symbol, strategy_name, side, score,
                        entry_price, stop_loss, target_price, confidence_score,
                        feature_fields, data_sources, ai_explanation
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """, rows)
                conn.commit()

        self.logger.info(
            "Signals stored",
            run_id=signals[0].run_id,
            count=len(rows)
        )
        return len(rows)

    def get_run(self, run_id: str) -> Optional[SignalRun]:
        """Get a run by ID."""
        with self._get_connection("get_run") as conn:
            row = conn.execute("""
                SELECT * FROM signal_runs WHERE run_id = ?
            """, (run_id,)).fetchone()

        return self._row_to_run(row) if row else None

    def count_signals(self, run_id: str) -> int:
        """Count signals stored for a run."""
        with self._get_connection("count_signals") as conn:
            return conn.execute("""
                SELECT COUNT(*) FROM signals WHERE run_id = ?
            """, (run_id,)).fetchone()[0]

    def get_signals(self, run_id: str) -> list[Signal]:
        """Get all signals for a run, highest score first."""
        with self._get_connection("get_signals") as conn:
            rows = conn.execute("""
                SELECT * FROM signals WHERE run_id = ? ORDER BY score DESC, id
            """, (run_id,)).fetchall()

        return [self._row_to_signal(row) for row in rows]

    def get_signals_by_date(self, date: str) -> list[Signal]:
        """Get signals of the most recent run with signals for a date."""
        with self._get_connection("get_signals_by_date") as conn:
            row = conn.execute("""
                SELECT r.run_id FROM signal_runs r
                WHERE r.date = ?
                  AND EXISTS (SELECT 1 FROM signals s WHERE s.run_id = r.run_id)
                ORDER BY r.created_at DESC, r.rowid DESC
                LIMIT 1
            """, (date,)).fetchone()

        if row is None:
            return []
        return self.get_signals(row["run_id"])

    def get_latest_run(self, date: Optional[str] = None) -> Optional[SignalRun]:
        """Get the most recently created run, optionally for one date."""
        with self._get_connection("get_latest_run") as conn:
            if date is None:
                row = conn.execute("""
                    SELECT * FROM signal_runs
                    ORDER BY created_at DESC, rowid DESC LIMIT 1
                """).fetchone()
            else:
                row = conn.execute("""
                    SELECT * FROM signal_runs WHERE date = ?
                    ORDER BY created_at DESC, rowid DESC LIMIT 1
                """, (date,)).fetchone()

        return self._row_to_run(row) if row else None

    def latest_signal_date(self) -> Optional[str]:
        """Most recent date with at least one stored signal."""
        with self._get_connection("latest_signal_date") as conn:
            return conn.execute("SELECT MAX(date) FROM signals").fetchone()[0]

    def find_orphan_runs(self) -> list[SignalRun]:
        """Runs with no signals, left behind by a failed second write."""
        with self._get_connection("find_orphan_runs") as conn:
            rows = conn.execute("""
                SELECT * FROM signal_runs r
                WHERE NOT EXISTS (SELECT 1 FROM signals s WHERE s.run_id = r.run_id)
                ORDER BY created_at
            """).fetchall()

        return [self._row_to_run(row) for row in rows]

    def delete_run(self, run_id: str) -> bool:
        """Delete a run and, by cascade, its signals."""
        with self._lock:
            with self._get_connection("delete_run") as conn:
                cursor = conn.execute("""
                    DELETE FROM signal_runs WHERE run_id = ?
                """, (run_id,))
                conn.commit()
                deleted = cursor.rowcount > 0

        if deleted:
            self.logger.info("Signal run deleted", run_id=run_id)
        return deleted

    def _row_to_run(self, row: sqlite3.Row) -> SignalRun:
        """Convert database row to SignalRun object."""
        return SignalRun(
            run_id=row["run_id"],
            date=row["date"],
            bhavcopy_date=row["bhavcopy_date"],
            session=row["session"],
            regime_code=row["regime_code"],
            strategies_used=tuple(json.loads(row["strategies_used"])),
            params_hash=row["params_hash"],
            created_at=datetime.fromisoformat(row["created_at"]),
        )

    def _row_to_signal(self, row: sqlite3.Row) -> Signal:
        """Convert database row to Signal object."""
        return Signal(
            run_id=row["run_id"],
            date=row["date"],
            symbol=row["symbol"],
            strategy_name=row["strategy_name"],
            side=row["side"],
            score=row["score"],
            entry_price=row["entry_price"],
            stop_loss=row["stop_loss"],
            target_price=row["target_price"],
            confidence_score=row["confidence_score"],
            feature_fields=json.loads(row["feature_fields"]),
            data_sources=json.loads(row["data_sources"]),
            ai_explanation=row["ai_explanation"],
        )
