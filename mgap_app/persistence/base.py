"""Base classes for the stores the signal engine reads from and writes to."""

from abc import ABC, abstractmethod
from typing import Optional

from ..data.models import EndOfDayRecord, PreMarketRecord
from ..models.signals import Signal, SignalRun


class PreMarketStore(ABC):
    """Read access to pre-market records."""

    @abstractmethod
    def find_by_date(self, date: str) -> list[PreMarketRecord]:
        """All pre-market records for an ISO date (possibly empty)."""


class EndOfDayStore(ABC):
    """Read access to end-of-day (bhavcopy) records."""

    @abstractmethod
    def find_by_date(self, date: str) -> list[EndOfDayRecord]:
        """All end-of-day records for an ISO date (possibly empty)."""


class RunStore(ABC):
    """Durable storage for signal runs and their signals."""

    @abstractmethod
    def insert_run(self, run: SignalRun) -> None:
        """
        Write a run record.

        Raises:
            PersistenceError: On storage failure or when run_id already exists
        """

    @abstractmethod
    def insert_signals(self, signals: list[Signal]) -> int:
        """
        Write a batch of signals in one unit.

        Returns:
            Number of signals written

        Raises:
            PersistenceError: On storage failure; nothing from the batch is kept
        """

    @abstractmethod
    def get_run(self, run_id: str) -> Optional[SignalRun]:
        """Run by id, or None."""

    @abstractmethod
    def count_signals(self, run_id: str) -> int:
        """Number of signals stored for a run."""

    @abstractmethod
    def get_signals(self, run_id: str) -> list[Signal]:
        """Signals for a run, highest score first."""

    @abstractmethod
    def get_signals_by_date(self, date: str) -> list[Signal]:
        """Signals of the latest run with signals for a date."""

    @abstractmethod
    def get_latest_run(self, date: Optional[str] = None) -> Optional[SignalRun]:
        """Most recently created run, optionally restricted to a date."""

    @abstractmethod
    def latest_signal_date(self) -> Optional[str]:
        """Most recent date that has at least one signal."""
