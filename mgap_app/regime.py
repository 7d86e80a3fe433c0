"""
Market regime classification.

The engine tags every run with a regime code. No derivation from market
mood or index trend exists yet, so the default classifier returns a fixed
code; a real classifier can be injected into the SignalGenerator.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Sequence

from .data.models import EndOfDayRecord


class RegimeCode(str, Enum):
    """Market regime tags recorded on a SignalRun."""
    TREND_UP = "TREND_UP"
    TREND_DOWN = "TREND_DOWN"
    RANGE = "RANGE"


class RegimeClassifier(ABC):
    """Classifies the market regime for a run."""

    @abstractmethod
    def classify(self, bhavcopy_date: str, end_of_day: Sequence[EndOfDayRecord]) -> RegimeCode:
        """
        Classify the regime from the prior trading day's data.

        Args:
            bhavcopy_date: Prior trading day the run is based on
            end_of_day: End-of-day records for that day

        Returns:
            Regime code for the run
        """


class StaticRegimeClassifier(RegimeClassifier):
    """Returns the same regime code for every run."""

    def __init__(self, regime: RegimeCode = RegimeCode.RANGE):
        self.regime = regime

    def classify(self, bhavcopy_date: str, end_of_day: Sequence[EndOfDayRecord]) -> RegimeCode:
        return self.regime
