"""
Canonical data models for normalized market snapshots.

Every optional field is ``None`` when the upstream document did not carry a
usable value. Fallback derivation in the feature resolver keys off ``None``
only, never off zero or other sentinels.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class LiquidityBucket(str, Enum):
    """Coarse trading volume classification."""
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


@dataclass(frozen=True)
class PreMarketRecord:
    """Pre-market observation for one symbol on one date."""
    symbol: str
    date: str                                        # ISO YYYY-MM-DD
    gap_percent: Optional[float] = None
    vol_surge: Optional[float] = None
    near_high_flag: Optional[bool] = None
    liquidity_bucket: Optional[LiquidityBucket] = None
    pre_open_price: Optional[float] = None


@dataclass(frozen=True)
class EndOfDayRecord:
    """End-of-day (bhavcopy) record for one symbol on one date."""
    symbol: str
    date: str                                        # ISO YYYY-MM-DD
    open: Optional[float] = None
    close: Optional[float] = None
    prev_close: Optional[float] = None
    volume: Optional[float] = None
    avg_vol20: Optional[float] = None
    atr20: Optional[float] = None
    high_52w: Optional[float] = None
    rs20: Optional[float] = None

    @property
    def is_usable(self) -> bool:
        """True when close and prev_close are both positive."""
        return (self.close is not None and self.close > 0 and
                self.prev_close is not None and self.prev_close > 0)


@dataclass
class NormalizationResult:
    """Result of normalizing one raw document."""

    record: Optional[Any] = None

    success: bool = True
    error_msg: Optional[str] = None
    missing_fields: tuple[str, ...] = ()
