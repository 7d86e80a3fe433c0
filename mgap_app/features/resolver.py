"""
Feature resolution for a single symbol.

Merges today's pre-market record with the prior trading day's end-of-day
record. Each field takes the pre-market value when present and otherwise
falls back to a derivation from the end-of-day record. The source used for
every field is kept on the FeatureSet so the fallback path stays auditable.
Prices of zero or below count as absent.

Precondition: the end-of-day record is usable (close > 0, prev_close > 0).
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from ..config.defaults import LiquidityParams, NearHighParams
from ..data.models import EndOfDayRecord, LiquidityBucket, PreMarketRecord
from ..data.normalizer import parse_liquidity_bucket


class FeatureSource(str, Enum):
    """Where a resolved feature value came from."""
    PREMARKET = "premarket"
    END_OF_DAY = "end_of_day"
    DEFAULT = "default"


@dataclass(frozen=True)
class FeatureSet:
    """Resolved feature values for one symbol."""
    gap_percent: float
    rs20: float
    vol_surge: float
    near_high_flag: bool
    liquidity_bucket: LiquidityBucket
    atr20: float
    close: float
    entry_anchor_price: float
    sources: dict[str, FeatureSource] = field(default_factory=dict, compare=False)


def _is_price(value: Optional[float]) -> bool:
    # Zero and negative prices are placeholders, never quotes
    return value is not None and value > 0


def resolve_gap_percent(pre: Optional[PreMarketRecord], eod: EndOfDayRecord) -> tuple[float, FeatureSource]:
    """Pre-market gap, else open vs prev_close, else 0."""
    if pre is not None and pre.gap_percent is not None:
        return pre.gap_percent, FeatureSource.PREMARKET
    if _is_price(eod.open) and _is_price(eod.prev_close):
        return (eod.open - eod.prev_close) / eod.prev_close * 100, FeatureSource.END_OF_DAY
    return 0.0, FeatureSource.DEFAULT


def resolve_rs20(eod: EndOfDayRecord) -> tuple[float, FeatureSource]:
    """RS20 only ever comes from the end-of-day record."""
    if eod.rs20 is not None:
        return eod.rs20, FeatureSource.END_OF_DAY
    return 0.0, FeatureSource.DEFAULT


def resolve_vol_surge(pre: Optional[PreMarketRecord], eod: EndOfDayRecord) -> tuple[float, FeatureSource]:
    """Pre-market surge, else volume / avg_vol20, else 1.0."""
    if pre is not None and pre.vol_surge is not None:
        return pre.vol_surge, FeatureSource.PREMARKET
    if eod.volume is not None and eod.avg_vol20 is not None and eod.avg_vol20 > 0:
        return eod.volume / eod.avg_vol20, FeatureSource.END_OF_DAY
    return 1.0, FeatureSource.DEFAULT


def resolve_near_high_flag(
    pre: Optional[PreMarketRecord],
    eod: EndOfDayRecord,
    params: NearHighParams
) -> tuple[bool, FeatureSource]:
    """Pre-market flag, else open within high_ratio of the 52W high, else False."""
    if pre is not None and pre.near_high_flag is not None:
        return pre.near_high_flag, FeatureSource.PREMARKET
    if _is_price(eod.open) and _is_price(eod.high_52w):
        return eod.open >= eod.high_52w * params.high_ratio, FeatureSource.END_OF_DAY
    return False, FeatureSource.DEFAULT


def resolve_liquidity_bucket(
    pre: Optional[PreMarketRecord],
    eod: EndOfDayRecord,
    params: LiquidityParams
) -> tuple[LiquidityBucket, FeatureSource]:
    """Pre-market bucket, else tiered from volume, else LOW."""
    if pre is not None:
        bucket = parse_liquidity_bucket(pre.liquidity_bucket)
        if bucket is not None:
            return bucket, FeatureSource.PREMARKET
    if eod.volume is not None:
        if eod.volume >= params.high_volume:
            return LiquidityBucket.HIGH, FeatureSource.END_OF_DAY
        if eod.volume >= params.medium_volume:
            return LiquidityBucket.MEDIUM, FeatureSource.END_OF_DAY
        return LiquidityBucket.LOW, FeatureSource.END_OF_DAY
    return LiquidityBucket.LOW, FeatureSource.DEFAULT


def resolve_entry_anchor(pre: Optional[PreMarketRecord], eod: EndOfDayRecord) -> tuple[float, FeatureSource]:
    """First positive of pre_open_price, open, close."""
    if pre is not None and _is_price(pre.pre_open_price):
        return pre.pre_open_price, FeatureSource.PREMARKET
    if _is_price(eod.open):
        return eod.open, FeatureSource.END_OF_DAY
    if _is_price(eod.close):
        return eod.close, FeatureSource.END_OF_DAY
    return 0.0, FeatureSource.DEFAULT


def resolve_features(
    pre: Optional[PreMarketRecord],
    eod: EndOfDayRecord,
    near_high: Optional[NearHighParams] = None,
    liquidity: Optional[LiquidityParams] = None
) -> FeatureSet:
    """
    Build the FeatureSet for one symbol.

    Args:
        pre: Today's pre-market record, or None when the symbol has none
        eod: Prior trading day's end-of-day record (must be usable)
        near_high: 52W high proximity parameters
        liquidity: Volume tiering parameters

    Returns:
        Resolved FeatureSet with per-field sources
    """
    near_high = near_high or NearHighParams()
    liquidity = liquidity or LiquidityParams()

    gap_percent, gap_src = resolve_gap_percent(pre, eod)
    rs20, rs20_src = resolve_rs20(eod)
    vol_surge, vol_src = resolve_vol_surge(pre, eod)
    near_high_flag, near_src = resolve_near_high_flag(pre, eod, near_high)
    bucket, bucket_src = resolve_liquidity_bucket(pre, eod, liquidity)
    entry_anchor, entry_src = resolve_entry_anchor(pre, eod)

    return FeatureSet(
        gap_percent=gap_percent,
        rs20=rs20,
        vol_surge=vol_surge,
        near_high_flag=near_high_flag,
        liquidity_bucket=bucket,
        atr20=eod.atr20 if eod.atr20 is not None else 0.0,
        close=eod.close if eod.close is not None else 0.0,
        entry_anchor_price=entry_anchor,
        sources={
            "gap_percent": gap_src,
            "rs20": rs20_src,
            "vol_surge": vol_src,
            "near_high_flag": near_src,
            "liquidity_bucket": bucket_src,
            "atr20": FeatureSource.END_OF_DAY if eod.atr20 is not None else FeatureSource.DEFAULT,
            "close": FeatureSource.END_OF_DAY if eod.close is not None else FeatureSource.DEFAULT,
            "entry_anchor_price": entry_src,
        },
    )
