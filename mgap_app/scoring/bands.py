"""
Sub-score bands for the momentum gap composite.

Each function is pure and bounded independently:

    gap band          0-25
    relative strength 0-20
    volume surge      0-20
    near-high bonus   0 or 15
    liquidity         0 / 5 / 10
    ATR quality       0-10
"""

from ..config.defaults import (
    ATRParams,
    GapParams,
    LiquidityParams,
    NearHighParams,
    RelativeStrengthParams,
    VolumeParams,
)
from ..data.models import LiquidityBucket


def gap_band_score(gap_percent: float, params: GapParams = GapParams()) -> float:
    """
    Score the opening gap.

    Full credit at the optimal gap, decaying linearly inside
    [gap_min, gap_max]. Positive gaps below gap_min ramp up linearly to
    small_gap_points. Negative, zero and oversized gaps score 0.
    """
    if params.gap_min <= gap_percent <= params.gap_max:
        distance = abs(gap_percent - params.optimal_gap)
        return max(0.0, params.max_points - distance * params.decay_per_pct)
    if 0 < gap_percent < params.gap_min:
        return (gap_percent / params.gap_min) * params.small_gap_points
    return 0.0


def relative_strength_score(rs20: float, params: RelativeStrengthParams = RelativeStrengthParams()) -> float:
    """Full credit at rs20_min and above, proportional from rs20_partial_min."""
    if rs20 >= params.rs20_min:
        return params.max_points
    if rs20 >= params.rs20_partial_min:
        return (rs20 / params.rs20_min) * params.max_points
    return 0.0


def volume_surge_score(vol_surge: float, params: VolumeParams = VolumeParams()) -> float:
    """
    Score volume surge.

    At or above vol_surge_min the score scales towards max_points at
    vol_surge_full. Between the floor and vol_surge_min it ramps from 0 to
    partial_points.
    """
    if vol_surge >= params.vol_surge_min:
        return min(params.max_points, (vol_surge / params.vol_surge_full) * params.max_points)
    if vol_surge >= params.vol_surge_floor:
        span = params.vol_surge_min - params.vol_surge_floor
        return ((vol_surge - params.vol_surge_floor) / span) * params.partial_points
    return 0.0


def near_high_bonus(near_high_flag: bool, params: NearHighParams = NearHighParams()) -> float:
    """Flat bonus when trading near the 52-week high."""
    return params.bonus_points if near_high_flag else 0.0


def liquidity_score(bucket: LiquidityBucket, params: LiquidityParams = LiquidityParams()) -> float:
    if bucket == LiquidityBucket.HIGH:
        return params.high_points
    if bucket == LiquidityBucket.MEDIUM:
        return params.medium_points
    return 0.0


def atr_percent(atr20: float, close: float) -> float:
    """ATR as a percentage of close; 0 when either input is non-positive."""
    if close > 0 and atr20 > 0:
        return atr20 / close * 100
    return 0.0


def atr_quality_score(atr20: float, close: float, params: ATRParams = ATRParams()) -> float:
    """
    Score volatility suitability for stop placement.

    Full credit inside [band_low_pct, band_high_pct], a linear ramp below it,
    a linear decay above it, and 0 from cutoff_pct upwards.
    """
    pct = atr_percent(atr20, close)
    if pct <= 0:
        return 0.0
    if params.band_low_pct <= pct <= params.band_high_pct:
        return params.max_points
    if pct < params.band_low_pct:
        return (pct / params.band_low_pct) * params.ramp_points
    if pct < params.cutoff_pct:
        decay_span = params.cutoff_pct - params.band_high_pct
        return params.max_points - ((pct - params.band_high_pct) / decay_span) * params.ramp_points
    return 0.0
