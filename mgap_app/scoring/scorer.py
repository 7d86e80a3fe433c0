"""
Composite scorer for resolved feature sets.

Sums the six sub-score bands into a 0-100 integer score, derives entry,
stop and target prices from ATR, and computes a confidence value from the
number of criteria met. The composite is not re-clamped: the band bounds
alone keep it inside 0-100.
"""

from dataclasses import asdict, dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Optional

from ..config.defaults import StrategyConfig, get_default_config
from ..data.models import LiquidityBucket
from ..features.resolver import FeatureSet
from .bands import (
    atr_quality_score,
    gap_band_score,
    liquidity_score,
    near_high_bonus,
    relative_strength_score,
    volume_surge_score,
)

CRITERIA_COUNT = 6


def round_half_up(value: float, digits: int = 0) -> float:
    """Round half away from zero at the given number of decimals."""
    quantum = Decimal(1).scaleb(-digits)
    return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))


@dataclass(frozen=True)
class ScoreBreakdown:
    """Unrounded sub-scores behind a composite score."""
    gap_band: float
    relative_strength: float
    volume_surge: float
    near_high: float
    liquidity: float
    atr_quality: float

    @property
    def total(self) -> float:
        return (self.gap_band + self.relative_strength + self.volume_surge +
                self.near_high + self.liquidity + self.atr_quality)

    def to_dict(self) -> dict[str, float]:
        return {k: round(v, 4) for k, v in asdict(self).items()}


@dataclass(frozen=True)
class ScoreResult:
    """Score, trade levels and feature echo for one symbol."""
    score: int
    entry_price: float
    stop_loss: float
    target_price: float
    confidence_score: float
    gap_percent: float
    rs20: float
    vol_surge: float
    near_high_flag: bool
    liquidity_bucket: LiquidityBucket
    breakdown: ScoreBreakdown

    def feature_fields(self) -> dict[str, Any]:
        """Feature snapshot persisted with a signal."""
        return {
            "gap_percent": self.gap_percent,
            "rs20": self.rs20,
            "vol_surge": self.vol_surge,
            "near_high_flag": self.near_high_flag,
            "liquidity_bucket": LiquidityBucket(self.liquidity_bucket).value,
        }


class Scorer:
    """Deterministic, stateless scorer bound to one strategy configuration."""

    def __init__(self, config: Optional[StrategyConfig] = None):
        self.config = config or get_default_config()

    def breakdown(self, features: FeatureSet) -> ScoreBreakdown:
        """Compute the six sub-scores."""
        cfg = self.config
        return ScoreBreakdown(
            gap_band=gap_band_score(features.gap_percent, cfg.gap),
            relative_strength=relative_strength_score(features.rs20, cfg.relative_strength),
            volume_surge=volume_surge_score(features.vol_surge, cfg.volume),
            near_high=near_high_bonus(features.near_high_flag, cfg.near_high),
            liquidity=liquidity_score(features.liquidity_bucket, cfg.liquidity),
            atr_quality=atr_quality_score(features.atr20, features.close, cfg.atr),
        )

    def trade_levels(self, features: FeatureSet) -> tuple[float, float, float]:
        """Entry, stop and target, each rounded to 2 decimals."""
        levels = self.config.trade_levels
        entry = features.entry_anchor_price
        stop = max(0.0, entry - features.atr20 * levels.stop_atr_mult)
        target = entry + features.atr20 * levels.target_atr_mult
        return round_half_up(entry, 2), round_half_up(stop, 2), round_half_up(target, 2)

    def criteria_met(self, features: FeatureSet) -> list[bool]:
        """The six boolean criteria behind the confidence score."""
        cfg = self.config
        return [
            cfg.gap.gap_min <= features.gap_percent <= cfg.gap.gap_max,
            features.rs20 >= cfg.relative_strength.rs20_min,
            features.vol_surge >= cfg.volume.vol_surge_min,
            features.near_high_flag,
            features.liquidity_bucket != LiquidityBucket.LOW,
            features.atr20 > 0 and features.close > 0,
        ]

    def confidence(self, features: FeatureSet) -> float:
        """Fraction of criteria met, in sixths, rounded to 2 decimals."""
        met = sum(1 for criterion in self.criteria_met(features) if criterion)
        return round_half_up(met / CRITERIA_COUNT, 2)

    def score(self, features: FeatureSet) -> ScoreResult:
        """
        Score a resolved feature set.

        Args:
            features: FeatureSet from the feature resolver

        Returns:
            ScoreResult with integer score, trade levels and feature echo
        """
        breakdown = self.breakdown(features)
        entry, stop, target = self.trade_levels(features)

        return ScoreResult(
            score=int(round_half_up(breakdown.total)),
            entry_price=entry,
            stop_loss=stop,
            target_price=target,
            confidence_score=self.confidence(features),
            gap_percent=round_half_up(features.gap_percent, 2),
            rs20=round_half_up(features.rs20, 2),
            vol_surge=round_half_up(features.vol_surge, 2),
            near_high_flag=features.near_high_flag,
            liquidity_bucket=features.liquidity_bucket,
            breakdown=breakdown,
        )


def score_features(features: FeatureSet, config: Optional[StrategyConfig] = None) -> ScoreResult:
    """Score a feature set with the given (or default) configuration."""
    return Scorer(config).score(features)
