"""Composite momentum gap scoring."""

from .bands import (
    atr_quality_score,
    gap_band_score,
    liquidity_score,
    near_high_bonus,
    relative_strength_score,
    volume_surge_score,
)
from .scorer import ScoreBreakdown, ScoreResult, Scorer, score_features

__all__ = [
    "Scorer",
    "ScoreBreakdown",
    "ScoreResult",
    "score_features",
    "gap_band_score",
    "relative_strength_score",
    "volume_surge_score",
    "near_high_bonus",
    "liquidity_score",
    "atr_quality_score",
]
