"""Data models for signal runs, persisted signals and run results"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from ..scoring.scorer import ScoreResult


@dataclass(frozen=True)
class SignalCandidate:
    """A symbol that cleared the score threshold, before ranking"""
    symbol: str
    date: str
    result: ScoreResult
    premarket_date: Optional[str]  # None when scored from end-of-day data only
    bhavcopy_date: str

    @property
    def score(self) -> int:
        return self.result.score

    @property
    def data_sources(self) -> dict[str, Optional[str]]:
        return {
            "premarket_date": self.premarket_date,
            "bhavcopy_date": self.bhavcopy_date,
        }

    def to_dict(self) -> dict[str, Any]:
        return {
            "symbol": self.symbol,
            "date": self.date,
            "score": self.result.score,
            "entry_price": self.result.entry_price,
            "stop_loss": self.result.stop_loss,
            "target_price": self.result.target_price,
            "confidence_score": self.result.confidence_score,
            **self.result.feature_fields(),
            "score_breakdown": self.result.breakdown.to_dict(),
            "data_sources": self.data_sources,
        }


@dataclass(frozen=True)
class SignalRun:
    """One invocation of the signal pipeline"""
    run_id: str
    date: str                     # Pre-market date the run targets
    bhavcopy_date: str            # Resolved prior trading day
    session: str
    regime_code: str
    strategies_used: tuple[str, ...]
    params_hash: str
    created_at: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "run_id": self.run_id,
            "date": self.date,
            "bhavcopy_date": self.bhavcopy_date,
            "session": self.session,
            "regime_code": self.regime_code,
            "strategies_used": list(self.strategies_used),
            "params_hash": self.params_hash,
            "created_at": self.created_at.isoformat(),
        }


@dataclass(frozen=True)
class Signal:
    """A persisted trade signal belonging to one run"""
    run_id: str
    date: str
    symbol: str
    strategy_name: str
    side: str
    score: int
    entry_price: float
    stop_loss: float
    target_price: float
    confidence_score: float
    feature_fields: dict[str, Any] = field(default_factory=dict)
    data_sources: dict[str, Optional[str]] = field(default_factory=dict)
    ai_explanation: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "run_id": self.run_id,
            "date": self.date,
            "symbol": self.symbol,
            "strategy_name": self.strategy_name,
            "side": self.side,
            "score": self.score,
            "entry_price": self.entry_price,
            "stop_loss": self.stop_loss,
            "target_price": self.target_price,
            "confidence_score": self.confidence_score,
            "feature_fields": dict(self.feature_fields),
            "data_sources": dict(self.data_sources),
            "ai_explanation": self.ai_explanation,
        }


@dataclass
class RunResult:
    """Externally observable outcome of one generate() call"""
    date: str
    bhavcopy_date: str
    run_id: Optional[str] = None
    signal_count: int = 0
    signals: list[SignalCandidate] = field(default_factory=list)
    data_counts: dict[str, int] = field(default_factory=dict)
    success: bool = True
    message: str = ""

    @property
    def is_empty(self) -> bool:
        return self.run_id is None

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "message": self.message,
            "date": self.date,
            "bhavcopy_date": self.bhavcopy_date,
            "run_id": self.run_id,
            "signal_count": self.signal_count,
            "data_counts": dict(self.data_counts),
            "signals": [candidate.to_dict() for candidate in self.signals],
        }
