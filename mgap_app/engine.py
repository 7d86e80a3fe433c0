"""
Main signal generation engine.

Orchestrates one daily momentum gap run: resolves the prior trading day,
joins today's pre-market records with that day's end-of-day records,
scores every symbol, keeps the top candidates above the threshold and
persists the run with its signals.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Optional

import structlog

from .config.defaults import StrategyConfig, get_default_config
from .data.models import EndOfDayRecord, PreMarketRecord
from .errors import ReferenceDataMissingError, SignalValidationError
from .features.resolver import resolve_features
from .logging.config import get_run_logger, log_score_decision
from .models.signals import RunResult, Signal, SignalCandidate, SignalRun
from .persistence.base import EndOfDayStore, PreMarketStore, RunStore
from .regime import RegimeClassifier, StaticRegimeClassifier
from .scoring.scorer import Scorer
from .utils.params import hash_strategy_params
from .utils.time import format_iso_date, prior_trading_day

logger = structlog.get_logger(__name__)


class SymbolSource(str, Enum):
    """Which inputs a symbol is scored from."""
    BOTH = "both"
    END_OF_DAY_ONLY = "end_of_day_only"


@dataclass(frozen=True)
class SymbolInputs:
    """Inputs for one symbol after the cross-source join."""
    symbol: str
    source: SymbolSource
    end_of_day: EndOfDayRecord
    premarket: Optional[PreMarketRecord] = None


def join_symbol_inputs(
    premarket: list[PreMarketRecord],
    end_of_day: list[EndOfDayRecord]
) -> list[SymbolInputs]:
    """
    Join pre-market and end-of-day records per symbol.

    Symbols with both a pre-market record and a usable end-of-day record
    come first, in pre-market order. Remaining usable end-of-day symbols
    follow in end-of-day order with no pre-market input. Unusable
    end-of-day records (close or prev_close not positive) are dropped, and
    pre-market records without an end-of-day counterpart are ignored.
    Duplicate symbols within one source keep the last record.
    """
    eod_by_symbol = {record.symbol: record for record in end_of_day}
    pre_by_symbol = {record.symbol: record for record in premarket}

    joined = []
    processed = set()

    for symbol, pre in pre_by_symbol.items():
        eod = eod_by_symbol.get(symbol)
        if eod is None or not eod.is_usable:
            continue
        processed.add(symbol)
        joined.append(SymbolInputs(symbol, SymbolSource.BOTH, eod, pre))

    for symbol, eod in eod_by_symbol.items():
        if symbol in processed or not eod.is_usable:
            continue
        joined.append(SymbolInputs(symbol, SymbolSource.END_OF_DAY_ONLY, eod))

    return joined


class SignalGenerator:
    """
    Coordinator for the momentum gap signal run.

    Manages the pipeline:
    Trading Day → Fetch → Join → Features → Score → Rank → Persist
    """

    def __init__(
        self,
        premarket_store: PreMarketStore,
        end_of_day_store: EndOfDayStore,
        run_store: RunStore,
        config: Optional[StrategyConfig] = None,
        regime_classifier: Optional[RegimeClassifier] = None,
        run_id_factory: Callable[[], str] = lambda: str(uuid.uuid4()),
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ) -> None:
        """Initialize the signal generator."""
        self.premarket_store = premarket_store
        self.end_of_day_store = end_of_day_store
        self.run_store = run_store
        self.config = config or get_default_config()
        self.regime_classifier = regime_classifier or StaticRegimeClassifier()
        self.run_id_factory = run_id_factory
        self.clock = clock

        self.scorer = Scorer(self.config)
        self.logger = logger
        self.run_logger = get_run_logger(__name__)

    def generate(self, target_date: str, run_id: Optional[str] = None) -> RunResult:
        """
        Generate and persist signals for one target date.

        Args:
            target_date: Pre-market date (YYYY-MM-DD) the run targets
            run_id: Idempotency key; a retry with the same id never writes
                a second run

        Returns:
            RunResult; run_id is None when no symbol cleared the threshold

        Raises:
            ReferenceDataMissingError: No end-of-day data for the prior day
            PersistenceError: Writing the run or its signals failed
            SignalValidationError: A built signal broke its invariants
        """
        target_date = format_iso_date(target_date)
        bhavcopy_date = prior_trading_day(target_date)

        # Store log lines written during the run carry the run dates
        with structlog.contextvars.bound_contextvars(target_date=target_date, bhavcopy_date=bhavcopy_date):
            return self._generate(target_date, bhavcopy_date, run_id)

    def _generate(self, target_date: str, bhavcopy_date: str, run_id: Optional[str]) -> RunResult:
        self.run_logger.info(
            "Signal run started",
            date=target_date,
            bhavcopy_date=bhavcopy_date,
            event_type="run_start"
        )

        premarket = self.premarket_store.find_by_date(target_date)
        if not premarket:
            self.logger.warning(
                "No pre-market data for target date, using end-of-day fallback",
                date=target_date
            )

        end_of_day = self.end_of_day_store.find_by_date(bhavcopy_date)
        if not end_of_day:
            self.logger.error(
                "No end-of-day data for prior trading day",
                date=target_date,
                bhavcopy_date=bhavcopy_date
            )
            raise ReferenceDataMissingError(
                f"No bhavcopy data found for prior trading day ({bhavcopy_date})",
                date=bhavcopy_date,
                context={"target_date": target_date}
            )

        data_counts = {"premarket": len(premarket), "bhavcopy": len(end_of_day)}

        candidates = self.score_universe(target_date, bhavcopy_date, premarket, end_of_day)
        selected = self.select_top(candidates)

        self.run_logger.info(
            "Candidates selected",
            date=target_date,
            qualifying=len(candidates),
            selected=len(selected),
            top_symbols=[c.symbol for c in selected],
            event_type="selection"
        )

        if not selected:
            self.logger.info("No signals generated", date=target_date)
            return RunResult(
                date=target_date,
                bhavcopy_date=bhavcopy_date,
                data_counts=data_counts,
                message=f"No signals generated for {target_date} (no stocks met criteria)",
            )

        run = self._build_run(run_id or self.run_id_factory(), target_date, bhavcopy_date, end_of_day)
        signals = [self._build_signal(run, candidate) for candidate in selected]
        for signal in signals:
            self._validate_signal(signal)

        self._persist(run, signals)

        return RunResult(
            date=target_date,
            bhavcopy_date=bhavcopy_date,
            run_id=run.run_id,
            signal_count=len(selected),
            signals=selected,
            data_counts=data_counts,
            message=f"Generated {len(selected)} signals for {target_date}",
        )

    def score_universe(
        self,
        target_date: str,
        bhavcopy_date: str,
        premarket: list[PreMarketRecord],
        end_of_day: list[EndOfDayRecord]
    ) -> list[SignalCandidate]:
        """Score every joined symbol and keep those at or above the threshold."""
        threshold = self.config.selection.score_threshold
        candidates = []

        for inputs in join_symbol_inputs(premarket, end_of_day):
            features = resolve_features(
                inputs.premarket,
                inputs.end_of_day,
                self.config.near_high,
                self.config.liquidity
            )
            result = self.scorer.score(features)

            log_score_decision(
                self.run_logger,
                symbol=inputs.symbol,
                score=result.score,
                threshold=threshold,
                source=inputs.source.value
            )

            if result.score >= threshold:
                candidates.append(SignalCandidate(
                    symbol=inputs.symbol,
                    date=target_date,
                    result=result,
                    premarket_date=target_date if inputs.source == SymbolSource.BOTH else None,
                    bhavcopy_date=bhavcopy_date,
                ))

        return candidates

    def select_top(self, candidates: list[SignalCandidate]) -> list[SignalCandidate]:
        """Rank by score descending (stable on ties) and keep max_signals."""
        ranked = sorted(candidates, key=lambda c: c.score, reverse=True)
        return ranked[:self.config.selection.max_signals]

    def _build_run(
        self,
        run_id: str,
        target_date: str,
        bhavcopy_date: str,
        end_of_day: list[EndOfDayRecord]
    ) -> SignalRun:
        regime = self.regime_classifier.classify(bhavcopy_date, end_of_day)
        return SignalRun(
            run_id=run_id,
            date=target_date,
            bhavcopy_date=bhavcopy_date,
            session=self.config.run.session,
            regime_code=regime.value,
            strategies_used=(self.config.run.strategy_name,),
            params_hash=hash_strategy_params(self.config),
            created_at=self.clock(),
        )

    def _build_signal(self, run: SignalRun, candidate: SignalCandidate) -> Signal:
        result = candidate.result
        return Signal(
            run_id=run.run_id,
            date=run.date,
            symbol=candidate.symbol,
            strategy_name=self.config.run.strategy_name,
            side=self.config.run.side,
            score=result.score,
            entry_price=result.entry_price,
            stop_loss=result.stop_loss,
            target_price=result.target_price,
            confidence_score=result.confidence_score,
            feature_fields=result.feature_fields(),
            data_sources=candidate.data_sources,
        )

    def _validate_signal(self, signal: Signal) -> None:
        """Check signal invariants before anything is written."""
        threshold = self.config.selection.score_threshold
        checks = (
            ("stop_loss", signal.stop_loss >= 0, "stop_loss must not be negative"),
            ("score", 0 <= signal.score <= 100, "score must lie in 0-100"),
            ("score", signal.score >= threshold, f"score below threshold {threshold}"),
            ("confidence_score", 0 <= signal.confidence_score <= 1, "confidence must lie in 0-1"),
        )
        for field_name, ok, message in checks:
            if not ok:
                raise SignalValidationError(
                    f"Signal for {signal.symbol} invalid: {message}",
                    symbol=signal.symbol,
                    field=field_name,
                    context={"value": getattr(signal, field_name)}
                )

    def _persist(self, run: SignalRun, signals: list[Signal]) -> None:
        """
        Two-phase write keyed by run_id.

        The run record goes first; signals are written only after it
        succeeds. A retry that finds the run already stored writes the
        signal batch only if none exist yet.
        """
        existing = self.run_store.get_run(run.run_id)

        if existing is None:
            self.run_store.insert_run(run)
        else:
            stored = self.run_store.count_signals(run.run_id)
            if stored > 0:
                self.run_logger.info(
                    "Run already persisted, skipping writes",
                    run_id=run.run_id,
                    stored_signals=stored,
                    event_type="persist_skip"
                )
                return
            self.run_logger.warning(
                "Resuming run with no stored signals",
                run_id=run.run_id,
                event_type="persist_resume"
            )

        written = self.run_store.insert_signals(signals)

        self.run_logger.info(
            "Signal run persisted",
            run_id=run.run_id,
            date=run.date,
            regime_code=run.regime_code,
            signal_count=written,
            event_type="run_persisted"
        )
