"""
Error handling tests for the signal engine.

Covers the error hierarchy and how missing or broken inputs surface.
"""

import pytest
from unittest.mock import Mock

from mgap_app.engine import SignalGenerator
from mgap_app.errors import (
    ConfigurationError,
    DataQualityError,
    MalformedDataError,
    MissingDataError,
    NoReferenceDataError,
    PersistenceError,
    ReferenceDataMissingError,
    SignalValidationError,
    SystemFailureError,
)
from mgap_app.features.resolver import resolve_features
from mgap_app.scoring.scorer import score_features

from conftest import make_eod, make_premarket


class TestErrorClassification:
    """Test error classification system."""

    def test_data_quality_error_hierarchy(self):
        base_error = DataQualityError("base error")
        assert base_error.recoverable is True
        assert base_error.context == {}

        missing = MissingDataError("missing", data_type="premarket")
        assert isinstance(missing, DataQualityError)
        assert missing.data_type == "premarket"

        malformed = MalformedDataError("bad", raw_data="{}", expected_format="YYYY-MM-DD")
        assert malformed.expected_format == "YYYY-MM-DD"

    def test_reference_data_missing_is_fatal(self):
        error = ReferenceDataMissingError("no bhavcopy", date="2024-01-12", context={"target_date": "2024-01-15"})

        assert isinstance(error, MissingDataError)
        assert error.recoverable is False
        assert error.date == "2024-01-12"
        assert error.data_type == "bhavcopy"
        assert error.context["target_date"] == "2024-01-15"

    def test_no_reference_data_alias(self):
        assert NoReferenceDataError is ReferenceDataMissingError

    def test_system_failure_error_hierarchy(self):
        persistence = PersistenceError("write failed", operation="insert_run", target="signals.db")
        assert isinstance(persistence, SystemFailureError)
        assert persistence.recoverable is False
        assert persistence.operation == "insert_run"

        config_error = ConfigurationError("bad config", errors=["a: b"])
        assert "a: b" in str(config_error)

        validation = SignalValidationError("bad signal", symbol="INFY", field="stop_loss")
        assert validation.symbol == "INFY"


class TestFallbackAbsorbsAnomalies:
    """Missing optional fields never raise during scoring."""

    @pytest.mark.parametrize("field", [
        "open", "volume", "avg_vol20", "atr20", "high_52w", "rs20",
    ])
    def test_missing_end_of_day_field(self, field):
        result = score_features(resolve_features(None, make_eod(**{field: None})))
        assert 0 <= result.score <= 100
        assert result.stop_loss >= 0

    def test_zero_average_volume(self):
        result = score_features(resolve_features(None, make_eod(avg_vol20=0.0, volume=0.0)))
        assert result.score >= 0

    def test_sparse_premarket(self):
        pre = make_premarket(gap_percent=None, vol_surge=None, near_high_flag=None,
                             liquidity_bucket=None, pre_open_price=None)
        result = score_features(resolve_features(pre, make_eod()))
        assert result.score == score_features(resolve_features(None, make_eod())).score


class TestGeneratorFailures:
    """Failures that propagate from the generator."""

    def _generator(self, premarket=None, end_of_day=None):
        premarket_store = Mock()
        premarket_store.find_by_date.return_value = premarket or []
        end_of_day_store = Mock()
        end_of_day_store.find_by_date.return_value = end_of_day or []
        run_store = Mock()
        run_store.get_run.return_value = None
        return SignalGenerator(premarket_store, end_of_day_store, run_store), run_store

    def test_missing_reference_data_raises(self):
        generator, run_store = self._generator(premarket=[make_premarket()])

        with pytest.raises(ReferenceDataMissingError) as exc_info:
            generator.generate("2024-01-15")

        assert exc_info.value.date == "2024-01-12"
        run_store.insert_run.assert_not_called()
        run_store.insert_signals.assert_not_called()

    def test_run_write_failure_skips_signals(self):
        generator, run_store = self._generator(end_of_day=[make_eod()])
        run_store.insert_run.side_effect = PersistenceError("disk full", operation="insert_run")

        with pytest.raises(PersistenceError):
            generator.generate("2024-01-15")

        run_store.insert_signals.assert_not_called()

    def test_signal_write_failure_propagates(self):
        generator, run_store = self._generator(end_of_day=[make_eod()])
        run_store.insert_signals.side_effect = PersistenceError("locked", operation="insert_signals")

        with pytest.raises(PersistenceError):
            generator.generate("2024-01-15")

        run_store.insert_run.assert_called_once()

    def test_invalid_date_raises_value_error(self):
        generator, _ = self._generator(end_of_day=[make_eod()])
        with pytest.raises(ValueError):
            generator.generate("not-a-date")
