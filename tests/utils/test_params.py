"""Tests for run parameter serialization."""

import json
from dataclasses import replace

from mgap_app.config.defaults import get_default_config
from mgap_app.utils.params import hash_strategy_params, params_digest, strategy_fingerprint


class TestHashStrategyParams:
    """Test params_hash serialization."""

    def test_default_serialization(self):
        """Default configuration serializes to the fixed constant set."""
        expected = (
            '{"strategy":"intraday_momentum_gap","gap_min":0.3,"gap_max":3,'
            '"rs20_min":4,"vol_surge_min":1.5,"score_threshold":60,"max_signals":10}'
        )
        assert hash_strategy_params(get_default_config()) == expected

    def test_deterministic(self):
        config = get_default_config()
        assert hash_strategy_params(config) == hash_strategy_params(get_default_config())

    def test_reflects_live_configuration(self):
        """Changing a parameter changes the recorded hash."""
        config = get_default_config()
        changed = replace(config, selection=replace(config.selection, score_threshold=70))

        assert hash_strategy_params(changed) != hash_strategy_params(config)
        assert json.loads(hash_strategy_params(changed))["score_threshold"] == 70

    def test_fingerprint_keys(self):
        assert list(strategy_fingerprint(get_default_config())) == [
            "strategy", "gap_min", "gap_max", "rs20_min",
            "vol_surge_min", "score_threshold", "max_signals",
        ]


class TestParamsDigest:
    """Test params digest."""

    def test_digest_length_and_stability(self):
        params_hash = hash_strategy_params(get_default_config())
        digest = params_digest(params_hash)
        assert len(digest) == 16
        assert digest == params_digest(params_hash)
        assert digest != params_digest(params_hash + " ")


class TestNonCoreParameters:
    """Scoring parameters outside the core set still reach the hash."""

    def test_band_and_trade_level_changes_alter_hash(self):
        config = get_default_config()
        changed = replace(
            config,
            gap=replace(config.gap, optimal_gap=2.5),
            trade_levels=replace(config.trade_levels, stop_atr_mult=3.0),
        )

        assert hash_strategy_params(changed) != hash_strategy_params(config)
        params = json.loads(hash_strategy_params(changed))
        assert params["gap.optimal_gap"] == 2.5
        assert params["trade_levels.stop_atr_mult"] == 3

    def test_changed_parameters_follow_core_keys(self):
        config = get_default_config()
        changed = replace(
            config,
            trade_levels=replace(config.trade_levels, target_atr_mult=3.0),
            gap=replace(config.gap, decay_per_pct=8.0),
            liquidity=replace(config.liquidity, high_volume=2_000_000.0),
        )

        assert list(strategy_fingerprint(changed))[7:] == [
            "gap.decay_per_pct", "liquidity.high_volume", "trade_levels.target_atr_mult",
        ]

    def test_core_parameter_not_duplicated(self):
        config = get_default_config()
        changed = replace(config, volume=replace(config.volume, vol_surge_min=1.8))

        fingerprint = strategy_fingerprint(changed)
        assert fingerprint["vol_surge_min"] == 1.8
        assert "volume.vol_surge_min" not in fingerprint

    def test_value_equal_to_default_is_omitted(self):
        config = get_default_config()
        same = replace(config, trade_levels=replace(config.trade_levels, stop_atr_mult=1.5))

        assert hash_strategy_params(same) == hash_strategy_params(config)
