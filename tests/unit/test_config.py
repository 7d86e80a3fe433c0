"""Unit tests for configuration management."""

import pytest
from pathlib import Path

from mgap_app.config.defaults import get_default_config
from mgap_app.config.loader import ConfigLoader
from mgap_app.config.validation import ConfigValidator
from mgap_app.errors import ConfigurationError


def write_strategy(config_dir: Path, text: str) -> None:
    (config_dir / "strategy.yaml").write_text(text)


class TestDefaultConfig:
    """Test suite for default configuration."""

    def test_default_config_creation(self) -> None:
        """Test that default configuration carries the strategy constants."""
        config = get_default_config()
        assert config.gap.gap_min == 0.3
        assert config.gap.gap_max == 3.0
        assert config.gap.optimal_gap == 1.5
        assert config.relative_strength.rs20_min == 4.0
        assert config.volume.vol_surge_min == 1.5
        assert config.near_high.high_ratio == 0.98
        assert config.trade_levels.stop_atr_mult == 1.5
        assert config.trade_levels.target_atr_mult == 2.5
        assert config.selection.score_threshold == 60
        assert config.selection.max_signals == 10
        assert config.run.session == "PREOPEN"
        assert config.run.strategy_name == "intraday_momentum_gap"

    def test_defaults_are_valid(self) -> None:
        loader = ConfigLoader.create(Path("/nonexistent"))
        assert ConfigValidator.validate_config(loader.merge_config()) == []


class TestConfigLoader:
    """Test suite for configuration loader."""

    def test_config_loader_creation(self) -> None:
        loader = ConfigLoader.create()
        assert isinstance(loader.config_dir, Path)

    def test_missing_file_uses_defaults(self, tmp_path) -> None:
        loader = ConfigLoader.create(tmp_path)
        assert loader.load_config() == get_default_config()

    def test_file_overrides_defaults(self, tmp_path) -> None:
        write_strategy(tmp_path, "strategy:\n  selection:\n    score_threshold: 70\n")
        config = ConfigLoader.create(tmp_path).load_config()

        assert config.selection.score_threshold == 70
        assert config.selection.max_signals == 10

    def test_runtime_overrides_beat_file(self, tmp_path) -> None:
        write_strategy(tmp_path, "strategy:\n  selection:\n    score_threshold: 70\n    max_signals: 5\n")
        config = ConfigLoader.create(tmp_path).load_config({"selection": {"score_threshold": 65}})

        assert config.selection.score_threshold == 65
        assert config.selection.max_signals == 5

    def test_empty_file(self, tmp_path) -> None:
        write_strategy(tmp_path, "")
        assert ConfigLoader.create(tmp_path).load_config() == get_default_config()

    def test_unparsable_yaml_raises(self, tmp_path) -> None:
        write_strategy(tmp_path, "strategy: [unclosed\n")
        with pytest.raises(ConfigurationError):
            ConfigLoader.create(tmp_path).load_config()

    def test_non_mapping_file_raises(self, tmp_path) -> None:
        write_strategy(tmp_path, "- a\n- b\n")
        with pytest.raises(ConfigurationError):
            ConfigLoader.create(tmp_path).load_config()

    def test_unknown_parameter_raises(self) -> None:
        loader = ConfigLoader.create(Path("/nonexistent"))
        with pytest.raises(ConfigurationError) as exc_info:
            loader.load_config({"gap": {"gap_minimum": 0.5}})
        assert "gap_minimum" in exc_info.value.errors

    def test_unknown_section_raises(self) -> None:
        loader = ConfigLoader.create(Path("/nonexistent"))
        with pytest.raises(ConfigurationError):
            loader.load_config({"breakout": {}})

    def test_invalid_values_raise(self) -> None:
        loader = ConfigLoader.create(Path("/nonexistent"))
        with pytest.raises(ConfigurationError) as exc_info:
            loader.load_config({"selection": {"max_signals": 0}})
        assert any("selection.max_signals" in err for err in exc_info.value.errors)

    def test_shipped_strategy_file_is_valid(self) -> None:
        """The repository's config/strategy.yaml loads cleanly."""
        ConfigLoader.create().load_config()


class TestConfigValidator:
    """Test suite for configuration validator."""

    def test_gap_window_order(self) -> None:
        errors = ConfigValidator.validate_gap_params({"gap_min": 3.0, "gap_max": 0.3, "optimal_gap": 1.5})
        fields = [e.field for e in errors]
        assert "gap.gap_min" in fields

    def test_optimal_gap_outside_window(self) -> None:
        errors = ConfigValidator.validate_gap_params({"gap_min": 0.3, "gap_max": 3.0, "optimal_gap": 4.0})
        assert [e.field for e in errors] == ["gap.optimal_gap"]

    def test_negative_gap_points(self) -> None:
        errors = ConfigValidator.validate_gap_params({"max_points": -1})
        assert errors[0].field == "gap.max_points"

    def test_rs20_partial_above_full(self) -> None:
        errors = ConfigValidator.validate_relative_strength_params({"rs20_min": 4.0, "rs20_partial_min": 5.0})
        assert errors[0].field == "relative_strength.rs20_partial_min"

    def test_volume_floor_not_below_min(self) -> None:
        errors = ConfigValidator.validate_volume_params(
            {"vol_surge_floor": 1.5, "vol_surge_min": 1.5, "vol_surge_full": 2.0}
        )
        assert errors[0].field == "volume.vol_surge_floor"

    def test_atr_band_order(self) -> None:
        errors = ConfigValidator.validate_atr_params({"band_low_pct": 5.0, "band_high_pct": 2.0, "cutoff_pct": 10.0})
        assert len(errors) == 1

    @pytest.mark.parametrize("params", [{"stop_atr_mult": 0}, {"target_atr_mult": "2.5"}])
    def test_trade_level_multipliers(self, params) -> None:
        assert len(ConfigValidator.validate_trade_level_params(params)) == 1

    @pytest.mark.parametrize("params", [
        {"score_threshold": 101},
        {"score_threshold": -1},
        {"max_signals": 0},
        {"max_signals": 2.5},
        {"max_signals": True},
    ])
    def test_selection_params(self, params) -> None:
        assert len(ConfigValidator.validate_selection_params(params)) == 1

    def test_section_must_be_mapping(self) -> None:
        errors = ConfigValidator.validate_config({"selection": 60})
        assert errors[0].field == "selection"
