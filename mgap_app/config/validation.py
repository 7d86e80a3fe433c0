"""Configuration validation utilities."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ValidationError:
    """Represents a configuration validation error."""
    field: str
    message: str
    value: Any


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class ConfigValidator:
    """Validates strategy configuration parameters."""

    @staticmethod
    def validate_gap_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate gap band parameters."""
        errors = []

        for name in ("gap_min", "gap_max", "optimal_gap", "max_points",
                     "decay_per_pct", "small_gap_points"):
            if name in params:
                value = params[name]
                if not _is_number(value) or value < 0:
                    errors.append(ValidationError(
                        field=f"gap.{name}",
                        message="Must be a non-negative number",
                        value=value
                    ))

        gap_min = params.get("gap_min")
        gap_max = params.get("gap_max")
        if _is_number(gap_min) and _is_number(gap_max):
            if gap_min <= 0 or gap_min >= gap_max:
                errors.append(ValidationError(
                    field="gap.gap_min",
                    message="Must be positive and below gap_max",
                    value=gap_min
                ))
            optimal = params.get("optimal_gap")
            if _is_number(optimal) and not gap_min <= optimal <= gap_max:
                errors.append(ValidationError(
                    field="gap.optimal_gap",
                    message="Must lie inside [gap_min, gap_max]",
                    value=optimal
                ))

        return errors

    @staticmethod
    def validate_relative_strength_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate RS20 parameters."""
        errors = []

        rs20_min = params.get("rs20_min")
        partial = params.get("rs20_partial_min")
        if rs20_min is not None and (not _is_number(rs20_min) or rs20_min <= 0):
            errors.append(ValidationError(
                field="relative_strength.rs20_min",
                message="Must be a positive number",
                value=rs20_min
            ))
        elif _is_number(partial) and _is_number(rs20_min) and partial > rs20_min:
            errors.append(ValidationError(
                field="relative_strength.rs20_partial_min",
                message="Must not exceed rs20_min",
                value=partial
            ))

        return errors

    @staticmethod
    def validate_volume_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate volume surge parameters."""
        errors = []

        floor = params.get("vol_surge_floor")
        surge_min = params.get("vol_surge_min")
        full = params.get("vol_surge_full")
        for name, value in (("vol_surge_floor", floor), ("vol_surge_min", surge_min),
                            ("vol_surge_full", full)):
            if value is not None and (not _is_number(value) or value <= 0):
                errors.append(ValidationError(
                    field=f"volume.{name}",
                    message="Must be a positive number",
                    value=value
                ))

        if not errors and _is_number(floor) and _is_number(surge_min) and floor >= surge_min:
            errors.append(ValidationError(
                field="volume.vol_surge_floor",
                message="Must be below vol_surge_min",
                value=floor
            ))

        return errors

    @staticmethod
    def validate_atr_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate ATR band parameters."""
        errors = []

        low = params.get("band_low_pct")
        high = params.get("band_high_pct")
        cutoff = params.get("cutoff_pct")
        if _is_number(low) and _is_number(high) and _is_number(cutoff):
            if not 0 < low <= high < cutoff:
                errors.append(ValidationError(
                    field="atr.band_low_pct",
                    message="Must satisfy 0 < band_low_pct <= band_high_pct < cutoff_pct",
                    value=(low, high, cutoff)
                ))

        return errors

    @staticmethod
    def validate_trade_level_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate stop and target multipliers."""
        errors = []

        for name in ("stop_atr_mult", "target_atr_mult"):
            if name in params:
                value = params[name]
                if not _is_number(value) or value <= 0:
                    errors.append(ValidationError(
                        field=f"trade_levels.{name}",
                        message="Must be a positive number",
                        value=value
                    ))

        return errors

    @staticmethod
    def validate_selection_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate selection parameters."""
        errors = []

        if "score_threshold" in params:
            value = params["score_threshold"]
            if not _is_number(value) or value < 0 or value > 100:
                errors.append(ValidationError(
                    field="selection.score_threshold",
                    message="Must be a number between 0 and 100",
                    value=value
                ))

        if "max_signals" in params:
            value = params["max_signals"]
            if not isinstance(value, int) or isinstance(value, bool) or value < 1:
                errors.append(ValidationError(
                    field="selection.max_signals",
                    message="Must be a positive integer",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_config(config: dict[str, Any]) -> list[ValidationError]:
        """Validate complete configuration."""
        errors = []

        for section, value in config.items():
            if not isinstance(value, dict):
                errors.append(ValidationError(
                    field=section,
                    message="Must be a mapping of parameters",
                    value=value
                ))
        if errors:
            return errors

        if "gap" in config:
            errors.extend(ConfigValidator.validate_gap_params(config["gap"]))

        if "relative_strength" in config:
            errors.extend(ConfigValidator.validate_relative_strength_params(config["relative_strength"]))

        if "volume" in config:
            errors.extend(ConfigValidator.validate_volume_params(config["volume"]))

        if "atr" in config:
            errors.extend(ConfigValidator.validate_atr_params(config["atr"]))

        if "trade_levels" in config:
            errors.extend(ConfigValidator.validate_trade_level_params(config["trade_levels"]))

        if "selection" in config:
            errors.extend(ConfigValidator.validate_selection_params(config["selection"]))

        return errors
