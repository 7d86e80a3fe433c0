"""Configuration loader with 3-tier parameter precedence."""

from dataclasses import dataclass, fields, is_dataclass
from pathlib import Path
from typing import Any, Optional

import yaml

from ..errors import ConfigurationError
from .defaults import StrategyConfig, get_default_config
from .validation import ConfigValidator

STRATEGY_FILE = "strategy.yaml"


@dataclass(frozen=True)
class ConfigLoader:
    """Manages configuration loading with 3-tier precedence."""

    config_dir: Path
    defaults: StrategyConfig

    @classmethod
    def create(cls, config_dir: Optional[Path] = None) -> "ConfigLoader":
        """Create a ConfigLoader instance."""
        if config_dir is None:
            config_dir = Path(__file__).parent.parent.parent / "config"

        return cls(
            config_dir=Path(config_dir),
            defaults=get_default_config(),
        )

    def load_file_overrides(self) -> dict[str, Any]:
        """Load strategy overrides from the config directory, if present."""
        strategy_file = self.config_dir / STRATEGY_FILE

        if not strategy_file.exists():
            return {}

        try:
            with open(strategy_file) as f:
                file_config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Could not parse {strategy_file}: {e}",
                context={"path": str(strategy_file)}
            ) from e

        if file_config is None:
            return {}
        if not isinstance(file_config, dict):
            raise ConfigurationError(
                f"{strategy_file} must contain a mapping at the top level",
                context={"path": str(strategy_file)}
            )

        return file_config.get("strategy", {}) or {}

    def merge_config(self, overrides: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        """
        Merge configuration with 3-tier precedence.

        Priority order:
        1. Runtime overrides (highest priority)
        2. strategy.yaml in the config directory
        3. Built-in defaults (lowest priority)
        """
        config = self._dataclass_to_dict(self.defaults)

        config = self._deep_merge(config, self.load_file_overrides())

        if overrides:
            config = self._deep_merge(config, overrides)

        return config

    def load_config(self, overrides: Optional[dict[str, Any]] = None) -> StrategyConfig:
        """Merge, validate and build the active StrategyConfig."""
        merged = self.merge_config(overrides)

        errors = ConfigValidator.validate_config(merged)
        if errors:
            raise ConfigurationError(
                "Invalid strategy configuration",
                errors=[f"{err.field}: {err.message} (got: {err.value})" for err in errors]
            )

        return self._dict_to_config(merged)

    def _dict_to_config(self, config: dict[str, Any]) -> StrategyConfig:
        """Rebuild the frozen dataclass tree from a merged dictionary."""
        sections = {}
        for section in fields(StrategyConfig):
            section_cls = type(getattr(self.defaults, section.name))
            values = config.get(section.name, {})
            known = {f.name for f in fields(section_cls)}
            unknown = set(values) - known
            if unknown:
                raise ConfigurationError(
                    f"Unknown parameters in section '{section.name}'",
                    errors=sorted(unknown)
                )
            sections[section.name] = section_cls(**values)

        unknown_sections = set(config) - set(sections)
        if unknown_sections:
            raise ConfigurationError(
                "Unknown configuration sections",
                errors=sorted(unknown_sections)
            )

        return StrategyConfig(**sections)

    def _dataclass_to_dict(self, obj: Any) -> dict[str, Any]:
        """Convert nested dataclasses to dictionary."""
        if is_dataclass(obj):
            result = {}
            for field in fields(obj):
                value = getattr(obj, field.name)
                if is_dataclass(value):
                    result[field.name] = self._dataclass_to_dict(value)
                else:
                    result[field.name] = value
            return result
        return obj  # type: ignore[no-any-return]

    def _deep_merge(self, base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        """Deep merge two dictionaries."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result
