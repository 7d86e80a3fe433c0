"""Strategy configuration: defaults, YAML overrides and validation."""

from .defaults import StrategyConfig, get_default_config
from .loader import ConfigLoader

__all__ = ["ConfigLoader", "StrategyConfig", "get_default_config"]
