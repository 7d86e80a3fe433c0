"""Deterministic serialization of the scoring parameters active for a run."""

import hashlib
import json
from dataclasses import fields
from typing import Any

from ..config.defaults import StrategyConfig, get_default_config

# Parameters always recorded, in this order, under their short names
CORE_PARAMS = (
    ("strategy", "run", "strategy_name"),
    ("gap_min", "gap", "gap_min"),
    ("gap_max", "gap", "gap_max"),
    ("rs20_min", "relative_strength", "rs20_min"),
    ("vol_surge_min", "volume", "vol_surge_min"),
    ("score_threshold", "selection", "score_threshold"),
    ("max_signals", "selection", "max_signals"),
)


def strategy_fingerprint(config: StrategyConfig) -> dict[str, Any]:
    """
    Parameters recorded with every run.

    The core parameters come first under their short names. Every other
    parameter that differs from the built-in default follows as
    ``section.name``, in section then field declaration order, so any
    change that can move a score or a trade level changes the fingerprint.
    """
    fingerprint = {
        key: getattr(getattr(config, section), name)
        for key, section, name in CORE_PARAMS
    }
    core = {(section, name) for _, section, name in CORE_PARAMS}
    defaults = get_default_config()

    for section in fields(config):
        current = getattr(config, section.name)
        default = getattr(defaults, section.name)
        for param in fields(current):
            if (section.name, param.name) in core:
                continue
            value = getattr(current, param.name)
            if value != getattr(default, param.name):
                fingerprint[f"{section.name}.{param.name}"] = value

    return fingerprint


def _canonical(value: Any) -> Any:
    # Whole floats serialize as ints so 4.0 and 4 hash the same
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def hash_strategy_params(config: StrategyConfig) -> str:
    """
    Serialize the strategy fingerprint deterministically.

    Keys are emitted in fingerprint order with compact separators, so two
    runs with the same parameters always store the same string. With the
    default configuration only the core parameters appear.

    Args:
        config: Active strategy configuration

    Returns:
        JSON string recorded as the run's params_hash
    """
    fingerprint = {k: _canonical(v) for k, v in strategy_fingerprint(config).items()}
    return json.dumps(fingerprint, separators=(",", ":"))


def params_digest(params_hash: str) -> str:
    """Short SHA-256 digest of a params_hash, for display and grouping."""
    return hashlib.sha256(params_hash.encode()).hexdigest()[:16]
