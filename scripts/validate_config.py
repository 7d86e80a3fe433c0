#!/usr/bin/env python3
"""Configuration validation script."""

import argparse
import sys
from pathlib import Path

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from mgap_app.config.loader import ConfigLoader
from mgap_app.config.validation import ConfigValidator
from mgap_app.errors import ConfigurationError
from mgap_app.utils.params import hash_strategy_params, params_digest


def main(argv=None) -> int:
    """Main validation function."""
    parser = argparse.ArgumentParser(description="Validate strategy configuration")
    parser.add_argument("--config-dir", type=Path, default=None)
    args = parser.parse_args(argv)

    loader = ConfigLoader.create(args.config_dir)
    print(f"Validating strategy configuration in {loader.config_dir} ...")

    try:
        merged = loader.merge_config()
    except ConfigurationError as e:
        print(f"Could not load configuration: {e}")
        return 1

    errors = ConfigValidator.validate_config(merged)
    if errors:
        print(f"Found {len(errors)} validation errors:")
        for error in errors:
            print(f"  - {error.field}: {error.message} (value: {error.value})")
        return 1

    try:
        config = loader.load_config()
    except ConfigurationError as e:
        print(f"Configuration rejected: {e}")
        return 1

    params_hash = hash_strategy_params(config)
    print("Configuration is valid")
    print(f"params_hash: {params_hash}")
    print(f"digest:      {params_digest(params_hash)}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
