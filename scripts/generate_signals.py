#!/usr/bin/env python3
"""Generate momentum gap signals for one pre-market date.

Usage:
    python scripts/generate_signals.py --date 2024-01-15
    python scripts/generate_signals.py --market-db market.db --runs-db signals.db

Without --date the latest pre-market date in the market store is used,
falling back to today's date in the market timezone.
"""

import argparse
import json
import sys
from pathlib import Path

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from mgap_app.config.loader import ConfigLoader
from mgap_app.engine import SignalGenerator
from mgap_app.errors import ConfigurationError, PersistenceError, ReferenceDataMissingError
from mgap_app.logging import configure_logging, get_logger
from mgap_app.persistence import SQLiteMarketDataStore, SQLiteRunStore
from mgap_app.utils.time import market_today, prior_trading_day


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate momentum gap signals")
    parser.add_argument("--date", help="Pre-market date (YYYY-MM-DD)")
    parser.add_argument("--market-db", default="market.db", help="Snapshot database path")
    parser.add_argument("--runs-db", default="signals.db", help="Run database path")
    parser.add_argument("--config-dir", type=Path, default=None, help="Directory holding strategy.yaml")
    parser.add_argument("--log-level", default="INFO")
    parser.add_argument("--json-logs", action="store_true", help="Emit logs as JSON")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    configure_logging(level=args.log_level, format_json=args.json_logs)
    logger = get_logger("scripts.generate_signals")

    try:
        config = ConfigLoader.create(args.config_dir).load_config()
    except ConfigurationError as e:
        logger.error("Configuration invalid", error=str(e))
        return 1

    market_store = SQLiteMarketDataStore(args.market_db)
    run_store = SQLiteRunStore(args.runs_db)

    target_date = args.date or market_store.latest_date("premarket") or market_today()
    bhavcopy_date = prior_trading_day(target_date)

    logger.info(
        "Input data",
        premarket_date=target_date,
        premarket_count=market_store.count_by_date("premarket", target_date),
        bhavcopy_date=bhavcopy_date,
        bhavcopy_count=market_store.count_by_date("bhavcopy", bhavcopy_date)
    )

    generator = SignalGenerator(
        premarket_store=market_store.premarket,
        end_of_day_store=market_store.end_of_day,
        run_store=run_store,
        config=config,
    )

    try:
        result = generator.generate(target_date)
    except ReferenceDataMissingError as e:
        print(json.dumps({"success": False, "error": "No data found", "message": str(e)}, indent=2))
        return 1
    except PersistenceError as e:
        print(json.dumps({"success": False, "error": "Persistence failure", "message": str(e)}, indent=2))
        return 1

    print(json.dumps(result.to_dict(), indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
