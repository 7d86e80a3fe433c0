#!/usr/bin/env python3
"""Load pre-market or bhavcopy documents from a JSON file into the market store.

Usage:
    python scripts/import_snapshots.py --kind premarket premarket_2024-01-15.json
    python scripts/import_snapshots.py --kind bhavcopy bhavcopy_2024-01-12.json

The file must contain a JSON array of objects with at least "symbol" and
"date"; malformed documents are skipped and logged.
"""

import argparse
import json
import sys
from pathlib import Path

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from mgap_app.data.normalizer import RecordNormalizer
from mgap_app.errors import PersistenceError
from mgap_app.logging import configure_logging, get_logger
from mgap_app.persistence import SQLiteMarketDataStore


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Import snapshot documents")
    parser.add_argument("file", type=Path, help="JSON array of documents")
    parser.add_argument("--kind", required=True, choices=("premarket", "bhavcopy"))
    parser.add_argument("--market-db", default="market.db", help="Snapshot database path")
    parser.add_argument("--log-level", default="INFO")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    configure_logging(level=args.log_level)
    logger = get_logger("scripts.import_snapshots")

    try:
        with open(args.file) as f:
            docs = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.error("Could not read input file", file=str(args.file), error=str(e))
        return 1

    if not isinstance(docs, list):
        logger.error("Input file must contain a JSON array", file=str(args.file))
        return 1

    normalizer = RecordNormalizer()
    store = SQLiteMarketDataStore(args.market_db)

    try:
        if args.kind == "premarket":
            written = store.upsert_premarket(normalizer.normalize_premarket_batch(docs))
        else:
            written = store.upsert_end_of_day(normalizer.normalize_end_of_day_batch(docs))
    except PersistenceError as e:
        logger.error("Import failed", error=str(e))
        return 1

    print(f"Imported {written} of {len(docs)} {args.kind} documents")
    return 0


if __name__ == "__main__":
    sys.exit(main())
