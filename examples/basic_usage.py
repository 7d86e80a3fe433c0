#!/usr/bin/env python3
"""
Basic Usage Example - Momentum Gap Signal Engine

This script runs one daily signal generation over a throwaway SQLite
database. It shows how to:
- Normalize raw pre-market and bhavcopy documents
- Store them in the snapshot store
- Generate, rank and persist signals for a target date
- Read the stored run back

Run: python examples/basic_usage.py
"""

import tempfile
from pathlib import Path
from typing import Any, Dict, List

from mgap_app.data.normalizer import RecordNormalizer
from mgap_app.engine import SignalGenerator
from mgap_app.logging import configure_logging
from mgap_app.persistence import SQLiteMarketDataStore, SQLiteRunStore

TARGET_DATE = "2024-01-15"    # Monday
BHAVCOPY_DATE = "2024-01-12"  # Friday


def create_premarket_docs() -> List[Dict[str, Any]]:
    """Pre-market documents as an ingestion job would write them."""
    return [
        {"symbol": "RELIANCE", "date": TARGET_DATE, "gap_percent": "1.6",
         "vol_surge": 2.1, "near_high_flag": True, "liquidity_bucket": "HIGH",
         "pre_open_price": 2512.0},
        {"symbol": "HDFCBANK", "date": TARGET_DATE, "gap_percent": 0.2,
         "vol_surge": "1.2", "near_high_flag": "false", "liquidity_bucket": "medium"},
    ]


def create_bhavcopy_docs() -> List[Dict[str, Any]]:
    """Prior trading day end-of-day documents."""
    return [
        {"symbol": "RELIANCE", "date": BHAVCOPY_DATE, "open": 2460.0, "close": 2472.5,
         "prev_close": 2455.0, "volume": 5_400_000, "avg_vol20": 4_100_000,
         "atr20": 52.0, "high_52w": 2520.0, "rs20": 4.8},
        {"symbol": "HDFCBANK", "date": BHAVCOPY_DATE, "open": 1650.0, "close": 1644.0,
         "prev_close": 1655.0, "volume": 3_000_000, "avg_vol20": 3_200_000,
         "atr20": 21.0, "high_52w": 1760.0, "rs20": 0.4},
        {"symbol": "TATAMOTORS", "date": BHAVCOPY_DATE, "open": 812.0, "close": 815.5,
         "prev_close": 800.0, "volume": "9,800,000", "avg_vol20": 6_000_000,
         "atr20": 18.5, "high_52w": 820.0, "rs20": 3.1},
    ]


def main():
    """Run the demo."""
    configure_logging(level="WARNING")

    print("Momentum Gap Signal Engine - Basic Usage Demo")
    print("=" * 60)

    with tempfile.TemporaryDirectory() as tmp:
        market_store = SQLiteMarketDataStore(str(Path(tmp) / "market.db"))
        run_store = SQLiteRunStore(str(Path(tmp) / "signals.db"))

        print("1. Loading snapshots...")
        normalizer = RecordNormalizer()
        market_store.upsert_premarket(normalizer.normalize_premarket_batch(create_premarket_docs()))
        market_store.upsert_end_of_day(normalizer.normalize_end_of_day_batch(create_bhavcopy_docs()))

        print(f"2. Generating signals for {TARGET_DATE}...")
        generator = SignalGenerator(market_store.premarket, market_store.end_of_day, run_store)
        result = generator.generate(TARGET_DATE)
        print(f"   {result.message}")

        if result.is_empty:
            return

        print("3. Stored signals:")
        for signal in run_store.get_signals(result.run_id):
            print(f"   {signal.symbol:<12} score={signal.score:<4} entry={signal.entry_price:<9} "
                  f"stop={signal.stop_loss:<9} target={signal.target_price:<9} "
                  f"confidence={signal.confidence_score}")

        run = run_store.get_run(result.run_id)
        print(f"4. Run {run.run_id} ({run.regime_code}) based on bhavcopy {run.bhavcopy_date}")


if __name__ == "__main__":
    main()
