"""Pytest configuration and shared fixtures."""

import os
import shutil
import tempfile

import pytest

from mgap_app.data.models import EndOfDayRecord, LiquidityBucket, PreMarketRecord
from mgap_app.persistence import SQLiteMarketDataStore, SQLiteRunStore

# Monday; the prior trading day is Friday 2024-01-12
TARGET_DATE = "2024-01-15"
BHAVCOPY_DATE = "2024-01-12"


def make_eod(symbol: str = "INFY", date: str = BHAVCOPY_DATE, **overrides) -> EndOfDayRecord:
    """End-of-day record that scores 75 on its own (see test_resolver)."""
    values = {
        "open": 102.0,
        "close": 101.5,
        "prev_close": 100.0,
        "volume": 2_000_000.0,
        "avg_vol20": 1_000_000.0,
        "atr20": 2.5,
        "high_52w": 103.0,
        "rs20": 1.0,
    }
    values.update(overrides)
    return EndOfDayRecord(symbol=symbol, date=date, **values)


def make_premarket(symbol: str = "INFY", date: str = TARGET_DATE, **overrides) -> PreMarketRecord:
    """Pre-market record with the ideal feature values."""
    values = {
        "gap_percent": 1.5,
        "vol_surge": 2.0,
        "near_high_flag": True,
        "liquidity_bucket": LiquidityBucket.HIGH,
        "pre_open_price": 101.0,
    }
    values.update(overrides)
    return PreMarketRecord(symbol=symbol, date=date, **values)


@pytest.fixture
def temp_dir():
    """Temporary directory removed after the test."""
    path = tempfile.mkdtemp()
    yield path
    shutil.rmtree(path)


@pytest.fixture
def market_store(temp_dir) -> SQLiteMarketDataStore:
    return SQLiteMarketDataStore(os.path.join(temp_dir, "market.db"))


@pytest.fixture
def run_store(temp_dir) -> SQLiteRunStore:
    return SQLiteRunStore(os.path.join(temp_dir, "signals.db"))


@pytest.fixture
def sample_premarket_doc() -> dict:
    """Raw pre-market document as written by ingestion."""
    return {
        "symbol": "TCS",
        "date": TARGET_DATE,
        "gap_percent": "1.25",
        "vol_surge": 1.8,
        "near_high_flag": "true",
        "liquidity_bucket": "high",
        "pre_open_price": 3550.5,
    }


@pytest.fixture
def sample_bhavcopy_doc() -> dict:
    """Raw end-of-day document as written by ingestion."""
    return {
        "symbol": "TCS",
        "date": BHAVCOPY_DATE,
        "open": 3500.0,
        "close": 3520.0,
        "prev_close": "3490",
        "volume": 1_200_000,
        "avg_vol20": 900_000,
        "atr20": 70.0,
        "high_52w": 3600.0,
        "rs20": 4.5,
    }
