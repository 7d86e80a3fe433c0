"""
Normalization of raw store documents into canonical records.

Upstream ingestion writes documents with loosely typed fields: numbers may
arrive as strings, optional fields may be missing, null or empty. This
module maps every such value onto either a clean Python value or ``None``.
"""

import math
from typing import Any, Iterable, Mapping, Optional

import structlog

from ..errors import MalformedDataError
from ..utils.time import format_iso_date
from .models import EndOfDayRecord, LiquidityBucket, NormalizationResult, PreMarketRecord

logger = structlog.get_logger(__name__)

PREMARKET_NUMERIC_FIELDS = ("gap_percent", "vol_surge", "pre_open_price")
END_OF_DAY_NUMERIC_FIELDS = (
    "open", "close", "prev_close", "volume", "avg_vol20", "atr20", "high_52w", "rs20",
)

_TRUE_STRINGS = {"true", "1", "yes", "y"}
_FALSE_STRINGS = {"false", "0", "no", "n"}


def parse_optional_float(value: Any) -> Optional[float]:
    """
    Parse a loosely typed numeric value.

    Returns None for missing, empty, boolean, non-finite or unparsable input.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, (int, float)):
        result = float(value)
    elif isinstance(value, str):
        text = value.strip().replace(",", "")
        if not text:
            return None
        try:
            result = float(text)
        except ValueError:
            return None
    else:
        return None

    if math.isnan(result) or math.isinf(result):
        return None
    return result


def parse_optional_bool(value: Any) -> Optional[bool]:
    """Parse a loosely typed flag; None when it cannot be interpreted."""
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
    return None


def parse_liquidity_bucket(value: Any) -> Optional[LiquidityBucket]:
    """Match a bucket name case-insensitively; None when unknown."""
    if isinstance(value, LiquidityBucket):
        return value
    if not isinstance(value, str):
        return None
    try:
        return LiquidityBucket(value.strip().upper())
    except ValueError:
        return None


class RecordNormalizer:
    """
    Converts raw documents to PreMarketRecord / EndOfDayRecord.

    Symbol and date are required; every other field is optional and
    silently becomes None when unusable.
    """

    def normalize_premarket(self, doc: Mapping[str, Any]) -> NormalizationResult:
        """Normalize one pre-market document."""
        try:
            symbol, day = self._identity(doc)
        except MalformedDataError as e:
            return NormalizationResult(success=False, error_msg=str(e))

        values = {name: parse_optional_float(doc.get(name)) for name in PREMARKET_NUMERIC_FIELDS}
        record = PreMarketRecord(
            symbol=symbol,
            date=day,
            near_high_flag=parse_optional_bool(doc.get("near_high_flag")),
            liquidity_bucket=parse_liquidity_bucket(doc.get("liquidity_bucket")),
            **values,
        )
        missing = tuple(name for name in (*PREMARKET_NUMERIC_FIELDS, "near_high_flag", "liquidity_bucket")
                        if getattr(record, name) is None)
        return NormalizationResult(record=record, missing_fields=missing)

    def normalize_end_of_day(self, doc: Mapping[str, Any]) -> NormalizationResult:
        """Normalize one end-of-day (bhavcopy) document."""
        try:
            symbol, day = self._identity(doc)
        except MalformedDataError as e:
            return NormalizationResult(success=False, error_msg=str(e))

        values = {name: parse_optional_float(doc.get(name)) for name in END_OF_DAY_NUMERIC_FIELDS}
        record = EndOfDayRecord(symbol=symbol, date=day, **values)
        missing = tuple(name for name in END_OF_DAY_NUMERIC_FIELDS if values[name] is None)
        return NormalizationResult(record=record, missing_fields=missing)

    def normalize_premarket_batch(self, docs: Iterable[Mapping[str, Any]]) -> list[PreMarketRecord]:
        """Normalize many pre-market documents, skipping malformed ones."""
        return self._batch(docs, self.normalize_premarket, "premarket")

    def normalize_end_of_day_batch(self, docs: Iterable[Mapping[str, Any]]) -> list[EndOfDayRecord]:
        """Normalize many end-of-day documents, skipping malformed ones."""
        return self._batch(docs, self.normalize_end_of_day, "bhavcopy")

    def _batch(self, docs, normalize, kind: str) -> list:
        records = []
        skipped = 0
        for doc in docs:
            result = normalize(doc)
            if result.success:
                records.append(result.record)
            else:
                skipped += 1
                logger.warning(
                    "Skipping malformed document",
                    kind=kind,
                    error=result.error_msg,
                    raw=str(doc)[:100]
                )
        if skipped:
            logger.info("Batch normalized", kind=kind, records=len(records), skipped=skipped)
        return records

    @staticmethod
    def _identity(doc: Mapping[str, Any]) -> tuple[str, str]:
        if not isinstance(doc, Mapping):
            raise MalformedDataError(
                f"Document must be a mapping, got {type(doc).__name__}",
                raw_data=str(doc)[:100]
            )

        symbol = doc.get("symbol")
        if not isinstance(symbol, str) or not symbol.strip():
            raise MalformedDataError("Document missing symbol", raw_data=str(doc)[:100])

        raw_date = doc.get("date")
        if raw_date is None:
            raise MalformedDataError("Document missing date", raw_data=str(doc)[:100])
        try:
            day = format_iso_date(raw_date)
        except ValueError as e:
            raise MalformedDataError(
                f"Document has invalid date: {raw_date!r}",
                raw_data=str(doc)[:100],
                expected_format="YYYY-MM-DD"
            ) from e

        return symbol.strip(), day
