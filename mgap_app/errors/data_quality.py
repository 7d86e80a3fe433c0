"""
Data quality error classifications for market snapshot processing.

These exceptions categorize problems with the pre-market and end-of-day
inputs the engine consumes.
"""

from typing import Optional, Dict, Any


class DataQualityError(Exception):
    """Base class for data quality issues."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = True


class MissingDataError(DataQualityError):
    """Required data is completely missing."""

    def __init__(self, message: str, data_type: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.data_type = data_type


class ReferenceDataMissingError(MissingDataError):
    """No end-of-day records exist for the resolved prior trading day.

    Fatal for a run: nothing is persisted.
    """

    def __init__(self, message: str, date: Optional[str] = None, **kwargs):
        super().__init__(message, data_type="bhavcopy", **kwargs)
        self.date = date
        self.recoverable = False


NoReferenceDataError = ReferenceDataMissingError


class MalformedDataError(DataQualityError):
    """Data exists but cannot be turned into a record."""

    def __init__(self, message: str, raw_data: Optional[str] = None,
                 expected_format: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.raw_data = raw_data
        self.expected_format = expected_format
