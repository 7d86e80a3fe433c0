"""
Error classification system for the signal engine.

This module provides a structured exception hierarchy separating recoverable
data quality problems from unrecoverable system failures.
"""

from .data_quality import (
    DataQualityError,
    MissingDataError,
    ReferenceDataMissingError,
    NoReferenceDataError,
    MalformedDataError,
)
from .system_failures import (
    SystemFailureError,
    PersistenceError,
    ConfigurationError,
    SignalValidationError,
)

__all__ = [
    # Data Quality Errors
    "DataQualityError",
    "MissingDataError",
    "ReferenceDataMissingError",
    "NoReferenceDataError",
    "MalformedDataError",
    # System Failures
    "SystemFailureError",
    "PersistenceError",
    "ConfigurationError",
    "SignalValidationError",
]
