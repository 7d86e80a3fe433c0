"""
System failure error classifications for unrecoverable errors.

These exceptions represent failures that abort a run and need intervention
to resolve.
"""

from typing import Optional, Dict, Any


class SystemFailureError(Exception):
    """Base class for unrecoverable system failures."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = False


class PersistenceError(SystemFailureError):
    """Database persistence failures."""

    def __init__(self, message: str, operation: Optional[str] = None,
                 target: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.operation = operation
        self.target = target


class ConfigurationError(SystemFailureError):
    """Strategy configuration could not be loaded or is invalid."""

    def __init__(self, message: str, errors: Optional[list] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.errors = errors or []

    def __str__(self) -> str:
        base = super().__str__()
        if self.errors:
            return f"{base}: {'; '.join(str(e) for e in self.errors)}"
        return base


class SignalValidationError(SystemFailureError):
    """A built signal breaks its invariants and must not be persisted."""

    def __init__(self, message: str, symbol: Optional[str] = None,
                 field: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.symbol = symbol
        self.field = field
