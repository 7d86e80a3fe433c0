"""
Run and signal models.

Immutable records written once per run. A SignalRun owns zero or more
Signals; neither is mutated after creation.
"""

from .signals import RunResult, Signal, SignalCandidate, SignalRun

__all__ = ["RunResult", "Signal", "SignalCandidate", "SignalRun"]
