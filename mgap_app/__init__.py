"""
MGAP App - Momentum Gap Signal Engine

Daily signal-generation engine for equity symbols. Joins today's pre-market
snapshot with the prior trading day's end-of-day (bhavcopy) snapshot, scores
each symbol on a composite momentum gap quality score, and persists an
auditable record of every run.
"""

__version__ = "0.1.0"
__author__ = "MGAP Team"
