"""
Utility functions module.

Date Semantics:
- Dates cross every boundary as ISO calendar strings (YYYY-MM-DD)
- The caller resolves "today" in the market timezone; the engine does no
  timezone arithmetic of its own
- Weekends are the only non-trading days the engine knows about
"""
