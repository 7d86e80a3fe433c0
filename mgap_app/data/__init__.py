"""
Input data module.

Immutable pre-market and end-of-day records, and the normalizer that turns
raw store documents into them.
"""
