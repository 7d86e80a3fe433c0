"""Feature resolution: one FeatureSet per symbol per run."""

from .resolver import FeatureSet, FeatureSource, resolve_features

__all__ = ["FeatureSet", "FeatureSource", "resolve_features"]
