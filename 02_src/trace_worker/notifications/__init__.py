"""Notifications module."""

from .client import (
    ANALYZE_PATH,
    FeatureAnalysisClient,
    IFeatureAnalysisClient,
    NotificationError,
)

__all__ = [
    "ANALYZE_PATH",
    "FeatureAnalysisClient",
    "IFeatureAnalysisClient",
    "NotificationError",
]
