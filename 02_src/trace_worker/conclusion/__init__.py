"""Trace conclusion module."""

from .detector import ConclusionDetector, IConclusionDetector
from .notifier import ConclusionNotifier, IConclusionNotifier
from .orchestrator import ConclusionOrchestrator
from .query import QUERY_TAGS, build_conclusion_query

__all__ = [
    "ConclusionDetector",
    "IConclusionDetector",
    "ConclusionNotifier",
    "IConclusionNotifier",
    "ConclusionOrchestrator",
    "QUERY_TAGS",
    "build_conclusion_query",
]
