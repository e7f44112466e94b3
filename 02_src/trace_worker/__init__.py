"""Trace conclusion worker."""

from .app import Application, IApplication
from .conclusion import (
    ConclusionDetector,
    ConclusionNotifier,
    ConclusionOrchestrator,
    IConclusionDetector,
    IConclusionNotifier,
    build_conclusion_query,
)
from .config import WorkerConfig
from .models import (
    ConclusionCandidate,
    CycleOutcome,
    CyclePhase,
    Observation,
    Trace,
)
from .notifications import FeatureAnalysisClient, IFeatureAnalysisClient, NotificationError
from .scheduler import IScheduler, Scheduler
from .storage import (
    ClickHouseStore,
    IAnalyticsStore,
    SqliteStore,
    StoreQueryError,
)
from .tracker import CycleTracker, ITracker

__all__ = [
    # Application
    "Application",
    "IApplication",
    "WorkerConfig",
    # Models
    "Trace",
    "Observation",
    "ConclusionCandidate",
    "CycleOutcome",
    "CyclePhase",
    # Components
    "IScheduler",
    "Scheduler",
    "IConclusionDetector",
    "ConclusionDetector",
    "IConclusionNotifier",
    "ConclusionNotifier",
    "ConclusionOrchestrator",
    "build_conclusion_query",
    "IAnalyticsStore",
    "ClickHouseStore",
    "SqliteStore",
    "StoreQueryError",
    "IFeatureAnalysisClient",
    "FeatureAnalysisClient",
    "NotificationError",
    "ITracker",
    "CycleTracker",
]
