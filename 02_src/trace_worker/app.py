"""Application bootstrap and lifecycle management."""

from typing import Protocol

from .conclusion import ConclusionDetector, ConclusionNotifier, ConclusionOrchestrator
from .config import WorkerConfig
from .logging_config import get_logger
from .notifications import FeatureAnalysisClient, IFeatureAnalysisClient
from .scheduler import Scheduler
from .storage import ClickHouseStore, IAnalyticsStore, SqliteStore
from .tracker import CycleTracker

logger = get_logger(__name__)

SCHEDULER_NAME = "TraceConclusionRunner"


class IApplication(Protocol):
    """Bootstrap and lifecycle."""

    async def start(self) -> None:
        """Initialize components in dependency order."""
        ...

    async def stop(self) -> None:
        """Shutdown in reverse order."""
        ...


class Application:
    """Wires the store, API client, conclusion cycle and scheduler together."""

    def __init__(
        self,
        config: WorkerConfig | None = None,
        store: IAnalyticsStore | None = None,
        client: IFeatureAnalysisClient | None = None,
    ):
        self._config = config or WorkerConfig.from_env()
        # Injected collaborators are owned by the caller and not closed on stop
        self._injected_store = store
        self._injected_client = client

        # Components (will be initialized in start())
        self._store: IAnalyticsStore | None = None
        self._client: IFeatureAnalysisClient | None = None
        self._tracker: CycleTracker | None = None
        self._detector: ConclusionDetector | None = None
        self._notifier: ConclusionNotifier | None = None
        self._orchestrator: ConclusionOrchestrator | None = None
        self._scheduler: Scheduler | None = None

    @property
    def config(self) -> WorkerConfig:
        return self._config

    def _create_store(self) -> IAnalyticsStore:
        if self._config.backend == "sqlite":
            return SqliteStore(self._config.db_path)
        return ClickHouseStore(
            url=self._config.clickhouse_url,
            user=self._config.clickhouse_user,
            password=self._config.clickhouse_password,
            database=self._config.clickhouse_db,
            timeout=self._config.clickhouse_timeout_seconds,
        )

    async def start(self) -> None:
        """Initialize components in dependency order."""
        logger.info("Starting application")

        # 1. Analytical store (no dependencies)
        if self._injected_store is not None:
            self._store = self._injected_store
        else:
            self._store = self._create_store()
            if isinstance(self._store, SqliteStore):
                await self._store.init()
        logger.info("Analytical store ready (%s)", self._store.dialect)

        # 2. Feature analysis client (no dependencies)
        self._client = self._injected_client or FeatureAnalysisClient(
            base_url=self._config.api_base_url,
            timeout=self._config.notification_timeout_seconds,
        )

        # 3. Conclusion cycle (depends on store + client)
        self._tracker = CycleTracker()
        self._detector = ConclusionDetector(
            self._store,
            threshold_seconds=self._config.threshold_seconds,
            batch_size=self._config.batch_size,
            marker_key=self._config.marker_key,
        )
        self._notifier = ConclusionNotifier(self._client)
        self._orchestrator = ConclusionOrchestrator(
            self._detector, self._notifier, self._tracker
        )

        # 4. Scheduler (depends on orchestrator)
        self._scheduler = Scheduler(
            SCHEDULER_NAME,
            self._orchestrator.run_cycle,
            self._config.interval_ms,
        )
        if self._config.enabled:
            await self._scheduler.start()
        else:
            logger.info("Trace conclusion disabled, scheduler not started")

        logger.info("All components initialized successfully")

    async def stop(self) -> None:
        """Shutdown in reverse order."""
        if self._scheduler:
            await self._scheduler.stop()
        if self._client and self._injected_client is None:
            await self._client.close()
            logger.info("Feature analysis client closed")
        if self._store and self._injected_store is None:
            await self._store.close()
            logger.info("Analytical store closed")

    @property
    def scheduler(self) -> Scheduler:
        if self._scheduler is None:
            raise RuntimeError("Application not started")
        return self._scheduler

    @property
    def orchestrator(self) -> ConclusionOrchestrator:
        if self._orchestrator is None:
            raise RuntimeError("Application not started")
        return self._orchestrator

    @property
    def tracker(self) -> CycleTracker:
        if self._tracker is None:
            raise RuntimeError("Application not started")
        return self._tracker
