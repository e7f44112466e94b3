"""Conclusion detector: finds traces that have gone silent."""

from typing import Protocol

from ..config import DEFAULT_BATCH_SIZE, DEFAULT_MARKER_KEY, DEFAULT_THRESHOLD_SECONDS
from ..logging_config import get_logger
from ..models import ConclusionCandidate
from ..storage import IAnalyticsStore, StoreQueryError
from .query import MARKER_PARAM, QUERY_TAGS, build_conclusion_query

logger = get_logger(__name__)


def _trace_id(row: dict) -> ConclusionCandidate:
    trace_id = row.get("trace_id")
    if not isinstance(trace_id, str) or not trace_id:
        raise StoreQueryError(f"Malformed row, bad trace_id: {trace_id!r}")
    return trace_id


class IConclusionDetector(Protocol):
    """Produces the candidate set for one cycle."""

    async def find(self) -> list[ConclusionCandidate]:
        """Return concluded, unprocessed trace IDs. Never raises."""
        ...


class ConclusionDetector:
    """Polls the analytical store for concluded traces."""

    def __init__(
        self,
        store: IAnalyticsStore,
        threshold_seconds: int = DEFAULT_THRESHOLD_SECONDS,
        batch_size: int = DEFAULT_BATCH_SIZE,
        marker_key: str = DEFAULT_MARKER_KEY,
    ):
        self._store = store
        self._threshold_seconds = threshold_seconds
        self._batch_size = batch_size
        self._marker_key = marker_key
        # Built once: configuration is not reloaded
        self._query = build_conclusion_query(
            store.dialect, threshold_seconds, batch_size
        )

    @property
    def query(self) -> str:
        return self._query

    @property
    def threshold_seconds(self) -> int:
        return self._threshold_seconds

    @property
    def batch_size(self) -> int:
        return self._batch_size

    @property
    def marker_key(self) -> str:
        return self._marker_key

    async def find(self) -> list[ConclusionCandidate]:
        """Find concluded traces that have not been processed yet.

        A failed query is logged and reported as an empty result so the next
        scheduled cycle retries it.
        """
        try:
            rows = await self._store.query(
                self._query,
                params={MARKER_PARAM: self._marker_key},
                tags=QUERY_TAGS,
            )
            trace_ids = [_trace_id(row) for row in rows]
        except Exception as e:
            logger.error("Failed to query concluded traces: %s", e, exc_info=True)
            return []

        # DISTINCT and LIMIT are also enforced here in case the store ignores them
        trace_ids = list(dict.fromkeys(trace_ids))[: self._batch_size]

        if trace_ids:
            logger.info(
                "Found %d concluded traces ready for processing",
                len(trace_ids),
                extra={"context": {"found": len(trace_ids)}},
            )

        return trace_ids
