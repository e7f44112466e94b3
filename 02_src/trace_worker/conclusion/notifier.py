"""Sequential, failure-isolated conclusion notifier."""

from datetime import datetime, timezone
from typing import Protocol, Sequence

from ..logging_config import get_logger
from ..models import ConclusionCandidate, CycleOutcome, CyclePhase
from ..notifications import IFeatureAnalysisClient

logger = get_logger(__name__)


class IConclusionNotifier(Protocol):
    """Reports each candidate of a cycle to the API."""

    async def process(self, candidates: Sequence[ConclusionCandidate]) -> int:
        """Notify every candidate once. Return the number that succeeded."""
        ...

    async def notify(self, candidates: Sequence[ConclusionCandidate]) -> CycleOutcome:
        """Notify every candidate once. Return the full counts."""
        ...


class ConclusionNotifier:
    """Notifies the API of concluded traces one at a time.

    Calls are made sequentially so a burst of concluded traces does not turn
    into a burst of concurrent requests against the API. A failure is logged
    and counted, and the remaining candidates are still attempted. Nothing is
    retried within a cycle: an unmarked trace is found again next cycle.
    """

    def __init__(self, client: IFeatureAnalysisClient):
        self._client = client

    async def process(self, candidates: Sequence[ConclusionCandidate]) -> int:
        outcome = await self.notify(candidates)
        return outcome.succeeded

    async def notify(self, candidates: Sequence[ConclusionCandidate]) -> CycleOutcome:
        outcome = CycleOutcome(found=len(candidates), phase=CyclePhase.NOTIFYING)

        if not candidates:
            outcome.finished_at = datetime.now(timezone.utc)
            return outcome

        logger.info("Processing %d concluded traces", len(candidates))

        for trace_id in candidates:
            try:
                await self._client.notify_trace_concluded(trace_id)
            except Exception as e:
                outcome.failed += 1
                logger.error(
                    "Failed to notify trace concluded for %s: %s",
                    trace_id,
                    e,
                    extra={"context": {"trace_id": trace_id}},
                )
                continue

            outcome.succeeded += 1
            logger.debug("Successfully notified trace concluded: %s", trace_id)

        outcome.finished_at = datetime.now(timezone.utc)
        logger.info(
            "Processed concluded traces: %d succeeded, %d failed",
            outcome.succeeded,
            outcome.failed,
            extra={
                "context": {
                    "succeeded": outcome.succeeded,
                    "failed": outcome.failed,
                }
            },
        )
        return outcome
