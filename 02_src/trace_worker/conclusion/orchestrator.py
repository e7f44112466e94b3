"""Conclusion orchestrator: one detection/notification cycle."""

from datetime import datetime, timezone

from ..logging_config import get_logger
from ..models import CycleOutcome, CyclePhase
from ..tracker import ITracker
from .detector import IConclusionDetector
from .notifier import IConclusionNotifier

logger = get_logger(__name__)


class ConclusionOrchestrator:
    """Runs Detector -> Notifier as a single self-contained cycle.

    Each cycle starts and ends in ``CyclePhase.IDLE``. No state carries over
    between cycles; the tracker only receives outcomes for reporting.
    """

    def __init__(
        self,
        detector: IConclusionDetector,
        notifier: IConclusionNotifier,
        tracker: ITracker | None = None,
    ):
        self._detector = detector
        self._notifier = notifier
        self._tracker = tracker
        self._phase = CyclePhase.IDLE

    @property
    def phase(self) -> CyclePhase:
        return self._phase

    async def run_cycle(self) -> int:
        """Find and notify concluded traces. Returns the success count, never raises."""
        outcome = await self.run_cycle_with_outcome()
        return outcome.succeeded

    async def run_cycle_with_outcome(self) -> CycleOutcome:
        logger.debug("Starting trace conclusion check")
        outcome = CycleOutcome(phase=CyclePhase.DETECTING)

        try:
            self._phase = CyclePhase.DETECTING
            trace_ids = await self._detector.find()

            if not trace_ids:
                self._phase = CyclePhase.NOTHING_FOUND
                outcome.phase = CyclePhase.NOTHING_FOUND
                logger.debug("Trace conclusion check: no traces to process")
            else:
                self._phase = CyclePhase.NOTIFYING
                notified = await self._notifier.notify(trace_ids)
                outcome.found = notified.found
                outcome.succeeded = notified.succeeded
                outcome.failed = notified.failed
                outcome.phase = CyclePhase.NOTIFYING
        except Exception as e:
            logger.error("Error in trace conclusion check: %s", e, exc_info=True)
            outcome.succeeded = 0
        finally:
            self._phase = CyclePhase.IDLE

        outcome.finished_at = datetime.now(timezone.utc)

        if outcome.succeeded > 0:
            logger.info("Trace conclusion check: processed %d traces", outcome.succeeded)

        if self._tracker is not None:
            try:
                self._tracker.track(outcome)
            except Exception as e:
                logger.error("Failed to record cycle outcome: %s", e, exc_info=True)

        return outcome
