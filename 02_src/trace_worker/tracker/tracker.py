"""Tracker keeping recent cycle outcomes for the status API."""

from collections import deque
from typing import Protocol

from ..models import CycleOutcome

DEFAULT_HISTORY = 100


class ITracker(Protocol):
    """Records CycleOutcomes. In memory only, lost on restart."""

    def track(self, outcome: CycleOutcome) -> None:
        """Record one finished cycle."""
        ...

    def recent(self, limit: int = 20) -> list[CycleOutcome]:
        """Most recent outcomes, newest first."""
        ...


class CycleTracker:
    """Bounded in-memory history of cycle outcomes."""

    def __init__(self, max_history: int = DEFAULT_HISTORY):
        if max_history <= 0:
            raise ValueError("max_history must be positive")
        self._outcomes: deque[CycleOutcome] = deque(maxlen=max_history)

    def track(self, outcome: CycleOutcome) -> None:
        self._outcomes.append(outcome)

    def recent(self, limit: int = 20) -> list[CycleOutcome]:
        if limit <= 0:
            return []
        return list(reversed(self._outcomes))[:limit]

    def clear(self) -> None:
        self._outcomes.clear()

    def __len__(self) -> int:
        return len(self._outcomes)
