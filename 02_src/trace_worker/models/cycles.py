"""Conclusion cycle data models."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


class CyclePhase(str, Enum):
    """Phases of one detection/notification cycle."""

    IDLE = "idle"
    DETECTING = "detecting"
    NOTHING_FOUND = "nothing_found"
    NOTIFYING = "notifying"


# Selected by one detection cycle; never persisted.
ConclusionCandidate = str


@dataclass
class CycleOutcome:
    """Counts produced by one cycle, for logging and status only."""

    found: int = 0
    succeeded: int = 0
    failed: int = 0
    phase: CyclePhase = CyclePhase.IDLE
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    finished_at: datetime | None = None

    def to_dict(self) -> dict:
        return {
            "found": self.found,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "phase": self.phase.value,
            "started_at": self.started_at.isoformat(),
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
        }
