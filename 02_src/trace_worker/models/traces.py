"""Trace-related data models."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass
class Trace:
    """A top-level unit of recorded activity."""

    id: str
    timestamp: datetime
    metadata: dict[str, Any] = field(default_factory=dict)

    def is_processed(self, marker_key: str) -> bool:
        """A trace is processed once the marker key is present in metadata."""
        return marker_key in self.metadata


@dataclass
class Observation:
    """A timestamped sub-event belonging to exactly one Trace."""

    id: str
    trace_id: str
    updated_at: datetime
