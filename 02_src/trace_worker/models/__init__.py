"""Core data models for the trace conclusion worker."""

from .traces import Observation, Trace
from .cycles import ConclusionCandidate, CycleOutcome, CyclePhase

__all__ = [
    # Traces
    "Trace",
    "Observation",
    # Cycles
    "ConclusionCandidate",
    "CycleOutcome",
    "CyclePhase",
]
