"""Tracker module."""

from .tracker import CycleTracker, ITracker

__all__ = ["CycleTracker", "ITracker"]
