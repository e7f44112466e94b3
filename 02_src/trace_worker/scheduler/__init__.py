"""Scheduler module."""

from .scheduler import IScheduler, Scheduler, Work

__all__ = ["IScheduler", "Scheduler", "Work"]
