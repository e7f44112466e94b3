"""Fixed-interval, non-overlapping scheduler for async work."""

import asyncio
from typing import Any, Awaitable, Callable, Protocol

from ..logging_config import get_logger

logger = get_logger(__name__)


Work = Callable[[], Awaitable[Any]]


class IScheduler(Protocol):
    """Drives a unit of work on a fixed interval."""

    @property
    def running(self) -> bool:
        ...

    @property
    def in_flight(self) -> bool:
        ...

    async def start(self) -> None:
        """Start firing the work: once immediately, then every interval."""
        ...

    async def stop(self) -> None:
        """Let the in-flight run finish, then stop. No new run begins."""
        ...

    async def trigger(self) -> bool:
        """Run the work now unless a run is in flight. Returns True if it ran."""
        ...


class Scheduler:
    """Runs a zero-argument coroutine function on a fixed interval.

    The interval is measured from the end of one run to the start of the next,
    and the first run fires as soon as the scheduler starts. A run that is
    still in flight when another would begin causes that one to be skipped,
    never queued. Errors raised by the work are logged and the loop carries on.
    """

    def __init__(self, name: str, work: Work, interval_ms: int):
        if interval_ms <= 0:
            raise ValueError("interval_ms must be positive")

        self._name = name
        self._work = work
        self._interval = interval_ms / 1000

        self._running = False
        self._in_flight = False
        self._runs = 0
        self._task: asyncio.Task | None = None
        self._stop_event: asyncio.Event | None = None
        self._idle: asyncio.Event | None = None

    @property
    def name(self) -> str:
        return self._name

    @property
    def interval_ms(self) -> int:
        return int(self._interval * 1000)

    @property
    def running(self) -> bool:
        return self._running

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    @property
    def runs(self) -> int:
        """Number of runs started since construction."""
        return self._runs

    async def start(self) -> None:
        if self._running:
            return

        self._running = True
        stop_event = asyncio.Event()
        self._stop_event = stop_event
        if self._idle is None:
            self._idle = asyncio.Event()
            self._idle.set()

        logger.info("Starting %s (interval %sms)", self._name, self.interval_ms)
        self._task = asyncio.create_task(self._loop(stop_event))

    async def stop(self) -> None:
        if not self._running and self._task is None:
            return

        logger.info("Stopping %s", self._name)
        self._running = False
        # A start() while this stop is pending replaces both; only ours are touched
        task, stop_event = self._task, self._stop_event
        if stop_event:
            stop_event.set()

        if task:
            await task
            if self._task is task:
                self._task = None

        # A run started through trigger() is not owned by the loop task
        if self._idle:
            await self._idle.wait()

    async def trigger(self) -> bool:
        if not self._running:
            raise RuntimeError(f"{self._name} not started")
        return await self._tick()

    async def _loop(self, stop_event: asyncio.Event) -> None:
        while not stop_event.is_set():
            await self._tick()

            if stop_event.is_set():
                break

            try:
                await asyncio.wait_for(stop_event.wait(), timeout=self._interval)
            except asyncio.TimeoutError:
                pass

    async def _tick(self) -> bool:
        if self._in_flight:
            logger.debug("%s: previous run still in flight, skipping", self._name)
            return False

        self._in_flight = True
        self._idle.clear()
        self._runs += 1
        try:
            await self._work()
        except Exception as e:
            logger.error("%s run failed: %s", self._name, e, exc_info=True)
        finally:
            self._in_flight = False
            self._idle.set()
        return True
