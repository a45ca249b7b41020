"""
Single-Flight Interval Scheduler

Provides ScheduledLoop class that fires a callback at fixed intervals
measured from the start of each tick, so callback latency does not
cause drift.

Unlike asyncio.sleep()-based loops, this scheduler:
- Fires the first tick immediately
- Never runs two ticks at once
- Drops (does not queue) ticks that come due while one is running
- Reports drift and skip metrics for observability

Usage:
    async def tick():
        # Probe and apply...
        pass

    scheduler = ScheduledLoop(30.0, tick, name="failover")
    await scheduler.start()

    # Later:
    await scheduler.stop()
    print(f"Skipped: {scheduler.skipped_count}")
"""

import asyncio
import math
import time
from typing import Awaitable, Callable

from .logging_setup import get_service_logger

logger = get_service_logger("scheduler")


class ScheduledLoop:
    """
    Fixed-interval scheduler with overlap prevention.

    Each slot is `interval` seconds after the previous slot. The
    callback is awaited inline, so a slot that comes due while the
    callback is still running is skipped rather than queued.

    Attributes:
        interval: The interval in seconds between executions
        callback: Async function to call each interval
        skipped_count: Number of slots dropped because a tick overran
    """

    def __init__(
        self,
        interval_seconds: float,
        callback: Callable[[], Awaitable[None]],
        name: str = "unnamed",
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """
        Initialize a scheduled loop.

        Args:
            interval_seconds: Time between tick starts (supports sub-second)
            callback: Async function to call each interval
            name: Name for logging/identification
            clock: Monotonic time source
            sleep: Coroutine used to wait for the next slot
        """
        if not (math.isfinite(interval_seconds) and interval_seconds > 0):
            raise ValueError("interval_seconds must be a positive finite number")

        self.interval = interval_seconds
        self.callback = callback
        self.name = name
        self._clock = clock
        self._sleep = sleep

        self._next_run: float = 0
        self._running = False
        self._task: asyncio.Task | None = None

        # Observability metrics
        self._drift_total: float = 0
        self._skipped_count: int = 0
        self._execution_count: int = 0
        self._error_count: int = 0
        self._last_execution_time: float = 0
        self._last_drift_ms: float = 0

    async def start(self) -> None:
        """Start the scheduled loop in a background task."""
        if self._running:
            return

        self._running = True
        self._task = asyncio.create_task(self.run())

    async def stop(self) -> None:
        """Stop the scheduled loop and wait for the running tick to unwind."""
        self._running = False
        task, self._task = self._task, None
        if task is None or task is asyncio.current_task():
            return

        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    @property
    def is_running(self) -> bool:
        return self._running

    async def run(self) -> None:
        """Main loop: immediate first tick, then one tick per slot."""
        self._running = True
        self._next_run = self._clock()

        while self._running:
            sleep_duration = self._next_run - self._clock()
            if sleep_duration > 0:
                try:
                    await self._sleep(sleep_duration)
                except asyncio.CancelledError:
                    break

            if not self._running:
                break

            drift = self._clock() - self._next_run
            self._drift_total += max(0, drift)
            self._last_drift_ms = drift * 1000

            start = self._clock()
            self._next_run += self.interval

            try:
                await self.callback()
                self._execution_count += 1
            except asyncio.CancelledError:
                break
            except Exception as e:
                self._error_count += 1
                logger.error(
                    f"Scheduled callback '{self.name}' error: {e}",
                    exc_info=True,
                )
            finally:
                self._last_execution_time = self._clock() - start

            # Drop slots that came due while the callback was running
            now = self._clock()
            skipped = 0
            while self._next_run < now:
                self._next_run += self.interval
                skipped += 1

            if skipped:
                self._skipped_count += skipped
                logger.warning(
                    f"Scheduler '{self.name}' skipped {skipped} tick(s) "
                    f"(execution took {self._last_execution_time:.3f}s)",
                    extra={"skipped": skipped, "skipped_total": self._skipped_count},
                )

        self._running = False

    @property
    def drift_seconds(self) -> float:
        """Total accumulated drift in seconds."""
        return self._drift_total

    @property
    def skipped_count(self) -> int:
        """Number of slots dropped because a tick overran."""
        return self._skipped_count

    @property
    def execution_count(self) -> int:
        """Total number of successful executions."""
        return self._execution_count

    @property
    def last_execution_time(self) -> float:
        """Duration of last callback execution in seconds."""
        return self._last_execution_time

    def get_stats(self) -> dict:
        """Get scheduler statistics for observability."""
        return {
            "name": self.name,
            "interval_s": self.interval,
            "execution_count": self._execution_count,
            "error_count": self._error_count,
            "drift_total_s": round(self._drift_total, 3),
            "drift_last_ms": round(self._last_drift_ms, 1),
            "skipped_count": self._skipped_count,
            "last_execution_s": round(self._last_execution_time, 3),
        }
