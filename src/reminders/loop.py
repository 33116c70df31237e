"""Long-running loop driving the reminder scheduler."""

import asyncio
import logging
from datetime import timedelta

from src.reminders.tick import SchedulerTick

logger = logging.getLogger(__name__)


class SchedulerLoop:
    """Run scheduler ticks until stopped.

    Each tick runs in a worker thread. Between ticks the loop waits for the
    poll interval or a stop request, whichever comes first. A failing tick is
    logged and the loop carries on.
    """

    def __init__(self, tick: SchedulerTick, poll_interval: timedelta) -> None:
        """Initialise the loop.

        :param tick: The tick to run on every iteration.
        :param poll_interval: Delay between ticks.
        """
        if poll_interval <= timedelta(0):
            raise ValueError("poll_interval must be positive")

        self._tick = tick
        self._poll_interval = poll_interval
        self._stop_event = asyncio.Event()

    @property
    def stopped(self) -> bool:
        """Whether a stop has been requested."""
        return self._stop_event.is_set()

    def stop(self) -> None:
        """Request the loop to stop after the current tick."""
        logger.info("Stopping scheduler loop...")
        self._stop_event.set()

    async def run(self, max_iterations: int | None = None) -> int:
        """Run the loop.

        :param max_iterations: Stop after this many ticks. Runs forever if None.
        :returns: Number of ticks run.
        """
        logger.info(
            f"Starting scheduler loop: poll_interval={self._poll_interval.total_seconds():.0f}s"
        )
        iterations = 0

        while not self.stopped:
            try:
                await asyncio.to_thread(self._tick.run)
            except Exception:
                logger.exception("Scheduler tick failed")

            iterations += 1
            if max_iterations is not None and iterations >= max_iterations:
                break

            try:
                await asyncio.wait_for(
                    self._stop_event.wait(),
                    timeout=self._poll_interval.total_seconds(),
                )
            except TimeoutError:
                pass

        logger.info(f"Scheduler loop stopped after {iterations} tick(s)")
        return iterations
