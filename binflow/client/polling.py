"""
Smart Polling

Fires a refresh callback on a timer whose interval depends on the time of
day: frequent during work hours, hourly otherwise. The interval is chosen
again before every wait, so the poller speeds up and slows down across
the work-hours boundaries without a restart.
"""

import asyncio
import inspect
from datetime import datetime, time
from typing import Awaitable, Callable, Optional, Union

from binflow.config import get_settings
from binflow.config.logging import get_logger
from binflow.shifts.clock import BusinessClock, get_business_clock

logger = get_logger(__name__, component="poller")

RefreshCallback = Callable[[], Union[None, Awaitable[None]]]


def is_work_hours(moment: time, start_hour: int = 8, end_hour: int = 18) -> bool:
    """Work hours run from start_hour:00 to end_hour:00, both inclusive"""
    start = time(start_hour, 0)
    end = time(23, 59, 59, 999999) if end_hour >= 24 else time(end_hour, 0)
    return start <= moment.replace(tzinfo=None) <= end


def select_poll_interval(
    moment: Union[datetime, time],
    start_hour: int = 8,
    end_hour: int = 18,
    work_interval: float = 180,
    off_interval: float = 3600,
) -> float:
    """Seconds to wait before the next refresh"""
    tod = moment.time() if isinstance(moment, datetime) else moment
    return work_interval if is_work_hours(tod, start_hour, end_hour) else off_interval


class SmartPoller:
    """
    Periodic refresh trigger.

    Args:
        on_data_updated: Called on every tick; may be sync or async
        clock: Clock whose local time decides work hours
    """

    def __init__(self, on_data_updated: RefreshCallback, clock: Optional[BusinessClock] = None):
        settings = get_settings().polling
        self.on_data_updated = on_data_updated
        self.clock = clock or get_business_clock()
        self.start_hour = settings.work_hours_start
        self.end_hour = settings.work_hours_end
        self.work_interval = settings.work_hours_interval_seconds
        self.off_interval = settings.off_hours_interval_seconds
        self._task: Optional[asyncio.Task] = None

    def current_interval(self) -> float:
        return select_poll_interval(
            self.clock.now(),
            self.start_hour,
            self.end_hour,
            self.work_interval,
            self.off_interval,
        )

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def tick(self) -> None:
        """Run the callback once; failures are logged and swallowed"""
        try:
            result = self.on_data_updated()
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            logger.error("Error during auto-refresh", error=str(e), error_type=type(e).__name__)

    async def _run(self) -> None:
        while True:
            interval = self.current_interval()
            logger.debug("Next refresh scheduled", interval_seconds=interval)
            await asyncio.sleep(interval)
            await self.tick()

    def start(self) -> None:
        if self.running:
            return
        logger.info(
            "Started polling",
            mode="work_hours" if self.current_interval() == self.work_interval else "off_hours",
            interval_seconds=self.current_interval(),
        )
        self._task = asyncio.get_running_loop().create_task(self._run())

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Stopped polling")
