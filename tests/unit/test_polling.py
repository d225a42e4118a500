"""
Unit Tests - Smart Polling
"""
import asyncio
from datetime import datetime, time
from unittest.mock import AsyncMock, MagicMock

import pytest

from binflow.client.polling import SmartPoller, is_work_hours, select_poll_interval


class TestSelectPollInterval:
    """Tests for select_poll_interval"""

    @pytest.mark.parametrize("moment", [time(8, 0), time(12, 30), time(18, 0)])
    def test_work_hours(self, moment):
        assert select_poll_interval(moment) == 180

    @pytest.mark.parametrize("moment", [time(7, 59), time(18, 1), time(0, 0), time(23, 59)])
    def test_off_hours(self, moment):
        assert select_poll_interval(moment) == 3600

    def test_accepts_datetime(self):
        assert select_poll_interval(datetime(2024, 3, 1, 9, 0)) == 180
        assert select_poll_interval(datetime(2024, 3, 1, 20, 0)) == 3600

    def test_custom_window(self):
        assert select_poll_interval(time(6, 0), start_hour=6, end_hour=14, work_interval=60) == 60
        assert select_poll_interval(time(14, 30), start_hour=6, end_hour=14) == 3600

    def test_seconds_past_end_are_off_hours(self):
        assert not is_work_hours(time(18, 0, 1))


class TestSmartPoller:
    """Tests for SmartPoller"""

    def test_interval_follows_clock(self, clock):
        fake_clock = MagicMock()
        poller = SmartPoller(lambda: None, clock=fake_clock)

        fake_clock.now.return_value = datetime(2024, 3, 1, 10, 0, tzinfo=clock.tz)
        assert poller.current_interval() == 180

        fake_clock.now.return_value = datetime(2024, 3, 1, 19, 0, tzinfo=clock.tz)
        assert poller.current_interval() == 3600

    async def test_tick_awaits_async_callback(self, clock):
        callback = AsyncMock()
        poller = SmartPoller(callback, clock=clock)

        await poller.tick()

        callback.assert_awaited_once()

    async def test_tick_swallows_callback_errors(self, clock):
        callback = MagicMock(side_effect=RuntimeError("boom"))
        poller = SmartPoller(callback, clock=clock)

        await poller.tick()

        callback.assert_called_once()

    async def test_start_and_stop(self, clock):
        calls = []
        poller = SmartPoller(lambda: calls.append(1), clock=clock)
        poller.work_interval = poller.off_interval = 0.01

        poller.start()
        assert poller.running
        await asyncio.sleep(0.05)
        await poller.stop()

        assert not poller.running
        assert len(calls) >= 1
