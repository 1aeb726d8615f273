"""Tests for the periodic session sweep task."""

import asyncio

import pytest

from hoaxify.core.modules.session.sweeper import PeriodicSweeper


class TestPeriodicSweeper:
    def test_interval_must_be_positive(self):
        async def sweep():
            return 0

        with pytest.raises(ValueError):
            PeriodicSweeper(sweep, 0)

    @pytest.mark.asyncio
    async def test_run_once_calls_sweep(self):
        calls = []

        async def sweep():
            calls.append(1)
            return 2

        sweeper = PeriodicSweeper(sweep, 3600)

        assert await sweeper.run_once() == 2
        assert calls == [1]
        assert not sweeper.running

    @pytest.mark.asyncio
    async def test_runs_repeatedly_until_stopped(self):
        ticks = 0
        done = asyncio.Event()

        async def sweep():
            nonlocal ticks
            ticks += 1
            if ticks >= 3:
                done.set()
            return 0

        sweeper = PeriodicSweeper(sweep, 0.01)
        sweeper.start()
        assert sweeper.running

        await asyncio.wait_for(done.wait(), timeout=2)
        await sweeper.stop()

        assert not sweeper.running
        stopped_at = ticks
        await asyncio.sleep(0.05)
        assert ticks == stopped_at

    @pytest.mark.asyncio
    async def test_failed_sweep_does_not_stop_the_loop(self):
        ticks = 0
        recovered = asyncio.Event()

        async def sweep():
            nonlocal ticks
            ticks += 1
            if ticks == 1:
                raise ConnectionError("store unavailable")
            recovered.set()
            return 1

        sweeper = PeriodicSweeper(sweep, 0.01)
        sweeper.start()
        try:
            await asyncio.wait_for(recovered.wait(), timeout=2)
        finally:
            await sweeper.stop()

        assert ticks >= 2

    @pytest.mark.asyncio
    async def test_start_twice_keeps_single_task(self):
        async def sweep():
            return 0

        sweeper = PeriodicSweeper(sweep, 3600)
        sweeper.start()
        task = sweeper._task
        sweeper.start()

        assert sweeper._task is task
        await sweeper.stop()

    @pytest.mark.asyncio
    async def test_stop_without_start(self):
        async def sweep():
            return 0

        await PeriodicSweeper(sweep, 1).stop()
