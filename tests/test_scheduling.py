"""Tests for the asyncio-backed scheduler."""

from __future__ import annotations

import asyncio

import pytest

from studio_player.infrastructure.scheduling import AsyncioScheduler


class TestAsyncioScheduler:
    @pytest.mark.asyncio
    async def test_call_later_runs_callback(self):
        scheduler = AsyncioScheduler()
        fired = asyncio.Event()

        scheduler.call_later(0.01, fired.set)

        await asyncio.wait_for(fired.wait(), 1.0)

    @pytest.mark.asyncio
    async def test_cancel(self):
        scheduler = AsyncioScheduler()
        calls = []

        handle = scheduler.call_later(0.01, lambda: calls.append(1))
        handle.cancel()
        await asyncio.sleep(0.05)

        assert calls == []

    @pytest.mark.asyncio
    async def test_negative_delay_runs_soon(self):
        scheduler = AsyncioScheduler()
        fired = asyncio.Event()

        scheduler.call_later(-1.0, fired.set)

        await asyncio.wait_for(fired.wait(), 1.0)

    @pytest.mark.asyncio
    async def test_time_is_loop_time(self):
        scheduler = AsyncioScheduler(asyncio.get_running_loop())

        assert scheduler.time() == pytest.approx(asyncio.get_running_loop().time(), abs=0.5)
