"""Tests for the debouncer."""

import asyncio

import pytest

from game_catalog.services.debounce import Debouncer


class TestDebouncer:
    @pytest.mark.asyncio
    async def test_burst_fires_once_with_last_value(self) -> None:
        calls: list[str] = []
        debouncer = Debouncer(calls.append, delay=0.3)

        debouncer.execute("a")
        await asyncio.sleep(0.1)
        debouncer.execute("ab")
        await asyncio.sleep(0.1)
        debouncer.execute("abc")

        await asyncio.sleep(0.15)
        assert calls == []
        assert debouncer.pending

        await asyncio.sleep(0.45)
        assert calls == ["abc"]
        assert not debouncer.pending

    @pytest.mark.asyncio
    async def test_separate_bursts_fire_separately(self) -> None:
        calls: list[str] = []
        debouncer = Debouncer(calls.append, delay=0.05)

        debouncer.execute("first")
        await asyncio.sleep(0.15)
        debouncer.execute("second")
        await asyncio.sleep(0.15)

        assert calls == ["first", "second"]

    @pytest.mark.asyncio
    async def test_cancel_drops_pending_call(self) -> None:
        calls: list[str] = []
        debouncer = Debouncer(calls.append, delay=0.05)

        debouncer.execute("never")
        debouncer.cancel()
        await asyncio.sleep(0.15)

        assert calls == []
        assert not debouncer.pending

    @pytest.mark.asyncio
    async def test_cancel_without_pending_is_noop(self) -> None:
        debouncer = Debouncer(lambda value: None, delay=0.05)

        debouncer.cancel()

        assert not debouncer.pending

    @pytest.mark.asyncio
    async def test_coroutine_callback_runs_as_task(self) -> None:
        received = asyncio.Event()
        values: list[str] = []

        async def callback(value: str) -> None:
            values.append(value)
            received.set()

        debouncer = Debouncer(callback, delay=0.01)
        debouncer.execute("query")

        await asyncio.wait_for(received.wait(), timeout=1.0)
        assert values == ["query"]

    def test_execute_requires_running_loop(self) -> None:
        debouncer = Debouncer(lambda value: None)

        with pytest.raises(RuntimeError):
            debouncer.execute("x")
