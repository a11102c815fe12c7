"""Tests for the asyncio debouncer."""
import asyncio
import logging

from meteo_widget.debounce import Debouncer, debounce


def test_burst_forwards_only_last_call_once():
    """Rapid calls inside the delay window collapse into the last one."""
    calls = []

    async def scenario():
        debounced = debounce(calls.append, 30)
        for value in ("P", "Pa", "Par", "Pari", "Paris"):
            debounced(value)
            await asyncio.sleep(0.005)
        await debounced.wait()

    asyncio.run(scenario())

    assert calls == ["Paris"]


def test_calls_separated_by_quiet_period_all_fire():
    """A call after the quiet period starts a new burst."""
    calls = []

    async def scenario():
        debounced = Debouncer(calls.append, 10)
        debounced("first")
        await debounced.wait()
        debounced("second")
        await debounced.wait()

    asyncio.run(scenario())

    assert calls == ["first", "second"]


def test_separate_wrappers_do_not_share_suppression():
    """Wrapping the same handler twice gives independent timers."""
    calls = []

    async def scenario():
        first = debounce(calls.append, 10)
        second = debounce(calls.append, 10)
        first("a")
        second("b")
        await first.wait()
        await second.wait()

    asyncio.run(scenario())

    assert sorted(calls) == ["a", "b"]


def test_coroutine_handler_is_awaited():
    """Coroutine handlers run to completion before wait() returns."""
    results = []

    async def handler(value):
        await asyncio.sleep(0.01)
        results.append(value)

    async def scenario():
        debounced = Debouncer(handler, 10)
        debounced(1)
        debounced(2)
        assert debounced.pending
        await debounced.wait()
        assert not debounced.pending

    asyncio.run(scenario())

    assert results == [2]


def test_cancel_drops_pending_call():
    """A cancelled call never reaches the handler."""
    calls = []

    async def scenario():
        debounced = Debouncer(calls.append, 10)
        debounced("dropped")
        debounced.cancel()
        await asyncio.sleep(0.03)
        assert not debounced.pending

    asyncio.run(scenario())

    assert calls == []


def test_handler_errors_are_logged(caplog):
    """Handler exceptions are logged instead of escaping the event loop."""
    def handler(value):
        raise RuntimeError(f"bad {value}")

    async def scenario():
        debounced = Debouncer(handler, 5)
        debounced("input")
        await debounced.wait()

    with caplog.at_level(logging.ERROR, logger="meteo_widget.debounce"):
        asyncio.run(scenario())

    assert "bad input" in caplog.text


def test_cancel_reaches_overlapping_coroutines():
    """A slow earlier firing is cancelled along with the latest one."""
    finished = []

    async def handler(value):
        await asyncio.sleep(0.06)
        finished.append(value)

    async def scenario():
        debounced = Debouncer(handler, 5)
        debounced("first")
        await asyncio.sleep(0.02)
        debounced("second")
        await asyncio.sleep(0.02)
        debounced.cancel()
        await asyncio.sleep(0.08)
        assert not debounced.pending

    asyncio.run(scenario())

    assert finished == []


def test_wait_covers_overlapping_coroutines():
    """wait() returns only after every running firing has finished."""
    finished = []

    async def handler(value):
        await asyncio.sleep(0.06)
        finished.append(value)

    async def scenario():
        debounced = Debouncer(handler, 5)
        debounced("first")
        await asyncio.sleep(0.02)
        debounced("second")
        await debounced.wait()

    asyncio.run(scenario())

    assert finished == ["first", "second"]
