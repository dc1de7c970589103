from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

import pytest

from pydss.exceptions import DssError, DssTransportError
from pydss.refresh import RefreshSession


async def _wait_until(predicate: Callable[[], bool], timeout: float = 1.0) -> None:
    async with asyncio.timeout(timeout):
        while not predicate():
            await asyncio.sleep(0.001)


class _Recorder:
    def __init__(self) -> None:
        self.events: list[str] = []

    async def trigger(self) -> None:
        self.events.append("trigger")

    async def poll(self) -> None:
        self.events.append("poll")


@pytest.mark.asyncio
async def test_trigger_then_polls_then_trigger_again() -> None:
    recorder = _Recorder()
    session = RefreshSession(recorder.trigger, recorder.poll, poll_interval=0.005, polls_per_cycle=3)

    session.start()
    await _wait_until(lambda: len(recorder.events) >= 9)
    await session.close()

    assert recorder.events[:9] == [
        "trigger",
        "poll",
        "poll",
        "poll",
        "trigger",
        "poll",
        "poll",
        "poll",
        "trigger",
    ]


@pytest.mark.asyncio
async def test_start_is_idempotent_while_active() -> None:
    recorder = _Recorder()
    session = RefreshSession(recorder.trigger, recorder.poll, poll_interval=10.0, polls_per_cycle=5)

    session.start()
    await _wait_until(lambda: session.waiting)
    session.start()
    await asyncio.sleep(0.01)

    assert session.active
    assert session.cycle_count == 1
    assert recorder.events == ["trigger", "poll"]
    await session.close()


@pytest.mark.asyncio
async def test_hide_mid_wait_cancels_and_restart_begins_with_trigger() -> None:
    recorder = _Recorder()
    session = RefreshSession(recorder.trigger, recorder.poll, poll_interval=10.0, polls_per_cycle=5)

    session.start()
    await _wait_until(lambda: session.waiting)
    session.stop()

    assert not session.active
    assert not session.waiting
    assert session.cycle_count == 0

    # The pending wait must not resume polling.
    await asyncio.sleep(0.02)
    assert recorder.events == ["trigger", "poll"]

    session.start()
    await _wait_until(lambda: session.waiting)

    assert recorder.events == ["trigger", "poll", "trigger", "poll"]
    assert session.cycle_count == 1
    await session.close()


@pytest.mark.asyncio
async def test_hide_wakes_the_wait_promptly() -> None:
    recorder = _Recorder()
    session = RefreshSession(recorder.trigger, recorder.poll, poll_interval=30.0, polls_per_cycle=5)

    session.start()
    await _wait_until(lambda: session.waiting)
    session.stop()

    async with asyncio.timeout(0.5):
        # close() would otherwise have to cancel a 30 s sleep; stop() already ended the run.
        await asyncio.sleep(0.01)
        assert not session.waiting
        await session.close()


@pytest.mark.asyncio
async def test_trigger_failure_is_logged_and_polling_continues(caplog: pytest.LogCaptureFixture) -> None:
    polls: list[int] = []

    async def trigger() -> None:
        raise DssTransportError("HTTP 502 from /trigger", status_code=502, endpoint="/trigger")

    async def poll() -> None:
        polls.append(1)

    session = RefreshSession(trigger, poll, poll_interval=0.0, polls_per_cycle=2)
    with caplog.at_level(logging.WARNING, logger="pydss.refresh"):
        session.start()
        await _wait_until(lambda: len(polls) >= 2)
        await session.close()

    assert any("trigger failed" in record.getMessage() for record in caplog.records)


@pytest.mark.asyncio
async def test_poll_failure_counts_as_completed_poll() -> None:
    calls: list[str] = []

    async def trigger() -> None:
        calls.append("trigger")

    async def poll() -> None:
        calls.append("poll")
        raise DssError("boom")

    session = RefreshSession(trigger, poll, poll_interval=0.0, polls_per_cycle=2)
    session.start()
    await _wait_until(lambda: calls.count("trigger") >= 2)
    await session.close()

    assert calls[:4] == ["trigger", "poll", "poll", "trigger"]


@pytest.mark.asyncio
async def test_polls_never_overlap_and_spacing_follows_completion() -> None:
    loop = asyncio.get_running_loop()
    spans: list[tuple[float, float]] = []
    running = 0
    max_running = 0

    async def trigger() -> None:
        return None

    async def poll() -> None:
        nonlocal running, max_running
        running += 1
        max_running = max(max_running, running)
        started = loop.time()
        await asyncio.sleep(0.01)
        running -= 1
        spans.append((started, loop.time()))

    session = RefreshSession(trigger, poll, poll_interval=0.02, polls_per_cycle=3)
    session.start()
    await _wait_until(lambda: len(spans) >= 3)
    await session.close()

    assert max_running == 1
    for (_, previous_end), (next_start, _) in zip(spans[:2], spans[1:3], strict=True):
        assert next_start - previous_end >= 0.02 - 0.005


@pytest.mark.asyncio
async def test_in_flight_poll_finishes_but_no_new_cycle_is_armed() -> None:
    gate = asyncio.Event()
    events: list[str] = []

    async def trigger() -> None:
        events.append("trigger")

    async def poll() -> None:
        events.append("poll-start")
        await gate.wait()
        events.append("poll-end")

    session = RefreshSession(trigger, poll, poll_interval=0.0, polls_per_cycle=5)
    session.start()
    await _wait_until(lambda: "poll-start" in events)
    session.stop()
    gate.set()
    await asyncio.sleep(0.02)

    assert events == ["trigger", "poll-start", "poll-end"]
    assert session.cycle_count == 0
    await session.close()


@pytest.mark.asyncio
async def test_restart_waits_for_previous_in_flight_poll() -> None:
    gate = asyncio.Event()
    events: list[str] = []

    async def trigger() -> None:
        events.append("trigger")

    async def poll() -> None:
        events.append("poll-start")
        await gate.wait()
        events.append("poll-end")

    session = RefreshSession(trigger, poll, poll_interval=10.0, polls_per_cycle=5)
    session.start()
    await _wait_until(lambda: "poll-start" in events)
    session.stop()
    session.start()
    await asyncio.sleep(0.01)

    # The new activation has not triggered yet: the old poll is still running.
    assert events == ["trigger", "poll-start"]

    gate.set()
    await _wait_until(lambda: events.count("poll-end") >= 2)
    await session.close()

    assert events == ["trigger", "poll-start", "poll-end", "trigger", "poll-start", "poll-end"]


@pytest.mark.asyncio
async def test_close_cancels_superseded_run_with_in_flight_poll() -> None:
    gate = asyncio.Event()
    events: list[str] = []

    async def trigger() -> None:
        events.append("trigger")

    async def poll() -> None:
        events.append("poll-start")
        try:
            await gate.wait()
        finally:
            events.append("poll-exit")

    session = RefreshSession(trigger, poll, poll_interval=10.0, polls_per_cycle=5)
    session.start()
    await _wait_until(lambda: "poll-start" in events)
    session.stop()
    session.start()
    await session.close()

    pending = [t for t in asyncio.all_tasks() if t.get_name() == "pydss-refresh" and not t.done()]
    assert pending == []
    assert events == ["trigger", "poll-start", "poll-exit"]


@pytest.mark.asyncio
async def test_closed_session_cannot_restart() -> None:
    recorder = _Recorder()
    session = RefreshSession(recorder.trigger, recorder.poll, poll_interval=10.0)

    session.start()
    await _wait_until(lambda: session.waiting)
    await session.close()

    assert session.closed
    assert not session.active
    with pytest.raises(DssError):
        session.start()


def test_polls_per_cycle_must_be_positive() -> None:
    with pytest.raises(ValueError):
        RefreshSession(_Recorder().trigger, _Recorder().poll, polls_per_cycle=0)
