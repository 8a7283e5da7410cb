import asyncio

import pytest

from fall_core.abort import AbortController, abortable
from fall_core.exceptions import AbortError, FallException


def test_signal_initial_state():
    controller = AbortController()
    assert controller.signal.aborted is False
    assert controller.signal.reason is None
    controller.signal.throw_if_aborted()


def test_abort_sets_reason_and_raises():
    controller = AbortController()
    controller.abort("user closed picker")

    assert controller.signal.aborted is True
    with pytest.raises(AbortError, match="user closed picker") as exc_info:
        controller.signal.throw_if_aborted()
    assert exc_info.value.reason == "user closed picker"
    assert isinstance(exc_info.value, FallException)


def test_abort_twice_keeps_first_reason():
    controller = AbortController()
    controller.abort("first")
    controller.abort("second")
    assert controller.signal.reason == "first"


def test_listeners_called_once():
    controller = AbortController()
    seen = []
    controller.signal.add_listener(seen.append)
    controller.abort("stop")
    controller.abort("again")
    assert seen == ["stop"]

    late = []
    controller.signal.add_listener(late.append)
    assert late == ["stop"]


@pytest.mark.asyncio
async def test_wait_returns_reason():
    controller = AbortController()
    waiter = asyncio.create_task(controller.signal.wait())
    await asyncio.sleep(0)
    controller.abort("done")
    assert await waiter == "done"


@pytest.mark.asyncio
async def test_abortable_without_signal():
    async def work():
        return 7

    assert await abortable(work()) == 7
    assert await abortable(work(), AbortController().signal) == 7


@pytest.mark.asyncio
async def test_abortable_already_aborted_never_runs():
    started = []

    async def work():
        started.append(1)

    controller = AbortController()
    controller.abort()
    with pytest.raises(AbortError):
        await abortable(work(), controller.signal)
    assert started == []


@pytest.mark.asyncio
async def test_abortable_cancels_in_flight_call():
    controller = AbortController()
    cancelled = []

    async def slow_call():
        try:
            await asyncio.sleep(10)
        except asyncio.CancelledError:
            cancelled.append(1)
            raise

    task = asyncio.create_task(abortable(slow_call(), controller.signal))
    await asyncio.sleep(0.01)
    controller.abort("timeout")

    with pytest.raises(AbortError, match="timeout"):
        await task
    assert cancelled == [1]
