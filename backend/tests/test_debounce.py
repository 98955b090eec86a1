import asyncio
import logging

import pytest

from contactbook.client.debounce import Debouncer

pytestmark = pytest.mark.anyio


async def test_only_last_call_runs():
    calls = []
    debouncer = Debouncer(0.01)

    for n in range(3):
        async def callback(n=n):
            calls.append(n)
        debouncer.call(callback)
    await debouncer.wait()

    assert calls == [2]
    assert not debouncer.pending


async def test_failing_callback_is_logged(caplog):
    debouncer = Debouncer(0.0)

    async def callback():
        raise RuntimeError("render blew up")

    with caplog.at_level(logging.ERROR, logger="contactbook.client.debounce"):
        task = debouncer.call(callback)
        await debouncer.wait()
        await asyncio.sleep(0)

    assert task.done()
    assert any("render blew up" in record.getMessage() for record in caplog.records)


async def test_cancel_drops_pending_call():
    calls = []
    debouncer = Debouncer(0.05)

    async def callback():
        calls.append(1)

    debouncer.call(callback)
    debouncer.cancel()
    await debouncer.wait()

    assert calls == []
