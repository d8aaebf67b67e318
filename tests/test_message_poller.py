import asyncio
from datetime import datetime, timedelta
from types import SimpleNamespace

from moodfeed.services.message_poller import MessagePoller

T0 = datetime(2026, 1, 1, 12, 0, 0)


def msg(seconds, content):
    return SimpleNamespace(created_at=T0 + timedelta(seconds=seconds), content=content)


async def test_poll_once_advances_since():
    store = [msg(1, "a"), msg(2, "b")]
    seen_since = []
    delivered = []

    async def fetch(since):
        seen_since.append(since)
        return [m for m in store if since is None or m.created_at > since]

    poller = MessagePoller(fetch, delivered.extend, interval=0)
    assert await poller.poll_once() == 2
    store.append(msg(3, "c"))
    assert await poller.poll_once() == 1
    assert await poller.poll_once() == 0
    assert [m.content for m in delivered] == ["a", "b", "c"]
    assert seen_since == [None, T0 + timedelta(seconds=2), T0 + timedelta(seconds=3)]


async def test_stop_cancels_the_loop():
    calls = 0

    async def fetch(since):
        nonlocal calls
        calls += 1
        return []

    poller = MessagePoller(fetch, lambda messages: None, interval=0.01)
    async with poller:
        assert poller.running
        await asyncio.sleep(0.05)
    assert not poller.running
    after_stop = calls
    await asyncio.sleep(0.05)
    assert calls == after_stop
    assert calls >= 1


async def test_failed_poll_does_not_kill_loop():
    attempts = 0
    delivered = []

    async def fetch(since):
        nonlocal attempts
        attempts += 1
        if attempts == 1:
            raise ConnectionError("store unreachable")
        return [msg(attempts, "ok")] if attempts == 2 else []

    async def deliver(messages):
        delivered.extend(messages)

    poller = MessagePoller(fetch, deliver, interval=0.01)
    poller.start()
    for _ in range(100):
        if delivered:
            break
        await asyncio.sleep(0.01)
    await poller.stop()
    assert [m.content for m in delivered] == ["ok"]


async def test_stop_without_start_is_harmless():
    poller = MessagePoller(lambda since: None, lambda messages: None)
    await poller.stop()
    assert not poller.running
