"""Cooperative polling for new chat messages.

Messaging has no push channel: an open conversation polls on a fixed
interval. The poller owns exactly one asyncio task and always cancels it
on stop() / context exit, so a closed conversation never leaves a timer
running.
"""
import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable, Sequence
from datetime import datetime
from typing import Any

from moodfeed.core.config import settings

logger = logging.getLogger(__name__)

FetchFn = Callable[[datetime | None], Awaitable[Sequence[Any]]]
DeliverFn = Callable[[Sequence[Any]], Awaitable[None] | None]


class MessagePoller:
    """Calls ``fetch(since)`` every ``interval`` seconds and hands new messages to ``deliver``.

    ``since`` is the ``created_at`` of the newest message delivered so far
    (None on the first poll), so each message is delivered once.
    """

    def __init__(self, fetch: FetchFn, deliver: DeliverFn, interval: float | None = None):
        self._fetch = fetch
        self._deliver = deliver
        self.interval = settings.MESSAGE_POLL_INTERVAL_SECONDS if interval is None else interval
        self.since: datetime | None = None
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def poll_once(self) -> int:
        messages = await self._fetch(self.since)
        if not messages:
            return 0
        self.since = max(m.created_at for m in messages)
        delivered = self._deliver(messages)
        if inspect.isawaitable(delivered):
            await delivered
        return len(messages)

    async def _run(self) -> None:
        while True:
            try:
                await self.poll_once()
            except asyncio.CancelledError:
                raise
            except Exception:
                # a failed poll must not kill the loop; the next tick retries
                logger.warning("Message poll failed", exc_info=True)
            await asyncio.sleep(self.interval)

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def __aenter__(self) -> "MessagePoller":
        self.start()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.stop()
