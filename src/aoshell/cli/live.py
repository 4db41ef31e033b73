"""Background live feed of process status."""

from __future__ import annotations

import asyncio
from contextlib import suppress

from loguru import logger

from aoshell.cli.render import Renderer
from aoshell.services.protocols import StatusSource

FOLLOW_POLL_SECONDS = 2.0


class LiveFeed:
    """Poll a process for new status messages and print them.

    The feed is restartable: `stop()` cancels the polling task and `start()`
    schedules a fresh one resuming from the last cursor seen. Both are
    no-ops when the feed is already in the requested state.
    """

    def __init__(
        self,
        process_id: str,
        source: StatusSource,
        renderer: Renderer,
        *,
        poll_seconds: float = FOLLOW_POLL_SECONDS,
    ) -> None:
        self.process_id = process_id
        self._source = source
        self._renderer = renderer
        self._poll_seconds = poll_seconds
        self._cursor: str | None = None
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._follow())
        logger.debug("live.start process={}", self.process_id)

    def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        self._task = None
        logger.debug("live.stop process={}", self.process_id)

    async def aclose(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        with suppress(asyncio.CancelledError):
            await task

    async def _follow(self) -> None:
        while True:
            await self.poll_once()
            await asyncio.sleep(self._poll_seconds)

    async def poll_once(self) -> None:
        try:
            batch = await self._source.read_status(self.process_id, self._cursor)
        except Exception as exc:
            logger.warning("live.poll.failed process={} error={}", self.process_id, exc)
            return
        self._cursor = batch.cursor
        for message in batch.messages:
            self._renderer.live(message)


def start_live_feed(
    process_id: str,
    source: StatusSource,
    renderer: Renderer,
    *,
    poll_seconds: float = FOLLOW_POLL_SECONDS,
) -> LiveFeed:
    feed = LiveFeed(process_id, source, renderer, poll_seconds=poll_seconds)
    feed.start()
    return feed
