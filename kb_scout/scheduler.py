"""
Periodic crawl scheduling.

One asyncio task runs a pass at a fixed rate, every ``interval`` seconds
measured from when the timer was armed, until :meth:`CrawlScheduler.stop`
cancels it. Pass duration does not shift later ticks; ticks missed while a
pass overran are dropped rather than run back to back. Manual triggers share
the same lock, so at most one pass is in flight; a trigger that arrives during
a pass waits for it to finish and then runs its own.
"""
from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Optional, Sequence

from kb_scout.config import SeedSection
from kb_scout.crawler.models import CrawlReport
from kb_scout.errors import PassFailure
from kb_scout.logger import logger

__all__ = ["CrawlScheduler"]

PassRunner = Callable[[Optional[Sequence[SeedSection]]], Awaitable[CrawlReport]]


class CrawlScheduler:
    """Owns the repeating crawl task and serializes every pass."""

    def __init__(self, run_pass: PassRunner, interval: float, *, run_on_start: bool = False) -> None:
        self._run_pass = run_pass
        self.interval = interval
        self.run_on_start = run_on_start
        self._lock = asyncio.Lock()
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        """True while a pass is in flight."""
        return self._lock.locked()

    @property
    def started(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Arm the repeating timer. Calling it twice keeps the first task."""
        if self.started:
            return
        self._task = asyncio.create_task(self._loop(), name="kb-scout-crawl-scheduler")
        logger.info("Crawl scheduler armed: every %.0f s", self.interval)

    async def stop(self) -> None:
        """Cancel the timer task and wait for it to unwind."""
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.info("Crawl scheduler stopped")

    async def trigger(self, sections: Optional[Sequence[SeedSection]] = None) -> CrawlReport:
        """Run one pass now (all sections unless given). PassFailure propagates to the caller."""
        if self.running:
            logger.info("Crawl pass already running, waiting for it to finish")
        async with self._lock:
            return await self._run_pass(sections)

    async def _loop(self) -> None:
        loop = asyncio.get_running_loop()
        next_tick = loop.time()
        if self.run_on_start:
            await self._scheduled_pass()
        while True:
            next_tick += self.interval
            now = loop.time()
            if next_tick < now:
                missed = (now - next_tick) // self.interval + 1
                logger.warning("Crawl pass overran the interval, skipping %d tick(s)", missed)
                next_tick += missed * self.interval
            await asyncio.sleep(next_tick - now)
            await self._scheduled_pass()

    async def _scheduled_pass(self) -> None:
        logger.info("Scheduled crawl pass…")
        try:
            await self.trigger()
        except PassFailure as exc:
            # the next tick still fires
            logger.error("Scheduled crawl pass failed: %s", exc)
