"""Supervised fire-and-forget tasks for startup warm-ups"""

import asyncio
import logging
from typing import Awaitable, Optional

logger = logging.getLogger(__name__)


class TaskSupervisor:
    """
    Owns background tasks that nobody awaits.

    Every task keeps a strong reference until it finishes, and its outcome is
    always logged: success at INFO, failure at WARNING (also kept in
    `failures`). Pending tasks are cancelled on shutdown.
    """

    def __init__(self):
        self._tasks: set[asyncio.Task] = set()
        self.failures: dict[str, BaseException] = {}

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def spawn(
        self,
        name: str,
        coro: Awaitable,
        success_message: Optional[str] = None,
    ) -> asyncio.Task:
        task = asyncio.ensure_future(coro)
        task.set_name(name)
        self._tasks.add(task)

        def _observe(done: asyncio.Task) -> None:
            self._tasks.discard(done)
            if done.cancelled():
                logger.info(f"Background task '{name}' cancelled")
                return
            exc = done.exception()
            if exc is not None:
                self.failures[name] = exc
                logger.warning(f"⚠️ Background task '{name}' failed: {exc}")
                return
            logger.info(success_message or f"✅ Background task '{name}' completed")

        task.add_done_callback(_observe)
        return task

    async def shutdown(self) -> None:
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
            logger.info(f"Stopped {len(tasks)} background task(s)")
