"""Detached background work.

Tasks submitted here are never joined by the code that submitted them.
Whatever escapes a task is logged and dropped.
"""

import asyncio
import logging
from collections.abc import Coroutine
from typing import Any

logger = logging.getLogger(__name__)


class BackgroundTasks:
    """Tracks fire-and-forget ``asyncio`` tasks.

    Holding a reference to each task keeps it from being garbage collected
    before it finishes; the reference is dropped once the task is done.
    """

    def __init__(self) -> None:
        self._tasks: set[asyncio.Task] = set()

    def submit(self, coro: Coroutine[Any, Any, Any], name: str | None = None) -> asyncio.Task:
        """Schedule ``coro`` on the running loop without awaiting it."""
        task = asyncio.create_task(coro, name=name)
        self._tasks.add(task)
        task.add_done_callback(self._on_done)
        return task

    def _on_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            logger.debug("Background task %s cancelled", task.get_name())
            return
        exc = task.exception()
        if exc is not None:
            logger.debug("Background task %s failed: %s", task.get_name(), exc)

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def drain(self) -> None:
        """Wait for every task submitted so far (used on shutdown and in tests)."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
