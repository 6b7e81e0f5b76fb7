"""Timer-driven FIFO executor for deferred, rate-limited side effects.

Work items are drained one per tick. An asynchronous action is scheduled and
not awaited before the next tick, so two actions can be in flight at once.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections import deque
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from functools import partial

from discord_music_queue.domain.shared.exceptions import ExecutorTaskFailure
from discord_music_queue.domain.shared.messages import ErrorMessages, LogTemplates

logger = logging.getLogger(__name__)

WorkAction = Callable[[], Awaitable[None] | None]


def _current_task() -> asyncio.Task | None:
    try:
        return asyncio.current_task()
    except RuntimeError:
        return None


@dataclass(frozen=True, slots=True)
class WorkItem:
    """A deferred, zero-argument unit of work."""

    id: str
    action: WorkAction

    def __post_init__(self) -> None:
        if not self.id or not self.id.strip():
            raise ValueError(ErrorMessages.EMPTY_WORK_ITEM_ID)


class WorkQueue:
    DEFAULT_INTERVAL_SECONDS = 0.5

    def __init__(
        self,
        interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
        *,
        on_error: Callable[[ExecutorTaskFailure], None] | None = None,
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError(ErrorMessages.INVALID_INTERVAL)

        self._interval = interval_seconds
        self._on_error = on_error
        self._queue: deque[WorkItem] = deque()
        self._timer: asyncio.Task[None] | None = None
        self._in_flight: set[asyncio.Future[None]] = set()

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def pending(self) -> int:
        return len(self._queue)

    @property
    def is_running(self) -> bool:
        return self._timer is not None

    @property
    def in_flight(self) -> int:
        return len(self._in_flight)

    def __len__(self) -> int:
        return len(self._queue)

    def submit(self, item: WorkItem) -> None:
        """Append an item and make sure the timer is ticking. Never blocks."""
        self._queue.append(item)
        self._ensure_timer()

    def clear(self) -> None:
        """Discard every pending item and stop the timer."""
        discarded = len(self._queue)
        self._queue.clear()

        # From inside a tick the loop sees the empty deque and exits on its own.
        timer = self._timer
        if timer is not None and timer is not _current_task():
            self._timer = None
            timer.cancel()

        if discarded:
            logger.info(LogTemplates.WORK_QUEUE_CLEARED, discarded)

    async def wait_idle(self, *, include_in_flight: bool = True) -> None:
        """Wait until the queue has drained (and, by default, async actions finished)."""
        while True:
            if self._timer is not None:
                await asyncio.wait({self._timer})
                continue
            if include_in_flight and self._in_flight:
                await asyncio.wait(set(self._in_flight))
                continue
            return

    async def close(self) -> None:
        """Clear the queue and cancel actions that are still running."""
        self.clear()

        in_flight = list(self._in_flight)
        for future in in_flight:
            future.cancel()
        if in_flight:
            await asyncio.gather(*in_flight, return_exceptions=True)

        logger.info(LogTemplates.WORK_QUEUE_CLOSED, len(in_flight))

    def _ensure_timer(self) -> None:
        if self._timer is not None:
            return

        loop = asyncio.get_running_loop()
        self._timer = loop.create_task(self._run_loop(), name="work-queue-timer")
        logger.debug(LogTemplates.WORK_QUEUE_STARTED, self._interval)

    async def _run_loop(self) -> None:
        try:
            while self._queue:
                await asyncio.sleep(self._interval)
                if not self._execute_next():
                    break
        finally:
            if self._timer is asyncio.current_task():
                self._timer = None
                logger.debug(LogTemplates.WORK_QUEUE_DRAINED)

    def _execute_next(self) -> bool:
        """Run at most one item. Returns False when the queue was found empty."""
        if not self._queue:
            return False

        item = self._queue.popleft()
        logger.debug(LogTemplates.WORK_QUEUE_EXECUTING, item.id)

        try:
            result = item.action()
        except Exception as exc:
            self._report_failure(item, exc)
            return True

        if inspect.isawaitable(result):
            future = asyncio.ensure_future(result)
            self._in_flight.add(future)
            future.add_done_callback(partial(self._on_action_done, item))

        return True

    def _on_action_done(self, item: WorkItem, future: asyncio.Future[None]) -> None:
        self._in_flight.discard(future)
        if future.cancelled():
            return

        exc = future.exception()
        if exc is not None:
            self._report_failure(item, exc)

    def _report_failure(self, item: WorkItem, exc: BaseException) -> None:
        logger.error(LogTemplates.WORK_QUEUE_ITEM_FAILED, item.id, exc_info=exc)
        if self._on_error is None:
            return

        try:
            self._on_error(ExecutorTaskFailure(item.id, exc))
        except Exception:
            logger.exception(LogTemplates.WORK_QUEUE_ITEM_FAILED, item.id)
