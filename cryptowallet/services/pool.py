"""Fixed-size asyncio worker pool with an explicit lifecycle."""
from __future__ import annotations

import asyncio
import functools
import logging
from typing import Any, Awaitable, Callable

logger = logging.getLogger(__name__)

Job = tuple[Callable[..., Awaitable[Any]], tuple[Any, ...], asyncio.Future]


def _cancel_job(job: asyncio.Task, future: asyncio.Future) -> None:
    if future.cancelled():
        job.cancel()


def _settle(future: asyncio.Future, job: asyncio.Task) -> None:
    """Copy a finished job's outcome onto the caller's future."""
    if job.cancelled():
        future.cancel()
        return
    error = job.exception()
    if future.done():
        return
    if error is not None:
        future.set_exception(error)
    else:
        future.set_result(job.result())


class WorkerPool:
    """Run submitted coroutine functions on at most ``size`` workers at once.

    Workers are started on the first :meth:`submit` (a running event loop is
    required) and live until :meth:`shutdown`. Jobs beyond ``size`` wait in
    an unbounded queue.

    Each job runs as its own task. Cancelling the future returned by
    :meth:`submit` cancels that task, and a job that ends cancelled only
    cancels its future; the worker moves on to the next job.
    """

    def __init__(self, size: int, name: str = "pool") -> None:
        if size < 1:
            raise ValueError("Worker pool size must be at least 1")
        self.size = size
        self.name = name
        self._queue: asyncio.Queue[Job] | None = None
        self._workers: list[asyncio.Task] = []
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def _ensure_started(self) -> asyncio.Queue[Job]:
        if self._queue is None:
            self._queue = asyncio.Queue()
            self._workers = [
                asyncio.create_task(self._run(), name=f"{self.name}-{i}")
                for i in range(self.size)
            ]
            logger.debug("Started %s with %d workers", self.name, self.size)
        return self._queue

    def submit(self, func: Callable[..., Awaitable[Any]], *args: Any) -> asyncio.Future:
        """Queue ``func(*args)`` and return a future for its result."""
        if self._closed:
            raise RuntimeError(f"{self.name} is shut down")
        queue = self._ensure_started()
        future = asyncio.get_running_loop().create_future()
        queue.put_nowait((func, args, future))
        return future

    async def _run(self) -> None:
        assert self._queue is not None
        while True:
            func, args, future = await self._queue.get()
            try:
                if future.cancelled():
                    continue
                job = asyncio.create_task(func(*args))
                future.add_done_callback(functools.partial(_cancel_job, job))
                try:
                    await asyncio.wait([job])
                except asyncio.CancelledError:
                    # The worker itself is stopping.
                    job.cancel()
                    future.cancel()
                    await asyncio.wait([job])
                    raise
                _settle(future, job)
            finally:
                self._queue.task_done()

    async def shutdown(self) -> None:
        """Stop every worker and cancel jobs that never started. Idempotent."""
        if self._closed:
            return
        self._closed = True

        for worker in self._workers:
            worker.cancel()
        await asyncio.gather(*self._workers, return_exceptions=True)
        self._workers = []

        if self._queue is not None:
            while not self._queue.empty():
                _, _, future = self._queue.get_nowait()
                future.cancel()
                self._queue.task_done()
        logger.debug("%s shut down", self.name)
