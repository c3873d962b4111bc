"""Async chunk stream with queue-based iteration and final-result awaiting."""

from __future__ import annotations

import asyncio
from typing import AsyncIterator, Generic, TypeVar

T = TypeVar("T")
R = TypeVar("R")


class ResponseStream(Generic[T, R]):
    """Async stream that can be iterated once and also awaited for a final result.

    The stream is fed via :meth:`push` and terminated via :meth:`end` (success)
    or :meth:`fail` (error).  Consumers iterate with ``async for`` and can
    await :meth:`result` for the final value independently of iteration.

    A failure is raised out of the iterator only after every chunk pushed
    before it has been yielded, so the consumer sees the error at the point
    the producer hit it.
    """

    def __init__(self) -> None:
        self._queue: list[T] = []
        self._waiters: list[asyncio.Future[_IterResult[T]]] = []
        self._done: bool = False
        self._error: BaseException | None = None
        self._iterated: bool = False

        loop = asyncio.get_running_loop()
        self._final_result: asyncio.Future[R] = loop.create_future()

    # ------------------------------------------------------------------
    # Producer API
    # ------------------------------------------------------------------

    def push(self, item: T) -> None:
        """Add a chunk to the stream.  Ignored once the stream has ended."""
        if self._done:
            return

        # Deliver to a waiting consumer, or buffer the chunk.
        if self._waiters:
            waiter = self._waiters.pop(0)
            if not waiter.done():
                waiter.set_result(_IterResult(value=item, done=False))
                return
        self._queue.append(item)

    def end(self, result: R) -> None:
        """Signal that no more chunks will be pushed and resolve the final result."""
        if self._done:
            return
        self._done = True
        if not self._final_result.done():
            self._final_result.set_result(result)
        self._wake_waiters()

    def fail(self, error: BaseException) -> None:
        """Terminate the stream with *error*.

        The final result is rejected with *error*, and iteration raises it
        after the already-buffered chunks.
        """
        if self._done:
            return
        self._done = True
        self._error = error
        if not self._final_result.done():
            self._final_result.set_exception(error)
        self._wake_waiters()

    def _wake_waiters(self) -> None:
        while self._waiters:
            waiter = self._waiters.pop(0)
            if not waiter.done():
                waiter.set_result(_IterResult(value=None, done=True))

    # ------------------------------------------------------------------
    # Consumer API
    # ------------------------------------------------------------------

    def result(self) -> asyncio.Future[R]:
        """Return the future that resolves to the final result."""
        return self._final_result

    def __aiter__(self) -> AsyncIterator[T]:
        if self._iterated:
            raise RuntimeError("ResponseStream can only be iterated once")
        self._iterated = True
        return self._async_iterator()

    async def _async_iterator(self) -> AsyncIterator[T]:
        while True:
            if self._queue:
                yield self._queue.pop(0)
            elif self._done:
                if self._error is not None:
                    raise self._error
                return
            else:
                loop = asyncio.get_running_loop()
                waiter: asyncio.Future[_IterResult[T]] = loop.create_future()
                self._waiters.append(waiter)
                iter_result = await waiter
                if iter_result.done:
                    if self._error is not None:
                        raise self._error
                    return
                yield iter_result.value  # type: ignore[misc]


class _IterResult(Generic[T]):
    """Small value-holder for a delivered chunk or the end sentinel."""

    __slots__ = ("value", "done")

    def __init__(self, *, value: T | None, done: bool) -> None:
        self.value = value
        self.done = done
