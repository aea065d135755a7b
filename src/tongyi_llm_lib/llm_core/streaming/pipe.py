"""Bounded hand-off between one streaming producer task and one consumer."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Generic, Optional, TypeVar

from ..logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

DEFAULT_PIPE_SIZE = 8


@dataclass(frozen=True)
class _EndOfStream:
    """Sentinel closing the pipe, carrying the producer failure if any."""

    error: Optional[BaseException] = None


class StreamPipe(Generic[T]):
    """
    A capacity-bounded pipe fed by a single background producer task.

    The producer blocks in ``send`` while the pipe is full, giving natural
    backpressure. Consumers either pull explicitly::

        while await pipe.next():
            handle(pipe.current())
        if pipe.error:
            raise pipe.error

    or iterate with ``async for``, which re-raises the producer failure once all
    items sent before it have been consumed.
    """

    def __init__(self, maxsize: int = DEFAULT_PIPE_SIZE) -> None:
        self._queue: asyncio.Queue[Any] = asyncio.Queue(maxsize=maxsize)
        self._task: Optional[asyncio.Task[None]] = None
        self._current: Optional[T] = None
        self._error: Optional[BaseException] = None
        self._finished = False

    def go(self, producer: Callable[[], Awaitable[None]]) -> None:
        """Start ``producer`` as the background task feeding this pipe."""
        if self._task is not None:
            raise RuntimeError("StreamPipe producer already started.")
        self._task = asyncio.create_task(self._run(producer))

    async def _run(self, producer: Callable[[], Awaitable[None]]) -> None:
        try:
            await producer()
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            logger.debug("Stream producer failed: %r", exc)
            await self._queue.put(_EndOfStream(exc))
        else:
            await self._queue.put(_EndOfStream())

    async def send(self, item: T) -> None:
        """Hand ``item`` to the consumer, waiting while the pipe is full."""
        await self._queue.put(item)

    async def next(self) -> bool:
        """Advance to the next item. Returns False once the stream has ended."""
        if self._finished:
            return False
        if self._task is None:
            raise RuntimeError("StreamPipe has no producer; call go() first.")

        item = await self._queue.get()
        if isinstance(item, _EndOfStream):
            self._finished = True
            self._current = None
            self._error = item.error
            return False

        self._current = item
        return True

    def current(self) -> T:
        """The item produced by the last successful ``next`` call."""
        if self._current is None:
            raise RuntimeError("No current item; call next() first.")
        return self._current

    @property
    def error(self) -> Optional[BaseException]:
        """The error that terminated the stream, if any."""
        return self._error

    @property
    def finished(self) -> bool:
        return self._finished

    async def close(self) -> None:
        """Stop the producer and end the stream. Pending items are discarded."""
        self._finished = True
        self._current = None
        task = self._task
        if task is None or task.done():
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            current = asyncio.current_task()
            if current is not None and current.cancelling():
                raise
            logger.debug("Stream producer cancelled.")

    def __aiter__(self) -> "StreamPipe[T]":
        return self

    async def __anext__(self) -> T:
        if await self.next():
            return self.current()
        if self._error is not None:
            raise self._error
        raise StopAsyncIteration

    async def __aenter__(self) -> "StreamPipe[T]":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()
