"""Lazy, single-consumer streams of request states."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from typing import Any, Generic, TypeVar

from boundflow.exceptions import BoundflowStreamError
from boundflow.jobs import Job, JobRegistry
from boundflow.models.state import Error, ErrorPresentation, RequestState

_logger = logging.getLogger(__name__)

T = TypeVar("T")

Emit = Callable[[RequestState[Any]], None]
Producer = Callable[[Emit], Awaitable[None]]

_END = object()


class _ProducerFailure:
    __slots__ = ("exc",)

    def __init__(self, exc: BaseException) -> None:
        self.exc = exc


class StateStream(Generic[T]):
    """Async-iterable stream of :data:`~boundflow.models.state.RequestState`.

    Nothing runs until the stream is iterated. The producer then runs as a
    task; when a registry is given the task is the active job of ``slot``,
    so a newer stream for the same slot supersedes this one and this one
    simply ends without a terminal state.

    Leaving the ``async for`` early (``break``, ``aclose()`` or cancellation
    of the consuming task) cancels the job.

    Usage::

        async for state in client.login(email, password):
            render(state)
    """

    def __init__(self, slot: str, producer: Producer, *, registry: JobRegistry | None = None) -> None:
        self.slot = slot
        self._producer = producer
        self._registry = registry
        self._consumed = False
        self._job: Job | None = None

    @classmethod
    def failure(
        cls,
        message: str,
        *,
        slot: str = "",
        presentation: ErrorPresentation = ErrorPresentation.DIALOG,
    ) -> StateStream[T]:
        """Stream that emits a single terminal :class:`Error` once observed."""

        async def produce(emit: Emit) -> None:
            emit(Error(message, presentation))

        return cls(slot, produce)

    @property
    def job(self) -> Job | None:
        """The registry job backing this stream, once iteration started."""
        return self._job

    def __aiter__(self) -> AsyncIterator[RequestState[T]]:
        if self._consumed:
            raise BoundflowStreamError(f"State stream for slot {self.slot!r} can only be consumed once")
        self._consumed = True
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[RequestState[T]]:
        queue: asyncio.Queue[Any] = asyncio.Queue()

        async def run() -> None:
            try:
                await self._producer(queue.put_nowait)
            except Exception as exc:  # surfaced to the consumer below
                queue.put_nowait(_ProducerFailure(exc))

        if self._registry is not None:
            job: Job | None = self._registry.start(self.slot, run())
            task = job.task
        else:
            job = None
            task = asyncio.create_task(run())
        self._job = job
        # A task cancelled before its first step never runs its body, so the
        # end marker has to come from the task itself.
        task.add_done_callback(lambda _task: queue.put_nowait(_END))

        try:
            while True:
                item = await queue.get()
                if item is _END:
                    return
                if job is not None and job.cancelled:
                    _logger.debug("Discarding results of cancelled job in slot %s", self.slot)
                    return
                if isinstance(item, _ProducerFailure):
                    raise item.exc
                yield item
                if item.is_terminal:
                    return
        finally:
            if job is not None and self._registry is not None:
                self._registry.cancel_job(job)
            elif not task.done():
                task.cancel()

    async def collect(self) -> list[RequestState[T]]:
        """Consume the whole stream and return every emitted state."""
        return [state async for state in self]

    def subscribe(self, callback: Callable[[RequestState[T]], Any]) -> asyncio.Task[None]:
        """Deliver each state to *callback* from a background task.

        Cancelling the returned task tears the invocation down.
        """

        async def pump() -> None:
            async for state in self:
                callback(state)

        return asyncio.create_task(pump(), name=f"boundflow-subscriber:{self.slot}")
