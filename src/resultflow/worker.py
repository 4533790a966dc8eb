"""Run an async iterator on its own producer task.

``flow_on`` is the background execution context for resultflow flows: the
source is driven by a dedicated ``asyncio`` task and its elements are relayed
to the consumer through a queue with a bounded backlog. The consumer can
iterate from any task; when it stops early the producer is cancelled and
awaited, so no work outlives the consumer.
"""

from __future__ import annotations

import asyncio
from contextlib import aclosing, nullcontext
import logging
from typing import TYPE_CHECKING, Any, Literal, TypeVar

from resultflow.errors import InternalError

if TYPE_CHECKING:
    from collections.abc import AsyncIterator
    from contextlib import AbstractAsyncContextManager

log = logging.getLogger(__name__)

T = TypeVar("T")

_Kind = Literal["item", "error", "cancelled", "done"]


def closing_if_possible(
    source: AsyncIterator[Any],
) -> AbstractAsyncContextManager[Any]:
    """Close *source* on exit when it supports ``aclose()``."""
    if hasattr(source, "aclose"):
        return aclosing(source)  # type: ignore[type-var]
    return nullcontext(source)


async def flow_on(
    source: AsyncIterator[T],
    *,
    buffer: int = 1,
    name: str = "resultflow-worker",
) -> AsyncIterator[T]:
    """Relay *source* from a background task, preserving element order.

    Nothing runs until the first element is requested. Exceptions raised by
    the source re-raise in the consumer after all earlier elements. If the
    producer task ends by cancellation the consumer did not request, the
    consumer raises ``InternalError`` instead of waiting forever.
    """
    if buffer < 1:
        raise ValueError("flow_on buffer must be >= 1")

    # Unbounded queue; ``slots`` bounds unconsumed items so the terminal
    # marker from the done callback can always be enqueued.
    queue: asyncio.Queue[tuple[_Kind, Any]] = asyncio.Queue()
    slots = asyncio.Semaphore(buffer)

    async def _produce() -> None:
        async with closing_if_possible(source):
            async for item in source:
                await slots.acquire()
                queue.put_nowait(("item", item))

    def _finished(t: asyncio.Task[None]) -> None:
        if t.cancelled():
            queue.put_nowait(("cancelled", None))
        elif (exc := t.exception()) is not None:
            queue.put_nowait(("error", exc))
        else:
            queue.put_nowait(("done", None))

    task = asyncio.create_task(_produce(), name=name)
    task.add_done_callback(_finished)
    try:
        while True:
            kind, payload = await queue.get()
            if kind == "done":
                return
            if kind == "error":
                raise payload
            if kind == "cancelled":
                raise InternalError(
                    f"{task.get_name()} was cancelled before the flow completed"
                )
            slots.release()
            yield payload
    finally:
        if not task.done():
            log.debug("Cancelling %s before completion", task.get_name())
            task.cancel()
        # wait() never raises the task's outcome; the consumer's own
        # cancellation still propagates.
        await asyncio.wait({task})
