"""Project a result flow into UI view states.

``view_state_flow`` brackets the underlying result flow with
``Loading(True)`` / ``Loading(False)`` and maps each result one-to-one:
``Success`` to ``RenderSuccess`` and ``Failure`` to ``RenderFailure``.
"""

from __future__ import annotations

import inspect
import logging
from typing import TYPE_CHECKING, Any, TypeVar

from resultflow.errors import InternalError
from resultflow.result import Failure, Success
from resultflow.state import Loading, RenderFailure, RenderSuccess
from resultflow.worker import closing_if_possible, flow_on

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Callable

    from resultflow.result import Result
    from resultflow.state import ViewState

log = logging.getLogger(__name__)

T = TypeVar("T")


def to_view_state(result: Result[T, Any]) -> ViewState[T]:
    """Map one result to its view state."""
    match result:
        case Success(value=value):
            return RenderSuccess(value)
        case Failure(error=error):
            return RenderFailure(error)
        case _:
            raise InternalError(
                f"Expected Success or Failure, got {type(result).__name__}"
            )


async def _project(
    io_operation: Callable[[], Any],
) -> AsyncIterator[ViewState[T]]:
    yield Loading(is_loading=True)
    try:
        source = io_operation()
        if inspect.isawaitable(source):
            source = await source
        async with closing_if_possible(source):
            async for result in source:
                yield to_view_state(result)
    except Exception as exc:
        # Result flows classify every failure themselves; anything that still
        # escapes is surfaced as a final failure state.
        log.warning("Result flow raised unexpectedly: %r", exc)
        yield RenderFailure(exc)
    yield Loading(is_loading=False)


def view_state_flow(
    io_operation: Callable[[], Any],
) -> AsyncIterator[ViewState[T]]:
    """Wrap a result flow factory as a lazy flow of view states.

    Args:
        io_operation: Zero-argument callable returning an async iterator of
            ``Result`` values, or an awaitable resolving to one.

    Returns:
        Async iterator yielding ``Loading(True)``, one state per result, then
        ``Loading(False)``.
    """
    return flow_on(_project(io_operation), name="resultflow-view-state")


async def collect[E](flow: AsyncIterator[E]) -> list[E]:
    """Materialize a flow into a list."""
    return [item async for item in flow]


async def last_result(
    flow: AsyncIterator[Result[T, Any]],
) -> Result[T, Any] | None:
    """Return the final result of a flow, or None when it emitted nothing."""
    last: Result[T, Any] | None = None
    async for result in flow:
        last = result
    return last


async def first_success(
    flow: AsyncIterator[Result[T, Any]],
) -> Result[T, Any] | None:
    """Return the first ``Success``, else the last ``Failure``.

    The flow is closed as soon as a success arrives.
    """
    last: Result[T, Any] | None = None
    async with closing_if_possible(flow):
        async for result in flow:
            if isinstance(result, Success):
                return result
            last = result
    return last
