"""Use-case contract: the boundary that turns a repository call into view states."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any, Protocol, TypeVar, runtime_checkable

from resultflow.projection import view_state_flow
from resultflow.retry import perform_network_operation

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Awaitable, Callable

    from resultflow.response import Response
    from resultflow.retry import RetryPolicy
    from resultflow.state import ViewState


@runtime_checkable
class Repository(Protocol):
    """Marker protocol for data sources that supply network calls."""


RepoT = TypeVar("RepoT", bound=Repository, covariant=True)
InputT = TypeVar("InputT", contravariant=True)
OutputT = TypeVar("OutputT", covariant=True)


class UseCase(Protocol[RepoT, InputT, OutputT]):
    """A single task the application performs, e.g. "load popular photos".

    Implementations hold a repository and return a flow of view states from
    ``execute``; ``network_view_state_flow`` covers the common case.
    """

    @property
    def repository(self) -> RepoT:
        """The collaborator that supplies network calls."""
        ...

    def execute(self, input: InputT) -> AsyncIterator[ViewState[OutputT]]:  # noqa: A002
        """Run the use case for *input* as a lazy flow of view states."""
        ...


def network_view_state_flow[T](
    network_api_call: Callable[[], Awaitable[Response[T]]],
    *,
    policy: RetryPolicy | None = None,
    message_in_case_of_error: str | None = None,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
) -> AsyncIterator[ViewState[T]]:
    """Compose the retrying pipeline with view-state projection."""
    return view_state_flow(
        lambda: perform_network_operation(
            network_api_call,
            policy=policy,
            message_in_case_of_error=message_in_case_of_error,
            sleep=sleep,
        )
    )
