"""Retrying network call pipeline with explicit error contracts.

``perform_network_operation`` turns one async transport call into a lazy
flow of ``Result`` values: one element per attempt, ending with the first
``Success`` or with the last ``Failure`` once retries stop.

Classification per attempt:
- success with a payload: ``Success(payload)``, flow ends.
- success without a payload: non-retryable ``Failure``, flow ends.
- success with a payload the adapter cannot decode: non-retryable
  ``Failure``, flow ends.
- failure reported by the transport: retryable ``Failure``.
- exception while calling or awaiting: retryable ``Failure``.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
import logging
from typing import TYPE_CHECKING, Any, TypeVar

from resultflow.config import load_settings
from resultflow.errors import ConfigurationError, EmptyResponseBodyError, NetworkIOError
from resultflow.response import error_detail_text, is_empty_body
from resultflow.result import Failure, Success
from resultflow.worker import flow_on

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Awaitable, Callable

    from resultflow.config import Settings
    from resultflow.response import Response
    from resultflow.result import Result

log = logging.getLogger(__name__)

T = TypeVar("T")

EMPTY_BODY_MESSAGE = "API call successful but empty response body"


@dataclass(frozen=True)
class RetryPolicy:
    """Bounded retry policy with exponential backoff.

    ``max_retries`` counts retries, not attempts: a call is made at most
    ``max_retries + 1`` times.
    """

    allow_retries: bool = True
    max_retries: int = 2
    initial_delay_s: float = 1.0
    backoff_factor: float = 2.0

    def __post_init__(self) -> None:
        """Validate invariants to keep retry behavior predictable."""
        if self.max_retries < 0:
            raise ConfigurationError(
                f"max_retries must be >= 0, got {self.max_retries}",
                hint="Use allow_retries=False to disable retries entirely.",
            )
        if self.initial_delay_s < 0:
            raise ConfigurationError(
                f"initial_delay_s must be >= 0, got {self.initial_delay_s}"
            )
        if self.backoff_factor <= 1:
            raise ConfigurationError(
                f"backoff_factor must be > 1, got {self.backoff_factor}",
                hint="A factor of 2 doubles the delay after every retry.",
            )

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> RetryPolicy:
        """Build a policy from resolved settings (environment when omitted)."""
        s = settings if settings is not None else load_settings()
        return cls(
            allow_retries=s.allow_retries,
            max_retries=s.max_retries,
            initial_delay_s=s.initial_delay_s,
            backoff_factor=s.backoff_factor,
        )

    @classmethod
    def no_retries(cls) -> RetryPolicy:
        return cls(allow_retries=False)


def should_retry(
    policy: RetryPolicy, error: BaseException, *, attempts_made: int
) -> bool:
    """Return True when another attempt is warranted after *error*.

    Contract:
    - Retries must be enabled on the policy.
    - At most ``policy.max_retries`` retries follow the first attempt.
    - Only retryable ``NetworkIOError`` failures are retried; an empty
      success body never is.
    """
    if not policy.allow_retries or attempts_made > policy.max_retries:
        return False
    return isinstance(error, NetworkIOError) and error.retryable


def _exception_failure(exc: BaseException) -> NetworkIOError:
    reason = str(exc) or type(exc).__name__
    err = NetworkIOError(f"Exception during network API call: {reason}")
    err.__cause__ = exc
    return err


async def _attempt(
    network_api_call: Callable[[], Awaitable[Response[T]]],
    message_in_case_of_error: str,
) -> Result[T, NetworkIOError]:
    try:
        response = await network_api_call()
        if response.is_successful:
            body = response.body()
            if is_empty_body(body):
                return Failure(EmptyResponseBodyError(EMPTY_BODY_MESSAGE))
            return Success(body)
        detail = error_detail_text(response.error_body())
        return Failure(
            NetworkIOError(
                f"API call failed with error - {detail or message_in_case_of_error}",
                detail=detail,
            )
        )
    except asyncio.CancelledError as exc:
        # Only a CancelledError raised by the operation itself is a failed
        # attempt; cancellation of this flow always propagates.
        task = asyncio.current_task()
        if task is not None and task.cancelling():
            raise
        return Failure(_exception_failure(exc))
    except NetworkIOError as exc:
        # Already classified, e.g. an unparseable body from a response adapter.
        return Failure(exc)
    except Exception as exc:
        return Failure(_exception_failure(exc))


async def _attempts(
    network_api_call: Callable[[], Awaitable[Response[T]]],
    policy: RetryPolicy | None,
    message_in_case_of_error: str | None,
    sleep: Callable[[float], Awaitable[Any]],
) -> AsyncIterator[Result[T, NetworkIOError]]:
    if policy is None or message_in_case_of_error is None:
        settings = load_settings()
        if policy is None:
            policy = RetryPolicy.from_settings(settings)
        if message_in_case_of_error is None:
            message_in_case_of_error = settings.default_error_message

    # Per-invocation counters; never shared between flows.
    delay = policy.initial_delay_s
    attempts_made = 0
    while True:
        attempts_made += 1
        result = await _attempt(network_api_call, message_in_case_of_error)
        log.debug(
            "Network call attempt %d finished: %s",
            attempts_made,
            type(result).__name__,
        )
        yield result

        if isinstance(result, Success):
            return
        if not should_retry(policy, result.error, attempts_made=attempts_made):
            if policy.allow_retries and getattr(result.error, "retryable", False):
                log.info("Network call failed after %d attempt(s)", attempts_made)
            return

        log.warning(
            "Network call attempt %d failed (%s); retrying in %.3fs",
            attempts_made,
            result.error,
            delay,
        )
        await sleep(delay)
        delay *= policy.backoff_factor


def perform_network_operation(
    network_api_call: Callable[[], Awaitable[Response[T]]],
    *,
    policy: RetryPolicy | None = None,
    message_in_case_of_error: str | None = None,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
) -> AsyncIterator[Result[T, NetworkIOError]]:
    """Run *network_api_call* with bounded retries as a lazy result flow.

    Args:
        network_api_call: Zero-argument async callable returning a response
            with ``is_successful``, ``body()`` and ``error_body()``.
        policy: Retry policy; resolved from settings on first iteration
            when omitted.
        message_in_case_of_error: Fallback text when a failed response has
            no error body; resolved from settings like *policy*.
        sleep: Awaitable used for backoff delays.

    Returns:
        Async iterator yielding one ``Result`` per attempt, in order. Failures
        never raise; each is delivered as a ``Failure`` value. Invalid
        settings raise ``ConfigurationError`` from the first iteration.

    Example:
        async for result in perform_network_operation(fetch_photos):
            match result:
                case Success(value=photos):
                    show(photos)
                case Failure(error=err):
                    log_error(err)
    """
    return flow_on(
        _attempts(network_api_call, policy, message_in_case_of_error, sleep),
        name="resultflow-network-call",
    )
