"""Closed success/failure result type produced per network call attempt.

Each attempt of a retrying network call yields exactly one of these. Match on
them rather than testing attributes:

    match result:
        case Success(value=payload):
            ...
        case Failure(error=err):
            ...
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Success[T]:
    """The call completed and produced a non-empty payload."""

    value: T


@dataclass(frozen=True, slots=True)
class Failure[E: BaseException]:
    """The call failed.

    ``str(error)`` is the human-readable message; ``error.__cause__`` holds the
    underlying exception when there was one.
    """

    error: E


type Result[T, E: BaseException] = Success[T] | Failure[E]
