"""Exception hierarchy for resultflow."""

from __future__ import annotations


class ResultFlowError(Exception):
    """Base exception for all resultflow errors."""

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint = hint


class ConfigurationError(ResultFlowError):
    """Configuration validation or resolution failed."""


class InternalError(ResultFlowError):
    """A resultflow internal error (bug) or invariant violation."""


class NetworkIOError(ResultFlowError):
    """A network call attempt failed.

    This is the error carried by every ``Failure`` the pipeline emits. The
    underlying exception, when there is one, is chained as ``__cause__``.
    ``retryable`` separates transient failures from contract violations so
    retry decisions never depend on message text.
    """

    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        retryable: bool = True,
        detail: str | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.retryable = retryable
        self.detail = detail


class EmptyResponseBodyError(NetworkIOError):
    """The call reported success but returned no payload."""

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message, hint=hint, retryable=False)


class ResponseBodyParseError(NetworkIOError):
    """The call reported success but its payload could not be decoded."""

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message, hint=hint, retryable=False)
