"""Transport response contract consumed by the retrying pipeline.

The pipeline only ever looks at three things on a response: the success
indicator, the body and the error body. Anything that exposes those can be
passed in; ``SimpleResponse`` and ``HttpxResponse`` cover the common cases.
"""

from __future__ import annotations

from collections.abc import Sized
from dataclasses import dataclass
import json
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

import httpx

from resultflow.errors import ResponseBodyParseError

if TYPE_CHECKING:
    from collections.abc import Callable


@runtime_checkable
class Response[T](Protocol):
    """Minimal response protocol: success flag, body, error body."""

    @property
    def is_successful(self) -> bool:
        """Whether the transport reported success."""
        ...

    def body(self) -> T | None:
        """Decoded payload, or None when there is none."""
        ...

    def error_body(self) -> Any | None:
        """Raw error detail, or None when there is none."""
        ...


@dataclass(frozen=True)
class SimpleResponse[T]:
    """Plain in-memory response, handy for fakes and custom transports."""

    is_successful: bool
    payload: T | None = None
    error: Any | None = None

    @classmethod
    def ok(cls, payload: T | None) -> SimpleResponse[T]:
        return cls(is_successful=True, payload=payload)

    @classmethod
    def failed(cls, error: Any | None = None) -> SimpleResponse[T]:
        return cls(is_successful=False, error=error)

    def body(self) -> T | None:
        return self.payload

    def error_body(self) -> Any | None:
        return self.error


def _parse_json(response: httpx.Response) -> Any:
    if not response.content:
        return None
    return json.loads(response.content)


@dataclass(frozen=True)
class HttpxResponse[T]:
    """Adapter exposing an ``httpx.Response`` through the response protocol.

    A successful response whose payload *parse* rejects with ``ValueError``
    (``json.JSONDecodeError`` for the default parser) raises
    ``ResponseBodyParseError``, which the pipeline reports without retrying.

    Example:
        async def call() -> HttpxResponse[dict]:
            return HttpxResponse.wrap(await client.get("/photos"))
    """

    raw: httpx.Response
    parse: Callable[[httpx.Response], T | None] = _parse_json

    @classmethod
    def wrap(
        cls,
        response: httpx.Response,
        parse: Callable[[httpx.Response], T | None] | None = None,
    ) -> HttpxResponse[T]:
        if parse is None:
            return cls(raw=response)
        return cls(raw=response, parse=parse)

    @property
    def is_successful(self) -> bool:
        return self.raw.is_success

    def body(self) -> T | None:
        # Only decode on success; error payloads go through error_body().
        if not self.raw.is_success:
            return None
        try:
            return self.parse(self.raw)
        except ValueError as e:
            raise ResponseBodyParseError(
                f"API call successful but response body could not be parsed: {e}"
            ) from e

    def error_body(self) -> Any | None:
        if self.raw.is_success:
            return None
        return self.raw.content or None


def is_empty_body(value: object) -> bool:
    """Return True for an absent payload or a sized payload of length 0."""
    if value is None:
        return True
    return isinstance(value, Sized) and len(value) == 0


def error_detail_text(detail: object) -> str | None:
    """Normalize a raw error body to text, or None when it carries nothing."""
    if detail is None:
        return None
    if isinstance(detail, (bytes, bytearray, memoryview)):
        text = bytes(detail).decode("utf-8", errors="replace")
    else:
        text = str(detail)
    text = text.strip()
    return text or None
