"""Response adapter tests: protocol conformance and httpx wrapping."""

from __future__ import annotations

import httpx
import pytest

from resultflow.errors import ResponseBodyParseError
from resultflow.projection import collect
from resultflow.response import (
    HttpxResponse,
    Response,
    SimpleResponse,
    error_detail_text,
    is_empty_body,
)
from resultflow.result import Failure, Success
from resultflow.retry import RetryPolicy, perform_network_operation
from tests.helpers import RecordingSleep

pytestmark = pytest.mark.unit


def test_simple_response_satisfies_protocol() -> None:
    assert isinstance(SimpleResponse.ok("x"), Response)
    assert SimpleResponse.ok("x").body() == "x"
    assert SimpleResponse.failed("bad").error_body() == "bad"
    assert SimpleResponse.failed().is_successful is False


def test_httpx_success_parses_json_body() -> None:
    raw = httpx.Response(200, json={"photos": [1, 2]})
    wrapped = HttpxResponse.wrap(raw)

    assert isinstance(wrapped, Response)
    assert wrapped.is_successful is True
    assert wrapped.body() == {"photos": [1, 2]}
    assert wrapped.error_body() is None


def test_httpx_empty_success_body_is_none() -> None:
    wrapped = HttpxResponse.wrap(httpx.Response(204))

    assert wrapped.is_successful is True
    assert wrapped.body() is None


def test_httpx_failure_exposes_raw_error_body() -> None:
    wrapped = HttpxResponse.wrap(httpx.Response(503, content=b"try later"))

    assert wrapped.is_successful is False
    assert wrapped.body() is None
    assert wrapped.error_body() == b"try later"


def test_httpx_custom_parser() -> None:
    wrapped = HttpxResponse.wrap(
        httpx.Response(200, text="plain"), parse=lambda r: r.text
    )

    assert wrapped.body() == "plain"


@pytest.mark.asyncio
async def test_httpx_responses_through_pipeline() -> None:
    transport = httpx.MockTransport(
        lambda request: httpx.Response(200, json=[{"id": request.url.path}])
    )

    async with httpx.AsyncClient(
        transport=transport, base_url="https://photos.test"
    ) as client:

        async def fetch() -> HttpxResponse[list[dict[str, str]]]:
            return HttpxResponse.wrap(await client.get("/popular"))

        results = await collect(
            perform_network_operation(fetch, policy=RetryPolicy.no_retries())
        )

    assert results == [Success([{"id": "/popular"}])]


@pytest.mark.asyncio
async def test_httpx_error_status_through_pipeline() -> None:
    transport = httpx.MockTransport(
        lambda request: httpx.Response(500, content=b"internal error")
    )

    async with httpx.AsyncClient(
        transport=transport, base_url="https://photos.test"
    ) as client:

        async def fetch() -> HttpxResponse[object]:
            return HttpxResponse.wrap(await client.get("/popular"))

        results = await collect(
            perform_network_operation(fetch, policy=RetryPolicy.no_retries())
        )

    assert len(results) == 1
    failure = results[0]
    assert isinstance(failure, Failure)
    assert str(failure.error) == "API call failed with error - internal error"


@pytest.mark.parametrize(
    ("value", "expected"),
    [(None, True), ("", True), (b"", True), ([], True), ("x", False), (0, False)],
)
def test_is_empty_body(value: object, expected: bool) -> None:
    assert is_empty_body(value) is expected


@pytest.mark.parametrize(
    ("detail", "expected"),
    [
        (None, None),
        ("  ", None),
        (b"\xffbad", "\ufffdbad"),
        ({"code": 7}, "{'code': 7}"),
        (" oops ", "oops"),
    ],
)
def test_error_detail_text(detail: object, expected: str | None) -> None:
    assert error_detail_text(detail) == expected


@pytest.mark.asyncio
async def test_unparseable_success_body_is_not_retried() -> None:
    calls = 0

    def _handler(request: httpx.Request) -> httpx.Response:
        del request
        nonlocal calls
        calls += 1
        return httpx.Response(200, text="<html>maintenance</html>")

    async with httpx.AsyncClient(
        transport=httpx.MockTransport(_handler), base_url="https://photos.test"
    ) as client:

        async def fetch() -> HttpxResponse[object]:
            return HttpxResponse.wrap(await client.get("/popular"))

        results = await collect(
            perform_network_operation(
                fetch, policy=RetryPolicy(max_retries=3), sleep=RecordingSleep()
            )
        )

    assert calls == 1
    assert len(results) == 1
    failure = results[0]
    assert isinstance(failure, Failure)
    assert isinstance(failure.error, ResponseBodyParseError)
    assert failure.error.retryable is False
    assert str(failure.error).startswith(
        "API call successful but response body could not be parsed"
    )


def test_parse_error_chains_decoder_exception() -> None:
    wrapped = HttpxResponse.wrap(httpx.Response(200, text="not json"))

    with pytest.raises(ResponseBodyParseError) as exc:
        wrapped.body()

    assert isinstance(exc.value.__cause__, ValueError)
