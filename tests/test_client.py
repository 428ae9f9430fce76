"""
Test suite for the HttpClient class.

This module covers the full fetch lifecycle:
- Request synthesis (defaults, header merge, base URL, pass-through)
- Request phase short-circuit and invalid results
- Transport failures and response-phase recovery
- Status based rejection
- Activity tracking
- Configuration entry points and validation

The tests use a mock transport so no network access is needed.
"""

import asyncio

import httpx
import pytest

from fetch_client.client import HttpClient
from fetch_client.config import HttpClientConfiguration
from fetch_client.exceptions import HttpResponseError
from fetch_client.exceptions import InvalidConfiguration
from fetch_client.exceptions import InvalidInterceptorResult
from fetch_client.exceptions import TransportError
from fetch_client.interceptor import Interceptor
from fetch_client.models import Request
from fetch_client.models import Response
from fetch_client.models import json
from tests.fakes import FailingTransport
from tests.fakes import MockTransport


@pytest.fixture
def transport():
    return MockTransport()


@pytest.fixture
def client(transport):
    return HttpClient(transport=transport)


# --- request synthesis ---


@pytest.mark.asyncio
async def test_unconfigured_client_passes_request_through_unchanged(client, transport):
    request = Request("https://api.test/items", headers={"X-Test": "1"})

    await client.fetch(request)

    assert transport.requests[0] is request
    assert not request.body_used


@pytest.mark.asyncio
async def test_configured_client_rebuilds_request(client, transport):
    client.configure({"headers": {"Accept": "application/json"}})
    request = Request("https://api.test/items", method="POST", body="payload")

    await client.fetch(request)

    sent = transport.requests[0]
    assert sent is not request
    assert request.body_used
    assert sent.method == "POST"
    assert sent.body == b"payload"
    assert sent.headers["accept"] == "application/json"
    assert sent.headers["content-type"] == "text/plain;charset=UTF-8"


@pytest.mark.asyncio
async def test_configured_client_rebuilds_bodiless_request(client, transport):
    client.configure({"headers": {"X-Default": "1"}})

    await client.fetch(Request("https://api.test/items", headers={"X-Own": "2"}))

    sent = transport.requests[0]
    assert sent.body is None
    assert sent.headers["x-default"] == "1"
    assert sent.headers["x-own"] == "2"


@pytest.mark.asyncio
async def test_request_input_fields_win_over_defaults(client, transport):
    client.configure({"mode": "same-origin", "credentials": "include", "cache": "no-store"})

    await client.fetch(Request("https://api.test/items", cache="reload"))

    sent = transport.requests[0]
    assert sent.mode == "cors"
    assert sent.credentials == "same-origin"
    assert sent.cache == "reload"


@pytest.mark.asyncio
async def test_configured_with_empty_defaults_still_copies_request(client, transport):
    client.configure({})
    request = Request("https://api.test/items")

    await client.fetch(request)

    assert transport.requests[0] is not request
    assert transport.requests[0].url == request.url


@pytest.mark.asyncio
async def test_interceptor_alone_does_not_disable_pass_through(client, transport):
    client.with_interceptor(Interceptor(request=lambda r: r))
    request = Request("https://api.test/items")

    await client.fetch(request)

    assert transport.requests[0] is request


@pytest.mark.asyncio
async def test_call_site_headers_win_over_defaults(client, transport):
    client.configure({"headers": {"X": "1", "Y": "2"}})

    await client.fetch("https://api.test/items", {"headers": {"x": "9"}})

    headers = transport.requests[0].headers
    assert headers["X"] == "9"
    assert headers["Y"] == "2"
    assert headers.get_list("x") == ["9"]


@pytest.mark.asyncio
async def test_defaults_merge_precedence(client, transport):
    client.configure({"method": "POST", "credentials": "include", "mode": "same-origin"})

    await client.fetch("https://api.test/items", {"mode": "no-cors", "body": json({"a": 1})})

    sent = transport.requests[0]
    assert sent.method == "POST"
    assert sent.credentials == "include"
    assert sent.mode == "no-cors"
    assert sent.body == b'{"a": 1}'
    assert sent.headers["content-type"] == "application/json"


@pytest.mark.asyncio
async def test_base_url_is_prepended_verbatim(client, transport):
    client.configure_with(lambda config: config.with_base_url("https://api.test/v1/"))

    await client.fetch("users")
    await client.fetch("/users")

    assert transport.requests[0].url == "https://api.test/v1/users"
    assert transport.requests[1].url == "https://api.test/v1//users"


@pytest.mark.asyncio
async def test_callable_default_headers_are_evaluated_per_request(client, transport):
    tokens = iter(["first", "second"])
    client.configure({"headers": {"Authorization": lambda: f"Bearer {next(tokens)}"}})

    await client.fetch("https://api.test/a")
    await client.fetch("https://api.test/b")

    assert transport.requests[0].headers["authorization"] == "Bearer first"
    assert transport.requests[1].headers["authorization"] == "Bearer second"


@pytest.mark.asyncio
async def test_synthesis_error_enters_request_error_phase(client, transport):
    seen = []

    def recover(error):
        seen.append(error)
        return Response("recovered", status=200)

    client.with_interceptor(Interceptor(request_error=recover))

    response = await client.fetch("https://api.test/items", {"method": "GET", "body": "x"})

    assert isinstance(seen[0], TypeError)
    assert await response.text() == "recovered"
    assert transport.request_count == 0


@pytest.mark.asyncio
async def test_synthesis_error_rejects_without_recovery(client, transport):
    with pytest.raises(ValueError):
        await client.fetch("https://api.test/items", {"method": "BAD METHOD"})
    assert transport.request_count == 0


# --- dispatch gate ---


@pytest.mark.asyncio
async def test_request_interceptor_returning_response_short_circuits(client, transport):
    calls = []
    cached = Response("cached", status=200)

    client.with_interceptor(Interceptor(request=lambda request: cached))
    client.with_interceptor(
        Interceptor(
            request=lambda value: calls.append(("request", value)) or value,
            response=lambda value: calls.append(("response", value)) or value,
        )
    )

    response = await client.fetch("https://api.test/items")

    assert response is cached
    assert transport.request_count == 0
    assert calls == [("request", cached), ("response", cached)]


@pytest.mark.asyncio
async def test_request_interceptor_can_replace_request(client, transport):
    client.with_interceptor(
        Interceptor(request=lambda request: Request(request.url + "?replaced=1"))
    )

    await client.fetch("https://api.test/items")

    assert transport.requests[0].url == "https://api.test/items?replaced=1"


@pytest.mark.asyncio
async def test_invalid_interceptor_result_rejects_without_transport_call(client, transport):
    response_handlers = []
    client.with_interceptor(Interceptor(request=lambda request: "not a request"))
    client.with_interceptor(
        Interceptor(
            response=lambda r: response_handlers.append(r) or r,
            response_error=lambda e: response_handlers.append(e) or Response(),
        )
    )

    with pytest.raises(InvalidInterceptorResult) as exc_info:
        await client.fetch("https://api.test/items")

    assert exc_info.value.result == "not a request"
    assert "not a request" in str(exc_info.value)
    assert transport.request_count == 0
    assert response_handlers == []


@pytest.mark.asyncio
async def test_request_is_sent_exactly_once(client, transport):
    response = await client.fetch("https://api.test/items")

    assert transport.request_count == 1
    assert response.status == 200
    assert await response.text() == "OK"


# --- response phase ---


@pytest.mark.asyncio
async def test_transport_failure_rejects_when_not_recovered():
    client = HttpClient(transport=FailingTransport(failures=1))

    with pytest.raises(TransportError):
        await client.fetch("https://api.test/items")


@pytest.mark.asyncio
async def test_transport_failure_recovery_reenters_response_handlers():
    calls = []
    client = HttpClient(transport=FailingTransport(failures=1))

    client.with_interceptor(
        Interceptor(response_error=lambda error: Response("fallback", status=203))
    )
    client.with_interceptor(
        Interceptor(
            response=lambda r: calls.append(("response", r.status)) or r,
            response_error=lambda e: calls.append(("response_error", e)) or Response(),
        )
    )

    response = await client.fetch("https://api.test/items")

    assert response.status == 203
    assert calls == [("response", 203)]


@pytest.mark.asyncio
async def test_non_2xx_resolves_by_default():
    transport = MockTransport(lambda request: Response("missing", status=404))
    client = HttpClient(transport=transport)

    response = await client.fetch("https://api.test/missing")

    assert response.status == 404
    assert response.ok is False


@pytest.mark.asyncio
async def test_reject_error_responses_rejects_with_response():
    not_found = Response("missing", status=404)
    client = HttpClient(transport=MockTransport(lambda request: not_found))
    client.configure_with(lambda config: config.reject_error_responses())

    with pytest.raises(HttpResponseError) as exc_info:
        await client.fetch("https://api.test/missing")

    assert exc_info.value.response is not_found


@pytest.mark.asyncio
async def test_standard_configuration_sets_credentials_and_rejects():
    client = HttpClient(transport=MockTransport(lambda request: Response(status=500)))
    client.configure_with(
        lambda config: config.with_defaults({"cache": "no-cache"}).use_standard_configuration()
    )

    assert client.defaults == {"cache": "no-cache", "credentials": "same-origin"}
    with pytest.raises(HttpResponseError):
        await client.fetch("https://api.test/items")


def test_standard_configuration_keeps_explicit_credentials():
    config = HttpClientConfiguration().with_defaults({"credentials": "omit"})
    config.use_standard_configuration()

    assert config.defaults["credentials"] == "omit"
    assert len(config.interceptors) == 1


# --- activity tracking ---


@pytest.mark.asyncio
async def test_activity_counts_concurrent_requests():
    gate = asyncio.Event()

    async def slow(request):
        await gate.wait()
        if request.url.endswith("fail"):
            raise TransportError("down", request=request)
        return Response(status=200)

    client = HttpClient(transport=MockTransport(slow))
    assert client.active_request_count == 0
    assert client.is_requesting is False

    tasks = [
        client.fetch("https://api.test/ok"),
        client.fetch("https://api.test/fail"),
        client.fetch("https://api.test/ok"),
    ]
    assert client.active_request_count == 3
    assert client.is_requesting is True

    await asyncio.sleep(0)
    assert client.active_request_count == 3

    gate.set()
    results = await asyncio.gather(*tasks, return_exceptions=True)

    assert isinstance(results[1], TransportError)
    assert client.active_request_count == 0
    assert client.is_requesting is False


@pytest.mark.asyncio
async def test_activity_returns_to_zero_after_each_outcome(client):
    await client.fetch("https://api.test/ok")
    assert client.active_request_count == 0

    with pytest.raises(ValueError):
        await client.fetch("https://api.test/bad", {"method": "BAD METHOD"})
    assert client.active_request_count == 0
    assert client.is_requesting is False


@pytest.mark.asyncio
async def test_requests_being_intercepted_are_active(client):
    observed = []
    client.with_interceptor(
        Interceptor(request=lambda request: observed.append(client.active_request_count) or request)
    )

    await client.fetch("https://api.test/items")

    assert observed == [1]


def test_fetch_requires_running_loop(client):
    with pytest.raises(RuntimeError):
        client.fetch("https://api.test/items")
    assert client.active_request_count == 0


# --- configuration ---


def test_configure_with_dict_sets_defaults(client):
    result = client.configure({"credentials": "include"})

    assert result is client
    assert client.is_configured is True
    assert client.defaults == {"credentials": "include"}
    assert client.base_url is None


def test_configure_with_callable_and_replacement_builder(client):
    replacement = HttpClientConfiguration().with_base_url("https://other.test/")

    client.configure(lambda config: replacement)

    assert client.base_url == "https://other.test/"


def test_configure_appends_interceptors_and_keeps_base_url(client):
    first = Interceptor(request=lambda r: r)
    second = Interceptor(response=lambda r: r)

    client.configure_with(lambda c: c.with_base_url("https://api.test/").with_interceptor(first))
    client.configure_with(lambda c: c.with_interceptor(second))

    assert client.base_url == "https://api.test/"
    assert client.interceptors == [first, second]
    assert client.interceptors[0] is first


def test_configure_rejects_non_plain_default_headers(client):
    with pytest.raises(InvalidConfiguration):
        client.configure({"headers": httpx.Headers({"X": "1"})})
    assert client.is_configured is False


def test_configure_rejects_invalid_argument(client):
    with pytest.raises(InvalidConfiguration):
        client.configure("not a config")


@pytest.mark.asyncio
async def test_aclose_closes_transport(transport):
    async with HttpClient(transport=transport):
        pass

    assert transport.closed is True
