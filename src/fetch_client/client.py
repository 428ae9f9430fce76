"""
Async HTTP client built around an interceptor pipeline.

This module provides the HttpClient class. Every fetch call goes through the
same stages:

1. The request is built from the call-site input and the configured defaults
   (base URL, default init fields, default headers).
2. The request phase threads it through the registered interceptors.
3. If the request phase produced a Response, it is used directly. Otherwise
   the Request is sent through the transport, exactly once.
4. The response phase threads the response (or the transport failure) through
   the registered interceptors.

The client never retries, caches, or times out by itself. Those policies are
interceptors (see RetryInterceptor, CacheInterceptor) or transport settings.

Example usage:
    from fetch_client import HttpClient, json

    async with HttpClient() as client:
        client.configure_with(
            lambda config: config
            .with_base_url("https://api.example.com/")
            .with_defaults({"headers": {"Accept": "application/json"}})
            .reject_error_responses()
        )
        response = await client.fetch("users", {"method": "POST", "body": json({"name": "x"})})
        data = await response.json()
"""

import asyncio
import logging
from typing import Any
from typing import Callable
from typing import Optional
from typing import Union

import httpx

from fetch_client.activity import ActivityTracker
from fetch_client.config import FetchClientSettings
from fetch_client.config import HttpClientConfiguration
from fetch_client.exceptions import InvalidConfiguration
from fetch_client.exceptions import InvalidInterceptorResult
from fetch_client.interceptor import Interceptor
from fetch_client.models import Request
from fetch_client.models import RequestInit
from fetch_client.models import Response
from fetch_client.pipeline import process_request
from fetch_client.pipeline import process_response
from fetch_client.transport import BaseTransport
from fetch_client.transport import get_transport

logger = logging.getLogger("fetch_client.client")

Configurator = Callable[[HttpClientConfiguration], Optional[HttpClientConfiguration]]


def _parse_header_values(headers: Optional[dict[str, Any]]) -> dict[str, str]:
    """Resolve default header values, calling the callable ones."""
    parsed = {}
    for name, value in (headers or {}).items():
        parsed[name] = value() if callable(value) else value
    return parsed


def _set_default_headers(headers: httpx.Headers, default_headers: dict[str, str]) -> None:
    for name, value in default_headers.items():
        if name not in headers:
            headers[name] = value


async def _settled(value: Any) -> Any:
    return value


class HttpClient:
    """
    An HTTP client with configurable defaults and interceptors.

    Args:
        transport (BaseTransport | None): Transport used to send requests.
            Defaults to an HttpxTransport.
        timeout (float): Timeout for the default transport, in seconds.

    Attributes:
        is_configured (bool): True once configure/configure_with has been called.
        base_url (str | None): Prepended verbatim to every request url.
        defaults (RequestInit | None): Init fields merged into every request.
        interceptors (list[Interceptor]): Interceptors in registration order.
    """

    def __init__(self, transport: BaseTransport | None = None, timeout: float = 30.0):
        self.transport = transport or get_transport("httpx", timeout=timeout)
        self.is_configured = False
        self.base_url: Optional[str] = None
        self.defaults: Optional[RequestInit] = None
        self.interceptors: list[Interceptor] = []
        self._activity = ActivityTracker()

    @classmethod
    def from_settings(
        cls,
        settings: FetchClientSettings | None = None,
        transport: BaseTransport | None = None,
    ) -> "HttpClient":
        """
        Create a client from FetchClientSettings (environment by default).

        The client is only marked configured when the settings carry a base
        URL, defaults or the standard configuration.
        """
        settings = settings or FetchClientSettings()
        client = cls(transport or get_transport(settings.transport, timeout=settings.timeout))
        config = HttpClientConfiguration.from_settings(settings)
        if config.base_url or config.defaults or config.interceptors:
            client.configure_with(lambda _: config)
        return client

    @property
    def active_request_count(self) -> int:
        """The number of fetch calls that have started and not yet settled."""
        return self._activity.count

    @property
    def is_requesting(self) -> bool:
        return self._activity.is_active

    def configure(
        self, config: Union[RequestInit, Configurator]
    ) -> "HttpClient":
        """
        Configure this client with defaults used by all requests.

        Args:
            config: Either a dict of default init fields, or a callable taking
                an HttpClientConfiguration and configuring it.

        Raises:
            InvalidConfiguration: If config is neither, or default headers
                are not a plain dict.

        Configure before issuing concurrent requests: in-flight calls read the
        configuration that was current when they started.
        """
        if isinstance(config, dict):
            return self.configure_defaults(config)
        if callable(config):
            return self.configure_with(config)
        raise InvalidConfiguration(f"Invalid config: {config!r}", details=config)

    def configure_defaults(self, defaults: RequestInit) -> "HttpClient":
        """Configure only the default init fields."""
        return self._apply_configuration(HttpClientConfiguration().with_defaults(defaults))

    def configure_with(self, configurator: Configurator) -> "HttpClient":
        """
        Configure through a builder callback.

        The callback receives a fresh HttpClientConfiguration. If it returns
        an HttpClientConfiguration, that one is applied instead.
        """
        config = HttpClientConfiguration()
        result = configurator(config)
        if isinstance(result, HttpClientConfiguration):
            config = result
        return self._apply_configuration(config)

    def _apply_configuration(self, config: HttpClientConfiguration) -> "HttpClient":
        defaults = config.defaults
        if defaults and defaults.get("headers") is not None:
            if not isinstance(defaults["headers"], dict):
                raise InvalidConfiguration(
                    "Default headers must be a plain dict.", details=defaults["headers"]
                )

        self.base_url = config.base_url or self.base_url
        self.defaults = defaults
        self.interceptors.extend(config.interceptors)
        self.is_configured = True

        logger.debug(
            f"Configured client: base_url={self.base_url!r} defaults={self.defaults!r} "
            f"interceptors={len(self.interceptors)}"
        )
        return self

    def with_interceptor(self, interceptor: Any) -> "HttpClient":
        """Append an interceptor. Accepts anything Interceptor.from_object does."""
        self.interceptors.append(Interceptor.from_object(interceptor))
        return self

    def fetch(
        self, input: Union[Request, str], init: RequestInit | None = None
    ) -> "asyncio.Task[Response]":
        """
        Start fetching a resource.

        Default configuration is applied to the request, which then passes
        through the request interceptors, the transport (unless an interceptor
        returned a Response) and the response interceptors.

        The call is counted as active from the moment fetch() is called until
        the returned task settles. Must be called with a running event loop.

        Args:
            input: A Request, or the URL of the resource (relative to base_url).
            init: Init fields applied to the request.

        Returns:
            asyncio.Task[Response]: Await it for the final Response.
        """
        self._activity.enter()
        coro = self._fetch(input, init)
        try:
            task = asyncio.get_running_loop().create_task(coro)
        except RuntimeError:
            coro.close()
            self._activity.exit()
            raise
        task.add_done_callback(self._track_request_end)
        return task

    def _track_request_end(self, task: "asyncio.Task[Response]") -> None:
        self._activity.exit()

    async def _fetch(self, input: Union[Request, str], init: RequestInit | None) -> Response:
        interceptors = list(self.interceptors)
        result = await process_request(self._build_request(input, init), interceptors)
        return await process_response(self._dispatch(result), interceptors)

    async def _build_request(
        self, input: Union[Request, str], init: RequestInit | None
    ) -> Request:
        defaults = self.defaults or {}

        if isinstance(input, Request):
            if not self.is_configured:
                return input
            source: dict[str, Any] = dict(input.to_init())
            url = input.url
            body = await input.blob() if input.body is not None else None
        else:
            source = dict(init or {})
            url = input
            body = source.get("body")

        default_headers = _parse_header_values(defaults.get("headers"))
        request_init = {**defaults, "headers": {}, **source, "body": body}
        request = Request((self.base_url or "") + url, **request_init)
        _set_default_headers(request.headers, default_headers)
        return request

    def _dispatch(self, result: Any):
        """
        Turn the request-phase result into the response-phase seed.

        Raises:
            InvalidInterceptorResult: If result is neither Request nor Response.
        """
        if isinstance(result, Response):
            return _settled(result)
        if isinstance(result, Request):
            return self.transport.send(result)
        raise InvalidInterceptorResult(result)

    async def aclose(self):
        """Close the transport and its connections."""
        await self.transport.close()

    async def __aenter__(self) -> "HttpClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()
