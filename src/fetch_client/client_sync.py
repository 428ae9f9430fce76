"""
Synchronous wrapper for HttpClient.

This module provides a blocking interface on top of the async HttpClient for
scripts and other code that does not run an event loop. The wrapper owns a
private event loop for its whole lifetime so the transport's connection pool
stays bound to a single loop.
"""

import asyncio
from typing import Any
from typing import Union

from .client import Configurator
from .client import HttpClient
from .config import FetchClientSettings
from .models import Request
from .models import RequestInit
from .models import Response
from .transport.base import BaseTransport


class HttpClientSync:
    """
    Synchronous wrapper for HttpClient.

    Example:
        with HttpClientSync() as client:
            client.configure({"headers": {"Accept": "application/json"}})
            response = client.fetch("https://api.example.com/users")
            print(response.status)
    """

    def __init__(
        self,
        transport: BaseTransport | None = None,
        timeout: float = 30.0,
        client: HttpClient | None = None,
    ):
        """
        Initialize the synchronous client.

        Args:
            transport: Transport used to send requests (default: httpx)
            timeout: Timeout for the default transport, in seconds
            client: An existing HttpClient to wrap instead of creating one
        """
        self._loop = asyncio.new_event_loop()
        self._async_client = client or HttpClient(transport=transport, timeout=timeout)

    @classmethod
    def from_settings(
        cls, settings: FetchClientSettings | None = None, transport: BaseTransport | None = None
    ) -> "HttpClientSync":
        return cls(client=HttpClient.from_settings(settings, transport=transport))

    @property
    def client(self) -> HttpClient:
        """The wrapped async client."""
        return self._async_client

    @property
    def active_request_count(self) -> int:
        return self._async_client.active_request_count

    @property
    def is_requesting(self) -> bool:
        return self._async_client.is_requesting

    def configure(self, config: Union[RequestInit, Configurator]) -> "HttpClientSync":
        self._async_client.configure(config)
        return self

    def with_interceptor(self, interceptor: Any) -> "HttpClientSync":
        self._async_client.with_interceptor(interceptor)
        return self

    def fetch(self, input: Union[Request, str], init: RequestInit | None = None) -> Response:
        """
        Synchronous fetch.

        Returns:
            Response: The final response after all interceptors

        Raises:
            Whatever the async fetch call raises
        """

        async def _run() -> Response:
            return await self._async_client.fetch(input, init)

        return self._loop.run_until_complete(_run())

    def close(self):
        """
        Synchronous cleanup of client resources.
        """
        if self._loop.is_closed():
            return
        try:
            self._loop.run_until_complete(self._async_client.aclose())
        finally:
            self._loop.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
