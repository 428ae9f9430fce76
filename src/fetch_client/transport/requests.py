import asyncio

import requests

from fetch_client.exceptions import TransportError
from fetch_client.models import Request
from fetch_client.models import Response

from .base import BaseTransport
from .base import logger


class RequestsTransport(BaseTransport):
    """
    Sync transport implementation using requests.Session.

    This transport wraps the synchronous requests library in an async interface.
    Each call runs in the default thread pool executor so the event loop is not
    blocked. For best performance, use httpx or aiohttp.
    """

    def __init__(self, timeout: float = 30.0):
        self._timeout = timeout
        self._session = requests.Session()

    async def send(self, request: Request) -> Response:
        loop = asyncio.get_running_loop()

        def make_request() -> requests.Response:
            return self._session.request(
                method=request.method,
                url=request.url,
                headers=dict(request.headers),
                data=request.body,
                timeout=self._timeout,
            )

        logger.debug(f"requests: {request.method} {request.url}")
        try:
            response = await loop.run_in_executor(None, make_request)
        except requests.RequestException as exc:
            raise TransportError(
                f"{request.method} {request.url} failed: {exc}", request=request
            ) from exc

        return Response(
            response.content,
            status=response.status_code,
            status_text=response.reason or "",
            headers=list(response.headers.items()),
            url=response.url or request.url,
        )

    async def close(self):
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self._session.close)
