"""
Aiohttp transport implementation for the fetch client.

Aiohttp is a mature async HTTP client with connection pooling and
comprehensive timeout handling. The session is created lazily on the first
send, inside the running event loop.
"""

import aiohttp

from fetch_client.exceptions import TransportError
from fetch_client.models import Request
from fetch_client.models import Response

from .base import BaseTransport
from .base import logger


class AiohttpTransport(BaseTransport):
    """
    Async transport implementation using aiohttp.ClientSession.
    """

    def __init__(self, timeout: float = 30.0):
        self._timeout = timeout
        self._session: aiohttp.ClientSession | None = None

    async def send(self, request: Request) -> Response:
        # Create session if not exists
        if self._session is None:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self._timeout)
            )

        logger.debug(f"aiohttp: {request.method} {request.url}")
        try:
            async with self._session.request(
                method=request.method,
                url=request.url,
                headers=request.headers.multi_items(),
                data=request.body,
            ) as response:
                content = await response.read()
                return Response(
                    content,
                    status=response.status,
                    status_text=response.reason or "",
                    headers=list(response.headers.items()),
                    url=str(response.url),
                )
        except aiohttp.ClientError as exc:
            raise TransportError(
                f"{request.method} {request.url} failed: {exc}", request=request
            ) from exc

    async def close(self):
        if self._session:
            await self._session.close()
