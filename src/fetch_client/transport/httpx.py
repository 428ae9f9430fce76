import httpx

from fetch_client.exceptions import TransportError
from fetch_client.models import Request
from fetch_client.models import Response

from .base import BaseTransport
from .base import logger


class HttpxTransport(BaseTransport):
    """
    Async transport implementation using httpx.AsyncClient.
    """

    def __init__(self, timeout: float = 30.0, client: httpx.AsyncClient | None = None):
        self._timeout = timeout
        self._client = client or httpx.AsyncClient(timeout=self._timeout)

    async def send(self, request: Request) -> Response:
        logger.debug(f"httpx: {request.method} {request.url}")
        try:
            response = await self._client.request(
                method=request.method,
                url=request.url,
                headers=request.headers.multi_items(),
                content=request.body,
            )
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise TransportError(
                f"{request.method} {request.url} failed: {exc}", request=request
            ) from exc

        return Response(
            response.content,
            status=response.status_code,
            status_text=response.reason_phrase,
            headers=response.headers.multi_items(),
            url=str(response.url),
        )

    async def close(self):
        await self._client.aclose()
