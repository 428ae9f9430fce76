"""
Response caching interceptor for the fetch client.

CacheInterceptor keeps successful GET responses in an aiocache cache. A GET
request whose URL is cached never reaches the transport: the request handler
returns a fresh copy of the cached Response, which short-circuits the request
phase. Any other method invalidates the cached GET entry for the same URL,
so a POST/PUT/DELETE followed by a GET always fetches fresh data.

Entries are keyed by the URL of the request as the client built it, not the
URL the transport reports back, and stored as plain tuples (status, status
text, headers, body, url) rebuilt into a new Response on every hit.

The key of a cache miss travels from the request handler to the response
handler in a context variable. Every fetch call runs in its own task with its
own copy of the context, so concurrent calls never see each other's key and
nothing outlives the call.
"""

import logging
from contextvars import ContextVar

from aiocache import SimpleMemoryCache

from fetch_client.models import Request
from fetch_client.models import Response

logger = logging.getLogger("fetch_client.interceptor.cache")


class CacheInterceptor:
    """
    Interceptor that caches successful GET responses.

    Args:
        cache: An aiocache cache instance. Defaults to a SimpleMemoryCache.
        ttl (int): Time to live for entries, in seconds.
    """

    def __init__(self, cache=None, ttl: int = 60):
        self._cache = cache if cache is not None else SimpleMemoryCache()
        self.ttl = ttl
        self._miss_key: ContextVar[str | None] = ContextVar(
            f"cache_miss_key_{id(self)}", default=None
        )

    @staticmethod
    def _key(url: str) -> str:
        return f"GET:{url}"

    async def request(self, request: Request) -> Request | Response:
        key = self._key(request.url)
        self._miss_key.set(None)

        if request.method != "GET":
            await self._cache.delete(key)
            logger.info(f"Cleared cache for {request.url}")
            return request

        entry = await self._cache.get(key)
        if entry is not None:
            logger.info(f"Cache HIT for {key}")
            status, status_text, headers, body, url = entry
            return Response(
                body, status=status, status_text=status_text, headers=headers, url=url
            )

        logger.info(f"Cache MISS for {key}")
        self._miss_key.set(key)
        return request

    async def response(self, response: Response) -> Response:
        key = self._miss_key.get()
        if key is None:
            return response
        self._miss_key.set(None)

        if response.ok and not response.body_used:
            entry = (
                response.status,
                response.status_text,
                response.headers.multi_items(),
                response.body,
                response.url,
            )
            try:
                await self._cache.set(key, entry, ttl=self.ttl)
            except Exception as e:
                logger.error(f"Failed to write to cache for {key}: {e}")
        return response

    def response_error(self, error: Exception):
        self._miss_key.set(None)
        raise error

    @property
    def pending_key(self) -> str | None:
        """Cache key awaiting a response in the current call, if any."""
        return self._miss_key.get()

    async def clear(self):
        """Drop every cached response."""
        await self._cache.clear()
