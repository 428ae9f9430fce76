import logging

from fetch_client.models import Request
from fetch_client.models import Response

logger = logging.getLogger("fetch_client.transport")


class BaseTransport:
    """
    Abstract transport layer interface for the fetch client.
    All HTTP client backends should inherit from this class.

    A transport turns a Request into a Response and nothing else: no defaults,
    no interceptors. Library errors are wrapped in TransportError carrying the
    request, so response interceptors can inspect or resend it.

    Supported transports:
    - httpx: Native async HTTP client
    - aiohttp: Native async HTTP client
    - requests: Sync HTTP client wrapped in async interface
    """

    async def send(self, request: Request) -> Response:
        """
        Send a request and return the response.
        Override this method in transport implementations.
        """
        raise NotImplementedError(
            "Transport implementations must override this method."
        )

    async def close(self):
        """Release connections held by the transport."""
