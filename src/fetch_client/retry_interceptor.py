"""
Transport retry interceptor for the fetch client.

The client itself never retries. RetryInterceptor adds retries as a policy:
its response_error handler picks up TransportError failures, resends the
failed request through the given transport with exponential backoff, and
returns the first response obtained. Interceptors registered after it then
see that response through their response handlers.

Errors that are not transport failures (for example HttpResponseError from
reject_error_responses) are re-raised untouched.
"""

import logging

from tenacity import AsyncRetrying
from tenacity import retry_if_exception_type
from tenacity import stop_after_attempt
from tenacity import wait_exponential

from fetch_client.exceptions import TransportError
from fetch_client.models import Response
from fetch_client.transport.base import BaseTransport

logger = logging.getLogger("fetch_client.interceptor.retry")


class RetryInterceptor:
    """
    Interceptor that resends requests whose transport call failed.

    Args:
        transport (BaseTransport): Transport used for the retries, usually the
            client's own.
        attempts (int): Maximum number of resend attempts (default: 3).
        wait: tenacity wait strategy. Defaults to exponential backoff
            between 1 and 5 seconds.
    """

    def __init__(self, transport: BaseTransport, attempts: int = 3, wait=None):
        self.transport = transport
        self.attempts = attempts
        self.wait = wait or wait_exponential(multiplier=0.5, min=1, max=5)

    async def response_error(self, error: Exception) -> Response:
        if not isinstance(error, TransportError) or error.request is None:
            raise error

        request = error.request
        logger.warning(f"Retrying {request.method} {request.url} after: {error}")

        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self.attempts),
            wait=self.wait,
            retry=retry_if_exception_type(TransportError),
            reraise=True,
        ):
            with attempt:
                return await self.transport.send(request)
