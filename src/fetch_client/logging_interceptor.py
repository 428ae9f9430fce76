"""
Logging interceptor for the fetch client.

This module provides LoggingInterceptor, a built-in interceptor that logs
requests, responses and failures with timing information. It never changes
the values flowing through the pipeline: success handlers return their input
and error handlers re-raise after logging.

Features:
- Request logging with method, URL and headers
- Response logging with status code and timing
- Failure logging for both phases

The start time of a call is kept in a context variable, so concurrent calls
to the same URL are timed independently.
"""

import logging
import time
from contextvars import ContextVar

from fetch_client.models import Request
from fetch_client.models import Response

logger = logging.getLogger("fetch_client.interceptor.logging")


class LoggingInterceptor:
    """
    Interceptor for logging HTTP requests and responses in HttpClient.
    Uses standard Python logging.

    Register with ``client.with_interceptor(LoggingInterceptor())``.
    """

    def __init__(self, level: int = logging.INFO):
        self.level = level
        self._started: ContextVar[float | None] = ContextVar(
            f"logging_started_{id(self)}", default=None
        )

    def _elapsed(self) -> float | None:
        start = self._started.get()
        self._started.set(None)
        return (time.monotonic() - start) if start is not None else None

    @property
    def started_at(self) -> float | None:
        """Start time of the call in progress in the current context, if any."""
        return self._started.get()

    def request(self, request: Request) -> Request:
        self._started.set(time.monotonic())
        logger.log(
            self.level,
            f"Request: {request.method} {request.url} | headers={dict(request.headers)}",
        )
        return request

    def request_error(self, error: Exception):
        self._started.set(None)
        logger.warning(f"Request failed: {error!r}")
        raise error

    def response(self, response: Response) -> Response:
        elapsed = self._elapsed()
        logger.log(
            self.level,
            f"Response: {response.status} {response.url}"
            + (f" | elapsed={elapsed:.3f}s" if elapsed is not None else ""),
        )
        return response

    def response_error(self, error: Exception):
        elapsed = self._elapsed()
        logger.warning(
            f"Response failed: {error!r}"
            + (f" | elapsed={elapsed:.3f}s" if elapsed is not None else "")
        )
        raise error
