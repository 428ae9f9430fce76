"""
Custom exceptions for the fetch client.
Provides meaningful error classes for client consumers.
"""

from typing import Any, Optional


class FetchClientError(Exception):
    """
    Base exception for all client-level failures.

    Args:
        message (str): Short explanation of the error.
        details (Any | None): Optional structured details.
    """

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.details = details


class InvalidConfiguration(FetchClientError):
    """Raised by HttpClient.configure for unusable configuration input."""


class InvalidInterceptorResult(FetchClientError):
    """
    The request interceptor chain resolved to something that is neither
    a Request nor a Response. Fatal for the fetch call.
    """

    def __init__(self, result: Any):
        super().__init__(
            "An invalid result was returned by the interceptor chain. "
            f"Expected a Request or Response instance, but got [{result!r}]",
            details=result,
        )
        self.result = result


class TransportError(FetchClientError):
    """
    The transport could not produce a response.

    Args:
        message (str): Short explanation of the error.
        request (Request | None): The request that was being sent.
    """

    def __init__(self, message: str, request: Optional[Any] = None):
        super().__init__(message)
        self.request = request


class HttpResponseError(FetchClientError):
    """
    Raised by the reject-on-error interceptor for non-2xx responses.
    The rejected response is available as ``response``.
    """

    def __init__(self, response: Any):
        super().__init__(
            f"Response rejected: {response.status} {response.status_text}".rstrip(),
            details=response,
        )
        self.response = response
