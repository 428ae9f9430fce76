"""
fetch-client - Async HTTP client with an interceptor pipeline.

This package provides:
- Async client with client-wide defaults (base URL, headers, credentials, cache mode)
- Ordered request/response interceptors that can transform, short-circuit or recover calls
- Synchronous wrapper for sync code
- Multiple HTTP transport support
- Optional logging, caching and retry interceptors
"""

from .cache_interceptor import CacheInterceptor
from .client import HttpClient
from .client_sync import HttpClientSync
from .config import FetchClientSettings
from .config import HttpClientConfiguration
from .exceptions import FetchClientError
from .exceptions import HttpResponseError
from .exceptions import InvalidConfiguration
from .exceptions import InvalidInterceptorResult
from .exceptions import TransportError
from .interceptor import Interceptor
from .interceptor import reject_on_error
from .logging_interceptor import LoggingInterceptor
from .models import Blob
from .models import Request
from .models import RequestInit
from .models import Response
from .models import json
from .retry_interceptor import RetryInterceptor

__version__ = "1.0.0"

__all__ = [
    "HttpClient",
    "HttpClientSync",
    "HttpClientConfiguration",
    "FetchClientSettings",
    "Interceptor",
    "reject_on_error",
    "LoggingInterceptor",
    "CacheInterceptor",
    "RetryInterceptor",
    "Blob",
    "Request",
    "RequestInit",
    "Response",
    "json",
    "FetchClientError",
    "HttpResponseError",
    "InvalidConfiguration",
    "InvalidInterceptorResult",
    "TransportError",
]
