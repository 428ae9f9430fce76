"""
Configuration management for the fetch client.

Two pieces live here:

- ``FetchClientSettings``: environment driven settings (transport, timeout,
  base URL, default headers) with ``FETCH_CLIENT_`` prefixed variables and
  ``.env`` file support.
- ``HttpClientConfiguration``: the chainable builder handed to
  ``HttpClient.configure_with`` callbacks. It collects a base URL, default
  request init fields and interceptors.

Example:
    # From environment
    export FETCH_CLIENT_BASE_URL=https://api.example.com
    export FETCH_CLIENT_DEFAULT_HEADERS='{"Accept": "application/json"}'

    # In code
    client = HttpClient.from_settings(FetchClientSettings())
"""

from typing import Any
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict

from fetch_client.interceptor import Interceptor
from fetch_client.interceptor import reject_on_error
from fetch_client.models import RequestInit


class FetchClientSettings(BaseSettings):
    """
    Configuration settings for the fetch client with environment variable support.

    This class automatically loads configuration from:
    - Environment variables (with FETCH_CLIENT_ prefix)
    - .env files
    - Default values for optional settings
    """

    base_url: Optional[str] = None
    timeout: float = 30.0
    transport: str = "httpx"  # default, can be 'aiohttp' or 'requests'
    default_headers: dict[str, str] = Field(default_factory=dict)
    credentials: Optional[str] = None
    cache: Optional[str] = None
    standard_configuration: bool = False
    log_level: str = "WARNING"

    model_config = SettingsConfigDict(
        env_prefix="FETCH_CLIENT_", env_file=".env", extra="ignore"
    )


class HttpClientConfiguration:
    """
    A class for configuring HttpClients.

    Attributes:
        base_url (str | None): Prepended to each request url before sending.
        defaults (RequestInit): Default init fields applied when a client
            builds a request. Default headers must be a plain dict; values may
            be zero-argument callables evaluated for every request.
        interceptors (list[Interceptor]): Interceptors to add to the client.
    """

    def __init__(self):
        self.base_url: Optional[str] = None
        self.defaults: RequestInit = {}
        self.interceptors: list[Interceptor] = []

    def with_base_url(self, base_url: str) -> "HttpClientConfiguration":
        self.base_url = base_url
        return self

    def with_defaults(self, defaults: RequestInit) -> "HttpClientConfiguration":
        self.defaults = defaults
        return self

    def with_interceptor(self, interceptor: Any) -> "HttpClientConfiguration":
        """
        Add an interceptor to be run on all requests and responses.

        Accepts an Interceptor or any object with ``request``,
        ``request_error``, ``response`` or ``response_error`` methods.
        """
        self.interceptors.append(Interceptor.from_object(interceptor))
        return self

    def use_standard_configuration(self) -> "HttpClientConfiguration":
        """
        Apply settings most applications want: same-origin credentials unless
        already set, and rejection of non-2xx responses.
        """
        self.defaults.setdefault("credentials", "same-origin")
        return self.reject_error_responses()

    def reject_error_responses(self) -> "HttpClientConfiguration":
        """
        Make responses with a status outside 200-299 reject.

        Without this, fetch only fails when no response could be obtained and
        callers must inspect ``Response.ok`` themselves.
        """
        return self.with_interceptor(Interceptor(response=reject_on_error))

    @classmethod
    def from_settings(cls, settings: FetchClientSettings) -> "HttpClientConfiguration":
        config = cls()
        if settings.base_url:
            config.with_base_url(settings.base_url)

        defaults: RequestInit = {}
        if settings.default_headers:
            defaults["headers"] = dict(settings.default_headers)
        if settings.credentials:
            defaults["credentials"] = settings.credentials
        if settings.cache:
            defaults["cache"] = settings.cache
        config.with_defaults(defaults)

        if settings.standard_configuration:
            config.use_standard_configuration()
        return config
