"""
Interceptor record for HttpClient.

An interceptor is a record of up to four optional unary handlers:

- ``request(request)``: transform the request, return a new one, or return a
  Response to skip the transport entirely.
- ``request_error(error)``: recover from a failure raised earlier in the
  request phase by returning a Request or Response, or re-raise.
- ``response(response)``: transform or replace the response.
- ``response_error(error)``: recover from a transport failure or an error
  raised earlier in the response phase by returning a Response, or re-raise.

Handlers may be plain functions or coroutine functions. Handlers that need
state of their own are bound methods; ``Interceptor.from_object`` collects them
from any object exposing methods with the names above.

Current implementations:
- Status based rejection (see: reject_on_error)
- Logging (see: LoggingInterceptor)
- Response caching (see: CacheInterceptor)
- Transport retry (see: RetryInterceptor)
"""

from dataclasses import dataclass
from typing import Any
from typing import Awaitable
from typing import Callable
from typing import Optional
from typing import Union

from fetch_client.exceptions import HttpResponseError
from fetch_client.models import Response

Handler = Callable[[Any], Union[Any, Awaitable[Any]]]

HANDLER_NAMES = ("request", "request_error", "response", "response_error")


@dataclass(frozen=True)
class Phase:
    """Names of the success and error handlers used by one pipeline phase."""

    name: str
    success: str
    error: str


REQUEST_PHASE = Phase("request", "request", "request_error")
RESPONSE_PHASE = Phase("response", "response", "response_error")


def _pass_through(value: Any) -> Any:
    return value


def _rethrow(error: BaseException) -> Any:
    raise error


@dataclass(frozen=True)
class Interceptor:
    request: Optional[Handler] = None
    request_error: Optional[Handler] = None
    response: Optional[Handler] = None
    response_error: Optional[Handler] = None

    @classmethod
    def from_object(cls, obj: Any) -> "Interceptor":
        """
        Build an Interceptor from an object with handler methods.

        Only attributes named after the four handlers are used; anything not
        callable is ignored.
        """
        if isinstance(obj, Interceptor):
            return obj
        handlers = {}
        for name in HANDLER_NAMES:
            handler = getattr(obj, name, None)
            if callable(handler):
                handlers[name] = handler
        return cls(**handlers)

    def handlers(self, phase: Phase) -> tuple[Handler, Handler]:
        """
        Return the ``(on_success, on_error)`` pair for a phase.

        A missing success handler passes the value through unchanged, a
        missing error handler re-raises the error.
        """
        on_success = getattr(self, phase.success) or _pass_through
        on_error = getattr(self, phase.error) or _rethrow
        return on_success, on_error


def reject_on_error(response: Response) -> Response:
    """Response handler that raises HttpResponseError unless ``response.ok``."""
    if not response.ok:
        raise HttpResponseError(response)
    return response
