"""
The interceptor pipeline.

A single fold over the registered interceptors, used once for the request
phase and once for the response phase. Interceptor ``i`` only ever sees the
outcome of interceptor ``i - 1``: a value goes to its success handler, an error
to its error handler. Whatever a handler returns continues down the happy path,
whatever it raises continues down the error path.
"""

import inspect
from typing import Any
from typing import Awaitable
from typing import Iterable

from fetch_client.interceptor import REQUEST_PHASE
from fetch_client.interceptor import RESPONSE_PHASE
from fetch_client.interceptor import Interceptor
from fetch_client.interceptor import Phase


async def _resolve(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


async def apply_interceptors(
    seed: Awaitable[Any],
    interceptors: Iterable[Interceptor],
    phase: Phase,
) -> Any:
    """
    Thread ``seed`` through the handlers of ``phase``, in registration order.

    Args:
        seed: Awaitable producing the initial value. If it raises, the error
            becomes the initial state of the chain.
        interceptors: Interceptors in registration order.
        phase: REQUEST_PHASE or RESPONSE_PHASE.

    Returns:
        The value left after the last interceptor.

    Raises:
        Whatever error is still pending after the last interceptor.
    """
    error: Exception | None = None
    value: Any = None
    try:
        value = await seed
    except Exception as exc:
        error = exc

    for interceptor in interceptors:
        on_success, on_error = interceptor.handlers(phase)
        try:
            if error is not None:
                value = await _resolve(on_error(error))
                error = None
            else:
                value = await _resolve(on_success(value))
        except Exception as exc:
            error, value = exc, None

    if error is not None:
        raise error
    return value


async def process_request(seed: Awaitable[Any], interceptors: Iterable[Interceptor]) -> Any:
    return await apply_interceptors(seed, interceptors, REQUEST_PHASE)


async def process_response(seed: Awaitable[Any], interceptors: Iterable[Interceptor]) -> Any:
    return await apply_interceptors(seed, interceptors, RESPONSE_PHASE)
