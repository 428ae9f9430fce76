"""
Transport layer for the fetch client.

The client only decides whether and with which Request to call a transport;
the network I/O itself happens here. Backends are looked up by name:

- httpx: async, always installed, the default
- aiohttp: async, needs the ``aiohttp`` extra
- requests: sync library run in the default executor, needs the ``requests`` extra

Optional backends are imported only when asked for, so a missing extra fails
at selection time with an install hint instead of at package import.
"""

import importlib

from .base import BaseTransport
from .httpx import HttpxTransport

# name -> (module relative to this package, class name)
_BACKENDS: dict[str, tuple[str, str]] = {
    "httpx": (".httpx", "HttpxTransport"),
    "aiohttp": (".aiohttp", "AiohttpTransport"),
    "requests": (".requests", "RequestsTransport"),
}


def available_transports() -> list[str]:
    return sorted(_BACKENDS)


def get_transport(name: str, timeout: float = 10.0) -> BaseTransport:
    """
    Build the transport registered under ``name`` (case-insensitive).

    Raises:
        ValueError: No backend has that name.
        ImportError: The backend's library is not installed.
    """
    key = name.lower()
    if key not in _BACKENDS:
        raise ValueError(
            f"Unknown transport: {name}. Available: {', '.join(available_transports())}"
        )

    module_name, class_name = _BACKENDS[key]
    try:
        module = importlib.import_module(module_name, __name__)
    except ImportError as err:
        raise ImportError(
            f"The {key} transport is not installed. Install with: pip install 'fetch-client[{key}]'"
        ) from err
    return getattr(module, class_name)(timeout)


__all__ = ["BaseTransport", "HttpxTransport", "available_transports", "get_transport"]
