"""
Request and response value objects used by the fetch client.

The shapes follow the Fetch API closely enough for interceptors written against
it to feel at home: a ``Request`` carries url, method, headers, body, mode,
credentials and cache; a ``Response`` carries status, an ``ok`` flag, headers
and body. Headers are ``httpx.Headers``, so names are case-insensitive and keep
their insertion order.

Bodies can be read exactly once (``blob``, ``read``, ``text``, ``json``), after
which ``body_used`` is set. Use ``clone()`` before reading if the value is
passed on.
"""

import json as jsonlib
import re
from typing import Any
from typing import Callable
from typing import TypedDict
from typing import Union

import httpx

HeaderValue = Union[str, Callable[[], str]]
HeadersInput = Union[httpx.Headers, dict[str, Any], list[tuple[str, str]], None]
BodyInput = Union["Blob", bytes, bytearray, str, None]

_TOKEN = re.compile(r"^[!#$%&'*+\-.^_`|~0-9A-Za-z]+$")
_NORMALIZED_METHODS = {"DELETE", "GET", "HEAD", "OPTIONS", "POST", "PUT"}
_TEXT_CONTENT_TYPE = "text/plain;charset=UTF-8"


class RequestInit(TypedDict, total=False):
    """Fields accepted when creating a Request, and as client defaults."""

    method: str
    headers: Any
    body: BodyInput
    mode: str
    credentials: str
    cache: str


class Blob:
    """Immutable bytes payload tagged with a MIME type."""

    __slots__ = ("_data", "type")

    def __init__(self, data: bytes = b"", type: str = ""):
        self._data = bytes(data)
        self.type = type

    @property
    def size(self) -> int:
        return len(self._data)

    def read(self) -> bytes:
        return self._data

    def text(self) -> str:
        return self._data.decode("utf-8")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Blob):
            return NotImplemented
        return self._data == other._data and self.type == other.type

    def __repr__(self) -> str:
        return f"Blob(size={self.size}, type={self.type!r})"


def json(body: Any) -> Blob:
    """
    Create a Blob containing JSON-serialized data.

    Useful for building JSON request bodies:

        await client.fetch("/users", {"method": "POST", "body": json({"name": "x"})})
    """
    return Blob(jsonlib.dumps(body).encode("utf-8"), "application/json")


def _extract_body(body: BodyInput) -> tuple[bytes | None, str | None]:
    if body is None:
        return None, None
    if isinstance(body, Blob):
        return body.read(), body.type or None
    if isinstance(body, (bytes, bytearray)):
        return bytes(body), None
    if isinstance(body, str):
        return body.encode("utf-8"), _TEXT_CONTENT_TYPE
    raise TypeError(f"Unsupported body type: {type(body).__name__}")


class _Body:
    """Single-use body shared by Request and Response."""

    headers: httpx.Headers

    def __init__(self, body: BodyInput):
        content, content_type = _extract_body(body)
        self._body = content
        self._body_used = False
        if content_type and "content-type" not in self.headers:
            self.headers["Content-Type"] = content_type

    @property
    def body(self) -> bytes | None:
        return self._body

    @property
    def body_used(self) -> bool:
        return self._body_used

    def _consume(self) -> bytes:
        if self._body_used:
            raise TypeError("Body has already been consumed.")
        self._body_used = True
        return self._body or b""

    async def read(self) -> bytes:
        return self._consume()

    async def blob(self) -> Blob:
        return Blob(self._consume(), self.headers.get("content-type", ""))

    async def text(self) -> str:
        return self._consume().decode("utf-8")

    async def json(self) -> Any:
        return jsonlib.loads(self._consume())


class Request(_Body):
    """
    An HTTP request descriptor.

    Args:
        url (str): Target URL. Not normalized.
        method (str): HTTP method token (default: GET).
        headers: Mapping, list of pairs or httpx.Headers. Always copied.
        body: bytes, str, Blob or None. Not allowed for GET/HEAD.
        mode (str): Request mode (default: "cors").
        credentials (str): Credentials mode (default: "same-origin").
        cache (str): Cache mode (default: "default").

    Raises:
        TypeError: url is not a string, or a GET/HEAD request has a body.
        ValueError: url is empty or method is not a valid token.
    """

    def __init__(
        self,
        url: str,
        *,
        method: str = "GET",
        headers: HeadersInput = None,
        body: BodyInput = None,
        mode: str = "cors",
        credentials: str = "same-origin",
        cache: str = "default",
    ):
        if not isinstance(url, str):
            raise TypeError(f"Request url must be a string, got {type(url).__name__}")
        if not url:
            raise ValueError("Request url must not be empty")
        if not isinstance(method, str) or not _TOKEN.match(method):
            raise ValueError(f"Invalid request method: {method!r}")
        if method.upper() in _NORMALIZED_METHODS:
            method = method.upper()
        if body is not None and method in ("GET", "HEAD"):
            raise TypeError(f"Request with {method} method cannot have a body.")

        self.url = url
        self.method = method
        self.headers = httpx.Headers(headers)
        self.mode = mode
        self.credentials = credentials
        self.cache = cache
        super().__init__(body)

    def to_init(self) -> RequestInit:
        """Return the init fields of this request, without the body."""
        return RequestInit(
            method=self.method,
            headers=httpx.Headers(self.headers),
            mode=self.mode,
            credentials=self.credentials,
            cache=self.cache,
        )

    def clone(self) -> "Request":
        if self._body_used:
            raise TypeError("Cannot clone a Request whose body has been consumed.")
        return Request(self.url, body=self._body, **self.to_init())

    def __repr__(self) -> str:
        return f"<Request [{self.method} {self.url}]>"


class Response(_Body):
    """
    An HTTP response descriptor.

    ``ok`` is True when the status is in the 200-299 range.
    """

    def __init__(
        self,
        body: BodyInput = None,
        *,
        status: int = 200,
        status_text: str = "",
        headers: HeadersInput = None,
        url: str = "",
    ):
        if not isinstance(status, int) or not 200 <= status <= 599:
            raise ValueError(f"Response status must be in the range 200-599, got {status!r}")
        self.status = status
        self.status_text = status_text
        self.headers = httpx.Headers(headers)
        self.url = url
        super().__init__(body)

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def clone(self) -> "Response":
        if self._body_used:
            raise TypeError("Cannot clone a Response whose body has been consumed.")
        return Response(
            self._body,
            status=self.status,
            status_text=self.status_text,
            headers=self.headers,
            url=self.url,
        )

    def __repr__(self) -> str:
        return f"<Response [{self.status}]>"
