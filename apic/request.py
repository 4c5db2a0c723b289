"""
Request and Response values

Requests are built with new_request() and a list of RequestOption functions,
each receiving the request and returning the (possibly new) request.

    new_request = new_request_factory(
        with_base_url("https://example.com"),
        with_header("Authorization", f"Bearer {token}"),
    )
    request = new_request("GET", "/orders")
"""

import dataclasses
import io
import logging
import re
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Protocol

import httpx

from .context import Context
from .errors import RequestError

logger = logging.getLogger(__name__)

_METHOD_RE = re.compile(r"^[!#$%&'*+\-.^_`|~0-9A-Za-z]+$")


class ResponseBody(Protocol):
    async def read(self) -> bytes: ...

    async def close(self) -> None: ...


class BytesBody:
    """In-memory response body"""

    def __init__(self, data: bytes = b""):
        self._data = data
        self.closed = False

    async def read(self) -> bytes:
        data, self._data = self._data, b""
        return data

    async def close(self) -> None:
        self.closed = True


@dataclass
class Request:
    method: str
    url: httpx.URL
    headers: httpx.Headers = field(default_factory=httpx.Headers)
    body: Any = None
    context: Context = field(default_factory=Context.background)

    def with_context(self, ctx: Context) -> "Request":
        """Shallow copy of the request bound to ctx"""
        return dataclasses.replace(self, context=ctx)


@dataclass
class Response:
    status_code: int
    status: str = ""
    headers: httpx.Headers = field(default_factory=httpx.Headers)
    body: ResponseBody | None = None
    request: Request | None = None

    @property
    def reason(self) -> str:
        code, _, text = self.status.partition(" ")
        return text if code == str(self.status_code) else self.status

    async def read(self) -> bytes:
        if self.body is None:
            return b""
        return await self.body.read()

    async def aclose(self) -> None:
        if self.body is not None:
            await self.body.close()


RequestOption = Callable[[Request], Request]
NewRequest = Callable[..., Request]


def with_context(ctx: Context) -> RequestOption:
    def configure(request: Request) -> Request:
        return request.with_context(ctx)

    return configure


def with_base_url(base_url: str) -> RequestOption:
    """Prefix the request URL with scheme, host and path of base_url"""

    def configure(request: Request) -> Request:
        try:
            base = httpx.URL(base_url)
        except httpx.InvalidURL as e:
            raise RequestError(f"failed to parse URL {base_url!r}") from e

        if not base.scheme or not base.host:
            raise RequestError(f"failed to parse URL {base_url!r}")

        request.url = request.url.copy_with(
            scheme=base.scheme,
            netloc=base.netloc,
            path=base.path.rstrip("/") + request.url.path,
        )
        return request

    return configure


def with_header(name: str, value: str) -> RequestOption:
    def configure(request: Request) -> Request:
        request.headers[name] = value
        return request

    return configure


def with_query(**params: Any) -> RequestOption:
    def configure(request: Request) -> Request:
        request.url = request.url.copy_merge_params(params)
        return request

    return configure


def new_request(method: str, url: str, body: Any = None, *options: RequestOption) -> Request:
    if not _METHOD_RE.match(method or ""):
        raise RequestError(f"failed to create request: invalid method {method!r}")

    try:
        parsed = httpx.URL(url)
    except httpx.InvalidURL as e:
        raise RequestError(f"failed to create request: invalid URL {url!r}") from e

    if isinstance(body, str):
        body = body.encode("utf-8")
    if isinstance(body, (bytes, bytearray)):
        body = io.BytesIO(bytes(body))

    request = Request(method=method.upper(), url=parsed, body=body)

    for configure in options:
        try:
            request = configure(request)
        except Exception as e:
            raise RequestError("failed to apply request configuration") from e

    return request


def new_request_factory(*base_options: RequestOption) -> NewRequest:
    """Capture options shared by every request, e.g. base URL and auth"""

    def factory(method: str, url: str, body: Any = None, *options: RequestOption) -> Request:
        return new_request(method, url, body, *base_options, *options)

    return factory
