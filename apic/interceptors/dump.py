"""
Dump Interceptors for debugging requests and responses

Both write an HTTP/1.1 wire-format rendering to a text writer:

    response = await client.do(
        request,
        with_dump_request(sys.stdout),
        with_dump_response(sys.stdout),
    )
"""

import dataclasses
from typing import TextIO

from ..body import make_replayable, rewind
from ..pipeline import Executor, Interceptor
from ..request import BytesBody, Request, Response


def _render_headers(lines: list[str], headers) -> None:
    for name, value in headers.items():
        lines.append(f"{name}: {value}")


def _decode(data: bytes) -> str:
    return data.decode("utf-8", errors="replace")


def dump_request(request: Request, body: bool = True) -> tuple[str, Request]:
    """Render request, returning a request whose body can still be sent"""
    target = request.url.raw_path.decode("ascii") or "/"
    lines = [f"{request.method} {target} HTTP/1.1"]
    if request.url.host:
        lines.append(f"Host: {request.url.netloc.decode('ascii')}")
    _render_headers(lines, request.headers)

    content = ""
    if body and request.body is not None:
        request = dataclasses.replace(request, body=make_replayable(request.body))
        data = request.body.read()
        rewind(request.body)
        if isinstance(data, str):
            data = data.encode("utf-8")
        content = _decode(data)

    return "\r\n".join(lines) + "\r\n\r\n" + content, request


async def dump_response(response: Response, body: bool = True) -> tuple[str, Response]:
    """Render response, returning a response whose body can still be read"""
    lines = [f"HTTP/1.1 {response.status}"]
    _render_headers(lines, response.headers)

    content = ""
    if body and response.body is not None:
        try:
            data = await response.body.read()
        finally:
            await response.body.close()
        response = dataclasses.replace(response, body=BytesBody(data))
        content = _decode(data)

    return "\r\n".join(lines) + "\r\n\r\n" + content, response


def with_dump_request(writer: TextIO, body: bool = True) -> Interceptor:
    def intercept(do: Executor) -> Executor:
        async def execute(request: Request) -> Response:
            dump, request = dump_request(request, body)
            print(dump, file=writer)
            return await do(request)

        return execute

    return intercept


def with_dump_response(writer: TextIO, body: bool = True) -> Interceptor:
    def intercept(do: Executor) -> Executor:
        async def execute(request: Request) -> Response:
            response = await do(request)
            dump, response = await dump_response(response, body)
            print(dump, file=writer)
            return response

        return execute

    return intercept
