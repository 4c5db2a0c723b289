"""
httpx-backed Transport Executor
"""

import logging

import httpx

from ..request import Request, Response

logger = logging.getLogger(__name__)


class HttpxResponseBody:
    """Streams the body of an httpx response"""

    def __init__(self, response: httpx.Response):
        self._response = response

    async def read(self) -> bytes:
        return await self._response.aread()

    async def close(self) -> None:
        await self._response.aclose()


class HttpxTransport:
    """
    Performs one physical HTTP exchange per call.

    The exchange runs under the request's context: cancelling it aborts the
    send. Transport errors are raised as httpx raises them.

    The request body is read synchronously into memory before sending, so a
    file backed body blocks the event loop for the duration of that read.
    """

    def __init__(self, client: httpx.AsyncClient | None = None, timeout: float = 30.0):
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def __call__(self, request: Request) -> Response:
        return await request.context.run(self._send(request))

    async def _send(self, request: Request) -> Response:
        content = None
        if request.body is not None:
            content = request.body.read()
            if isinstance(content, str):
                content = content.encode("utf-8")

        http_request = self._client.build_request(
            request.method,
            request.url,
            headers=request.headers,
            content=content,
        )

        logger.debug(f"Sending {request.method} {request.url}")
        http_response = await self._client.send(http_request, stream=True)

        return Response(
            status_code=http_response.status_code,
            status=f"{http_response.status_code} {http_response.reason_phrase}".rstrip(),
            headers=http_response.headers,
            body=HttpxResponseBody(http_response),
            request=request,
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "HttpxTransport":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
