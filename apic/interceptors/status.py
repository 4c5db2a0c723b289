"""
Status expectation Interceptor

    client = new_client()
    request = new_request("GET", "https://example.com/101")
    response = await client.do(request, with_expect_status(200))
"""

import logging

from ..errors import ApicError, ResponseBodyReadError
from ..pipeline import Executor, Interceptor
from ..request import Request, Response

logger = logging.getLogger(__name__)


class StatusError(ApicError):
    """Response arrived with a status code the caller did not expect"""

    def __init__(self, status_code: int, status: str, body: bytes = b""):
        self.status_code = status_code
        self.status = status
        self.body = body
        super().__init__(status)

    def __str__(self) -> str:
        return self.status

    def __repr__(self) -> str:
        return f"StatusError({self.status_code}, {self.status!r}, {self.body!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, StatusError):
            return NotImplemented
        return (self.status_code, self.status, self.body) == (
            other.status_code,
            other.status,
            other.body,
        )

    def __hash__(self) -> int:
        return hash((self.status_code, self.status, self.body))


def with_expect_status(*codes: int) -> Interceptor:
    expected = frozenset(codes)

    def intercept(do: Executor) -> Executor:
        async def execute(request: Request) -> Response:
            response = await do(request)

            if response.status_code in expected:
                return response

            body = b""
            if response.body is not None:
                try:
                    body = await response.body.read()
                except Exception as e:
                    try:
                        await response.body.close()
                    except Exception as close_error:
                        logger.debug(
                            f"Failed to close response body after read error: {close_error!r}"
                        )
                    raise ResponseBodyReadError("failed to read response body") from e
                await response.body.close()

            logger.debug(
                f"Unexpected status {response.status_code} for {request.method} {request.url}"
            )
            raise StatusError(response.status_code, response.status, body)

        return execute

    return intercept
