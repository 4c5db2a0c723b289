"""
Pytest Configuration and Shared Fixtures
"""

import io
from collections.abc import Callable

import httpx
import pytest

from apic import BytesBody, Request, Response

# ============================================================================
# Request Bodies
# ============================================================================


class ReadError(Exception):
    pass


class SeekError(Exception):
    pass


class FailOnRead:
    """Body whose every read fails"""

    def __init__(self):
        self.error = ReadError("failed to read")

    def read(self, size: int = -1) -> bytes:
        raise self.error


class FailOnSeek:
    """Readable body that claims to seek but always fails doing so"""

    def __init__(self, data: bytes = b"foo"):
        self._buffer = io.BytesIO(data)
        self.error = SeekError("failed to seek")

    def read(self, size: int = -1) -> bytes:
        return self._buffer.read(size)

    def seek(self, offset: int, whence: int = 0) -> int:
        raise self.error


class OneShotBody:
    """Non-seekable body that can be read once"""

    def __init__(self, data: bytes):
        self._data = data

    def read(self, size: int = -1) -> bytes:
        data, self._data = self._data, b""
        return data


class FailingResponseBody:
    def __init__(self):
        self.error = ReadError("failed to read")
        self.closed = False

    async def read(self) -> bytes:
        raise self.error

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def fail_on_read():
    return FailOnRead()


@pytest.fixture
def fail_on_seek():
    return FailOnSeek()


@pytest.fixture
def one_shot_body():
    def _create(data: bytes = b"Buy iPhoneX"):
        return OneShotBody(data)

    return _create


@pytest.fixture
def failing_response_body():
    return FailingResponseBody()


# ============================================================================
# Executors
# ============================================================================


class RecordingExecutor:
    """
    Executor that reads the request body like a transport would, records
    what it received and fails the first fail_count calls.
    """

    def __init__(
        self,
        error: Exception | None = None,
        fail_count: int = -1,
        status_code: int = 200,
        content: bytes = b"test",
    ):
        self.error = error or Exception("Error")
        self.fail_count = fail_count
        self.status_code = status_code
        self.content = content
        self.calls = 0
        self.bodies: list[bytes] = []

    async def __call__(self, request: Request) -> Response:
        self.calls += 1

        if request.body is not None:
            self.bodies.append(request.body.read())

        if self.fail_count == -1 or self.calls <= self.fail_count:
            raise self.error

        return Response(
            status_code=self.status_code,
            status=f"{self.status_code} {httpx.codes.get_reason_phrase(self.status_code)}",
            body=BytesBody(self.content),
            request=request,
        )


@pytest.fixture
def recording_executor():
    """Factory fixture for recording executors"""

    def _create(**kwargs) -> RecordingExecutor:
        return RecordingExecutor(**kwargs)

    return _create


@pytest.fixture
def respond_with():
    """Factory for executors returning a fixed response"""

    def _create(status_code: int, status: str = "", body=None) -> Callable:
        async def executor(request: Request) -> Response:
            return Response(status_code=status_code, status=status, body=body, request=request)

        return executor

    return _create


# ============================================================================
# HTTP Mock Server
# ============================================================================


class MockServer:
    """
    Queue of handlers served through httpx.MockTransport, one per request.
    """

    def __init__(self):
        self.handlers: list[Callable[[httpx.Request], httpx.Response]] = []
        self.received: list[httpx.Request] = []

    def append(self, status_code: int, content: bytes = b"test", path: str | None = None):
        def handler(request: httpx.Request) -> httpx.Response:
            if path is not None:
                assert request.url.path == path
            return httpx.Response(status_code, content=content)

        self.handlers.append(handler)

    def set_handler(self, index: int, status_code: int, content: bytes = b"test"):
        self.handlers[index] = lambda request: httpx.Response(status_code, content=content)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        request.read()
        index = len(self.received)
        self.received.append(request)
        return self.handlers[index](request)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self))


@pytest.fixture
def mock_server():
    return MockServer()
