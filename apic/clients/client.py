"""
Client: assembles the interceptor chain per call

    client = new_client(
        with_constant_backoff(0.1),
        with_max_retries(5),
        with_notify(lambda err, delay: print(err, delay)),
    )
    response = await client.do(request, with_expect_status(200))

With a backoff factory configured, the request's context is moved onto the
backoff policy: it interrupts waits between attempts while each attempt
itself runs under a background context. Without one, the request's context
governs the single attempt.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass

from ..backoff import (
    BackOff,
    ConstantBackOff,
    ExponentialBackOff,
    NewBackOff,
    Notify,
    with_context,
)
from ..backoff import with_max_retries as _with_max_retries
from ..config.settings import Settings, settings as default_settings
from ..context import Context
from ..interceptors.retry import with_retry_notify
from ..pipeline import Executor, Interceptor, chain
from ..request import Request, Response
from .transport import HttpxTransport

logger = logging.getLogger(__name__)


@dataclass
class ClientConfig:
    executor: Executor | None = None
    new_backoff: NewBackOff | None = None
    notify: Notify | None = None
    timeout: float = 30.0


ClientOption = Callable[[ClientConfig], None]


class Client:
    def __init__(self, config: ClientConfig | None = None):
        self.config = config or ClientConfig()
        self._transport: HttpxTransport | None = None

        if self.config.executor is None:
            self._transport = HttpxTransport(timeout=self.config.timeout)
            self.executor: Executor = self._transport
        else:
            self.executor = self.config.executor

    @property
    def retry_enabled(self) -> bool:
        return self.config.new_backoff is not None

    async def do(self, request: Request, *interceptors: Interceptor) -> Response:
        chained = list(interceptors)

        if self.config.new_backoff is not None:
            ctx = request.context
            request = request.with_context(Context.background())
            new_backoff = self.config.new_backoff

            def bound_backoff() -> BackOff:
                return with_context(new_backoff(), ctx)

            chained.append(with_retry_notify(bound_backoff, self.config.notify))

        execute = chain(self.executor, *chained)
        return await execute(request)

    async def aclose(self) -> None:
        if self._transport is not None:
            await self._transport.aclose()

    async def __aenter__(self) -> "Client":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()


def with_executor(executor: Executor) -> ClientOption:
    def configure(config: ClientConfig) -> None:
        config.executor = executor

    return configure


def with_backoff(new_backoff: NewBackOff) -> ClientOption:
    def configure(config: ClientConfig) -> None:
        config.new_backoff = new_backoff

    return configure


def with_exponential_backoff(**kwargs) -> ClientOption:
    return with_backoff(lambda: ExponentialBackOff(**kwargs))


def with_constant_backoff(interval: float) -> ClientOption:
    return with_backoff(lambda: ConstantBackOff(interval))


def with_max_retries(max_retries: int) -> ClientOption:
    """Bound the configured backoff factory, so set one up first"""

    def configure(config: ClientConfig) -> None:
        new_backoff = config.new_backoff
        if new_backoff is None:
            raise ValueError("with_max_retries requires a backoff factory to be configured first")
        config.new_backoff = lambda: _with_max_retries(new_backoff(), max_retries)

    return configure


def with_notify(notify: Notify) -> ClientOption:
    def configure(config: ClientConfig) -> None:
        config.notify = notify

    return configure


def new_client(*options: ClientOption) -> Client:
    config = ClientConfig()
    for configure in options:
        configure(config)
    return Client(config)


def create_client(settings: Settings | None = None) -> Client:
    settings = settings or default_settings
    backoff_settings = settings.backoff_settings()

    config = ClientConfig(timeout=settings.TIMEOUT)
    if backoff_settings is not None:
        config.new_backoff = backoff_settings.build()

    client = Client(config)
    logger.debug(
        f"Created client: backoff={settings.BACKOFF_KIND}, "
        f"max_retries={settings.MAX_RETRIES}, timeout={settings.TIMEOUT}"
    )
    return client
