from .client import (
    Client,
    ClientConfig,
    ClientOption,
    create_client,
    new_client,
    with_backoff,
    with_constant_backoff,
    with_executor,
    with_exponential_backoff,
    with_max_retries,
    with_notify,
)
from .transport import HttpxResponseBody, HttpxTransport

__all__ = [
    "Client",
    "ClientConfig",
    "ClientOption",
    "HttpxResponseBody",
    "HttpxTransport",
    "create_client",
    "new_client",
    "with_backoff",
    "with_constant_backoff",
    "with_executor",
    "with_exponential_backoff",
    "with_max_retries",
    "with_notify",
]
