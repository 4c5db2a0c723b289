"""
apic - HTTP request execution through composable interceptors
"""

from .backoff import (
    BackOff,
    BackOffSettings,
    ConstantBackOff,
    ExponentialBackOff,
    PermanentError,
)
from .body import ReplayableBody, json_body, xml_body
from .clients import (
    Client,
    ClientConfig,
    HttpxTransport,
    create_client,
    new_client,
    with_backoff,
    with_constant_backoff,
    with_executor,
    with_exponential_backoff,
    with_max_retries,
    with_notify,
)
from .context import Context, ContextCancelledError, ContextError, DeadlineExceededError
from .errors import (
    ApicError,
    BodyEncodeError,
    BodyError,
    BodyReadError,
    BodySeekError,
    RequestError,
    ResponseBodyReadError,
)
from .interceptors import (
    StatusError,
    with_dump_request,
    with_dump_response,
    with_expect_status,
    with_retry,
    with_retry_notify,
)
from .pipeline import Executor, Interceptor, chain
from .request import (
    BytesBody,
    Request,
    Response,
    new_request,
    new_request_factory,
    with_base_url,
    with_context,
    with_header,
    with_query,
)

__version__ = "0.1.0"

__all__ = [
    # Pipeline
    "Executor",
    "Interceptor",
    "chain",
    # Requests
    "Request",
    "Response",
    "BytesBody",
    "new_request",
    "new_request_factory",
    "with_base_url",
    "with_context",
    "with_header",
    "with_query",
    # Bodies
    "ReplayableBody",
    "json_body",
    "xml_body",
    # Context
    "Context",
    "ContextError",
    "ContextCancelledError",
    "DeadlineExceededError",
    # Backoff
    "BackOff",
    "BackOffSettings",
    "ConstantBackOff",
    "ExponentialBackOff",
    "PermanentError",
    # Interceptors
    "StatusError",
    "with_dump_request",
    "with_dump_response",
    "with_expect_status",
    "with_retry",
    "with_retry_notify",
    # Client
    "Client",
    "ClientConfig",
    "HttpxTransport",
    "create_client",
    "new_client",
    "with_backoff",
    "with_constant_backoff",
    "with_executor",
    "with_exponential_backoff",
    "with_max_retries",
    "with_notify",
    # Errors
    "ApicError",
    "BodyEncodeError",
    "BodyError",
    "BodyReadError",
    "BodySeekError",
    "RequestError",
    "ResponseBodyReadError",
]
