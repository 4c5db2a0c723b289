"""
Request pipeline Interceptors: Retry, Status expectation, Dump
"""

from .dump import (
    dump_request,
    dump_response,
    with_dump_request,
    with_dump_response,
)
from .retry import (
    with_retry,
    with_retry_notify,
)
from .status import (
    StatusError,
    with_expect_status,
)

__all__ = [
    # Retry
    "with_retry",
    "with_retry_notify",
    # Status expectation
    "StatusError",
    "with_expect_status",
    # Dump
    "dump_request",
    "dump_response",
    "with_dump_request",
    "with_dump_response",
]
