"""
Executor and Interceptor types, and the chain composer

An Executor performs one request/response exchange. An Interceptor wraps an
Executor and returns a new one running its own logic around the wrapped call.
"""

from collections.abc import Awaitable, Callable

from .request import Request, Response

Executor = Callable[[Request], Awaitable[Response]]
Interceptor = Callable[[Executor], Executor]


def chain(executor: Executor, *interceptors: Interceptor) -> Executor:
    """
    Wrap executor with interceptors in list order.

    Each interceptor wraps the result of the previous ones, so the last
    interceptor is the outermost: it runs first on the way in and last on
    the way out.
    """
    for intercept in interceptors:
        executor = intercept(executor)
    return executor
