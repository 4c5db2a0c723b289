"""
Retry Interceptor with pluggable backoff policy

Per call:
1. A non-seekable request body is read into a ReplayableBody, a read failure
   fails the call before any attempt is made
2. Each failed attempt rewinds the body to offset 0, a seek failure aborts
   the loop with BodySeekError instead of retrying
3. The backoff policy decides whether to wait and retry or stop
"""

import dataclasses
import logging

from ..backoff import BackOff, NewBackOff, Notify, PermanentError, retry_notify
from ..body import make_replayable, rewind
from ..errors import BodySeekError
from ..pipeline import Executor, Interceptor
from ..request import Request, Response

logger = logging.getLogger(__name__)


def with_retry(backoff: BackOff) -> Interceptor:
    """Retry with a single policy instance shared by every call"""
    return with_retry_notify(lambda: backoff)


def with_retry_notify(new_backoff: NewBackOff, notify: Notify | None = None) -> Interceptor:
    """Retry with a fresh policy per call, reporting each failed attempt to notify"""

    def intercept(do: Executor) -> Executor:
        async def execute(request: Request) -> Response:
            if request.body is not None:
                request = dataclasses.replace(request, body=make_replayable(request.body))

            attempt = 0

            async def operation() -> Response:
                nonlocal attempt
                attempt += 1
                try:
                    return await do(request)
                except Exception:
                    if request.body is not None:
                        try:
                            rewind(request.body)
                        except BodySeekError as e:
                            raise PermanentError(e) from e
                    raise

            def on_failure(err: Exception, delay: float) -> None:
                logger.debug(
                    f"Attempt {attempt} for {request.method} {request.url} failed: {err!r}, "
                    f"retrying in {delay:.3f}s"
                )
                if notify is None:
                    return
                try:
                    notify(err, delay)
                except Exception as e:
                    logger.warning(f"Retry notify hook failed: {e!r}")

            response = await retry_notify(operation, new_backoff(), on_failure)

            if attempt > 1:
                logger.info(
                    f"Retry succeeded on attempt {attempt} for {request.method} {request.url}"
                )

            return response

        return execute

    return intercept
