"""
Cancellation context

A Context carries a single cancellation signal for a call. It is either
bound to the request (governing one attempt) or to a backoff policy
(governing the waits between attempts).

- Context.background(): never cancelled
- Context.with_cancel(): cancelled explicitly through the returned callback
- Context.with_timeout(): cancelled with a deadline error once the timeout elapses
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from .errors import ApicError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ContextError(ApicError):
    """Context has been cancelled"""


class ContextCancelledError(ContextError):
    def __init__(self, message: str = "context canceled"):
        super().__init__(message)


class DeadlineExceededError(ContextError):
    def __init__(self, message: str = "context deadline exceeded"):
        super().__init__(message)


class Context:
    def __init__(self, parent: "Context | None" = None, cancellable: bool = True):
        self._cancellable = cancellable
        self._parent: Context | None = None
        self._children: list[Context] = []
        self._event = asyncio.Event()
        self._err: ContextError | None = None
        self._timer: asyncio.TimerHandle | None = None

        if parent is not None and parent._cancellable:
            if parent.done:
                self._cancel(parent.err)
            else:
                self._parent = parent
                parent._children.append(self)

    @classmethod
    def background(cls) -> "Context":
        return _BACKGROUND

    @classmethod
    def with_cancel(cls, parent: "Context | None" = None) -> tuple["Context", Callable[[], None]]:
        ctx = cls(parent)
        return ctx, lambda: ctx._cancel(ContextCancelledError())

    @classmethod
    def with_timeout(
        cls, timeout: float, parent: "Context | None" = None
    ) -> tuple["Context", Callable[[], None]]:
        """Must be called from a running event loop"""
        ctx, cancel = cls.with_cancel(parent)
        if not ctx.done:
            loop = asyncio.get_running_loop()
            ctx._timer = loop.call_later(timeout, ctx._cancel, DeadlineExceededError())
        return ctx, cancel

    @property
    def done(self) -> bool:
        return self._err is not None

    @property
    def err(self) -> ContextError | None:
        return self._err

    def new_err(self) -> ContextError | None:
        """Fresh copy of err, so every caller raises its own error object"""
        if self._err is None:
            return None
        return type(self._err)(str(self._err))

    def _cancel(self, err: ContextError) -> None:
        if not self._cancellable or self._err is not None:
            return

        self._err = err
        self._event.set()

        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

        children, self._children = self._children, []
        for child in children:
            child._cancel(err)

        if self._parent is not None:
            if self in self._parent._children:
                self._parent._children.remove(self)
            self._parent = None

        logger.debug(f"Context cancelled: {err}")

    async def wait(self) -> None:
        """Block until the context is cancelled"""
        if not self._cancellable:
            await asyncio.get_running_loop().create_future()
        await self._event.wait()

    async def sleep(self, delay: float) -> None:
        """Sleep for delay seconds, raising the context error if cancelled first"""
        if not self._cancellable:
            await asyncio.sleep(delay)
            return

        if self._err is not None:
            raise self.new_err()

        try:
            await asyncio.wait_for(self._event.wait(), timeout=delay)
        except asyncio.TimeoutError:
            return

        raise self.new_err()

    async def run(self, awaitable: Awaitable[T]) -> T:
        """Await under this context; cancellation aborts the awaitable"""
        if not self._cancellable:
            return await awaitable

        if self._err is not None:
            if asyncio.iscoroutine(awaitable):
                awaitable.close()
            raise self.new_err()

        task: asyncio.Future[Any] = asyncio.ensure_future(awaitable)
        waiter = asyncio.ensure_future(self._event.wait())

        try:
            done, _ = await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            task.cancel()
            raise
        finally:
            waiter.cancel()

        if task in done:
            return task.result()

        task.cancel()
        await asyncio.wait({task})
        if not task.cancelled():
            task.exception()

        raise self.new_err()

    def __repr__(self) -> str:
        if not self._cancellable:
            return "Context(background)"
        state = "cancelled" if self.done else "active"
        return f"Context({state})"


_BACKGROUND = Context(cancellable=False)
