"""
Backoff policies and the retry loop

A BackOff yields the delay before the next retry, or STOP when no retry
should be made. Policies are stateful: build a fresh one for every call.

ExponentialBackOff:
    interval = initial_interval * multiplier ^ n, capped at max_interval
    delay = uniform(interval * (1 - randomization_factor),
                    interval * (1 + randomization_factor))
"""

import logging
import random
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Protocol, TypeVar

from .context import Context, ContextError

logger = logging.getLogger(__name__)

T = TypeVar("T")

STOP = None


class BackOff(Protocol):
    def next_backoff(self) -> float | None: ...

    def reset(self) -> None: ...


NewBackOff = Callable[[], BackOff]
Notify = Callable[[Exception, float], None]


class PermanentError(Exception):
    """Raised by an operation to end the retry loop immediately with err"""

    def __init__(self, err: Exception):
        self.err = err
        super().__init__(str(err))


class ZeroBackOff:
    def next_backoff(self) -> float | None:
        return 0.0

    def reset(self) -> None:
        pass


class StopBackOff:
    def next_backoff(self) -> float | None:
        return STOP

    def reset(self) -> None:
        pass


class ConstantBackOff:
    def __init__(self, interval: float):
        self.interval = interval

    def next_backoff(self) -> float | None:
        return self.interval

    def reset(self) -> None:
        pass


class ExponentialBackOff:
    def __init__(
        self,
        initial_interval: float = 0.5,
        multiplier: float = 1.5,
        randomization_factor: float = 0.5,
        max_interval: float = 60.0,
        max_elapsed_time: float = 900.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.initial_interval = initial_interval
        self.multiplier = multiplier
        self.randomization_factor = randomization_factor
        self.max_interval = max_interval
        self.max_elapsed_time = max_elapsed_time
        self.clock = clock

        self.current_interval = initial_interval
        self._start_time = clock()

    def reset(self) -> None:
        self.current_interval = self.initial_interval
        self._start_time = self.clock()

    @property
    def elapsed_time(self) -> float:
        return self.clock() - self._start_time

    def next_backoff(self) -> float | None:
        if self.max_elapsed_time and self.elapsed_time > self.max_elapsed_time:
            return STOP

        delay = self._randomize(self.current_interval)
        self.current_interval = min(self.current_interval * self.multiplier, self.max_interval)
        return delay

    def _randomize(self, interval: float) -> float:
        delta = self.randomization_factor * interval
        return random.uniform(interval - delta, interval + delta)


class _MaxRetriesBackOff:
    def __init__(self, delegate: BackOff, max_retries: int):
        self.delegate = delegate
        self.max_retries = max_retries
        self.num_tries = 0

    @property
    def context(self) -> Context | None:
        return getattr(self.delegate, "context", None)

    def next_backoff(self) -> float | None:
        if self.max_retries > 0:
            if self.num_tries >= self.max_retries:
                return STOP
            self.num_tries += 1
        return self.delegate.next_backoff()

    def reset(self) -> None:
        self.num_tries = 0
        self.delegate.reset()


class _ContextBackOff:
    def __init__(self, delegate: BackOff, context: Context):
        self.delegate = delegate
        self.context = context

    def next_backoff(self) -> float | None:
        if self.context.done:
            return STOP
        return self.delegate.next_backoff()

    def reset(self) -> None:
        self.delegate.reset()


def with_max_retries(backoff: BackOff, max_retries: int) -> BackOff:
    """Stop after max_retries retries; 0 leaves the policy unbounded"""
    return _MaxRetriesBackOff(backoff, max_retries)


def with_context(backoff: BackOff, ctx: Context) -> BackOff:
    """Stop once ctx is cancelled and interrupt waits on cancellation"""
    return _ContextBackOff(backoff, ctx)


async def retry_notify(
    operation: Callable[[], Awaitable[T]],
    backoff: BackOff,
    notify: Notify | None = None,
) -> T:
    """
    Run operation until it succeeds or the backoff policy stops.

    - PermanentError ends the loop at once with its wrapped error
    - STOP ends the loop with the last error, or the context error if the
      policy's context was cancelled
    - cancellation during a wait raises the context error without another attempt
    """
    ctx = getattr(backoff, "context", None) or Context.background()
    backoff.reset()

    while True:
        try:
            return await operation()
        except PermanentError as e:
            raise e.err from e.err.__cause__
        except Exception as e:
            err = e

        delay = backoff.next_backoff()
        if delay is STOP:
            if ctx.done:
                raise ctx.new_err() from err
            raise err

        if notify is not None:
            notify(err, delay)

        try:
            await ctx.sleep(delay)
        except ContextError as e:
            raise e from err


async def retry(operation: Callable[[], Awaitable[T]], backoff: BackOff) -> T:
    return await retry_notify(operation, backoff)


@dataclass
class BackOffSettings:
    """Backoff policy configuration"""

    kind: str = "exponential"
    interval: float = 0.5
    max_retries: int = 0  # retries after the first attempt, 0 is unbounded

    def build(self) -> NewBackOff:
        kind = self.kind.lower()
        interval = self.interval

        if kind == "exponential":

            def new_backoff() -> BackOff:
                return ExponentialBackOff(initial_interval=interval)

        elif kind == "constant":

            def new_backoff() -> BackOff:
                return ConstantBackOff(interval)

        else:
            raise ValueError(f"Unknown backoff kind: {self.kind}")

        if not self.max_retries:
            return new_backoff

        max_retries = self.max_retries
        return lambda: with_max_retries(new_backoff(), max_retries)
