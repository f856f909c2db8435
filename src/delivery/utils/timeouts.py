"""Bounded capability calls."""

from collections.abc import Callable
from concurrent.futures import Executor
from concurrent.futures import TimeoutError as FuturesTimeoutError

from delivery.errors import CapabilityTimeout


def call_with_timeout(executor: Executor | None, timeout: float | None, operation: str, fn: Callable, *args):
    """Run ``fn(*args)``, giving up after ``timeout`` seconds.

    With no timeout (or no executor) the call runs inline. A timed-out call
    keeps running in its worker; only the caller stops waiting.

    Raises:
        CapabilityTimeout: the call did not finish in time.
    """
    if timeout is None or executor is None:
        return fn(*args)

    future = executor.submit(fn, *args)
    try:
        return future.result(timeout=timeout)
    except FuturesTimeoutError as exc:
        future.cancel()
        raise CapabilityTimeout(operation, timeout) from exc
