"""Bridges between combinator futures and asyncio.

    - to_awaitable: await a concurrent future from a coroutine
    - from_coroutine: run a coroutine on a loop, get a concurrent future back
    - wait: block the calling thread until a future settles

Example:
    >>> from futuremonad import succeeded, then
    >>> async def main():
    ...     return await to_awaitable(then(succeeded(20), lambda x: x + 22))
    >>> asyncio.run(main())
    42
"""

from __future__ import annotations

import asyncio
import threading
from typing import TYPE_CHECKING, Coroutine, TypeVar

from futuremonad.foundation.config import get_settings
from futuremonad.foundation.errors import InvalidArgumentError

from .primitive import read_state

if TYPE_CHECKING:
    from concurrent.futures import Future

    from futuremonad.monads.outcome import Outcome

T = TypeVar("T")


def to_awaitable(future: Future[T], *, loop: asyncio.AbstractEventLoop | None = None) -> asyncio.Future[T]:
    """Wrap a concurrent future so it can be awaited on ``loop`` (default: running loop).

    A faulted future with several errors raises an ExceptionGroup of them when awaited.
    """
    if future is None:
        raise InvalidArgumentError.missing("future")
    return asyncio.wrap_future(future, loop=loop)


def from_coroutine(coro: Coroutine[object, object, T], loop: asyncio.AbstractEventLoop) -> Future[T]:
    """Schedule ``coro`` on a loop running in another thread.

    The returned future settles on the loop's thread, so continuations attached
    to it run there.
    """
    if coro is None:
        raise InvalidArgumentError.missing("coro")
    if loop is None:
        raise InvalidArgumentError.missing("loop")
    return asyncio.run_coroutine_threadsafe(coro, loop)


def wait(future: Future[T], timeout: float | None = None) -> Outcome:
    """Block until ``future`` settles and return its outcome.

    The only blocking call in the library. Timeout defaults to
    FUTUREMONAD_WAIT_TIMEOUT (None waits forever).

    Raises:
        TimeoutError: If the future is still pending after timeout seconds
    """
    if future is None:
        raise InvalidArgumentError.missing("future")
    if future.done():
        return read_state(future)
    limit = timeout if timeout is not None else get_settings().wait_timeout
    # done callbacks also fire on a bare cancel(), which never wakes concurrent.futures.wait
    settled = threading.Event()
    future.add_done_callback(lambda _: settled.set())
    if not settled.wait(limit):
        raise TimeoutError(f"future still pending after {limit}s")
    return read_state(future)
