"""Monadic chaining over futures.

bind is the monad's >>= for futures: the continuation runs once the source
succeeds and its returned future becomes the result. Cancellation and faults
skip the continuation and pass through untouched.

Type signature: Future[A] -> (A -> Future[B]) -> Future[B]

Example:
    >>> from futuremonad import bind, succeeded, then
    >>> f = then(bind(succeeded(20), lambda x: succeeded(x + 1)), lambda x: x * 2)
    >>> f.result()
    42
"""

from __future__ import annotations

import logging
from functools import reduce
from typing import TYPE_CHECKING, Callable, TypeVar

from futuremonad.foundation.config import get_settings
from futuremonad.foundation.errors import InvalidArgumentError, InvalidOperationError, report
from futuremonad.runtime.concurrency.primitive import create_future, is_settled, on_settle, read_state, settle_from

from .algebra import cancelled, faulted, from_outcome, succeeded
from .outcome import CANCELLATION_ERRORS, Succeeded

if TYPE_CHECKING:
    from concurrent.futures import Future

    from .outcome import Outcome

A = TypeVar("A")
B = TypeVar("B")

logger = logging.getLogger("futuremonad.bind")


def trace_settlement(log: logging.Logger, step: str, future: Future[object]) -> None:
    """Debug-log a combinator transition when FUTUREMONAD_TRACE_SETTLEMENTS is on."""
    if get_settings().trace_settlements and log.isEnabledFor(logging.DEBUG):
        log.debug(f"[{step}] {report(future)}")


def bind(source: Future[A], continuation: Callable[[A], Future[B]]) -> Future[B]:
    """Run ``continuation`` on the source's value once it succeeds.

    The reaction fires inline at settlement. A synchronous raise from the
    continuation propagates to the caller when ``source`` has already settled;
    otherwise there is no caller left, and the result is faulted with it.

    Raises:
        InvalidArgumentError: If source or continuation is None
    """
    if source is None:
        raise InvalidArgumentError.missing("source")
    if continuation is None:
        raise InvalidArgumentError.missing("continuation")

    if is_settled(source):
        return _step(read_state(source), continuation)

    result: Future[B] = create_future()

    def react(done: Future[A]) -> None:
        try:
            nxt = _step(read_state(done), continuation)
        except CANCELLATION_ERRORS:
            nxt = cancelled()
        except Exception as exc:
            logger.debug(f"continuation raised {type(exc).__name__} after source settled")
            nxt = faulted(exc)
        trace_settlement(logger, "bind", done)
        settle_from(result, nxt)

    on_settle(source, react)
    return result


def _step(outcome: Outcome, continuation: Callable[[A], Future[B]]) -> Future[B]:
    match outcome:
        case Succeeded(value):
            nxt = continuation(value)
            if nxt is None:
                return faulted(InvalidOperationError.no_future("continuation"))
            return nxt
        case _:
            return from_outcome(outcome)


def then(source: Future[A], fn: Callable[[A], B]) -> Future[B]:
    """Lift a plain function into the chain (map over the success value).

    Raises:
        InvalidArgumentError: If source or fn is None
    """
    if fn is None:
        raise InvalidArgumentError.missing("fn")
    return bind(source, lambda value: succeeded(fn(value)))


def pipe(source: Future[object], *continuations: Callable[[object], Future[object]]) -> Future[object]:
    """Left fold of bind: ``pipe(m, f, g) == bind(bind(m, f), g)``."""
    return reduce(bind, continuations, source)
