"""The future primitive every combinator is written against.

Wraps ``concurrent.futures.Future`` behind five operations:

    create_future()          pending single-assignment container
    settle(f, outcome)       one-time transition out of Pending
    on_settle(f, reaction)   run reaction once, inline, after settlement
    is_settled(f)            non-blocking check
    read_state(f)            non-blocking read into an Outcome

``Future.add_done_callback`` runs callbacks on the thread that settles the
future, or immediately on the registering thread if it is already settled, in
registration order. Continuations therefore never take an extra scheduling hop.

A faulted future with a single leaf error stores that error. With several it
stores a ``BaseExceptionGroup`` of the leaves, which read_state() expands again.
"""

from __future__ import annotations

import concurrent.futures
from concurrent.futures import Future
from typing import Callable, TypeVar

from futuremonad.foundation.errors import InvalidArgumentError, InvalidStateError
from futuremonad.monads.outcome import (
    CANCELLED,
    PENDING,
    Cancelled,
    Faulted,
    Outcome,
    Pending,
    Succeeded,
    is_cancellation,
    outcome_from_errors,
)

T = TypeVar("T")


def create_future() -> Future[T]:
    """Create a pending future."""
    return Future()


def is_settled(future: Future[object]) -> bool:
    return future.done()


def read_state(future: Future[T]) -> Outcome:
    """Read the terminal state without blocking; Pending if not settled."""
    if not future.done():
        return PENDING
    if future.cancelled():
        return CANCELLED
    exc = future.exception(timeout=0)
    if exc is not None:
        return outcome_from_errors((exc,))
    return Succeeded(future.result(timeout=0))


def settle(future: Future[T], outcome: Outcome) -> None:
    """Move a pending future into a terminal state.

    Raises:
        InvalidStateError: If already settled, or if outcome is Pending
    """
    if isinstance(outcome, Pending):
        raise InvalidStateError("cannot settle a future into the pending state")
    # cancel() on an already cancelled future reports success, so check first
    if future.done():
        raise InvalidStateError(f"future already settled: {future!r}")
    if isinstance(outcome, Faulted) and is_cancellation(outcome.errors):
        outcome = CANCELLED
    match outcome:
        case Cancelled():
            if not future.cancel():
                raise InvalidStateError(f"future is running and cannot be cancelled: {future!r}")
            # cancel() stops at CANCELLED; concurrent.futures.wait only sees CANCELLED_AND_NOTIFIED
            future.set_running_or_notify_cancel()
        case Faulted(errors):
            _guard(future.set_exception, errors[0] if len(errors) == 1 else BaseExceptionGroup("faulted", list(errors)))
        case Succeeded(value):
            _guard(future.set_result, value)


def _guard(setter: Callable[[object], None], payload: object) -> None:
    try:
        setter(payload)
    except concurrent.futures.InvalidStateError as exc:
        raise InvalidStateError(str(exc)) from exc


def on_settle(future: Future[T], reaction: Callable[[Future[T]], None]) -> None:
    """Run ``reaction(future)`` once after the future settles.

    Raises:
        InvalidArgumentError: If future or reaction is None
    """
    if future is None:
        raise InvalidArgumentError.missing("future")
    if reaction is None:
        raise InvalidArgumentError.missing("reaction")
    future.add_done_callback(reaction)


def settle_from(target: Future[T], source: Future[T]) -> None:
    """Settle ``target`` with ``source``'s outcome once ``source`` settles."""
    on_settle(source, lambda done: settle(target, read_state(done)))
