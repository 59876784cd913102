"""Constructors for already-settled futures.

Every other combinator builds its results out of these and the settle-once
primitive. None of them ever blocks.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, TypeVar

from futuremonad.foundation.errors import InvalidArgumentError, InvalidStateError
from futuremonad.runtime.concurrency.primitive import create_future, read_state, settle

from .outcome import CANCELLED, Pending, Succeeded, outcome_from_errors

if TYPE_CHECKING:
    from collections.abc import Iterable
    from concurrent.futures import Future

    from .outcome import Outcome

T = TypeVar("T")


def from_outcome(outcome: Outcome) -> Future[T]:
    """Create a future already settled with ``outcome``.

    Raises:
        InvalidStateError: If outcome is Pending
    """
    future: Future[T] = create_future()
    settle(future, outcome)
    return future


def succeeded(value: T) -> Future[T]:
    """Future already succeeded with ``value`` (None included)."""
    return from_outcome(Succeeded(value))


unit = succeeded


def cancelled() -> Future[T]:
    """Future already cancelled."""
    return from_outcome(CANCELLED)


def faulted(error: BaseException) -> Future[T]:
    """Future already faulted with ``error``.

    Exception groups are expanded to their leaves. An error that only signals
    cancellation produces a cancelled future instead.

    Raises:
        InvalidArgumentError: If error is None
    """
    if error is None:
        raise InvalidArgumentError.missing("error")
    return from_outcome(outcome_from_errors((error,)))


def faulted_many(errors: Iterable[BaseException]) -> Future[T]:
    """Future already faulted with every error in ``errors``, flattened in order.

    Raises:
        InvalidArgumentError: If errors is None, empty, or contains None
    """
    if errors is None:
        raise InvalidArgumentError.missing("errors")
    return from_outcome(outcome_from_errors(list(errors)))


def clone_settled(future: Future[T]) -> Future[T]:
    """Independent future with the same terminal state as a settled one.

    The clone shares the success value (same identity) and the error sequence.

    Raises:
        InvalidArgumentError: If future is None
        InvalidStateError: If future has not settled yet
    """
    if future is None:
        raise InvalidArgumentError.missing("future")
    outcome = read_state(future)
    if isinstance(outcome, Pending):
        raise InvalidStateError("cannot clone a future that has not settled")
    return from_outcome(outcome)
