"""Terminal states of a future as a tagged union.

A future is read into one of four variants:

    Pending                  not settled yet
    Succeeded(value)         ran to completion
    Cancelled                settled as cancelled
    Faulted(errors)          settled with one or more leaf errors

Outcomes are plain immutable data. Combinators move them from one future to the
next instead of raising and catching.

Example:
    >>> from futuremonad.monads.outcome import Faulted, Succeeded
    >>> Succeeded(1).match(succeeded=str, cancelled=lambda: "c", faulted=len)
    '1'
    >>> Faulted.of(ExceptionGroup("g", [KeyError(), ValueError()])).errors
    (KeyError(), ValueError())
"""

from __future__ import annotations

import asyncio
import concurrent.futures
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Callable, ClassVar, Generic, TypeAlias, TypeVar

from futuremonad.foundation.errors import InvalidArgumentError, InvalidStateError

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

T = TypeVar("T")
U = TypeVar("U")

CANCELLATION_ERRORS: tuple[type[BaseException], ...] = (
    concurrent.futures.CancelledError,
    asyncio.CancelledError,
)


class OutcomeState(StrEnum):
    """Lifecycle states of a future."""
    PENDING = "pending"
    SUCCEEDED = "succeeded"
    CANCELLED = "cancelled"
    FAULTED = "faulted"


# ─────────────────────────────────────────────────────────────────────────────
# Error flattening
# ─────────────────────────────────────────────────────────────────────────────


def _walk(errors: Iterable[BaseException | None]) -> Iterator[BaseException]:
    for err in errors:
        if err is None:
            raise InvalidArgumentError("error sequence contains None")
        if isinstance(err, BaseExceptionGroup):
            yield from _walk(err.exceptions)
        else:
            yield err


def flatten_errors(errors: Iterable[BaseException | None]) -> tuple[BaseException, ...]:
    """Depth-first expansion of exception groups into their leaf errors, order kept.

    Raises:
        InvalidArgumentError: If any element is None
    """
    return tuple(_walk(errors))


def is_cancellation(errors: tuple[BaseException, ...]) -> bool:
    """True when every leaf error signals cancellation."""
    return bool(errors) and all(isinstance(e, CANCELLATION_ERRORS) for e in errors)


# ─────────────────────────────────────────────────────────────────────────────
# Variants
# ─────────────────────────────────────────────────────────────────────────────


class _Outcome:
    __slots__ = ()

    state: ClassVar[OutcomeState]

    @property
    def is_settled(self) -> bool:
        return self.state is not OutcomeState.PENDING

    def match(
        self,
        *,
        succeeded: Callable[[object], U],
        cancelled: Callable[[], U],
        faulted: Callable[[tuple[BaseException, ...]], U],
        pending: Callable[[], U] | None = None,
    ) -> U:
        """Exhaustive case analysis over the variants.

        Raises:
            InvalidStateError: If pending and no ``pending`` branch was given
        """
        match self:
            case Succeeded(value):
                return succeeded(value)
            case Faulted(errors):
                return faulted(errors)
            case Cancelled():
                return cancelled()
        if pending is None:
            raise InvalidStateError("future has not settled")
        return pending()


@dataclass(frozen=True, slots=True)
class Pending(_Outcome):
    state: ClassVar[OutcomeState] = OutcomeState.PENDING


@dataclass(frozen=True, slots=True)
class Succeeded(_Outcome, Generic[T]):
    value: T
    state: ClassVar[OutcomeState] = OutcomeState.SUCCEEDED


@dataclass(frozen=True, slots=True)
class Cancelled(_Outcome):
    state: ClassVar[OutcomeState] = OutcomeState.CANCELLED


@dataclass(frozen=True, slots=True)
class Faulted(_Outcome):
    """Faulted outcome. ``errors`` is non-empty and never contains a group."""

    errors: tuple[BaseException, ...]
    state: ClassVar[OutcomeState] = OutcomeState.FAULTED

    def __post_init__(self) -> None:
        if not self.errors:
            raise InvalidArgumentError("a faulted outcome needs at least one error")
        if any(isinstance(e, BaseExceptionGroup) for e in self.errors):
            raise InvalidArgumentError("faulted errors must be flattened; use Faulted.of()")

    @classmethod
    def of(cls, *errors: BaseException) -> Faulted:
        """Build from errors, flattening any groups."""
        return cls(flatten_errors(errors))

    @property
    def base_error(self) -> BaseException:
        """The first leaf error, used for handler matching."""
        return self.errors[0]


Outcome: TypeAlias = Pending | Succeeded | Cancelled | Faulted

PENDING = Pending()
CANCELLED = Cancelled()


def outcome_from_errors(errors: Iterable[BaseException | None]) -> Cancelled | Faulted:
    """Flatten errors into a terminal outcome; all-cancellation input means Cancelled."""
    flat = flatten_errors(errors)
    if not flat:
        raise InvalidArgumentError("at least one error is required")
    return CANCELLED if is_cancellation(flat) else Faulted(flat)
