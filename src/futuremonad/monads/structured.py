"""try/catch/finally expressed as a value over futures.

try_catch_finally composes three steps, each one reacting to the settled
future of the step before it:

    try phase       run try_block(); a synchronous raise becomes a faulted future
    catch phase     faulted -> first handler whose guard matches errors[0]
    finally phase   run finally_block() exactly once, on every path

Precedence (highest wins):
    finally faults/cancels > handler faults/cancels > handler outcome
    > original try outcome when unhandled

A cancellation is carried through every phase as a terminal state. Catch
handlers never see it, and finally can turn it into a fault but never into a
success.

Example:
    >>> from futuremonad import catch, faulted, succeeded, try_catch_finally
    >>> f = try_catch_finally(
    ...     lambda: faulted(KeyError("k")),
    ...     [catch(KeyError, lambda info: info.handled(7))],
    ...     lambda: succeeded(None),
    ... )
    >>> f.result()
    7
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Any, Callable, Generic, TypeAlias, TypeVar

from futuremonad.foundation.errors import InvalidArgumentError, InvalidOperationError, report
from futuremonad.runtime.concurrency.primitive import create_future, is_settled, on_settle, read_state, settle_from

from .algebra import cancelled, clone_settled, faulted, succeeded
from .bind import trace_settlement
from .outcome import CANCELLATION_ERRORS, Faulted, Succeeded

if TYPE_CHECKING:
    from concurrent.futures import Future

T = TypeVar("T")
E = TypeVar("E", bound=BaseException)

logger = logging.getLogger("futuremonad.structured")


# ─────────────────────────────────────────────────────────────────────────────
# Handler outcomes
# ─────────────────────────────────────────────────────────────────────────────


class CatchKind(StrEnum):
    """What a catch handler decided to do with the error."""
    HANDLED = "handled"   # recovered with a new value
    RETHROW = "rethrow"   # propagate the original failed future
    REPLACE = "replace"   # continue with another future
    THROW = "throw"       # fail with a new error


@dataclass(frozen=True, slots=True)
class CatchOutcome(Generic[T]):
    """A handler's decision and the future it resolves to."""

    kind: CatchKind
    future: Future[T]


@dataclass(frozen=True, slots=True)
class CatchInfo(Generic[T, E]):
    """What a catch handler receives: the failed future and its base error.

    Example:
        >>> def on_timeout(info: CatchInfo[str, TimeoutError]) -> CatchOutcome[str]:
        ...     return info.handled("cached") if info.error.args else info.rethrow()
    """

    future: Future[T]
    error: E

    def __post_init__(self) -> None:
        if self.future is None:
            raise InvalidArgumentError.missing("future")
        if self.error is None:
            raise InvalidArgumentError.missing("error")

    def handled(self, value: T) -> CatchOutcome[T]:
        return CatchOutcome(CatchKind.HANDLED, succeeded(value))

    def rethrow(self) -> CatchOutcome[T]:
        return CatchOutcome(CatchKind.RETHROW, self.future)

    def replace_with(self, future: Future[T]) -> CatchOutcome[T]:
        if future is None:
            raise InvalidArgumentError.missing("future")
        return CatchOutcome(CatchKind.REPLACE, future)

    def throw(self, error: BaseException) -> CatchOutcome[T]:
        return CatchOutcome(CatchKind.THROW, faulted(error))


HandlerFn: TypeAlias = Callable[[CatchInfo[T, Any]], "CatchOutcome[T] | Future[T]"]


@dataclass(frozen=True, slots=True)
class CatchHandler(Generic[T]):
    """A guard plus a handling function.

    Attributes:
        fn: Receives a CatchInfo, returns a CatchOutcome or a future
        exception_type: Errors of this type (and subtypes) match; None matches anything
        when: Optional extra predicate on the error
    """

    fn: HandlerFn[T]
    exception_type: type[BaseException] | None = None
    when: Callable[[BaseException], bool] | None = None

    @property
    def is_specific(self) -> bool:
        return self.exception_type is not None

    def matches(self, error: BaseException) -> bool:
        if self.exception_type is not None and not isinstance(error, self.exception_type):
            return False
        return self.when is None or bool(self.when(error))

    def handle(self, failed: Future[T], error: BaseException) -> Future[T] | None:
        out = self.fn(CatchInfo(failed, error))
        return out.future if isinstance(out, CatchOutcome) else out


def catch(
    exception_type: type[E],
    fn: Callable[[CatchInfo[T, E]], CatchOutcome[T] | Future[T]],
    *,
    when: Callable[[BaseException], bool] | None = None,
) -> CatchHandler[T]:
    """Handler for errors of ``exception_type`` and its subclasses.

    Raises:
        InvalidArgumentError: If exception_type is not an exception class or fn is None
    """
    if not (isinstance(exception_type, type) and issubclass(exception_type, BaseException)):
        raise InvalidArgumentError(f"not an exception type: {exception_type!r}")
    if fn is None:
        raise InvalidArgumentError.missing("fn")
    return CatchHandler(fn, exception_type, when)


def catch_all(fn: HandlerFn[T]) -> CatchHandler[T]:
    """Handler that matches any error."""
    if fn is None:
        raise InvalidArgumentError.missing("fn")
    return CatchHandler(fn)


# ─────────────────────────────────────────────────────────────────────────────
# Engine
# ─────────────────────────────────────────────────────────────────────────────


def try_catch_finally(
    try_block: Callable[[], Future[T]],
    catch_handlers: Iterable[CatchHandler[T]] | None = (),
    finally_block: Callable[[], Future[object]] | None = None,
) -> Future[T]:
    """Run try_block, route a fault to the first matching handler, then run finally.

    Always returns a new future. Errors from the supplied functions are reported
    through it; only misuse is raised.

    Raises:
        InvalidArgumentError: If try_block is None, a handler is None, or there
            are neither handlers nor a finally block
    """
    if try_block is None:
        raise InvalidArgumentError.missing("try_block")
    handlers = tuple(catch_handlers or ())
    if any(h is None for h in handlers):
        raise InvalidArgumentError("catch_handlers contains None")
    if not handlers and finally_block is None:
        raise InvalidArgumentError("either a catch handler or a finally block is required")

    attempt = guarded_call("try_block", try_block)
    caught = _react(attempt, lambda done: _catch_phase(done, handlers))
    result = _react(caught, lambda done: _finally_phase(done, finally_block))
    return clone_settled(result) if is_settled(result) else result


def try_catch(try_block: Callable[[], Future[T]], *handlers: CatchHandler[T]) -> Future[T]:
    """try/catch without a finally block."""
    return try_catch_finally(try_block, handlers, None)


def try_finally(try_block: Callable[[], Future[T]], finally_block: Callable[[], Future[object]]) -> Future[T]:
    """try/finally without catch handlers."""
    if finally_block is None:
        raise InvalidArgumentError.missing("finally_block")
    return try_catch_finally(try_block, (), finally_block)


def guarded_call(what: str, fn: Callable[..., Future[T] | None], *args: object) -> Future[T]:
    """Call user code, turning a synchronous raise or a missing future into a settled one."""
    try:
        out = fn(*args)
    except CANCELLATION_ERRORS:
        return cancelled()
    except Exception as exc:
        logger.debug(f"{what} raised {type(exc).__name__}: {exc}")
        return faulted(exc)
    if out is None:
        return faulted(InvalidOperationError.no_future(what))
    return out


def _react(source: Future[T], reaction: Callable[[Future[T]], Future[T]]) -> Future[T]:
    """Continue with ``reaction(source)`` after source settles, whatever its state."""
    if is_settled(source):
        return reaction(source)
    result: Future[T] = create_future()

    def relay(done: Future[T]) -> None:
        try:
            nxt = reaction(done)
        except Exception as exc:
            logger.exception("reaction failed after settlement")
            nxt = faulted(exc)
        settle_from(result, nxt)

    on_settle(source, relay)
    return result


def _catch_phase(done: Future[T], handlers: tuple[CatchHandler[T], ...]) -> Future[T]:
    trace_settlement(logger, "try", done)
    outcome = read_state(done)
    if not isinstance(outcome, Faulted) or not handlers:
        return done
    error = outcome.base_error
    try:
        handler = next((h for h in handlers if h.matches(error)), None)
    except CANCELLATION_ERRORS:
        return cancelled()
    except Exception as exc:
        return faulted(exc)
    if handler is None:
        logger.debug(f"no catch handler matched {type(error).__name__}")
        return done
    return guarded_call("catch handler", handler.handle, done, error)


def _finally_phase(done: Future[T], finally_block: Callable[[], Future[object]] | None) -> Future[T]:
    trace_settlement(logger, "catch", done)
    if finally_block is None:
        return done
    return _react(guarded_call("finally_block", finally_block), lambda fin: _settle_finally(fin, done))


def _settle_finally(fin: Future[object], prior: Future[T]) -> Future[T]:
    trace_settlement(logger, "finally", fin)
    if isinstance(read_state(fin), Succeeded):
        return prior
    if isinstance(read_state(prior), Faulted):
        logger.warning(f"finally block overrides earlier fault ({report(prior)}) with {report(fin)}")
    return fin  # type: ignore[return-value]
