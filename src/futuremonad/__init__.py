"""futuremonad - monadic composition over concurrent futures.

Chaining, structured exception handling and scoped resources written as plain
functions over ``concurrent.futures.Future``. Every combinator returns a future
whose terminal state (succeeded, cancelled, faulted) carries the outcome; only
misuse is ever raised.

Quick Start:
    >>> from futuremonad import bind, catch, succeeded, then, try_catch_finally
    >>>
    >>> def lookup(key: str):
    ...     return bind(succeeded({"a": 1}), lambda d: succeeded(d[key]))
    >>>
    >>> f = try_catch_finally(
    ...     lambda: lookup("b"),
    ...     [catch(KeyError, lambda info: info.handled(0))],
    ...     lambda: succeeded(None),
    ... )
    >>> then(f, lambda v: v + 1).result()
    1

Scoped resources:
    >>> import io
    >>> from futuremonad import using_resource
    >>> buf = io.StringIO("hello")
    >>> using_resource(lambda: succeeded(buf), lambda r: succeeded(r.read())).result(), buf.closed
    ('hello', True)

Asyncio:
    >>> import asyncio
    >>> from futuremonad import to_awaitable
    >>> async def main():
    ...     return await to_awaitable(f)
    >>> asyncio.run(main())
    0
"""

from .monads import (
    CANCELLATION_ERRORS,
    Cancelled,
    CatchHandler,
    CatchInfo,
    CatchKind,
    CatchOutcome,
    Disposable,
    Faulted,
    Outcome,
    OutcomeState,
    Pending,
    Succeeded,
    bind,
    cancelled,
    catch,
    catch_all,
    clone_settled,
    close_resource,
    faulted,
    faulted_many,
    flatten_errors,
    from_outcome,
    pipe,
    succeeded,
    then,
    try_catch,
    try_catch_finally,
    try_finally,
    unit,
    using_resource,
)
from .foundation.config import FutureMonadSettings, clear_settings_cache, configure_logging, get_settings
from .foundation.errors import (
    ErrorCode,
    ErrorInfo,
    FaultReport,
    FutureMonadError,
    InvalidArgumentError,
    InvalidOperationError,
    InvalidStateError,
    report,
)
from .runtime.concurrency import (
    create_future,
    from_coroutine,
    is_settled,
    on_settle,
    read_state,
    settle,
    to_awaitable,
    wait,
)

__version__ = "0.1.0"

__all__ = [
    # Outcomes
    "Outcome", "OutcomeState", "Pending", "Succeeded", "Cancelled", "Faulted",
    "CANCELLATION_ERRORS", "flatten_errors",
    # Primitive
    "create_future", "settle", "on_settle", "is_settled", "read_state",
    # Algebra
    "succeeded", "unit", "cancelled", "faulted", "faulted_many", "clone_settled", "from_outcome",
    # Bind
    "bind", "then", "pipe",
    # Structured exceptions
    "CatchHandler", "CatchInfo", "CatchKind", "CatchOutcome",
    "catch", "catch_all", "try_catch_finally", "try_catch", "try_finally",
    # Resources
    "Disposable", "close_resource", "using_resource",
    # Errors
    "ErrorCode", "FutureMonadError", "InvalidArgumentError", "InvalidStateError", "InvalidOperationError",
    "ErrorInfo", "FaultReport", "report",
    # Config
    "FutureMonadSettings", "get_settings", "clear_settings_cache", "configure_logging",
    # Interop
    "to_awaitable", "from_coroutine", "wait",
]
