"""Monadic composition over futures.

- Outcome: Pending/Succeeded/Cancelled/Faulted terminal states as data
- Algebra: succeeded, cancelled, faulted, faulted_many, clone_settled
- Bind: bind, then, pipe
- Structured: try_catch_finally with typed catch handlers
- Resource: using_resource

Example:
    >>> from futuremonad.monads import bind, succeeded, then
    >>> then(bind(succeeded(2), lambda x: succeeded(x * 3)), str).result()
    '6'
"""

# outcome must load before anything that pulls in the runtime primitive
from .outcome import (
    CANCELLATION_ERRORS,
    Cancelled,
    Faulted,
    Outcome,
    OutcomeState,
    Pending,
    Succeeded,
    flatten_errors,
    is_cancellation,
    outcome_from_errors,
)
from .algebra import cancelled, clone_settled, faulted, faulted_many, from_outcome, succeeded, unit
from .bind import bind, pipe, then
from .structured import (
    CatchHandler,
    CatchInfo,
    CatchKind,
    CatchOutcome,
    catch,
    catch_all,
    try_catch,
    try_catch_finally,
    try_finally,
)
from .resource import Disposable, close_resource, using_resource

__all__ = [
    # Outcomes
    "Outcome", "OutcomeState", "Pending", "Succeeded", "Cancelled", "Faulted",
    "CANCELLATION_ERRORS", "flatten_errors", "is_cancellation", "outcome_from_errors",
    # Algebra
    "succeeded", "unit", "cancelled", "faulted", "faulted_many", "clone_settled", "from_outcome",
    # Bind
    "bind", "then", "pipe",
    # Structured exceptions
    "CatchHandler", "CatchInfo", "CatchKind", "CatchOutcome",
    "catch", "catch_all", "try_catch_finally", "try_catch", "try_finally",
    # Resources
    "Disposable", "close_resource", "using_resource",
]
