"""Scoped resources over futures: the asynchronous ``with`` statement.

using_resource acquires a resource, runs a body against it and releases it
exactly once after the body settles, whether it succeeded, faulted or was
cancelled. Release is a finally block, so a failing release overrides the body.

Example:
    >>> import io
    >>> from futuremonad import succeeded, using_resource
    >>> buf = io.StringIO("hello")
    >>> f = using_resource(lambda: succeeded(buf), lambda r: succeeded(r.read()))
    >>> f.result(), buf.closed
    ('hello', True)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable, Protocol, TypeVar, runtime_checkable

from futuremonad.foundation.errors import InvalidArgumentError, InvalidOperationError

from .algebra import succeeded
from .bind import bind
from .structured import guarded_call, try_finally

if TYPE_CHECKING:
    from concurrent.futures import Future

R = TypeVar("R")
T = TypeVar("T")

logger = logging.getLogger("futuremonad.resource")


@runtime_checkable
class Disposable(Protocol):
    """Anything with a close() method. Owned by using_resource for the scope."""

    def close(self) -> object: ...


def close_resource(resource: object) -> None:
    """Release a resource: close() if it has one, else exit it as a context manager.

    Raises:
        InvalidOperationError: If the resource offers neither
    """
    if isinstance(resource, Disposable):
        resource.close()
    elif hasattr(resource, "__exit__"):
        resource.__exit__(None, None, None)
    else:
        raise InvalidOperationError.no_release(type(resource).__name__)


def using_resource(
    acquire: Callable[[], Future[R]],
    body: Callable[[R], Future[T]],
    *,
    release: Callable[[R], object] | None = None,
) -> Future[T]:
    """Acquire a resource, run ``body`` with it, release it exactly once.

    A failed or cancelled acquisition propagates without running the body or
    releasing anything. A None resource is passed to the body and not released.

    Args:
        acquire: Produces the resource asynchronously
        body: Uses the resource; must not release it
        release: Custom release function (default: close() / __exit__)

    Raises:
        InvalidArgumentError: If acquire or body is None
    """
    if acquire is None:
        raise InvalidArgumentError.missing("acquire")
    if body is None:
        raise InvalidArgumentError.missing("body")
    dispose = release or close_resource

    def scope(resource: R) -> Future[T]:
        def finalize() -> Future[None]:
            if resource is not None:
                logger.debug(f"releasing {type(resource).__name__}")
                dispose(resource)
            return succeeded(None)

        return try_finally(lambda: body(resource), finalize)

    return bind(guarded_call("acquire", acquire), scope)
