"""Error taxonomy for combinator misuse and mid-chain failures.

Argument and state errors are raised synchronously, before any asynchronous
work starts. Operation errors only ever travel inside a faulted future.
"""

from __future__ import annotations

import concurrent.futures
from enum import StrEnum
from typing import ClassVar


class ErrorCode(StrEnum):
    """Machine-readable codes for library errors."""
    INVALID_ARGUMENT = "INVALID_ARGUMENT"
    INVALID_STATE = "INVALID_STATE"
    INVALID_OPERATION = "INVALID_OPERATION"


class FutureMonadError(Exception):
    """Base for all errors raised by futuremonad itself."""

    code: ClassVar[ErrorCode]


class InvalidArgumentError(FutureMonadError, ValueError):
    """A required argument was absent or the argument set was unusable.

    Always raised synchronously by the combinator that received it.
    """

    code = ErrorCode.INVALID_ARGUMENT

    @classmethod
    def missing(cls, name: str) -> InvalidArgumentError:
        return cls(f"'{name}' is required")


class InvalidStateError(FutureMonadError, concurrent.futures.InvalidStateError):
    """Operation applied to a future that is not in the required state."""

    code = ErrorCode.INVALID_STATE


class InvalidOperationError(FutureMonadError, RuntimeError):
    """A supplied function returned no future, or a resource cannot be released.

    Reported through a faulted future.
    """

    code = ErrorCode.INVALID_OPERATION

    @classmethod
    def no_future(cls, what: str) -> InvalidOperationError:
        return cls(f"{what} returned no future")

    @classmethod
    def no_release(cls, type_name: str) -> InvalidOperationError:
        return cls(f"{type_name} has no close() or __exit__() to release it")
