"""Error handling for futuremonad.

- ErrorCode: Codes for library errors
- InvalidArgumentError/InvalidStateError: synchronous misuse errors
- InvalidOperationError: mid-chain failure, carried by faulted futures
- FaultReport/ErrorInfo: structured snapshots of settled futures
"""

from .errors import (
    ErrorCode,
    FutureMonadError,
    InvalidArgumentError,
    InvalidOperationError,
    InvalidStateError,
)
from .types import ErrorInfo, FaultReport, report

__all__ = [
    "ErrorCode", "FutureMonadError",
    "InvalidArgumentError", "InvalidStateError", "InvalidOperationError",
    "ErrorInfo", "FaultReport", "report",
]
