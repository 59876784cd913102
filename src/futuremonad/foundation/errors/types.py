"""Structured fault reports for settled futures.

Uses Pydantic models so reports can be logged, compared and serialized. Reports
are snapshots: they never hold the exceptions themselves, only their type names
and messages.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Annotated

from pydantic import BaseModel, ConfigDict, Field, computed_field

if TYPE_CHECKING:
    from concurrent.futures import Future

    from futuremonad.monads.outcome import Outcome


class ErrorInfo(BaseModel):
    """One leaf error of a faulted future."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    type: Annotated[str, Field(min_length=1, description="Qualified exception type name")]
    message: str = ""

    @classmethod
    def from_exception(cls, exc: BaseException) -> ErrorInfo:
        kind = type(exc)
        name = kind.__qualname__ if kind.__module__ == "builtins" else f"{kind.__module__}.{kind.__qualname__}"
        return cls(type=name, message=str(exc))

    def __str__(self) -> str:
        return f"{self.type}: {self.message}" if self.message else self.type


class FaultReport(BaseModel):
    """Snapshot of a future's terminal state.

    Attributes:
        state: One of pending, succeeded, cancelled, faulted
        value: repr() of the success value, if any
        errors: Flattened leaf errors, in order, if faulted

    Example:
        >>> from futuremonad import faulted, report
        >>> report(faulted(KeyError("x"))).error_count
        1
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        json_schema_extra={
            "title": "Fault Report",
            "examples": [{"state": "faulted", "errors": [{"type": "KeyError", "message": "'x'"}]}],
        },
    )

    state: str
    value: str | None = Field(default=None, description="repr() of the success value")
    errors: tuple[ErrorInfo, ...] = ()

    @computed_field
    @property
    def error_count(self) -> int:
        return len(self.errors)

    @computed_field
    @property
    def is_cancelled(self) -> bool:
        return self.state == "cancelled"

    @classmethod
    def from_outcome(cls, outcome: Outcome) -> FaultReport:
        from futuremonad.monads.outcome import Faulted, Succeeded

        match outcome:
            case Succeeded(value):
                return cls(state=outcome.state.value, value=repr(value))
            case Faulted(errors):
                return cls(state=outcome.state.value, errors=tuple(ErrorInfo.from_exception(e) for e in errors))
            case _:
                return cls(state=outcome.state.value)

    def render(self) -> str:
        """Single-line human-readable form, used in log messages."""
        if self.errors:
            return f"{self.state}: " + "; ".join(str(e) for e in self.errors)
        if self.value is not None:
            return f"{self.state}: {self.value}"
        return self.state

    __str__ = render


def report(future: Future[object]) -> FaultReport:
    """Describe a future's current state without blocking."""
    from futuremonad.runtime.concurrency.primitive import read_state

    return FaultReport.from_outcome(read_state(future))
