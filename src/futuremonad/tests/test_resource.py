"""Tests for using_resource: release exactly once on every exit path."""

from __future__ import annotations

from concurrent.futures import Future

import pytest

from futuremonad import (
    Disposable,
    Faulted,
    InvalidArgumentError,
    InvalidOperationError,
    Succeeded,
    cancelled,
    create_future,
    faulted,
    read_state,
    settle,
    succeeded,
    using_resource,
)


class Resource:
    """Disposable test double that records close() calls."""

    def __init__(self, *, fail_with: BaseException | None = None) -> None:
        self.closed = 0
        self._fail_with = fail_with

    def close(self) -> None:
        self.closed += 1
        if self._fail_with is not None:
            raise self._fail_with


class Managed:
    """Context-manager-only resource."""

    def __init__(self) -> None:
        self.exits = 0

    def __enter__(self) -> Managed:
        return self

    def __exit__(self, *exc: object) -> None:
        self.exits += 1


def test_resource_is_disposable() -> None:
    assert isinstance(Resource(), Disposable)
    assert not isinstance(Managed(), Disposable)


def test_body_success_releases_once() -> None:
    res = Resource()
    result = using_resource(lambda: succeeded(res), lambda r: succeeded("used"))

    assert result.result() == "used"
    assert res.closed == 1


def test_body_raise_releases_once_and_faults() -> None:
    res = Resource()
    e3 = ValueError("E3")

    def body(_: Resource) -> Future[str]:
        raise e3

    result = using_resource(lambda: succeeded(res), body)

    assert read_state(result) == Faulted((e3,))
    assert res.closed == 1


def test_body_fault_releases_once() -> None:
    res = Resource()
    err = KeyError("body")
    result = using_resource(lambda: succeeded(res), lambda r: faulted(err))

    assert read_state(result) == Faulted((err,))
    assert res.closed == 1


def test_body_cancelled_releases_once() -> None:
    res = Resource()
    result = using_resource(lambda: succeeded(res), lambda r: cancelled())

    assert result.cancelled()
    assert res.closed == 1


def test_release_failure_overrides_body_success() -> None:
    err = OSError("close failed")
    res = Resource(fail_with=err)
    result = using_resource(lambda: succeeded(res), lambda r: succeeded(1))

    assert read_state(result) == Faulted((err,))
    assert res.closed == 1


def test_release_waits_for_pending_body() -> None:
    res = Resource()
    work: Future[int] = create_future()
    result = using_resource(lambda: succeeded(res), lambda r: work)

    assert res.closed == 0
    settle(work, Succeeded(3))
    assert res.closed == 1
    assert result.result(timeout=0) == 3


def test_pending_acquire() -> None:
    res = Resource()
    acquired: Future[Resource] = create_future()
    result = using_resource(lambda: acquired, lambda r: succeeded(r is res))

    assert not result.done()
    settle(acquired, Succeeded(res))
    assert result.result(timeout=0) is True
    assert res.closed == 1


def test_failed_acquire_skips_body_and_release() -> None:
    err = ConnectionError("pool exhausted")
    calls: list[object] = []
    result = using_resource(lambda: faulted(err), lambda r: calls.append(r) or succeeded(None))

    assert read_state(result) == Faulted((err,))
    assert calls == []


def test_acquire_raising_is_reported_through_future() -> None:
    err = ConnectionError("refused")

    def acquire() -> Future[Resource]:
        raise err

    assert read_state(using_resource(acquire, lambda r: succeeded(None))) == Faulted((err,))


def test_cancelled_acquire() -> None:
    assert using_resource(cancelled, lambda r: succeeded(None)).cancelled()


def test_none_resource_is_not_released() -> None:
    seen: list[object] = []
    result = using_resource(lambda: succeeded(None), lambda r: (seen.append(r), succeeded("ok"))[1])

    assert result.result() == "ok"
    assert seen == [None]


def test_context_manager_resource_exits_once() -> None:
    res = Managed()
    using_resource(lambda: succeeded(res), lambda r: succeeded(None)).result()

    assert res.exits == 1


def test_unreleasable_resource_faults_with_operation_error() -> None:
    result = using_resource(lambda: succeeded(object()), lambda r: succeeded(None))

    error = read_state(result).base_error
    assert isinstance(error, InvalidOperationError)
    assert not isinstance(error, InvalidArgumentError)
    assert str(error) == "object has no close() or __exit__() to release it"


def test_custom_release() -> None:
    released: list[str] = []
    result = using_resource(lambda: succeeded("handle"), lambda r: succeeded(len(r)), release=released.append)

    assert result.result() == 6
    assert released == ["handle"]


def test_rejects_missing_arguments() -> None:
    with pytest.raises(InvalidArgumentError):
        using_resource(None, lambda r: succeeded(None))  # type: ignore[arg-type]
    with pytest.raises(InvalidArgumentError):
        using_resource(lambda: succeeded(Resource()), None)  # type: ignore[arg-type]
