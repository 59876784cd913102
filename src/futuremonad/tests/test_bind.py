"""Tests for bind/then chaining.

Validates:
- Monad laws over settled futures
- Cancellation and faults skip the continuation
- Inline reactions on pending sources
- Synchronous raise policy
"""

from __future__ import annotations

import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable

import pytest

from futuremonad import (
    Faulted,
    InvalidArgumentError,
    InvalidOperationError,
    Succeeded,
    bind,
    cancelled,
    create_future,
    faulted,
    faulted_many,
    pipe,
    read_state,
    settle,
    succeeded,
    then,
)


def _never(_: object) -> Future[object]:
    raise AssertionError("continuation must not run")


# ═════════════════════════════════════════════════════════════════════════════
# Property Tests - Monad Laws
# ═════════════════════════════════════════════════════════════════════════════


def test_monad_left_identity() -> None:
    """Monad law: return a >>= f = f a"""
    f: Callable[[int], Future[int]] = lambda x: succeeded(x * 2)

    assert read_state(bind(succeeded(21), f)) == read_state(f(21))


def test_monad_right_identity() -> None:
    """Monad law: m >>= return = m"""
    m = succeeded(42)

    assert read_state(bind(m, succeeded)) == read_state(m)


def test_monad_associativity() -> None:
    """Monad law: (m >>= f) >>= g = m >>= (\\x -> f x >>= g)"""
    f: Callable[[int], Future[int]] = lambda x: succeeded(x + 1)
    g: Callable[[int], Future[int]] = lambda x: succeeded(x * 2)

    left = bind(bind(succeeded(5), f), g)
    right = bind(succeeded(5), lambda x: bind(f(x), g))

    assert read_state(left) == read_state(right) == Succeeded(12)
    assert read_state(pipe(succeeded(5), f, g)) == Succeeded(12)


def test_associativity_holds_for_faults() -> None:
    err = ValueError("mid")
    f: Callable[[int], Future[int]] = lambda x: faulted(err)
    g: Callable[[int], Future[int]] = lambda x: succeeded(x)

    left = bind(bind(succeeded(1), f), g)
    right = bind(succeeded(1), lambda x: bind(f(x), g))

    assert read_state(left) == read_state(right) == Faulted((err,))


# ═════════════════════════════════════════════════════════════════════════════
# Propagation
# ═════════════════════════════════════════════════════════════════════════════


def test_bind_cancelled_skips_continuation() -> None:
    assert bind(cancelled(), _never).cancelled()


def test_bind_faulted_keeps_error_sequence() -> None:
    errors = [ValueError("a"), KeyError("b")]
    result = bind(faulted_many(errors), _never)

    assert read_state(result) == Faulted(tuple(errors))


def test_bind_returns_continuation_future() -> None:
    inner = succeeded("inner")

    assert bind(succeeded(1), lambda _: inner) is inner


def test_bind_continuation_returning_none_faults() -> None:
    result = bind(succeeded(1), lambda _: None)  # type: ignore[arg-type, return-value]

    outcome = read_state(result)
    assert isinstance(outcome, Faulted)
    assert isinstance(outcome.base_error, InvalidOperationError)


def test_bind_rejects_missing_arguments() -> None:
    with pytest.raises(InvalidArgumentError):
        bind(None, succeeded)  # type: ignore[arg-type]
    with pytest.raises(InvalidArgumentError):
        bind(succeeded(1), None)  # type: ignore[arg-type]


def test_bind_settled_source_raise_reaches_caller() -> None:
    def explode(_: int) -> Future[int]:
        raise LookupError("sync")

    with pytest.raises(LookupError):
        bind(succeeded(1), explode)


def test_bind_pending_source_raise_faults_result() -> None:
    err = LookupError("late")

    def explode(_: int) -> Future[int]:
        raise err

    source: Future[int] = create_future()
    result = bind(source, explode)
    settle(source, Succeeded(1))

    assert read_state(result) == Faulted((err,))


# ═════════════════════════════════════════════════════════════════════════════
# Pending sources
# ═════════════════════════════════════════════════════════════════════════════


def test_bind_pending_runs_inline_on_settle() -> None:
    source: Future[int] = create_future()
    seen: list[int] = []

    def record(x: int) -> Future[int]:
        seen.append(x)
        return succeeded(x + 1)

    result = bind(source, record)
    assert not result.done()
    assert seen == []

    settle(source, Succeeded(1))
    assert seen == [1]
    assert result.result(timeout=0) == 2


def test_bind_waits_for_inner_future() -> None:
    inner: Future[str] = create_future()
    result = bind(succeeded(1), lambda _: inner)
    chained = then(result, str.upper)

    assert not chained.done()
    settle(inner, Succeeded("ok"))
    assert chained.result(timeout=0) == "OK"


def test_bind_pending_cancellation_propagates() -> None:
    source: Future[int] = create_future()
    result = bind(source, _never)
    source.cancel()

    assert result.cancelled()


def test_continuations_fire_in_registration_order() -> None:
    source: Future[int] = create_future()
    order: list[str] = []
    bind(source, lambda x: (order.append("a"), succeeded(x))[1])
    bind(source, lambda x: (order.append("b"), succeeded(x))[1])

    settle(source, Succeeded(0))
    assert order == ["a", "b"]


def test_continuation_runs_on_settling_thread() -> None:
    gate = threading.Event()
    threads: list[str] = []

    def work() -> int:
        gate.wait(timeout=5)
        return 7

    with ThreadPoolExecutor(max_workers=1, thread_name_prefix="settler") as pool:
        source = pool.submit(work)
        result = then(source, lambda x: (threads.append(threading.current_thread().name), x * 6)[1])
        gate.set()
        assert result.result(timeout=5) == 42

    assert threads and threads[0].startswith("settler")


# ═════════════════════════════════════════════════════════════════════════════
# then / pipe
# ═════════════════════════════════════════════════════════════════════════════


def test_then_maps_value() -> None:
    assert then(succeeded(4), lambda x: x * x).result() == 16


def test_then_lifts_none() -> None:
    assert read_state(then(succeeded(1), lambda _: None)) == Succeeded(None)


def test_then_rejects_missing_function() -> None:
    with pytest.raises(InvalidArgumentError):
        then(succeeded(1), None)  # type: ignore[arg-type]


def test_pipe_without_continuations_is_identity() -> None:
    source = succeeded(3)

    assert pipe(source) is source
