from __future__ import annotations

from datetime import timedelta

import pytest
from tenacity import RetryCallState, Retrying, stop_after_attempt, wait_fixed

from rebound.domain.backoff import exponential, fixed, zero
from rebound.domain.jitter import random_jitter
from rebound.infrastructure.retry import context_from_retry_state, wait_backoff


class _Flaky:
    """Callable failing a given number of times before succeeding"""

    def __init__(self, failures: int):
        self.failures = failures
        self.calls = 0

    def __call__(self):
        self.calls += 1
        if self.calls <= self.failures:
            raise ConnectionError("boom")
        return "ok"


def _run(wait, failures: int, max_attempts: int | None = None) -> list[float]:
    sleep_calls: list[float] = []
    retrying = Retrying(
        stop=stop_after_attempt(max_attempts or failures + 1),
        wait=wait,
        sleep=sleep_calls.append,
        reraise=True,
    )
    assert retrying(_Flaky(failures)) == "ok"
    return sleep_calls


def test_exponential_delays():
    sleeps = _run(wait_backoff(exponential(timedelta(seconds=1), None, 2, False)), failures=3)
    assert sleeps == [1.0, 2.0, 4.0]


def test_exponential_delays_capped_at_max():
    sleeps = _run(wait_backoff(exponential(1, 5, 2, False)), failures=5)
    assert sleeps == [1.0, 2.0, 4.0, 5.0, 5.0]


def test_relative_exponential_uses_previous_sleep():
    sleeps = _run(wait_backoff(exponential(1, 5, 2, True)), failures=5)
    assert sleeps == [1.0, 2.0, 4.0, 5.0, 5.0]


def test_relative_exponential_with_jitter():
    """Each sleep builds on the jittered sleep before it"""
    sleeps = _run(
        wait_backoff(exponential(1, 60, 2, True), jitter=random_jitter(0.5, seed=1)),
        failures=4,
    )
    assert len(sleeps) == 4
    assert 1.0 <= sleeps[0] <= 1.5
    for previous, current in zip(sleeps, sleeps[1:]):
        assert previous - 1e-5 <= current <= previous * 3 + 1e-5
        assert 1.0 <= current <= 60.0


def test_fixed_and_zero_delays():
    assert _run(wait_backoff(fixed(0.25)), failures=2) == [0.25, 0.25]
    assert _run(wait_backoff(zero()), failures=2) == [0.0, 0.0]


def test_negative_fixed_delay_does_not_sleep_backwards():
    assert _run(wait_backoff(fixed(-1)), failures=1) == [0.0]


def test_combines_with_tenacity_waits():
    sleeps = _run(wait_backoff(fixed(1)) + wait_fixed(0.5), failures=2)
    assert sleeps == [1.5, 1.5]


def test_gives_up_after_stop():
    sleep_calls: list[float] = []
    retrying = Retrying(
        stop=stop_after_attempt(3),
        wait=wait_backoff(exponential(1)),
        sleep=sleep_calls.append,
        reraise=True,
    )
    with pytest.raises(ConnectionError):
        retrying(_Flaky(10))
    assert sleep_calls == [1.0, 2.0]


def test_context_from_retry_state():
    state = RetryCallState(retry_object=None, fn=None, args=(), kwargs={})
    first = context_from_retry_state(state)
    assert first.iteration == 1
    assert first.previous_backoff is None

    assert context_from_retry_state(state, timedelta(seconds=9)).previous_backoff is None

    state.attempt_number = 3
    state.upcoming_sleep = 7.0
    later = context_from_retry_state(state, timedelta(seconds=2.5))
    assert later.iteration == 3
    assert later.previous_backoff == timedelta(seconds=2.5)


def test_relative_exponential_combined_with_fixed_wait():
    """The added wait is not fed back into the next relative backoff"""
    wait = wait_backoff(exponential(1, None, 2, True)) + wait_fixed(0.5)
    assert _run(wait, failures=4) == [1.5, 2.5, 4.5, 8.5]


def test_shared_wait_tracks_each_retry_loop_separately():
    wait = wait_backoff(exponential(1, None, 2, True))
    assert _run(wait, failures=3) == [1.0, 2.0, 4.0]
    assert _run(wait, failures=3) == [1.0, 2.0, 4.0]
