"""Tests for the bounded request scheduler."""

import threading
import time

import pytest

from core.scheduler import RequestScheduler


def test_results_for_every_item():
    with RequestScheduler(3) as scheduler:
        results = dict(scheduler.map(lambda x: x * x, range(10)))
    assert results == {i: i * i for i in range(10)}


def test_never_exceeds_max_workers():
    lock = threading.Lock()
    in_flight = 0
    peak = 0

    def slow(_):
        nonlocal in_flight, peak
        with lock:
            in_flight += 1
            peak = max(peak, in_flight)
        time.sleep(0.02)
        with lock:
            in_flight -= 1
        return True

    with RequestScheduler(2) as scheduler:
        results = list(scheduler.map(slow, range(12)))

    assert len(results) == 12
    assert peak <= 2


def test_exceptions_are_yielded_not_raised():
    def maybe_fail(x):
        if x % 2:
            raise RuntimeError(f"boom {x}")
        return x

    with RequestScheduler(2) as scheduler:
        results = dict(scheduler.map(maybe_fail, range(6)))

    assert results[0] == 0
    assert isinstance(results[1], RuntimeError)
    assert str(results[3]) == "boom 3"


def test_rejects_zero_workers():
    with pytest.raises(ValueError):
        RequestScheduler(0)


def test_reusable_after_shutdown():
    scheduler = RequestScheduler(1)
    assert dict(scheduler.map(str, [1])) == {1: "1"}
    scheduler.shutdown()
    assert dict(scheduler.map(str, [2])) == {2: "2"}
    scheduler.shutdown()
