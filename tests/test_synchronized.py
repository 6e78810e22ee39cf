"""Tests for the thread-safe signal variant."""

from __future__ import annotations

import concurrent.futures
import threading

import pytest

from typedsignal import (
    AlreadyConnectedError,
    DispatchConfig,
    InvocationError,
    Signal,
    SynchronizedSignal,
)


class Counter:
    def __init__(self) -> None:
        self.total = 0
        self._lock = threading.Lock()

    def add(self, amount: int) -> None:
        with self._lock:
            self.total += amount


class Reconnector:
    """Connects a new receiver each time it is called."""

    def __init__(self, signal: Signal[int]) -> None:
        self.signal = signal
        self.spawned: list[Counter] = []

    def add(self, amount: int) -> None:
        counter = Counter()
        self.spawned.append(counter)
        self.signal.connect(counter, "add")


def test_is_a_signal():
    signal = SynchronizedSignal(int, name="sync")

    assert isinstance(signal, Signal)
    assert repr(signal) == "<SynchronizedSignal 'sync' [int] connections=0>"


def test_concurrent_connects_are_all_kept():
    signal = SynchronizedSignal(int)
    counters = [Counter() for _ in range(200)]

    with concurrent.futures.ThreadPoolExecutor(max_workers=8) as executor:
        list(executor.map(lambda counter: signal.connect(counter, "add"), counters))

    assert len(signal) == len(counters)
    assert all(signal.is_connected(counter, "add") for counter in counters)


def test_concurrent_duplicate_connect_fails_for_all_but_one():
    signal = SynchronizedSignal(int)
    counter = Counter()
    barrier = threading.Barrier(4)

    def connect() -> bool:
        barrier.wait()
        try:
            signal.connect(counter, "add")
        except AlreadyConnectedError:
            return False
        return True

    with concurrent.futures.ThreadPoolExecutor(max_workers=4) as executor:
        results = list(executor.map(lambda _: connect(), range(4)))

    assert results.count(True) == 1
    assert len(signal) == 1


def test_concurrent_emit():
    signal = SynchronizedSignal(int)
    counter = Counter()
    signal.connect(counter, "add")

    with concurrent.futures.ThreadPoolExecutor(max_workers=8) as executor:
        list(executor.map(signal.emit, [1] * 500))

    assert counter.total == 500  # noqa: PLR2004


def test_handlers_can_reenter_the_signal():
    signal = SynchronizedSignal(int)
    reconnector = Reconnector(signal)
    signal.connect(reconnector, "add")

    signal.emit(1)
    assert len(reconnector.spawned) == 1
    assert len(signal) == 2  # noqa: PLR2004

    signal.emit(2)
    assert reconnector.spawned[0].total == 2  # noqa: PLR2004


def test_handler_emitting_from_other_thread():
    signal = SynchronizedSignal(int)
    counter = Counter()
    signal.connect(counter, "add")

    class Relay:
        def add(self, amount) -> None:
            if amount > 0:
                thread = threading.Thread(target=signal.emit, args=(amount - 1,))
                thread.start()
                thread.join(timeout=5)

    signal.connect(Relay(), "add")
    signal.emit(3)

    assert counter.total == 3 + 2 + 1 + 0


@pytest.mark.parametrize("policy", ["abort", "collect"])
def test_errors_propagate(policy: str):
    class Broken:
        def add(self, amount) -> None:
            raise RuntimeError(amount)

    signal = SynchronizedSignal(int, config=DispatchConfig(error_policy=policy))
    signal.connect(Broken(), "add")

    with pytest.raises((InvocationError, ExceptionGroup)):
        signal.emit(1)
