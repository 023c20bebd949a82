from __future__ import annotations

import logging
import random
from typing import List

import pytest

from fleetlock import InMemoryStore, LockManager, LockSettings


class StepClock:
    """Each now_ms() call moves time forward by step_ms, so one SET NX takes step_ms."""

    def __init__(self, start_ms: int = 1_700_000_000_000, step_ms: int = 10):
        self.t = start_ms
        self.step_ms = step_ms

    def now_ms(self) -> int:
        t = self.t
        self.t += self.step_ms
        return t


class RecordingSleep:
    def __init__(self):
        self.calls: List[float] = []

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


class CountingStore:
    """Wraps a store and records every call made to it."""

    def __init__(self, inner):
        self.inner = inner
        self.sets: List[tuple] = []
        self.deletes: List[tuple] = []

    def set_if_absent_with_expiry(self, key, value, ttl_seconds):
        self.sets.append((key, value, ttl_seconds))
        return self.inner.set_if_absent_with_expiry(key, value, ttl_seconds)

    def compare_and_delete(self, key, expected_value):
        self.deletes.append((key, expected_value))
        return self.inner.compare_and_delete(key, expected_value)


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def counting(store) -> CountingStore:
    return CountingStore(store)


@pytest.fixture
def sleeper() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def test_logger() -> logging.Logger:
    # propagates to root so caplog sees it
    return logging.getLogger("tests.fleetlock")


@pytest.fixture
def make_manager(counting, sleeper, test_logger):
    def _make(settings: LockSettings = None, clock=None, **kwargs) -> LockManager:
        return LockManager(
            counting,
            settings=settings,
            clock=clock or StepClock(),
            logger=test_logger,
            sleep=sleeper,
            rng=random.Random(7),
            **kwargs,
        )
    return _make
