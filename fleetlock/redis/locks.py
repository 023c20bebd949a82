"""Redis distributed lock (single-instance Redlock).

Acquire: SET resource token NX EX ttl, then check how much of the TTL is left
after the round-trip and the clock-drift margin. Release: Lua compare-and-delete,
so only the holder of the token can remove the key.
"""

from __future__ import annotations

import contextlib
import logging
import math
import random
import time
from dataclasses import dataclass
from typing import Any, Callable, Iterator, Optional, TypeVar

from ..config.loader import LockSettings, check_int, validate_settings
from ..domain.errors import LockAcquisitionError
from ..domain.time import Clock, SystemClock
from ..domain.tokens import TokenGenerator
from ..logging.logger import get_logger, warn
from .client import redis_client
from .store import RedisStore, Store

T = TypeVar("T")

# Redis expires with 1ms precision, plus 1ms minimum drift for small TTLs.
_DRIFT_FLOOR_MS = 2


@dataclass(frozen=True)
class LockHandle:
    resource: str
    token: str
    validity_ms: int


def drift_ms(ttl_seconds: int, drift_factor: float) -> int:
    return math.floor(ttl_seconds * 1000 * drift_factor) + _DRIFT_FLOOR_MS


def validity_ms(ttl_seconds: int, elapsed_ms: int, drift_factor: float) -> int:
    return ttl_seconds * 1000 - elapsed_ms - drift_ms(ttl_seconds, drift_factor)


class LockManager:
    """Mutual exclusion across processes through one shared store.

    Collaborators are injected so the manager can run against InMemoryStore,
    a scripted clock and a recording sleep in tests.
    """

    def __init__(
        self,
        store: Store,
        *,
        settings: Optional[LockSettings] = None,
        tokens: Optional[TokenGenerator] = None,
        clock: Optional[Clock] = None,
        logger: Optional[logging.Logger] = None,
        metrics: Optional[Any] = None,
        sleep: Callable[[float], None] = time.sleep,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.store = store
        self.settings = validate_settings(settings or LockSettings())
        self.tokens = tokens or TokenGenerator()
        self.clock = clock or SystemClock()
        self.logger = logger or get_logger("fleetlock", self.settings.log_level)
        self.metrics = metrics
        self._sleep = sleep
        self._rng = rng or random.Random()

    @classmethod
    def from_settings(cls, settings: LockSettings, **kwargs: Any) -> "LockManager":
        store = RedisStore(redis_client(settings.redis_url, timeout_ms=settings.store_timeout_ms))
        return cls(store, settings=settings, **kwargs)

    def _inc(self, metric_name: str, labels: tuple) -> None:
        if self.metrics is None:
            return
        m = getattr(self.metrics, metric_name, None)
        if m is None:
            return
        try:
            m.labels(*labels).inc()
        except Exception:
            pass

    def _observe(self, metric_name: str, labels: tuple, value: float) -> None:
        if self.metrics is None:
            return
        m = getattr(self.metrics, metric_name, None)
        if m is None:
            return
        try:
            m.labels(*labels).observe(value)
        except Exception:
            pass

    @property
    def _service(self) -> str:
        return getattr(self.metrics, "service", "unknown")

    def _retry_sleep_seconds(self, retry_delay_ms: int) -> float:
        if retry_delay_ms <= 0:
            return 0.0
        return self._rng.randrange(retry_delay_ms) / 1000.0

    def acquire(
        self,
        resource: str,
        ttl_seconds: Optional[int] = None,
        retry_count: Optional[int] = None,
        retry_delay_ms: Optional[int] = None,
    ) -> LockHandle:
        ttl = self.settings.default_ttl_seconds if ttl_seconds is None else ttl_seconds
        attempts = self.settings.retry_count if retry_count is None else retry_count
        delay_ms = self.settings.retry_delay_ms if retry_delay_ms is None else retry_delay_ms
        check_int("ttl_seconds", ttl, 1)
        check_int("retry_count", attempts, 1)
        check_int("retry_delay_ms", delay_ms, 0)

        # one token per call, shared by every attempt
        token = self.tokens.generate()

        for attempt in range(attempts):
            self._inc("lock_acquire_attempts_total", (self._service,))
            start = self.clock.now_ms()
            ok = self.store.set_if_absent_with_expiry(resource, token, ttl)
            elapsed = self.clock.now_ms() - start
            validity = validity_ms(ttl, elapsed, self.settings.clock_drift_factor)
            if ok and validity > 0:
                self._inc("lock_acquire_total", (self._service, "acquired"))
                self._observe("lock_validity_ms", (self._service,), validity)
                return LockHandle(resource=resource, token=token, validity_ms=validity)
            if ok:
                # set, but the window was used up in transit: give the key back
                self.store.compare_and_delete(resource, token)
            if attempt < attempts - 1:
                self._sleep(self._retry_sleep_seconds(delay_ms))

        self._inc("lock_acquire_total", (self._service, "failed"))
        warn(self.logger, "lock_acquisition_failed", resource=resource, ttl_seconds=ttl)
        raise LockAcquisitionError(resource)

    def release(self, handle: LockHandle) -> bool:
        """Delete the key only if it still holds handle.token.

        False means the lock already expired or someone else holds it now.
        """
        released = self.store.compare_and_delete(handle.resource, handle.token)
        self._inc("lock_release_total", (self._service, "released" if released else "not_owner"))
        return released

    @contextlib.contextmanager
    def lock(self, resource: str, ttl_seconds: Optional[int] = None) -> Iterator[LockHandle]:
        handle = self.acquire(resource, ttl_seconds)
        try:
            yield handle
        finally:
            self.release(handle)

    def with_lock(self, resource: str, body: Callable[[LockHandle], T], ttl_seconds: Optional[int] = None) -> T:
        with self.lock(resource, ttl_seconds) as handle:
            return body(handle)
