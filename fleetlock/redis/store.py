"""Store backends for the lock.

Both operations a store exposes must be atomic at the store itself:
- set_if_absent_with_expiry -> SET key value NX EX ttl
- compare_and_delete        -> GET + compare + DEL inside one Lua script

A read followed by a separate delete would let a holder whose key already expired
delete the key of the next holder.
"""

from __future__ import annotations

import threading
import time
from typing import Callable, Dict, Optional, Protocol, Tuple

import redis

from ..domain.errors import StoreCommunicationError

_UNLOCK_LUA = """
if redis.call("get", KEYS[1]) == ARGV[1] then
  return redis.call("del", KEYS[1])
else
  return 0
end
"""


class Store(Protocol):
    def set_if_absent_with_expiry(self, key: str, value: str, ttl_seconds: int) -> bool:
        ...

    def compare_and_delete(self, key: str, expected_value: str) -> bool:
        ...


class RedisStore:
    """Store over a single Redis instance (redis-py, sync)."""

    def __init__(self, r: redis.Redis):
        self.r = r

    def set_if_absent_with_expiry(self, key: str, value: str, ttl_seconds: int) -> bool:
        try:
            return bool(self.r.set(key, value, nx=True, ex=int(ttl_seconds)))
        except redis.exceptions.RedisError as exc:
            raise StoreCommunicationError(f"SET NX failed for {key!r}: {exc}") from exc

    def compare_and_delete(self, key: str, expected_value: str) -> bool:
        try:
            res = self.r.eval(_UNLOCK_LUA, 1, key, expected_value)
        except redis.exceptions.RedisError as exc:
            raise StoreCommunicationError(f"unlock script failed for {key!r}: {exc}") from exc
        return int(res or 0) == 1


class InMemoryStore:
    """In-process store with TTL expiry.

    Used for:
    - Tests
    - Local single-process runs

    NOT for production: it only excludes threads of the current process.
    """

    def __init__(self, now: Callable[[], float] = time.monotonic):
        self._data: Dict[str, Tuple[str, float]] = {}  # key -> (value, expires_at)
        self._lock = threading.Lock()
        self._now = now

    def _live(self, key: str) -> Optional[str]:
        entry = self._data.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if self._now() >= expires_at:
            del self._data[key]
            return None
        return value

    def _sweep(self) -> None:
        now = self._now()
        for k in [k for k, (_, exp) in self._data.items() if now >= exp]:
            del self._data[k]

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._live(key)

    def set_if_absent_with_expiry(self, key: str, value: str, ttl_seconds: int) -> bool:
        with self._lock:
            # drop expired keys of every resource, not just this one
            self._sweep()
            if key in self._data:
                return False
            self._data[key] = (value, self._now() + ttl_seconds)
            return True

    def compare_and_delete(self, key: str, expected_value: str) -> bool:
        with self._lock:
            if self._live(key) != expected_value:
                return False
            del self._data[key]
            return True
