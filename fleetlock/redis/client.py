from __future__ import annotations
from typing import Optional
import redis

def redis_client(redis_url: str, timeout_ms: Optional[int] = None) -> redis.Redis:
    """Sync client for the lock store.

    timeout_ms bounds both the TCP connect and every command round-trip, so a
    server that accepts but never answers surfaces as redis.exceptions.TimeoutError.
    """
    timeout = timeout_ms / 1000.0 if timeout_ms is not None else None
    return redis.Redis.from_url(
        redis_url,
        decode_responses=True,
        socket_timeout=timeout,
        socket_connect_timeout=timeout,
    )
