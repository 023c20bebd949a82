"""Configuration loader.

Design goals:
- One immutable LockSettings object, passed explicitly into LockManager.
- Environment variables are the source of truth (12-factor style); the dataclass
  defaults are the algorithm's defaults when nothing is set.
- Connection details for the store live here too; nothing else reads the env.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv(override=False)


def _env_first(*names: str, default: str = "") -> str:
    """Return the first non-empty value among several env keys."""
    for n in names:
        v = os.getenv(n)
        if v is not None and str(v).strip() != "":
            return str(v).strip()
    return default


@dataclass(frozen=True)
class LockSettings:
    # Lock algorithm
    default_ttl_seconds: int = 5
    retry_count: int = 1
    retry_delay_ms: int = 100
    # 1% of the TTL is kept back for clock drift / expiry imprecision
    clock_drift_factor: float = 0.01

    # Store (external)
    redis_url: str = "redis://localhost:6379/0"
    # socket connect + read timeout for every store round-trip
    store_timeout_ms: int = 1000

    log_level: str = "INFO"


def check_int(name: str, value: object, minimum: int) -> int:
    """Reject bools, floats and anything below minimum."""
    if isinstance(value, bool) or not isinstance(value, int) or value < minimum:
        raise ValueError(f"Invalid {name}={value!r}: must be an integer >= {minimum}")
    return value


def validate_settings(s: LockSettings) -> LockSettings:
    check_int("default_ttl_seconds", s.default_ttl_seconds, 1)
    check_int("retry_count", s.retry_count, 1)
    check_int("retry_delay_ms", s.retry_delay_ms, 0)
    check_int("store_timeout_ms", s.store_timeout_ms, 1)
    if not 0 <= s.clock_drift_factor < 1:
        raise ValueError(f"Invalid clock_drift_factor={s.clock_drift_factor!r}: must be in [0, 1)")
    return s


def load_settings() -> LockSettings:
    """Create LockSettings from the environment with basic validation.

    Env keys:
      REDIS_URL, LOCK_DEFAULT_TTL_SECONDS, LOCK_RETRY_COUNT,
      LOCK_RETRY_DELAY_MS, LOCK_CLOCK_DRIFT_FACTOR, LOCK_STORE_TIMEOUT_MS, LOG_LEVEL
    """
    d = LockSettings()
    s = LockSettings(
        default_ttl_seconds=int(_env_first("LOCK_DEFAULT_TTL_SECONDS", default=str(d.default_ttl_seconds))),
        retry_count=int(_env_first("LOCK_RETRY_COUNT", default=str(d.retry_count))),
        retry_delay_ms=int(_env_first("LOCK_RETRY_DELAY_MS", default=str(d.retry_delay_ms))),
        clock_drift_factor=float(_env_first("LOCK_CLOCK_DRIFT_FACTOR", default=str(d.clock_drift_factor))),
        redis_url=_env_first("REDIS_URL", default=d.redis_url),
        store_timeout_ms=int(_env_first("LOCK_STORE_TIMEOUT_MS", default=str(d.store_timeout_ms))),
        log_level=_env_first("LOG_LEVEL", default=d.log_level).upper(),
    )
    return validate_settings(s)
