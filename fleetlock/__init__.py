"""fleetlock: single-instance Redlock over Redis."""

from .config import LockSettings, load_settings
from .domain import (
    Clock,
    LockAcquisitionError,
    LockError,
    RandomnessUnavailableError,
    StoreCommunicationError,
    SystemClock,
    TokenGenerator,
)
from .redis import InMemoryStore, LockHandle, LockManager, RedisStore, Store, redis_client
from .telemetry import LockMetrics

__all__ = [
    "Clock",
    "InMemoryStore",
    "LockAcquisitionError",
    "LockError",
    "LockHandle",
    "LockManager",
    "LockMetrics",
    "LockSettings",
    "RandomnessUnavailableError",
    "RedisStore",
    "Store",
    "StoreCommunicationError",
    "SystemClock",
    "TokenGenerator",
    "load_settings",
    "redis_client",
]

__version__ = "0.1.0"
