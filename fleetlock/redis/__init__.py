from .client import redis_client
from .locks import LockHandle, LockManager, drift_ms, validity_ms
from .store import InMemoryStore, RedisStore, Store
