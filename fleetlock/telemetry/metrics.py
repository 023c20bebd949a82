from __future__ import annotations

from typing import Optional

from prometheus_client import CollectorRegistry, Counter, Histogram, REGISTRY


class LockMetrics:
    """Prometheus metrics for lock activity.

    Note: prometheus_client uses a global default registry, so a process should build
    one LockMetrics per service name. Pass a private CollectorRegistry in tests.
    """

    def __init__(self, service: str, registry: Optional[CollectorRegistry] = None):
        self.service = service
        reg = registry if registry is not None else REGISTRY

        self.lock_acquire_total = Counter(
            "lock_acquire_total",
            "Lock acquisitions (by final result: acquired / failed)",
            ("service", "result"),
            registry=reg,
        )
        self.lock_acquire_attempts_total = Counter(
            "lock_acquire_attempts_total",
            "SET NX attempts made while acquiring locks",
            ("service",),
            registry=reg,
        )
        self.lock_validity_ms = Histogram(
            "lock_validity_ms",
            "Validity window (ms) left on successful acquisition",
            ("service",),
            buckets=(10, 50, 100, 250, 500, 1000, 2500, 5000, 10000, 30000, 60000),
            registry=reg,
        )
        self.lock_release_total = Counter(
            "lock_release_total",
            "Lock releases (released / not_owner)",
            ("service", "result"),
            registry=reg,
        )
