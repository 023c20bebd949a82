from .metrics import LockMetrics
