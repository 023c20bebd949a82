from __future__ import annotations


class LockError(Exception):
    """Base class for lock errors."""
    pass


class LockAcquisitionError(LockError):
    """Raised when every attempt to acquire a lock has been used up."""

    def __init__(self, resource: str):
        self.resource = resource
        super().__init__(f"failed to acquire lock for resource {resource}")


class StoreCommunicationError(LockError):
    """Raised when the backing store is unreachable or answers with a protocol error."""
    pass


class RandomnessUnavailableError(LockError):
    """Raised when the OS cannot supply secure random bytes for a lock token."""
    pass
