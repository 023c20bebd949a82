from .errors import LockAcquisitionError, LockError, RandomnessUnavailableError, StoreCommunicationError
from .time import Clock, SystemClock, now_ms
from .tokens import TokenGenerator
