from .client import SessionClient
from .constants import APP_VERSION
from .coordinator import (
    PendingEntry,
    PendingQueue,
    RefreshCoordinator,
    RefreshOutcome,
    RefreshStats,
    SessionState,
)
from .descriptor import RequestDescriptor
from .errors import (
    ErrorClass,
    NormalizedError,
    RefreshInterruptedError,
    classify_error,
    normalize_error,
)
from .navigation import (
    FileRedirectMemory,
    MemoryNavigator,
    MemoryRedirectMemory,
    Navigator,
    RedirectMemory,
    SessionExpiredHandler,
)
from .policy import SessionRecoveryPolicy
from .transport import HttpTransport, RetryTransport

__version__ = APP_VERSION

__all__ = [
    "ErrorClass",
    "FileRedirectMemory",
    "HttpTransport",
    "MemoryNavigator",
    "MemoryRedirectMemory",
    "Navigator",
    "NormalizedError",
    "PendingEntry",
    "PendingQueue",
    "RedirectMemory",
    "RefreshCoordinator",
    "RefreshInterruptedError",
    "RefreshOutcome",
    "RefreshStats",
    "RequestDescriptor",
    "RetryTransport",
    "SessionClient",
    "SessionExpiredHandler",
    "SessionRecoveryPolicy",
    "SessionState",
    "classify_error",
    "normalize_error",
]
