"""
Exception types for Document Sync.

Manifest errors abort a sync. Download errors are recorded against the file
and the sync continues. Cache read errors never leave the cache store.
"""


class SyncError(Exception):
    """Base class for all sync failures."""


class NetworkError(SyncError):
    """Server unreachable: connection refused, DNS failure, reset, etc."""


class RequestTimeoutError(NetworkError):
    """Request exceeded the configured time bound."""


class HttpStatusError(SyncError):
    """Server answered with a non-success status."""

    def __init__(self, status: int, reason: str = ""):
        self.status = status
        self.reason = reason
        super().__init__(f"Server returned {status}: {reason}")


class FormatError(SyncError):
    """Manifest body does not have the expected shape."""


class WriteVerificationError(SyncError):
    """Downloaded bytes were written but the file is not on disk."""


class PersistenceError(SyncError):
    """Cache file could not be written."""
