"""
Sync operations module.

Handles download planning, file downloading, cache state and sync orchestration.
"""

from .state import DocumentCache, DocumentRecord, SYNC_SUCCESS, SYNC_FAILED
from .download_planner import (
    DownloadTask,
    plan_downloads,
    REASON_NEW,
    REASON_RETRY,
    REASON_UPDATED,
)
from .downloader import FileDownloader, DownloadResult
from .events import (
    SyncEvents,
    StatusEvent,
    ProgressEvent,
    CompleteEvent,
    ErrorEvent,
    event_payload,
)
from .document_sync import DocumentSync, SyncResult, SyncSession, SyncStage
from .scanner import scan_local_documents, document_exists

__all__ = [
    # Cache
    "DocumentCache",
    "DocumentRecord",
    "SYNC_SUCCESS",
    "SYNC_FAILED",
    # Download planning
    "DownloadTask",
    "plan_downloads",
    "REASON_NEW",
    "REASON_RETRY",
    "REASON_UPDATED",
    # Downloader
    "FileDownloader",
    "DownloadResult",
    # Events
    "SyncEvents",
    "StatusEvent",
    "ProgressEvent",
    "CompleteEvent",
    "ErrorEvent",
    "event_payload",
    # Orchestration
    "DocumentSync",
    "SyncResult",
    "SyncSession",
    "SyncStage",
    # Local scan
    "scan_local_documents",
    "document_exists",
]
