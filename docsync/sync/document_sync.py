"""
Sync orchestration for Document Sync.

Coordinates manifest fetch, download planning, the download loop and saving the cache.

    idle -> fetching-manifest -> comparing -> downloading -> persisting -> done
                   |                 |            |              |
                   +-----------------+------------+--------------+--> error
"""

import asyncio
from dataclasses import asdict, dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Optional

from ..config import SyncSettings
from ..core.formatting import (
    format_file_size,
    generate_display_name,
    make_document_id,
    timestamp_date,
    utc_now_iso,
)
from ..core.logging import debug_log
from ..core.paths import get_cache_path, get_docs_path
from ..manifest import Manifest, fetch_manifest
from .download_planner import DownloadTask, plan_downloads
from .downloader import DownloadResult, FileDownloader
from .events import CompleteEvent, ErrorEvent, ProgressEvent, StatusEvent, SyncEvents
from .state import SYNC_FAILED, SYNC_SUCCESS, DocumentCache, DocumentRecord

# Result stages reported to the caller
RESULT_COMPLETE = "complete"
RESULT_FETCH_MANIFEST = "fetch-manifest"
RESULT_ERROR = "error"
RESULT_BUSY = "busy"


class SyncStage(str, Enum):
    """Where a sync currently is."""
    IDLE = "idle"
    FETCHING_MANIFEST = "fetching-manifest"
    COMPARING = "comparing"
    DOWNLOADING = "downloading"
    PERSISTING = "persisting"
    DONE = "done"
    ERROR = "error"

    def __str__(self) -> str:
        return self.value


@dataclass
class SyncResult:
    """Outcome of one sync request."""
    success: bool
    stage: str
    message: str
    downloaded: int = 0
    failed: int = 0
    total: int = 0
    error: Optional[str] = None

    def to_dict(self) -> dict:
        data = asdict(self)
        if data["error"] is None:
            del data["error"]
        return data


@dataclass
class SyncSession:
    """
    State owned by one sync client.

    The in-progress flag is a plain attribute checked on entry; it is not a
    lock and assumes a single caller.
    """
    stage: SyncStage = SyncStage.IDLE
    in_progress: bool = False
    cache: Optional[DocumentCache] = None
    last_result: Optional[SyncResult] = None


def record_success(cache: DocumentCache, task: DownloadTask, result: DownloadResult):
    """Insert or replace the record for a downloaded file."""
    cache.upsert(task.category, DocumentRecord(
        id=make_document_id(task.category.value, task.name),
        title=result.display_name,
        description="",
        file=task.rel_path,
        size=format_file_size(result.size),
        date=result.date,
        remote_modified=task.modified,
        sync_status=SYNC_SUCCESS,
    ))


def record_failure(cache: DocumentCache, task: DownloadTask):
    """
    Flag a failed download for retry on the next sync.

    An existing record keeps its last good metadata; a file never downloaded
    before gets a placeholder built from the manifest entry.
    """
    if cache.mark_failed(task.category, task.rel_path):
        return

    size = task.size if isinstance(task.size, (int, float)) else 0
    cache.records(task.category).append(DocumentRecord(
        id=make_document_id(task.category.value, task.name),
        title=generate_display_name(task.name),
        description="",
        file=task.rel_path,
        size=format_file_size(size),
        date=timestamp_date(task.modified),
        remote_modified=task.modified,
        sync_status=SYNC_FAILED,
    ))


def summary_message(downloaded: int, failed: int) -> str:
    if failed > 0:
        return f"Synced {downloaded} files, {failed} failed. Failed files will retry on next sync."
    return f"Successfully synced {downloaded} files"


class DocumentSync:
    """Syncs the local document cache against the server manifest."""

    def __init__(
        self,
        settings: SyncSettings,
        cache_file: Optional[Path] = None,
        docs_path: Optional[Path] = None,
        events: Optional[SyncEvents] = None,
        session: Optional[SyncSession] = None,
        downloader: Optional[FileDownloader] = None,
        fetcher: Callable[[SyncSettings], Manifest] = fetch_manifest,
    ):
        self.settings = settings
        self.cache_file = cache_file or get_cache_path()
        self.docs_path = docs_path or get_docs_path()
        self.events = events if events is not None else SyncEvents()
        self.session = session if session is not None else SyncSession()
        if downloader is None:
            downloader = FileDownloader(timeout=settings.request_timeout, chunk_size=settings.chunk_size)
        self.downloader = downloader
        self.fetch = fetcher

    @property
    def stage(self) -> SyncStage:
        return self.session.stage

    @property
    def is_syncing(self) -> bool:
        return self.session.in_progress

    def _enter(self, stage: SyncStage):
        debug_log(f"SYNC | stage={stage}")
        self.session.stage = stage

    def sync(self) -> SyncResult:
        """
        Run one sync.

        A request made while another sync on this session is running is
        ignored and reported with stage "busy".
        """
        if self.session.in_progress:
            debug_log(f"SYNC | ignored, already running | stage={self.session.stage}")
            return SyncResult(success=False, stage=RESULT_BUSY, message="Sync already in progress")

        self.session.in_progress = True
        self.events.clear()
        try:
            result = self._run()
        finally:
            self.session.in_progress = False

        self.session.last_result = result
        return result

    def _run(self) -> SyncResult:
        debug_log("SYNC | starting remote document sync")
        self._enter(SyncStage.FETCHING_MANIFEST)
        try:
            manifest = self.fetch(self.settings)
        except Exception as e:
            self._enter(SyncStage.ERROR)
            debug_log(f"SYNC | manifest failed | error={e}")
            return SyncResult(
                success=False,
                stage=RESULT_FETCH_MANIFEST,
                message=f"Failed to fetch manifest: {e}",
                error=str(e),
            )

        try:
            self._enter(SyncStage.COMPARING)
            cache = DocumentCache(self.cache_file).load()
            self.session.cache = cache
            tasks = plan_downloads(manifest, cache, self.docs_path, self.settings.base_url)
            debug_log(f"PLANNER | manifest={manifest.total_files} | to_download={len(tasks)}")

            if not tasks:
                self._enter(SyncStage.DONE)
                return SyncResult(success=True, stage=RESULT_COMPLETE, message="All documents are up to date")

            self._enter(SyncStage.DOWNLOADING)
            downloaded, failed = asyncio.run(self._download_all(tasks, cache))

            self._enter(SyncStage.PERSISTING)
            cache.last_sync = utc_now_iso()
            cache.save()

            self._enter(SyncStage.DONE)
            total = len(tasks)
            self.events.emit(CompleteEvent(downloaded=downloaded, failed=failed, total=total))
            debug_log(f"SYNC_SUMMARY | downloaded={downloaded} | failed={failed} | total={total}")

            return SyncResult(
                success=True,
                stage=RESULT_COMPLETE,
                message=summary_message(downloaded, failed),
                downloaded=downloaded,
                failed=failed,
                total=total,
            )
        except Exception as e:
            self._enter(SyncStage.ERROR)
            debug_log(f"SYNC | error | stage_error={type(e).__name__} | error={e}")
            self.events.emit(ErrorEvent(message=str(e)))
            return SyncResult(
                success=False,
                stage=RESULT_ERROR,
                message=f"Sync failed: {e}",
                error=str(e),
            )

    async def _download_all(self, tasks: list[DownloadTask], cache: DocumentCache) -> tuple[int, int]:
        """Download tasks strictly one after another, folding results into the cache."""
        total = len(tasks)
        downloaded = 0
        failed = 0

        def on_progress(filename: str, percent: int):
            self.events.emit(ProgressEvent(file=filename, percent=percent))

        self.events.emit(StatusEvent(stage=str(SyncStage.DOWNLOADING), total=total, current=0, file=""))

        async with self.downloader.create_session() as session:
            for i, task in enumerate(tasks, 1):
                debug_log(f"SYNC | [{i}/{total}] {task.rel_path} | reason={task.reason}")
                self.events.emit(StatusEvent(
                    stage=str(SyncStage.DOWNLOADING), total=total, current=i, file=task.name, percent=0,
                ))

                result = await self.downloader.download(session, task, on_progress)

                if result.success:
                    downloaded += 1
                    record_success(cache, task, result)
                else:
                    failed += 1
                    record_failure(cache, task)

        return downloaded, failed
