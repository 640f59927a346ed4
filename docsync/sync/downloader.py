"""
File downloader for Document Sync.

Downloads one document at a time with progress reporting.
Uses asyncio + aiohttp; the sync loop awaits each download before starting the next.
"""

import asyncio
import ssl
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

import aiohttp

from ..core.errors import (
    HttpStatusError,
    NetworkError,
    RequestTimeoutError,
    SyncError,
    WriteVerificationError,
)
from ..core.formatting import file_date, generate_display_name
from ..core.logging import debug_log
from ..core.paths import get_certifi_ssl_context
from .download_planner import DownloadTask

# on_progress(filename, percent)
ProgressCallback = Callable[[str, int], None]


@dataclass
class DownloadResult:
    """Result of a single file download."""
    success: bool
    file_path: Path
    message: str
    size: int = 0
    display_name: str = ""
    date: str = ""
    error: Optional[SyncError] = None


def percent_complete(done: int, total: int) -> int:
    """Whole percent, rounding halves up, clamped to 0-100."""
    return max(0, min(100, int(done * 100 / total + 0.5)))


class FileDownloader:
    """
    Async file downloader with progress tracking.

    Each request is bounded by a total timeout. The body is buffered in memory
    and written in one go, then the file is checked on disk.
    """

    def __init__(self, timeout: float = 30.0, chunk_size: int = 32768):
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self.timeout_seconds = timeout
        self.chunk_size = chunk_size

    def create_session(self) -> aiohttp.ClientSession:
        """Session shared by every download of one sync."""
        ssl_context = ssl.create_default_context(cafile=get_certifi_ssl_context())
        connector = aiohttp.TCPConnector(limit=1, ssl=ssl_context)
        return aiohttp.ClientSession(timeout=self.timeout, connector=connector)

    async def download(
        self,
        session: aiohttp.ClientSession,
        task: DownloadTask,
        on_progress: Optional[ProgressCallback] = None,
    ) -> DownloadResult:
        """Download one file. Failures come back as a result, not an exception."""
        debug_log(f"DOWNLOAD | start | file={task.rel_path} | reason={task.reason} | url={task.url}")
        try:
            data = await self._fetch(session, task, on_progress)
            size, date = self._write_file(task.local_path, data)
        except asyncio.TimeoutError:
            error = RequestTimeoutError(f"Request timed out after {self.timeout_seconds:g}s")
            return self._failure(task, error)
        except aiohttp.ClientError as e:
            return self._failure(task, NetworkError(str(e) or type(e).__name__))
        except SyncError as e:
            return self._failure(task, e)

        debug_log(f"DOWNLOAD | ok | file={task.rel_path} | size={size}")
        return DownloadResult(
            success=True,
            file_path=task.local_path,
            message=f"OK: {task.name}",
            size=size,
            display_name=generate_display_name(task.name),
            date=date,
        )

    async def _fetch(
        self,
        session: aiohttp.ClientSession,
        task: DownloadTask,
        on_progress: Optional[ProgressCallback],
    ) -> bytes:
        """Read the whole response body, reporting progress per chunk."""
        async with session.get(task.url, allow_redirects=True) as response:
            if not 200 <= response.status < 300:
                raise HttpStatusError(response.status, response.reason or "")

            total_bytes = response.content_length
            downloaded_bytes = 0
            chunks = []

            async for chunk in response.content.iter_chunked(self.chunk_size):
                chunks.append(chunk)
                downloaded_bytes += len(chunk)
                if on_progress and total_bytes:
                    on_progress(task.name, percent_complete(downloaded_bytes, total_bytes))

        return b"".join(chunks)

    def _write_file(self, path: Path, data: bytes) -> tuple[int, str]:
        """
        Write data and confirm the file landed.

        Returns:
            (size on disk, local modification date)
        """
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "wb") as f:
                f.write(data)
        except OSError as e:
            raise WriteVerificationError(f"Could not write {path.name}: {e}") from e

        if not path.exists():
            raise WriteVerificationError("File was not written successfully")

        return path.stat().st_size, file_date(path)

    def _failure(self, task: DownloadTask, error: SyncError) -> DownloadResult:
        debug_log(f"DOWNLOAD | failed | file={task.rel_path} | error={error}")
        return DownloadResult(
            success=False,
            file_path=task.local_path,
            message=f"ERR: {task.name} - {error}",
            error=error,
        )

    def download_one(self, task: DownloadTask, on_progress: Optional[ProgressCallback] = None) -> DownloadResult:
        """Blocking wrapper: download a single file in its own session."""
        async def run():
            async with self.create_session() as session:
                return await self.download(session, task, on_progress)

        return asyncio.run(run())
