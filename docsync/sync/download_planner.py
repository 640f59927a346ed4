"""
Download planning for Document Sync.

Determines what files need to be downloaded by comparing manifest to the local cache.
"""

from dataclasses import dataclass
from pathlib import Path

from ..core.formatting import make_relative_path, parse_timestamp
from ..manifest import Category, Manifest, ManifestEntry
from .state import DocumentCache, DocumentRecord

REASON_NEW = "new"
REASON_RETRY = "retry"
REASON_UPDATED = "updated"


@dataclass
class DownloadTask:
    """A file to be downloaded."""
    category: Category
    name: str
    url: str
    local_path: Path
    rel_path: str
    size: int = 0
    modified: str = ""
    reason: str = REASON_NEW


def is_remote_newer(remote_modified: str, local: DocumentRecord) -> bool:
    """
    Check if the manifest timestamp is newer than what the cache holds.

    Compares against remoteModified, falling back to the local write date.
    Anything unparseable counts as not newer.
    """
    remote = parse_timestamp(remote_modified)
    known = parse_timestamp(local.remote_modified or local.date)
    if remote is None or known is None:
        return False
    return remote > known


def download_reason(entry: ManifestEntry, local: DocumentRecord | None) -> str | None:
    """
    Decide whether a manifest entry needs downloading.

    Returns the reason code, or None if the local copy is current.
    Failed files are always retried, whatever the timestamps say.
    """
    if local is None:
        return REASON_NEW
    if local.is_failed:
        return REASON_RETRY
    if is_remote_newer(entry.modified, local):
        return REASON_UPDATED
    return None


def plan_downloads(
    manifest: Manifest,
    cache: DocumentCache,
    docs_path: Path,
    base_url: str,
) -> list[DownloadTask]:
    """
    Plan which files need to be downloaded.

    Args:
        manifest: Remote file listing
        cache: Loaded document cache (read only)
        docs_path: Local document directory (<docs_path>/<category>/<name>)
        base_url: Server URL; files are at <base_url>/docs/<category>/<name>

    Returns:
        Tasks in manifest order, all gcf entries before all policy entries.
    """
    base_url = base_url.rstrip("/")
    tasks = []

    for category in Category:
        local_files = cache.by_path(category)

        for entry in manifest.entries(category):
            rel_path = make_relative_path(category.value, entry.name)
            reason = download_reason(entry, local_files.get(rel_path))
            if reason is None:
                continue

            tasks.append(DownloadTask(
                category=category,
                name=entry.name,
                url=f"{base_url}/docs/{category.value}/{entry.name}",
                local_path=docs_path / category.value / entry.name,
                rel_path=rel_path,
                size=entry.size,
                modified=entry.modified,
                reason=reason,
            ))

    return tasks
