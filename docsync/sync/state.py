"""
Document cache for Document Sync.

Stores the known documents per category in .docsync/cache.json:
    {
      "gcf":    [{"id", "title", "description", "file", "size", "date",
                  "remoteModified", "syncStatus"}, ...],
      "policy": [...],
      "lastSync": "2025-12-27T18:00:00.000Z"
    }

The cache is read once per sync, mutated in memory and written once at the end.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, Optional

from ..core.errors import PersistenceError
from ..core.logging import debug_log
from ..core.paths import get_cache_path
from ..manifest import Category

SYNC_SUCCESS = "success"
SYNC_FAILED = "failed"

# Keys owned by DocumentRecord; anything else in a stored record is carried through
_RECORD_KEYS = ("id", "title", "description", "file", "size", "date", "remoteModified", "syncStatus")


@dataclass
class DocumentRecord:
    """One known document."""
    id: str
    title: str
    file: str
    size: str = ""
    date: str = ""
    description: str = ""
    remote_modified: Optional[str] = None
    sync_status: Optional[str] = None
    extra: dict = field(default_factory=dict)

    @property
    def is_failed(self) -> bool:
        return self.sync_status == SYNC_FAILED

    @property
    def filename(self) -> str:
        return self.file.rsplit("/", 1)[-1]

    @classmethod
    def from_dict(cls, data: dict) -> "DocumentRecord":
        return cls(
            id=data.get("id", ""),
            title=data.get("title", ""),
            file=data.get("file", ""),
            size=data.get("size", ""),
            date=data.get("date", ""),
            description=data.get("description", ""),
            remote_modified=data.get("remoteModified"),
            sync_status=data.get("syncStatus"),
            extra={k: v for k, v in data.items() if k not in _RECORD_KEYS},
        )

    def to_dict(self) -> dict:
        data = {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "file": self.file,
            "size": self.size,
            "date": self.date,
        }
        if self.remote_modified is not None:
            data["remoteModified"] = self.remote_modified
        if self.sync_status is not None:
            data["syncStatus"] = self.sync_status
        data.update(self.extra)
        return data


class DocumentCache:
    """
    Manages .docsync/cache.json

    A missing or corrupt file loads as an empty cache. Saves replace the whole
    file (write to .tmp, then rename).
    """

    def __init__(self, cache_file: Path = None):
        # For production: use centralized paths from paths.py
        # For testing: pass cache_file inside a temp directory
        self.cache_file = cache_file or get_cache_path()
        self.last_sync: Optional[str] = None
        self._records: dict[Category, list[DocumentRecord]] = {c: [] for c in Category}
        self._extra: dict = {}

    # --- Core I/O ---

    def load(self) -> "DocumentCache":
        """Load cache from disk. Never raises; bad input gives an empty cache."""
        self._reset()

        if not self.cache_file.exists():
            debug_log(f"CACHE | no cache file | path={self.cache_file}")
            return self

        try:
            with open(self.cache_file, encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError, UnicodeDecodeError) as e:
            debug_log(f"CACHE | unreadable, starting fresh | error={e}")
            return self

        if not isinstance(data, dict):
            debug_log("CACHE | not an object, starting fresh")
            return self

        for category in Category:
            items = data.get(category.value)
            if not isinstance(items, list):
                continue
            self._records[category] = [
                DocumentRecord.from_dict(item) for item in items if isinstance(item, dict)
            ]

        last_sync = data.get("lastSync")
        self.last_sync = last_sync if isinstance(last_sync, str) else None
        self._extra = {
            k: v for k, v in data.items()
            if k not in {c.value for c in Category} and k != "lastSync"
        }
        return self

    def save(self):
        """
        Atomic write: write to .tmp file, then rename.

        Raises:
            PersistenceError: the file could not be written
        """
        try:
            self.cache_file.parent.mkdir(parents=True, exist_ok=True)
            tmp_file = self.cache_file.with_suffix(".json.tmp")
            with open(tmp_file, "w", encoding="utf-8") as f:
                json.dump(self.to_dict(), f, indent=2)
            tmp_file.replace(self.cache_file)
        except OSError as e:
            raise PersistenceError(f"Could not write cache {self.cache_file}: {e}") from e

    def _reset(self):
        self.last_sync = None
        self._records = {c: [] for c in Category}
        self._extra = {}

    def to_dict(self) -> dict:
        data = dict(self._extra)
        for category in Category:
            data[category.value] = [r.to_dict() for r in self._records[category]]
        if self.last_sync is not None:
            data["lastSync"] = self.last_sync
        return data

    # --- Lookups ---

    def records(self, category: Category) -> list[DocumentRecord]:
        """Records for one category, in stored order (live list)."""
        return self._records[Category(category)]

    def all_records(self) -> Iterator[tuple[Category, DocumentRecord]]:
        for category in Category:
            for record in self._records[category]:
                yield category, record

    def by_path(self, category: Category) -> dict[str, DocumentRecord]:
        """Lookup from relative path ("gcf/file.pdf") to record."""
        return {r.file: r for r in self.records(category)}

    def find(self, category: Category, rel_path: str) -> Optional[DocumentRecord]:
        for record in self.records(category):
            if record.file == rel_path:
                return record
        return None

    def failed_records(self) -> list[DocumentRecord]:
        return [r for _, r in self.all_records() if r.is_failed]

    def is_empty(self) -> bool:
        return not any(self._records[c] for c in Category)

    def get_stats(self) -> dict:
        """Get summary statistics."""
        return {
            "total_documents": sum(len(self._records[c]) for c in Category),
            **{c.value: len(self._records[c]) for c in Category},
            "failed": len(self.failed_records()),
            "last_sync": self.last_sync,
        }

    # --- Write operations ---

    def upsert(self, category: Category, record: DocumentRecord):
        """Replace the record with the same relative path, or append it."""
        records = self.records(category)
        for i, existing in enumerate(records):
            if existing.file == record.file:
                records[i] = record
                return
        records.append(record)

    def mark_failed(self, category: Category, rel_path: str) -> bool:
        """
        Flag an existing record as failed, leaving its metadata untouched.

        Returns:
            False if no record has that path.
        """
        record = self.find(category, rel_path)
        if record is None:
            return False
        record.sync_status = SYNC_FAILED
        return True

    def replace_all(self, records: dict[Category, list[DocumentRecord]]):
        """Swap in a fresh set of records (local scan)."""
        for category in Category:
            self._records[category] = list(records.get(category, []))

    # --- Queries for the document list ---

    def filter_documents(self, category: Optional[str] = None, search: str = "") -> list[tuple[Category, DocumentRecord]]:
        """
        Documents matching a category ("all" or None for every category) and a
        case-insensitive search over title and description.
        """
        term = search.lower().strip()
        results = []
        for cat, record in self.all_records():
            if category not in (None, "", "all") and cat.value != category:
                continue
            if term and term not in record.title.lower() and term not in record.description.lower():
                continue
            results.append((cat, record))
        return results
