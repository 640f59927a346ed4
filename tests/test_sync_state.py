"""
Tests for the document cache.

Verifies that:
- Missing or corrupt cache files load as empty
- Records round-trip with camelCase keys and unknown keys preserved
- upsert() replaces by relative path and mark_failed() keeps metadata
"""

import json
import tempfile
from pathlib import Path
from unittest.mock import patch

import pytest

from docsync.core.errors import PersistenceError
from docsync.manifest import Category
from docsync.sync.state import SYNC_FAILED, DocumentCache, DocumentRecord
from tests.conftest import make_record


class TestDocumentCacheLoad:
    """Graceful degradation on load."""

    @pytest.fixture
    def temp_dir(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            yield Path(tmpdir)

    def test_missing_file_is_empty(self, temp_dir):
        cache = DocumentCache(temp_dir / "cache.json").load()
        assert cache.is_empty()
        assert cache.last_sync is None

    def test_corrupt_json_is_empty(self, temp_dir):
        path = temp_dir / "cache.json"
        path.write_text('{"gcf": [')
        cache = DocumentCache(path).load()
        assert cache.is_empty()

    def test_non_object_is_empty(self, temp_dir):
        path = temp_dir / "cache.json"
        path.write_text("[1, 2, 3]")
        assert DocumentCache(path).load().is_empty()

    def test_bad_category_value_ignored(self, temp_dir):
        path = temp_dir / "cache.json"
        path.write_text(json.dumps({
            "gcf": "oops",
            "policy": [{"id": "policy-a.pdf", "title": "A", "file": "policy/a.pdf"}, "junk"],
        }))
        cache = DocumentCache(path).load()
        assert cache.records(Category.GCF) == []
        assert [r.file for r in cache.records(Category.POLICY)] == ["policy/a.pdf"]

    def test_scan_only_cache_loads(self, temp_dir):
        """Records from a local scan have no syncStatus/remoteModified."""
        path = temp_dir / "cache.json"
        path.write_text(json.dumps({"gcf": [{
            "id": "gcf-a.pdf", "title": "A", "description": "",
            "file": "gcf/a.pdf", "size": "1.0 KB", "date": "2025-01-01",
        }], "policy": []}))
        record = DocumentCache(path).load().find(Category.GCF, "gcf/a.pdf")
        assert record.sync_status is None
        assert record.remote_modified is None
        assert "syncStatus" not in record.to_dict()

    def test_load_resets_previous_state(self, temp_dir):
        path = temp_dir / "cache.json"
        cache = DocumentCache(path)
        cache.upsert(Category.GCF, make_record("gcf", "a.pdf"))
        cache.load()
        assert cache.is_empty()


class TestDocumentCacheSave:
    """Persistence."""

    @pytest.fixture
    def temp_dir(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            yield Path(tmpdir)

    def test_round_trip(self, temp_dir):
        path = temp_dir / "data" / "cache.json"
        cache = DocumentCache(path)
        cache.upsert(Category.GCF, make_record("gcf", "a.pdf"))
        cache.upsert(Category.POLICY, make_record("policy", "b.pdf", sync_status=SYNC_FAILED))
        cache.last_sync = "2025-12-27T18:00:00.000Z"
        cache.save()

        raw = json.loads(path.read_text())
        assert raw["lastSync"] == "2025-12-27T18:00:00.000Z"
        assert raw["gcf"][0]["remoteModified"] == "2025-01-01T00:00:00Z"
        assert raw["policy"][0]["syncStatus"] == "failed"

        loaded = DocumentCache(path).load()
        assert loaded.to_dict() == cache.to_dict()

    def test_no_tmp_file_left(self, temp_dir):
        path = temp_dir / "cache.json"
        DocumentCache(path).save()
        assert path.exists()
        assert not (temp_dir / "cache.json.tmp").exists()

    def test_last_sync_omitted_until_set(self, temp_dir):
        path = temp_dir / "cache.json"
        DocumentCache(path).save()
        assert "lastSync" not in json.loads(path.read_text())

    def test_unknown_keys_preserved(self, temp_dir):
        path = temp_dir / "cache.json"
        path.write_text(json.dumps({
            "gcf": [{"id": "gcf-a.pdf", "title": "A", "file": "gcf/a.pdf", "pinned": True}],
            "policy": [],
            "version": 3,
        }))
        cache = DocumentCache(path).load()
        cache.save()
        raw = json.loads(path.read_text())
        assert raw["version"] == 3
        assert raw["gcf"][0]["pinned"] is True

    def test_write_failure_raises_persistence_error(self, temp_dir):
        cache = DocumentCache(temp_dir / "cache.json")
        with patch("builtins.open", side_effect=PermissionError("read-only")):
            with pytest.raises(PersistenceError):
                cache.save()


class TestDocumentCacheMutation:
    """upsert() / mark_failed() semantics."""

    def test_upsert_appends_new(self):
        cache = DocumentCache(Path("unused.json"))
        cache.upsert(Category.GCF, make_record("gcf", "a.pdf"))
        cache.upsert(Category.GCF, make_record("gcf", "b.pdf"))
        assert [r.file for r in cache.records(Category.GCF)] == ["gcf/a.pdf", "gcf/b.pdf"]

    def test_upsert_replaces_in_place(self):
        cache = DocumentCache(Path("unused.json"))
        cache.upsert(Category.GCF, make_record("gcf", "a.pdf"))
        cache.upsert(Category.GCF, make_record("gcf", "b.pdf"))
        cache.upsert(Category.GCF, make_record("gcf", "a.pdf", remote_modified="2026-01-01T00:00:00Z"))

        records = cache.records(Category.GCF)
        assert [r.file for r in records] == ["gcf/a.pdf", "gcf/b.pdf"]
        assert records[0].remote_modified == "2026-01-01T00:00:00Z"

    def test_same_name_in_other_category_is_separate(self):
        cache = DocumentCache(Path("unused.json"))
        cache.upsert(Category.GCF, make_record("gcf", "a.pdf"))
        cache.upsert(Category.POLICY, make_record("policy", "a.pdf"))
        assert len(cache.records(Category.GCF)) == 1
        assert len(cache.records(Category.POLICY)) == 1

    def test_mark_failed_keeps_metadata(self):
        cache = DocumentCache(Path("unused.json"))
        cache.upsert(Category.GCF, make_record("gcf", "a.pdf", date="2024-06-01", size="2.0 MB"))

        assert cache.mark_failed(Category.GCF, "gcf/a.pdf")

        record = cache.find(Category.GCF, "gcf/a.pdf")
        assert record.sync_status == SYNC_FAILED
        assert record.date == "2024-06-01"
        assert record.size == "2.0 MB"
        assert record.remote_modified == "2025-01-01T00:00:00Z"

    def test_mark_failed_missing_returns_false(self):
        cache = DocumentCache(Path("unused.json"))
        assert not cache.mark_failed(Category.GCF, "gcf/missing.pdf")
        assert cache.is_empty()

    def test_string_category_accepted(self):
        cache = DocumentCache(Path("unused.json"))
        cache.upsert("policy", make_record("policy", "a.pdf"))
        assert cache.find(Category.POLICY, "policy/a.pdf") is not None


class TestDocumentCacheQueries:
    """Stats and document list filtering."""

    @pytest.fixture
    def cache(self):
        cache = DocumentCache(Path("unused.json"))
        cache.upsert(Category.GCF, DocumentRecord(
            id="gcf-readiness.pdf", title="Readiness Guide", file="gcf/readiness.pdf",
        ))
        cache.upsert(Category.POLICY, DocumentRecord(
            id="policy-climate.pdf", title="Climate Policy", file="policy/climate.pdf",
            description="National readiness framework", sync_status=SYNC_FAILED,
        ))
        return cache

    def test_stats(self, cache):
        stats = cache.get_stats()
        assert stats["total_documents"] == 2
        assert stats["gcf"] == 1
        assert stats["policy"] == 1
        assert stats["failed"] == 1
        assert stats["last_sync"] is None

    def test_filter_all(self, cache):
        assert len(cache.filter_documents("all")) == 2
        assert len(cache.filter_documents()) == 2

    def test_filter_category(self, cache):
        results = cache.filter_documents("gcf")
        assert [(c, r.file) for c, r in results] == [(Category.GCF, "gcf/readiness.pdf")]

    def test_search_title_and_description(self, cache):
        results = cache.filter_documents(search="READINESS")
        assert len(results) == 2

    def test_search_no_match(self, cache):
        assert cache.filter_documents(search="budget") == []

    def test_failed_records(self, cache):
        assert [r.file for r in cache.failed_records()] == ["policy/climate.pdf"]
