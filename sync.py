#!/usr/bin/env python3
"""
Document Sync - Keep the local PDF library in step with the document server.

Fetches the server manifest, downloads new, updated and previously failed
documents one at a time, and records the result in .docsync/cache.json.
"""

import argparse
import os
import sys
from datetime import datetime
from pathlib import Path

from docsync import __version__
from docsync.config import SyncSettings
from docsync.core.logging import TeeOutput, debug_log
from docsync.core.paths import (
    get_cache_path,
    get_docs_path,
    get_logs_dir,
    get_settings_path,
    ensure_docs_dirs,
)
from docsync.manifest import Category
from docsync.sync import (
    DocumentCache,
    DocumentSync,
    SyncEvents,
    document_exists,
    scan_local_documents,
)
from docsync.sync.document_sync import RESULT_BUSY
from docsync.ui import SyncEventPrinter, display


# ============================================================================
# Main Application
# ============================================================================


class DocSyncApp:
    """Main application controller."""

    def __init__(self, server_url: str = None):
        self.settings = SyncSettings.load(get_settings_path())
        if server_url:
            self.settings.server_url = server_url

        self.docs_path = get_docs_path()
        self.cache_path = get_cache_path()

        created = ensure_docs_dirs(self.docs_path, Category)
        for path in created:
            debug_log(f"INIT | created directory | path={path}")

        self.events = SyncEvents()
        self.events.subscribe(SyncEventPrinter())
        self.syncer = DocumentSync(
            self.settings,
            cache_file=self.cache_path,
            docs_path=self.docs_path,
            events=self.events,
        )

    def handle_sync(self) -> int:
        display.section_header(f"Sync from {self.settings.base_url}")
        result = self.syncer.sync()
        if result.stage == RESULT_BUSY:
            display.sync_busy()
            return 0
        display.sync_result(result)
        return 0 if result.success else 1

    def handle_scan(self) -> int:
        """Rebuild the cache from the docs directory."""
        display.section_header(f"Scan {self.docs_path}")
        documents = scan_local_documents(self.docs_path)
        cache = DocumentCache(self.cache_path)
        cache.replace_all(documents)
        cache.save()
        display.scan_complete(len(documents[Category.GCF]), len(documents[Category.POLICY]), self.cache_path)
        return 0

    def handle_status(self) -> int:
        display.section_header("Cache status")
        cache = DocumentCache(self.cache_path).load()
        if cache.is_empty():
            display.cache_empty()
            return 0
        display.cache_summary(cache.get_stats())
        missing = [
            (c, r) for c, r in cache.all_records()
            if not r.is_failed and not document_exists(self.docs_path, r.file)
        ]
        if missing:
            display.missing_summary(len(missing))
        failed = [(c, r) for c, r in cache.all_records() if r.is_failed]
        if failed:
            print()
            for category, record in failed:
                display.document_row(category.value, record)
            display.failed_not_in_manifest_hint()
        return 0

    def handle_list(self, category: str = None, search: str = "") -> int:
        display.section_header("Documents")
        cache = DocumentCache(self.cache_path).load()
        if cache.is_empty():
            display.cache_empty()
            return 0
        documents = cache.filter_documents(category, search)
        if not documents:
            display.no_documents()
            return 0
        for cat, record in documents:
            on_disk = document_exists(self.docs_path, record.file)
            display.document_row(cat.value, record, missing=not on_disk)
        return 0


def main() -> int:
    """Entry point."""
    parser = argparse.ArgumentParser(
        description="Document Sync - Keep local documents in step with the document server"
    )
    parser.add_argument("--server", help="Server base URL (overrides settings.json)")
    parser.add_argument("--root", help="App directory holding docs/ and .docsync/")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(dest="command")
    subparsers.add_parser("sync", help="Download new, updated and failed documents (default)")
    subparsers.add_parser("scan", help="Rebuild the cache from the local docs folder")
    subparsers.add_parser("status", help="Show cache summary and failed documents")
    list_parser = subparsers.add_parser("list", help="List cached documents")
    list_parser.add_argument("--category", choices=["all"] + [c.value for c in Category], default="all")
    list_parser.add_argument("--search", default="", help="Filter by title or description")

    args = parser.parse_args()

    if args.root:
        os.environ["DOCSYNC_ROOT"] = str(Path(args.root).resolve())

    # Always log to .docsync/logs/YYYY-MM-DD.log
    log_path = get_logs_dir() / f"{datetime.now().strftime('%Y-%m-%d')}.log"
    tee = TeeOutput(log_path, version=__version__)
    sys.stdout = tee

    try:
        app = DocSyncApp(server_url=args.server)
        command = args.command or "sync"
        if command == "scan":
            return app.handle_scan()
        if command == "status":
            return app.handle_status()
        if command == "list":
            return app.handle_list(args.category, args.search)
        return app.handle_sync()
    finally:
        sys.stdout = tee.terminal
        tee.close()


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\n\nCancelled by user.")
        sys.exit(0)
