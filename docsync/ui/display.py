"""
Centralized display functions for formatted output.

Any output with color codes or complex formatting belongs here.
Plain text prints can be inlined at the call site.

Usage:
    from docsync.ui import display
    display.sync_result(result)
"""

import sys

from ..sync.events import CompleteEvent, ErrorEvent, ProgressEvent, StatusEvent, SyncEvent
from .colors import Colors

_c = Colors


# === Section chrome ===

def section_header(title: str):
    print()
    print(f"{_c.BOLD}{title}{_c.RESET}")
    print(f"{_c.DIM}{'─' * 50}{_c.RESET}")


# === Sync events ===

class SyncEventPrinter:
    """Listener that renders sync events as terminal lines."""

    def __init__(self, stream=None):
        self.stream = stream or sys.stdout
        self._progress_open = False

    def _end_progress_line(self):
        if self._progress_open:
            self.stream.write("\n")
            self._progress_open = False

    def __call__(self, event: SyncEvent):
        if isinstance(event, StatusEvent):
            if event.current == 0:
                print(f"  Found {event.total} file(s) to download", file=self.stream)
                return
            self._end_progress_line()
            print(f"  {_c.MUTED}[{event.current}/{event.total}]{_c.RESET} {event.file}", file=self.stream)
        elif isinstance(event, ProgressEvent):
            self.stream.write(f"\r    ↓ {event.file} ({event.percent}%)")
            self.stream.flush()
            self._progress_open = True
        elif isinstance(event, CompleteEvent):
            self._end_progress_line()
            color = _c.RED if event.failed else _c.GREEN
            print(
                f"  {color}Downloaded {event.downloaded}, failed {event.failed}, "
                f"total {event.total}{_c.RESET}",
                file=self.stream,
            )
        elif isinstance(event, ErrorEvent):
            self._end_progress_line()
            print(f"  {_c.RED}Error:{_c.RESET} {event.message}", file=self.stream)


# === Results ===

def sync_result(result):
    print()
    if result.success and result.failed:
        print(f"  {_c.RED}{result.message}{_c.RESET}")
    elif result.success:
        print(f"  {_c.GREEN}{result.message}{_c.RESET}")
    else:
        print(f"  {_c.RED}Error:{_c.RESET} {result.message}")
    print()


def sync_busy():
    print(f"  {_c.DIM}A sync is already running.{_c.RESET}")


# === Document listings ===

def document_row(category: str, record, missing: bool = False):
    status = ""
    if record.sync_status == "failed":
        status = f" {_c.RED}[failed]{_c.RESET}"
    elif missing:
        status = f" {_c.RED}[missing]{_c.RESET}"
    print(
        f"  {_c.CYAN}{category:<7}{_c.RESET}{record.title:<40} "
        f"{_c.MUTED}{record.size:>10}  {record.date}{_c.RESET}{status}"
    )


def no_documents():
    print(f"  {_c.DIM}No documents.{_c.RESET}")


def cache_empty():
    print(f"  {_c.DIM}Cache is empty. Run 'sync' or 'scan' first.{_c.RESET}")


def missing_summary(count: int):
    print(f"  {_c.RED}Missing:{_c.RESET} {count} cached file(s) not found on disk")


def cache_summary(stats: dict):
    last_sync = stats.get("last_sync") or "never"
    print(f"  Documents: {stats['total_documents']} (gcf {stats['gcf']}, policy {stats['policy']})")
    print(f"  Last sync: {last_sync}")
    if stats.get("failed"):
        print(f"  {_c.RED}Failed:{_c.RESET} {stats['failed']} (will retry on next sync)")


def failed_not_in_manifest_hint():
    print(f"  {_c.DIM}Failed files removed from the server stay flagged until the next scan.{_c.RESET}")


def scan_complete(gcf_count: int, policy_count: int, cache_path):
    print(f"  Scanned {gcf_count} gcf and {policy_count} policy document(s)")
    print(f"  {_c.DIM}Cache saved to {cache_path}{_c.RESET}")
