"""
Formatting utilities for Document Sync.
"""

import re
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Optional, Union


# ============================================================================
# Display names
# ============================================================================

def generate_display_name(filename: str) -> str:
    """
    Turn a PDF filename into a title.

    Example: "gcf_funding-proposal.pdf" -> "Gcf Funding Proposal"
    """
    name = re.sub(r"\.pdf$", "", filename, flags=re.IGNORECASE)
    name = re.sub(r"[-_]", " ", name)
    return " ".join(word[:1].upper() + word[1:].lower() for word in name.split(" "))


def make_document_id(category: str, filename: str) -> str:
    """Stable record id for a file within a category."""
    return f"{category}-{filename}"


def make_relative_path(category: str, filename: str) -> str:
    """Cache/manifest join key: "<category>/<filename>"."""
    return f"{category}/{filename}"


# ============================================================================
# Size formatting
# ============================================================================

def format_file_size(size_bytes: int) -> str:
    """Format bytes for the document list (B, KB or MB)."""
    if size_bytes < 1024:
        return f"{size_bytes} B"
    if size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.1f} KB"
    return f"{size_bytes / (1024 * 1024):.1f} MB"


# ============================================================================
# Dates and timestamps
# ============================================================================

def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """
    Parse an ISO-8601 timestamp or a bare YYYY-MM-DD date.

    Accepts a trailing "Z". Naive values are treated as UTC so they compare
    with aware ones. Returns None for empty or unparseable input.
    """
    if not value or not isinstance(value, str):
        return None
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def iso_date(value: Union[datetime, date]) -> str:
    """Format as YYYY-MM-DD."""
    return value.strftime("%Y-%m-%d")


def file_date(path: Path) -> str:
    """Local modification date of a file as YYYY-MM-DD."""
    return iso_date(datetime.fromtimestamp(path.stat().st_mtime))


def timestamp_date(value: str) -> str:
    """
    Date part of a manifest timestamp, in UTC.

    Falls back to the first ten characters when the value does not parse,
    and to "" for anything that is not a string.
    """
    if not isinstance(value, str):
        return ""
    parsed = parse_timestamp(value)
    if parsed is None:
        return value[:10]
    return iso_date(parsed.astimezone(timezone.utc))


def utc_now_iso() -> str:
    """Current time as an ISO-8601 UTC string with millisecond precision."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


# ============================================================================
# Path utilities
# ============================================================================

def relative_posix(path: Path, base: Path) -> str:
    """Relative path as a posix-style string."""
    return path.relative_to(base).as_posix()
