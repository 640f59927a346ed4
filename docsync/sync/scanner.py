"""
Local document scan for Document Sync.

Builds cache records straight from the docs directory. Used to seed the
cache when nothing has been synced yet.
"""

from pathlib import Path

from ..core.formatting import (
    file_date,
    format_file_size,
    generate_display_name,
    make_document_id,
    relative_posix,
)
from ..core.logging import debug_log
from ..manifest import Category
from .state import DocumentRecord


def scan_local_documents(docs_path: Path) -> dict[Category, list[DocumentRecord]]:
    """
    Scan <docs_path>/<category>/ for PDFs.

    Records carry no syncStatus or remoteModified. Missing category
    directories give empty lists.
    """
    documents = {c: [] for c in Category}

    for category in Category:
        dir_path = docs_path / category.value
        if not dir_path.is_dir():
            debug_log(f"SCAN | missing directory | path={dir_path}")
            continue

        files = sorted(dir_path.iterdir(), key=lambda p: p.name)
        for path in files:
            if not path.is_file() or not path.name.lower().endswith(".pdf"):
                continue
            documents[category].append(DocumentRecord(
                id=make_document_id(category.value, path.name),
                title=generate_display_name(path.name),
                description="",
                file=relative_posix(path, docs_path),
                size=format_file_size(path.stat().st_size),
                date=file_date(path),
            ))

        debug_log(f"SCAN | category={category} | found={len(documents[category])}")

    return documents


def document_exists(docs_path: Path, rel_path: str) -> bool:
    """Check if a cached document ("gcf/file.pdf") is on disk."""
    return (docs_path / rel_path).is_file()
