"""
Document Sync - Keep a local PDF library in step with a remote manifest.

This package fetches the server's file listing, decides which documents are
missing or stale, downloads them one at a time and records the outcome in a
local cache file.

Import from submodules directly:
    from docsync.config import SyncSettings
    from docsync.manifest import fetch_manifest
    from docsync.sync import DocumentSync
    from docsync.ui import display
"""


def _get_version():
    """Read version from VERSION file."""
    from pathlib import Path
    version_file = Path(__file__).parent.parent / "VERSION"
    if version_file.exists():
        return version_file.read_text().strip()
    return "0.0.0"


__version__ = _get_version()
