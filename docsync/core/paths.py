"""
Centralized path management for Document Sync.

All app data is stored in .docsync/ next to the app. Documents live in docs/.

Directory structure:
    path/to/sync.py
    path/to/.docsync/
        settings.json   - Server URL and request settings
        cache.json      - Known documents per category + last sync time
        logs/           - Debug logs
    path/to/docs/
        gcf/            - GCF documents
        policy/         - Policy documents
"""

import os
import sys
from pathlib import Path

import certifi


def get_certifi_ssl_context() -> str:
    """Get path to certifi CA bundle, handling PyInstaller bundles."""
    if getattr(sys, "frozen", False):
        return str(Path(sys._MEIPASS) / "certifi" / "cacert.pem")
    return certifi.where()


# Directory name for app data (hidden on Unix)
DATA_DIR_NAME = ".docsync"

# Folder holding the downloaded documents
DOCS_FOLDER_NAME = "docs"


def get_app_dir() -> Path:
    """
    Get the directory where the app is located.

    DOCSYNC_ROOT overrides everything (set by --root or by a launcher).
    For frozen (PyInstaller): directory containing the executable.
    For development: repo root (parent of docsync/).
    """
    root = os.environ.get("DOCSYNC_ROOT")
    if root:
        return Path(root)
    if getattr(sys, "frozen", False):
        return Path(sys.executable).parent
    return Path(__file__).parent.parent.parent


def get_data_dir() -> Path:
    """Get the .docsync/ data directory, creating it if needed."""
    data_dir = get_app_dir() / DATA_DIR_NAME
    data_dir.mkdir(parents=True, exist_ok=True)
    return data_dir


def get_settings_path() -> Path:
    """Get path to settings file."""
    return get_data_dir() / "settings.json"


def get_cache_path() -> Path:
    """Get path to the document cache file."""
    return get_data_dir() / "cache.json"


def get_logs_dir() -> Path:
    """Get logs directory, creating it if needed."""
    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(exist_ok=True)
    return logs_dir


def get_docs_path() -> Path:
    """Get the document directory."""
    return get_app_dir() / DOCS_FOLDER_NAME


def ensure_docs_dirs(docs_path: Path, categories) -> list[Path]:
    """
    Create the docs directory and one subdirectory per category.

    Returns:
        Directories that were created (for logging).
    """
    created = []
    for path in [docs_path] + [docs_path / str(c) for c in categories]:
        if not path.exists():
            path.mkdir(parents=True, exist_ok=True)
            created.append(path)
    return created
