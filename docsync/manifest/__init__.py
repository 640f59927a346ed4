"""
Manifest handling for Document Sync.

Fetches the remote file listing and exposes it as typed entries.
"""

from .manifest import Category, Manifest, ManifestEntry
from .fetch import fetch_manifest

__all__ = [
    "Category",
    "Manifest",
    "ManifestEntry",
    "fetch_manifest",
]
