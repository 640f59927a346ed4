"""
Configuration management for Document Sync.

Config files:
- .docsync/settings.json: Server URL, request timeout, chunk size
"""

from .settings import SyncSettings, SERVER_URL_ENV

__all__ = [
    "SyncSettings",
    "SERVER_URL_ENV",
]
