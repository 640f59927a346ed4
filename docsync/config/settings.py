"""
Sync settings for Document Sync.

Manages .docsync/settings.json - server location and request tuning.
"""

import json
import os
from pathlib import Path

# Environment override for the server, checked after the settings file
SERVER_URL_ENV = "DOCSYNC_SERVER_URL"


class SyncSettings:
    """
    Manages .docsync/settings.json - settings that persist across runs.

    Stores:
    - Server base URL (manifest at <server>/manifest.json, files under <server>/docs/)
    - Request timeout in seconds (manifest fetch and each file download)
    - Download chunk size in bytes
    """

    DEFAULT_SERVER_URL = "http://192.168.1.9:8000"
    DEFAULT_TIMEOUT = 30.0
    DEFAULT_CHUNK_SIZE = 32768

    def __init__(self, path: Path = None):
        self.path = path
        self.server_url: str = self.DEFAULT_SERVER_URL
        self.request_timeout: float = self.DEFAULT_TIMEOUT
        self.chunk_size: int = self.DEFAULT_CHUNK_SIZE

    @classmethod
    def load(cls, path: Path) -> "SyncSettings":
        """Load settings from file, falling back to defaults."""
        settings = cls(path)

        if path.exists():
            try:
                with open(path) as f:
                    data = json.load(f)

                settings.server_url = data.get("server_url", cls.DEFAULT_SERVER_URL)
                settings.request_timeout = float(data.get("request_timeout", cls.DEFAULT_TIMEOUT))
                settings.chunk_size = int(data.get("chunk_size", cls.DEFAULT_CHUNK_SIZE))
            except (json.JSONDecodeError, IOError, TypeError, ValueError, AttributeError):
                settings = cls(path)

        env_url = os.environ.get(SERVER_URL_ENV)
        if env_url:
            settings.server_url = env_url

        return settings

    def save(self):
        """Save settings to file."""
        data = {
            "server_url": self.server_url,
            "request_timeout": self.request_timeout,
            "chunk_size": self.chunk_size,
        }
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w") as f:
            json.dump(data, f, indent=2)

    @property
    def base_url(self) -> str:
        """Server URL without a trailing slash."""
        return self.server_url.rstrip("/")

    @property
    def manifest_url(self) -> str:
        return f"{self.base_url}/manifest.json"
