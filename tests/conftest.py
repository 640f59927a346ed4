"""Pytest configuration and shared fixtures."""

import json
import tempfile
import threading
import time
from dataclasses import dataclass, field
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path

import pytest

from docsync.config import SyncSettings
from docsync.sync.state import DocumentCache, DocumentRecord


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: tests that talk to a local HTTP server"
    )


# ---------------------------------------------------------------------------
# Local document server
# ---------------------------------------------------------------------------

@dataclass
class Route:
    """Canned response for one path."""
    status: int = 200
    body: bytes = b""
    content_type: str = "application/octet-stream"
    send_length: bool = True
    delay: float = 0.0
    reason: str | None = None
    # body sent in this many pieces with chunk_delay between them
    pieces: int = 1
    chunk_delay: float = 0.0


class _Handler(BaseHTTPRequestHandler):
    def do_GET(self):
        server = self.server.doc_server
        server.requests.append(self.path)
        route = server.routes.get(self.path)
        if route is None:
            self.send_error(404)
            return
        if route.delay:
            time.sleep(route.delay)
        self.send_response(route.status, route.reason)
        self.send_header("Content-Type", route.content_type)
        if route.send_length:
            self.send_header("Content-Length", str(len(route.body)))
        self.end_headers()
        try:
            step = max(1, -(-len(route.body) // route.pieces))
            for i in range(0, max(len(route.body), 1), step):
                if i and route.chunk_delay:
                    time.sleep(route.chunk_delay)
                self.wfile.write(route.body[i:i + step])
                self.wfile.flush()
        except (BrokenPipeError, ConnectionResetError):
            pass

    def log_message(self, format, *args):
        pass


@dataclass
class DocServer:
    """Serves manifest.json and docs/<category>/<name> from memory."""
    base_url: str = ""
    routes: dict = field(default_factory=dict)
    requests: list = field(default_factory=list)

    def set_manifest(self, manifest, status: int = 200, **kwargs):
        body = manifest if isinstance(manifest, bytes) else json.dumps(manifest).encode()
        self.routes["/manifest.json"] = Route(status=status, body=body, content_type="application/json", **kwargs)

    def add_document(self, category: str, name: str, body: bytes, **kwargs):
        self.routes[f"/docs/{category}/{name}"] = Route(body=body, content_type="application/pdf", **kwargs)

    def fail_document(self, category: str, name: str, status: int = 500):
        self.routes[f"/docs/{category}/{name}"] = Route(status=status, body=b"error")

    def document_requests(self) -> list:
        return [p for p in self.requests if p.startswith("/docs/")]


@pytest.fixture
def doc_server(monkeypatch):
    """Start a throwaway HTTP server on localhost."""
    monkeypatch.setenv("NO_PROXY", "127.0.0.1,localhost")
    monkeypatch.setenv("no_proxy", "127.0.0.1,localhost")

    httpd = ThreadingHTTPServer(("127.0.0.1", 0), _Handler)
    server = DocServer(base_url=f"http://127.0.0.1:{httpd.server_address[1]}")
    httpd.doc_server = server
    thread = threading.Thread(target=httpd.serve_forever, daemon=True)
    thread.start()
    try:
        yield server
    finally:
        httpd.shutdown()
        httpd.server_close()


# ---------------------------------------------------------------------------
# Workspace
# ---------------------------------------------------------------------------

@dataclass
class SyncEnv:
    """Isolated docs directory + cache file + settings."""
    tmp: Path
    docs_path: Path
    cache_file: Path
    settings: SyncSettings

    def load_cache(self) -> DocumentCache:
        return DocumentCache(self.cache_file).load()

    def write_cache(self, data: dict):
        self.cache_file.parent.mkdir(parents=True, exist_ok=True)
        self.cache_file.write_text(json.dumps(data, indent=2))

    def make_pdf(self, category: str, name: str, size: int = 100) -> Path:
        path = self.docs_path / category / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(b"%PDF" + b"\x00" * max(0, size - 4))
        return path


@pytest.fixture
def sync_env():
    with tempfile.TemporaryDirectory() as tmpdir:
        tmp = Path(tmpdir)
        docs_path = tmp / "docs"
        docs_path.mkdir()
        settings = SyncSettings(tmp / "settings.json")
        settings.request_timeout = 5.0
        yield SyncEnv(
            tmp=tmp,
            docs_path=docs_path,
            cache_file=tmp / ".docsync" / "cache.json",
            settings=settings,
        )


# ---------------------------------------------------------------------------
# Builders (functions, not fixtures)
# ---------------------------------------------------------------------------

def make_entry(name: str, size: int = 1000, modified: str = "2025-01-01T00:00:00Z") -> dict:
    """Build a single manifest file entry."""
    return {"name": name, "size": size, "modified": modified}


def make_record(
    category: str,
    name: str,
    remote_modified: str | None = "2025-01-01T00:00:00Z",
    sync_status: str | None = "success",
    date: str = "2025-01-02",
    size: str = "1.0 KB",
) -> DocumentRecord:
    """Build a cache record as a completed sync would leave it."""
    return DocumentRecord(
        id=f"{category}-{name}",
        title=name,
        file=f"{category}/{name}",
        size=size,
        date=date,
        remote_modified=remote_modified,
        sync_status=sync_status,
    )
