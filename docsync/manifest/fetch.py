"""
Remote manifest fetching for Document Sync.
"""

import json
import time

import requests

from ..config import SyncSettings
from ..core.errors import FormatError, HttpStatusError, NetworkError, RequestTimeoutError
from ..core.logging import debug_log
from .manifest import Manifest


def _read_body(response: requests.Response, deadline: float, chunk_size: int) -> bytes:
    """Read the streamed body, giving up once the overall deadline passes."""
    chunks = []
    for chunk in response.iter_content(chunk_size=chunk_size):
        chunks.append(chunk)
        if time.monotonic() > deadline:
            raise requests.Timeout("manifest body not received before deadline")
    return b"".join(chunks)


def fetch_manifest(settings: SyncSettings) -> Manifest:
    """
    Fetch and validate the server's manifest.json.

    settings.request_timeout bounds the whole request, body included; the
    requests timeout alone only bounds the connect and each socket read.

    Raises:
        RequestTimeoutError: request exceeded settings.request_timeout
        NetworkError: server unreachable
        HttpStatusError: non-2xx response
        FormatError: body is not a manifest
    """
    url = settings.manifest_url
    debug_log(f"MANIFEST | fetching | url={url}")
    deadline = time.monotonic() + settings.request_timeout

    try:
        with requests.get(
            url,
            headers={"Accept": "application/json"},
            timeout=settings.request_timeout,
            stream=True,
        ) as response:
            if not 200 <= response.status_code < 300:
                raise HttpStatusError(response.status_code, response.reason or "")
            body = _read_body(response, deadline, settings.chunk_size)
    except requests.Timeout as e:
        raise RequestTimeoutError(f"Request timed out after {settings.request_timeout:g}s") from e
    except requests.RequestException as e:
        raise NetworkError(str(e)) from e

    try:
        data = json.loads(body)
    except ValueError as e:
        raise FormatError(f"Invalid manifest format: {e}") from e

    manifest = Manifest.from_dict(data)
    debug_log(f"MANIFEST | ok | gcf={len(manifest.gcf)} | policy={len(manifest.policy)}")
    return manifest
