"""Pytest configuration for integration tests."""

import pytest

from docsync.sync import DocumentSync, SyncEvents


@pytest.fixture
def make_syncer(doc_server, sync_env):
    """Build a DocumentSync wired to the local server and temp workspace."""
    sync_env.settings.server_url = doc_server.base_url

    def _make(**kwargs) -> DocumentSync:
        kwargs.setdefault("events", SyncEvents())
        return DocumentSync(
            sync_env.settings,
            cache_file=sync_env.cache_file,
            docs_path=sync_env.docs_path,
            **kwargs,
        )

    return _make
