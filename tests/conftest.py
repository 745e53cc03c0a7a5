"""
Shared test fixtures.

Provides: a HelperConfig with a plain test logger, file-backed stores in tmp_path,
and an httpx MockTransport recorder for client tests.
"""

import logging

import httpx
import pytest

from shared.helper.HelperConfig import HelperConfig
from shared.stores.docstore.DocStore import DocStore


@pytest.fixture
def helper_config() -> HelperConfig:
    """HelperConfig backed by a standard library logger."""
    return HelperConfig(logger=logging.getLogger("tests"))


@pytest.fixture
def doc_store(helper_config, tmp_path) -> DocStore:
    """Empty document store rooted in a temporary directory."""
    return DocStore(helper_config=helper_config, base_dir=str(tmp_path / "container-a"))


class RecordingTransport:
    """Builds an httpx.MockTransport and keeps every request it served."""

    def __init__(self, handler):
        self.requests: list[httpx.Request] = []
        self._handler = handler
        self.transport = httpx.MockTransport(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._handler(request)


@pytest.fixture
def recording_transport():
    """Factory: recording_transport(handler) -> RecordingTransport."""
    return RecordingTransport
