"""Shared fixtures: a local release host serving tests/testdata/mock_api."""

import functools
import os
import shutil
import threading
from http.server import SimpleHTTPRequestHandler, ThreadingHTTPServer

import pytest

from lf_install.config import Settings

TESTDATA = os.path.join(os.path.dirname(__file__), "testdata")
MOCK_API = os.path.join(TESTDATA, "mock_api")

requires_gpg = pytest.mark.skipif(shutil.which("gpg") is None, reason="gpg binary not available")


def read_testdata(name: str) -> str:
    with open(os.path.join(TESTDATA, name), "r", encoding="utf-8") as fh:
        return fh.read()


class _QuietHandler(SimpleHTTPRequestHandler):
    def log_message(self, format, *args):  # noqa: A002
        pass


class MockReleaseHost:
    """Release host backed by a private copy of the mock API tree."""

    def __init__(self, root: str):
        self.root = root
        handler = functools.partial(_QuietHandler, directory=root)
        self._server = ThreadingHTTPServer(("127.0.0.1", 0), handler)
        self._thread = threading.Thread(target=self._server.serve_forever, daemon=True)

    @property
    def base_url(self) -> str:
        host, port = self._server.server_address[:2]
        return f"http://{host}:{port}"

    def path(self, *parts: str) -> str:
        return os.path.join(self.root, *parts)

    def start(self) -> None:
        self._thread.start()

    def stop(self) -> None:
        self._server.shutdown()
        self._server.server_close()


@pytest.fixture
def release_host(tmp_path_factory):
    """Serve a writable copy of the mock release API on localhost."""
    root = tmp_path_factory.mktemp("release-host") / "api"
    shutil.copytree(MOCK_API, root)
    host = MockReleaseHost(str(root))
    host.start()
    yield host
    host.stop()


@pytest.fixture
def test_public_key():
    return read_testdata("test_key.pub")


@pytest.fixture
def untrusted_public_key():
    return read_testdata("untrusted_key.pub")


@pytest.fixture
def settings(release_host):
    """Settings pointing at the local host, isolated from the environment."""
    return Settings(base_url=release_host.base_url, timeout=10)
