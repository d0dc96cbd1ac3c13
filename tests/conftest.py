"""Shared pytest fixtures for tictail-client tests."""

import threading
import time
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import httpx
import pytest
import respx

from tictail_client.core.client import TicTailClient
from tictail_client.core.config import ENV_VARS

from tests.config import TEST_ACCESS_TOKEN, TEST_CLIENT_ID, TEST_CLIENT_SECRET, TOKEN_URL


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep host TICTAIL_* settings out of the tests."""
    for env_var in ENV_VARS.values():
        # setenv first so values loaded from .env files are undone on teardown
        monkeypatch.setenv(env_var, "")
        monkeypatch.delenv(env_var)


@pytest.fixture
def token_response():
    """Successful token exchange payload."""
    return {
        "access_token": TEST_ACCESS_TOKEN,
        "expires_in": 3600,
        "token_type": "Bearer",
        "store": {
            "id": "x2j",
            "name": "Example Store",
            "url": "example.tictail.com",
        },
    }


@pytest.fixture
def client():
    with TicTailClient(TEST_CLIENT_ID, TEST_CLIENT_SECRET) as client:
        yield client


@pytest.fixture
def authed_client():
    with TicTailClient(TEST_CLIENT_ID, TEST_CLIENT_SECRET, token=TEST_ACCESS_TOKEN) as client:
        yield client


@pytest.fixture
def http_mock():
    with respx.mock(assert_all_called=False) as respx_mock:
        yield respx_mock


@pytest.fixture
def token_route(http_mock, token_response):
    return http_mock.post(TOKEN_URL).mock(return_value=httpx.Response(200, json=token_response))


class _TrickleHandler(BaseHTTPRequestHandler):
    """Sends a small JSON body one byte at a time."""

    body = b'{"a": "bcd"}'
    delay = 0.3

    def do_GET(self):
        self.send_response(200)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(self.body)))
        self.end_headers()
        try:
            for i in range(len(self.body)):
                self.wfile.write(self.body[i:i + 1])
                self.wfile.flush()
                time.sleep(self.delay)
        except (BrokenPipeError, ConnectionResetError):
            pass

    def log_message(self, format, *args):
        pass


@pytest.fixture
def trickle_server():
    """Local HTTP server that drips its response body; yields its base URL."""
    server = ThreadingHTTPServer(("127.0.0.1", 0), _TrickleHandler)
    server.daemon_threads = True
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield f"http://127.0.0.1:{server.server_address[1]}"
    server.shutdown()
    server.server_close()
