"""pytest fixtures for testing."""

import threading
import time
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest
from unittest.mock import MagicMock

from unboundconf.models.settings import Settings


class FakeSession:
    """Stand-in for requests.Session answering from a URL mapping.

    Mapping values are either a response, an exception to raise, or a
    (delay_seconds, response) tuple. Unmapped URLs answer 404.
    """

    def __init__(self, responses: dict):
        self.responses = responses
        self.requested_urls: list[str] = []
        self.send_kwargs: list[dict] = []
        self._lock = threading.Lock()

    def send(self, request, **kwargs):
        with self._lock:
            self.requested_urls.append(request.url)
            self.send_kwargs.append(kwargs)

        outcome = self.responses.get(request.url)
        if outcome is None:
            return make_response(status_code=404, reason="Not Found")
        if isinstance(outcome, tuple):
            delay, outcome = outcome
            time.sleep(delay)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def make_response(body: bytes = b"", status_code: int = 200, reason: str = "OK"):
    """Build a mock streamed response."""
    response = MagicMock()
    response.status_code = status_code
    response.reason = reason
    response.iter_content.return_value = iter([body] if body else [])
    return response


@pytest.fixture
def response_factory():
    """Factory for mock streamed responses."""
    return make_response


@pytest.fixture
def session_factory():
    """Factory for fake sessions answering from a URL mapping."""
    return FakeSession


@pytest.fixture
def default_settings():
    """Settings with defaults and no user lists."""
    return Settings()


class SlowHandler(BaseHTTPRequestHandler):
    """Answers every GET once the server's release event is set."""

    def do_GET(self):
        self.server.release.wait(self.server.header_delay)
        body = b"slow.example.com\n"
        self.send_response(200)
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, format, *args):
        pass


@pytest.fixture
def slow_server():
    """Local HTTP server delaying its response headers by a few seconds.

    Yields the base URL. Pending handlers are released on teardown.
    """
    server = ThreadingHTTPServer(("127.0.0.1", 0), SlowHandler)
    server.daemon_threads = True
    server.release = threading.Event()
    server.header_delay = 4.0
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()

    yield f"http://127.0.0.1:{server.server_address[1]}"

    server.release.set()
    server.shutdown()
    server.server_close()
    thread.join(timeout=5)
