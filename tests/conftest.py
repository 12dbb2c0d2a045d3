"""
Shared test fixtures.

Provides an in-process HTTP server emulating the OneSpan Sign API. The
server records every request it receives so tests can assert on the
exact calls made by the client (token endpoint hits, headers, bodies).
"""

import json
import sys
import threading
import time
from dataclasses import dataclass, field
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from onespan_sign.api import ApiClient, ApiClientConfig

TOKEN_PATH = '/apitoken/clientApp/accessToken'

TEST_IMAGE = (
    "data:image/png;base64,iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNk"
    "YPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="
)


@dataclass
class RequestHistoryEntry:
    """A request received by the test server."""
    method: str
    path: str
    headers: Dict[str, str]
    body: bytes

    def json(self) -> Any:
        return json.loads(self.body)


@dataclass
class OneSpanTestServer:
    """
    Emulates the OneSpan Sign API.

    Responses are registered per (method, path). A list of responses is
    served in order, the last one repeating.
    """
    access_token: str = 'token-1'
    token_expires_at: Optional[int] = None
    token_status: int = 200
    token_body: Optional[Any] = None
    history: List[RequestHistoryEntry] = field(default_factory=list)
    routes: Dict[Tuple[str, str], List[Tuple[int, Any]]] = field(default_factory=dict)

    def __post_init__(self):
        self._lock = threading.Lock()
        self._httpd = None
        self._thread = None

    @property
    def url(self) -> str:
        host, port = self._httpd.server_address[:2]
        return f"http://{host}:{port}"

    def respond(self, method: str, path: str, *responses: Tuple[int, Any]) -> None:
        self.routes[(method, path)] = list(responses)

    def requests_to(self, path: str) -> List[RequestHistoryEntry]:
        return [entry for entry in self.history if entry.path == path]

    @property
    def token_requests(self) -> List[RequestHistoryEntry]:
        return self.requests_to(TOKEN_PATH)

    def _token_response(self) -> Tuple[int, Any]:
        if self.token_body is not None:
            return self.token_status, self.token_body
        expires_at = self.token_expires_at
        if expires_at is None:
            expires_at = int(time.time()) + 60
        return self.token_status, {'accessToken': self.access_token, 'expiresAt': expires_at}

    def handle(self, method: str, path: str, headers: Dict[str, str], body: bytes) -> Tuple[int, Any]:
        with self._lock:
            self.history.append(RequestHistoryEntry(method, path, headers, body))

            if path == TOKEN_PATH and method == 'POST':
                return self._token_response()

            responses = self.routes.get((method, path))
            if not responses:
                return 404, None
            if len(responses) > 1:
                return responses.pop(0)
            return responses[0]

    def start(self) -> None:
        server = self

        class Handler(BaseHTTPRequestHandler):
            def _dispatch(self):
                length = int(self.headers.get('Content-Length') or 0)
                body = self.rfile.read(length) if length else b''
                status, payload = server.handle(self.command, self.path, dict(self.headers), body)

                if payload is None:
                    content = b''
                elif isinstance(payload, bytes):
                    content = payload
                elif isinstance(payload, str):
                    content = payload.encode('utf-8')
                else:
                    content = json.dumps(payload).encode('utf-8')

                self.send_response(status)
                self.send_header('Content-Type', 'application/json')
                self.send_header('Content-Length', str(len(content)))
                self.end_headers()
                self.wfile.write(content)

            do_GET = do_POST = do_PUT = do_DELETE = _dispatch

            def log_message(self, format, *args):
                pass

        self._httpd = ThreadingHTTPServer(('127.0.0.1', 0), Handler)
        self._thread = threading.Thread(target=self._httpd.serve_forever, daemon=True)
        self._thread.start()

    def stop(self) -> None:
        self._httpd.shutdown()
        self._httpd.server_close()
        self._thread.join(timeout=5)


class FakeClock:
    """Manually advanced clock; sleep() advances it."""

    def __init__(self, now: float = 1000.0):
        self.now = now
        self.sleeps: List[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def onespan_server():
    server = OneSpanTestServer()
    server.start()
    yield server
    server.stop()


@pytest.fixture
def make_client(onespan_server) -> Callable[..., ApiClient]:
    def factory(clock: Callable[[], float] = time.time, **overrides) -> ApiClient:
        settings = {
            'base_url': onespan_server.url,
            'client_id': 'test-client-id',
            'client_secret': 'test-client-secret',
            'user_agent': 'onespan-sign-admin/test',
            'timeout': 5,
        }
        settings.update(overrides)
        return ApiClient(ApiClientConfig(**settings), clock=clock)
    return factory


@pytest.fixture
def client(make_client) -> ApiClient:
    return make_client()


@pytest.fixture
def no_wait(monkeypatch):
    """Shrink the resource convergence waits to a few milliseconds."""
    from onespan_sign.resources import account_signing_themes, expiry_time_config

    for module in (account_signing_themes, expiry_time_config):
        monkeypatch.setattr(module, 'WAIT_DELAY', 0)
        monkeypatch.setattr(module, 'WAIT_TIMEOUT', 2)
        monkeypatch.setattr(module, 'WAIT_POLL_INTERVAL', 0.001)
        monkeypatch.setattr(module, 'WAIT_CONFIRMATIONS', 2)
