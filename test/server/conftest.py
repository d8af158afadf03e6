import asyncio
import json
import os
import socket
import subprocess
import sys
import time
from pathlib import Path
from typing import Any, Dict, List
import httpx
import pytest
from fastapi import Request
from mcp_sse_bridge.main import create_app
from mcp_sse_bridge.services.sse_transport import SessionRegistry, SseTransport


class FakePeer:
    """Records every hook invocation instead of processing messages."""

    def __init__(self):
        self.transports: List[SseTransport] = []
        self.messages: List[Any] = []
        self.errors: List[Exception] = []

    async def connect(self, transport: SseTransport) -> None:
        self.transports.append(transport)
        transport.on_message = self.messages.append
        transport.on_error = self.errors.append


class EventReader:
    """Reads events from transport streams, keeping one generator per stream alive."""

    def __init__(self):
        self._generators: Dict[int, Any] = {}

    async def read(self, transport: SseTransport, count: int, timeout: float = 1.0) -> List[Dict[str, Any]]:
        events = self._generators.setdefault(id(transport.stream), transport.stream.events())
        result = []
        for _ in range(count):
            result.append(await asyncio.wait_for(events.__anext__(), timeout))
        return result


def make_post_request(body: Any, raw: bool = False) -> Request:
    """Build a starlette POST request carrying ``body`` as JSON (or raw bytes)."""
    payload = body if raw else json.dumps(body).encode("utf-8")

    async def receive():
        return {"type": "http.request", "body": payload, "more_body": False}

    scope = {
        "type": "http",
        "method": "POST",
        "path": "/api/messages",
        "headers": [(b"content-type", b"application/json")],
        "query_string": b"",
    }
    return Request(scope, receive)


@pytest.fixture
def registry():
    return SessionRegistry()


@pytest.fixture
def peer():
    return FakePeer()


@pytest.fixture
def app(registry, peer):
    return create_app(registry=registry, peer=peer, server_name="test-server", server_version="9.9.9")


@pytest.fixture
def session_router(app):
    return app.state.session_router


@pytest.fixture
def event_reader():
    return EventReader()


@pytest.fixture
def post_request():
    return make_post_request


SRC = Path(__file__).parent.parent.parent / 'src'


def find_free_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


@pytest.fixture(scope='session')
def server_url():
    """
    Start a uvicorn process serving the default application and yield its base URL.
    """
    port = find_free_port()
    url = f"http://127.0.0.1:{port}"
    env = dict(os.environ)
    env['PYTHONPATH'] = str(SRC) + os.pathsep + env.get('PYTHONPATH', '')

    proc = subprocess.Popen([
        sys.executable, '-m', 'uvicorn', 'mcp_sse_bridge.main:fastapi',
        '--host', '127.0.0.1', '--port', str(port)
    ], env=env, stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL)

    for _ in range(60):
        try:
            r = httpx.get(url + "/health", timeout=1)
            if r.status_code == 200:
                break
        except httpx.HTTPError:
            pass
        if proc.poll() is not None:
            pytest.fail("Test server exited during startup")
        time.sleep(0.5)
    else:
        proc.terminate()
        pytest.fail("Test server did not start in time")

    yield url

    proc.terminate()
    proc.wait(timeout=10)
