"""Shared fixtures and fakes for unit tests."""

from __future__ import annotations

import json
import typing as t
from unittest.mock import AsyncMock

import anyio
import httpx
import pytest

from mcp_bridge.core.models import CapabilityDescriptor
from mcp_bridge.utils.config import UpstreamConfig

PLUMBING = {"name": "Plumbing", "string_identifier": "plumbing"}


@pytest.fixture
def upstream_config():
    return UpstreamConfig(base_url="http://upstream.test", path="/categories")


def _make_upstream(status: int = 200, body: t.Any = None, *, calls: t.Optional[list] = None) -> httpx.MockTransport:
    """Fake upstream answering every request with `status` and `body`."""
    if body is None:
        body = {"categories": [PLUMBING]}

    def handler(request: httpx.Request) -> httpx.Response:
        if calls is not None:
            calls.append(request)
        if isinstance(body, (bytes, str)):
            return httpx.Response(status, content=body)
        return httpx.Response(status, json=body)

    return httpx.MockTransport(handler)


@pytest.fixture
def text_descriptor():
    return CapabilityDescriptor(name="test://resource", mime_type="text/plain", title="Test resource")


@pytest.fixture
def http_scope():
    """Create a sample HTTP scope."""
    return {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": "POST",
        "scheme": "http",
        "path": "/mcp",
        "query_string": b"",
        "root_path": "",
        "headers": [(b"content-type", b"application/json")],
        "server": ("127.0.0.1", 3000),
        "client": ("127.0.0.1", 12345),
        "state": {},
    }


class BodyReceive:
    """ASGI receive that yields the body, then blocks until `disconnect()`."""

    def __init__(self, body: t.Union[bytes, dict, list], chunk_size: t.Optional[int] = None) -> None:
        raw = body if isinstance(body, bytes) else json.dumps(body).encode()
        size = chunk_size or max(len(raw), 1)
        self._chunks = [raw[i : i + size] for i in range(0, len(raw), size)] or [b""]
        self._disconnected = anyio.Event()
        self.calls = 0

    def disconnect(self) -> None:
        self._disconnected.set()

    async def __call__(self) -> t.Dict[str, t.Any]:
        self.calls += 1
        if self._chunks:
            chunk = self._chunks.pop(0)
            return {"type": "http.request", "body": chunk, "more_body": bool(self._chunks)}
        await self._disconnected.wait()
        return {"type": "http.disconnect"}


@pytest.fixture
def mock_send():
    """Mock ASGI send callable."""
    return AsyncMock()


class SentResponse:
    """Decoded view of what an ASGI app pushed through a mocked `send`."""

    def __init__(self, send: AsyncMock) -> None:
        messages = [c[0][0] for c in send.call_args_list]
        start = messages[0]
        assert start["type"] == "http.response.start"
        self.status: int = start["status"]
        self.headers = {k.decode("latin1"): v.decode("latin1") for k, v in start["headers"]}
        self.body = b"".join(m.get("body", b"") for m in messages if m["type"] == "http.response.body")

    def json(self) -> t.Any:
        return json.loads(self.body)


@pytest.fixture
def make_upstream():
    return _make_upstream


@pytest.fixture
def make_receive():
    return BodyReceive


@pytest.fixture
def sent_response():
    return SentResponse


@pytest.fixture
def read_request():
    """Sample resources/read request."""
    return {
        "jsonrpc": "2.0",
        "id": 7,
        "method": "resources/read",
        "params": {"uri": "categories://summary"},
    }


@pytest.fixture
def initialize_request():
    """Sample initialize request."""
    return {
        "jsonrpc": "2.0",
        "method": "initialize",
        "params": {
            "protocolVersion": "2025-06-18",
            "clientInfo": {"name": "test-client", "version": "1.0"},
            "capabilities": {},
        },
        "id": 1,
    }


@pytest.fixture
def initialized_notification():
    """Sample initialized notification."""
    return {"jsonrpc": "2.0", "method": "notifications/initialized"}
