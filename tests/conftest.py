from __future__ import annotations

from collections.abc import Callable
from typing import Any

import json as jsonlib

import httpx
import pytest
from fastapi.testclient import TestClient

from app import create_app
from core.config import Config

OPENAI_BASE = "https://api.openai.com"
OLLAMA_BASE = "http://localhost:11434"


class RecordingLogger:
    def __init__(self) -> None:
        self.requests: list[tuple[str, str]] = []
        self.routes: list[tuple[str, str | None, str]] = []
        self.errors: list[tuple[str, int, str]] = []

    def log_request(self, method: str, url: str) -> None:
        self.requests.append((method, url))

    def log_route(self, route: str, model: str | None, target_url: str) -> None:
        self.routes.append((route, model, target_url))

    def log_error(self, route: str, status: int, message: str) -> None:
        self.errors.append((route, status, message))


class AsyncChunks(httpx.AsyncByteStream):
    """Response body that is still unread when it reaches the proxy."""

    def __init__(self, chunks: list[bytes]) -> None:
        self._chunks = chunks

    async def __aiter__(self):
        for chunk in self._chunks:
            yield chunk


def streamed_response(
    status_code: int,
    content: bytes = b"",
    *,
    json: Any = None,
    headers: dict[str, str] | None = None,
) -> httpx.Response:
    """Build a response the way a real transport hands it over: not yet read."""
    headers = dict(headers or {})
    if json is not None:
        content = jsonlib.dumps(json).encode()
        headers.setdefault("content-type", "application/json")
    headers.setdefault("content-length", str(len(content)))
    return httpx.Response(status_code, headers=headers, stream=AsyncChunks([content]))


class FakeUpstream:
    """Records every outbound request and answers with ``respond``."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.respond: Callable[[httpx.Request], httpx.Response] = lambda request: streamed_response(
            200,
            json={"ok": True},
            headers={"x-upstream": request.url.host},
        )

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.respond(request)


def make_config(**overrides: Any) -> Config:
    data: dict[str, Any] = {
        "endpoints": {"openai": OPENAI_BASE, "ollama": OLLAMA_BASE},
    }
    data.update(overrides)
    return Config.model_validate(data)


@pytest.fixture
def recording_logger() -> RecordingLogger:
    return RecordingLogger()


@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
def build_client(
    recording_logger: RecordingLogger,
    upstream: FakeUpstream,
) -> Callable[..., TestClient]:
    def _build(**overrides: Any) -> TestClient:
        app = create_app(
            make_config(**overrides),
            recording_logger,
            transport=httpx.MockTransport(upstream),
        )
        return TestClient(app)

    return _build
