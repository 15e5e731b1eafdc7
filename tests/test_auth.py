from __future__ import annotations

from collections.abc import Callable

from fastapi.testclient import TestClient

from auth import BearerAuthGate
from conftest import FakeUpstream

CHAT = {"model": "gpt-4o", "messages": []}


def test_post_without_token_is_rejected_before_routing(
    build_client: Callable[..., TestClient],
    upstream: FakeUpstream,
    recording_logger,
) -> None:
    with build_client(auth={"api_key": "secret-token"}) as client:
        response = client.post("/v1/chat/completions", json=CHAT)

    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"
    assert response.json() == {"error": "Unauthorized"}
    assert upstream.requests == []
    assert recording_logger.routes == []


def test_post_with_wrong_token_is_rejected(
    build_client: Callable[..., TestClient],
    upstream: FakeUpstream,
) -> None:
    with build_client(auth={"api_key": "secret-token"}) as client:
        response = client.post(
            "/v1/chat/completions",
            json=CHAT,
            headers={"Authorization": "Bearer nope"},
        )

    assert response.status_code == 401
    assert response.headers["www-authenticate"] == 'Bearer error="invalid_token"'
    assert upstream.requests == []


def test_malformed_authorization_header_is_bad_request(
    build_client: Callable[..., TestClient],
    upstream: FakeUpstream,
) -> None:
    with build_client(auth={"api_key": "secret-token"}) as client:
        response = client.get("/v1/models", headers={"Authorization": "Basic c2VjcmV0"})

    assert response.status_code == 400
    assert response.headers["www-authenticate"] == 'Bearer error="invalid_request"'
    assert upstream.requests == []


def test_get_without_token_is_rejected(
    build_client: Callable[..., TestClient],
    upstream: FakeUpstream,
) -> None:
    with build_client(auth={"api_key": "secret-token"}) as client:
        response = client.get("/v1/models")

    assert response.status_code == 401
    assert upstream.requests == []


def test_valid_token_is_accepted_and_forwarded(
    build_client: Callable[..., TestClient],
    upstream: FakeUpstream,
) -> None:
    with build_client(auth={"api_key": "secret-token"}) as client:
        response = client.post(
            "/v1/chat/completions",
            json=CHAT,
            headers={"Authorization": "Bearer secret-token"},
        )

    assert response.status_code == 200
    assert len(upstream.requests) == 1
    # The caller's token doubles as the OpenAI key, so it travels upstream
    assert upstream.requests[0].headers["authorization"] == "Bearer secret-token"


def test_scheme_is_case_insensitive(
    build_client: Callable[..., TestClient],
    upstream: FakeUpstream,
) -> None:
    with build_client(auth={"api_key": "secret-token"}) as client:
        response = client.get("/v1/models", headers={"Authorization": "bearer secret-token"})

    assert response.status_code == 200


def test_options_bypasses_auth_even_with_token_configured(
    build_client: Callable[..., TestClient],
    upstream: FakeUpstream,
) -> None:
    with build_client(auth={"api_key": "secret-token"}) as client:
        response = client.options("/v1/chat/completions")

    assert response.status_code == 204
    assert upstream.requests == []


def test_auth_disabled_forwards_unauthenticated_requests(
    build_client: Callable[..., TestClient],
    upstream: FakeUpstream,
) -> None:
    # Development-mode fallback: without OPENAI_API_KEY nobody is checked.
    # Do not deploy like this.
    with build_client() as client:
        post = client.post("/v1/chat/completions", json=CHAT)
        get = client.get("/v1/models")

    assert post.status_code == 200
    assert get.status_code == 200
    assert len(upstream.requests) == 2


def test_empty_token_also_disables_auth(
    build_client: Callable[..., TestClient],
    upstream: FakeUpstream,
) -> None:
    with build_client(auth={"api_key": ""}) as client:
        response = client.get("/v1/models")

    assert response.status_code == 200


def test_gate_is_enabled_only_by_a_non_empty_token() -> None:
    assert BearerAuthGate("secret-token").enabled is True
    assert BearerAuthGate("").enabled is False
    assert BearerAuthGate(None).enabled is False
