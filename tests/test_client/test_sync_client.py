"""Tests for the synchronous HTTP client."""

from __future__ import annotations

import json
from typing import Any

import httpx
import pytest

from itemrest.client import HttpApi, SyncClient
from itemrest.exceptions import (
    AuthError,
    ConfigError,
    ConnectionError_,
    NotFoundError,
    ServerError,
)
from itemrest.models import AuthConfig, Profile, RequestConfig
from itemrest.output import OutputManager, reset_output, set_output


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_profile(
    base_url: str = "https://api.example.com",
    auth: AuthConfig | None = None,
    headers: dict[str, str] | None = None,
) -> Profile:
    return Profile(
        name="test",
        base_url=base_url,
        auth=auth,
        headers=headers or {},
        request=RequestConfig(timeout=5),
    )


def _mount(client: SyncClient, handler) -> None:
    """Swap the real transport for an httpx.MockTransport after entering."""
    client._client = httpx.Client(
        base_url="https://api.example.com", transport=httpx.MockTransport(handler)
    )


@pytest.fixture(autouse=True)
def _clean_output():
    """Reset the global output manager between tests."""
    set_output(OutputManager(no_color=True, quiet=True))
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Context manager
# ---------------------------------------------------------------------------


class TestContextManager:
    def test_enter_creates_client(self) -> None:
        client = SyncClient(_make_profile())
        assert client._client is None
        with client:
            assert client._client is not None
        assert client._client is None

    def test_satisfies_protocol(self) -> None:
        assert isinstance(SyncClient(_make_profile()), HttpApi)

    def test_request_outside_context(self) -> None:
        with pytest.raises(AssertionError):
            SyncClient(_make_profile()).get("/orders")


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class TestRequests:
    def test_get_decodes_json(self) -> None:
        seen: dict[str, Any] = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["method"] = request.method
            seen["url"] = str(request.url)
            return httpx.Response(200, json=[{"key": {"kt": "order", "pk": 1}}])

        with SyncClient(_make_profile()) as client:
            _mount(client, handler)
            body = client.get("/orders", {"params": {"status": "open", "skip": None}})

        assert seen["method"] == "GET"
        assert seen["url"] == "https://api.example.com/orders?status=open"
        assert body == [{"key": {"kt": "order", "pk": 1}}]

    def test_post_sends_json_body(self) -> None:
        seen: dict[str, Any] = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["body"] = json.loads(request.content)
            seen["content_type"] = request.headers["content-type"]
            return httpx.Response(201, json={"ok": True})

        with SyncClient(_make_profile()) as client:
            _mount(client, handler)
            assert client.post("/orders", {"total": 5}) == {"ok": True}

        assert seen["body"] == {"total": 5}
        assert seen["content_type"] == "application/json"

    def test_put_and_delete(self) -> None:
        methods: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            methods.append(request.method)
            return httpx.Response(204)

        with SyncClient(_make_profile()) as client:
            _mount(client, handler)
            assert client.put("/orders/1", {"total": 1}) is None
            assert client.delete("/orders/1") is None

        assert methods == ["PUT", "DELETE"]

    def test_text_body(self) -> None:
        with SyncClient(_make_profile()) as client:
            _mount(client, lambda request: httpx.Response(200, text="pong"))
            assert client.get("/ping") == "pong"

    def test_profile_and_option_headers(self) -> None:
        seen: dict[str, str] = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen.update(request.headers)
            return httpx.Response(200, json={})

        profile = _make_profile(headers={"X-Tenant": "acme", "X-Trace": "profile"})
        with SyncClient(profile) as client:
            _mount(client, handler)
            client.get("/orders", {"headers": {"X-Trace": "call"}})

        assert seen["accept"] == "application/json"
        assert seen["x-tenant"] == "acme"
        assert seen["x-trace"] == "call"


# ---------------------------------------------------------------------------
# Authentication
# ---------------------------------------------------------------------------


class TestAuth:
    def test_bearer_token(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ITEMREST_TEST_TOKEN", "t0k3n")
        seen: dict[str, str] = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen.update(request.headers)
            return httpx.Response(200, json={})

        profile = _make_profile(auth=AuthConfig(type="bearer", source="env:ITEMREST_TEST_TOKEN"))
        with SyncClient(profile) as client:
            _mount(client, handler)
            client.get("/orders")

        assert seen["authorization"] == "Bearer t0k3n"

    def test_api_key_custom_header(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ITEMREST_TEST_KEY", "k3y")
        seen: dict[str, str] = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen.update(request.headers)
            return httpx.Response(200, json={})

        profile = _make_profile(
            auth=AuthConfig(type="api_key", header="X-Api-Token", source="env:ITEMREST_TEST_KEY")
        )
        with SyncClient(profile) as client:
            _mount(client, handler)
            client.get("/orders")

        assert seen["x-api-token"] == "k3y"

    def test_unauthenticated_request_skips_auth(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ITEMREST_TEST_TOKEN", "t0k3n")
        seen: dict[str, str] = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen.update(request.headers)
            return httpx.Response(200, json={})

        profile = _make_profile(auth=AuthConfig(type="bearer", source="env:ITEMREST_TEST_TOKEN"))
        with SyncClient(profile) as client:
            _mount(client, handler)
            client.get("/public", {"is_authenticated": False})

        assert "authorization" not in seen

    def test_missing_credential(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("ITEMREST_MISSING", raising=False)
        profile = _make_profile(auth=AuthConfig(type="bearer", source="env:ITEMREST_MISSING"))
        with pytest.raises(ConfigError):
            with SyncClient(profile):
                pass


# ---------------------------------------------------------------------------
# Error mapping
# ---------------------------------------------------------------------------


class TestErrorMapping:
    @pytest.mark.parametrize(
        "status, exc_type",
        [
            (401, AuthError),
            (403, AuthError),
            (404, NotFoundError),
            (409, ServerError),
            (500, ServerError),
        ],
    )
    def test_status_mapping(self, status: int, exc_type: type) -> None:
        with SyncClient(_make_profile()) as client:
            _mount(client, lambda request: httpx.Response(status, json={"message": "nope"}))
            with pytest.raises(exc_type, match=f"HTTP {status}: nope"):
                client.get("/orders/1")

    def test_server_error_status_code(self) -> None:
        with SyncClient(_make_profile()) as client:
            _mount(client, lambda request: httpx.Response(502, text="bad gateway"))
            with pytest.raises(ServerError) as exc_info:
                client.get("/orders")
        assert exc_info.value.status_code == 502
        assert "bad gateway" in str(exc_info.value)

    def test_connection_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with SyncClient(_make_profile()) as client:
            _mount(client, handler)
            with pytest.raises(ConnectionError_, match="refused"):
                client.get("/orders")

    def test_timeout(self) -> None:
        attempts: list[int] = []

        def handler(request: httpx.Request) -> httpx.Response:
            attempts.append(1)
            raise httpx.ReadTimeout("slow", request=request)

        with SyncClient(_make_profile()) as client:
            _mount(client, handler)
            with pytest.raises(ConnectionError_):
                client.get("/orders")
        assert len(attempts) == 1
