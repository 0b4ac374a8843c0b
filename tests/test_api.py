import json
import sys
from pathlib import Path

import httpx
import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from bikinota.api import ApiClient, ApiError, client_from_env  # noqa: E402


def _client(handler, token: str | None = "secret") -> ApiClient:
    return ApiClient("http://backend.test/", token=token, transport=httpx.MockTransport(handler))


def test_request_sends_json_and_bearer_token() -> None:
    seen: dict = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["auth"] = request.headers.get("Authorization")
        seen["content_type"] = request.headers.get("Content-Type")
        seen["url"] = str(request.url)
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"success": True, "data": {"id": "1"}, "message": "ok"})

    response = _client(handler).post("/api/invoice", {"customer_name": "Acme"})

    assert seen == {
        "auth": "Bearer secret",
        "content_type": "application/json",
        "url": "http://backend.test/api/invoice",
        "body": {"customer_name": "Acme"},
    }
    assert response.success is True
    assert response.data == {"id": "1"}
    assert response.message == "ok"


def test_no_authorization_header_without_token() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert "Authorization" not in request.headers
        return httpx.Response(200, json={"success": True, "data": []})

    assert _client(handler, token=None).get("/api/invoice").data == []


def test_error_status_raises_with_server_message() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(422, json={"success": False, "message": "Customer email is invalid"})

    with pytest.raises(ApiError) as excinfo:
        _client(handler).put("/api/invoice/1", {})

    assert excinfo.value.status == 422
    assert excinfo.value.message == "Customer email is invalid"
    assert excinfo.value.response == {"success": False, "message": "Customer email is invalid"}


def test_error_without_message_uses_generic_text() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, json={"success": False})

    with pytest.raises(ApiError) as excinfo:
        _client(handler).get("/api/plan")

    assert excinfo.value.message == "An error occurred"
    assert excinfo.value.status == 500


def test_invalid_json_raises() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text="<html>Bad gateway</html>")

    with pytest.raises(ApiError) as excinfo:
        _client(handler).get("/api/plan")

    assert excinfo.value.message == "Invalid response from server"
    assert excinfo.value.status == 502


def test_transport_error_raises_api_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(ApiError) as excinfo:
        _client(handler).get("/api/company")

    assert excinfo.value.status is None
    assert "Could not reach the server" in excinfo.value.message


def test_empty_body_counts_as_success() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(204)

    response = _client(handler).delete("/api/invoice/1")
    assert response.success is True
    assert response.data is None


def test_client_from_env(monkeypatch) -> None:
    monkeypatch.setenv("BIKINOTA_API_URL", "https://api.bikinota.test/")
    monkeypatch.setenv("BIKINOTA_TOKEN", "tok")
    monkeypatch.setenv("BIKINOTA_TIMEOUT", "nope")

    client = client_from_env()
    try:
        assert client.base_url == "https://api.bikinota.test"
        assert client.token == "tok"
    finally:
        client.close()
