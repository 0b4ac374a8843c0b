from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any

import httpx

from .env import api_base_url, api_token, request_timeout


logger = logging.getLogger(__name__)


class ApiError(Exception):
    def __init__(self, message: str, status: int | None = None, response: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.status = status
        self.response = response


@dataclass
class ApiResponse:
    success: bool
    message: str | None = None
    data: Any = None

    @classmethod
    def from_body(cls, body: Any) -> "ApiResponse":
        if not isinstance(body, dict):
            return cls(success=False, message=None, data=body)
        return cls(
            success=bool(body.get("success")),
            message=body.get("message"),
            data=body.get("data"),
        )


class ApiClient:
    """Thin JSON wrapper around the backend's REST endpoints."""

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.token = token
        self._client = httpx.Client(base_url=self.base_url, timeout=timeout, transport=transport)

    def close(self) -> None:
        self._client.close()

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def request(self, method: str, endpoint: str, body: Any = None) -> ApiResponse:
        content = None
        if body is not None:
            content = json.dumps(body, ensure_ascii=False).encode("utf-8")

        try:
            resp = self._client.request(method, endpoint, content=content, headers=self._headers())
        except httpx.HTTPError as exc:
            logger.warning("api.transport_failed method=%s endpoint=%s error=%s", method, endpoint, exc)
            raise ApiError(f"Could not reach the server: {exc}") from exc

        try:
            # 204 and friends carry no body
            data = resp.json() if resp.content else {"success": resp.is_success}
        except ValueError as exc:
            logger.warning("api.invalid_json method=%s endpoint=%s status=%s", method, endpoint, resp.status_code)
            raise ApiError("Invalid response from server", resp.status_code, resp.text) from exc

        if not resp.is_success:
            message = data.get("message") if isinstance(data, dict) else None
            logger.info("api.error method=%s endpoint=%s status=%s", method, endpoint, resp.status_code)
            raise ApiError(message or "An error occurred", resp.status_code, data)

        logger.debug("api.ok method=%s endpoint=%s status=%s", method, endpoint, resp.status_code)
        return ApiResponse.from_body(data)

    def get(self, endpoint: str) -> ApiResponse:
        return self.request("GET", endpoint)

    def post(self, endpoint: str, body: Any = None) -> ApiResponse:
        return self.request("POST", endpoint, body)

    def put(self, endpoint: str, body: Any = None) -> ApiResponse:
        return self.request("PUT", endpoint, body)

    def patch(self, endpoint: str, body: Any = None) -> ApiResponse:
        return self.request("PATCH", endpoint, body)

    def delete(self, endpoint: str) -> ApiResponse:
        return self.request("DELETE", endpoint)


def client_from_env() -> ApiClient:
    return ApiClient(api_base_url(), token=api_token(), timeout=request_timeout())
