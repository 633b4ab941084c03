"""Shared fixtures: Qveris clients backed by an in-process HTTP stub."""

import json
from collections.abc import Callable
from typing import Any

import httpx
import pytest

from qveris_mcp.services.qveris_client import QverisClient

TEST_API_KEY = "test-api-key"
TEST_BASE_URL = "https://qveris.test/api/v1"
DEFAULT_SESSION = "default-session"


class QverisStub:
    """Records outgoing requests and answers with a canned response."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.status_code = 200
        self.json_body: Any = {}
        self.text_body: str | None = None
        self.reason_phrase: bytes | None = None
        self.error: Exception | None = None

    def respond(
        self,
        json_body: Any = None,
        status_code: int = 200,
        text: str | None = None,
        reason_phrase: bytes | None = None,
    ) -> None:
        self.json_body = json_body
        self.status_code = status_code
        self.text_body = text
        self.reason_phrase = reason_phrase

    def fail_with(self, error: Exception) -> None:
        self.error = error

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error

        extensions = {}
        if self.reason_phrase is not None:
            extensions["reason_phrase"] = self.reason_phrase
        if self.text_body is not None:
            return httpx.Response(
                self.status_code, text=self.text_body, extensions=extensions
            )
        return httpx.Response(
            self.status_code, json=self.json_body, extensions=extensions
        )

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]

    @property
    def last_body(self) -> Any:
        return json.loads(self.last_request.content)


@pytest.fixture
def stub() -> QverisStub:
    return QverisStub()


@pytest.fixture
def make_client(stub: QverisStub) -> Callable[..., QverisClient]:
    def _make(api_key: str = TEST_API_KEY, base_url: str = TEST_BASE_URL) -> QverisClient:
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(stub))
        return QverisClient(api_key, base_url=base_url, http_client=http_client)

    return _make


@pytest.fixture
def qveris_client(make_client: Callable[..., QverisClient]) -> QverisClient:
    return make_client()


@pytest.fixture
def search_response() -> dict[str, Any]:
    return {
        "search_id": "s1",
        "results": [
            {
                "tool_id": "w1",
                "name": "Weather",
                "description": "Current weather for a city",
                "region": "global",
                "params": [
                    {
                        "name": "city",
                        "type": "string",
                        "required": True,
                        "description": "City name",
                    }
                ],
            }
        ],
        "total": 1,
    }


@pytest.fixture
def execute_response() -> dict[str, Any]:
    return {
        "execution_id": "exec-1",
        "tool_id": "w1",
        "parameters": {"city": "Tokyo"},
        "success": True,
        "result": {"data": {"temperature": 25, "humidity": 60}},
        "execution_time": 0.42,
        "created_at": "2025-01-15T10:00:00Z",
    }
