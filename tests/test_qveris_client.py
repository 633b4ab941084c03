"""Qveris API client tests: auth, request shaping and error normalization."""

import httpx
import pytest

from qveris_mcp.config import DEFAULT_BASE_URL, Settings
from qveris_mcp.errors import ApiError, ConfigurationError
from qveris_mcp.services.qveris_client import QverisClient, create_client_from_settings

from .conftest import TEST_API_KEY, TEST_BASE_URL


class TestConstruction:
    def test_requires_api_key(self):
        with pytest.raises(ValueError, match="Qveris API key is required"):
            QverisClient("")
        with pytest.raises(ValueError, match="Qveris API key is required"):
            QverisClient(None)

    def test_defaults_to_production_base_url(self):
        client = QverisClient("key")
        assert client.base_url == DEFAULT_BASE_URL

    def test_create_client_from_settings_without_key(self):
        settings = Settings(qveris_api_key=None, _env_file=None)
        with pytest.raises(ConfigurationError, match="QVERIS_API_KEY"):
            create_client_from_settings(settings)

    def test_create_client_from_settings_uses_base_url(self):
        settings = Settings(
            qveris_api_key="key",
            qveris_base_url="https://custom.api.com/",
            _env_file=None,
        )
        client = create_client_from_settings(settings)
        assert client.base_url == "https://custom.api.com"


class TestRequests:
    @pytest.mark.asyncio
    async def test_search_posts_body_with_bearer_auth(self, qveris_client, stub):
        stub.respond({"search_id": "search-123", "results": [], "total": 0})

        result = await qveris_client.search_tools({"query": "weather API", "limit": 10})

        request = stub.last_request
        assert request.method == "POST"
        assert str(request.url) == f"{TEST_BASE_URL}/search"
        assert request.headers["Authorization"] == f"Bearer {TEST_API_KEY}"
        assert request.headers["Content-Type"] == "application/json"
        assert stub.last_body == {"query": "weather API", "limit": 10}
        assert result == {"search_id": "search-123", "results": [], "total": 0}

    @pytest.mark.asyncio
    async def test_execute_sends_tool_id_in_query(self, qveris_client, stub):
        stub.respond({"execution_id": "exec-1", "success": True})
        body = {
            "search_id": "search-123",
            "session_id": "session-1",
            "parameters": {"city": "London"},
        }

        await qveris_client.execute_tool("weather-tool", body)

        assert str(stub.last_request.url) == (
            f"{TEST_BASE_URL}/tools/execute?tool_id=weather-tool"
        )
        assert stub.last_body == body

    @pytest.mark.asyncio
    async def test_execute_percent_encodes_reserved_characters(
        self, qveris_client, stub
    ):
        stub.respond({"execution_id": "exec-1", "success": True})
        tool_id = "tool/with/slashes?&=#"

        await qveris_client.execute_tool(tool_id, {"search_id": "s", "parameters": {}})

        url = stub.last_request.url
        assert url.path == "/api/v1/tools/execute"
        assert "tool_id=tool%2Fwith%2Fslashes" in str(url)
        assert url.params["tool_id"] == tool_id

    @pytest.mark.asyncio
    async def test_get_tools_by_ids(self, qveris_client, stub):
        stub.respond({"search_id": "s1", "results": []})

        await qveris_client.get_tools_by_ids({"tool_ids": ["a", "b"]})

        assert str(stub.last_request.url) == f"{TEST_BASE_URL}/tools/by-ids"
        assert stub.last_body == {"tool_ids": ["a", "b"]}

    @pytest.mark.asyncio
    async def test_non_finite_body_is_not_sent(self, qveris_client, stub):
        with pytest.raises(ValueError):
            await qveris_client.search_tools({"query": "q", "x": float("nan")})

        assert stub.requests == []


class TestErrorNormalization:
    @pytest.mark.asyncio
    async def test_message_field_is_used(self, qveris_client, stub):
        stub.respond({"message": "Invalid API key"}, status_code=401)

        with pytest.raises(ApiError) as exc_info:
            await qveris_client.search_tools({"query": "test"})

        assert exc_info.value.status == 401
        assert exc_info.value.message == "Invalid API key"
        assert exc_info.value.details == {"message": "Invalid API key"}

    @pytest.mark.asyncio
    async def test_error_field_is_fallback(self, qveris_client, stub):
        stub.respond({"error": "Quota exceeded"}, status_code=429)

        with pytest.raises(ApiError) as exc_info:
            await qveris_client.search_tools({"query": "test"})

        assert exc_info.value.message == "Quota exceeded"
        assert exc_info.value.details == {"error": "Quota exceeded"}

    @pytest.mark.asyncio
    async def test_status_phrase_when_json_has_no_message(self, qveris_client, stub):
        stub.respond({"code": 17}, status_code=403)

        with pytest.raises(ApiError) as exc_info:
            await qveris_client.search_tools({"query": "test"})

        assert exc_info.value.message == "Forbidden"
        assert exc_info.value.details == {"code": 17}

    @pytest.mark.asyncio
    async def test_non_json_body_uses_status_phrase(self, qveris_client, stub):
        stub.respond(status_code=500, text="<html>oops</html>")

        with pytest.raises(ApiError) as exc_info:
            await qveris_client.search_tools({"query": "test"})

        assert exc_info.value.status == 500
        assert exc_info.value.message == "Internal Server Error"
        assert exc_info.value.details is None

    @pytest.mark.asyncio
    async def test_non_json_body_without_phrase(self, qveris_client, stub):
        stub.respond(status_code=500, text="oops", reason_phrase=b"")

        with pytest.raises(ApiError) as exc_info:
            await qveris_client.search_tools({"query": "test"})

        assert exc_info.value.message == "HTTP 500"

    @pytest.mark.asyncio
    async def test_transport_failure_is_normalized(self, qveris_client, stub):
        stub.fail_with(httpx.ConnectError("connection refused"))

        with pytest.raises(ApiError) as exc_info:
            await qveris_client.search_tools({"query": "test"})

        assert exc_info.value.status == 502
        assert "connection refused" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_timeout_is_normalized(self, qveris_client, stub):
        stub.fail_with(httpx.ReadTimeout("timed out"))

        with pytest.raises(ApiError) as exc_info:
            await qveris_client.execute_tool("t", {"search_id": "s", "parameters": {}})

        assert exc_info.value.status == 504

    @pytest.mark.asyncio
    async def test_invalid_success_body(self, qveris_client, stub):
        stub.respond(status_code=200, text="not json")

        with pytest.raises(ApiError, match="Invalid JSON"):
            await qveris_client.search_tools({"query": "test"})
