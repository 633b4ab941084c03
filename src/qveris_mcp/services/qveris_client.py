"""HTTP client for the Qveris REST API."""

import json
import logging
from typing import Any
from urllib.parse import quote

import httpx

from ..config import DEFAULT_BASE_URL, Settings
from ..errors import ApiError, ConfigurationError

logger = logging.getLogger(__name__)


class QverisClient:
    """Authenticated wrapper around the Qveris search/execute endpoints.

    Each public method performs exactly one HTTP request and either returns
    the decoded JSON body unchanged or raises ``ApiError``.
    """

    def __init__(
        self,
        api_key: str | None,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 60.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        if not api_key:
            raise ValueError("Qveris API key is required")
        self._api_key = api_key
        self.base_url = base_url.rstrip("/")
        self._owns_http_client = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=timeout)

    async def __aenter__(self) -> "QverisClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:  # type: ignore[no-untyped-def]
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_http_client:
            await self._http.aclose()

    async def search_tools(self, request: dict[str, Any]) -> dict[str, Any]:
        """Search for tools matching a natural language capability query."""
        return await self._request("POST", "/search", request)

    async def execute_tool(
        self, tool_id: str, request: dict[str, Any]
    ) -> dict[str, Any]:
        """Execute a tool previously returned by ``search_tools``.

        ``tool_id`` may contain reserved characters such as ``/``; it is
        percent-encoded into the query string.
        """
        endpoint = f"/tools/execute?tool_id={quote(tool_id, safe='')}"
        return await self._request("POST", endpoint, request)

    async def get_tools_by_ids(self, request: dict[str, Any]) -> dict[str, Any]:
        """Fetch descriptors for known tool ids."""
        return await self._request("POST", "/tools/by-ids", request)

    async def _request(
        self, method: str, endpoint: str, body: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        url = f"{self.base_url}{endpoint}"
        headers = {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }
        content = json.dumps(body, allow_nan=False) if body is not None else None

        logger.debug("%s %s", method, url)
        try:
            response = await self._http.request(
                method, url, headers=headers, content=content
            )
        except httpx.TimeoutException as exc:
            raise ApiError(504, "Request to Qveris API timed out") from exc
        except httpx.HTTPError as exc:
            raise ApiError(502, f"Request to Qveris API failed: {exc}") from exc

        if not response.is_success:
            raise self._to_api_error(response)

        try:
            return response.json()
        except ValueError as exc:
            raise ApiError(
                response.status_code, "Invalid JSON in Qveris API response"
            ) from exc

    def _to_api_error(self, response: httpx.Response) -> ApiError:
        status_text = response.reason_phrase
        try:
            error_body = response.json()
        except ValueError:
            message = status_text or f"HTTP {response.status_code}"
            logger.warning("Qveris API returned %d: %s", response.status_code, message)
            return ApiError(response.status_code, message)

        message = None
        if isinstance(error_body, dict):
            message = error_body.get("message") or error_body.get("error")
        if not message:
            message = status_text or f"HTTP {response.status_code}"

        logger.warning("Qveris API returned %d: %s", response.status_code, message)
        return ApiError(response.status_code, str(message), error_body)


def create_client_from_settings(settings: Settings) -> QverisClient:
    """Build a client from settings, failing fast when no key is configured."""
    if not settings.has_api_key:
        raise ConfigurationError(
            "QVERIS_API_KEY environment variable is required.\n"
            "Please set it to your Qveris API token."
        )
    return QverisClient(
        settings.qveris_api_key,
        base_url=settings.qveris_base_url,
        timeout=settings.request_timeout,
    )
