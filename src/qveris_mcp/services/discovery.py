# Tool discovery adapters
# Normalize search_tools / get_tools_by_ids arguments and forward them to Qveris

import logging
from typing import Any

from ..errors import ToolArgumentError
from ..models.tool import DEFAULT_SEARCH_LIMIT
from .qveris_client import QverisClient

logger = logging.getLogger(__name__)

SESSION_ID_PROPERTY = {
    "type": "string",
    "description": (
        "Session identifier for tracking user sessions. "
        "If not provided, an auto-generated session ID will be used."
    ),
}

SEARCH_TOOLS_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "query": {
            "type": "string",
            "description": (
                "The search query describing the general capability of the tool. "
                "Describe what you want to accomplish, not specific params you "
                "want to pass to the tool later. "
                'Example: "weather forecast API", "send email", "stock prices"'
            ),
        },
        "limit": {
            "type": "number",
            "description": "Maximum number of results to return (1-100)",
            "default": DEFAULT_SEARCH_LIMIT,
            "minimum": 1,
            "maximum": 100,
        },
        "session_id": SESSION_ID_PROPERTY,
    },
    "required": ["query"],
}

GET_TOOLS_BY_IDS_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "tool_ids": {
            "type": "array",
            "items": {"type": "string"},
            "description": (
                "Array of tool IDs to retrieve information for. "
                "These IDs should come from previous search_tools results."
            ),
            "minItems": 1,
        },
        "search_id": {
            "type": "string",
            "description": (
                "The search_id from the search_tools response that returned the "
                "tool(s). Optional but recommended for linking to the original search."
            ),
        },
        "session_id": SESSION_ID_PROPERTY,
    },
    "required": ["tool_ids"],
}


def check_string_fields(arguments: dict[str, Any], fields: tuple[str, ...]) -> None:
    """Reject any of ``fields`` that is present but not a string."""
    invalid = [
        field
        for field in fields
        if arguments.get(field) is not None and not isinstance(arguments[field], str)
    ]
    if invalid:
        raise ToolArgumentError(
            f"Parameters must be strings: {', '.join(invalid)}",
            hint="Pass identifiers and JSON payloads as strings",
        )


async def search_tools(
    client: QverisClient, arguments: dict[str, Any], default_session_id: str
) -> dict[str, Any]:
    """Search Qveris for tools matching a capability description."""
    query = arguments.get("query")
    if not isinstance(query, str) or not query.strip():
        raise ToolArgumentError(
            "Missing required parameter: query",
            hint=(
                "Provide a natural language query describing the tool "
                "capability you need"
            ),
            missing=["query"],
        )
    check_string_fields(arguments, ("session_id",))

    limit = arguments.get("limit")
    if limit is None:
        limit = DEFAULT_SEARCH_LIMIT
    elif isinstance(limit, float) and limit.is_integer():
        limit = int(limit)
    if isinstance(limit, bool) or not isinstance(limit, int) or not 1 <= limit <= 100:
        raise ToolArgumentError(
            f"Invalid limit: {arguments.get('limit')!r}",
            hint="limit must be an integer between 1 and 100",
        )

    request = {
        "query": query,
        "limit": limit,
        "session_id": arguments.get("session_id") or default_session_id,
    }
    logger.info("Searching tools: query=%r limit=%d", query, limit)
    return await client.search_tools(request)


async def get_tools_by_ids(
    client: QverisClient, arguments: dict[str, Any], default_session_id: str
) -> dict[str, Any]:
    """Fetch descriptors for tool ids returned by an earlier search."""
    tool_ids = arguments.get("tool_ids")
    if (
        not isinstance(tool_ids, list)
        or not tool_ids
        or not all(isinstance(tool_id, str) and tool_id for tool_id in tool_ids)
    ):
        raise ToolArgumentError(
            "Missing required parameter: tool_ids",
            hint=(
                "tool_ids must be a non-empty list of tool IDs from a previous "
                "search_tools call"
            ),
            missing=["tool_ids"],
        )
    check_string_fields(arguments, ("search_id", "session_id"))

    request: dict[str, Any] = {"tool_ids": tool_ids}
    if arguments.get("search_id"):
        request["search_id"] = arguments["search_id"]
    request["session_id"] = arguments.get("session_id") or default_session_id

    logger.info("Looking up %d tool(s) by id", len(tool_ids))
    return await client.get_tools_by_ids(request)
