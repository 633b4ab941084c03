"""execute_tool adapter: decode params_to_tool and forward execution to Qveris."""

import json
import logging
from typing import Any

from ..errors import ParamsDecodeError, ToolArgumentError
from ..models.tool import (
    DEFAULT_MAX_DATA_SIZE,
    UNLIMITED_DATA_SIZE,
    ExecuteResultTruncated,
    parse_execute_result,
)
from .discovery import SESSION_ID_PROPERTY, check_string_fields
from .qveris_client import QverisClient

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("tool_id", "search_id", "params_to_tool")

# Canonical argument name first; the alias is accepted for older clients.
SIZE_LIMIT_FIELD = "max_response_size"
SIZE_LIMIT_ALIAS = "max_data_size"

EXECUTE_TOOL_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "tool_id": {
            "type": "string",
            "description": (
                "The ID of the remote tool to execute. "
                "Must come from a previous search_tools call."
            ),
        },
        "search_id": {
            "type": "string",
            "description": (
                "The search_id from the search_tools response that returned this "
                "tool. Required for linking execution to the original search."
            ),
        },
        "params_to_tool": {
            "type": "string",
            "description": (
                "A JSON stringified dictionary of parameters to pass to the remote "
                "tool. Keys are param names and values can be of any type. "
                'Example: \'{"city": "London", "units": "metric"}\''
            ),
        },
        "session_id": SESSION_ID_PROPERTY,
        SIZE_LIMIT_FIELD: {
            "type": "number",
            "description": (
                "Maximum size of response data in bytes. If the tool generates "
                "data longer than this, it will be truncated and a download URL "
                f"provided. Use {UNLIMITED_DATA_SIZE} for no limit. "
                f"Default is {DEFAULT_MAX_DATA_SIZE} (20KB). "
                f"'{SIZE_LIMIT_ALIAS}' is accepted as an alias."
            ),
            "default": DEFAULT_MAX_DATA_SIZE,
        },
    },
    "required": list(REQUIRED_FIELDS),
}


def _reject_constant(constant: str) -> Any:
    # NaN and Infinity are accepted by json.loads but are not JSON
    raise ValueError(f"invalid constant {constant}")


def decode_params(params_to_tool: str) -> dict[str, Any]:
    """Decode the JSON object carried in ``params_to_tool``."""
    try:
        parameters = json.loads(params_to_tool, parse_constant=_reject_constant)
    except (TypeError, ValueError) as exc:
        raise ParamsDecodeError(str(exc), str(params_to_tool)) from exc

    if not isinstance(parameters, dict):
        raise ParamsDecodeError("expected a JSON object", params_to_tool)
    return parameters


def resolve_size_limit(arguments: dict[str, Any]) -> int | None:
    """Return the byte cap to send, or None to let Qveris apply its default."""
    value = arguments.get(SIZE_LIMIT_FIELD)
    if value is None:
        value = arguments.get(SIZE_LIMIT_ALIAS)
    if value is None:
        return None

    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, bool) or not isinstance(value, int) or value < UNLIMITED_DATA_SIZE:
        raise ToolArgumentError(
            f"Invalid {SIZE_LIMIT_FIELD}: {value!r}",
            hint=f"Use a byte count, or {UNLIMITED_DATA_SIZE} for no limit",
        )
    return value


async def execute_tool(
    client: QverisClient, arguments: dict[str, Any], default_session_id: str
) -> dict[str, Any]:
    """Execute a discovered tool with caller-supplied parameters."""
    missing = [field for field in REQUIRED_FIELDS if not arguments.get(field)]
    if missing:
        raise ToolArgumentError(
            f"Missing required parameters: {', '.join(missing)}",
            hint="tool_id and search_id must come from a previous search_tools call",
            missing=missing,
        )
    check_string_fields(arguments, REQUIRED_FIELDS + ("session_id",))

    tool_id = arguments["tool_id"]
    parameters = decode_params(arguments["params_to_tool"])

    request: dict[str, Any] = {
        "search_id": arguments["search_id"],
        "session_id": arguments.get("session_id") or default_session_id,
        "parameters": parameters,
    }
    max_data_size = resolve_size_limit(arguments)
    if max_data_size is not None:
        request["max_data_size"] = max_data_size

    logger.info("Executing tool %s (search %s)", tool_id, request["search_id"])
    response = await client.execute_tool(tool_id, request)
    _log_outcome(tool_id, response)
    return response


def _log_outcome(tool_id: str, response: Any) -> None:
    if not isinstance(response, dict):
        return
    if response.get("success") is False:
        logger.warning(
            "Tool %s failed: %s", tool_id, response.get("error_message") or "no message"
        )
        return

    result = parse_execute_result(response.get("result"))
    if isinstance(result, ExecuteResultTruncated):
        logger.info(
            "Tool %s result truncated; full content at %s",
            tool_id,
            result.full_content_file_url,
        )
