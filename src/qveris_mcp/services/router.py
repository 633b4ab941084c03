"""Route named tool calls to their adapter and wrap outcomes in an envelope."""

import json
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from ..errors import ApiError, ParamsDecodeError, ToolArgumentError, UnknownToolError
from .discovery import (
    GET_TOOLS_BY_IDS_SCHEMA,
    SEARCH_TOOLS_SCHEMA,
    get_tools_by_ids,
    search_tools,
)
from .execution import EXECUTE_TOOL_SCHEMA, execute_tool
from .qveris_client import QverisClient

logger = logging.getLogger(__name__)

Adapter = Callable[[QverisClient, dict[str, Any], str], Awaitable[dict[str, Any]]]


@dataclass(frozen=True)
class ToolDefinition:
    name: str
    description: str
    input_schema: dict[str, Any]
    adapter: Adapter


@dataclass(frozen=True)
class ToolEnvelope:
    """Single text payload returned for every tool call."""

    text: str
    is_error: bool = False

    @classmethod
    def success(cls, result: Any) -> "ToolEnvelope":
        return cls(text=json.dumps(result, indent=2, ensure_ascii=False))

    @classmethod
    def failure(cls, payload: dict[str, Any]) -> "ToolEnvelope":
        return cls(text=json.dumps(payload, ensure_ascii=False), is_error=True)


TOOL_DEFINITIONS: tuple[ToolDefinition, ...] = (
    ToolDefinition(
        name="search_tools",
        description=(
            "Search for available tools based on natural language queries. "
            "Returns relevant tools that can help accomplish tasks. "
            "Use this to discover tools before executing them."
        ),
        input_schema=SEARCH_TOOLS_SCHEMA,
        adapter=search_tools,
    ),
    ToolDefinition(
        name="execute_tool",
        description=(
            "Execute a specific remote tool with provided parameters. "
            "The tool_id and search_id must come from a previous search_tools call. "
            "Pass parameters to the tool through params_to_tool as a JSON string."
        ),
        input_schema=EXECUTE_TOOL_SCHEMA,
        adapter=execute_tool,
    ),
    ToolDefinition(
        name="get_tools_by_ids",
        description=(
            "Get descriptions of tools by their tool_ids. "
            "Useful for refreshing details of tools returned by an earlier "
            "search_tools call."
        ),
        input_schema=GET_TOOLS_BY_IDS_SCHEMA,
        adapter=get_tools_by_ids,
    ),
)


class ToolRouter:
    """Dispatch tool calls for one server process.

    ``default_session_id`` is generated once at startup and used for every
    call that does not supply its own ``session_id``.
    """

    def __init__(self, client: QverisClient, default_session_id: str) -> None:
        self.client = client
        self.default_session_id = default_session_id
        self._tools = {tool.name: tool for tool in TOOL_DEFINITIONS}

    @property
    def tool_names(self) -> list[str]:
        return list(self._tools)

    def list_tools(self) -> list[ToolDefinition]:
        return list(self._tools.values())

    async def dispatch(
        self, name: str, arguments: dict[str, Any] | None
    ) -> dict[str, Any]:
        """Run the named operation, raising on any failure."""
        tool = self._tools.get(name)
        if tool is None:
            raise UnknownToolError(name, self.tool_names)
        return await tool.adapter(self.client, arguments or {}, self.default_session_id)

    async def call_tool(
        self, name: str, arguments: dict[str, Any] | None
    ) -> ToolEnvelope:
        """Run the named operation and map its outcome into an envelope."""
        try:
            result = await self.dispatch(name, arguments)
        except ApiError as e:
            return ToolEnvelope.failure(e.to_payload())
        except (ToolArgumentError, UnknownToolError) as e:
            logger.info("Rejected %s call: %s", name, e)
            return ToolEnvelope.failure(e.to_payload())
        except ParamsDecodeError as e:
            logger.info("Rejected %s call: %s", name, e)
            return ToolEnvelope.failure({"error": str(e)})
        except Exception as e:
            logger.exception("Tool %s failed", name)
            return ToolEnvelope.failure({"error": str(e) or "Unknown error occurred"})
        return ToolEnvelope.success(result)
