# stdio MCP server entry point
# Exposes the Qveris tools over the Model Context Protocol on stdin/stdout

import asyncio
import logging
import sys
import uuid
from typing import Any

import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from . import __version__
from .config import Settings, get_settings
from .errors import ConfigurationError
from .services.qveris_client import create_client_from_settings
from .services.router import ToolEnvelope, ToolRouter

SERVER_NAME = "qveris"

logger = logging.getLogger(__name__)


def to_call_tool_result(envelope: ToolEnvelope) -> types.CallToolResult:
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=envelope.text)],
        isError=envelope.is_error,
    )


def create_server(router: ToolRouter) -> Server:
    """Build an MCP server whose tools are served by ``router``."""
    server: Server = Server(SERVER_NAME, version=__version__)

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        return [
            types.Tool(
                name=tool.name,
                description=tool.description,
                inputSchema=tool.input_schema,
            )
            for tool in router.list_tools()
        ]

    # The router reports missing arguments itself, listing all of them
    @server.call_tool(validate_input=False)
    async def call_tool(name: str, arguments: dict[str, Any]) -> types.CallToolResult:
        envelope = await router.call_tool(name, arguments)
        return to_call_tool_result(envelope)

    return server


async def serve(settings: Settings) -> None:
    client = create_client_from_settings(settings)
    default_session_id = str(uuid.uuid4())
    router = ToolRouter(client, default_session_id)
    server = create_server(router)

    try:
        async with stdio_server() as (read_stream, write_stream):
            logger.info("Qveris MCP Server v%s started", __version__)
            logger.info("Session ID: %s", default_session_id)
            await server.run(
                read_stream, write_stream, server.create_initialization_options()
            )
    finally:
        await client.aclose()


def configure_logging(level: str) -> None:
    # stdout is reserved for protocol frames
    logging.basicConfig(
        level=level.upper(),
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def run() -> None:
    """Console entry point for ``qveris-mcp``."""
    settings = get_settings()
    configure_logging(settings.log_level)
    try:
        asyncio.run(serve(settings))
    except ConfigurationError as e:
        logger.error("%s", e)
        sys.exit(1)
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    run()
