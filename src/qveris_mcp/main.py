# FastAPI application entry point
# HTTP variant of the server: REST endpoints plus MCP over HTTP at /mcp

import logging
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi_mcp import FastApiMCP
from pydantic import BaseModel

from . import __version__
from .api import tools
from .config import get_settings
from .services.qveris_client import create_client_from_settings
from .services.router import ToolRouter

logger = logging.getLogger(__name__)


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    message: str


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the Qveris client and session on startup, close it on shutdown."""
    logger.info("Starting Qveris MCP HTTP server v%s...", __version__)

    # Missing QVERIS_API_KEY aborts startup
    client = create_client_from_settings(get_settings())
    default_session_id = str(uuid.uuid4())
    app.state.tool_router = ToolRouter(client, default_session_id)
    logger.info("Session ID: %s", default_session_id)

    try:
        yield
    finally:
        logger.info("Shutting down Qveris MCP HTTP server...")
        await client.aclose()
        del app.state.tool_router
    logger.info("Shutdown complete")


app = FastAPI(
    title="Qveris MCP",
    description="Search and execute Qveris tools over HTTP and MCP",
    version=__version__,
    lifespan=lifespan,
)

app.include_router(tools.router)


@app.get("/", operation_id="root")
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {"message": "Welcome to Qveris MCP"}


@app.get("/health", response_model=HealthResponse, operation_id="health")
async def health() -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(status="healthy", message="Service is running")


mcp_server = FastApiMCP(
    app,
    name="qveris",
    description=(
        "Discover third-party tools with natural language search and "
        "execute them through the Qveris API."
    ),
    exclude_operations=["root", "health"],
)
mcp_server.mount_http()


def run() -> None:
    """Console entry point for ``qveris-mcp-http``."""
    import uvicorn

    settings = get_settings()
    logging.basicConfig(level=settings.log_level.upper())
    uvicorn.run(app, host=settings.host, port=settings.port)
