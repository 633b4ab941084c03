# Tool API - HTTP surface for search, execution and lookup
# Each endpoint forwards to the same router the stdio server uses

from typing import Any, NoReturn

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel

from ..errors import ApiError, ParamsDecodeError, ToolArgumentError
from ..models.tool import ExecuteResponse, SearchResponse
from ..services.router import ToolRouter
from .models import ExecuteToolRequest, GetToolsByIdsRequest, SearchToolsRequest

router = APIRouter(prefix="/api/tools", tags=["tools"])


async def get_tool_router(request: Request) -> ToolRouter:
    """Get the tool router from app state (initialized in lifespan)."""
    tool_router = getattr(request.app.state, "tool_router", None)
    if tool_router is None:
        raise HTTPException(status_code=503, detail="Qveris client not initialized")
    return tool_router


def _raise_http_error(exc: Exception) -> NoReturn:
    if isinstance(exc, ApiError):
        status_code = exc.status if exc.status >= 400 else 502
        raise HTTPException(status_code=status_code, detail=exc.to_payload()) from exc
    if isinstance(exc, ToolArgumentError):
        raise HTTPException(status_code=400, detail=exc.to_payload()) from exc
    if isinstance(exc, ParamsDecodeError):
        raise HTTPException(status_code=400, detail={"error": str(exc)}) from exc
    raise HTTPException(status_code=500, detail={"error": str(exc)}) from exc


async def _dispatch(
    tool_router: ToolRouter, name: str, body: BaseModel
) -> dict[str, Any]:
    try:
        return await tool_router.dispatch(name, body.model_dump(exclude_none=True))
    except Exception as e:
        _raise_http_error(e)


@router.post(
    "/search",
    operation_id="search_tools",
    response_model=None,
    responses={200: {"model": SearchResponse}},
)
async def search_tools(
    request: SearchToolsRequest,
    tool_router: ToolRouter = Depends(get_tool_router),  # noqa: B008
) -> dict[str, Any]:
    """Search for tools based on a natural language capability description.

    Use this to discover tools before executing them. Every returned tool_id
    must be executed together with the returned search_id.
    """
    return await _dispatch(tool_router, "search_tools", request)


@router.post(
    "/execute",
    operation_id="execute_tool",
    response_model=None,
    responses={200: {"model": ExecuteResponse}},
)
async def execute_tool(
    request: ExecuteToolRequest,
    tool_router: ToolRouter = Depends(get_tool_router),  # noqa: B008
) -> dict[str, Any]:
    """Execute a tool found by search_tools.

    params_to_tool is a JSON object encoded as a string.
    """
    return await _dispatch(tool_router, "execute_tool", request)


@router.post(
    "/by-ids",
    operation_id="get_tools_by_ids",
    response_model=None,
    responses={200: {"model": SearchResponse}},
)
async def get_tools_by_ids(
    request: GetToolsByIdsRequest,
    tool_router: ToolRouter = Depends(get_tool_router),  # noqa: B008
) -> dict[str, Any]:
    """Get tool descriptions for tool_ids from earlier search results."""
    return await _dispatch(tool_router, "get_tools_by_ids", request)
