# API request models
# Pydantic models for HTTP endpoint validation; mirror the MCP tool schemas

from pydantic import AliasChoices, BaseModel, Field, field_validator

from ..models.tool import DEFAULT_SEARCH_LIMIT, UNLIMITED_DATA_SIZE


class SearchToolsRequest(BaseModel):
    """Request model for the search endpoint."""

    query: str = Field(
        ...,
        min_length=1,
        description="Natural language description of the capability you need",
    )
    limit: int = Field(
        DEFAULT_SEARCH_LIMIT, ge=1, le=100, description="Maximum tools to return"
    )
    session_id: str | None = Field(None, description="Session identifier")

    @field_validator("query")
    @classmethod
    def validate_query(cls, v: str) -> str:
        """Ensure query is not empty."""
        if not v.strip():
            raise ValueError("Query cannot be empty")
        return v


class ExecuteToolRequest(BaseModel):
    """Request model for the execute endpoint."""

    tool_id: str = Field(..., min_length=1, description="Tool ID from search results")
    search_id: str = Field(
        ..., min_length=1, description="search_id of the search that returned the tool"
    )
    params_to_tool: str = Field(
        ..., min_length=1, description="JSON object of tool parameters, as a string"
    )
    session_id: str | None = Field(None, description="Session identifier")
    max_response_size: int | None = Field(
        None,
        ge=UNLIMITED_DATA_SIZE,
        validation_alias=AliasChoices("max_response_size", "max_data_size"),
        description="Maximum response bytes before truncation; -1 for no limit",
    )


class GetToolsByIdsRequest(BaseModel):
    """Request model for the lookup endpoint."""

    tool_ids: list[str] = Field(..., min_length=1, description="Tool IDs to describe")
    search_id: str | None = Field(
        None, description="search_id of the search that returned the tools"
    )
    session_id: str | None = Field(None, description="Session identifier")
